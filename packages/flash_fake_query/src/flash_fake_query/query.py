from __future__ import annotations

import asyncio
import logging
from typing import Any

from sqlalchemy import select

from .builder import FakeBuilder
from .config import FakeQuerySettings, fake_query_settings
from .exceptions import FinalizedAttributeError
from .guard import FinalizationGuard, FinalizationState
from .result import ResultController
from .stub import CallStub, StatementConversion

logger = logging.getLogger(__name__)


class FakeQuery:
    """
    A wrapper around a fake, awaitable query builder for unit tests.

    The fake builder lives on the ``builder`` attribute. Inject it into the
    code under test by patching whatever factory that code uses to obtain a
    real builder, then assert on the stubs it recorded.

    Every attribute looked up on the builder becomes a ``CallStub`` that
    records its calls and returns the builder, since builder methods are
    chainable. Awaiting the builder executes the query: by default the
    result never settles, as with a stub that was never told what to return.
    Use ``resolves()`` or ``rejects()`` to configure the outcome.

    Once executed the fake is frozen. Calling any builder method, creating a
    new stub or changing the outcome raises ``AlreadyFinalizedError``, so
    assertions always describe the query as it was when it ran.

    ``builder.to_statement()`` returns the ``statement`` placeholder and
    freezes the fake the same way. Use it when testing builders that are
    nested inside other queries as subqueries.

    Notes:
        - The placeholder is an empty SQLAlchemy ``Select``; compare it by
          identity, it is not meant to be compiled.
        - Independent FakeQuery instances share no state.

    Examples:
        >>> fake = FakeQuery().resolves([article])
        >>> with patch.object(Article, "query", return_value=fake.builder):
        ...     result = await list_recent_articles()
        >>> assert result == [article]
        >>> assert fake.stub_names == ["where", "order_by"]
        >>> fake.stubs["order_by"].assert_called_once_with("-id")
    """

    def __init__(self, settings: FakeQuerySettings | None = None) -> None:
        self.settings: FakeQuerySettings = (
            settings if settings is not None else fake_query_settings
        )
        self.stubs: dict[str, CallStub] = {}
        self.statement: Any = select()
        self._guard = FinalizationGuard()
        self._result = ResultController(self._guard)
        self._conversion = StatementConversion(self)
        self.builder: Any = FakeBuilder(self)

    def __repr__(self) -> str:
        return f"<FakeQuery state={self.state.value} stubs={self.stub_names}>"

    @property
    def stub_names(self) -> list[str]:
        """
        Names of all stubs, in the order they were created.

        This reflects call order only as long as no method is called more than
        once. Prefer asserting on ``stubs`` when order doesn't matter.
        """
        return list(self.stubs)

    @property
    def state(self) -> FinalizationState:
        return self._guard.state

    @property
    def executed(self) -> bool:
        return self._guard.state is FinalizationState.EXECUTED

    @property
    def converted(self) -> bool:
        return self._guard.state is FinalizationState.CONVERTED

    @property
    def promise(self) -> asyncio.Future[Any] | None:
        """The shared result future, or None if the query was never executed."""
        return self._result.promise

    def resolves(self, value: Any = None) -> FakeQuery:
        """
        Configure the query to resolve with the provided value when executed.

        This accepts any value, regardless of the calls made on the builder.
        Pick one that makes sense for the query under test: a DELETE or UPDATE
        would usually resolve with a row count, for example.

        Args:
            value: The result of awaiting the builder.

        Returns:
            The instance, for chaining.

        Raises:
            AlreadyFinalizedError: If invoked after execution or conversion.
        """
        self._result.resolves(value)
        return self

    def rejects(self, reason: Exception) -> FakeQuery:
        """
        Configure the query to raise the provided exception when executed.

        Args:
            reason: The exception instance to raise, unchanged, from ``await``.

        Returns:
            The instance, for chaining.

        Raises:
            AlreadyFinalizedError: If invoked after execution or conversion.
            TypeError: If ``reason`` is not an exception instance.
        """
        self._result.rejects(reason)
        return self

    def _execute(self) -> asyncio.Future[Any]:
        return self._result.materialize()

    def _get_stub(self, name: str) -> CallStub:
        """Return the stub for ``name``, creating it if the query is still open."""
        stub = self.stubs.get(name)
        if stub is None:
            # An AttributeError subclass, so hasattr() and getattr() defaults work.
            self._guard.ensure_open(FinalizedAttributeError)
            stub = self.stubs[name] = CallStub(name, self)
            logger.debug("Created fake builder stub %r", name)
        return stub

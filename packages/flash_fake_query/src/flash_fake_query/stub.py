from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from unittest.mock import Mock

from .exceptions import ReceiverMismatchError

if TYPE_CHECKING:
    from .builder import FakeBuilder
    from .query import FakeQuery

logger = logging.getLogger(__name__)

# Recording and assertion API forwarded from the backing Mock.
MOCK_API = frozenset(
    {
        "called",
        "call_count",
        "call_args",
        "call_args_list",
        "mock_calls",
        "assert_called",
        "assert_not_called",
        "assert_called_once",
        "assert_called_with",
        "assert_called_once_with",
        "assert_any_call",
        "assert_has_calls",
    }
)


@dataclass
class StubCall:
    """
    A single recorded invocation of a builder method.

    Attributes:
        args: Positional arguments, exactly as passed.
        kwargs: Keyword arguments, exactly as passed.
        receiver: The object the method was invoked through.
    """

    args: tuple[Any, ...]
    kwargs: dict[str, Any] = field(default_factory=dict)
    receiver: Any = None


class CallStub:
    """
    Call-tracking stand-in for one method name on the fake builder.

    A stub is created the first time its name is looked up on the builder and
    is reused for every later lookup. Calling it records the arguments and
    returns the builder, so any chain of builder methods can be replayed
    against the fake.

    Calls are recorded on a ``unittest.mock.Mock`` named after the method,
    whose recording and assertion API is available on the stub itself. Only
    calls that pass the finalization and receiver checks are recorded.

        >>> fake.stubs["where"].assert_called_once_with("id", ">", 42)
        >>> fake.stubs["where"].assert_called_on(fake.builder)
    """

    def __init__(self, name: str, query: FakeQuery) -> None:
        self.name = name
        self._query = query
        self.mock = Mock(name=name, return_value=None)
        self.receivers: list[Any] = []

    def __repr__(self) -> str:
        return f"<CallStub {self.name!r} calls={self.mock.call_count}>"

    def __getattr__(self, name: str) -> Any:
        if name in MOCK_API:
            return getattr(self.mock, name)
        raise AttributeError(name)

    def __call__(self, *args: Any, **kwargs: Any) -> FakeBuilder:
        return self.call_on(self._query.builder, *args, **kwargs)

    def call_on(self, receiver: Any, *args: Any, **kwargs: Any) -> FakeBuilder:
        """
        Invoke the stub as if it had been looked up on ``receiver``.

        Raises:
            AlreadyFinalizedError: If the fake query was executed or converted.
            ReceiverMismatchError: If ``receiver`` is not the fake builder.
        """
        self._query._guard.ensure_open()

        builder = self._query.builder
        if receiver is not builder:
            msg = f"'{self.name}' called with a different object as self"
            raise ReceiverMismatchError(msg)

        self.mock(*args, **kwargs)
        self.receivers.append(receiver)
        if self._query.settings.LOG_CALLS:
            logger.debug("Fake builder call: %s(*%r, **%r)", self.name, args, kwargs)
        return builder

    @property
    def calls(self) -> list[StubCall]:
        """Recorded calls paired with the receiver each was made through."""
        return [
            StubCall(args=c.args, kwargs=dict(c.kwargs), receiver=r)
            for c, r in zip(self.mock.call_args_list, self.receivers)
        ]

    def reset_mock(self) -> None:
        self.mock.reset_mock()
        self.receivers.clear()

    def assert_called_on(self, receiver: Any) -> None:
        """Assert that at least one call was made through ``receiver``."""
        if not any(r is receiver for r in self.receivers):
            msg = f"Expected '{self.name}' to have been called on {receiver!r}."
            raise AssertionError(msg)

    def assert_always_called_on(self, receiver: Any) -> None:
        self.mock.assert_called()
        if not all(r is receiver for r in self.receivers):
            msg = f"Expected '{self.name}' to always have been called on {receiver!r}."
            raise AssertionError(msg)


class StatementConversion:
    """
    The ``to_statement`` method of the fake builder.

    Converting a query hands it off to a lower-level representation, as when
    a builder is nested inside another query as a subquery. The fake returns
    its placeholder statement and freezes, exactly like execution does.
    """

    name = "to_statement"

    def __init__(self, query: FakeQuery) -> None:
        self._query = query

    def __repr__(self) -> str:
        return f"<StatementConversion of {self._query.builder!r}>"

    def __call__(self) -> Any:
        return self.call_on(self._query.builder)

    def call_on(self, receiver: Any) -> Any:
        """
        Convert the fake query as if ``to_statement`` was looked up on ``receiver``.

        Raises:
            AlreadyFinalizedError: If the fake query was executed or converted.
            ReceiverMismatchError: If ``receiver`` is not the fake builder.
        """
        guard = self._query._guard
        guard.ensure_open()

        if receiver is not self._query.builder:
            msg = f"{self.name} called with a different object as self"
            raise ReceiverMismatchError(msg)

        guard.mark_converted()
        logger.debug("Fake query converted to a statement")
        return self._query.statement

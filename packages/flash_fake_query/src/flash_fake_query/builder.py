from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any, Callable, Generator

if TYPE_CHECKING:
    from .query import FakeQuery

Callback = Callable[[Any], Any]


class FakeBuilder:
    """
    Stand-in for a chainable, awaitable query builder.

    Every attribute that is not part of this class is resolved through
    ``__getattr__``: the owning FakeQuery hands back a call-tracking stub for
    the name, creating it on first lookup. Stubs return the builder, so chains
    of any length work:

        >>> await fake.builder.filter(Article.id > 42).order_by("title").limit(5)

    A few members are reserved and never turn into stubs:
        - ``__await__``, ``then`` and ``catch`` execute the query.
        - ``to_statement`` converts the query and freezes it.
        - ``repr()`` lists the stub names created so far.
        - Dunder names and configured pass-through names raise AttributeError.

    Looking up a new name once the query is frozen raises
    ``FinalizedAttributeError``, which is both an ``AlreadyFinalizedError``
    and an ``AttributeError``; ``hasattr()`` then returns False.
    """

    def __init__(self, query: FakeQuery) -> None:
        # Name-mangled so the attribute can't collide with a stubbed method.
        self.__query = query

    def __getattr__(self, name: str) -> Any:
        if name == "_FakeBuilder__query":
            # Not initialised, e.g. a copy made without calling __init__.
            raise AttributeError(name)
        query = self.__query
        if query.settings.is_passthrough(name):
            raise AttributeError(name)
        if name == "to_statement":
            return query._conversion
        return query._get_stub(name)

    def __repr__(self) -> str:
        stubs = ", ".join(self.__query.stub_names)
        return f"{{ FakeQuery.builder [ {stubs} ] }}"

    def __await__(self) -> Generator[Any, None, Any]:
        # Shielded so a timed-out or cancelled awaiter can't cancel the
        # shared result future.
        return asyncio.shield(self.__query._execute()).__await__()

    def then(
        self,
        on_fulfilled: Callback | None = None,
        on_rejected: Callback | None = None,
    ) -> asyncio.Task[Any]:
        """
        Execute the query and chain callbacks onto its result.

        The query is executed immediately and the callbacks are scheduled on
        the running loop, so they run even if the returned task is never
        awaited. The task produces the callback's return value. Callbacks may
        be plain functions or coroutine functions.

        Example:
            >>> count = await fake.builder.then(len)
        """
        return asyncio.ensure_future(
            _settle(self.__query._execute(), on_fulfilled, on_rejected)
        )

    def catch(self, on_rejected: Callback) -> asyncio.Task[Any]:
        """Execute the query, handling only a rejection with ``on_rejected``."""
        return asyncio.ensure_future(
            _settle(self.__query._execute(), None, on_rejected)
        )


async def _settle(
    future: asyncio.Future[Any],
    on_fulfilled: Callback | None,
    on_rejected: Callback | None,
) -> Any:
    try:
        value = await asyncio.shield(future)
    except Exception as exc:
        if on_rejected is None:
            raise
        return await _resolve(on_rejected(exc))

    if on_fulfilled is None:
        return value
    return await _resolve(on_fulfilled(value))


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from typing import Any

from .guard import FinalizationGuard

logger = logging.getLogger(__name__)


class ResultType(Enum):
    """Whether the fake query should resolve or reject once executed."""

    SUCCESS = auto()
    FAILURE = auto()


class ResultController:
    """
    Holds the configured outcome of a fake query and produces its result.

    The outcome can be changed freely until the query is executed. Execution
    happens exactly once: the first call to ``materialize()`` builds a future
    from whatever outcome is configured at that moment and freezes the guard.
    Every later call hands back that same future.
    """

    def __init__(self, guard: FinalizationGuard) -> None:
        self._guard = guard
        self._result: Any = None
        self._result_type: ResultType | None = None
        self._promise: asyncio.Future[Any] | None = None

    @property
    def result_type(self) -> ResultType | None:
        return self._result_type

    @property
    def promise(self) -> asyncio.Future[Any] | None:
        """The future for the query result, or None if not yet executed."""
        return self._promise

    def resolves(self, value: Any = None) -> None:
        """
        Configure the query to resolve with ``value``.

        Raises:
            AlreadyFinalizedError: If the query was executed or converted.
        """
        self._guard.ensure_open()
        self._result = value
        self._result_type = ResultType.SUCCESS

    def rejects(self, reason: Exception) -> None:
        """
        Configure the query to raise ``reason`` when awaited.

        Raises:
            AlreadyFinalizedError: If the query was executed or converted.
            TypeError: If ``reason`` is not an exception instance.
        """
        self._guard.ensure_open()
        if not isinstance(reason, Exception):
            msg = (
                "Fake query can only reject with an exception instance, "
                f"got {type(reason).__name__}"
            )
            raise TypeError(msg)
        self._result = reason
        self._result_type = ResultType.FAILURE

    def materialize(self) -> asyncio.Future[Any]:
        """
        Return the future for the query result, creating it on first use.

        Returns:
            A future already settled with the configured value or exception,
            or one that never settles when no outcome was configured.

        Raises:
            AlreadyFinalizedError: If the query was converted to a statement
                before it was ever executed.
            RuntimeError: If called outside a running event loop.
        """
        if self._promise is None:
            self._guard.ensure_open()
            self._promise = self._create_promise()
            self._guard.mark_executed()
            logger.debug("Fake query executed (result type: %s)", self._result_type)
        return self._promise

    def _create_promise(self) -> asyncio.Future[Any]:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        if self._result_type is ResultType.SUCCESS:
            future.set_result(self._result)
        elif self._result_type is ResultType.FAILURE:
            future.set_exception(self._result)
        # Unset: the future stays pending forever.
        return future

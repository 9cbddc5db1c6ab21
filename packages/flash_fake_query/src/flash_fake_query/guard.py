from __future__ import annotations

from enum import Enum

from .exceptions import AlreadyFinalizedError

EXECUTED_MESSAGE = "Fake query already executed"
CONVERTED_MESSAGE = "Fake query has already been converted to a statement"


class FinalizationState(Enum):
    """Lifecycle of a fake query."""

    OPEN = "OPEN"
    EXECUTED = "EXECUTED"
    CONVERTED = "CONVERTED"


class FinalizationGuard:
    """
    One-way switch that freezes a fake query.

    A fake query starts OPEN and moves to EXECUTED when its result is first
    awaited, or to CONVERTED when ``to_statement`` is called. Both states are
    terminal: whichever transition happens first wins and the guard never
    reopens.
    """

    def __init__(self) -> None:
        self._state = FinalizationState.OPEN

    @property
    def state(self) -> FinalizationState:
        return self._state

    @property
    def is_final(self) -> bool:
        return self._state is not FinalizationState.OPEN

    def ensure_open(
        self, error: type[AlreadyFinalizedError] = AlreadyFinalizedError
    ) -> None:
        """
        Raise if the fake query can no longer be changed.

        Args:
            error: The exception class to raise, for callers that need a more
                specific subclass.

        Raises:
            AlreadyFinalizedError: With a message naming the terminal state,
                so assertions can tell execution from conversion.
        """
        if self._state is FinalizationState.EXECUTED:
            raise error(EXECUTED_MESSAGE)
        if self._state is FinalizationState.CONVERTED:
            raise error(CONVERTED_MESSAGE)

    def mark_executed(self) -> None:
        self.ensure_open()
        self._state = FinalizationState.EXECUTED

    def mark_converted(self) -> None:
        self.ensure_open()
        self._state = FinalizationState.CONVERTED

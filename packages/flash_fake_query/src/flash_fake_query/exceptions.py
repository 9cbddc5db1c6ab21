class FakeQueryError(Exception):
    """Base class for all Flash fake query exceptions."""


class AlreadyFinalizedError(FakeQueryError, RuntimeError):
    """Raised when a fake query is changed after it was executed or converted."""


class ReceiverMismatchError(FakeQueryError, TypeError):
    """Raised when a builder method is invoked through a different object."""


class FinalizedAttributeError(AlreadyFinalizedError, AttributeError):
    """Raised when a new builder method is looked up on a frozen fake query."""

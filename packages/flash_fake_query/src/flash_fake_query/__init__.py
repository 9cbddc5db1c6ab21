from .builder import FakeBuilder
from .config import FakeQuerySettings, fake_query_settings
from .exceptions import (
    AlreadyFinalizedError,
    FakeQueryError,
    FinalizedAttributeError,
    ReceiverMismatchError,
)
from .guard import FinalizationState
from .query import FakeQuery
from .stub import CallStub, StubCall

__all__ = [
    "AlreadyFinalizedError",
    "CallStub",
    "FakeBuilder",
    "FakeQuery",
    "FakeQueryError",
    "FakeQuerySettings",
    "FinalizedAttributeError",
    "FinalizationState",
    "ReceiverMismatchError",
    "StubCall",
    "fake_query_settings",
]

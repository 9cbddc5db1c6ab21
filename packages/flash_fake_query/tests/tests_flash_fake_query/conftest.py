import pytest
from flash_fake_query import FakeQuery, FakeQuerySettings


@pytest.fixture
def fake_query():
    """A fresh, unconfigured FakeQuery."""
    return FakeQuery()


@pytest.fixture
def verbose_settings():
    """Settings that log every fake builder call."""
    return FakeQuerySettings(LOG_CALLS=True)

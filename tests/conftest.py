import pytest

from core import srs

from tests.factories import NOW, InMemoryStore


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store():
    """Fresh in-memory SQLite record store."""
    sql_store = srs.SqlRecordStore.from_url("sqlite://")
    yield sql_store
    sql_store.engine.dispose()


@pytest.fixture
def memory_store():
    return InMemoryStore()

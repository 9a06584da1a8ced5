import pytest

from flowstore import create_store, get_settings

from .models import TodoState, counter_reducer


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    for name in (
        "FLOWSTORE_LISTENER_ERROR_POLICY",
        "FLOWSTORE_CHECK_ACTION_TYPES",
        "FLOWSTORE_COPY_ON_READ",
    ):
        monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def todo_store():
    return create_store(TodoState)


@pytest.fixture
def counter_store():
    return create_store(counter_reducer)


@pytest.fixture
def calls():
    return []

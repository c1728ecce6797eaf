import pytest

from nearbite.analytics.store import clear_events
from nearbite.history.store import clear_visits


@pytest.fixture(autouse=True)
def _reset_in_memory_stores():
    clear_events()
    clear_visits()
    yield
    clear_events()
    clear_visits()

from typing import Dict, Optional

import pytest

from storage import PersistenceAdapter
from store import PracticeStore

STORAGE_KEY = "mishmar-practices"


class FakeKeyValue:
    """In-memory stand-in for the redis client, with switchable failures."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data = dict(data or {})
        self.fail_get = False
        self.fail_set = False
        self.set_calls = 0

    async def get(self, key: str) -> Optional[str]:
        if self.fail_get:
            raise ConnectionError("store unavailable")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.set_calls += 1
        if self.fail_set:
            raise ConnectionError("store unavailable")
        self.data[key] = value
        return True


@pytest.fixture
def kv():
    return FakeKeyValue()


@pytest.fixture
def adapter(kv):
    return PersistenceAdapter(kv, STORAGE_KEY)


@pytest.fixture
def store(adapter):
    return PracticeStore(adapter)

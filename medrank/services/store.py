import json
import logging
from typing import List, Sequence, Tuple

from pydantic import ValidationError

from medrank.core.storage import JsonFileStorage
from medrank.schemas.grand_test import GrandTest

logger = logging.getLogger(__name__)

TestSequence = Tuple[GrandTest, ...]

# Reducers. Insertion order is creation order; nothing is re-sorted by date.

def add_test(tests: Sequence[GrandTest], test: GrandTest) -> TestSequence:
    return tuple(tests) + (test,)

def update_test(tests: Sequence[GrandTest], test_id: str, test: GrandTest) -> TestSequence:
    return tuple(test if existing.id == test_id else existing for existing in tests)

def remove_test(tests: Sequence[GrandTest], test_id: str) -> TestSequence:
    return tuple(existing for existing in tests if existing.id != test_id)

def find_test(tests: Sequence[GrandTest], test_id: str):
    for test in tests:
        if test.id == test_id:
            return test
    return None

def serialize_tests(tests: Sequence[GrandTest]) -> str:
    return json.dumps([test.model_dump(mode="json", by_alias=True, exclude_none=True) for test in tests])

class TestRecordStore:
    """Loads and persists the ordered Grand Test sequence as a single blob."""

    __test__ = False

    def __init__(self, storage: JsonFileStorage, key: str):
        self.storage = storage
        self.key = key

    def load(self) -> List[GrandTest]:
        try:
            raw = self.storage.get_item(self.key)
            if not raw:
                return []
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("persisted tests are not a list")
            tests = [GrandTest.model_validate(item) for item in data]
        except (ValueError, ValidationError) as e:
            # No partial recovery: one bad record discards the whole blob
            logger.error(f"Failed to parse saved data under '{self.key}': {e}")
            return []

        logger.info(f"Loaded {len(tests)} test(s) from storage.")
        return tests

    def persist(self, tests: Sequence[GrandTest]) -> None:
        if not tests:
            self.storage.remove_item(self.key)
            logger.info(f"No tests left, removed '{self.key}' from storage.")
            return

        self.storage.set_item(self.key, serialize_tests(tests))
        logger.info(f"Persisted {len(tests)} test(s) to storage.")

"""
MedRank Tracker - Test Configuration
Pytest fixtures shared by the service and API tests
"""
import asyncio
from collections.abc import AsyncGenerator
from typing import Dict, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from medrank.api.deps import get_controller
from medrank.core.controller import DashboardController
from medrank.core.storage import JsonFileStorage
from medrank.main import app
from medrank.schemas.grand_test import ExamMode, GrandTest
from medrank.services.analysis_service import AnalysisService
from medrank.services.score_service import score_service
from medrank.services.store import TestRecordStore

STORAGE_KEY = "medrank_tests_data"


class StubAnalyzer:
    """Returns a canned report and remembers what it was asked about."""

    def __init__(self, text: str = "Focus on Pathology."):
        self.text = text
        self.calls = []

    async def analyze_performance(self, tests):
        self.calls.append(list(tests))
        return self.text


class BlockingAnalyzer:
    """Holds the request open until `release` is set."""

    def __init__(self, text: str = "late report"):
        self.text = text
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def analyze_performance(self, tests):
        self.started.set()
        await self.release.wait()
        return self.text


def make_test(
    test_id: str,
    name: str,
    percentages: Optional[Dict[str, int]] = None,
    mode: ExamMode = ExamMode.CUSTOM,
    date: str = "2024-01-07",
) -> GrandTest:
    """Direct-entry test with out-of-100 marks, so obtained marks equal the percentage."""
    scores = {}
    for subject_id, percentage in (percentages or {}).items():
        scores[subject_id] = score_service.build_subject_score(
            subject_id, ExamMode.CUSTOM, obtained=percentage, total=100
        )
    return GrandTest(id=test_id, name=name, date=date, mode=mode, scores=scores)


@pytest.fixture
def storage(tmp_path) -> JsonFileStorage:
    return JsonFileStorage(tmp_path / "medrank_data.json")


@pytest.fixture
def store(storage) -> TestRecordStore:
    return TestRecordStore(storage, STORAGE_KEY)


@pytest.fixture
def analyzer() -> StubAnalyzer:
    return StubAnalyzer()


@pytest.fixture
def controller(store, analyzer) -> DashboardController:
    controller = DashboardController(store=store, analyzer=analyzer)
    controller.load()
    return controller


@pytest.fixture
def no_key_analyzer() -> AnalysisService:
    return AnalysisService(api_key="")


@pytest_asyncio.fixture(scope="function")
async def client(controller) -> AsyncGenerator[AsyncClient, None]:
    """Test client wired to a controller that persists into a temp file."""
    app.dependency_overrides[get_controller] = lambda: controller

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def neet_draft() -> dict:
    """Sample NEET PG entry: 80 correct / 20 wrong in Anatomy."""
    return {
        "name": "GT1",
        "date": "2024-01-07",
        "mode": "NEET_PG",
        "subjects": {
            "anat": {"correct": 80, "wrong": 20},
            "physio": {"correct": 10, "wrong": 10},
        },
    }

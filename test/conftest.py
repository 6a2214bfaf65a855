from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_STORAGE_DIR = Path(tempfile.mkdtemp(prefix="survey-test-storage-"))
os.environ.setdefault("SURVEY_STORAGE_PATH", str(_STORAGE_DIR / "local_storage.json"))
os.environ.setdefault("THANK_YOU_RESET_SECONDS", "5")

from app.models.survey import Question, RatingQuestion, TextQuestion  # noqa: E402
from app.services.session_store import InMemoryKeyValueStorage, SessionStore  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def customer_questions() -> List[Question]:
    return [
        RatingQuestion(id=1, prompt="How satisfied are you with our products?", range=(1, 5)),
        RatingQuestion(id=2, prompt="How fair are the prices compared to similar retailers?", range=(1, 5)),
        RatingQuestion(id=3, prompt="How satisfied are you with the value for money of your purchase?", range=(1, 5)),
        RatingQuestion(
            id=4,
            prompt="On a scale of 1-10 how would you recommend us to your friends and family?",
            range=(1, 10),
        ),
        TextQuestion(id=5, prompt="What could we do to improve our service?"),
    ]


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def store(storage: InMemoryKeyValueStorage) -> SessionStore:
    return SessionStore(storage)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_haven.db"
os.environ["STORAGE_BACKEND"] = "memory"

from haven.core.errors import IncompleteAssessmentError  # noqa: E402
from haven.services.assessment import crisis_resources_for, submit_assessment  # noqa: E402
from haven.services.history import HistoryAggregator  # noqa: E402
from haven.services.storage import InMemoryKeyValueStore  # noqa: E402

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.mark.anyio
async def test_submit_scores_classifies_and_records() -> None:
    history = HistoryAggregator(InMemoryKeyValueStore(), clock=lambda: NOW)

    submitted = await submit_assessment(history, [3, 2, 2, 2, 2, 1, 1, 1, 1])

    assert submitted.result.score == 15
    assert submitted.result.timestamp == NOW
    assert submitted.result.depression_type == "Moderately severe depression"
    assert submitted.classification.requires_urgent_resources
    assert [r.id for r in await history.load()] == [submitted.result.id]


@pytest.mark.anyio
async def test_submit_rejects_incomplete_answers_before_recording() -> None:
    store = InMemoryKeyValueStore()
    history = HistoryAggregator(store, clock=lambda: NOW)

    with pytest.raises(IncompleteAssessmentError):
        await submit_assessment(history, [0, 0, 0, 0, -1, 0, 0, 0, 0])
    assert await store.get(history.storage_key) is None


def test_crisis_resources_only_above_threshold() -> None:
    assert crisis_resources_for(14) == ()
    assert len(crisis_resources_for(15)) == 3

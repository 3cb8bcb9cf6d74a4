"""Assessment history: bounded newest-first storage and summary statistics.

The history lives in a single key-value document holding a JSON array of
results, newest first. Every write replaces the whole document. Reading is
forgiving (missing or malformed data reads as an empty history); writing
is not, and failures surface as ``HistoryPersistenceError``.
"""

from __future__ import annotations

import enum
import json
import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from haven.core.errors import HistoryPersistenceError
from haven.schemas.assessment import AssessmentResult
from haven.services.severity import get_depression_type
from haven.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_KEY = "depressionTestHistory"
DEFAULT_HISTORY_CAPACITY = 50
DEFAULT_CHART_LIMIT = 10

Clock = Callable[[], datetime]


class HistoryPeriod(str, enum.Enum):
    ALL = "all"
    LAST_30_DAYS = "30days"
    LAST_90_DAYS = "90days"
    LAST_YEAR = "1year"


class Trend(str, enum.Enum):
    IMPROVING = "improving"
    WORSENING = "worsening"
    UNCHANGED = "unchanged"


@dataclass(frozen=True, slots=True)
class HistoryStatistics:
    total_tests: int = 0
    average_score: int = 0
    lowest_score: int = 0
    highest_score: int = 0
    improvement_count: int = 0
    trend: Trend = Trend.UNCHANGED


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _one_year_before(now: datetime) -> datetime:
    try:
        return now.replace(year=now.year - 1)
    except ValueError:
        # Feb 29 has no counterpart a year earlier; roll forward to Mar 1.
        return now.replace(year=now.year - 1, month=3, day=1)


def period_start(period: HistoryPeriod, now: datetime) -> datetime | None:
    """Earliest timestamp included in ``period``; ``None`` means unbounded."""
    now = _as_utc(now)
    if period is HistoryPeriod.ALL:
        return None
    if period is HistoryPeriod.LAST_30_DAYS:
        return now - timedelta(days=30)
    if period is HistoryPeriod.LAST_90_DAYS:
        return now - timedelta(days=90)
    return _one_year_before(now)


def filter_results_by_period(
    results: Sequence[AssessmentResult],
    period: HistoryPeriod,
    now: datetime,
) -> list[AssessmentResult]:
    start = period_start(period, now)
    if start is None:
        return list(results)
    end = _as_utc(now)
    return [result for result in results if start <= result.timestamp <= end]


def trend_between(current: int, previous: int) -> Trend:
    if current < previous:
        return Trend.IMPROVING
    if current > previous:
        return Trend.WORSENING
    return Trend.UNCHANGED


def _round_half_up(total: int, count: int) -> int:
    return (2 * total + count) // (2 * count)


def compute_statistics(results: Sequence[AssessmentResult]) -> HistoryStatistics:
    """Summarise a newest-first run of results.

    ``improvement_count`` walks adjacent pairs in the given newest-first
    order and counts ``results[i - 1].score > results[i].score``. The
    ``trend`` compares the two most recent entries only.
    """
    if not results:
        return HistoryStatistics()

    scores = [result.score for result in results]
    improvement_count = sum(1 for i in range(1, len(scores)) if scores[i - 1] > scores[i])
    trend = trend_between(scores[0], scores[1]) if len(scores) > 1 else Trend.UNCHANGED

    return HistoryStatistics(
        total_tests=len(scores),
        average_score=_round_half_up(sum(scores), len(scores)),
        lowest_score=min(scores),
        highest_score=max(scores),
        improvement_count=improvement_count,
        trend=trend,
    )


def with_item_trends(results: Sequence[AssessmentResult]) -> list[tuple[AssessmentResult, Trend | None]]:
    """Pair each entry with its trend against the next older entry."""
    out: list[tuple[AssessmentResult, Trend | None]] = []
    for index, result in enumerate(results):
        previous = results[index + 1] if index + 1 < len(results) else None
        trend = trend_between(result.score, previous.score) if previous is not None else None
        out.append((result, trend))
    return out


def chart_points(results: Sequence[AssessmentResult], limit: int = DEFAULT_CHART_LIMIT) -> list[AssessmentResult]:
    """Newest ``limit`` entries, oldest first, for plotting."""
    if limit <= 0:
        return []
    return list(reversed(results[:limit]))


def new_result_id() -> str:
    return f"depression_{uuid.uuid4().hex}"


def build_result(answers: Sequence[int], score: int, timestamp: datetime) -> AssessmentResult:
    return AssessmentResult(
        id=new_result_id(),
        score=score,
        answers=list(answers),
        timestamp=_as_utc(timestamp),
        depression_type=get_depression_type(score),
    )


def serialize_history(results: Sequence[AssessmentResult]) -> str:
    return json.dumps(
        [result.model_dump(mode="json", by_alias=True) for result in results],
        ensure_ascii=False,
    )


def deserialize_history(raw: str | None) -> list[AssessmentResult]:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Stored assessment history is not valid JSON; treating it as empty")
        return []
    if not isinstance(parsed, list):
        logger.warning("Stored assessment history is not a list; treating it as empty")
        return []

    results: list[AssessmentResult] = []
    for index, item in enumerate(parsed):
        try:
            results.append(AssessmentResult.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed assessment history entry at position %d", index)
    return results


class HistoryAggregator:
    """Owns the persisted list of assessment results.

    The store and clock are injected so that callers (and tests) decide
    where history lives and what "now" means for period filtering.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = utc_now,
        capacity: int = DEFAULT_HISTORY_CAPACITY,
        storage_key: str = DEFAULT_HISTORY_KEY,
    ) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1.")
        self._store = store
        self._clock = clock
        self.capacity = capacity
        self.storage_key = storage_key
        self._snapshot: list[AssessmentResult] = []

    @property
    def snapshot(self) -> list[AssessmentResult]:
        """Last history successfully read from or written to the store."""
        return list(self._snapshot)

    def now(self) -> datetime:
        return _as_utc(self._clock())

    async def _read_raw(self) -> str | None:
        return await self._store.get(self.storage_key)

    async def _write(self, results: list[AssessmentResult]) -> None:
        try:
            await self._store.set(self.storage_key, serialize_history(results))
        except Exception as exc:
            logger.exception("Writing assessment history to key %r failed", self.storage_key)
            raise HistoryPersistenceError("save", exc) from exc
        self._snapshot = results

    async def _load_for_update(self) -> list[AssessmentResult]:
        # Store errors propagate so a failed read never overwrites stored entries.
        try:
            raw = await self._read_raw()
        except Exception as exc:
            logger.exception("Reading assessment history from key %r failed", self.storage_key)
            raise HistoryPersistenceError("read", exc) from exc
        return deserialize_history(raw)

    async def load(self) -> list[AssessmentResult]:
        try:
            raw = await self._read_raw()
        except Exception:
            logger.warning("Could not read assessment history; treating it as empty", exc_info=True)
            return []
        results = deserialize_history(raw)
        self._snapshot = results
        return list(results)

    async def append(self, result: AssessmentResult) -> list[AssessmentResult]:
        existing = await self._load_for_update()
        updated = [result, *existing][: self.capacity]
        evicted = len(existing) + 1 - len(updated)
        await self._write(updated)
        if evicted:
            logger.debug("History capacity %d reached; evicted %d oldest result(s)", self.capacity, evicted)
        logger.info("Saved assessment result %s (score %d)", result.id, result.score)
        return list(updated)

    async def remove(self, result_id: str) -> bool:
        existing = await self._load_for_update()
        remaining = [result for result in existing if result.id != result_id]
        if len(remaining) == len(existing):
            return False
        await self._write(remaining)
        logger.info("Removed assessment result %s", result_id)
        return True

    async def clear(self) -> None:
        try:
            await self._store.remove(self.storage_key)
        except Exception as exc:
            logger.exception("Clearing assessment history at key %r failed", self.storage_key)
            raise HistoryPersistenceError("clear", exc) from exc
        self._snapshot = []
        logger.info("Cleared assessment history")

    async def get(self, result_id: str) -> AssessmentResult | None:
        for result in await self.load():
            if result.id == result_id:
                return result
        return None

    async def filter_by_period(self, period: HistoryPeriod) -> list[AssessmentResult]:
        return filter_results_by_period(await self.load(), period, self.now())

    async def statistics(self, period: HistoryPeriod = HistoryPeriod.ALL) -> HistoryStatistics:
        return compute_statistics(await self.filter_by_period(period))

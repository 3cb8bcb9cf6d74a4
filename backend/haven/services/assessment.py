import logging
from collections.abc import Sequence
from dataclasses import dataclass

from haven.schemas.assessment import AssessmentResult
from haven.services.history import HistoryAggregator, build_result
from haven.services.scoring import calculate_phq9_total, ensure_complete
from haven.services.severity import CRISIS_RESOURCES, Classification, classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SubmittedAssessment:
    result: AssessmentResult
    classification: Classification


def crisis_resources_for(score: int) -> tuple[tuple[str, str], ...]:
    return CRISIS_RESOURCES if classify(score).requires_urgent_resources else ()


async def submit_assessment(aggregator: HistoryAggregator, answers: Sequence[int]) -> SubmittedAssessment:
    """Score, classify and record a completed questionnaire.

    Incomplete answers raise ``IncompleteAssessmentError`` before anything
    is scored. A failed history write raises ``HistoryPersistenceError``.
    """
    answers = list(answers)
    ensure_complete(answers)
    score = calculate_phq9_total(answers)
    classification = classify(score)
    result = build_result(answers, score, aggregator.now())

    if classification.requires_urgent_resources:
        logger.info("Assessment %s scored %d; crisis resources will be shown", result.id, score)

    await aggregator.append(result)
    return SubmittedAssessment(result=result, classification=classification)

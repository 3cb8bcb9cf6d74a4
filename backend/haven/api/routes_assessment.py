from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from haven.api.deps import get_history_aggregator
from haven.core.errors import HistoryPersistenceError, IncompleteAssessmentError
from haven.schemas.assessment import (
    AnswerOptionOut,
    AssessmentResult,
    AssessmentResultOut,
    ChartPointOut,
    ChartResponse,
    ClassificationOut,
    CrisisResourceOut,
    HistoryItemOut,
    HistoryListResponse,
    HistoryStatisticsOut,
    PHQ9AnswersRequest,
    PHQ9PreviewResponse,
    ProgressResponse,
    QuestionnaireResponse,
    QuestionOut,
)
from haven.services.assessment import crisis_resources_for, submit_assessment
from haven.services.history import (
    DEFAULT_CHART_LIMIT,
    HistoryAggregator,
    HistoryPeriod,
    Trend,
    chart_points,
    with_item_trends,
)
from haven.services.scoring import (
    ANSWER_OPTIONS,
    DISCLAIMER_TEXT,
    MAX_SCORE,
    QUESTION_COUNT,
    QUESTIONS,
    answered_count,
    ensure_complete,
    progress_percentage,
    score_phq9,
    unanswered_questions,
)
from haven.services.severity import Classification, classify

router = APIRouter(prefix="/assessments/phq9", tags=["assessment"])


def _classification_out(classification: Classification) -> ClassificationOut:
    return ClassificationOut(
        severity=classification.severity,
        label=classification.label,
        urgency=classification.urgency,
        recommendation=classification.recommendation,
        color=classification.color,
        emoji=classification.emoji,
        encouragement=classification.encouragement,
        requires_urgent_resources=classification.requires_urgent_resources,
    )


def _crisis_out(resources: tuple[tuple[str, str], ...]) -> list[CrisisResourceOut]:
    return [CrisisResourceOut(name=name, contact=contact) for name, contact in resources]


def _to_result_out(result: AssessmentResult) -> AssessmentResultOut:
    # Label is re-derived from the score, never trusted from storage.
    classification = classify(result.score)
    return AssessmentResultOut(
        id=result.id,
        score=result.score,
        answers=list(result.answers),
        timestamp=result.timestamp,
        depression_type=classification.label,
        classification=_classification_out(classification),
        crisis_resources=_crisis_out(crisis_resources_for(result.score)),
        disclaimer=DISCLAIMER_TEXT,
    )


def _history_item(result: AssessmentResult, trend: Trend | None) -> HistoryItemOut:
    classification = classify(result.score)
    return HistoryItemOut(
        id=result.id,
        score=result.score,
        timestamp=result.timestamp,
        depression_type=classification.label,
        color=classification.color,
        emoji=classification.emoji,
        trend=trend.value if trend is not None else None,
    )


def _require_complete(answers: list[int]) -> None:
    try:
        ensure_complete(answers)
    except IncompleteAssessmentError as exc:
        raise HTTPException(
            status_code=422,
            detail={"message": str(exc), "unanswered": exc.missing},
        ) from exc


def _persistence_unavailable(exc: HistoryPersistenceError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("/questions", response_model=QuestionnaireResponse)
async def get_questionnaire() -> QuestionnaireResponse:
    return QuestionnaireResponse(
        questions=[QuestionOut(number=i, text=text) for i, text in enumerate(QUESTIONS, start=1)],
        options=[AnswerOptionOut(value=value, label=label) for value, label in ANSWER_OPTIONS],
        max_score=MAX_SCORE,
    )


@router.post("/progress", response_model=ProgressResponse)
async def get_progress(payload: PHQ9AnswersRequest) -> ProgressResponse:
    # Request Example:
    # POST /assessments/phq9/progress
    # {"answers":[1,2,-1,0,-1,-1,-1,-1,-1]}
    #
    # Response Example:
    # 200
    # {"answered":3,"total":9,"percentage":33,"complete":false,"unanswered":[3,5,6,7,8,9]}
    missing = unanswered_questions(payload.answers)
    return ProgressResponse(
        answered=answered_count(payload.answers),
        total=QUESTION_COUNT,
        percentage=progress_percentage(payload.answers),
        complete=not missing,
        unanswered=missing,
    )


@router.post("/preview", response_model=PHQ9PreviewResponse)
async def preview_phq9(payload: PHQ9AnswersRequest) -> PHQ9PreviewResponse:
    _require_complete(payload.answers)
    scored = score_phq9(payload.answers)
    classification = classify(scored["total_score"])
    return PHQ9PreviewResponse(
        total_score=scored["total_score"],
        description=scored["description"],
        disclaimer=DISCLAIMER_TEXT,
        classification=_classification_out(classification),
        crisis_resources=_crisis_out(crisis_resources_for(scored["total_score"])),
    )


@router.post("", response_model=AssessmentResultOut, status_code=status.HTTP_201_CREATED)
async def create_phq9_assessment(
    payload: PHQ9AnswersRequest,
    history: HistoryAggregator = Depends(get_history_aggregator),
) -> AssessmentResultOut:
    # Request Example:
    # POST /assessments/phq9
    # {"answers":[3,3,3,3,3,3,3,3,3]}
    #
    # Response Example:
    # 201
    # {"id":"depression_6f1c...","score":27,"depression_type":"Severe depression",
    #  "classification":{"urgency":"critical","requires_urgent_resources":true,...},
    #  "crisis_resources":[{"name":"South Africa Emergency","contact":"0800 456 789"},...],...}
    _require_complete(payload.answers)
    try:
        submitted = await submit_assessment(history, payload.answers)
    except HistoryPersistenceError as exc:
        raise _persistence_unavailable(exc) from exc
    return _to_result_out(submitted.result)


@router.get("", response_model=HistoryListResponse)
async def list_phq9_history(
    period: HistoryPeriod = Query(default=HistoryPeriod.ALL),
    history: HistoryAggregator = Depends(get_history_aggregator),
) -> HistoryListResponse:
    results = await history.filter_by_period(period)
    items = [_history_item(result, trend) for result, trend in with_item_trends(results)]
    return HistoryListResponse(period=period.value, total=len(items), items=items)


@router.get("/statistics", response_model=HistoryStatisticsOut)
async def get_phq9_statistics(
    period: HistoryPeriod = Query(default=HistoryPeriod.ALL),
    history: HistoryAggregator = Depends(get_history_aggregator),
) -> HistoryStatisticsOut:
    stats = await history.statistics(period)
    return HistoryStatisticsOut(
        period=period.value,
        total_tests=stats.total_tests,
        average_score=stats.average_score,
        lowest_score=stats.lowest_score,
        highest_score=stats.highest_score,
        improvement_count=stats.improvement_count,
        trend=stats.trend.value,
    )


@router.get("/chart", response_model=ChartResponse)
async def get_phq9_chart(
    period: HistoryPeriod = Query(default=HistoryPeriod.ALL),
    limit: int = Query(default=DEFAULT_CHART_LIMIT, ge=1, le=50),
    history: HistoryAggregator = Depends(get_history_aggregator),
) -> ChartResponse:
    results = await history.filter_by_period(period)
    points = [
        ChartPointOut(id=r.id, score=r.score, timestamp=r.timestamp, color=classify(r.score).color)
        for r in chart_points(results, limit)
    ]
    return ChartResponse(period=period.value, max_score=MAX_SCORE, points=points)


@router.get("/{result_id}", response_model=AssessmentResultOut)
async def get_phq9_result(
    result_id: str,
    history: HistoryAggregator = Depends(get_history_aggregator),
) -> AssessmentResultOut:
    result = await history.get(result_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found")
    return _to_result_out(result)


@router.delete("/{result_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_phq9_result(
    result_id: str,
    history: HistoryAggregator = Depends(get_history_aggregator),
) -> Response:
    try:
        await history.remove(result_id)
    except HistoryPersistenceError as exc:
        raise _persistence_unavailable(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_phq9_history(
    history: HistoryAggregator = Depends(get_history_aggregator),
) -> Response:
    try:
        await history.clear()
    except HistoryPersistenceError as exc:
        raise _persistence_unavailable(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, conint, conlist, field_validator, model_validator

from haven.services.severity import MAX_SCORE, MIN_SCORE, get_depression_type

AnswerValue = conint(ge=-1, le=3)
PHQ9AnswerList = conlist(AnswerValue, min_length=9, max_length=9)
StoredAnswerList = conlist(conint(ge=0, le=3), min_length=9, max_length=9)


class AssessmentResult(BaseModel):
    """One completed assessment as stored in the history document.

    The stored layout (``id``, ``score``, ``answers``, ``timestamp``,
    ``depressionType``) matches what the mobile client writes.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    score: conint(ge=0, le=27)
    answers: StoredAnswerList
    timestamp: datetime
    depression_type: str = Field(alias="depressionType")

    @model_validator(mode="before")
    @classmethod
    def _derive_label(cls, data):
        # Older entries may lack the cached label; it always follows from the score.
        if isinstance(data, dict) and data.get("depressionType") is None and data.get("depression_type") is None:
            score = data.get("score")
            if type(score) is int and MIN_SCORE <= score <= MAX_SCORE:
                data = {**data, "depressionType": get_depression_type(score)}
        return data

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PHQ9AnswersRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    answers: PHQ9AnswerList


class QuestionOut(BaseModel):
    number: int
    text: str


class AnswerOptionOut(BaseModel):
    value: int
    label: str


class QuestionnaireResponse(BaseModel):
    questions: list[QuestionOut]
    options: list[AnswerOptionOut]
    max_score: int


class ProgressResponse(BaseModel):
    answered: int
    total: int
    percentage: int
    complete: bool
    unanswered: list[int]


class CrisisResourceOut(BaseModel):
    name: str
    contact: str


class ClassificationOut(BaseModel):
    severity: str
    label: str
    urgency: str
    recommendation: str
    color: str
    emoji: str
    encouragement: str
    requires_urgent_resources: bool


class PHQ9PreviewResponse(BaseModel):
    total_score: int
    description: str
    disclaimer: str
    classification: ClassificationOut
    crisis_resources: list[CrisisResourceOut] = Field(default_factory=list)


class AssessmentResultOut(BaseModel):
    id: str
    score: int
    answers: list[int]
    timestamp: datetime
    depression_type: str
    classification: ClassificationOut
    crisis_resources: list[CrisisResourceOut] = Field(default_factory=list)
    disclaimer: str


class HistoryItemOut(BaseModel):
    id: str
    score: int
    timestamp: datetime
    depression_type: str
    color: str
    emoji: str
    trend: Literal["improving", "worsening", "unchanged"] | None = None


class HistoryListResponse(BaseModel):
    period: str
    total: int
    items: list[HistoryItemOut]


class HistoryStatisticsOut(BaseModel):
    period: str
    total_tests: int
    average_score: int
    lowest_score: int
    highest_score: int
    improvement_count: int
    trend: Literal["improving", "worsening", "unchanged"]


class ChartPointOut(BaseModel):
    id: str
    score: int
    timestamp: datetime
    color: str


class ChartResponse(BaseModel):
    period: str
    max_score: int
    points: list[ChartPointOut]

"""PHQ-9 severity bands and the crisis-resources trigger.

Classification is a pure lookup over a fixed, ordered table. The crisis
trigger (``score > URGENT_RESOURCES_THRESHOLD``) is checked on its own,
not derived from band urgency: it fires for the "moderately severe" band
as well as the "severe" one.
"""

from dataclasses import dataclass
from typing import Literal


PHQ9Severity = Literal["minimal", "mild", "moderate", "moderately_severe", "severe"]
Urgency = Literal["informational", "low", "medium", "high", "critical"]

MIN_SCORE = 0
MAX_SCORE = 27
URGENT_RESOURCES_THRESHOLD = 14

CRISIS_RESOURCES: tuple[tuple[str, str], ...] = (
    ("South Africa Emergency", "0800 456 789"),
    ("Suicide Crisis Helpline", "0800 12 13 14"),
    ("Lifeline Support", "0861 322 322"),
)
CRISIS_FOOTNOTE = "Remember: Seeking help is a sign of strength, not weakness."


@dataclass(frozen=True, slots=True)
class SeverityBand:
    low: int
    high: int
    severity: PHQ9Severity
    label: str
    urgency: Urgency
    recommendation: str
    color: str
    emoji: str
    encouragement: str

    def contains(self, score: int) -> bool:
        return self.low <= score <= self.high


SEVERITY_BANDS: tuple[SeverityBand, ...] = (
    SeverityBand(
        low=0,
        high=4,
        severity="minimal",
        label="Minimal or no depression",
        urgency="informational",
        recommendation=(
            "You seem to be doing well! Continue your self-care practices "
            "and stay connected with supportive people."
        ),
        color="#4CAF50",
        emoji="\U0001F60A",
        encouragement="✨ You're showing great resilience!",
    ),
    SeverityBand(
        low=5,
        high=9,
        severity="mild",
        label="Mild depression",
        urgency="low",
        recommendation=(
            "Consider talking to Haven or a mental health professional. "
            "Small steps toward support can make a big difference."
        ),
        color="#FFC107",
        emoji="\U0001F610",
        encouragement="💜 Every step toward healing matters.",
    ),
    SeverityBand(
        low=10,
        high=14,
        severity="moderate",
        label="Moderate depression",
        urgency="medium",
        recommendation=(
            "It would be beneficial to speak with a mental health professional. "
            "You deserve support and care."
        ),
        color="#FF9800",
        emoji="\U0001F61F",
        encouragement="🌟 Your courage to seek understanding is admirable.",
    ),
    SeverityBand(
        low=15,
        high=19,
        severity="moderately_severe",
        label="Moderately severe depression",
        urgency="high",
        recommendation=(
            "Please consider reaching out to a mental health professional soon. "
            "Your wellbeing matters."
        ),
        color="#FF5722",
        emoji="\U0001F61E",
        encouragement="💙 You are not alone in this journey.",
    ),
    SeverityBand(
        low=20,
        high=27,
        severity="severe",
        label="Severe depression",
        urgency="critical",
        recommendation=(
            "We strongly encourage you to seek professional help immediately. "
            "If you're having thoughts of self-harm, please contact emergency "
            "services or a crisis helpline."
        ),
        color="#F44336",
        emoji="\U0001F622",
        encouragement="❤️ Your life has value and meaning.",
    ),
)


@dataclass(frozen=True, slots=True)
class Classification:
    score: int
    severity: PHQ9Severity
    label: str
    urgency: Urgency
    recommendation: str
    color: str
    emoji: str
    encouragement: str
    requires_urgent_resources: bool


def _check_score(score: int) -> None:
    if type(score) is not int:
        raise ValueError("PHQ-9 score must be an integer.")
    if score < MIN_SCORE or score > MAX_SCORE:
        raise ValueError(f"PHQ-9 score must be between {MIN_SCORE} and {MAX_SCORE}.")


def band_for(score: int) -> SeverityBand:
    _check_score(score)
    for band in SEVERITY_BANDS:
        if band.contains(score):
            return band
    raise ValueError(f"No severity band covers score {score}.")  # pragma: no cover


def requires_urgent_resources(score: int) -> bool:
    return score > URGENT_RESOURCES_THRESHOLD


def get_depression_type(score: int) -> str:
    return band_for(score).label


def get_score_color(score: int) -> str:
    return band_for(score).color


def encouragement_message(score: int) -> str:
    return band_for(score).encouragement


def classify(score: int) -> Classification:
    band = band_for(score)
    return Classification(
        score=score,
        severity=band.severity,
        label=band.label,
        urgency=band.urgency,
        recommendation=band.recommendation,
        color=band.color,
        emoji=band.emoji,
        encouragement=band.encouragement,
        requires_urgent_resources=requires_urgent_resources(score),
    )

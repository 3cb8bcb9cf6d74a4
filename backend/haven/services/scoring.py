from typing import TypedDict

from haven.core.errors import IncompleteAssessmentError
from haven.services.severity import PHQ9Severity, classify


DISCLAIMER_TEXT = "This result is for self-reflection only and is not a medical diagnosis."
QUESTION_COUNT = 9
MAX_ANSWER = 3
MAX_SCORE = QUESTION_COUNT * MAX_ANSWER
UNANSWERED = -1

QUESTIONS: tuple[str, ...] = (
    "Little interest or pleasure in doing things?",
    "Feeling down, depressed, or hopeless?",
    "Trouble falling or staying asleep, or sleeping too much?",
    "Feeling tired or having little energy?",
    "Poor appetite or overeating?",
    "Feeling bad about yourself - or that you are a failure or have let yourself or your family down?",
    "Trouble concentrating on things, such as reading or watching television?",
    "Moving or speaking so slowly that other people could have noticed? Or the opposite - being so "
    "fidgety or restless that you have been moving around a lot more than usual?",
    "Thoughts that you would be better off dead, or of hurting yourself in some way?",
)

ANSWER_OPTIONS: tuple[tuple[int, str], ...] = (
    (0, "Not at all"),
    (1, "Several days"),
    (2, "More than half the days"),
    (3, "Nearly every day"),
)


class PHQ9ScoreResult(TypedDict):
    total_score: int
    severity: PHQ9Severity
    label: str
    description: str


def _check_shape(answers: list[int]) -> None:
    if len(answers) != QUESTION_COUNT:
        raise ValueError(f"PHQ-9 answers must contain exactly {QUESTION_COUNT} items.")
    for idx, answer in enumerate(answers, start=1):
        if type(answer) is not int:
            raise ValueError(f"PHQ-9 item {idx} must be an integer between 0 and {MAX_ANSWER}.")
        if answer > MAX_ANSWER:
            raise ValueError(f"PHQ-9 item {idx} must be between 0 and {MAX_ANSWER}.")


def unanswered_questions(answers: list[int]) -> list[int]:
    """1-based numbers of the questions that still hold a negative answer."""
    return [idx for idx, answer in enumerate(answers, start=1) if answer < 0]


def answered_count(answers: list[int]) -> int:
    return sum(1 for answer in answers if answer >= 0)


def progress_percentage(answers: list[int]) -> int:
    return round(answered_count(answers) / QUESTION_COUNT * 100)


def is_complete(answers: list[int]) -> bool:
    return len(answers) == QUESTION_COUNT and not unanswered_questions(answers)


def ensure_complete(answers: list[int]) -> None:
    _check_shape(answers)
    missing = unanswered_questions(answers)
    if missing:
        raise IncompleteAssessmentError(missing)


def calculate_phq9_total(answers: list[int]) -> int:
    """Sum the answers, counting unanswered (negative) entries as zero.

    Shape is still validated: exactly nine integers, none above 3.
    """
    _check_shape(answers)
    return sum(answer for answer in answers if answer >= 0)


def build_description(total_score: int, label: str) -> str:
    return (
        f"Your PHQ-9 total is {total_score} out of {MAX_SCORE}, which falls in the '{label}' range. "
        "This is not a medical diagnosis."
    )


def score_phq9(answers: list[int]) -> PHQ9ScoreResult:
    total_score = calculate_phq9_total(answers)
    classification = classify(total_score)
    return {
        "total_score": total_score,
        "severity": classification.severity,
        "label": classification.label,
        "description": build_description(total_score, classification.label),
    }

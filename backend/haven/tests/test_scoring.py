import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from haven.core.errors import IncompleteAssessmentError  # noqa: E402
from haven.services.scoring import (  # noqa: E402
    ANSWER_OPTIONS,
    QUESTIONS,
    UNANSWERED,
    answered_count,
    calculate_phq9_total,
    ensure_complete,
    is_complete,
    progress_percentage,
    score_phq9,
    unanswered_questions,
)


@pytest.mark.parametrize(
    ("scores", "expected_total", "expected_severity", "expected_label"),
    [
        ([0, 0, 0, 0, 0, 0, 0, 0, 0], 0, "minimal", "Minimal or no depression"),
        ([1, 1, 1, 1, 1, 0, 0, 0, 0], 5, "mild", "Mild depression"),
        ([2, 1, 1, 1, 1, 1, 1, 1, 1], 10, "moderate", "Moderate depression"),
        ([3, 2, 2, 2, 2, 1, 1, 1, 1], 15, "moderately_severe", "Moderately severe depression"),
        ([3, 3, 3, 3, 3, 3, 2, 0, 0], 20, "severe", "Severe depression"),
        ([3, 3, 3, 3, 3, 3, 3, 3, 3], 27, "severe", "Severe depression"),
    ],
)
def test_score_phq9_boundaries(
    scores: list[int], expected_total: int, expected_severity: str, expected_label: str
) -> None:
    result = score_phq9(scores)
    assert result["total_score"] == expected_total
    assert result["severity"] == expected_severity
    assert result["label"] == expected_label
    assert "not a medical diagnosis" in result["description"]


def test_total_is_sum_of_answers() -> None:
    answers = [1, 2, 0, 1, 0, 1, 0, 1, 0]
    assert calculate_phq9_total(answers) == sum(answers) == 6


def test_unanswered_entries_count_as_zero() -> None:
    answers = [3, UNANSWERED, 2, UNANSWERED, 1, 0, 0, 0, 3]
    assert calculate_phq9_total(answers) == 9


def test_score_phq9_raises_on_invalid_input() -> None:
    with pytest.raises(ValueError):
        score_phq9([1, 1, 1])
    with pytest.raises(ValueError):
        score_phq9([0, 0, 0, 0, 0, 0, 0, 0, 4])
    with pytest.raises(ValueError):
        score_phq9([0, 0, 0, 0, 0, 0, 0, 0, True])


def test_ensure_complete_lists_missing_questions() -> None:
    with pytest.raises(IncompleteAssessmentError) as excinfo:
        ensure_complete([0, -1, 2, 3, -1, 0, 0, 0, 0])
    assert excinfo.value.missing == [2, 5]
    assert isinstance(excinfo.value, ValueError)

    ensure_complete([0] * 9)


def test_progress_helpers() -> None:
    fresh = [UNANSWERED] * 9
    assert answered_count(fresh) == 0
    assert progress_percentage(fresh) == 0
    assert unanswered_questions(fresh) == list(range(1, 10))
    assert not is_complete(fresh)

    partial = [1, 2, 3, -1, -1, -1, -1, -1, -1]
    assert answered_count(partial) == 3
    assert progress_percentage(partial) == 33
    assert not is_complete(partial)

    done = [0, 1, 2, 3, 0, 1, 2, 3, 0]
    assert progress_percentage(done) == 100
    assert is_complete(done)


def test_questionnaire_definition() -> None:
    assert len(QUESTIONS) == 9
    assert QUESTIONS[0] == "Little interest or pleasure in doing things?"
    assert [value for value, _ in ANSWER_OPTIONS] == [0, 1, 2, 3]
    assert ANSWER_OPTIONS[3][1] == "Nearly every day"

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from haven.services.scoring import calculate_phq9_total  # noqa: E402
from haven.services.severity import (  # noqa: E402
    CRISIS_RESOURCES,
    SEVERITY_BANDS,
    URGENT_RESOURCES_THRESHOLD,
    classify,
    encouragement_message,
    get_depression_type,
    get_score_color,
    requires_urgent_resources,
)


@pytest.mark.parametrize(
    ("score", "label", "urgency"),
    [
        (0, "Minimal or no depression", "informational"),
        (4, "Minimal or no depression", "informational"),
        (5, "Mild depression", "low"),
        (9, "Mild depression", "low"),
        (10, "Moderate depression", "medium"),
        (14, "Moderate depression", "medium"),
        (15, "Moderately severe depression", "high"),
        (19, "Moderately severe depression", "high"),
        (20, "Severe depression", "critical"),
        (27, "Severe depression", "critical"),
    ],
)
def test_band_boundaries(score: int, label: str, urgency: str) -> None:
    classification = classify(score)
    assert classification.label == label
    assert classification.urgency == urgency
    assert get_depression_type(score) == label


def test_bands_cover_every_score_once() -> None:
    for score in range(0, 28):
        assert sum(1 for band in SEVERITY_BANDS if band.contains(score)) == 1


def test_urgent_resources_threshold() -> None:
    assert URGENT_RESOURCES_THRESHOLD == 14
    for score in range(0, 28):
        assert requires_urgent_resources(score) is (score > 14)
        assert classify(score).requires_urgent_resources is (score > 14)


def test_urgent_resources_fire_below_critical_band() -> None:
    classification = classify(15)
    assert classification.urgency == "high"
    assert classification.requires_urgent_resources


def test_encouragement_and_color_for_every_score() -> None:
    for score in range(0, 28):
        assert encouragement_message(score)
        assert get_score_color(score).startswith("#")
        assert classify(score).recommendation


def test_classify_rejects_out_of_range_scores() -> None:
    with pytest.raises(ValueError):
        classify(-1)
    with pytest.raises(ValueError):
        classify(28)


def test_all_threes_scenario() -> None:
    score = calculate_phq9_total([3] * 9)
    assert score == 27
    assert classify(score).label == "Severe depression"
    assert requires_urgent_resources(score)


def test_all_zeros_scenario() -> None:
    score = calculate_phq9_total([0] * 9)
    assert score == 0
    assert classify(score).label == "Minimal or no depression"
    assert not requires_urgent_resources(score)


def test_crisis_resources_are_fixed_contacts() -> None:
    names = [name for name, _ in CRISIS_RESOURCES]
    assert names == ["South Africa Emergency", "Suicide Crisis Helpline", "Lifeline Support"]


@pytest.mark.parametrize(
    ("score", "message"),
    [
        (0, "\u2728 You're showing great resilience!"),
        (5, "\U0001F49C Every step toward healing matters."),
        (10, "\U0001F31F Your courage to seek understanding is admirable."),
        (15, "\U0001F499 You are not alone in this journey."),
        (20, "\u2764\ufe0f Your life has value and meaning."),
    ],
)
def test_encouragement_messages_per_band(score: int, message: str) -> None:
    assert encouragement_message(score) == message

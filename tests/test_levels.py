import pytest

from psychodiag.core.levels import (
    DOUBTFUL,
    HIGH,
    HIGH_LABEL,
    LOW,
    LOW_LABEL,
    MEDIUM,
    MEDIUM_LABEL,
    NOT_DIAGNOSED,
    Band,
    Polarity,
    ThresholdTable,
    classify,
    classify_banded,
    classify_shtepa_total,
    display_class,
    ratio_class,
)


@pytest.mark.parametrize(
    "score, label, level_class",
    [
        (12, LOW_LABEL, LOW),
        (13, MEDIUM_LABEL, MEDIUM),
        (17, MEDIUM_LABEL, MEDIUM),
        (21, MEDIUM_LABEL, MEDIUM),
        (22, HIGH_LABEL, HIGH),
    ],
)
def test_classify_bounds_belong_to_medium(score, label, level_class):
    level = classify(score, ThresholdTable(13, 21))

    assert level.label == label
    assert level.level_class == level_class


def test_classify_inverted_mirrors_class_only():
    table = ThresholdTable(8, 12)

    low = classify(5, table, Polarity.INVERTED)
    high = classify(14, table, Polarity.INVERTED)
    medium = classify(10, table, Polarity.INVERTED)

    assert (low.label, low.level_class) == (LOW_LABEL, HIGH)
    assert (high.label, high.level_class) == (HIGH_LABEL, LOW)
    assert (medium.label, medium.level_class) == (MEDIUM_LABEL, MEDIUM)


@pytest.mark.parametrize(
    "total, level_class",
    [
        (0, NOT_DIAGNOSED),
        (56, NOT_DIAGNOSED),
        (57, LOW),
        (69, LOW),
        (70, MEDIUM),
        (92, MEDIUM),
        (93, HIGH),
        (106, HIGH),
        (107, DOUBTFUL),
        (112, DOUBTFUL),
    ],
)
def test_shtepa_total_bands(total, level_class):
    assert classify_shtepa_total(total).level_class == level_class


def test_shtepa_total_labels():
    assert classify_shtepa_total(15).label == "Психологічна ресурсність не діагностується"
    assert classify_shtepa_total(80).label == "Середній рівень"
    assert classify_shtepa_total(110).label == "Сумнівні дані"


def test_classify_banded_requires_open_last_band():
    with pytest.raises(ValueError):
        classify_banded(10, (Band(5, "a", LOW),))


@pytest.mark.parametrize(
    "value, expected",
    [(7.0, HIGH), (5.5, HIGH), (5.49, MEDIUM), (4.0, MEDIUM), (3.99, LOW), (1.0, LOW)],
)
def test_display_class_inclusive_lower_bounds(value, expected):
    assert display_class(value, 4.0, 5.5) == expected


def test_ratio_class():
    assert ratio_class(6, 8, 0.5, 0.75) == HIGH
    assert ratio_class(4, 8, 0.5, 0.75) == MEDIUM
    assert ratio_class(3, 8, 0.5, 0.75) == LOW
    assert ratio_class(24, 36, 0.33, 0.66) == HIGH
    assert ratio_class(5, 0, 0.5, 0.75) == LOW

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

# ---------------------------------------------------------------------------
# Labels and classes
#
# Labels are the source-language texts shown to the user. Classes are the
# stable keys a presentation layer styles on.
# ---------------------------------------------------------------------------

LOW_LABEL = "Низький"
MEDIUM_LABEL = "Середній"
HIGH_LABEL = "Високий"

LOW = "low"
MEDIUM = "medium"
HIGH = "high"
NOT_DIAGNOSED = "not-diagnosed"
DOUBTFUL = "doubtful"

_MIRRORED_CLASS = {LOW: HIGH, MEDIUM: MEDIUM, HIGH: LOW}


class Polarity(str, Enum):
    """
    Direction in which a category's score reads as "good".

    NORMAL: a higher score is better.
    INVERTED: a lower score is better. The band label still follows the
    number (a low score is 'Низький'), only the class is mirrored.
    """
    NORMAL = "normal"
    INVERTED = "inverted"


@dataclass(frozen=True)
class ThresholdTable:
    """
    Three-way band bounds.

    score < low  -> low band
    score > high -> high band
    otherwise    -> medium band (both bounds belong to medium)
    """
    low: float
    high: float


@dataclass(frozen=True)
class Level:
    label: str
    level_class: str


@dataclass(frozen=True)
class Band:
    """One contiguous range of a multi-band table, upper bound inclusive."""
    upper: Optional[float]   # None for the open-ended last band
    label: str
    level_class: str


def classify(score: float, thresholds: ThresholdTable, polarity: Polarity = Polarity.NORMAL) -> Level:
    if score < thresholds.low:
        level = Level(LOW_LABEL, LOW)
    elif score > thresholds.high:
        level = Level(HIGH_LABEL, HIGH)
    else:
        level = Level(MEDIUM_LABEL, MEDIUM)

    if polarity is Polarity.INVERTED:
        return Level(level.label, _MIRRORED_CLASS[level.level_class])
    return level


def classify_banded(score: float, bands: Sequence[Band]) -> Level:
    """Return the first band whose inclusive upper bound holds the score."""
    for band in bands:
        if band.upper is None or score <= band.upper:
            return Level(band.label, band.level_class)
    raise ValueError("Band table has no open-ended last band.")


# Штепа total: five contiguous ranges over 0..112.
SHTEPA_TOTAL_BANDS: Tuple[Band, ...] = (
    Band(56, "Психологічна ресурсність не діагностується", NOT_DIAGNOSED),
    Band(69, "Низький рівень", LOW),
    Band(92, "Середній рівень", MEDIUM),
    Band(106, "Високий рівень", HIGH),
    Band(None, "Сумнівні дані", DOUBTFUL),
)


def classify_shtepa_total(total: float) -> Level:
    return classify_banded(total, SHTEPA_TOTAL_BANDS)


# ---------------------------------------------------------------------------
# Display classes for categories without a threshold table
# ---------------------------------------------------------------------------

def display_class(value: float, medium_from: float, high_from: float) -> str:
    """Class from inclusive lower bounds: value >= high_from is high, etc."""
    if value >= high_from:
        return HIGH
    if value >= medium_from:
        return MEDIUM
    return LOW


def ratio_class(score: float, max_score: float, medium_from: float, high_from: float) -> str:
    if max_score <= 0:
        return LOW
    return display_class(score / max_score, medium_from, high_from)

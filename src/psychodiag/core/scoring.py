from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

import math

from psychodiag.core.definitions import (
    BASIC_PH,
    BASIC_PH_HIGH_RATIO,
    BASIC_PH_MEDIUM_RATIO,
    PERSONAL_RESOURCE,
    PR_COPING,
    PR_EXHAUSTION,
    PR_SUFFICIENCY,
    RYFF,
    SAN,
    SAN_HIGH_FROM,
    SAN_MEDIUM_FROM,
    SHTEPA,
    SHTEPA_HIGH_RATIO,
    SHTEPA_MEDIUM_RATIO,
    CategoryDefinition,
    get_test,
)
from psychodiag.core.levels import (
    classify,
    classify_shtepa_total,
    display_class,
    ratio_class,
)


@dataclass(frozen=True)
class CategoryScore:
    key: str
    name: str
    score: float
    max_score: float
    level: Optional[str]     # band label, None where the test has no bands
    level_class: str


@dataclass(frozen=True)
class ScoreResult:
    """
    Scores of one test for one respondent.

    total and the total level fields are None where the test defines no
    total (САН) or no total bands (Basic Ph).
    """
    categories: Tuple[CategoryScore, ...]
    total: Optional[float] = None
    total_level: Optional[str] = None
    total_level_class: Optional[str] = None

    def category(self, key: str) -> Optional[CategoryScore]:
        for cat in self.categories:
            if cat.key == key:
                return cat
        return None

    def as_dict(self) -> Dict[str, float]:
        """Flat {category key: score} mapping, plus 'total' when present."""
        out: Dict[str, float] = {cat.key: cat.score for cat in self.categories}
        if self.total is not None:
            out["total"] = self.total
        return out


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float, ndigits: int = 2) -> float:
    """
    Round to ndigits with ties going up (toward +infinity, -2.125 -> -2.12).

    Built-in round() and pandas round ties to even (9.125 -> 9.12); the
    displayed means round ties up (9.125 -> 9.13).
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def reverse_value(value: int, scale_max: int) -> int:
    """Mirror a value on a 1..scale_max scale (1<->scale_max, 2<->scale_max-1, ...)."""
    return scale_max + 1 - value


def sum_scores(
    answers: Sequence[int],
    definition: CategoryDefinition,
    reverse_scale_max: Optional[int] = None,
) -> int:
    """
    Sum the answers of a category's questions.

    With reverse_scale_max set, questions whose slot flag is True are
    reversed on that scale before summing.
    """
    total = 0
    for slot in definition.questions:
        value = answers[slot.number - 1]
        if reverse_scale_max is not None and slot.flag:
            value = reverse_value(value, reverse_scale_max)
        total += value
    return total


def match_count(answers: Sequence[bool], definition: CategoryDefinition) -> int:
    """Number of slots whose answer equals the slot's expected value."""
    return sum(1 for slot in definition.questions if answers[slot.number - 1] == slot.flag)


def average_score(answers: Sequence[int], definition: CategoryDefinition, ndigits: int = 2) -> float:
    numbers = definition.numbers
    if not numbers:
        return 0.0
    return round_half_up(sum(answers[n - 1] for n in numbers) / len(numbers), ndigits)


def _banded(definition: CategoryDefinition, score: float) -> CategoryScore:
    level = classify(score, definition.thresholds, definition.polarity)
    return CategoryScore(definition.key, definition.name, score, definition.max_score, level.label, level.level_class)


# ---------------------------------------------------------------------------
# Per-test aggregators
# ---------------------------------------------------------------------------

def score_san(answers: Sequence[int]) -> ScoreResult:
    categories = []
    for definition in get_test(SAN).categories:
        score = average_score(answers, definition)
        categories.append(
            CategoryScore(
                definition.key,
                definition.name,
                score,
                definition.max_score,
                None,
                display_class(score, SAN_MEDIUM_FROM, SAN_HIGH_FROM),
            )
        )
    return ScoreResult(tuple(categories))


def score_shtepa(answers: Sequence[bool]) -> ScoreResult:
    categories = []
    for definition in get_test(SHTEPA).categories:
        score = match_count(answers, definition)
        categories.append(
            CategoryScore(
                definition.key,
                definition.name,
                score,
                definition.max_score,
                None,
                ratio_class(score, definition.max_score, SHTEPA_MEDIUM_RATIO, SHTEPA_HIGH_RATIO),
            )
        )
    total = sum(cat.score for cat in categories)
    level = classify_shtepa_total(total)
    return ScoreResult(tuple(categories), total, level.label, level.level_class)


def score_basic_ph(answers: Sequence[int]) -> ScoreResult:
    categories = []
    for definition in get_test(BASIC_PH).categories:
        score = sum_scores(answers, definition)
        categories.append(
            CategoryScore(
                definition.key,
                definition.name,
                score,
                definition.max_score,
                None,
                ratio_class(score, definition.max_score, BASIC_PH_MEDIUM_RATIO, BASIC_PH_HIGH_RATIO),
            )
        )
    return ScoreResult(tuple(categories), sum(cat.score for cat in categories))


def score_personal_resource(answers: Sequence[int]) -> ScoreResult:
    """
    Total = Достатність + Стратегії подолання - Емоційна спустошеність.

    Емоційна спустошеність reads inverted: a low score gets the 'high' class.
    """
    test = get_test(PERSONAL_RESOURCE)
    categories = tuple(_banded(definition, sum_scores(answers, definition)) for definition in test.categories)
    by_key = {cat.key: cat.score for cat in categories}

    total = by_key[PR_SUFFICIENCY] + by_key[PR_COPING] - by_key[PR_EXHAUSTION]
    level = classify(total, test.total_thresholds)
    return ScoreResult(categories, total, level.label, level.level_class)


def score_ryff(answers: Sequence[int]) -> ScoreResult:
    test = get_test(RYFF)
    categories = tuple(
        _banded(definition, sum_scores(answers, definition, reverse_scale_max=test.scale_max))
        for definition in test.categories
    )
    total = sum(cat.score for cat in categories)
    level = classify(total, test.total_thresholds)
    return ScoreResult(categories, total, level.label, level.level_class)


SCORERS: Dict[str, Callable[[Sequence], ScoreResult]] = {
    SAN: score_san,
    SHTEPA: score_shtepa,
    BASIC_PH: score_basic_ph,
    PERSONAL_RESOURCE: score_personal_resource,
    RYFF: score_ryff,
}


def score_test(test_key: str, answers: Sequence) -> ScoreResult:
    try:
        scorer = SCORERS[test_key]
    except KeyError:
        raise KeyError(f"Unknown test key: {test_key!r}") from None
    return scorer(answers)

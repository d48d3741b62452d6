"""
Fixed scoring tables for the five questionnaires.

Question numbers are 1-based as printed in the questionnaires. Category
membership is written in the notation of the scoring keys:

  Штепа: "9-" means question 9 scores a point when answered "Ні";
         "2+" means question 2 scores when answered "Так".
  Ryff:  "7(t)" means question 7 is reversed (1<->6, 2<->5, 3<->4).

The tables are parsed once at import and are immutable afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import re

from psychodiag import config
from psychodiag.core.levels import Polarity, ThresholdTable

# Test keys, in CSV column order
SAN = "san"
SHTEPA = "shtepa"
BASIC_PH = "basic_ph"
PERSONAL_RESOURCE = "personal_resource"
RYFF = "ryff"


@dataclass(frozen=True)
class QuestionSlot:
    """
    One question inside a category.

    flag is the expected answer for Штепа slots and the reversal marker for
    Ryff slots; it is unused elsewhere.
    """
    number: int
    flag: bool = False


@dataclass(frozen=True)
class CategoryDefinition:
    key: str
    name: str
    questions: Tuple[QuestionSlot, ...]
    max_score: float
    thresholds: Optional[ThresholdTable] = None
    polarity: Polarity = Polarity.NORMAL
    code: Optional[str] = None

    @property
    def numbers(self) -> Tuple[int, ...]:
        return tuple(q.number for q in self.questions)


@dataclass(frozen=True)
class TestDefinition:
    key: str
    label: str
    question_count: int
    offset: int                  # first CSV column of the test
    scale_min: int
    scale_max: int
    categories: Tuple[CategoryDefinition, ...]
    total_thresholds: Optional[ThresholdTable] = None

    def category(self, key: str) -> Optional[CategoryDefinition]:
        for cat in self.categories:
            if cat.key == key:
                return cat
        return None


# ---------------------------------------------------------------------------
# Notation parsers
# ---------------------------------------------------------------------------

_SHTEPA_SLOT_RE = re.compile(r"^(\d+)\s*([+\-–])$")
_RYFF_SLOT_RE = re.compile(r"^(\d+)\s*(\(t\))?$")


def _numbers(text: str) -> Tuple[QuestionSlot, ...]:
    return tuple(QuestionSlot(int(p)) for p in text.replace(",", " ").split())


def _expected_slots(text: str) -> Tuple[QuestionSlot, ...]:
    slots: List[QuestionSlot] = []
    for part in text.split():
        m = _SHTEPA_SLOT_RE.match(part)
        if not m:
            raise ValueError(f"Bad Штепа key entry: {part!r}")
        slots.append(QuestionSlot(int(m.group(1)), m.group(2) == "+"))
    return tuple(slots)


def _reversible_slots(text: str) -> Tuple[QuestionSlot, ...]:
    slots: List[QuestionSlot] = []
    for part in text.split(","):
        m = _RYFF_SLOT_RE.match(part.strip())
        if not m:
            raise ValueError(f"Bad Ryff key entry: {part!r}")
        slots.append(QuestionSlot(int(m.group(1)), m.group(2) is not None))
    return tuple(slots)


# ---------------------------------------------------------------------------
# САН (Самопочуття, Активність, Настрій)
# ---------------------------------------------------------------------------

# Questions printed negative pole first
SAN_REVERSED_QUESTIONS = frozenset({3, 4, 9, 10, 13, 15, 16, 21, 22, 27, 28})

SAN_CATEGORIES: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition("wellbeing", "Самопочуття", _numbers("1 2 7 8 13 14 19 20 25 26"), 7),
    CategoryDefinition("activity", "Активність", _numbers("3 4 9 10 15 16 21 22 27 28"), 7),
    CategoryDefinition("mood", "Настрій", _numbers("5 6 11 12 17 18 23 24 29 30"), 7),
)

# Display class bounds for a scale average (inclusive lower bounds)
SAN_MEDIUM_FROM = 4.0
SAN_HIGH_FROM = 5.5

# ---------------------------------------------------------------------------
# Опитувальник О.С. Штепи
# ---------------------------------------------------------------------------

SHTEPA_CATEGORIES: Tuple[CategoryDefinition, ...] = tuple(
    CategoryDefinition(key, name, _expected_slots(key_text), 8)
    for key, name, key_text in (
        ("self_confidence", "Упевненість у собі", "2+ 3+ 9- 11+ 12- 21- 22- 55+"),
        ("kindness", "Доброта до людей", "4+ 5+ 15- 16- 17- 26- 27- 28+"),
        ("helping", "Допомога іншим", "4+ 6+ 10- 17- 18- 36+ 37+ 38+"),
        ("success", "Успіх", "1+ 12- 14+ 29+ 34+ 40+ 42- 55+"),
        ("love", "Любов", "7- 8- 11+ 30+ 33- 51+ 52+ 53+"),
        ("creativity", "Творчість", "23- 24- 25- 31+ 37+ 40+ 53+ 54+"),
        ("faith_in_good", "Віра у добро", "1+ 6+ 7- 13- 16- 28+ 34+ 35+"),
        ("wisdom", "Прагнення до мудрості", "33- 36+ 39+ 45- 46- 47- 54+ 55+"),
        ("self_improvement", "Робота над собою", "11+ 41+ 43- 48- 49- 50- 52+ 54+"),
        ("professional", "Самореалізація у професії", "11+ 23- 24- 40+ 42- 44- 47- 53+"),
        ("responsibility", "Відповідальність", "8- 10- 19- 20+ 22- 32+ 51+ 52+"),
        ("knowing_resources", "Знання власних ресурсів", "57- 59- 60+ 61+ 62- 63- 66- 67+"),
        ("renewing_resources", "Уміння оновлювати власні ресурси", "56+ 58+ 60+ 61+ 62- 63- 64- 66-"),
        ("using_resources", "Уміння використовувати власні ресурси", "58+ 59- 61+ 63- 64- 65+ 66- 67+"),
    )
)

# Category display class as a share of the category maximum
SHTEPA_MEDIUM_RATIO = 0.5
SHTEPA_HIGH_RATIO = 0.75

# ---------------------------------------------------------------------------
# Basic Ph
# ---------------------------------------------------------------------------

BASIC_PH_CATEGORIES: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition("belief", "Віра, переконання", _numbers("1 7 13 19 25 31"), 36, code="B"),
    CategoryDefinition("affect", "Емоції, почуття", _numbers("2 8 14 20 26 32"), 36, code="A"),
    CategoryDefinition("social", "Соціальні зв'язки", _numbers("3 9 15 21 27 33"), 36, code="S"),
    CategoryDefinition("imagination", "Уява, мрії", _numbers("4 10 16 22 28 34"), 36, code="I"),
    CategoryDefinition("cognition", "Когнітивні стратегії", _numbers("5 11 17 23 29 35"), 36, code="C"),
    CategoryDefinition("physiology", "Тілесні ресурси", _numbers("6 12 18 24 30 36"), 36, code="Ph"),
)

BASIC_PH_MEDIUM_RATIO = 0.33
BASIC_PH_HIGH_RATIO = 0.66

# ---------------------------------------------------------------------------
# Особистісні ресурси (О. Савченко, С. Сукач)
#
# Total = Достатність + Стратегії подолання - Емоційна спустошеність
# ---------------------------------------------------------------------------

PR_SUFFICIENCY = "sufficiency"
PR_COPING = "coping"
PR_EXHAUSTION = "exhaustion"

PERSONAL_RESOURCE_CATEGORIES: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        PR_SUFFICIENCY, "Достатність", _numbers("1 2 4 5 9 10"), 30,
        thresholds=ThresholdTable(13, 21),
    ),
    CategoryDefinition(
        PR_COPING, "Стратегії подолання", _numbers("3 6 8 12"), 20,
        thresholds=ThresholdTable(13, 18),
    ),
    CategoryDefinition(
        PR_EXHAUSTION, "Емоційна спустошеність", _numbers("7 11 13"), 15,
        thresholds=ThresholdTable(8, 12),
        polarity=Polarity.INVERTED,
    ),
)

PERSONAL_RESOURCE_TOTAL = ThresholdTable(15, 30)

# ---------------------------------------------------------------------------
# Ryff psychological well-being
# ---------------------------------------------------------------------------

RYFF_CATEGORIES: Tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        "relationships", "Відносини",
        _reversible_slots("1, 7(t), 13(t), 19, 25, 31(t), 37, 43(t), 49, 55(t), 61(t), 67, 73(t), 79"),
        84, thresholds=ThresholdTable(53, 74),
    ),
    CategoryDefinition(
        "autonomy", "Автономія",
        _reversible_slots("2(t), 8, 14, 20(t), 26, 32(t), 38, 44(t), 50, 56(t), 62(t), 68, 74(t), 80"),
        84, thresholds=ThresholdTable(48, 62),
    ),
    CategoryDefinition(
        "environment", "Середовище",
        _reversible_slots("3, 9(t), 15(t), 21, 27(t), 33, 39, 45(t), 51, 57, 63(t), 69, 75(t), 81"),
        84, thresholds=ThresholdTable(51, 71),
    ),
    CategoryDefinition(
        "growth", "Зростання",
        _reversible_slots("4(t), 10, 16, 22(t), 28, 34(t), 40, 46, 52, 58(t), 64, 70, 76(t), 82(t)"),
        84, thresholds=ThresholdTable(53, 71),
    ),
    CategoryDefinition(
        "purpose", "Цілі",
        _reversible_slots("5, 11(t), 17(t), 23, 29(t), 35(t), 41(t), 47, 53, 59, 65(t), 71, 77, 83(t)"),
        84, thresholds=ThresholdTable(54, 75),
    ),
    CategoryDefinition(
        "self_acceptance", "Самосприйняття",
        _reversible_slots("6, 12, 18(t), 24(t), 30, 36, 42(t), 48, 54(t), 60(t), 66(t), 72, 78, 84(t)"),
        84, thresholds=ThresholdTable(49, 71),
    ),
)

RYFF_TOTAL = ThresholdTable(315, 413)

# ---------------------------------------------------------------------------
# Test registry
# ---------------------------------------------------------------------------

TESTS: Dict[str, TestDefinition] = {
    SAN: TestDefinition(
        SAN, "САН", config.SAN_QUESTIONS, config.SAN_OFFSET, 1, 7, SAN_CATEGORIES,
    ),
    SHTEPA: TestDefinition(
        SHTEPA, "Штепа", config.SHTEPA_QUESTIONS, config.SHTEPA_OFFSET, 0, 1, SHTEPA_CATEGORIES,
    ),
    BASIC_PH: TestDefinition(
        BASIC_PH, "Basic Ph", config.BASIC_PH_QUESTIONS, config.BASIC_PH_OFFSET, 0, 6, BASIC_PH_CATEGORIES,
    ),
    PERSONAL_RESOURCE: TestDefinition(
        PERSONAL_RESOURCE, "Особистісні ресурси", config.PERSONAL_RESOURCE_QUESTIONS,
        config.PERSONAL_RESOURCE_OFFSET, 1, 5, PERSONAL_RESOURCE_CATEGORIES,
        total_thresholds=PERSONAL_RESOURCE_TOTAL,
    ),
    RYFF: TestDefinition(
        RYFF, "Ryff", config.RYFF_QUESTIONS, config.RYFF_OFFSET, 1, 6, RYFF_CATEGORIES,
        total_thresholds=RYFF_TOTAL,
    ),
}

TEST_ORDER: Tuple[str, ...] = (SAN, SHTEPA, BASIC_PH, PERSONAL_RESOURCE, RYFF)


def get_test(key: str) -> TestDefinition:
    try:
        return TESTS[key]
    except KeyError:
        raise KeyError(f"Unknown test key: {key!r}") from None

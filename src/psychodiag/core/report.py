from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import logging

import pandas as pd

from psychodiag import config
from psychodiag.core.assembler import RespondentRecord
from psychodiag.core.definitions import (
    BASIC_PH,
    PERSONAL_RESOURCE,
    PERSONAL_RESOURCE_TOTAL,
    RYFF,
    RYFF_TOTAL,
    SAN,
    SHTEPA,
    TESTS,
    TEST_ORDER,
)
from psychodiag.core.errors import UnknownCategoryError
from psychodiag.core.levels import Level, classify, classify_shtepa_total
from psychodiag.core.scoring import reverse_value, round_half_up

logger = logging.getLogger(__name__)

TOTAL = "total"

# Score fields averaged over the cohort, as (test key, category key or
# 'total'). Штепа is averaged on its total only.
MEAN_FIELDS: Tuple[Tuple[str, str], ...] = (
    tuple((SAN, cat.key) for cat in TESTS[SAN].categories)
    + ((SHTEPA, TOTAL),)
    + tuple((BASIC_PH, cat.key) for cat in TESTS[BASIC_PH].categories)
    + ((BASIC_PH, TOTAL),)
    + tuple((PERSONAL_RESOURCE, cat.key) for cat in TESTS[PERSONAL_RESOURCE].categories)
    + ((PERSONAL_RESOURCE, TOTAL),)
    + tuple((RYFF, cat.key) for cat in TESTS[RYFF].categories)
    + ((RYFF, TOTAL),)
)


def field_name(test_key: str, key: str) -> str:
    """Flat column name used in frames and mean dicts, e.g. 'ryff.autonomy'."""
    return f"{test_key}.{key}"


@dataclass(frozen=True)
class BreakdownRow:
    number: int          # 1-based question number
    raw: object          # decoded answer as stored on the record
    final: object        # value that entered the category score
    reversed: bool       # True where the question is reverse-scored


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------

def records_to_frame(records: Sequence[RespondentRecord]) -> pd.DataFrame:
    """One row per respondent, one column per averaged score field."""
    columns = [field_name(t, k) for t, k in MEAN_FIELDS]
    rows: List[Dict[str, float]] = []
    for record in records:
        row: Dict[str, float] = {}
        for test_key, key in MEAN_FIELDS:
            result = record.scores(test_key)
            if key == TOTAL:
                row[field_name(test_key, key)] = result.total
            else:
                row[field_name(test_key, key)] = result.category(key).score
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def scores_frame(records: Sequence[RespondentRecord], test_key: str) -> pd.DataFrame:
    """
    Per-respondent table of one test for display.

    Columns: Email, Age, one column per category (source name), then the
    total and its level where the test has them.
    """
    if test_key not in TESTS:
        raise UnknownCategoryError(f"Unknown test: {test_key!r}")
    test = TESTS[test_key]

    rows: List[Dict[str, object]] = []
    for record in records:
        result = record.scores(test_key)
        row: Dict[str, object] = {"Email": record.email, "Age": record.age}
        for cat in result.categories:
            row[cat.name] = cat.score
        if result.total is not None:
            row["Загалом"] = result.total
        if result.total_level is not None:
            row["Рівень"] = result.total_level
        rows.append(row)

    columns = ["Email", "Age"] + [cat.name for cat in test.categories]
    if rows:
        columns += [c for c in ("Загалом", "Рівень") if c in rows[0]]
    return pd.DataFrame(rows, columns=columns)


# ---------------------------------------------------------------------------
# Cohort aggregates
# ---------------------------------------------------------------------------

def cohort_means(records: Sequence[RespondentRecord]) -> Dict[str, float]:
    """
    Mean of every score field over the cohort, rounded to MEAN_PRECISION.

    An empty cohort yields 0 for every field.
    """
    df = records_to_frame(records)
    if df.empty:
        return {col: 0.0 for col in df.columns}

    means = df.astype(float).mean().apply(round_half_up, ndigits=config.MEAN_PRECISION)
    logger.debug("Cohort means over %s respondent(s): %s", len(df), means.to_dict())
    return {col: float(means[col]) for col in df.columns}


def cohort_levels(means: Dict[str, float]) -> Dict[str, Level]:
    """Levels of the cohort-mean totals of the tests that band their total."""
    return {
        SHTEPA: classify_shtepa_total(means[field_name(SHTEPA, TOTAL)]),
        PERSONAL_RESOURCE: classify(means[field_name(PERSONAL_RESOURCE, TOTAL)], PERSONAL_RESOURCE_TOTAL),
        RYFF: classify(means[field_name(RYFF, TOTAL)], RYFF_TOTAL),
    }


def means_frame(means: Dict[str, float]) -> pd.DataFrame:
    """Cohort means laid out as (test, category, mean) rows in column order."""
    rows = []
    for test_key in TEST_ORDER:
        test = TESTS[test_key]
        for cat in test.categories:
            name = field_name(test_key, cat.key)
            if name in means:
                rows.append({"Тест": test.label, "Шкала": cat.name, "Середнє": means[name]})
        total = field_name(test_key, TOTAL)
        if total in means:
            rows.append({"Тест": test.label, "Шкала": "Загалом", "Середнє": means[total]})
    return pd.DataFrame(rows, columns=["Тест", "Шкала", "Середнє"])


# ---------------------------------------------------------------------------
# Per-question breakdown
# ---------------------------------------------------------------------------

def category_breakdown(record: RespondentRecord, test_key: str, category_key: str) -> List[BreakdownRow]:
    """
    Per-question detail of one category for one respondent.

    Ryff rows show the reversal; Штепа rows show 1 in `final` where the
    answer matched the expected one. Other tests pass the answer through.
    """
    test = TESTS.get(test_key)
    if test is None:
        raise UnknownCategoryError(f"Unknown test: {test_key!r}")
    definition = test.category(category_key)
    if definition is None:
        raise UnknownCategoryError(f"Unknown category {category_key!r} for test {test.label}")

    answers = record.answers(test_key)
    rows: List[BreakdownRow] = []
    for slot in definition.questions:
        raw = answers[slot.number - 1]
        if test_key == RYFF:
            final = reverse_value(raw, test.scale_max) if slot.flag else raw
            rows.append(BreakdownRow(slot.number, raw, final, slot.flag))
        elif test_key == SHTEPA:
            rows.append(BreakdownRow(slot.number, raw, int(raw == slot.flag), False))
        else:
            rows.append(BreakdownRow(slot.number, raw, raw, False))
    return rows


def breakdown_frame(rows: Sequence[BreakdownRow]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Питання": r.number, "Відповідь": r.raw, "Бал": r.final, "Обернене": r.reversed} for r in rows],
        columns=["Питання", "Відповідь", "Бал", "Обернене"],
    )

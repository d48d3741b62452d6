import pytest

from psychodiag.core.assembler import assemble_respondent
from psychodiag.core.definitions import PERSONAL_RESOURCE, RYFF, SAN, SHTEPA, TESTS
from psychodiag.core.diagnostics import NullSink
from psychodiag.core.errors import UnknownCategoryError
from psychodiag.core.levels import MEDIUM, NOT_DIAGNOSED
from psychodiag.core.report import (
    MEAN_FIELDS,
    breakdown_frame,
    category_breakdown,
    cohort_levels,
    cohort_means,
    means_frame,
    scores_frame,
)


def _record(row_fields, **kwargs):
    return assemble_respondent(row_fields(**kwargs), NullSink())


def test_cohort_means_empty_cohort_is_zero():
    means = cohort_means([])

    assert len(means) == len(MEAN_FIELDS)
    assert set(means.values()) == {0.0}
    assert "shtepa.total" in means
    assert "ryff.total" in means


def test_cohort_means_averages_and_rounds(row_fields):
    first = _record(row_fields, fill={SHTEPA: "Так", PERSONAL_RESOURCE: "5", SAN: "2"})
    second = _record(row_fields, fill={SHTEPA: "Ні", PERSONAL_RESOURCE: "3", SAN: "0"})

    means = cohort_means([first, second])

    # every Штепа slot matches in exactly one of the two rows: (a + (112 - a)) / 2
    assert means["shtepa.total"] == 56.0
    # (30 + 20 - 15) and (18 + 12 - 9)
    assert means["personal_resource.total"] == 28.0
    assert means["personal_resource.exhaustion"] == 12.0
    # САН "2" scores 2 on regular questions and 6 on reversed ones; the
    # second row is all centers (4). Wellbeing has one reversed question (13).
    assert means["san.wellbeing"] == 3.2
    assert means["san.activity"] == 5.0
    assert means["san.mood"] == 3.0


def test_cohort_means_round_to_two_decimals(row_fields):
    records = [
        _record(row_fields, cells={PERSONAL_RESOURCE: {1: "4"}}),
        _record(row_fields),
        _record(row_fields),
    ]

    means = cohort_means(records)

    # sufficiency 19, 18, 18
    assert means["personal_resource.sufficiency"] == 18.33


def test_cohort_means_round_ties_up(row_fields):
    records = [_record(row_fields, cells={PERSONAL_RESOURCE: {7: "4"}})]
    records += [_record(row_fields) for _ in range(7)]

    means = cohort_means(records)

    # exhaustion 10 once and 9 seven times: 73 / 8 = 9.125
    assert means["personal_resource.exhaustion"] == 9.13
    # total 20 once and 21 seven times: 167 / 8 = 20.875
    assert means["personal_resource.total"] == 20.88


def test_cohort_levels(row_fields):
    first = _record(row_fields, fill={SHTEPA: "Так"})
    second = _record(row_fields, fill={SHTEPA: "Ні"})

    levels = cohort_levels(cohort_means([first, second]))

    assert levels[SHTEPA].level_class == NOT_DIAGNOSED
    assert levels[PERSONAL_RESOURCE].level_class == MEDIUM
    assert set(levels) == {SHTEPA, PERSONAL_RESOURCE, RYFF}


def test_scores_frame_columns(row_fields):
    records = [_record(row_fields, email="a@example.com"), _record(row_fields, email="b@example.com")]

    san = scores_frame(records, SAN)
    ryff = scores_frame(records, RYFF)

    assert list(san.columns) == ["Email", "Age", "Самопочуття", "Активність", "Настрій"]
    assert list(ryff.columns)[-2:] == ["Загалом", "Рівень"]
    assert ryff["Email"].tolist() == ["a@example.com", "b@example.com"]


def test_scores_frame_unknown_test():
    with pytest.raises(UnknownCategoryError):
        scores_frame([], "mmpi")


def test_means_frame_lists_every_field():
    means = cohort_means([])

    assert len(means_frame(means)) == len(MEAN_FIELDS)


def test_ryff_breakdown_shows_reversal(row_fields):
    record = _record(row_fields, fill={RYFF: "1"})

    rows = category_breakdown(record, RYFF, "relationships")

    assert [r.number for r in rows] == list(TESTS[RYFF].category("relationships").numbers)
    by_number = {r.number: r for r in rows}
    assert (by_number[1].raw, by_number[1].final, by_number[1].reversed) == (1, 1, False)
    assert (by_number[7].raw, by_number[7].final, by_number[7].reversed) == (1, 6, True)
    assert sum(r.final for r in rows) == record.ryff.category("relationships").score


def test_shtepa_breakdown_sums_to_category_score(row_fields):
    record = _record(row_fields, cells={SHTEPA: {2: "Так", 3: "Так", 9: "Ні"}})

    rows = category_breakdown(record, SHTEPA, "self_confidence")

    assert sum(r.final for r in rows) == record.shtepa.category("self_confidence").score
    assert len(breakdown_frame(rows)) == 8


def test_breakdown_unknown_names(row_fields):
    record = _record(row_fields)

    with pytest.raises(UnknownCategoryError):
        category_breakdown(record, "mmpi", "x")
    with pytest.raises(UnknownCategoryError):
        category_breakdown(record, RYFF, "happiness")

import dataclasses

import pytest

from psychodiag import config
from psychodiag.core.assembler import (
    assemble_respondent,
    load_csv_file,
    load_respondents,
    read_csv_file,
)
from psychodiag.core.decoders import SAN_MARKER
from psychodiag.core.definitions import BASIC_PH, RYFF, SAN, SHTEPA
from psychodiag.core.diagnostics import CollectingSink
from psychodiag.core.errors import UnsupportedFileError


def test_single_valid_row(csv_text, row_line):
    result = load_respondents(csv_text(row_line(email="a@example.com", age="25")))

    assert result.ok
    assert result.error is None
    assert len(result.records) == 1

    record = result.records[0]
    assert record.email == "a@example.com"
    assert record.age == "25"
    assert len(record.san_answers) == 30
    assert len(record.shtepa_answers) == 67
    assert len(record.basic_ph_answers) == 36
    assert len(record.personal_resource_answers) == 13
    assert len(record.ryff_answers) == 84
    assert record.san.category("wellbeing").score == 4.0
    assert record.personal_resource.total == 18 + 12 - 9


def test_header_only_input():
    result = load_respondents("Timestamp,Email,Age")

    assert result.records == ()
    assert result.error == config.NO_DATA_ROWS_MESSAGE


def test_empty_input():
    assert load_respondents("").error == config.NO_DATA_ROWS_MESSAGE
    assert load_respondents("\n\n  \n").error == config.NO_DATA_ROWS_MESSAGE


def test_short_row_is_skipped(csv_text, row_line, caplog):
    short = ",".join(["x"] * 232)
    text = csv_text(row_line(email="first@example.com"), short, row_line(email="third@example.com"))

    result = load_respondents(text)

    assert [r.email for r in result.records] == ["first@example.com", "third@example.com"]
    assert result.skipped_rows == [3]
    assert any("Skipping CSV row 3" in r.getMessage() for r in caplog.records)


def test_all_rows_short(csv_text):
    result = load_respondents(csv_text("a,b,c", "d,e,f"))

    assert result.records == ()
    assert result.skipped_rows == [2, 3]
    assert result.error == config.NO_VALID_ROWS_MESSAGE


def test_extra_columns_are_ignored(csv_text, row_line):
    result = load_respondents(csv_text(row_line() + ",extra,columns"))

    assert len(result.records) == 1
    assert len(result.records[0].ryff_answers) == 84


def test_windows_line_endings(row_line):
    text = "header\r\n" + row_line() + "\r\n"

    assert len(load_respondents(text).records) == 1


def test_decode_failures_keep_the_row_and_reach_the_sink(csv_text, row_line):
    sink = CollectingSink()
    line = row_line(email="z@example.com", cells={SAN: {1: "???"}, RYFF: {84: "не відповідаю"}})

    result = load_respondents(csv_text(line), sink=sink)

    assert len(result.records) == 1
    record = result.records[0]
    assert record.san_answers[0] == 4
    assert record.ryff_answers[83] == 3

    assert [(d.test, d.question) for d in result.diagnostics] == [("САН", 1), ("Ryff", 84)]
    assert sink.events == result.diagnostics
    assert all(d.respondent == "z@example.com" for d in result.diagnostics)


def test_quoted_cells_and_marker_values(csv_text, row_line):
    basic_ph_text = "Часто користуюся цим способом, щоб впоратися зі складною ситуацією"
    line = row_line(
        cells={
            SAN: {1: "2" + SAN_MARKER, 3: "2" + SAN_MARKER, 2: "3 (сильним)"},
            SHTEPA: {1: "Так"},
            BASIC_PH: {36: basic_ph_text},
        }
    )

    record = load_respondents(csv_text(line)).records[0]

    assert record.san_answers[0] == 6
    assert record.san_answers[2] == 2
    assert record.san_answers[1] == 7
    assert record.shtepa_answers[0] is True
    assert record.basic_ph_answers[35] == 4


def test_assemble_respondent_rejects_short_rows(row_fields):
    with pytest.raises(ValueError):
        assemble_respondent(row_fields()[:100])


def test_record_is_immutable(row_fields):
    record = assemble_respondent(row_fields(), CollectingSink())

    with pytest.raises(dataclasses.FrozenInstanceError):
        record.email = "other@example.com"


def test_read_csv_file_rejects_other_extensions(tmp_path):
    path = tmp_path / "answers.xlsx"
    path.write_text("x")

    with pytest.raises(UnsupportedFileError):
        read_csv_file(path)


def test_load_csv_file_with_bom(tmp_path, csv_text, row_line):
    path = tmp_path / "answers.CSV"
    path.write_text(csv_text(row_line(email="bom@example.com")), encoding="utf-8-sig")

    result = load_csv_file(path)

    assert [r.email for r in result.records] == ["bom@example.com"]


def test_malformed_row_among_valid_rows_is_excluded(csv_text, row_line):
    malformed = ",".join(["bad"] * 10)
    text = csv_text(
        row_line(email="1@example.com"),
        malformed,
        row_line(email="2@example.com"),
        row_line(email="3@example.com"),
    )

    result = load_respondents(text)

    assert [r.email for r in result.records] == ["1@example.com", "2@example.com", "3@example.com"]
    assert result.skipped_rows == [3]

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import logging

from psychodiag import config
from psychodiag.core.decoders import (
    decode_basic_ph,
    decode_personal_resource,
    decode_ryff,
    decode_san,
    decode_shtepa,
)
from psychodiag.core.definitions import (
    BASIC_PH,
    PERSONAL_RESOURCE,
    RYFF,
    SAN,
    SAN_REVERSED_QUESTIONS,
    SHTEPA,
    get_test,
)
from psychodiag.core.diagnostics import (
    CollectingSink,
    DecodeDiagnostic,
    DiagnosticSink,
    LoggingSink,
)
from psychodiag.core.errors import UnsupportedFileError
from psychodiag.core.scoring import (
    ScoreResult,
    score_basic_ph,
    score_personal_resource,
    score_ryff,
    score_san,
    score_shtepa,
)
from psychodiag.core.tokenizer import split_csv_line, split_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RespondentRecord:
    """
    One accepted CSV row: identity, decoded answers and per-test scores.

    Answer tuples are indexed by question number - 1 and always hold every
    question of their test; undecodable cells carry the decoder default.
    """
    timestamp: str
    email: str
    age: str

    san_answers: Tuple[int, ...]
    shtepa_answers: Tuple[bool, ...]
    basic_ph_answers: Tuple[int, ...]
    personal_resource_answers: Tuple[int, ...]
    ryff_answers: Tuple[int, ...]

    san: ScoreResult
    shtepa: ScoreResult
    basic_ph: ScoreResult
    personal_resource: ScoreResult
    ryff: ScoreResult

    def answers(self, test_key: str) -> tuple:
        return getattr(self, f"{test_key}_answers")

    def scores(self, test_key: str) -> ScoreResult:
        return getattr(self, test_key)


@dataclass
class LoadResult:
    """
    Outcome of one CSV load.

    error is set (and records is empty) when the input has no data rows or
    when every data row was rejected. skipped_rows holds the 1-based line
    numbers of rows rejected for having too few columns.
    """
    records: Tuple[RespondentRecord, ...] = ()
    skipped_rows: List[int] = field(default_factory=list)
    diagnostics: List[DecodeDiagnostic] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Row assembly
# ---------------------------------------------------------------------------

def _test_cells(fields: Sequence[str], test_key: str) -> Sequence[str]:
    test = get_test(test_key)
    return fields[test.offset:test.offset + test.question_count]


def decode_answers(fields: Sequence[str], respondent: str = "", sink: Optional[DiagnosticSink] = None) -> dict:
    """Decode the five answer blocks of one row, keyed by test key."""
    return {
        SAN: tuple(
            decode_san(raw, q in SAN_REVERSED_QUESTIONS, q, respondent, sink)
            for q, raw in enumerate(_test_cells(fields, SAN), start=1)
        ),
        SHTEPA: tuple(
            decode_shtepa(raw, q, respondent, sink)
            for q, raw in enumerate(_test_cells(fields, SHTEPA), start=1)
        ),
        BASIC_PH: tuple(
            decode_basic_ph(raw, q, respondent, sink)
            for q, raw in enumerate(_test_cells(fields, BASIC_PH), start=1)
        ),
        PERSONAL_RESOURCE: tuple(
            decode_personal_resource(raw, q, respondent, sink)
            for q, raw in enumerate(_test_cells(fields, PERSONAL_RESOURCE), start=1)
        ),
        RYFF: tuple(
            decode_ryff(raw, q, respondent, sink)
            for q, raw in enumerate(_test_cells(fields, RYFF), start=1)
        ),
    }


def assemble_respondent(fields: Sequence[str], sink: Optional[DiagnosticSink] = None) -> RespondentRecord:
    """
    Build one record from a tokenized row.

    The caller guarantees at least MIN_COLUMNS fields; extra trailing fields
    are ignored.
    """
    if len(fields) < config.MIN_COLUMNS:
        raise ValueError(f"Row has {len(fields)} fields, expected at least {config.MIN_COLUMNS}.")

    timestamp, email, age = fields[0], fields[1], fields[2]
    answers = decode_answers(fields, respondent=email, sink=sink)

    return RespondentRecord(
        timestamp=timestamp,
        email=email,
        age=age,
        san_answers=answers[SAN],
        shtepa_answers=answers[SHTEPA],
        basic_ph_answers=answers[BASIC_PH],
        personal_resource_answers=answers[PERSONAL_RESOURCE],
        ryff_answers=answers[RYFF],
        san=score_san(answers[SAN]),
        shtepa=score_shtepa(answers[SHTEPA]),
        basic_ph=score_basic_ph(answers[BASIC_PH]),
        personal_resource=score_personal_resource(answers[PERSONAL_RESOURCE]),
        ryff=score_ryff(answers[RYFF]),
    )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_respondents(text: str, sink: Optional[DiagnosticSink] = None) -> LoadResult:
    """
    Parse a whole CSV export into respondent records.

    The first non-blank line is the header and is skipped. Rows with fewer
    than MIN_COLUMNS fields are dropped with a warning. Decode failures never
    drop a row; they are collected on the result and passed on to `sink`
    (the logging sink when none is given).
    """
    lines = split_lines(text)
    if len(lines) < 2:
        logger.warning("CSV load rejected: %s", config.NO_DATA_ROWS_MESSAGE)
        return LoadResult(error=config.NO_DATA_ROWS_MESSAGE)

    collector = CollectingSink(forward_to=sink if sink is not None else LoggingSink())
    records: List[RespondentRecord] = []
    skipped: List[int] = []

    for line_no, line in enumerate(lines[1:], start=2):
        fields = split_csv_line(line)
        if len(fields) < config.MIN_COLUMNS:
            logger.warning(
                "Skipping CSV row %s: %s fields, expected at least %s",
                line_no,
                len(fields),
                config.MIN_COLUMNS,
            )
            skipped.append(line_no)
            continue
        records.append(assemble_respondent(fields, collector))

    logger.info(
        "Loaded %s respondent(s), skipped %s row(s), %s undecoded answer(s)",
        len(records),
        len(skipped),
        len(collector.events),
    )

    if not records:
        return LoadResult(
            skipped_rows=skipped,
            diagnostics=list(collector.events),
            error=config.NO_VALID_ROWS_MESSAGE,
        )

    return LoadResult(
        records=tuple(records),
        skipped_rows=skipped,
        diagnostics=list(collector.events),
    )


def read_csv_file(path: str | Path) -> str:
    """Read a CSV export as text. Only '.csv' files are accepted."""
    p = Path(path)
    if p.suffix.lower() != config.CSV_EXTENSION:
        raise UnsupportedFileError(f"Unsupported file type {p.suffix or '(none)'!r}: {p.name}; expected a CSV export.")
    return p.read_text(encoding=config.CSV_ENCODING)


def load_csv_file(path: str | Path, sink: Optional[DiagnosticSink] = None) -> LoadResult:
    logger.info("Loading CSV export from %s", path)
    return load_respondents(read_csv_file(path), sink=sink)

from __future__ import annotations

from typing import Dict, Optional

import pytest

from psychodiag import config
from psychodiag.core.definitions import BASIC_PH, PERSONAL_RESOURCE, RYFF, SAN, SHTEPA, TESTS

# Neutral cells that every decoder recognizes
DEFAULT_CELLS = {
    SAN: "0",
    SHTEPA: "Ні",
    BASIC_PH: "0",
    PERSONAL_RESOURCE: "3",
    RYFF: "3",
}


def _quote(cell: str) -> str:
    return f'"{cell}"' if config.CSV_DELIMITER in cell else cell


def build_fields(
    email: str = "respondent@example.com",
    age: str = "30",
    cells: Optional[Dict[str, Dict[int, str]]] = None,
    fill: Optional[Dict[str, str]] = None,
):
    """
    A full row of text cells. `cells` overrides single questions as
    {test key: {question number: text}}; `fill` overrides a test's default.
    """
    cells = cells or {}
    fill = fill or {}
    fields = ["2024/01/01 10:00:00", email, age]
    for test_key in (SAN, SHTEPA, BASIC_PH, PERSONAL_RESOURCE, RYFF):
        test = TESTS[test_key]
        overrides = cells.get(test_key, {})
        default = fill.get(test_key, DEFAULT_CELLS[test_key])
        fields.extend(overrides.get(q, default) for q in range(1, test.question_count + 1))
    return fields


def build_line(**kwargs) -> str:
    return config.CSV_DELIMITER.join(_quote(c) for c in build_fields(**kwargs))


HEADER = config.CSV_DELIMITER.join(
    ["Timestamp", "Email", "Age"] + [f"Q{i}" for i in range(1, config.MIN_COLUMNS - config.METADATA_COLUMNS + 1)]
)


@pytest.fixture
def row_fields():
    return build_fields


@pytest.fixture
def row_line():
    return build_line


@pytest.fixture
def csv_text():
    def _csv(*lines: str) -> str:
        return "\n".join((HEADER,) + lines)

    return _csv

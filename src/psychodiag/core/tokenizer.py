from __future__ import annotations

from typing import List

from psychodiag.config import CSV_DELIMITER, CSV_QUOTE


def split_lines(text: str) -> List[str]:
    """
    Split a CSV blob into its non-blank lines.

    Lines are separated by '\\n'; a trailing '\\r' is dropped so exports saved
    with Windows line endings behave the same. Lines consisting only of
    whitespace are discarded.
    """
    lines: List[str] = []
    for line in (text or "").split("\n"):
        line = line.rstrip("\r")
        if line.strip():
            lines.append(line)
    return lines


def split_csv_line(line: str, delimiter: str = CSV_DELIMITER, quote: str = CSV_QUOTE) -> List[str]:
    """
    Split one CSV line into trimmed field strings.

    Quote state toggles on every quote character and the quote characters
    themselves are dropped. A delimiter inside quotes is kept as text.
    There is no escaped-quote form: an unterminated quote swallows the
    remaining delimiters of the line.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == quote:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields

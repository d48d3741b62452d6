"""
Per-test answer decoders.

Each decoder turns one raw CSV cell into the test's answer value. Decoding
never fails outward: an unrecognized cell is replaced by the test's default
value and reported to a DiagnosticSink.

Text matching is expressed as ordered rule lists, evaluated top to bottom,
first match wins. Where one phrase is contained in another, the longer phrase
must come first; each list notes where that matters.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import re

from psychodiag.core.definitions import (
    BASIC_PH,
    PERSONAL_RESOURCE,
    RYFF,
    SAN,
    SHTEPA,
    TESTS,
)
from psychodiag.core.diagnostics import DecodeDiagnostic, DiagnosticSink, LoggingSink

# Marker appended to left-side САН values ("2ㅤ", "1ㅤ"). Any extra character
# next to the digit counts; this is the one the export uses.
SAN_MARKER = "ㅤ"

SAN_DEFAULT = 4
SHTEPA_DEFAULT = False
BASIC_PH_DEFAULT = 0
PERSONAL_RESOURCE_DEFAULT = 3
RYFF_DEFAULT = 3

_DEFAULT_SINK = LoggingSink()

_LEADING_INT_RE = re.compile(r"^[+-]?[0-9]+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")


@dataclass(frozen=True)
class Rule:
    value: object
    matches: Callable[[str], bool]
    phrases: Tuple[str, ...] = ()


def contains(value: object, *phrases: str) -> Rule:
    return Rule(value, lambda text: any(p in text for p in phrases), phrases)


def equals(value: object, *phrases: str) -> Rule:
    return Rule(value, lambda text: text in phrases, phrases)


def first_match(rules: Sequence[Rule], text: str) -> Optional[Rule]:
    for rule in rules:
        if rule.matches(text):
            return rule
    return None


def parse_leading_int(text: str) -> Optional[int]:
    """Integer prefix of the text ('4 - часто' -> 4), or None."""
    m = _LEADING_INT_RE.match(text.strip())
    if not m:
        return None
    return int(m.group(0))


def _fail(
    sink: Optional[DiagnosticSink],
    test_key: str,
    question: int,
    respondent: str,
    raw: str,
    reason: str,
    default,
):
    (sink or _DEFAULT_SINK).record(
        DecodeDiagnostic(
            test=TESTS[test_key].label,
            question=question,
            respondent=respondent,
            raw=raw,
            reason=reason,
            default=default,
        )
    )
    return default


# ---------------------------------------------------------------------------
# САН: bipolar 7-point scale
# ---------------------------------------------------------------------------

SAN_POSITIVE_KEYWORDS: Tuple[str, ...] = (
    "добре", "сильним", "активний", "рухливий", "веселий", "гарний",
    "працездатний", "сповнений сил", "швидкий", "дієвий", "щасливий",
    "життєрадісний", "розслаблений", "здоровий", "захоплений", "схвильований",
    "сповнений віри", "радісний", "добре відпочив", "свіжий", "збуджений",
    "бажаю працювати", "спокійний", "оптимістичний", "витривалий", "бадьорий",
    "розмірковувати легко", "уважний", "сповнений надій", "задоволений",
)

SAN_NEGATIVE_KEYWORDS: Tuple[str, ...] = (
    "погане", "слабким", "пасивний", "малорухливий", "сумний", "поганий",
    "малопрацездатний", "знесилений", "повільний", "бездіяльний", "нещасний",
    "похмурий", "напружений", "хворий", "безініціативний", "байдужий",
    "зневірений", "стомлений", "виснажений", "сонливий", "бажаю відпочити",
    "стурбований", "песимістичний", "маловитривалий", "млявий",
    "розмірковувати важко", "неуважний", "розчарований", "незадоволений",
)

# Several negative keywords contain a positive one ('незадоволений' /
# 'задоволений', 'малорухливий' / 'рухливий', 'неуважний' / 'уважний'), so
# both lists are merged and tried longest keyword first. This departs on
# purpose from the questionnaire form, which tries every positive keyword
# first and so never scores those negatives as 1.
SAN_EXTREME_RULES: Tuple[Rule, ...] = tuple(
    contains(value, keyword)
    for value, keyword in sorted(
        [(7, kw) for kw in SAN_POSITIVE_KEYWORDS] + [(1, kw) for kw in SAN_NEGATIVE_KEYWORDS],
        key=lambda item: len(item[1]),
        reverse=True,
    )
)

# Bare digit -> (value with marker, value without marker) on a regular
# question. A reversed question mirrors the value around the center (8 - v).
_SAN_SIDE_VALUES = {
    "1": (5, 3),
    "2": (6, 2),
}


def decode_san(
    raw: str,
    reversed_question: bool,
    question: int,
    respondent: str = "",
    sink: Optional[DiagnosticSink] = None,
) -> int:
    """
    Decode a САН cell to 1..7.

    "3 (добре)" -> 7 and "3 (погане)" -> 1 whatever the question direction.
    The middle values carry no text, only a digit and, on the left side of
    the printed scale, a marker character:

      regular question:  "2ㅤ"->6  "1ㅤ"->5  "0"->4  "1"->3  "2"->2
      reversed question: "2ㅤ"->2  "1ㅤ"->3  "0"->4  "1"->5  "2"->6

    A bare "3" and an extreme whose text matches no keyword both fall back
    to the center value 4.
    """
    normalized = (raw or "").strip()

    if normalized.startswith("3 (") or normalized.startswith("3("):
        rule = first_match(SAN_EXTREME_RULES, normalized.lower())
        if rule is not None:
            return int(rule.value)
        return _fail(sink, SAN, question, respondent, raw, "unknown-extreme", SAN_DEFAULT)

    digits = _NON_DIGIT_RE.sub("", normalized)
    has_marker = len(normalized) > len(digits) and len(digits) > 0

    if digits == "0":
        return 4

    if digits in _SAN_SIDE_VALUES:
        with_marker, without_marker = _SAN_SIDE_VALUES[digits]
        value = with_marker if has_marker else without_marker
        return 8 - value if reversed_question else value

    if digits == "3":
        return _fail(sink, SAN, question, respondent, raw, "bare-extreme", SAN_DEFAULT)

    return _fail(sink, SAN, question, respondent, raw, "unrecognized", SAN_DEFAULT)


# ---------------------------------------------------------------------------
# Штепа: Так / Ні
# ---------------------------------------------------------------------------

SHTEPA_RULES: Tuple[Rule, ...] = (
    equals(True, "так", "+"),
    equals(False, "ні", "-"),
)


def decode_shtepa(
    raw: str,
    question: int,
    respondent: str = "",
    sink: Optional[DiagnosticSink] = None,
) -> bool:
    rule = first_match(SHTEPA_RULES, (raw or "").strip().lower())
    if rule is not None:
        return bool(rule.value)
    return _fail(sink, SHTEPA, question, respondent, raw, "unrecognized", SHTEPA_DEFAULT)


# ---------------------------------------------------------------------------
# Basic Ph: frequency 0..6
# ---------------------------------------------------------------------------

_BASIC_PH_SUFFIX = " користуюся цим способом, щоб впоратися зі складною ситуацією"

BASIC_PH_FREQUENCIES: Tuple[str, ...] = (
    "ніколи не",
    "рідко",
    "іноді",
    "періодично",
    "часто",
    "майже завжди",
    "завжди",
)

BASIC_PH_EXACT_RULES: Tuple[Rule, ...] = tuple(
    equals(value, f"{frequency}{_BASIC_PH_SUFFIX}")
    for value, frequency in enumerate(BASIC_PH_FREQUENCIES)
)

# 'майже завжди' must precede 'завжди'
BASIC_PH_KEYWORD_RULES: Tuple[Rule, ...] = (
    contains(0, "ніколи"),
    contains(1, "рідко"),
    contains(2, "іноді"),
    contains(3, "періодично"),
    contains(4, "часто"),
    contains(5, "майже завжди"),
    contains(6, "завжди"),
)


def decode_basic_ph(
    raw: str,
    question: int,
    respondent: str = "",
    sink: Optional[DiagnosticSink] = None,
) -> int:
    normalized = (raw or "").strip().lower()

    rule = first_match(BASIC_PH_EXACT_RULES, normalized) or first_match(BASIC_PH_KEYWORD_RULES, normalized)
    if rule is not None:
        return int(rule.value)

    number = parse_leading_int(normalized)
    if number is not None and 0 <= number <= 6:
        return number

    return _fail(sink, BASIC_PH, question, respondent, raw, "unrecognized", BASIC_PH_DEFAULT)


# ---------------------------------------------------------------------------
# Особистісні ресурси: agreement 1..5
# ---------------------------------------------------------------------------

# Negated phrases are checked before the affirmative ones they do not contain
# but resemble ('повністю не погоджуюсь' before 'повністю погоджуюсь'). Each
# level also accepts the frequency wording of an older form of the
# questionnaire.
PERSONAL_RESOURCE_RULES: Tuple[Rule, ...] = (
    contains(1, "повністю не погоджуюсь", "повністю не погоджуюся", "майже ніколи"),
    contains(2, "частково не погоджусь", "частково не погоджуюсь", "частково не погоджуюся", "рідко"),
    contains(3, "важко визначитися", "час від часу"),
    contains(4, "частково погоджуюсь", "частково погоджуюся", "часто"),
    contains(5, "повністю погоджуюсь", "повністю погоджуюся", "майже завжди"),
)


def decode_personal_resource(
    raw: str,
    question: int,
    respondent: str = "",
    sink: Optional[DiagnosticSink] = None,
) -> int:
    normalized = (raw or "").strip().lower()

    rule = first_match(PERSONAL_RESOURCE_RULES, normalized)
    if rule is not None:
        return int(rule.value)

    number = parse_leading_int(normalized)
    if number is not None and 1 <= number <= 5:
        return number

    return _fail(sink, PERSONAL_RESOURCE, question, respondent, raw, "unrecognized", PERSONAL_RESOURCE_DEFAULT)


# ---------------------------------------------------------------------------
# Ryff: agreement 1..6
# ---------------------------------------------------------------------------

# 'повністю не згоден' before 'повністю згоден', 'де в чому не згоден'
# before 'де в чому згоден'.
RYFF_RULES: Tuple[Rule, ...] = (
    contains(1, "повністю не згоден"),
    contains(2, "здебільшого не згоден"),
    contains(3, "де в чому не згоден"),
    contains(4, "де в чому згоден"),
    contains(5, "швидше згоден"),
    contains(6, "повністю згоден"),
)


def decode_ryff(
    raw: str,
    question: int,
    respondent: str = "",
    sink: Optional[DiagnosticSink] = None,
) -> int:
    """Decode a Ryff cell to 1..6. Reversed items are flipped when scoring."""
    normalized = (raw or "").strip().lower()

    rule = first_match(RYFF_RULES, normalized)
    if rule is not None:
        return int(rule.value)

    number = parse_leading_int(normalized)
    if number is not None and 1 <= number <= 6:
        return number

    return _fail(sink, RYFF, question, respondent, raw, "unrecognized", RYFF_DEFAULT)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeDiagnostic:
    """
    One answer cell that could not be decoded.

    The decoder has already substituted its default value; this event is
    advisory and never stops processing.
    """
    test: str           # source test name, e.g. 'САН'
    question: int       # 1-based question number within the test
    respondent: str     # respondent identifier (the email column)
    raw: str            # cell text as read from the CSV
    reason: str         # short machine-readable cause, e.g. 'unrecognized'
    default: object     # value substituted for the cell


class DiagnosticSink:
    """
    Receiver of decode-failure events.

    Subclasses override record(); the base implementation drops the event.
    """

    def record(self, event: DecodeDiagnostic) -> None:
        return None


class NullSink(DiagnosticSink):
    """Drops every event."""


class LoggingSink(DiagnosticSink):
    """Default sink: forwards every decode failure to the module logger."""

    def record(self, event: DecodeDiagnostic) -> None:
        logger.warning(
            "Unrecognized %s answer for Q%s (%s): %r [%s], using %r",
            event.test,
            event.question,
            event.respondent,
            event.raw,
            event.reason,
            event.default,
        )


@dataclass
class CollectingSink(DiagnosticSink):
    """
    Keeps every event in memory and optionally forwards it to another sink.

    Used by the assembler to hand the diagnostics of one load back to the
    caller, and by tests.
    """
    forward_to: Optional[DiagnosticSink] = None
    events: List[DecodeDiagnostic] = field(default_factory=list)

    def record(self, event: DecodeDiagnostic) -> None:
        self.events.append(event)
        if self.forward_to is not None:
            self.forward_to.record(event)

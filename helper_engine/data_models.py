"""Data models for the error retention core.

The models are standard-library-only (dataclasses) so the core stays free of
GUI and third-party imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

ISO_8601_UTC_MS_FORMAT = "%Y-%m-%dT%H:%M:%S"


def millis_to_iso_utc(timestamp_ms: int) -> str:
    """Render an epoch-millisecond timestamp as ISO-8601 UTC with milliseconds.

    Parameters
    ----------
    timestamp_ms
        Milliseconds since the Unix epoch.

    Returns
    -------
    str
        For example ``2026-01-01T00:00:00.123Z``.
    """

    seconds, millis = divmod(timestamp_ms, 1000)
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return f"{dt.strftime(ISO_8601_UTC_MS_FORMAT)}.{millis:03d}Z"


@dataclass(frozen=True, slots=True)
class ResolvedFailure:
    """The text and optional stack recovered from a raw failure value.

    Attributes
    ----------
    text
        Untrimmed text the normalizer will parse.
    stack_trace
        Captured stack for structured failures, otherwise None.
    """

    text: str
    stack_trace: str | None = None


@dataclass(frozen=True, slots=True)
class FailureRecord:
    """One entry of the failure history.

    Attributes
    ----------
    message
        Normalized, human-readable text.
    timestamp
        Milliseconds since the Unix epoch at ingestion. Used as a removal key
        and sort key; it is not guaranteed unique.
    sequence
        Per-log monotonically increasing identifier. Unique within one log.
    code
        Reserved machine code. Not populated by the extraction heuristic.
    stack_trace
        Present only when the input carried a captured stack.
    context
        Optional label supplied by the call site, kept for inspection only.
    """

    message: str
    timestamp: int
    sequence: int
    code: str | None = None
    stack_trace: str | None = None
    context: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe mapping."""

        return {
            "message": self.message,
            "code": self.code,
            "timestamp": self.timestamp,
            "timestamp_utc": millis_to_iso_utc(self.timestamp),
            "sequence": self.sequence,
            "stack_trace": self.stack_trace,
            "context": self.context,
        }

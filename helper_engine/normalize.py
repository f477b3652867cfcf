"""
Failure normalization.

Reduces a failure value of unknown shape to one display string.

Extraction rules
----------------
Applied to the trimmed text as a strict sequential chain; the first rule that
matches returns:

1. Empty text yields the ``errors.unknown`` fallback key.
2. Text after the last ``desc=`` marker, trimmed. An empty result is returned
   as-is and does not fall through to rule 3.
3. Text after the last ``:``, trimmed, when non-empty.
4. The trimmed text unchanged.

Notes
-----
Everything in this module is pure and never raises for any input value.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable, Mapping

from helper_engine.data_models import ResolvedFailure

Translator = Callable[[str], str]

UNKNOWN_ERROR_KEY = "errors.unknown"
DESC_MARKER = "desc="


def _format_exception(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _coerce_text(value: object) -> str:
    try:
        return str(value)
    except Exception:
        pass
    try:
        return repr(value)
    except Exception:
        return ""


def resolve_failure(value: object) -> ResolvedFailure:
    """
    Recover the text and optional stack of a failure value.

    Parameters
    ----------
    value:
        A string, an exception, a mapping with a string ``"message"`` key, or
        anything else.

    Returns
    -------
    ResolvedFailure
        Text to parse plus a stack trace for structured inputs.
    """
    if isinstance(value, str):
        return ResolvedFailure(text=value)

    if isinstance(value, BaseException):
        try:
            stack = _format_exception(value)
        except Exception:
            stack = f"{type(value).__name__}"
        return ResolvedFailure(text=_coerce_text(value), stack_trace=stack)

    if isinstance(value, Mapping):
        message = value.get("message")
        if isinstance(message, str):
            stack = value.get("stack")
            return ResolvedFailure(
                text=message,
                stack_trace=stack if isinstance(stack, str) else None,
            )

    return ResolvedFailure(text=_coerce_text(value))


def parse_failure_text(text: str, *, translate: Translator | None = None) -> str:
    """
    Apply the extraction chain to already-resolved text.

    Parameters
    ----------
    text:
        Raw failure text.
    translate:
        Optional lookup applied to the fallback key when the text is empty.

    Returns
    -------
    str
        The extracted display message.
    """
    trimmed = text.strip()

    if not trimmed:
        if translate is None:
            return UNKNOWN_ERROR_KEY
        try:
            localized = translate(UNKNOWN_ERROR_KEY)
        except Exception:
            return UNKNOWN_ERROR_KEY
        return localized or UNKNOWN_ERROR_KEY

    desc_index = trimmed.rfind(DESC_MARKER)
    if desc_index != -1:
        return trimmed[desc_index + len(DESC_MARKER):].strip()

    colon_index = trimmed.rfind(":")
    if colon_index != -1:
        extracted = trimmed[colon_index + 1:].strip()
        if extracted:
            return extracted

    return trimmed


def normalize_failure(value: object, *, translate: Translator | None = None) -> str:
    """
    Convert any failure value into a single display message.

    Examples
    --------
    >>> normalize_failure("code=500 desc=server error")
    'server error'
    >>> normalize_failure("Network: Connection failed: timed out")
    'timed out'
    >>> normalize_failure("   ")
    'errors.unknown'
    """
    return parse_failure_text(resolve_failure(value).text, translate=translate)

"""
Diagnostic logging for the configuration helper.

Debug mode mirrors a development build: when enabled, every ingested failure is
echoed to the ``helper_engine.diagnostics`` logger together with its context
label. Emission is fire-and-forget; it never raises into the caller.
"""

from __future__ import annotations

import logging
import os
import sys

DEBUG_ENV_VAR = "CONFHELPER_DEBUG"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_TRUTHY = {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


def debug_enabled() -> bool:
    """
    Return True when debug mode is switched on through the environment.

    Returns
    -------
    bool
        True if ``CONFHELPER_DEBUG`` is one of ``1``, ``true``, ``yes``, ``on``.
    """
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in _TRUTHY


def configure_logging(*, debug: bool) -> None:
    """
    Install a stderr handler on the root logger.

    Parameters
    ----------
    debug:
        Log at DEBUG when True, otherwise WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def emit_failure(raw: object, context: str | None = None) -> None:
    """
    Echo a raw failure value to the diagnostics logger.

    Parameters
    ----------
    raw:
        The failure value exactly as the call site passed it.
    context:
        Optional label naming the call site.
    """
    label = f" [{context}]" if context else ""
    try:
        if isinstance(raw, BaseException):
            logger.error(
                "[Error Handler]%s: %r",
                label,
                raw,
                exc_info=(type(raw), raw, raw.__traceback__),
            )
        else:
            logger.error("[Error Handler]%s: %r", label, raw)
    except Exception:
        # Diagnostics must never break ingestion.
        return

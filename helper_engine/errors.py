"""
Domain exceptions for the configuration helper.

Notes
-----
Normalization and ingestion never raise. The exceptions here cover programming
order defects and failures at the outer boundaries (host service, settings, CLI).
"""

from __future__ import annotations


class HelperError(RuntimeError):
    """Base exception for all configuration helper domain failures."""


class InitializationOrderError(HelperError):
    """Raised when a shared instance is read before its setup() was called."""


class HostRejectedError(HelperError):
    """
    Raised when the host service rejects a request.

    The message is the host's own text, which commonly follows the
    ``code=... desc=...`` or colon-chained conventions.
    """


class ServiceLoadError(HelperError):
    """Raised when a host service factory cannot be resolved or constructed."""


class SettingsError(HelperError):
    """Raised when no settings location can be resolved."""

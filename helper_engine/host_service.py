"""
Host service boundary and the controller that calls it.

The host service performs the real work (path checks, applying or clearing a
configuration bundle). This package only defines the request/response shape
and routes every rejection through the shared error log.

Notes
-----
Host implementations may raise any exception; HostRejectedError is the
conventional one. Rejection text commonly follows the ``code=... desc=...`` or
colon-chained conventions, which the normalizer reduces to the human part.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from helper_engine.error_log import ErrorLog
from helper_engine.paths import sanitize_path
from helper_engine.shared import get_error_log

BUNDLE_PATH_PATTERN = re.compile(r"^[A-Za-z0-9:\\/\s_\-.]+$")

INSTALL_PATH_LABEL = "Installation path"
BUNDLE_PATH_LABEL = "Configuration bundle"

MSG_EMPTY_PATHS = "Both paths are required"
MSG_EMPTY_INSTALL_PATH = "Installation path is required"
MSG_INVALID_BUNDLE_PATH = "Configuration bundle path contains unsupported characters"
MSG_PATH_NOT_EXIST = "{label} does not exist"


@runtime_checkable
class HostService(Protocol):
    """
    Operations offered by the host-side configuration service.

    Implementations signal a refused request by raising HostRejectedError,
    conventionally with a ``code=<n> desc=<text>`` message so that only the
    description reaches the user. Any other exception is also recorded.
    """

    def path_exists(self, path: str) -> bool:
        """Return whether ``path`` exists on the host."""
        ...

    def submit_paths(self, install_path: str, bundle_path: str) -> str:
        """Apply the bundle at ``bundle_path`` to the installation. Returns a status line."""
        ...

    def clear_config(self, install_path: str) -> str:
        """Remove previously applied configuration. Returns a status line."""
        ...


@dataclass(frozen=True, slots=True)
class ActionResult:
    """
    Outcome of a controller action.

    Attributes
    ----------
    ok:
        True when the host accepted the request.
    message:
        Host status line on success, normalized failure message otherwise.
    """

    ok: bool
    message: str


class ConfigController:
    """
    Validates user input, calls the host service, and records failures.

    Parameters
    ----------
    service:
        The host service.
    error_log:
        Log receiving failures. Defaults to the shared error log, which must
        already be set up.
    """

    def __init__(self, service: HostService, *, error_log: ErrorLog | None = None) -> None:
        self._service = service
        self._error_log = error_log

    @property
    def error_log(self) -> ErrorLog:
        return self._error_log if self._error_log is not None else get_error_log()

    def submit(self, install_path: str, bundle_path: str) -> ActionResult:
        install = sanitize_path(install_path)
        bundle = sanitize_path(bundle_path)

        if not install or not bundle:
            return self._fail(MSG_EMPTY_PATHS, "submit")
        if not BUNDLE_PATH_PATTERN.match(bundle):
            return self._fail(MSG_INVALID_BUNDLE_PATH, "submit")

        try:
            for label, path in ((INSTALL_PATH_LABEL, install), (BUNDLE_PATH_LABEL, bundle)):
                if not self._service.path_exists(path):
                    return self._fail(MSG_PATH_NOT_EXIST.format(label=label), "submit")
            status = self._service.submit_paths(install, bundle)
        except Exception as exc:
            return self._fail(exc, "submit")
        return ActionResult(ok=True, message=status)

    def clear(self, install_path: str) -> ActionResult:
        install = sanitize_path(install_path)
        if not install:
            return self._fail(MSG_EMPTY_INSTALL_PATH, "clear")

        try:
            status = self._service.clear_config(install)
        except Exception as exc:
            return self._fail(exc, "clear")
        return ActionResult(ok=True, message=status)

    def _fail(self, failure: object, context: str) -> ActionResult:
        return ActionResult(ok=False, message=self.error_log.ingest(failure, context=context))

"""
Release and about information.

The host may also answer "is there a newer release?" and "what am I running?".
UpdateService is that boundary. GitHubReleaseChecker is a ready-made
implementation backed by the GitHub releases API, and UpdateController is the
call site that records failures in the error log.

Notes
-----
A failed update check is never fatal: the controller records it under the
``update`` context and reports "no update".
"""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import requests

from helper_engine.error_log import ErrorLog
from helper_engine.errors import HostRejectedError
from helper_engine.shared import get_error_log

APP_NAME = "Configuration Helper"
APP_VERSION = "0.1.0"

GITHUB_WEB = "https://github.com"
GITHUB_API = "https://api.github.com"
HTTP_TIMEOUT_SECONDS = 10.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AssetInfo:
    """One downloadable file attached to a release."""

    name: str
    download_url: str
    size: int


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    """
    A published release.

    Attributes
    ----------
    version:
        Tag with any leading ``v`` removed.
    published_at:
        Publication time as reported by the release host.
    html_url:
        Human-facing release page.
    body:
        Release notes.
    assets:
        Downloadable files.
    """

    version: str
    published_at: str
    html_url: str
    body: str
    assets: tuple[AssetInfo, ...] = ()


@dataclass(frozen=True, slots=True)
class UpdateCheckResult:
    has_update: bool
    release: ReleaseInfo | None = None

    @staticmethod
    def none() -> "UpdateCheckResult":
        return UpdateCheckResult(has_update=False, release=None)


@dataclass(frozen=True, slots=True)
class Developer:
    name: str
    url: str


@dataclass(frozen=True, slots=True)
class AboutInfo:
    """Application identity shown in the About dialog."""

    app_name: str
    version: str
    python_version: str
    repo_url: str
    developers: tuple[Developer, ...] = field(default_factory=tuple)


@runtime_checkable
class UpdateService(Protocol):
    """Release and identity queries offered by the host."""

    def check_for_updates(self) -> UpdateCheckResult:
        """Compare the running version with the latest published release."""
        ...

    def get_about_info(self) -> AboutInfo:
        """Describe the running application."""
        ...

    def convert_to_accessible_url(self, original_url: str) -> str:
        """Rewrite a GitHub URL to a reachable mirror, or return it unchanged."""
        ...


def _leading_number(part: str) -> int:
    digits = ""
    for ch in part:
        if not ch.isdigit():
            break
        digits += ch
    return int(digits) if digits else 0


def compare_versions(v1: str, v2: str) -> int:
    """
    Compare dotted version strings.

    Only the leading digits of each component count, so ``1.2.0-rc1`` equals
    ``1.2.0``. Missing components are treated as zero.

    Returns
    -------
    int
        1 if ``v1`` is newer, -1 if older, 0 if equal.
    """
    parts1 = v1.strip().removeprefix("v").split(".")
    parts2 = v2.strip().removeprefix("v").split(".")

    for i in range(max(len(parts1), len(parts2))):
        n1 = _leading_number(parts1[i]) if i < len(parts1) else 0
        n2 = _leading_number(parts2[i]) if i < len(parts2) else 0
        if n1 != n2:
            return 1 if n1 > n2 else -1
    return 0


def parse_release(payload: dict[str, Any]) -> ReleaseInfo:
    """Convert a GitHub ``releases/latest`` payload into a ReleaseInfo."""
    assets = tuple(
        AssetInfo(
            name=str(a.get("name", "")),
            download_url=str(a.get("browser_download_url", "")),
            size=int(a.get("size", 0) or 0),
        )
        for a in payload.get("assets") or ()
        if isinstance(a, dict)
    )
    return ReleaseInfo(
        version=str(payload.get("tag_name", "")).removeprefix("v"),
        published_at=str(payload.get("published_at", "")),
        html_url=str(payload.get("html_url", "")),
        body=str(payload.get("body") or ""),
        assets=assets,
    )


class GitHubReleaseChecker:
    """
    UpdateService backed by the GitHub releases API.

    Parameters
    ----------
    repo:
        Repository as ``owner/name``.
    current_version:
        Version of the running application.
    mirrors:
        Web hosts tried in order by ``accessible_mirror``. The first entry is
        also the fallback when none answers.
    session:
        HTTP session. A new requests.Session is created when omitted.
    """

    def __init__(
        self,
        repo: str,
        *,
        current_version: str = APP_VERSION,
        mirrors: tuple[str, ...] = (GITHUB_WEB,),
        session: requests.Session | None = None,
    ) -> None:
        owner, sep, name = repo.strip().partition("/")
        if not sep or not owner or not name:
            raise ValueError(f"Repository must look like owner/name, got {repo!r}")
        if not mirrors:
            raise ValueError("At least one mirror is required")
        self._repo = f"{owner}/{name}"
        self._current_version = current_version
        self._mirrors = mirrors
        self._session = requests.Session() if session is None else session

    def fetch_latest_release(self) -> ReleaseInfo | None:
        """
        Fetch the latest published release.

        Returns
        -------
        ReleaseInfo | None
            None when the repository has no release yet.

        Raises
        ------
        HostRejectedError
            If the API answers with an unexpected status or body.
        requests.RequestException
            On transport failures.
        """
        url = f"{GITHUB_API}/repos/{self._repo}/releases/latest"
        response = self._session.get(url, timeout=HTTP_TIMEOUT_SECONDS)

        if response.status_code == 404:
            logger.info("No release published for %s", self._repo)
            return None
        if response.status_code != 200:
            raise HostRejectedError(
                f"code={response.status_code} desc=Release API returned status {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise HostRejectedError("code=502 desc=Release API returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise HostRejectedError("code=502 desc=Release API returned an unexpected payload")
        return parse_release(payload)

    def check_for_updates(self) -> UpdateCheckResult:
        release = self.fetch_latest_release()
        if release is None:
            return UpdateCheckResult.none()
        has_update = compare_versions(release.version, self._current_version) > 0
        logger.info(
            "Update check: latest=%s current=%s has_update=%s",
            release.version,
            self._current_version,
            has_update,
        )
        return UpdateCheckResult(has_update=has_update, release=release)

    def get_about_info(self) -> AboutInfo:
        return AboutInfo(
            app_name=APP_NAME,
            version=self._current_version,
            python_version=platform.python_version(),
            repo_url=f"{GITHUB_WEB}/{self._repo}",
        )

    def accessible_mirror(self) -> str:
        """Return the first mirror answering a HEAD request with 200, else the first mirror."""
        for mirror in self._mirrors:
            try:
                response = self._session.head(mirror, timeout=HTTP_TIMEOUT_SECONDS)
            except requests.RequestException as exc:
                logger.debug("Mirror %s unreachable: %s", mirror, exc)
                continue
            if response.status_code == 200:
                return mirror
        logger.warning("No mirror reachable, using %s", self._mirrors[0])
        return self._mirrors[0]

    def convert_to_accessible_url(self, original_url: str) -> str:
        if not original_url.startswith(GITHUB_WEB):
            return original_url
        mirror = self.accessible_mirror()
        if mirror == GITHUB_WEB:
            return original_url
        return mirror + original_url[len(GITHUB_WEB):]


class UpdateController:
    """
    Calls an UpdateService and records failures in the error log.

    Parameters
    ----------
    service:
        The update service.
    error_log:
        Log receiving failures. Defaults to the shared error log.
    """

    def __init__(self, service: UpdateService, *, error_log: ErrorLog | None = None) -> None:
        self._service = service
        self._error_log = error_log

    @property
    def error_log(self) -> ErrorLog:
        return self._error_log if self._error_log is not None else get_error_log()

    def check(self) -> UpdateCheckResult:
        """Check for a newer release; any failure yields "no update"."""
        try:
            return self._service.check_for_updates()
        except Exception as exc:
            self.error_log.ingest(exc, context="update")
            return UpdateCheckResult.none()

    def about(self) -> AboutInfo | None:
        """Return about information, or None when the service failed."""
        try:
            return self._service.get_about_info()
        except Exception as exc:
            self.error_log.ingest(exc, context="about")
            return None

    def accessible_url(self, original_url: str) -> str:
        """Return a reachable form of ``original_url``, or the URL itself on failure."""
        try:
            return self._service.convert_to_accessible_url(original_url)
        except Exception as exc:
            self.error_log.ingest(exc, context="update")
            return original_url

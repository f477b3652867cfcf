"""
Command-line entry point for the configuration helper.

Notes
-----
The CLI is intentionally thin. It parses arguments, configures logging, sets up
the shared error log, resolves the host service, and hands over to the GUI.

Host service
------------
``--service`` names a factory as ``package.module:attribute``. The attribute is
called with no arguments and must return an object implementing HostService.

Updates
-------
A host that also implements UpdateService answers About and update checks
itself. Otherwise ``--release-repo owner/name`` enables the GitHub release
checker. With neither, the About and update buttons stay disabled.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

from gui.messages import translate
from helper_engine.diagnostics import configure_logging, debug_enabled
from helper_engine.error_log import ErrorLog
from helper_engine.errors import ServiceLoadError
from helper_engine.host_service import HostService
from helper_engine.shared import setup_error_log
from helper_engine.updates import GitHubReleaseChecker, UpdateService

EXIT_SERVICE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="confhelper",
        description="Configuration Helper",
    )
    parser.add_argument(
        "--service",
        required=True,
        help="Host service factory as 'package.module:attribute'.",
    )
    parser.add_argument(
        "--data-root",
        type=Path,
        default=None,
        help="Override the settings directory. If omitted, defaults are used.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Echo every recorded failure to stderr (also enabled by CONFHELPER_DEBUG).",
    )
    parser.add_argument(
        "--release-repo",
        default=None,
        help="GitHub repository (owner/name) checked for new releases.",
    )
    return parser


def load_service(spec: str) -> HostService:
    """
    Resolve and construct a host service from a ``module:attribute`` spec.

    Raises
    ------
    ServiceLoadError
        If the spec is malformed, the import fails, or the result does not
        implement HostService.
    """
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name.strip() or not attr.strip():
        raise ServiceLoadError(f"Invalid service spec {spec!r}, expected a module and an attribute joined by a colon")

    try:
        module = importlib.import_module(module_name.strip())
    except ImportError as exc:
        raise ServiceLoadError(f"Cannot import service module: {exc}") from exc

    factory = getattr(module, attr.strip(), None)
    if factory is None or not callable(factory):
        raise ServiceLoadError(f"Service factory {attr.strip()!r} not found in {module_name.strip()!r}")

    try:
        service = factory()
    except Exception as exc:
        raise ServiceLoadError(f"Service factory failed: {exc}") from exc

    if not isinstance(service, HostService):
        raise ServiceLoadError(f"Service built by {attr.strip()!r} does not implement HostService")
    return service


def resolve_updates(service: HostService, release_repo: str | None) -> UpdateService | None:
    """
    Pick the update service for the GUI.

    The host itself wins when it implements UpdateService. Otherwise a
    GitHubReleaseChecker is built for ``release_repo``.

    Raises
    ------
    ServiceLoadError
        If ``release_repo`` is not an ``owner/name`` pair.
    """
    if isinstance(service, UpdateService):
        return service
    if not release_repo:
        return None
    try:
        return GitHubReleaseChecker(release_repo)
    except ValueError as exc:
        raise ServiceLoadError(f"Invalid release repository {release_repo!r}, expected owner/name") from exc


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Parameters
    ----------
    argv:
        Optional argument vector. If None, argparse uses sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    debug = bool(args.debug) or debug_enabled()
    configure_logging(debug=debug)

    error_log = setup_error_log(lambda: ErrorLog(translate=translate, debug=debug))
    try:
        service = load_service(args.service)
        updates = resolve_updates(service, args.release_repo)
    except ServiceLoadError as exc:
        print(f"ERROR: {error_log.ingest(exc, context='service')}", file=sys.stderr)
        return EXIT_SERVICE_ERROR

    from gui.app import run_gui

    return run_gui(service, updates=updates, data_root=args.data_root, debug=debug)

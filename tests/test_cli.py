from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from confhelper.cli import EXIT_SERVICE_ERROR, build_parser, load_service, main, resolve_updates
from helper_engine.errors import ServiceLoadError
from helper_engine.host_service import HostService
from helper_engine.shared import get_error_log, reset_error_log
from helper_engine.updates import AboutInfo, GitHubReleaseChecker, UpdateCheckResult

SERVICE_MODULE = '''
class _Service:
    def path_exists(self, path):
        return True

    def submit_paths(self, install_path, bundle_path):
        return "applied"

    def clear_config(self, install_path):
        return "cleared"


def make_service():
    return _Service()


def make_nothing():
    return object()


def explode():
    raise RuntimeError("host offline")
'''


@pytest.fixture
def service_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    name = "fake_host_service_mod"
    (tmp_path / f"{name}.py").write_text(SERVICE_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


@pytest.fixture(autouse=True)
def _fresh_error_log() -> Iterator[None]:
    reset_error_log()
    yield
    reset_error_log()


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["--service", "pkg.mod:factory"])

    assert getattr(args, "service") == "pkg.mod:factory"
    assert getattr(args, "data_root") is None
    assert getattr(args, "debug") is False
    assert getattr(args, "release_repo") is None


def test_parser_accepts_data_root_and_debug() -> None:
    args = build_parser().parse_args(["--service", "m:f", "--data-root", "/tmp/x", "--debug"])

    assert getattr(args, "data_root") == Path("/tmp/x")
    assert getattr(args, "debug") is True


def test_parser_requires_service() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_load_service_builds_host_service(service_module: str) -> None:
    service = load_service(f"{service_module}:make_service")
    assert isinstance(service, HostService)
    assert service.submit_paths("/a", "/b") == "applied"


@pytest.mark.parametrize("spec", ["no_colon", ":attr", "module:"])
def test_load_service_rejects_malformed_spec(spec: str) -> None:
    with pytest.raises(ServiceLoadError, match="Invalid service spec"):
        load_service(spec)


def test_load_service_reports_missing_module() -> None:
    with pytest.raises(ServiceLoadError, match="Cannot import service module"):
        load_service("definitely_not_a_module_xyz:make")


def test_load_service_reports_missing_attribute(service_module: str) -> None:
    with pytest.raises(ServiceLoadError, match="not found"):
        load_service(f"{service_module}:missing")


def test_load_service_rejects_non_service(service_module: str) -> None:
    with pytest.raises(ServiceLoadError, match="does not implement HostService"):
        load_service(f"{service_module}:make_nothing")


def test_load_service_wraps_factory_failure(service_module: str) -> None:
    with pytest.raises(ServiceLoadError, match="host offline"):
        load_service(f"{service_module}:explode")


def test_main_reports_service_failure_and_records_it(
    service_module: str,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("confhelper.cli.configure_logging", lambda **_kwargs: None)

    code = main(["--service", f"{service_module}:explode"])

    assert code == EXIT_SERVICE_ERROR
    assert "ERROR: host offline" in capsys.readouterr().err
    latest = get_error_log().latest()
    assert latest is not None
    assert latest.context == "service"


def test_parser_accepts_release_repo() -> None:
    args = build_parser().parse_args(["--service", "m:f", "--release-repo", "owner/tool"])

    assert getattr(args, "release_repo") == "owner/tool"


class _HostWithUpdates:
    def path_exists(self, path: str) -> bool:
        return True

    def submit_paths(self, install_path: str, bundle_path: str) -> str:
        return "applied"

    def clear_config(self, install_path: str) -> str:
        return "cleared"

    def check_for_updates(self) -> UpdateCheckResult:
        return UpdateCheckResult.none()

    def get_about_info(self) -> AboutInfo:
        return AboutInfo(app_name="Host", version="1.0", python_version="3", repo_url="")

    def convert_to_accessible_url(self, original_url: str) -> str:
        return original_url


def test_resolve_updates_prefers_host_that_answers_updates() -> None:
    host = _HostWithUpdates()

    assert resolve_updates(host, "owner/tool") is host


def test_resolve_updates_builds_release_checker(service_module: str) -> None:
    service = load_service(f"{service_module}:make_service")

    assert isinstance(resolve_updates(service, "owner/tool"), GitHubReleaseChecker)
    assert resolve_updates(service, None) is None


def test_main_rejects_malformed_release_repo(
    service_module: str,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("confhelper.cli.configure_logging", lambda **_kwargs: None)

    code = main(["--service", f"{service_module}:make_service", "--release-repo", "not-a-repo"])

    assert code == EXIT_SERVICE_ERROR
    assert "Invalid release repository" in capsys.readouterr().err

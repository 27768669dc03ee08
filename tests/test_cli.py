"""Unit tests for the CLI module (autoupdate_bot.cli.main)."""

from __future__ import annotations

import json
import pytest
from unittest.mock import patch, MagicMock

from autoupdate_bot.cli.main import (
    build_parser,
    validate_repo_path,
    resolve_settings,
    create_loop,
    format_summary_json,
    main,
    EXIT_SUCCESS,
    EXIT_INVALID_INPUT,
    EXIT_API_ERROR,
    EXIT_ORCHESTRATOR_ERROR,
    EXIT_EXECUTION_ERROR,
    EXIT_UNEXPECTED,
    EXIT_KEYBOARD_INTERRUPT,
)
from autoupdate_bot.api.exceptions import ApiError
from autoupdate_bot.config import AutoUpdateSettings, ConfigurationError
from autoupdate_bot.ecosystems.exceptions import UnsupportedEcosystemError
from autoupdate_bot.execution.exceptions import (
    BaselineTestFailureError,
    FileRestoreError,
    RevisionLookupError,
)
from autoupdate_bot.models import (
    LoopStatus,
    LoopSummary,
    UpdateSetResult,
    UpdateSetState,
)
from autoupdate_bot.orchestrator.exceptions import UnknownRevisionError
from autoupdate_bot.orchestrator.loop import LoopController


_ENV_VARS = [
    "GEMNASIUM_API_ENDPOINT",
    "GEMNASIUM_TOKEN",
    "GEMNASIUM_PROJECT_SLUG",
    "GEMNASIUM_TESTSUITE",
    "AUTOUPDATE_MAX_DURATION",
    "REVISION",
    "BRANCH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test with none of the tool's environment variables set."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _argv(tmp_path, *extra: str) -> list[str]:
    return ["--project", "acme/widget", "--repo-path", str(tmp_path), *extra, "--", "pytest", "-x"]


def _summary(status: LoopStatus = LoopStatus.DONE) -> LoopSummary:
    return LoopSummary(
        status=status,
        results=[
            UpdateSetResult(update_set_id=1, project_slug="acme/widget", state=UpdateSetState.TEST_PASSED),
            UpdateSetResult(update_set_id=2, project_slug="acme/widget", state=UpdateSetState.INVALID),
        ],
        elapsed_seconds=12.5,
    )


@pytest.fixture()
def patched_vcs():
    with patch("autoupdate_bot.cli.main.get_current_revision", return_value="abc123") as rev, \
            patch("autoupdate_bot.cli.main.get_current_branch", return_value="main") as branch:
        yield {"revision": rev, "branch": branch}


# ---------------------------------------------------------------------------
# TestBuildParser
# ---------------------------------------------------------------------------
class TestBuildParser:
    def test_parser_test_suite_after_separator(self):
        args = build_parser().parse_args(["--project", "p", "--", "pytest", "-x", "--lf"])
        assert args.test_suite == ["pytest", "-x", "--lf"]
        assert args.project == "p"

    def test_parser_all_optional_flags(self):
        args = build_parser().parse_args([
            "--project", "acme/widget",
            "--repo-path", "/tmp",
            "--max-duration", "90",
            "--api-endpoint", "https://gemnasium.internal/v1",
            "--check-baseline",
            "--output-json",
            "--dry-run",
            "--verbose",
            "make", "test",
        ])
        assert args.max_duration == 90.0
        assert args.api_endpoint == "https://gemnasium.internal/v1"
        assert args.check_baseline is True
        assert args.output_json is True
        assert args.dry_run is True
        assert args.verbose is True
        assert args.test_suite == ["make", "test"]

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.test_suite == []
        assert args.repo_path == "."
        assert args.max_duration is None
        assert args.check_baseline is False
        assert args.output_json is False
        assert args.dry_run is False

    def test_parser_no_api_key_flags(self):
        args = build_parser().parse_args([])
        assert not hasattr(args, "api_key")
        assert not hasattr(args, "token")


# ---------------------------------------------------------------------------
# TestValidateRepoPath
# ---------------------------------------------------------------------------
class TestValidateRepoPath:
    def test_validate_valid_dir(self, tmp_path):
        assert validate_repo_path(str(tmp_path)) == str(tmp_path.resolve())

    def test_validate_nonexistent(self):
        with pytest.raises(SystemExit) as exc_info:
            validate_repo_path("/nonexistent/path/xyz_abc_123")
        assert exc_info.value.code == EXIT_INVALID_INPUT


# ---------------------------------------------------------------------------
# TestResolveSettings
# ---------------------------------------------------------------------------
class TestResolveSettings:
    def test_flags_override_env(self, monkeypatch):
        monkeypatch.setenv("GEMNASIUM_PROJECT_SLUG", "from/env")
        monkeypatch.setenv("AUTOUPDATE_MAX_DURATION", "600")
        args = build_parser().parse_args(["--project", "from/flag", "--max-duration", "30"])

        settings = resolve_settings(args)

        assert settings.project_slug == "from/flag"
        assert settings.max_duration == 30.0

    def test_env_used_without_flags(self, monkeypatch):
        monkeypatch.setenv("GEMNASIUM_PROJECT_SLUG", "from/env")
        monkeypatch.setenv("GEMNASIUM_TOKEN", "secret")

        settings = resolve_settings(build_parser().parse_args([]))

        assert settings.project_slug == "from/env"
        assert settings.api_key == "secret"

    def test_missing_project(self):
        with pytest.raises(ConfigurationError, match="Project slug is required"):
            resolve_settings(build_parser().parse_args([]))

    def test_non_positive_max_duration(self):
        args = build_parser().parse_args(["--project", "p", "--max-duration", "0"])
        with pytest.raises(ConfigurationError):
            resolve_settings(args)


# ---------------------------------------------------------------------------
# TestDryRun
# ---------------------------------------------------------------------------
class TestDryRun:
    def test_dry_run_exits_zero(self, tmp_path):
        assert main(_argv(tmp_path, "--dry-run")) == EXIT_SUCCESS

    def test_dry_run_json_output(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("GEMNASIUM_TOKEN", "super-secret")

        rc = main(_argv(tmp_path, "--dry-run", "--output-json"))

        assert rc == EXIT_SUCCESS
        out = capsys.readouterr().out
        data = json.loads(out)
        assert data["project_slug"] == "acme/widget"
        assert data["test_suite"] == ["pytest", "-x"]
        assert "api_key" not in data
        assert "super-secret" not in out

    def test_dry_run_uses_testsuite_env(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("GEMNASIUM_TESTSUITE", "make check")

        main(_argv(tmp_path, "--dry-run", "--output-json"))

        assert json.loads(capsys.readouterr().out)["test_suite"] == ["make", "check"]


# ---------------------------------------------------------------------------
# TestCreateLoop
# ---------------------------------------------------------------------------
class TestCreateLoop:
    def test_create_loop_wires_settings(self, tmp_path):
        settings = AutoUpdateSettings(api_key="k", project_slug="acme/widget", max_duration=42)

        controller = create_loop(
            settings, str(tmp_path), ["pytest"], branch="main", revision="abc123", check_baseline=True
        )

        assert isinstance(controller, LoopController)
        assert controller.project_slug == "acme/widget"
        assert controller.branch == "main"
        assert controller.revision == "abc123"
        assert controller.max_duration == 42
        assert controller.check_baseline is True
        assert controller.executor.test_suite == ["pytest"]
        assert controller.executor.cwd == str(tmp_path)


# ---------------------------------------------------------------------------
# TestOutputFormatting
# ---------------------------------------------------------------------------
class TestOutputFormatting:
    def test_format_summary_json(self):
        parsed = json.loads(format_summary_json(_summary(LoopStatus.TIMED_OUT)))
        assert parsed["status"] == "timed_out"
        assert parsed["elapsed_seconds"] == 12.5
        assert [r["update_set_id"] for r in parsed["results"]] == [1, 2]
        assert [r["state"] for r in parsed["results"]] == ["test_passed", "invalid"]


# ---------------------------------------------------------------------------
# TestErrorHandling
# ---------------------------------------------------------------------------
class TestErrorHandling:
    def test_main_nonexistent_repo(self):
        assert main(["--project", "p", "--repo-path", "/nonexistent/path/xyz", "--", "true"]) == EXIT_INVALID_INPUT

    def test_main_missing_project(self, tmp_path):
        assert main(["--repo-path", str(tmp_path), "--", "true"]) == EXIT_INVALID_INPUT

    def test_main_empty_test_suite(self, tmp_path, capsys):
        rc = main(["--project", "p", "--repo-path", str(tmp_path)])
        assert rc == EXIT_INVALID_INPUT
        assert "Test suite can't be empty" in capsys.readouterr().err

    def test_main_revision_lookup_error(self, tmp_path):
        with patch(
            "autoupdate_bot.cli.main.get_current_revision",
            side_effect=RevisionLookupError("Can't determine current revision"),
        ):
            assert main(_argv(tmp_path)) == EXIT_INVALID_INPUT

    @pytest.mark.parametrize(
        "error, expected",
        [
            (ApiError("Server returned non-200 status: 500"), EXIT_API_ERROR),
            (UnknownRevisionError("abc123"), EXIT_ORCHESTRATOR_ERROR),
            (BaselineTestFailureError("failing"), EXIT_EXECUTION_ERROR),
            (FileRestoreError("requirements.txt", "denied"), EXIT_EXECUTION_ERROR),
            (UnsupportedEcosystemError("Unsupported ecosystem: cargo"), EXIT_EXECUTION_ERROR),
            (KeyboardInterrupt(), EXIT_KEYBOARD_INTERRUPT),
            (RuntimeError("oops"), EXIT_UNEXPECTED),
        ],
    )
    def test_main_error_mapping(self, error, expected, tmp_path, patched_vcs):
        controller = MagicMock()
        controller.run.side_effect = error
        with patch("autoupdate_bot.cli.main.create_loop", return_value=controller):
            assert main(_argv(tmp_path)) == expected
        controller.client.close.assert_called_once_with()

    def test_main_error_message_on_stderr(self, tmp_path, patched_vcs, capsys):
        controller = MagicMock()
        controller.run.side_effect = UnknownRevisionError("abc123")
        with patch("autoupdate_bot.cli.main.create_loop", return_value=controller):
            main(_argv(tmp_path))
        err = capsys.readouterr().err
        assert "Orchestrator error: The current revision (abc123) is unknown" in err


# ---------------------------------------------------------------------------
# TestMainHappyPath
# ---------------------------------------------------------------------------
class TestMainHappyPath:
    def test_main_happy_path(self, tmp_path, patched_vcs, capsys):
        controller = MagicMock()
        controller.run.return_value = _summary()
        with patch("autoupdate_bot.cli.main.create_loop", return_value=controller) as mock_create:
            assert main(_argv(tmp_path, "--check-baseline")) == EXIT_SUCCESS
        controller.client.close.assert_called_once_with()

        kwargs = mock_create.call_args.kwargs
        assert kwargs["branch"] == "main"
        assert kwargs["revision"] == "abc123"
        assert kwargs["check_baseline"] is True
        assert mock_create.call_args.args[2] == ["pytest", "-x"]
        out = capsys.readouterr().out
        assert "Status: done" in out
        assert "test_passed: 1" in out

    def test_main_timed_out_is_success(self, tmp_path, patched_vcs, capsys):
        controller = MagicMock()
        controller.run.return_value = _summary(LoopStatus.TIMED_OUT)
        with patch("autoupdate_bot.cli.main.create_loop", return_value=controller):
            assert main(_argv(tmp_path, "--output-json")) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["status"] == "timed_out"

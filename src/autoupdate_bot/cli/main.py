"""CLI entry point for the dependency autoupdate bot."""
import argparse
from dotenv import load_dotenv
import json
import sys
import traceback
from pathlib import Path

from autoupdate_bot.api.exceptions import ApiError
from autoupdate_bot.config import AutoUpdateSettings, ConfigurationError
from autoupdate_bot.ecosystems.exceptions import EcosystemError
from autoupdate_bot.execution.exceptions import (
    EmptyTestSuiteError,
    ExecutionError,
    RevisionLookupError,
)
from autoupdate_bot.execution.test_suite import resolve_test_suite
from autoupdate_bot.execution.vcs import get_current_branch, get_current_revision
from autoupdate_bot.models import LoopSummary, UpdateSetState
from autoupdate_bot.orchestrator.exceptions import OrchestratorError

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_API_ERROR = 2
EXIT_ORCHESTRATOR_ERROR = 3
EXIT_EXECUTION_ERROR = 4
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="autoupdate-bot",
        description=(
            "Trial dependency update sets against the project's test suite. "
            "Pass the test command after '--', e.g. autoupdate-bot -- pytest -x"
        ),
    )
    parser.add_argument(
        "test_suite",
        nargs="*",
        help="Test suite command and arguments (overridden by GEMNASIUM_TESTSUITE)",
    )
    parser.add_argument(
        "--project",
        type=str,
        default="",
        help="Project slug (default: GEMNASIUM_PROJECT_SLUG)",
    )
    parser.add_argument(
        "--repo-path",
        type=str,
        default=".",
        help="Path to the repository root (default: current directory)",
    )
    parser.add_argument(
        "--max-duration",
        type=float,
        default=None,
        help="Stop fetching new update sets after this many seconds (default: 3600)",
    )
    parser.add_argument(
        "--api-endpoint",
        type=str,
        default="",
        help="Update-set API endpoint (default: GEMNASIUM_API_ENDPOINT or the public API)",
    )
    parser.add_argument(
        "--check-baseline",
        action="store_true",
        help="Run the test suite once before trying any update set and abort if it fails",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print config and exit without running"
    )
    parser.add_argument(
        "--output-json", action="store_true", help="Output the loop summary as JSON"
    )
    return parser


def validate_repo_path(raw_path: str) -> str:
    """Validate and resolve the repository path.

    Raises:
        SystemExit: If path is not a valid directory.
    """
    resolved = Path(raw_path).resolve()
    if not resolved.is_dir():
        print(f"Error: '{raw_path}' is not a valid directory.", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)
    return str(resolved)


def resolve_settings(args: argparse.Namespace) -> AutoUpdateSettings:
    """Environment settings with CLI flags layered on top."""
    settings = AutoUpdateSettings.from_env()
    if args.project:
        settings.project_slug = args.project
    if args.api_endpoint:
        settings.api_endpoint = args.api_endpoint
    if args.max_duration is not None:
        if args.max_duration <= 0:
            raise ConfigurationError("--max-duration must be positive")
        settings.max_duration = args.max_duration
    if not settings.project_slug:
        raise ConfigurationError(
            "Project slug is required: use --project or GEMNASIUM_PROJECT_SLUG"
        )
    return settings


def create_loop(
    settings: AutoUpdateSettings,
    repo_path: str,
    test_suite: list[str],
    branch: str,
    revision: str,
    check_baseline: bool,
):
    """Create the loop controller and its collaborators."""
    from autoupdate_bot.api.client import GemnasiumClient
    from autoupdate_bot.ecosystems.registry import default_registry
    from autoupdate_bot.execution.file_restorer import FileRestorer
    from autoupdate_bot.execution.test_suite import TestSuiteExecutor
    from autoupdate_bot.orchestrator.loop import LoopController

    client = GemnasiumClient(
        api_key=settings.api_key,
        api_endpoint=settings.api_endpoint,
    )
    return LoopController(
        client=client,
        registry=default_registry(repo_path),
        executor=TestSuiteExecutor(test_suite, cwd=repo_path),
        restorer=FileRestorer(repo_path),
        project_slug=settings.project_slug,
        branch=branch,
        revision=revision,
        max_duration=settings.max_duration,
        check_baseline=check_baseline,
    )


def format_summary_json(summary: LoopSummary) -> str:
    """Serialize a loop summary, keeping the update set ids the API body omits."""
    payload = {
        "status": summary.status.value,
        "elapsed_seconds": round(summary.elapsed_seconds, 3),
        "results": [
            {
                "update_set_id": result.update_set_id,
                "state": result.state.value,
                "dependency_files": [f.path for f in result.dependency_files],
            }
            for result in summary.results
        ],
    }
    return json.dumps(payload, indent=2)


def print_summary_human(summary: LoopSummary) -> None:
    """Print the loop summary in human-readable format."""
    print(f"\n{'='*60}")
    print("Autoupdate Results")
    print(f"{'='*60}")
    print(f"\nStatus: {summary.status.value}")
    print(f"Elapsed: {summary.elapsed_seconds:.1f}s")
    print(f"Update sets tried: {len(summary.results)}")
    for state in UpdateSetState:
        print(f"  {state.value}: {summary.count(state)}")
    print(f"\n{'='*60}")


def print_config_human(config: dict) -> None:
    """Print configuration in human-readable format."""
    print("\nConfiguration:")
    print(f"{'='*40}")
    for key, value in config.items():
        print(f"  {key}: {value}")
    print(f"{'='*40}")


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        repo_path = validate_repo_path(args.repo_path)
    except SystemExit as exc:
        return exc.code

    try:
        settings = resolve_settings(args)
        test_suite = resolve_test_suite(args.test_suite)
    except (ConfigurationError, EmptyTestSuiteError) as exc:
        return _handle_error("Configuration error", exc, args.verbose, EXIT_INVALID_INPUT)

    config = {
        **settings.safe_dump(),
        "repo_path": repo_path,
        "test_suite": test_suite,
        "check_baseline": args.check_baseline,
    }

    if args.dry_run:
        if args.output_json:
            print(json.dumps(config, indent=2))
        else:
            print_config_human(config)
        return EXIT_SUCCESS

    try:
        revision = get_current_revision(repo_path)
        branch = get_current_branch(repo_path)
    except RevisionLookupError as exc:
        return _handle_error("Configuration error", exc, args.verbose, EXIT_INVALID_INPUT)

    try:
        controller = create_loop(
            settings,
            repo_path,
            test_suite,
            branch=branch,
            revision=revision,
            check_baseline=args.check_baseline,
        )
        try:
            summary = controller.run()
        finally:
            controller.client.close()

        if args.output_json:
            print(format_summary_json(summary))
        else:
            print_summary_human(summary)
        return EXIT_SUCCESS

    except ApiError as exc:
        return _handle_error("API error", exc, args.verbose, EXIT_API_ERROR)

    except OrchestratorError as exc:
        return _handle_error("Orchestrator error", exc, args.verbose, EXIT_ORCHESTRATOR_ERROR)

    except (ExecutionError, EcosystemError) as exc:
        return _handle_error("Execution error", exc, args.verbose, EXIT_EXECUTION_ERROR)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)

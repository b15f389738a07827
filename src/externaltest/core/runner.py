"""External test execution.

Runs one external test script in its own temporary working directory and
reports a non-zero exit or a terminating signal as a test failure.
"""

import os
import tempfile
from typing import Callable, Optional

import pytest
from rich.console import Console
from rich.markup import escape

from externaltest.config import ExternalTestConfig
from externaltest.core.environment import launch_environment
from externaltest.core.names import normalize_test_name, script_path, workspace_prefix
from externaltest.core.outcome import Outcome, OutcomeStatus, classify
from externaltest.core.spawn import (
    ChdirError,
    ExecError,
    Exited,
    ForkError,
    RedirectError,
    Termination,
    spawn,
)

# Exit statuses used when the script never got to run.
SETUP_FAILURE_STATUS = 125
EXEC_FAILURE_STATUS = 126
EXEC_NOT_FOUND_STATUS = 127

Reporter = Callable[[str], object]

console = Console(stderr=True)


def fail_current_test(message: str) -> None:
    """Fail the currently executing pytest test."""
    pytest.fail(message, pytrace=False)


def create_workspace(tmp_root: str, suite_name: str, test_name: str) -> str:
    """Create a unique directory <tmp_root>/<suite>_<test>_<suffix>."""
    return tempfile.mkdtemp(prefix=workspace_prefix(suite_name, test_name), dir=tmp_root)


class ExternalTestRunner:
    """Runs external test scripts and reports their outcome."""

    def __init__(self, config: ExternalTestConfig, reporter: Optional[Reporter] = None):
        """Initialize the runner.

        Args:
            config: Source/build directories and the verbose switch
            reporter: Called with the failure message of a failed test,
                defaults to failing the current pytest test
        """
        self.config = config
        self.reporter = reporter or fail_current_test

    def run(self, suite_name: str, test_name: str) -> Outcome:
        """Run an external test, reporting a failure unless it exits with 0."""
        test_name = normalize_test_name(test_name)

        try:
            termination, workspace = self._launch(suite_name, test_name)
        except ForkError as e:
            outcome = Outcome(
                suite_name=suite_name,
                test_name=test_name,
                status=OutcomeStatus.LAUNCH_FAILURE,
                detail=f"Failed to fork to launch external test: {e.error}",
            )
        else:
            outcome = classify(suite_name, test_name, termination, workspace)

        if not outcome.passed:
            self.reporter(outcome.message)
        return outcome

    def _launch(self, suite_name: str, test_name: str) -> tuple[Termination, Optional[str]]:
        """Start the script in a fresh workspace and wait for it."""
        try:
            workspace = create_workspace(self.config.tmp_root, suite_name, test_name)
        except OSError as e:
            path = os.path.join(self.config.tmp_root, workspace_prefix(suite_name, test_name) + "XXXXXX")
            _diagnose(f"Failed to create temporary directory at '{path}': {e}")
            return Exited(SETUP_FAILURE_STATUS), None

        script = script_path(self.config.source_dir, suite_name, test_name)

        try:
            child = spawn(
                script,
                cwd=workspace,
                env=launch_environment(self.config),
                quiet=not self.config.verbose,
            )
        except (ChdirError, RedirectError) as e:
            _diagnose(str(e))
            return Exited(SETUP_FAILURE_STATUS), workspace
        except ExecError as e:
            _diagnose(str(e))
            if isinstance(e.error, FileNotFoundError):
                return Exited(EXEC_NOT_FOUND_STATUS), workspace
            return Exited(EXEC_FAILURE_STATUS), workspace

        return child.wait(), workspace


def run(
    suite_name: str,
    test_name: str,
    config: Optional[ExternalTestConfig] = None,
    reporter: Optional[Reporter] = None,
) -> Outcome:
    """Run one external test with a configuration loaded from disk or the environment."""
    if config is None:
        config = ExternalTestConfig.load()
    return ExternalTestRunner(config, reporter).run(suite_name, test_name)


def _diagnose(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True, highlight=False)

"""Outcome of running one external test."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from externaltest.core.names import display_name
from externaltest.core.spawn import Exited, HarnessInvariantError, Signaled, Termination


class OutcomeStatus(str, Enum):
    """How an external test ended."""

    SUCCESS = "success"
    EXIT_FAILURE = "exit_failure"
    SIGNAL_FAILURE = "signal_failure"
    LAUNCH_FAILURE = "launch_failure"


@dataclass(frozen=True)
class Outcome:
    """Represents the result of a single external test invocation."""

    suite_name: str
    test_name: str
    status: OutcomeStatus
    exit_code: Optional[int] = None
    signal_name: Optional[str] = None
    detail: str = ""
    workspace: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def name(self) -> str:
        return display_name(self.suite_name, self.test_name)

    @property
    def message(self) -> Optional[str]:
        """Failure message, None on success."""
        if self.status == OutcomeStatus.EXIT_FAILURE:
            return f"{self.name} exited with status {self.exit_code}"
        if self.status == OutcomeStatus.SIGNAL_FAILURE:
            return f"{self.name} terminated with signal '{self.signal_name}'"
        if self.status == OutcomeStatus.LAUNCH_FAILURE:
            return self.detail
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "suite_name": self.suite_name,
            "test_name": self.test_name,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "signal_name": self.signal_name,
            "message": self.message,
            "workspace": self.workspace,
        }


def classify(
    suite_name: str,
    test_name: str,
    termination: Termination,
    workspace: Optional[str] = None,
) -> Outcome:
    """Translate a child's termination into an outcome."""
    if isinstance(termination, Exited):
        if termination.code == 0:
            status = OutcomeStatus.SUCCESS
        else:
            status = OutcomeStatus.EXIT_FAILURE
        return Outcome(
            suite_name=suite_name,
            test_name=test_name,
            status=status,
            exit_code=termination.code,
            workspace=workspace,
        )

    if isinstance(termination, Signaled):
        return Outcome(
            suite_name=suite_name,
            test_name=test_name,
            status=OutcomeStatus.SIGNAL_FAILURE,
            signal_name=termination.name,
            workspace=workspace,
        )

    raise HarnessInvariantError(f"Child neither exited nor was signaled: {termination!r}")

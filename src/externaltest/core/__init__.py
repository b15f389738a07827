"""Core external test execution functionality."""

from externaltest.core.outcome import Outcome, OutcomeStatus
from externaltest.core.runner import ExternalTestRunner, run

__all__ = ["ExternalTestRunner", "Outcome", "OutcomeStatus", "run"]

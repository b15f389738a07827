"""pytest integration for external tests.

Declare an external test in a test module with::

    from externaltest.pytest_plugin import external_test

    test_containerizer_basic = external_test("containerizer", "basic")

The generated test runs <source_dir>/src/tests/external/containerizer/basic.sh
and fails when the script exits non-zero or is killed by a signal.

Tests whose name starts with DISABLED_ are skipped unless pytest is run
with --run-disabled-external.
"""

from pathlib import Path

import pytest

from externaltest.config import ExternalTestConfig
from externaltest.core.names import is_disabled
from externaltest.core.runner import ExternalTestRunner, fail_current_test

RUN_DISABLED_OPTION = "--run-disabled-external"


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("externaltest")
    group.addoption(
        RUN_DISABLED_OPTION,
        action="store_true",
        default=False,
        dest="run_disabled_external",
        help="Also run external tests whose name starts with DISABLED_",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "external(suite, name): test backed by an external script")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("run_disabled_external"):
        return

    skip = pytest.mark.skip(reason=f"disabled external test, use {RUN_DISABLED_OPTION} to run it")
    for item in items:
        marker = item.get_closest_marker("external")
        if marker is not None and len(marker.args) == 2 and is_disabled(marker.args[1]):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def external_test_config(pytestconfig: pytest.Config) -> ExternalTestConfig:
    """Configuration for external tests; override in conftest.py to customize."""
    return ExternalTestConfig.load(Path(pytestconfig.rootpath))


@pytest.fixture
def external_runner(external_test_config: ExternalTestConfig) -> ExternalTestRunner:
    """Runner that fails the requesting test when its external script fails."""
    return ExternalTestRunner(external_test_config, reporter=fail_current_test)


def external_test(suite_name: str, test_name: str):
    """Create a pytest test function that runs one external test."""

    @pytest.mark.external(suite_name, test_name)
    def test(external_runner: ExternalTestRunner) -> None:
        external_runner.run(suite_name, test_name)

    test.__name__ = f"test_{suite_name}_{test_name}"
    test.__qualname__ = test.__name__
    test.__doc__ = f"External test {suite_name}/{test_name}."
    return test

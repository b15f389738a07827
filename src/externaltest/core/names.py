"""Test name normalization and path construction."""

import os

DISABLED_PREFIX = "DISABLED_"

SCRIPT_SUFFIX = ".sh"


def is_disabled(test_name: str) -> bool:
    return test_name.startswith(DISABLED_PREFIX)


def normalize_test_name(test_name: str) -> str:
    """Strip the disabled marker from a test name.

    A disabled test only reaches the runner when it was explicitly enabled
    (e.g. through a test filter), so the marker is only noise in paths and
    failure messages. Whether the test runs is not decided here.
    """
    if is_disabled(test_name):
        return test_name[len(DISABLED_PREFIX):]
    return test_name


def display_name(suite_name: str, test_name: str) -> str:
    """Name used in failure messages, e.g. 'containerizer/basic'."""
    return "/".join([suite_name, test_name])


def script_path(source_dir: str, suite_name: str, test_name: str) -> str:
    """Path of the executable script implementing an external test."""
    return os.path.join(source_dir, "src", "tests", "external", suite_name, test_name) + SCRIPT_SUFFIX


def workspace_prefix(suite_name: str, test_name: str) -> str:
    """Directory name prefix of a workspace; a unique suffix follows it."""
    return "_".join([suite_name, test_name, ""])

"""Tests for name normalization, paths and the launch environment."""

import os

import pytest

from externaltest.config import ExternalTestConfig
from externaltest.core.environment import launch_environment
from externaltest.core.names import (
    display_name,
    normalize_test_name,
    script_path,
    workspace_prefix,
)


class TestNormalizeTestName:
    """Tests for normalize_test_name."""

    def test_strips_disabled_prefix(self):
        assert normalize_test_name("DISABLED_basic") == "basic"

    def test_leaves_other_names(self):
        assert normalize_test_name("basic") == "basic"

    def test_strips_only_leading_prefix(self):
        """Test that the marker is only removed at the start."""
        assert normalize_test_name("basic_DISABLED_") == "basic_DISABLED_"
        assert normalize_test_name("DISABLED_DISABLED_x") == "DISABLED_x"

    def test_prefix_is_case_sensitive(self):
        assert normalize_test_name("disabled_basic") == "disabled_basic"


class TestPaths:
    """Tests for script and workspace naming."""

    @pytest.mark.parametrize(
        "suite,name",
        [("containerizer", "basic"), ("SampleFrameworks", "CppFramework"), ("a", "b.c")],
    )
    def test_script_path(self, suite, name):
        expected = os.path.join("/src", "src", "tests", "external", suite, name + ".sh")
        assert script_path("/src", suite, name) == expected

    def test_script_path_example(self):
        assert (
            script_path("/src", "containerizer", "basic")
            == "/src/src/tests/external/containerizer/basic.sh"
        )

    def test_display_name(self):
        assert display_name("containerizer", "basic") == "containerizer/basic"

    def test_workspace_prefix(self):
        assert workspace_prefix("containerizer", "basic") == "containerizer_basic_"


class TestLaunchEnvironment:
    """Tests for launch_environment."""

    def test_entries(self):
        """Test that all four entries are derived from the config."""
        config = ExternalTestConfig(source_dir="/src", build_dir="/build")

        env = launch_environment(config)

        assert env == {
            "MESOS_SOURCE_DIR": "/src",
            "MESOS_BUILD_DIR": "/build",
            "MESOS_WEBUI_DIR": os.path.join("/src", "src", "webui"),
            "MESOS_LAUNCHER_DIR": os.path.join("/build", "src"),
        }

    def test_does_not_touch_process_environment(self, monkeypatch):
        """Test that building the overlay leaves os.environ alone."""
        monkeypatch.delenv("MESOS_SOURCE_DIR", raising=False)
        config = ExternalTestConfig(source_dir="/src", build_dir="/build")

        launch_environment(config)

        assert "MESOS_SOURCE_DIR" not in os.environ

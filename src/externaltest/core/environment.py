"""Launch environment exposed to external test scripts."""

import os

from externaltest.config import ExternalTestConfig

SOURCE_DIR_VAR = "MESOS_SOURCE_DIR"
BUILD_DIR_VAR = "MESOS_BUILD_DIR"
WEBUI_DIR_VAR = "MESOS_WEBUI_DIR"
LAUNCHER_DIR_VAR = "MESOS_LAUNCHER_DIR"


def launch_environment(config: ExternalTestConfig) -> dict[str, str]:
    """Build the environment overlay for an external test.

    The overlay replaces entries of the same name in the child's inherited
    environment; the current process environment is left untouched.
    """
    return {
        SOURCE_DIR_VAR: config.source_dir,
        BUILD_DIR_VAR: config.build_dir,
        WEBUI_DIR_VAR: os.path.join(config.source_dir, "src", "webui"),
        LAUNCHER_DIR_VAR: os.path.join(config.build_dir, "src"),
    }

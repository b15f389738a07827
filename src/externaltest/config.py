"""Configuration management for externaltest."""

import json
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

CONFIG_NAMES = ["externaltest.json", ".externaltest.json"]

ENV_PREFIX = "EXTERNALTEST_"

_TRUTHY = {"1", "true", "yes", "on"}


class ExternalTestConfig(BaseModel):
    """Directories and switches consumed by the external test runner."""

    source_dir: str = Field(description="Root of the source tree holding src/tests/external")
    build_dir: str = Field(description="Root of the build tree")
    verbose: bool = Field(default=False, description="Let external test output through to the console")
    tmp_root: str = Field(default="/tmp", description="Directory under which workspaces are created")

    @field_validator("source_dir", "build_dir", "tmp_root")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Directory cannot be empty")
        return os.path.abspath(v)

    @classmethod
    def from_file(cls, path: Path | str) -> "ExternalTestConfig":
        """Load configuration from a JSON file.

        Relative directories are resolved against the file's own directory.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        base_dir = path.resolve().parent
        for key in ("source_dir", "build_dir", "tmp_root"):
            if isinstance(data.get(key), str) and data[key].strip():
                data[key] = str(base_dir / data[key])

        return cls.model_validate(data)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ExternalTestConfig":
        """Load configuration from EXTERNALTEST_* environment variables."""
        if environ is None:
            environ = os.environ

        data: dict[str, object] = {}
        for key in ("source_dir", "build_dir", "tmp_root"):
            value = environ.get(ENV_PREFIX + key.upper())
            if value:
                data[key] = value

        verbose = environ.get(ENV_PREFIX + "VERBOSE")
        if verbose is not None:
            data["verbose"] = verbose.strip().lower() in _TRUTHY

        if "source_dir" not in data or "build_dir" not in data:
            raise FileNotFoundError(
                f"{ENV_PREFIX}SOURCE_DIR and {ENV_PREFIX}BUILD_DIR must be set"
            )

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "ExternalTestConfig":
        """Find and load configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        # Search up the directory tree, root included
        current = start_dir.resolve()
        for directory in [current, *current.parents]:
            for name in CONFIG_NAMES:
                config_path = directory / name
                if config_path.exists():
                    return cls.from_file(config_path)

        raise FileNotFoundError(
            "No configuration file found. Create externaltest.json or run 'externaltest init'"
        )

    @classmethod
    def load(cls, start_dir: Path | str | None = None) -> "ExternalTestConfig":
        """Load from a configuration file if one exists, else from the environment."""
        try:
            return cls.find_and_load(start_dir)
        except FileNotFoundError:
            return cls.from_env()

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def get_default_config(base_dir: Path | str | None = None) -> ExternalTestConfig:
    """Return a default configuration rooted at base_dir."""
    if base_dir is None:
        base_dir = Path.cwd()
    else:
        base_dir = Path(base_dir)

    return ExternalTestConfig(
        source_dir=str(base_dir),
        build_dir=str(base_dir / "build"),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config(output_path.resolve().parent)
    config.to_file(output_path)
    return output_path

"""Shared fixtures for externaltest tests."""

import os
import stat
from pathlib import Path

import pytest

from externaltest.config import ExternalTestConfig


class ExternalTree:
    """A throwaway source/build tree holding external test scripts."""

    def __init__(self, root: Path):
        self.source_dir = root / "source"
        self.build_dir = root / "build"
        self.tmp_root = root / "tmp"
        for directory in (self.source_dir, self.build_dir, self.tmp_root):
            directory.mkdir()

    def config(self, verbose: bool = False) -> ExternalTestConfig:
        return ExternalTestConfig(
            source_dir=str(self.source_dir),
            build_dir=str(self.build_dir),
            tmp_root=str(self.tmp_root),
            verbose=verbose,
        )

    def write_script(self, suite: str, name: str, body: str, executable: bool = True) -> Path:
        script = self.source_dir / "src" / "tests" / "external" / suite / f"{name}.sh"
        script.parent.mkdir(parents=True, exist_ok=True)
        script.write_text("#!/bin/sh\n" + body + "\n")
        if executable:
            os.chmod(script, script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script


@pytest.fixture
def external_tree(tmp_path: Path) -> ExternalTree:
    return ExternalTree(tmp_path)

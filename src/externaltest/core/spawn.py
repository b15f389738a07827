"""Child process launching with a typed termination result.

This module provides a small wrapper around subprocess.Popen that applies
the setup an external test needs before its script starts (working
directory, environment overlay, output suppression) and reports how the
child ended as either an exit code or a terminating signal.
"""

import os
import signal
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union


class HarnessInvariantError(Exception):
    """Raised when a child ended in a way that is neither an exit nor a signal."""

    pass


class SpawnError(Exception):
    """Raised when a child process could not be started."""

    def __init__(self, message: str, path: Optional[str] = None, error: Optional[OSError] = None):
        super().__init__(message)
        self.path = path
        self.error = error


class ForkError(SpawnError):
    """No process could be created."""


class ChdirError(SpawnError):
    """The child could not change into its working directory."""


class RedirectError(SpawnError):
    """The child's output streams could not be redirected."""


class ExecError(SpawnError):
    """The program could not be executed (missing, not executable, bad format)."""


@dataclass(frozen=True)
class Exited:
    """The child exited normally with a status code."""

    code: int


@dataclass(frozen=True)
class Signaled:
    """The child was terminated by a signal."""

    signal: int

    @property
    def name(self) -> str:
        """Human readable name of the signal, e.g. 'Killed'."""
        return signal_description(self.signal)


Termination = Union[Exited, Signaled]


def signal_description(signum: int) -> str:
    """Describe a signal the way the platform does (strsignal)."""
    try:
        description = signal.strsignal(signum)
    except ValueError:
        description = None

    if description:
        return description

    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"Unknown signal {signum}"


def termination_from_returncode(returncode: Optional[int]) -> Termination:
    """Decode a Popen return code (negative means killed by that signal)."""
    if returncode is None:
        raise HarnessInvariantError("Child process has not terminated")
    if returncode < 0:
        return Signaled(-returncode)
    return Exited(returncode)


class ChildProcess:
    """Handle to a spawned child."""

    def __init__(self, popen: subprocess.Popen, program: str):
        self._popen = popen
        self.program = program

    @property
    def pid(self) -> int:
        return self._popen.pid

    def wait(self) -> Termination:
        """Block until the child terminates.

        Stopped children are not terminated; waiting continues through
        stop and continue notifications.
        """
        return termination_from_returncode(self._popen.wait())


def spawn(
    program: str,
    args: Sequence[str] = (),
    cwd: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    quiet: bool = False,
) -> ChildProcess:
    """Start program with argv [program, *args].

    Args:
        program: Path of the executable, also passed as argv[0]
        args: Additional arguments
        cwd: Working directory of the child
        env: Entries overlaid on the inherited environment, child only
        quiet: Send the child's stdout and stderr to the null device

    Raises:
        ForkError: If no process could be created
        ChdirError: If the child could not enter cwd
        RedirectError: If the null device could not be opened
        ExecError: If the program could not be executed
    """
    child_env = {**os.environ, **(env or {})}

    devnull = None
    if quiet:
        try:
            devnull = open(os.devnull, "wb")
        except OSError as e:
            raise RedirectError(
                f"Failed to redirect stdout/stderr to {os.devnull}: {e.strerror}",
                path=os.devnull,
                error=e,
            ) from e

    try:
        popen = subprocess.Popen(
            [program, *args],
            cwd=cwd,
            env=child_env,
            stdout=devnull,
            stderr=devnull,
        )
    except OSError as e:
        raise _launch_error(e, program, cwd) from e
    finally:
        if devnull is not None:
            devnull.close()

    return ChildProcess(popen, program)


def _launch_error(error: OSError, program: str, cwd: Optional[str]) -> SpawnError:
    """Work out which setup stage an OSError from Popen came from."""
    # Popen reports failures inside the child with the path it failed on.
    if cwd is not None and error.filename == cwd:
        return ChdirError(f"Failed to chdir into '{cwd}': {error.strerror}", path=cwd, error=error)
    if error.filename == program:
        return ExecError(f"Failed to execute '{program}': {error.strerror}", path=program, error=error)
    return ForkError(f"Failed to fork: {error}", error=error)

"""Process runners: the boundary between cmdwrap and the operating system.

Runners take a fully assembled argument vector, start the external
tool, block until it exits and report what happened. They do not
interpret the exit status; that is the adapter's job.
"""

import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cmdwrap.exceptions import AdapterError, CommandCancelledError
from cmdwrap.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProcessOutcome:
    """What a finished child process left behind.

    Attributes:
        argv: The argument vector that was executed.
        returncode: Exit status of the process.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class ProcessRunner(ABC):
    """Abstract base class for process runners."""

    @abstractmethod
    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessOutcome:
        """Run argv to completion.

        Args:
            argv: Executable followed by its arguments.
            cwd: Working directory for the child.
            env: Extra environment variables for the child.

        Returns:
            The outcome, whatever the exit status.

        Raises:
            AdapterError: If the process cannot be started.
            CommandCancelledError: If the process was terminated early.
        """
        pass


class SubprocessRunner(ProcessRunner):
    """Runs the external tool with :mod:`subprocess`.

    Output is captured as text. When a timeout is configured, or the
    caller interrupts with Ctrl+C, the child is killed and reaped before
    CommandCancelledError is raised.
    """

    def __init__(self, timeout: float | None = None, encoding: str = "utf-8") -> None:
        self._timeout = timeout
        self._encoding = encoding

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessOutcome:
        if not argv:
            raise AdapterError("Cannot run an empty command")

        args = [str(arg) for arg in argv]
        child_env = None
        if env:
            child_env = {**os.environ, **env}

        try:
            process = subprocess.Popen(
                args,
                cwd=str(cwd) if cwd else None,
                env=child_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding=self._encoding,
                errors="replace",
            )
        except FileNotFoundError as e:
            raise AdapterError(
                f"Executable not found: {args[0]!r}",
                user_message=(
                    f"Cannot find '{args[0]}'. Check the tool executable setting."
                ),
            ) from e
        except PermissionError as e:
            raise AdapterError(
                f"Permission denied executing {args[0]!r}",
                user_message=f"Permission denied running '{args[0]}'",
            ) from e
        except OSError as e:
            raise AdapterError(f"Failed to execute {args[0]!r}: {e}") from e

        logger.debug("Started process %s (pid %s)", args[0], process.pid)

        try:
            stdout, stderr = process.communicate(timeout=self._timeout)
        except subprocess.TimeoutExpired as e:
            _terminate(process)
            raise CommandCancelledError(
                f"{args[0]} did not finish within {self._timeout} seconds"
            ) from e
        except KeyboardInterrupt as e:
            _terminate(process)
            raise CommandCancelledError(f"{args[0]} was interrupted") from e

        return ProcessOutcome(
            argv=tuple(args),
            returncode=process.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )


def _terminate(process: "subprocess.Popen[str]") -> None:
    """Kill a child process and reap it."""
    process.kill()
    process.communicate()
    logger.warning("Terminated process %s", process.pid)


class MockRunner(ProcessRunner):
    """Process runner that records calls instead of spawning anything.

    Useful for tests and for exercising commands without the external
    tool installed. Outcomes are served from ``outcomes`` in order; once
    exhausted the default exit code is returned.
    """

    def __init__(
        self,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        outcomes: Sequence[tuple[int, str, str]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._returncode = returncode
        self._stdout = stdout
        self._stderr = stderr
        self._outcomes = list(outcomes or [])
        self._error = error
        self._call_history: list[dict[str, Any]] = []

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Every call made to this runner."""
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    @property
    def last_argv(self) -> tuple[str, ...] | None:
        if not self._call_history:
            return None
        return self._call_history[-1]["argv"]

    def clear_history(self) -> None:
        self._call_history.clear()

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessOutcome:
        self._call_history.append(
            {
                "argv": tuple(argv),
                "cwd": cwd,
                "env": dict(env) if env else {},
            }
        )
        if self._error is not None:
            raise self._error

        if self._outcomes:
            returncode, stdout, stderr = self._outcomes.pop(0)
        else:
            returncode, stdout, stderr = self._returncode, self._stdout, self._stderr

        return ProcessOutcome(
            argv=tuple(argv),
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )


def locate_executable(name: str) -> Path | None:
    """Resolve an executable name against PATH.

    Returns the absolute path, or None when it cannot be found. Names
    containing a path separator are checked directly.
    """
    result = shutil.which(name)
    if result is None:
        return None
    return Path(result).resolve()

"""
Process runner - typed wrapper around external tool invocation.

The dispatcher never shells out directly. It asks a ProcessRunner to run
an argv and gets a ProcessResult back, so tests can swap in a fake
runner and never spawn real linters.

Runner failures are folded into the result rather than raised:
- Missing executable: return code 127 (what a shell reports)
- Not executable: return code 126 (what a shell reports)
- Timeout: return code 124 (what coreutils `timeout` reports)
"""

from __future__ import annotations

import abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import subprocess as _subprocess
import time as _time
import typing as _typing

import lintwarden.constants as constants

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass
class ProcessResult:
    """
    Outcome of one external tool invocation.

    Attributes:
        argv: The command that was run.
        returncode: Process exit status (or a synthetic 124/127).
        stdout: Captured standard output. Holds stderr too when the
            call merged the streams.
        stderr: Captured standard error (empty when merged).
        duration_ms: Wall-clock time spent in the call.
    """

    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Whether the tool exited with status 0."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, trailing newlines stripped."""
        parts = [part.rstrip("\n") for part in (self.stdout, self.stderr) if part]
        return "\n".join(parts)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict."""
        return {
            "argv": self.argv,
            "returncode": self.returncode,
            "duration_ms": round(self.duration_ms, 1),
        }


class ProcessRunner(_abc.ABC):
    """Abstract base class for anything that can run an external tool."""

    @_abc.abstractmethod
    def run(
        self,
        argv: list[str],
        *,
        cwd: _pathlib.Path | None = None,
        merge_stderr: bool = False,
        timeout: float | None = None,
    ) -> ProcessResult:
        """
        Run a command to completion.

        Args:
            argv: Command and arguments. argv[0] is looked up on PATH.
            cwd: Working directory for the process.
            merge_stderr: Capture stderr into stdout (like `2>&1`).
            timeout: Seconds before the process is killed. None waits forever.

        Returns:
            The result. Never raises for tool failures.
        """
        ...


class SubprocessRunner(ProcessRunner):
    """Runs tools with subprocess.run, capturing text output."""

    def run(
        self,
        argv: list[str],
        *,
        cwd: _pathlib.Path | None = None,
        merge_stderr: bool = False,
        timeout: float | None = None,
    ) -> ProcessResult:
        _logger.debug("Running %s (cwd=%s)", argv, cwd)
        started = _time.monotonic()

        try:
            completed = _subprocess.run(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                stdin=_subprocess.DEVNULL,
                stdout=_subprocess.PIPE,
                stderr=_subprocess.STDOUT if merge_stderr else _subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError:
            _logger.debug("Executable not found: %s", argv[0])
            return ProcessResult(
                argv=list(argv),
                returncode=constants.RETURNCODE_NOT_FOUND,
                stdout=f"{argv[0]}: command not found",
                duration_ms=_elapsed_ms(started),
            )
        except PermissionError as e:
            return ProcessResult(
                argv=list(argv),
                returncode=constants.RETURNCODE_NOT_EXECUTABLE,
                stdout=f"{argv[0]}: {e.strerror or 'permission denied'}",
                duration_ms=_elapsed_ms(started),
            )
        except OSError as e:
            # exec failures such as ENOEXEC (script without a shebang line)
            _logger.debug("Cannot execute %s: %s", argv[0], e)
            return ProcessResult(
                argv=list(argv),
                returncode=constants.RETURNCODE_NOT_EXECUTABLE,
                stdout=f"{argv[0]}: {e.strerror or e}",
                duration_ms=_elapsed_ms(started),
            )
        except _subprocess.TimeoutExpired as e:
            _logger.debug("Timed out after %ss: %s", timeout, argv)
            partial = e.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode("utf-8", errors="replace")
            message = f"{argv[0]}: timed out after {timeout}s"
            return ProcessResult(
                argv=list(argv),
                returncode=constants.RETURNCODE_TIMEOUT,
                stdout=f"{partial}{message}" if partial else message,
                duration_ms=_elapsed_ms(started),
            )

        return ProcessResult(
            argv=list(argv),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration_ms=_elapsed_ms(started),
        )


def _elapsed_ms(started: float) -> float:
    return (_time.monotonic() - started) * 1000

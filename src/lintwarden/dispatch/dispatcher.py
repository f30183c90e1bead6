"""
Lint dispatcher - the post-edit pipeline.

For each tool event the dispatcher runs a short linear pipeline:
1. Resolve the file path (none -> no-op)
2. Check the suffix against the profile (no match -> no-op)
3. Check the file exists (missing -> no-op)
4. Run the fixer, capturing combined output
5. Run the formatter, whatever the fixer returned
6. Fixer non-zero -> issues found (exit 2); otherwise clean (exit 0)

The formatter's status never affects the outcome.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import lintwarden.constants as constants
import lintwarden.dispatch.events as events
import lintwarden.dispatch.profiles as profiles
import lintwarden.dispatch.runner as runner

_logger = _logging.getLogger(__name__)


class DispatchStatus(_enum.Enum):
    """How a dispatch ended."""

    NO_PATH = "no_path"
    """Payload carried no file path."""

    UNSUPPORTED_EXTENSION = "unsupported_extension"
    """File suffix is not handled by this profile."""

    MISSING_FILE = "missing_file"
    """Path does not name an existing file (deleted or renamed since)."""

    CLEAN = "clean"
    """Fixer exited 0."""

    ISSUES_FOUND = "issues_found"
    """Fixer exited non-zero; diagnostic goes back to the host."""

    @property
    def ran_tools(self) -> bool:
        """Whether external tools were invoked for this status."""
        return self in {DispatchStatus.CLEAN, DispatchStatus.ISSUES_FOUND}


@_dataclasses.dataclass
class DispatchOutcome:
    """
    Result of dispatching one event.

    Attributes:
        status: How the pipeline ended.
        profile: Name of the profile that handled the event.
        file_path: Path from the event (None for NO_PATH).
        fix_result: Fixer result, when tools ran.
        format_result: Formatter result, when tools ran.
        diagnostic: Text for stderr when issues were found.
    """

    status: DispatchStatus
    profile: str
    file_path: str | None = None
    fix_result: runner.ProcessResult | None = None
    format_result: runner.ProcessResult | None = None
    diagnostic: str | None = None

    @property
    def exit_code(self) -> int:
        """Exit code the host should see."""
        if self.status == DispatchStatus.ISSUES_FOUND:
            return constants.EXIT_ISSUES_FOUND
        return constants.EXIT_OK

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict for the run log."""
        result: dict[str, _typing.Any] = {
            "profile": self.profile,
            "status": self.status.value,
            "file_path": self.file_path,
            "exit_code": self.exit_code,
        }
        if self.fix_result is not None:
            result["fix"] = self.fix_result.to_dict()
        if self.format_result is not None:
            result["format"] = self.format_result.to_dict()
        return result


class Dispatcher:
    """
    Runs one profile's fix/format pipeline against edited files.

    The dispatcher is stateless between calls; each dispatch() is a
    single run-to-completion pass.
    """

    def __init__(
        self,
        profile: profiles.DispatchProfile,
        *,
        process_runner: runner.ProcessRunner | None = None,
        cwd: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            profile: Which suffixes to handle and which tools to run.
            process_runner: Runner for external tools. Defaults to a
                real SubprocessRunner.
            cwd: Directory used to resolve relative paths and as the
                tools' working directory. Defaults to the process cwd.
        """
        self._profile = profile
        self._runner = process_runner or runner.SubprocessRunner()
        self._cwd = cwd

    @property
    def profile(self) -> profiles.DispatchProfile:
        return self._profile

    def _outcome(self, status: DispatchStatus, file_path: str | None) -> DispatchOutcome:
        return DispatchOutcome(status=status, profile=self._profile.name, file_path=file_path)

    def _resolve(self, file_path: str) -> _pathlib.Path:
        path = _pathlib.Path(file_path)
        if not path.is_absolute() and self._cwd is not None:
            path = self._cwd / path
        return path

    def dispatch(self, event: events.ToolEvent) -> DispatchOutcome:
        """
        Run the pipeline for one event.

        Args:
            event: The tool event from the host.

        Returns:
            The outcome. Use outcome.exit_code for the process status.
        """
        file_path = event.file_path
        if file_path is None:
            _logger.debug("No file path in event, nothing to do")
            return self._outcome(DispatchStatus.NO_PATH, None)

        if not self._profile.matches(file_path):
            _logger.debug(
                "Skipping %s: not one of %s", file_path, ", ".join(self._profile.extensions)
            )
            return self._outcome(DispatchStatus.UNSUPPORTED_EXTENSION, file_path)

        if not self._resolve(file_path).is_file():
            _logger.debug("Skipping %s: file does not exist", file_path)
            return self._outcome(DispatchStatus.MISSING_FILE, file_path)

        timeout = self._profile.timeout_seconds

        fix_result = self._runner.run(
            self._profile.fix_argv(file_path),
            cwd=self._cwd,
            merge_stderr=True,
            timeout=timeout,
        )
        format_result = self._runner.run(
            self._profile.format_argv(file_path),
            cwd=self._cwd,
            merge_stderr=True,
            timeout=timeout,
        )

        if not format_result.ok:
            # Formatter failures never gate the result
            _logger.debug(
                "Formatter exited %d for %s: %s",
                format_result.returncode,
                file_path,
                format_result.output,
            )

        outcome = self._outcome(DispatchStatus.CLEAN, file_path)
        outcome.fix_result = fix_result
        outcome.format_result = format_result

        if not fix_result.ok:
            outcome.status = DispatchStatus.ISSUES_FOUND
            outcome.diagnostic = _format_diagnostic(
                self._profile.issue_header(file_path),
                fix_result.output,
            )
            _logger.info(
                "%s reported issues in %s (exit %d)",
                self._profile.issue_label,
                file_path,
                fix_result.returncode,
            )

        return outcome


def _format_diagnostic(header: str, output: str) -> str:
    """Header line followed by the fixer's captured output."""
    return f"{header}\n{output}\n"

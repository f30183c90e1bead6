"""
Dispatch profiles.

A profile is the whole configuration of one dispatcher: which file
suffixes it handles and which fixer and formatter it runs. Profiles are
immutable and are injected into the Dispatcher, so the Python and web
dispatchers are the same code with different values.
"""

from __future__ import annotations

import pydantic as _pydantic


class DispatchProfile(_pydantic.BaseModel):
    """
    Configuration for one lint dispatcher.

    Profiles are defined in profiles.yaml files or bundled as builtins:
    ```yaml
    version: 1
    profiles:
      - name: python
        extensions: [".py"]
        fix_command: ["ruff", "check", "--fix"]
        format_command: ["black", "--quiet"]
        issue_label: Ruff
    ```
    """

    model_config = _pydantic.ConfigDict(frozen=True, extra="forbid")

    name: str = _pydantic.Field(min_length=1)
    """Unique identifier for this profile."""

    description: str = ""
    """Human-readable description."""

    extensions: tuple[str, ...] = _pydantic.Field(min_length=1)
    """File suffixes this profile handles (e.g. ".py"). Case-sensitive."""

    fix_command: tuple[str, ...] = _pydantic.Field(min_length=1)
    """Auto-fixing linter command. The file path is appended."""

    format_command: tuple[str, ...] = _pydantic.Field(min_length=1)
    """Formatter command. The file path is appended."""

    issue_label: str = "Linter"
    """Tool name shown in the diagnostic header."""

    timeout_seconds: float | None = _pydantic.Field(default=None, gt=0)
    """Per-tool timeout. None means no timeout (the host enforces one)."""

    @_pydantic.field_validator("extensions")
    @classmethod
    def _validate_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for ext in value:
            if not ext.startswith(".") or len(ext) < 2:
                raise ValueError(f"extension must look like '.py', got {ext!r}")
        return value

    @_pydantic.field_validator("fix_command", "format_command")
    @classmethod
    def _validate_command(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value[0].strip():
            raise ValueError("command executable must not be empty")
        return value

    def matches(self, file_path: str) -> bool:
        """Whether the path ends with one of the allowed suffixes."""
        return any(file_path.endswith(ext) for ext in self.extensions)

    def fix_argv(self, file_path: str) -> list[str]:
        """Full argv for the fixer."""
        return [*self.fix_command, file_path]

    def format_argv(self, file_path: str) -> list[str]:
        """Full argv for the formatter."""
        return [*self.format_command, file_path]

    def issue_header(self, file_path: str) -> str:
        """First line of the diagnostic written when the fixer fails."""
        return f"{self.issue_label} found issues in {file_path}:"

    def executables(self) -> list[str]:
        """Executables this profile needs on PATH."""
        return list(dict.fromkeys([self.fix_command[0], self.format_command[0]]))

    def describe_commands(self) -> str:
        """One-line summary of the pipeline for listings."""
        fix = " ".join(self.fix_command)
        fmt = " ".join(self.format_command)
        return f"{fix} -> {fmt}"


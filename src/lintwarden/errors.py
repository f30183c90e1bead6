"""
Exception types for Lintwarden.

No-op conditions and tool failures are never exceptions; these cover
configuration problems that stop lintwarden from running at all.
"""

from __future__ import annotations

import pathlib as _pathlib


class LintwardenError(Exception):
    """Base class for lintwarden configuration errors."""

    pass


class UnknownProfileError(LintwardenError, KeyError):
    """Raised when a profile name is not registered."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        self.known = known
        available = ", ".join(sorted(known)) or "(none)"
        super().__init__(f"Unknown profile '{name}'. Available profiles: {available}")

    def __str__(self) -> str:
        # KeyError quotes its message otherwise
        return str(self.args[0])


class ProfileConfigError(LintwardenError, ValueError):
    """Error loading or parsing a profiles file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in profiles file {path}: {message}")


class ConfigFileError(LintwardenError):
    """Error loading or parsing a settings file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")

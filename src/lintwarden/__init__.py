"""
Lintwarden - post-edit lint dispatcher

Runs a stack's auto-fixing linter and formatter on files an AI coding
agent has just written, and reports linter findings back to the host.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("lintwarden")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Lintwarden Contributors"

from lintwarden.config import Settings  # noqa: E402
from lintwarden.dispatch import Dispatcher, DispatchProfile, ToolEvent  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "DispatchProfile",
    "Dispatcher",
    "Settings",
    "ToolEvent",
]

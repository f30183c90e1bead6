"""
Shared constants for Lintwarden.

This module provides a single source of truth for values that are used
across multiple modules.
"""

# Exit codes reported to the host
EXIT_OK = 0
"""No-op or clean pipeline."""

EXIT_CONFIG_ERROR = 1
"""Lintwarden itself could not run (unknown profile, bad profiles file)."""

EXIT_ISSUES_FOUND = 2
"""Linter reported issues. The host surfaces stderr back to the agent."""

# Synthetic return codes produced by the process runner
RETURNCODE_NOT_FOUND = 127
"""Tool executable could not be found (same code a shell uses)."""

RETURNCODE_TIMEOUT = 124
"""Tool exceeded its timeout (same code coreutils `timeout` uses)."""

RETURNCODE_NOT_EXECUTABLE = 126
"""Tool exists but could not be executed (same code a shell uses)."""

# Event payload keys, in lookup order
PRIMARY_PATH_KEYS = ("tool_input", "file_path")
"""Where Write/Edit tools put the target path."""

FALLBACK_PATH_KEYS = ("tool_response", "filePath")
"""Where some tools report the written path instead."""

# Host wiring
DEFAULT_HOOK_MATCHER = "Write|Edit|MultiEdit"
"""Tool-name matcher for the PostToolUse hook entry."""

DEFAULT_PROFILE = "python"
"""Profile used by `lintwarden run` when none is given."""

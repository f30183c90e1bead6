"""
Python stack profile: ruff auto-fix, then black.
"""

from __future__ import annotations

import lintwarden.dispatch.profiles as profiles

PYTHON_PROFILE = profiles.DispatchProfile(
    name="python",
    description="Ruff auto-fix and Black formatting for Python files",
    extensions=(".py",),
    fix_command=("ruff", "check", "--fix"),
    format_command=("black", "--quiet"),
    issue_label="Ruff",
)

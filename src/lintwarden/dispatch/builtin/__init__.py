"""
Builtin dispatch profiles.

These profiles are bundled with Lintwarden and reproduce the stock
Python and TypeScript/React lint hooks.
"""

from __future__ import annotations

import lintwarden.dispatch.profiles as profiles

# Import profile definitions
from lintwarden.dispatch.builtin.python import PYTHON_PROFILE
from lintwarden.dispatch.builtin.web import WEB_PROFILE


def get_all_profiles() -> list[profiles.DispatchProfile]:
    """Get all builtin profiles."""
    return [
        PYTHON_PROFILE,
        WEB_PROFILE,
    ]


__all__ = [
    "get_all_profiles",
    "PYTHON_PROFILE",
    "WEB_PROFILE",
]

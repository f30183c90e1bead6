"""
Web stack profile: ESLint auto-fix, then Prettier, both through npx.
"""

from __future__ import annotations

import lintwarden.dispatch.profiles as profiles

WEB_PROFILE = profiles.DispatchProfile(
    name="web",
    description="ESLint auto-fix and Prettier formatting for TypeScript/React files",
    extensions=(".ts", ".tsx", ".jsx"),
    fix_command=("npx", "eslint", "--fix"),
    format_command=("npx", "prettier", "--write"),
    issue_label="ESLint",
)

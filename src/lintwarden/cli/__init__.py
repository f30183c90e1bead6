"""
CLI module for Lintwarden.

Provides the command-line interface using Click.
"""

from lintwarden.cli.main import cli, lint_python, lint_react, run_profile

__all__ = ["cli", "lint_python", "lint_react", "run_profile"]

"""
Configuration module for Lintwarden.

Uses pydantic-settings for environment variable loading.
"""

from lintwarden.config.settings import (
    Settings,
    find_git_root,
    find_project_root,
)

__all__ = ["Settings", "find_git_root", "find_project_root"]

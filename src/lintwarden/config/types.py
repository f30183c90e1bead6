"""Configuration type definitions for Lintwarden settings.

These are the "config section" types nested within the main Settings
class:
- LoggingConfig: enabled, dir, level, private
- ProfilesSettings: default profile, extra profile files

All types use `extra="allow"` so unknown keys are preserved and can be
reported instead of silently dropped.
"""

import typing as _typing

import pydantic as _pydantic

import lintwarden.constants as constants


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    Unknown fields are preserved rather than dropped, so typos can be
    surfaced with get_extra_fields().
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    enabled: bool = True
    """Append one JSONL record per dispatch to the run log."""

    dir: str | None = None
    """Run log directory. None = /tmp/lintwarden-logs-<user>."""

    level: _typing.Literal["debug", "info", "warning", "error"] = "warning"
    """Level for diagnostic logging on stderr."""

    private: bool = True
    """Lock run log directory to owner-only (drwx------)."""


class ProfilesSettings(ConfigBase):
    """
    Profile selection settings.

    YAML section: profiles.*
    """

    default: str = constants.DEFAULT_PROFILE
    """Profile used when `lintwarden run` is given no name."""

    paths: list[str] = _pydantic.Field(default_factory=list)
    """Extra profiles.yaml files, loaded after global and project files."""

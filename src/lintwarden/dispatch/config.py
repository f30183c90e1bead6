"""
Profile configuration loading.

Profiles are configured in YAML files:
- Global: ~/.config/lintwarden/profiles.yaml
- Project: .lintwarden/profiles.yaml

Builtin profiles load first, then global, then project. A profile with
the same name as an earlier one replaces it.
"""

from __future__ import annotations

import pathlib as _pathlib

import pydantic as _pydantic
import yaml as _yaml

import lintwarden.config.sources as sources
import lintwarden.dispatch.profiles as dispatch_profiles
import lintwarden.errors as errors

PROFILES_FILENAME = "profiles.yaml"


class ProfilesConfig(_pydantic.BaseModel):
    """
    Complete profiles configuration from a profiles.yaml file.

    ```yaml
    version: 1
    profiles:
      - name: python
        extensions: [".py", ".pyi"]
        fix_command: ["ruff", "check", "--fix"]
        format_command: ["ruff", "format"]
        issue_label: Ruff
    ```
    """

    model_config = _pydantic.ConfigDict(extra="forbid")

    version: int = 1
    """Config version (for future compatibility)."""

    profiles: list[dispatch_profiles.DispatchProfile] = _pydantic.Field(default_factory=list)
    """Profiles in definition order."""

    @_pydantic.model_validator(mode="after")
    def _validate_unique_names(self) -> ProfilesConfig:
        """Names must be unique within one file."""
        seen: set[str] = set()
        for profile in self.profiles:
            if profile.name in seen:
                raise ValueError(f"duplicate profile name '{profile.name}'")
            seen.add(profile.name)
        return self


def load_profiles_yaml(path: _pathlib.Path) -> ProfilesConfig:
    """
    Load profiles configuration from a YAML file.

    Args:
        path: Path to profiles.yaml file.

    Returns:
        Parsed ProfilesConfig.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ProfileConfigError: If file is unreadable or invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Profiles config not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise errors.ProfileConfigError(path, f"cannot read file: {e}") from e

    try:
        data = _yaml.safe_load(content) or {}
    except _yaml.YAMLError as e:
        raise errors.ProfileConfigError(path, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise errors.ProfileConfigError(
            path, f"config must be a YAML mapping (dict), got {type(data).__name__}"
        )

    try:
        return ProfilesConfig.model_validate(data)
    except _pydantic.ValidationError as e:
        raise errors.ProfileConfigError(path, str(e)) from e


def get_global_profiles_path() -> _pathlib.Path:
    """Get the path to global profiles config."""
    return sources.get_user_config_dir() / PROFILES_FILENAME


def get_project_profiles_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """Get the path to project-local profiles config."""
    return sources.get_project_config_dir(project_root) / PROFILES_FILENAME


def load_profile_layers(
    project_root: _pathlib.Path | None = None,
    *,
    extra_paths: list[_pathlib.Path] | None = None,
) -> list[tuple[str, _pathlib.Path, ProfilesConfig]]:
    """
    Load every profiles file that exists, lowest precedence first.

    Layers: global, project, then any extra paths in order. Missing files
    are skipped; invalid files raise ProfileConfigError.

    Returns:
        List of (layer_name, path, config) tuples.
    """
    candidates: list[tuple[str, _pathlib.Path]] = [("global", get_global_profiles_path())]
    if project_root is not None:
        candidates.append(("project", get_project_profiles_path(project_root)))
    for path in extra_paths or []:
        candidates.append(("extra", path))

    layers: list[tuple[str, _pathlib.Path, ProfilesConfig]] = []
    for layer_name, path in candidates:
        if not path.exists():
            continue
        layers.append((layer_name, path, load_profiles_yaml(path)))

    return layers

"""Custom pydantic-settings sources for Lintwarden configuration.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .lintwarden/config.yaml in project root
3. User config: ~/.config/lintwarden/config.yaml (or LINTWARDEN_CONFIG_DIR)

YAML layers are merged so nested sections combine key by key while
other values override.

Environment variables:
- LINTWARDEN_CONFIG_DIR: Override user config directory (default: ~/.config/lintwarden)
"""

import copy as _copy
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import lintwarden.errors as errors

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "LINTWARDEN_CONFIG_DIR"

CONFIG_FILENAME = "config.yaml"


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects LINTWARDEN_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "lintwarden"


def get_project_config_dir(project_root: _pathlib.Path) -> _pathlib.Path:
    """Get the project-local config directory (.lintwarden/)."""
    return project_root / ".lintwarden"


def deep_merge(
    base: dict[str, _typing.Any],
    override: dict[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Merge two dicts recursively.

    Nested dicts merge key by key; any other value in override replaces
    the one in base. Neither input is modified.
    """
    result = _copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = _copy.deepcopy(value)
    return result


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML file and return its contents as a dict.

    Returns:
        Parsed YAML contents, or None if file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or contains non-dict content at the top level.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise errors.ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise errors.ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise errors.ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise errors.ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class YamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads from layered YAML config files.

    Layers (lowest to highest precedence):
    1. User config (~/.config/lintwarden/config.yaml)
    2. Project config (.lintwarden/config.yaml)

    Both layers are optional.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Optional project root path for project-level config.
            user_config_path: Override path for user config file (for testing).
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._data = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        merged: dict[str, _typing.Any] = {}

        user_path = self._user_config_path or get_user_config_dir() / CONFIG_FILENAME
        candidates = [("user", user_path)]
        if self._project_root is not None:
            candidates.append(
                ("project", get_project_config_dir(self._project_root) / CONFIG_FILENAME)
            )

        for layer_name, path in candidates:
            if not path.exists():
                continue
            content = load_yaml_file(path)
            if content:
                merged = deep_merge(merged, content)
                self._loaded_layers.append((layer_name, path))

        return merged

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """Layers that were found and loaded, lowest precedence first."""
        return list(self._loaded_layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return merged config as a plain dict for Pydantic validation."""
        return _copy.deepcopy(self._data)

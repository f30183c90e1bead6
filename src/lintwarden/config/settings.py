"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with LINTWARDEN_ prefix
3. .env file (only if LINTWARDEN_ENV_FILE points at one)
4. Layered YAML config files:
   - Project config: .lintwarden/config.yaml (highest)
   - User config: ~/.config/lintwarden/config.yaml

Nested config uses double underscore delimiter:
  LINTWARDEN_LOGGING__LEVEL=debug
  LINTWARDEN_PROFILES__DEFAULT=web
"""

import getpass as _getpass
import os as _os
import pathlib as _pathlib
import subprocess as _subprocess
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import lintwarden.config.sources as sources
import lintwarden.config.types as types


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit LINTWARDEN_ENV_FILE is honored. A hook runs in
    whatever directory the host happens to use, so a stray .env there
    must not change behavior.
    """
    if env_file := _os.environ.get("LINTWARDEN_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


def _get_username() -> str:
    """Get the current username for directory naming."""
    try:
        return _getpass.getuser()
    except Exception:
        return "unknown"


def find_git_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path | None:
    """Find the git repository root from the given path or current directory."""
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    try:
        result = _subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            cwd=start_path,
            timeout=5,
        )
        if result.returncode == 0:
            return _pathlib.Path(result.stdout.strip())
    except (_subprocess.TimeoutExpired, FileNotFoundError, OSError):
        pass
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Find the project root directory.

    Tries (in order):
    1. Git repository root
    2. Nearest directory containing a project marker
    3. The start path itself
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    git_root = find_git_root(start_path)
    if git_root:
        return git_root

    markers = [".lintwarden", "pyproject.toml", "package.json", "setup.py", ".git"]
    current = start_path.resolve()
    while current != current.parent:
        if any((current / marker).exists() for marker in markers):
            return current
        current = current.parent

    return start_path


class Settings(_pydantic_settings.BaseSettings):
    """
    Lintwarden configuration settings.

    All settings can be overridden via environment variables with LINTWARDEN_ prefix.
    For nested config, use double underscore: LINTWARDEN_LOGGING__ENABLED=false
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="LINTWARDEN_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # LINTWARDEN_LOGGING__LEVEL
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args) (highest)
        2. env_settings (LINTWARDEN_* env vars)
        3. dotenv_settings (.env file)
        4. yaml_settings (config.yaml layers)
        5. (defaults via Field definitions) (lowest)
        """
        project_root = find_project_root()

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlSettingsSource(settings_cls, project_root),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    version: int = _pydantic.Field(default=1, description="Config schema version")

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Logging settings."""

    profiles: types.ProfilesSettings = _pydantic.Field(default_factory=types.ProfilesSettings)
    """Profile selection settings."""

    @property
    def verbose(self) -> bool:
        """Whether debug logging is on."""
        return self.logging.level == "debug"

    def get_log_dir(self) -> _pathlib.Path:
        """Run log directory, defaulting to a per-user directory under /tmp."""
        if self.logging.dir:
            return _pathlib.Path(self.logging.dir).expanduser()
        return _pathlib.Path(f"/tmp/lintwarden-logs-{_get_username()}")

    def get_extra_profile_paths(self, base: _pathlib.Path | None = None) -> list[_pathlib.Path]:
        """Extra profiles files, relative entries resolved against base."""
        base = base or _pathlib.Path.cwd()
        paths = []
        for entry in self.profiles.paths:
            path = _pathlib.Path(entry).expanduser()
            paths.append(path if path.is_absolute() else base / path)
        return paths

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Unknown top-level keys (likely typos in config files)."""
        return dict(self.model_extra) if self.model_extra else {}

"""
Profile registry - the set of profiles available to the CLI.

Combines builtin profiles with those from profiles.yaml files and
remembers where each profile came from.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

import lintwarden.dispatch.builtin as builtin
import lintwarden.dispatch.config as config
import lintwarden.dispatch.profiles as profiles
import lintwarden.errors as errors


class ProfileRegistry:
    """
    Registry of dispatch profiles by name.

    Later registrations replace earlier ones with the same name.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, profiles.DispatchProfile] = {}
        self._sources: dict[str, str] = {}

    @classmethod
    def with_builtins(cls) -> ProfileRegistry:
        """Create a registry holding only the builtin profiles."""
        registry = cls()
        for profile in builtin.get_all_profiles():
            registry.register(profile, source="builtin")
        return registry

    @classmethod
    def from_config(
        cls,
        project_root: _pathlib.Path | None = None,
        *,
        extra_paths: list[_pathlib.Path] | None = None,
    ) -> ProfileRegistry:
        """
        Create a registry from builtins plus all profiles files.

        Args:
            project_root: Project root for .lintwarden/profiles.yaml.
            extra_paths: Additional profiles files, highest precedence.

        Raises:
            ProfileConfigError: If any profiles file is invalid.
        """
        registry = cls.with_builtins()
        for layer_name, path, layer in config.load_profile_layers(
            project_root, extra_paths=extra_paths
        ):
            for profile in layer.profiles:
                registry.register(profile, source=f"{layer_name}:{path}")
        return registry

    def register(self, profile: profiles.DispatchProfile, *, source: str = "runtime") -> None:
        """Add or replace a profile."""
        self._profiles[profile.name] = profile
        self._sources[profile.name] = source

    def get(self, name: str) -> profiles.DispatchProfile:
        """
        Look up a profile by name.

        Raises:
            UnknownProfileError: If no profile has that name.
        """
        try:
            return self._profiles[name]
        except KeyError:
            raise errors.UnknownProfileError(name, self.names()) from None

    def source_of(self, name: str) -> str:
        """Where the named profile was defined."""
        self.get(name)
        return self._sources[name]

    def names(self) -> list[str]:
        """Profile names in registration order."""
        return list(self._profiles)

    def list_profiles(self) -> list[profiles.DispatchProfile]:
        """All profiles in registration order."""
        return list(self._profiles.values())

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict."""
        return {
            name: {
                **profile.model_dump(mode="json"),
                "source": self._sources[name],
            }
            for name, profile in self._profiles.items()
        }

"""
Tool event parsing.

The host pipes one JSON payload per file write/edit on stdin. Only the
target file path matters to the dispatcher, and it can live in one of
two places:
- tool_input.file_path (Write/Edit tools)
- tool_response.filePath (fallback when tool_input carries no path)
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import json as _json
import logging as _logging
import typing as _typing

import lintwarden.constants as constants

_logger = _logging.getLogger(__name__)


def _lookup_path(
    payload: _abc.Mapping[str, _typing.Any],
    keys: tuple[str, str],
) -> str | None:
    """
    Look up a nested string field.

    Returns None when any level is missing or not a mapping, or when the
    leaf is not a non-empty string.
    """
    section_key, field_key = keys
    section = payload.get(section_key)
    if not isinstance(section, _abc.Mapping):
        return None

    value = section.get(field_key)
    if isinstance(value, str) and value:
        return value
    return None


@_dataclasses.dataclass(frozen=True)
class ToolEvent:
    """
    A single file write/edit notification from the host.

    Attributes:
        file_path: Resolved target path, or None if the payload has none.
        raw: The parsed payload (empty dict if it could not be parsed).
    """

    file_path: str | None = None
    raw: dict[str, _typing.Any] = _dataclasses.field(default_factory=dict)

    @property
    def has_path(self) -> bool:
        """Whether a file path was resolved from the payload."""
        return self.file_path is not None

    @property
    def tool_name(self) -> str | None:
        """Name of the tool that triggered the event, if the host sent it."""
        value = self.raw.get("tool_name")
        return value if isinstance(value, str) else None

    @classmethod
    def from_dict(cls, payload: _abc.Mapping[str, _typing.Any]) -> ToolEvent:
        """
        Build an event from a parsed payload.

        The primary key wins; the fallback is only consulted when the
        primary is absent or empty.
        """
        file_path = _lookup_path(payload, constants.PRIMARY_PATH_KEYS)
        if file_path is None:
            file_path = _lookup_path(payload, constants.FALLBACK_PATH_KEYS)

        return cls(file_path=file_path, raw=dict(payload))

    @classmethod
    def from_json(cls, text: str) -> ToolEvent:
        """
        Parse an event from JSON text.

        Empty input, malformed JSON and non-object payloads all produce an
        event without a path rather than an error.
        """
        if not text.strip():
            return cls()

        try:
            payload = _json.loads(text)
        except _json.JSONDecodeError as e:
            _logger.debug("Ignoring malformed event payload: %s", e)
            return cls()

        if not isinstance(payload, dict):
            _logger.debug("Ignoring non-object event payload (%s)", type(payload).__name__)
            return cls()

        return cls.from_dict(payload)

    @classmethod
    def from_stream(cls, stream: _typing.TextIO) -> ToolEvent:
        """
        Read the whole stream and parse it as an event.

        Input that cannot be decoded is malformed like any other bad
        payload and yields an event without a path.
        """
        try:
            text = stream.read()
        except UnicodeDecodeError as e:
            _logger.debug("Ignoring undecodable event payload: %s", e)
            return cls()
        return cls.from_json(text)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to a JSON-serializable dict for the run log."""
        result: dict[str, _typing.Any] = {"file_path": self.file_path}
        if self.tool_name is not None:
            result["tool_name"] = self.tool_name
        return result

"""
Run logger for Lintwarden.

Appends one JSON record per dispatch to a daily JSONL file, so hook
activity can be audited after the fact without touching the host's
view of stdout/stderr.
"""

import datetime as _datetime
import json as _json
import os as _os
import pathlib as _pathlib
import typing as _typing


class RunLogger:
    """
    Logs dispatch outcomes to a JSONL file.

    Each line is a JSON object:
    - timestamp, pid
    - event: "dispatch" or "error"
    - the outcome fields (profile, status, file_path, exit_code, tool results)

    Usage:
        run_log = RunLogger(log_dir="/tmp/lintwarden-logs")
        run_log.log_dispatch(outcome.to_dict())
    """

    def __init__(
        self,
        *,
        log_dir: _pathlib.Path | str | None = None,
        log_file: _pathlib.Path | str | None = None,
        private_mode: bool = True,
        enabled: bool = True,
    ) -> None:
        """
        Initialize the run logger.

        Args:
            log_dir: Directory for log files (default: /tmp/lintwarden-logs).
            log_file: Explicit log file path (overrides log_dir + auto name).
            private_mode: If True, set log directory to drwx------ (0o700).
            enabled: Whether logging is enabled.
        """
        self._enabled = enabled
        self._file_path: _pathlib.Path | None = None
        self._record_count = 0

        if not enabled:
            return

        if log_file:
            self._file_path = _pathlib.Path(log_file)
            return

        base_dir = _pathlib.Path(log_dir) if log_dir else _pathlib.Path("/tmp/lintwarden-logs")
        try:
            base_dir.mkdir(parents=True, exist_ok=True)
            if private_mode:
                _os.chmod(base_dir, 0o700)
        except OSError:
            # Logging shouldn't break the hook
            self._enabled = False
            return

        filename = f"lintwarden_{_datetime.date.today():%Y%m%d}.jsonl"
        self._file_path = base_dir / filename

    @property
    def file_path(self) -> _pathlib.Path | None:
        """Get the log file path."""
        return self._file_path

    @property
    def enabled(self) -> bool:
        """Check if logging is enabled."""
        return self._enabled

    @property
    def record_count(self) -> int:
        """Number of records written by this logger."""
        return self._record_count

    def _write_record(self, event_type: str, data: dict[str, _typing.Any]) -> None:
        """Append a record to the log file."""
        if not self._enabled or self._file_path is None:
            return

        record = {
            "timestamp": _datetime.datetime.now().isoformat(),
            "pid": _os.getpid(),
            "event": event_type,
            **data,
        }

        try:
            with open(self._file_path, "a", encoding="utf-8") as f:
                f.write(_json.dumps(record, default=str) + "\n")
        except OSError:
            # Silently ignore write errors - logging shouldn't break the hook
            return

        self._record_count += 1

    def log_dispatch(self, outcome: dict[str, _typing.Any]) -> None:
        """Log a completed dispatch."""
        self._write_record("dispatch", outcome)

    def log_error(self, message: str, *, profile: str | None = None) -> None:
        """Log a configuration error that stopped the dispatch."""
        data: dict[str, _typing.Any] = {"message": message}
        if profile is not None:
            data["profile"] = profile
        self._write_record("error", data)


def read_records(path: _pathlib.Path) -> list[dict[str, _typing.Any]]:
    """
    Read all records from a run log file.

    Lines that are not valid JSON are skipped.
    """
    records: list[dict[str, _typing.Any]] = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                records.append(_json.loads(line))
            except _json.JSONDecodeError:
                continue
    return records

"""
Run logging for Lintwarden.

Provides JSONL logging of dispatch outcomes for auditing hook activity.
"""

from lintwarden.logging.run_logger import RunLogger, read_records

__all__ = [
    "RunLogger",
    "read_records",
]

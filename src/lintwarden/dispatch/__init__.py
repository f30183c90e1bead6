"""
Lint dispatch for Lintwarden.

The dispatcher reacts to a host's file write/edit event by running one
profile's auto-fixing linter and formatter against the edited file.

Example usage:
    from lintwarden.dispatch import Dispatcher, ProfileRegistry, ToolEvent

    registry = ProfileRegistry.from_config(project_root=Path.cwd())
    dispatcher = Dispatcher(registry.get("python"))
    outcome = dispatcher.dispatch(ToolEvent.from_stream(sys.stdin))
    if outcome.diagnostic:
        sys.stderr.write(outcome.diagnostic)
    sys.exit(outcome.exit_code)
"""

from lintwarden.dispatch.dispatcher import (
    DispatchOutcome,
    Dispatcher,
    DispatchStatus,
)
from lintwarden.dispatch.events import ToolEvent
from lintwarden.dispatch.profiles import DispatchProfile
from lintwarden.dispatch.registry import ProfileRegistry
from lintwarden.dispatch.runner import (
    ProcessResult,
    ProcessRunner,
    SubprocessRunner,
)

__all__ = [
    "DispatchOutcome",
    "DispatchProfile",
    "DispatchStatus",
    "Dispatcher",
    "ProcessResult",
    "ProcessRunner",
    "ProfileRegistry",
    "SubprocessRunner",
    "ToolEvent",
]

"""
Main CLI entry point for Lintwarden.

Provides the command-line interface using Click. The `run` command is
what a host's PostToolUse hook invokes; `lint-python` and `lint-react`
are fixed-profile shortcuts for the same thing.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import shutil as _shutil
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.table as _rich_table
import yaml as _yaml

import lintwarden
import lintwarden.config as config
import lintwarden.config.sources as config_sources
import lintwarden.constants as constants
import lintwarden.dispatch as dispatch
import lintwarden.dispatch.config as dispatch_config
import lintwarden.errors as errors
import lintwarden.logging as run_logging

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

_LOG_FORMAT = "lintwarden: %(levelname)s %(name)s: %(message)s"

_logger = _logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    """Send diagnostic logging to stderr. stdout is never written by hooks."""
    _logging.basicConfig(
        stream=_sys.stderr,
        level=getattr(_logging, level.upper(), _logging.WARNING),
        format=_LOG_FORMAT,
        force=True,
    )


class _ConfigErrorExitMixin:
    """
    Report usage errors with exit code 1 instead of click's default 2.

    Hosts treat exit 2 as linter findings and feed stderr back to the
    agent, so a bad option must not look like lint output.
    """

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: _click.Context | None = None,
        **extra: _typing.Any,
    ) -> _click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)  # type: ignore[misc]
        except _click.UsageError as e:
            e.exit_code = constants.EXIT_CONFIG_ERROR
            raise

    def invoke(self, ctx: _click.Context) -> _typing.Any:
        try:
            return super().invoke(ctx)  # type: ignore[misc]
        except _click.UsageError as e:
            e.exit_code = constants.EXIT_CONFIG_ERROR
            raise


class LintwardenGroup(_ConfigErrorExitMixin, _click.Group):
    """Top-level command group."""


class HookCommand(_ConfigErrorExitMixin, _click.Command):
    """Standalone hook entry point pinned to one profile."""


def _load_settings() -> config.Settings:
    """Load settings, turning config errors into exit code 1."""
    try:
        return config.Settings()
    except (errors.ConfigFileError, _pydantic.ValidationError) as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(constants.EXIT_CONFIG_ERROR) from None


def _load_registry(
    settings: config.Settings,
    project_root: _pathlib.Path,
) -> dispatch.ProfileRegistry:
    return dispatch.ProfileRegistry.from_config(
        project_root,
        extra_paths=settings.get_extra_profile_paths(project_root),
    )


def run_profile(
    profile_name: str,
    *,
    settings: config.Settings,
    stdin: _typing.TextIO,
    stderr: _typing.TextIO,
    cwd: _pathlib.Path | None = None,
    process_runner: dispatch.ProcessRunner | None = None,
) -> int:
    """
    Dispatch one event from stdin with the named profile.

    Args:
        profile_name: Profile to use.
        settings: Loaded settings.
        stdin: Stream carrying the host's JSON event.
        stderr: Stream for the diagnostic (shown to the agent on exit 2).
        cwd: Working directory for path resolution and tools.
        process_runner: Override the tool runner (tests).

    Returns:
        Process exit code: 0 no-op/clean, 2 issues found, 1 config error.
    """
    run_log = run_logging.RunLogger(
        log_dir=settings.get_log_dir(),
        private_mode=settings.logging.private,
        enabled=settings.logging.enabled,
    )

    # Read the event before anything can fail so the host's pipe is drained
    event = dispatch.ToolEvent.from_stream(stdin)

    project_root = config.find_project_root(cwd)
    try:
        registry = _load_registry(settings, project_root)
        profile = registry.get(profile_name)
    except errors.LintwardenError as e:
        _logger.error("%s", e)
        run_log.log_error(str(e), profile=profile_name)
        stderr.write(f"lintwarden: {e}\n")
        return constants.EXIT_CONFIG_ERROR

    dispatcher = dispatch.Dispatcher(profile, process_runner=process_runner, cwd=cwd)
    outcome = dispatcher.dispatch(event)

    record = outcome.to_dict()
    record.update(event.to_dict())
    run_log.log_dispatch(record)

    if outcome.diagnostic:
        stderr.write(outcome.diagnostic)
        stderr.flush()

    return outcome.exit_code


@_click.group(cls=LintwardenGroup, context_settings=CONTEXT_SETTINGS)
@_click.version_option(lintwarden.__version__, "-v", "--version", prog_name="lintwarden")
@_click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging on stderr",
)
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """
    Lintwarden - post-edit lint dispatcher for coding-agent hooks.

    \b
    Examples:
        echo '{"tool_input": {"file_path": "app.py"}}' | lintwarden run python
        lintwarden profiles list               # Show available profiles
        lintwarden hook-config web             # Print hook wiring for the host
        lintwarden log show                    # Recent dispatches
    """
    settings = _load_settings()
    _configure_logging("debug" if verbose else settings.logging.level)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@_click.argument("profile_name", required=False)
@_click.option(
    "--cwd",
    type=_click.Path(exists=True, file_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Directory for resolving relative paths and running tools",
)
@_click.option("--verbose", is_flag=True, help="Enable debug logging on stderr")
@_click.pass_context
def run(
    ctx: _click.Context,
    profile_name: str | None,
    cwd: _pathlib.Path | None,
    verbose: bool,
) -> None:
    """Lint and format the file named by the event on stdin.

    Reads one JSON event from stdin. Exits 0 when there is nothing to do
    or the file is clean, and 2 (with the linter output on stderr) when
    the linter reports issues.

    \b
    Examples:
        lintwarden run python < event.json
        lintwarden run web --cwd frontend < event.json
    """
    settings: config.Settings = ctx.obj["settings"]
    if verbose:
        _configure_logging("debug")
    code = run_profile(
        profile_name or settings.profiles.default,
        settings=settings,
        stdin=_sys.stdin,
        stderr=_sys.stderr,
        cwd=cwd,
    )
    ctx.exit(code)


def _make_hook_command(command_name: str, profile_name: str) -> _click.Command:
    """Build a standalone console-script command pinned to one profile."""

    @_click.command(
        cls=HookCommand,
        name=command_name,
        context_settings=CONTEXT_SETTINGS,
        help=f"Run the '{profile_name}' lint profile on the event from stdin.",
    )
    @_click.option("--verbose", is_flag=True, help="Enable debug logging on stderr")
    def hook(verbose: bool) -> None:
        settings = _load_settings()
        _configure_logging("debug" if verbose else settings.logging.level)
        code = run_profile(
            profile_name,
            settings=settings,
            stdin=_sys.stdin,
            stderr=_sys.stderr,
        )
        raise SystemExit(code)

    return hook


lint_python = _make_hook_command("lint-python", "python")
lint_react = _make_hook_command("lint-react", "web")


@cli.group(name="profiles")
def profiles_cmd() -> None:
    """Inspect dispatch profiles."""
    pass


def _registry_or_exit(settings: config.Settings) -> dispatch.ProfileRegistry:
    try:
        return _load_registry(settings, config.find_project_root())
    except errors.LintwardenError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(constants.EXIT_CONFIG_ERROR) from None


def _profile_or_exit(registry: dispatch.ProfileRegistry, name: str) -> dispatch.DispatchProfile:
    try:
        return registry.get(name)
    except errors.UnknownProfileError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(constants.EXIT_CONFIG_ERROR) from None


@profiles_cmd.command(name="list")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def profiles_list(ctx: _click.Context, json_output: bool) -> None:
    """List available profiles."""
    registry = _registry_or_exit(ctx.obj["settings"])

    if json_output:
        _click.echo(_json.dumps(registry.to_dict(), indent=2))
        return

    table = _rich_table.Table(title="Lint profiles")
    table.add_column("Name", no_wrap=True)
    table.add_column("Extensions")
    table.add_column("Pipeline")
    table.add_column("Source")
    for profile in registry.list_profiles():
        table.add_row(
            profile.name,
            " ".join(profile.extensions),
            profile.describe_commands(),
            registry.source_of(profile.name),
        )
    _rich_console.Console().print(table)


@profiles_cmd.command(name="show")
@_click.argument("name")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def profiles_show(ctx: _click.Context, name: str, json_output: bool) -> None:
    """Show one profile's full definition."""
    registry = _registry_or_exit(ctx.obj["settings"])
    profile = _profile_or_exit(registry, name)
    data = profile.model_dump(mode="json")

    if json_output:
        _click.echo(_json.dumps(data, indent=2))
        return

    _click.echo(f"# source: {registry.source_of(name)}")
    _click.echo(_yaml.safe_dump(data, sort_keys=False, default_flow_style=None), nl=False)


@profiles_cmd.command(name="check")
@_click.argument("name")
@_click.pass_context
def profiles_check(ctx: _click.Context, name: str) -> None:
    """Check that a profile's tools are on PATH.

    Exits 1 if any executable is missing.
    """
    registry = _registry_or_exit(ctx.obj["settings"])
    profile = _profile_or_exit(registry, name)

    missing = False
    for executable in profile.executables():
        location = _shutil.which(executable)
        if location:
            _click.echo(f"✓ {executable}: {location}")
        else:
            missing = True
            _click.echo(f"✗ {executable}: not found on PATH")

    if missing:
        raise SystemExit(constants.EXIT_CONFIG_ERROR)


@cli.command(name="hook-config")
@_click.argument("profile_name")
@_click.option(
    "--matcher",
    default=constants.DEFAULT_HOOK_MATCHER,
    show_default=True,
    help="Tool-name matcher for the PostToolUse entry",
)
@_click.option(
    "--command",
    "command_prefix",
    default="lintwarden run",
    show_default=True,
    help="Command the host runs (profile name is appended)",
)
@_click.pass_context
def hook_config(
    ctx: _click.Context,
    profile_name: str,
    matcher: str,
    command_prefix: str,
) -> None:
    """Print the host hooks JSON that wires a profile to file edits.

    \b
    Examples:
        lintwarden hook-config python > .claude/hooks.json
        lintwarden hook-config web --matcher "Write|Edit"
    """
    registry = _registry_or_exit(ctx.obj["settings"])
    _profile_or_exit(registry, profile_name)

    block = {
        "hooks": {
            "PostToolUse": [
                {
                    "matcher": matcher,
                    "hooks": [
                        {
                            "type": "command",
                            "command": f"{command_prefix} {profile_name}",
                        }
                    ],
                }
            ]
        }
    }
    _click.echo(_json.dumps(block, indent=2))


@cli.group(name="log")
def log_cmd() -> None:
    """Inspect the dispatch run log."""
    pass


@log_cmd.command(name="show")
@_click.option("--limit", type=int, default=20, show_default=True, help="Records to show")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def log_show(ctx: _click.Context, limit: int, json_output: bool) -> None:
    """Show the most recent dispatch records."""
    settings: config.Settings = ctx.obj["settings"]
    log_dir = settings.get_log_dir()

    records: list[dict[str, _typing.Any]] = []
    if log_dir.is_dir():
        for path in sorted(log_dir.glob("lintwarden_*.jsonl")):
            records.extend(run_logging.read_records(path))
    records = records[-limit:] if limit > 0 else []

    if json_output:
        _click.echo(_json.dumps(records, indent=2))
        return

    if not records:
        _click.echo(f"No dispatch records in {log_dir}")
        return

    table = _rich_table.Table(title=f"Recent dispatches ({log_dir})")
    table.add_column("Time", no_wrap=True)
    table.add_column("Profile")
    table.add_column("Status")
    table.add_column("Exit", justify="right")
    table.add_column("File")
    for record in records:
        table.add_row(
            str(record.get("timestamp", ""))[:19],
            str(record.get("profile", "")),
            str(record.get("status", record.get("event", ""))),
            str(record.get("exit_code", "")),
            str(record.get("file_path") or record.get("message", "")),
        )
    _rich_console.Console().print(table)


@cli.group(name="config")
def config_cmd() -> None:
    """Inspect configuration."""
    pass


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool) -> None:
    """Show the effective configuration."""
    settings: config.Settings = ctx.obj["settings"]
    data = settings.model_dump(mode="json")

    if as_json:
        _click.echo(_json.dumps(data, indent=2))
    else:
        _click.echo(_yaml.safe_dump(data, sort_keys=False), nl=False)

    extra = settings.get_extra_fields()
    if extra:
        _click.echo(f"Warning: unknown config keys: {', '.join(sorted(extra))}", err=True)


@config_cmd.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Show all paths even if not found")
def config_path(show_all: bool) -> None:
    """Show configuration file paths and their status.

    \b
    Examples:
        lintwarden config path        # Show existing config files
        lintwarden config path --all  # Show all possible paths
    """
    project_root = config.find_project_root()
    paths = [
        ("User config", config_sources.get_user_config_dir() / config_sources.CONFIG_FILENAME),
        ("User profiles", dispatch_config.get_global_profiles_path()),
        (
            "Project config",
            config_sources.get_project_config_dir(project_root) / config_sources.CONFIG_FILENAME,
        ),
        ("Project profiles", dispatch_config.get_project_profiles_path(project_root)),
    ]

    for name, path in paths:
        exists = path.exists()
        if exists or show_all:
            status = "✓" if exists else "✗"
            _click.echo(f"{status} {name}: {path}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

"""Tests for CLI main module."""

import io as _io
import json as _json
import os as _os
import pathlib as _pathlib
import stat as _stat
import typing as _typing

import click.testing as _click_testing
import pytest as _pytest

import lintwarden.cli as cli
import lintwarden.config as config
import lintwarden.logging as run_logging


def _payload(file_path: str) -> str:
    return _json.dumps({"tool_input": {"file_path": file_path}})


class TestCLIBasics:
    """Test basic CLI functionality."""

    @_pytest.fixture
    def runner(self, isolated_env: _pathlib.Path) -> _click_testing.CliRunner:
        return _click_testing.CliRunner()

    def test_help_shows_all_commands(self, runner: _click_testing.CliRunner) -> None:
        """Help output should list all available commands."""
        result = runner.invoke(cli.cli, ["--help"])
        assert result.exit_code == 0
        for cmd in ["run", "profiles", "hook-config", "log", "config"]:
            assert cmd in result.output, f"Command '{cmd}' missing from help"

    def test_version_shows_current_version(self, runner: _click_testing.CliRunner) -> None:
        """Version flag should show the package version."""
        result = runner.invoke(cli.cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_profiles_list(self, runner: _click_testing.CliRunner) -> None:
        """profiles list shows builtins."""
        result = runner.invoke(cli.cli, ["profiles", "list"])
        assert result.exit_code == 0
        assert "python" in result.output
        assert "web" in result.output

    def test_profiles_list_json(self, runner: _click_testing.CliRunner) -> None:
        """profiles list --json is machine readable."""
        result = runner.invoke(cli.cli, ["profiles", "list", "--json"])
        assert result.exit_code == 0
        data = _json.loads(result.output)
        assert data["python"]["fix_command"] == ["ruff", "check", "--fix"]
        assert data["web"]["extensions"] == [".ts", ".tsx", ".jsx"]

    def test_profiles_show(self, runner: _click_testing.CliRunner) -> None:
        """profiles show dumps one profile as YAML."""
        result = runner.invoke(cli.cli, ["profiles", "show", "web"])
        assert result.exit_code == 0
        assert "# source: builtin" in result.output
        assert "issue_label: ESLint" in result.output

    def test_profiles_show_unknown(self, runner: _click_testing.CliRunner) -> None:
        """Unknown profile is a config error (exit 1)."""
        result = runner.invoke(cli.cli, ["profiles", "show", "cobol"])
        assert result.exit_code == 1
        assert "Unknown profile 'cobol'" in result.output

    def test_profiles_check_missing_tool(
        self,
        runner: _click_testing.CliRunner,
        isolated_env: _pathlib.Path,
        monkeypatch: _pytest.MonkeyPatch,
    ) -> None:
        """profiles check fails when tools are not on PATH."""
        empty_bin = isolated_env / "empty-bin"
        empty_bin.mkdir()
        monkeypatch.setenv("PATH", str(empty_bin))
        result = runner.invoke(cli.cli, ["profiles", "check", "python"])
        assert result.exit_code == 1
        assert "✗ ruff" in result.output

    def test_hook_config(self, runner: _click_testing.CliRunner) -> None:
        """hook-config prints the PostToolUse wiring."""
        result = runner.invoke(cli.cli, ["hook-config", "python"])
        assert result.exit_code == 0
        data = _json.loads(result.output)
        entry = data["hooks"]["PostToolUse"][0]
        assert entry["matcher"] == "Write|Edit|MultiEdit"
        assert entry["hooks"] == [{"type": "command", "command": "lintwarden run python"}]

    def test_hook_config_custom(self, runner: _click_testing.CliRunner) -> None:
        """Matcher and command prefix can be changed."""
        result = runner.invoke(
            cli.cli,
            ["hook-config", "web", "--matcher", "Write|Edit", "--command", "uvx lintwarden run"],
        )
        data = _json.loads(result.output)
        entry = data["hooks"]["PostToolUse"][0]
        assert entry["matcher"] == "Write|Edit"
        assert entry["hooks"][0]["command"] == "uvx lintwarden run web"

    def test_hook_config_unknown_profile(self, runner: _click_testing.CliRunner) -> None:
        """hook-config refuses unknown profiles."""
        result = runner.invoke(cli.cli, ["hook-config", "cobol"])
        assert result.exit_code == 1

    def test_config_show(self, runner: _click_testing.CliRunner) -> None:
        """config show outputs the effective settings as YAML."""
        result = runner.invoke(cli.cli, ["config", "show"])
        assert result.exit_code == 0
        assert "logging:" in result.output
        assert "profiles:" in result.output

    def test_config_show_json(self, runner: _click_testing.CliRunner) -> None:
        """config show --json outputs JSON."""
        result = runner.invoke(cli.cli, ["config", "show", "--json"])
        data = _json.loads(result.output)
        assert data["profiles"]["default"] == "python"

    def test_config_path_all(self, runner: _click_testing.CliRunner) -> None:
        """config path --all lists every location."""
        result = runner.invoke(cli.cli, ["config", "path", "--all"])
        assert result.exit_code == 0
        assert "User profiles" in result.output
        assert "Project profiles" in result.output

    def test_invalid_config_exits_1(
        self,
        runner: _click_testing.CliRunner,
        isolated_env: _pathlib.Path,
    ) -> None:
        """A broken config.yaml stops the CLI with exit 1."""
        project_dir = isolated_env / ".lintwarden"
        project_dir.mkdir()
        (project_dir / "config.yaml").write_text("- not a mapping\n")
        result = runner.invoke(cli.cli, ["profiles", "list"])
        assert result.exit_code == 1
        assert "config.yaml" in result.output


class TestRunProfile:
    """Tests for run_profile with a fake process runner."""

    def _run(
        self,
        settings: config.Settings,
        payload: str,
        fake_runner: _typing.Any,
        profile: str = "python",
    ) -> tuple[int, str]:
        stderr = _io.StringIO()
        code = cli.run_profile(
            profile,
            settings=settings,
            stdin=_io.StringIO(payload),
            stderr=stderr,
            process_runner=fake_runner,
        )
        return code, stderr.getvalue()

    def test_clean(
        self,
        clean_settings: config.Settings,
        fake_runner: _typing.Any,
        python_file: _pathlib.Path,
    ) -> None:
        """Clean file: exit 0, empty stderr."""
        code, err = self._run(clean_settings, _payload("src/app.py"), fake_runner)
        assert code == 0
        assert err == ""
        assert fake_runner.executables == ["ruff", "black"]

    def test_issues(
        self,
        clean_settings: config.Settings,
        fake_runner: _typing.Any,
        python_file: _pathlib.Path,
    ) -> None:
        """Issues: exit 2, header and output on stderr."""
        fake_runner.returncodes["ruff"] = 1
        fake_runner.outputs["ruff"] = "E999 SyntaxError"
        code, err = self._run(clean_settings, _payload("src/app.py"), fake_runner)
        assert code == 2
        assert err == "Ruff found issues in src/app.py:\nE999 SyntaxError\n"

    def test_unknown_profile(
        self,
        clean_settings: config.Settings,
        fake_runner: _typing.Any,
    ) -> None:
        """Unknown profile: exit 1 and nothing run."""
        code, err = self._run(clean_settings, _payload("a.py"), fake_runner, profile="cobol")
        assert code == 1
        assert "Unknown profile 'cobol'" in err
        assert fake_runner.calls == []

    def test_run_log_written(
        self,
        clean_settings: config.Settings,
        fake_runner: _typing.Any,
        python_file: _pathlib.Path,
    ) -> None:
        """Every dispatch is recorded in the run log."""
        self._run(clean_settings, _payload("src/app.py"), fake_runner)
        self._run(clean_settings, _payload("README.md"), fake_runner)

        log_files = sorted(clean_settings.get_log_dir().glob("lintwarden_*.jsonl"))
        assert len(log_files) == 1
        records = run_logging.read_records(log_files[0])
        assert [r["status"] for r in records] == ["clean", "unsupported_extension"]
        assert records[0]["file_path"] == "src/app.py"

    def test_run_log_disabled(
        self,
        isolated_env: _pathlib.Path,
        monkeypatch: _pytest.MonkeyPatch,
        fake_runner: _typing.Any,
    ) -> None:
        """logging.enabled=false writes no run log."""
        monkeypatch.setenv("LINTWARDEN_LOGGING__ENABLED", "false")
        settings = config.Settings.construct_without_dotenv()
        self._run(settings, _payload("x.md"), fake_runner)
        assert not settings.get_log_dir().exists()


def _write_tool(bin_dir: _pathlib.Path, name: str, body: str) -> None:
    path = bin_dir / name
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | _stat.S_IXUSR | _stat.S_IXGRP | _stat.S_IXOTH)


class TestRunCommand:
    """End-to-end tests with stand-in ruff/black executables on PATH."""

    @_pytest.fixture
    def tool_bin(
        self,
        isolated_env: _pathlib.Path,
        monkeypatch: _pytest.MonkeyPatch,
    ) -> _pathlib.Path:
        bin_dir = isolated_env.parent / "bin"
        bin_dir.mkdir()
        monkeypatch.setenv("PATH", str(bin_dir) + _os.pathsep + _os.environ.get("PATH", ""))
        # black records that it ran
        _write_tool(bin_dir, "black", 'echo "$@" >> "$(dirname "$0")/black.calls"\nexit 0\n')
        return bin_dir

    def test_clean_file(
        self,
        tool_bin: _pathlib.Path,
        python_file: _pathlib.Path,
    ) -> None:
        """Lint-clean file: exit 0, file unchanged, formatter ran."""
        _write_tool(tool_bin, "ruff", "exit 0\n")
        before = python_file.read_bytes()

        result = _click_testing.CliRunner().invoke(
            cli.cli, ["run", "python"], input=_payload("src/app.py")
        )
        assert result.exit_code == 0
        assert python_file.read_bytes() == before
        assert (tool_bin / "black.calls").read_text().strip() == "--quiet src/app.py"

    def test_issues_found(
        self,
        tool_bin: _pathlib.Path,
        python_file: _pathlib.Path,
    ) -> None:
        """Linter failure: exit 2 with diagnostic; formatter still ran."""
        _write_tool(tool_bin, "ruff", 'echo "src/app.py:1:1: F401 unused import" >&2\nexit 1\n')

        result = _click_testing.CliRunner().invoke(
            cli.cli, ["run", "python"], input=_payload("src/app.py")
        )
        assert result.exit_code == 2
        assert "Ruff found issues in src/app.py:" in result.output
        assert "F401 unused import" in result.output
        assert (tool_bin / "black.calls").exists()

    def test_default_profile(
        self,
        tool_bin: _pathlib.Path,
        python_file: _pathlib.Path,
    ) -> None:
        """Without a profile name the configured default is used."""
        _write_tool(tool_bin, "ruff", "exit 1\n")
        result = _click_testing.CliRunner().invoke(
            cli.cli, ["run"], input=_payload("src/app.py")
        )
        assert result.exit_code == 2

    def test_non_matching_file(self, tool_bin: _pathlib.Path, isolated_env: _pathlib.Path) -> None:
        """A markdown file is ignored without running tools."""
        (isolated_env / "notes.md").write_text("# notes\n")
        result = _click_testing.CliRunner().invoke(
            cli.cli, ["run", "python"], input=_payload("notes.md")
        )
        assert result.exit_code == 0
        assert not (tool_bin / "black.calls").exists()

    def test_empty_stdin(self, tool_bin: _pathlib.Path) -> None:
        """No payload at all is a no-op."""
        result = _click_testing.CliRunner().invoke(cli.cli, ["run", "python"], input="")
        assert result.exit_code == 0

    def test_cwd_option(
        self,
        tool_bin: _pathlib.Path,
        isolated_env: _pathlib.Path,
    ) -> None:
        """--cwd resolves relative paths against another directory."""
        _write_tool(tool_bin, "ruff", "exit 0\n")
        frontend = isolated_env / "frontend"
        frontend.mkdir()
        (frontend / "mod.py").write_text("x = 1\n")

        result = _click_testing.CliRunner().invoke(
            cli.cli, ["run", "python", "--cwd", str(frontend)], input=_payload("mod.py")
        )
        assert result.exit_code == 0
        assert (tool_bin / "black.calls").read_text().strip() == "--quiet mod.py"

    def test_lint_python_script(
        self,
        tool_bin: _pathlib.Path,
        python_file: _pathlib.Path,
    ) -> None:
        """The lint-python console script behaves like `run python`."""
        _write_tool(tool_bin, "ruff", 'echo "E501 line too long"\nexit 1\n')
        result = _click_testing.CliRunner().invoke(
            cli.lint_python, [], input=_payload("src/app.py")
        )
        assert result.exit_code == 2
        assert "E501 line too long" in result.output

    def test_lint_react_script_fallback_key(
        self,
        tool_bin: _pathlib.Path,
        widget_file: _pathlib.Path,
    ) -> None:
        """lint-react recovers the path from tool_response.filePath."""
        _write_tool(tool_bin, "npx", 'echo "$@" >> "$(dirname "$0")/npx.calls"\nexit 0\n')
        payload = _json.dumps({"tool_response": {"filePath": "src/widget.tsx"}})
        result = _click_testing.CliRunner().invoke(cli.lint_react, [], input=payload)
        assert result.exit_code == 0
        calls = (tool_bin / "npx.calls").read_text().splitlines()
        assert calls == ["eslint --fix src/widget.tsx", "prettier --write src/widget.tsx"]


class TestUsageErrors:
    """Usage errors exit 1 so the host never reads them as lint findings."""

    @_pytest.fixture
    def runner(self, isolated_env: _pathlib.Path) -> _click_testing.CliRunner:
        return _click_testing.CliRunner()

    def test_bad_cwd(self, runner: _click_testing.CliRunner) -> None:
        """A --cwd that does not exist is a config error."""
        result = runner.invoke(
            cli.cli, ["run", "python", "--cwd", "/nonexistent/lintwarden-dir"], input="{}"
        )
        assert result.exit_code == 1
        assert "--cwd" in result.output

    def test_unknown_group_option(self, runner: _click_testing.CliRunner) -> None:
        """Unknown top-level options exit 1."""
        result = runner.invoke(cli.cli, ["--bogus"])
        assert result.exit_code == 1

    def test_unknown_run_option(self, runner: _click_testing.CliRunner) -> None:
        """Unknown options on a subcommand exit 1."""
        result = runner.invoke(cli.cli, ["run", "python", "--bogus"], input="{}")
        assert result.exit_code == 1
        assert "No such option" in result.output

    def test_missing_argument(self, runner: _click_testing.CliRunner) -> None:
        """A missing required argument exits 1."""
        result = runner.invoke(cli.cli, ["profiles", "show"])
        assert result.exit_code == 1

    def test_hook_script_unknown_option(self, runner: _click_testing.CliRunner) -> None:
        """The fixed-profile scripts also exit 1 on bad options."""
        result = runner.invoke(cli.lint_python, ["--bogus"], input="{}")
        assert result.exit_code == 1

    def test_run_accepts_verbose(self, runner: _click_testing.CliRunner) -> None:
        """--verbose is accepted after the profile name."""
        result = runner.invoke(cli.cli, ["run", "python", "--verbose"], input="")
        assert result.exit_code == 0


class TestUndecodableInput:
    """Bytes that are not UTF-8 are a malformed payload, not a crash."""

    def test_run_non_utf8_payload(self, isolated_env: _pathlib.Path) -> None:
        """A latin-1 byte in the payload is a no-op."""
        result = _click_testing.CliRunner().invoke(
            cli.cli,
            ["run", "python"],
            input=b'{"tool_input": {"file_path": "caf\xe9.py"}}',
        )
        assert result.exit_code == 0

    def test_hook_script_non_utf8_payload(self, isolated_env: _pathlib.Path) -> None:
        """lint-react treats undecodable input the same way."""
        result = _click_testing.CliRunner().invoke(
            cli.lint_react,
            [],
            input=b'{"tool_response": {"filePath": "\xff.tsx"}}',
        )
        assert result.exit_code == 0


class TestLogShow:
    """Tests for `lintwarden log show`."""

    @_pytest.fixture
    def runner(self, isolated_env: _pathlib.Path) -> _click_testing.CliRunner:
        return _click_testing.CliRunner()

    @_pytest.fixture
    def logged(self, clean_settings: config.Settings) -> list[str]:
        """Write three dispatch records to the configured log dir."""
        run_log = run_logging.RunLogger(log_dir=clean_settings.get_log_dir())
        paths = ["a.py", "b.py", "c.tsx"]
        for path in paths:
            run_log.log_dispatch(
                {"profile": "web", "status": "clean", "file_path": path, "exit_code": 0}
            )
        return paths

    def test_empty(self, runner: _click_testing.CliRunner) -> None:
        """No log files yet: a message naming the directory."""
        result = runner.invoke(cli.cli, ["log", "show"])
        assert result.exit_code == 0
        assert "No dispatch records in" in result.output

    def test_empty_json(self, runner: _click_testing.CliRunner) -> None:
        """No log files yet: an empty JSON list."""
        result = runner.invoke(cli.cli, ["log", "show", "--json"])
        assert result.exit_code == 0
        assert _json.loads(result.output) == []

    def test_json(self, runner: _click_testing.CliRunner, logged: list[str]) -> None:
        """--json returns every record in write order."""
        result = runner.invoke(cli.cli, ["log", "show", "--json"])
        assert result.exit_code == 0
        records = _json.loads(result.output)
        assert [r["file_path"] for r in records] == logged
        assert all(r["event"] == "dispatch" for r in records)

    def test_limit(self, runner: _click_testing.CliRunner, logged: list[str]) -> None:
        """--limit N keeps the N most recent records."""
        result = runner.invoke(cli.cli, ["log", "show", "--json", "--limit", "2"])
        records = _json.loads(result.output)
        assert [r["file_path"] for r in records] == logged[-2:]

    def test_limit_zero(self, runner: _click_testing.CliRunner, logged: list[str]) -> None:
        """--limit 0 shows nothing."""
        result = runner.invoke(cli.cli, ["log", "show", "--json", "--limit", "0"])
        assert _json.loads(result.output) == []

    def test_table(self, runner: _click_testing.CliRunner, logged: list[str]) -> None:
        """Without --json the records render as a table."""
        result = runner.invoke(cli.cli, ["log", "show"])
        assert result.exit_code == 0
        assert "clean" in result.output
        assert "No dispatch records" not in result.output

"""
Shared pytest fixtures for Lintwarden tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import lintwarden.config as config
import lintwarden.dispatch.runner as runner


class FakeRunner(runner.ProcessRunner):
    """
    Process runner that records calls instead of spawning processes.

    Return codes and output are looked up by tool name: argv[0], or
    argv[1] for npx launchers.
    An optional side effect can rewrite the target file to mimic a fixer.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, _typing.Any]] = []
        self.returncodes: dict[str, int] = {}
        self.outputs: dict[str, str] = {}
        self.side_effects: dict[str, _typing.Callable[[list[str]], None]] = {}

    def _key(self, argv: list[str]) -> str:
        if argv[0] == "npx" and len(argv) > 1:
            return argv[1]
        return argv[0]

    def run(
        self,
        argv: list[str],
        *,
        cwd: _pathlib.Path | None = None,
        merge_stderr: bool = False,
        timeout: float | None = None,
    ) -> runner.ProcessResult:
        key = self._key(argv)
        self.calls.append(
            {
                "argv": list(argv),
                "cwd": cwd,
                "merge_stderr": merge_stderr,
                "timeout": timeout,
            }
        )
        if key in self.side_effects:
            self.side_effects[key](argv)
        return runner.ProcessResult(
            argv=list(argv),
            returncode=self.returncodes.get(key, 0),
            stdout=self.outputs.get(key, ""),
        )

    @property
    def executables(self) -> list[str]:
        """Keys of the tools invoked, in call order."""
        return [self._key(call["argv"]) for call in self.calls]


@_pytest.fixture
def fake_runner() -> FakeRunner:
    """A recording process runner; every tool exits 0 unless configured."""
    return FakeRunner()


@_pytest.fixture
def isolated_env(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """
    Isolate tests from the user's environment and config files.

    Clears LINTWARDEN_* variables, points the user config dir at an empty
    temp directory, and runs the test from a temp workspace.

    Returns:
        The temp workspace directory (also the cwd).
    """
    for key in list(_os.environ):
        if key.startswith("LINTWARDEN_"):
            monkeypatch.delenv(key, raising=False)

    config_dir = tmp_path / "user-config"
    config_dir.mkdir()
    monkeypatch.setenv("LINTWARDEN_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("LINTWARDEN_LOGGING__DIR", str(tmp_path / "logs"))

    workspace = tmp_path / "workspace"
    workspace.mkdir()
    (workspace / "pyproject.toml").write_text('[project]\nname = "sample"\nversion = "0.1.0"\n')
    monkeypatch.chdir(workspace)
    return workspace


@_pytest.fixture
def clean_settings(isolated_env: _pathlib.Path) -> config.Settings:
    """
    Settings instance isolated from environment and .env file.

    The run log goes to a temp directory.
    """
    return config.Settings.construct_without_dotenv()


@_pytest.fixture
def python_file(isolated_env: _pathlib.Path) -> _pathlib.Path:
    """An existing, lint-clean Python file in the workspace (src/app.py)."""
    src = isolated_env / "src"
    src.mkdir()
    path = src / "app.py"
    path.write_text('def greet(name: str) -> str:\n    return f"hello {name}"\n')
    return path


@_pytest.fixture
def widget_file(isolated_env: _pathlib.Path) -> _pathlib.Path:
    """An existing TSX file in the workspace (src/widget.tsx)."""
    src = isolated_env / "src"
    src.mkdir(exist_ok=True)
    path = src / "widget.tsx"
    path.write_text("export const Widget = () => <div>hi</div>;\n")
    return path

"""Tests for CLI entry point."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from uptime_server.app import CLI

_SRC = str(Path(__file__).resolve().parents[1] / "src")


def test_parser_run_defaults() -> None:
    """Parser parses 'run' leaving host and port to settings."""
    parser = CLI._build_parser()
    args = parser.parse_args(["run"])
    assert args.command == "run"
    assert args.host is None
    assert args.port is None
    assert args.reload is False


def test_parser_run_overrides() -> None:
    """--host and --port are accepted."""
    args = CLI._build_parser().parse_args(["run", "--host", "127.0.0.1", "--port", "8080"])
    assert args.host == "127.0.0.1"
    assert args.port == 8080


def test_cli_no_command_exits(capsys: pytest.CaptureFixture[str]) -> None:
    """CLI with no command prints help and exits 1."""
    with pytest.raises(SystemExit) as exc_info:
        CLI.main([])
    assert exc_info.value.code == 1


def test_check_config_lists_services(capsys: pytest.CaptureFixture[str]) -> None:
    """check-config prints each namespaced service name."""
    with patch.dict("os.environ", {"UPTIME_ENV": "dev"}, clear=False):
        CLI.main(["check-config"])
    assert capsys.readouterr().out.splitlines() == ["push:backup", "poll:web"]


def test_check_config_invalid_exits(
    tmp_path: Path, capsys: pytest.CaptureFixture[str],
) -> None:
    """A duplicate token makes check-config exit 1."""
    config_file = tmp_path / "bad.yaml"
    config_file.write_text(
        "services:\n"
        "  - {type: push, name: a, token: t}\n"
        "  - {type: push, name: b, token: t}\n"
    )
    with patch.dict("os.environ", {"UPTIME_CONFIG_FILE": str(config_file)}, clear=False):
        with pytest.raises(SystemExit) as exc_info:
            CLI.main(["check-config"])
    assert exc_info.value.code == 1
    assert "duplicated" in capsys.readouterr().err


def test_cli_entry_point_installed() -> None:
    """uptime-server module entry point is callable."""
    env = {**os.environ, "PYTHONPATH": os.pathsep.join([_SRC, os.environ.get("PYTHONPATH", "")])}
    result = subprocess.run(
        [sys.executable, "-m", "uptime_server.app"],
        capture_output=True, text=True, timeout=30, env=env,
    )
    # Should print help (no command given) and exit 1
    assert result.returncode == 1

"""
Unit tests for the subprocess command runner.

Uses trivial POSIX commands only; nothing touches git or make.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from stockfish_builder.core.exceptions import CommandError
from stockfish_builder.services.commands import CommandRunner


class TestCommandRunner:
    """Tests for CommandRunner."""

    def test_success(self, tmp_path: Path) -> None:
        CommandRunner().run(
            [sys.executable, "-c", "open('marker', 'w').close()"],
            cwd=tmp_path,
        )

        assert (tmp_path / "marker").exists()

    def test_failure_carries_returncode(self) -> None:
        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run([sys.executable, "-c", "raise SystemExit(3)"])

        assert exc_info.value.returncode == 3
        assert exc_info.value.exit_code == 3

    def test_missing_executable(self) -> None:
        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run(["definitely-not-a-real-tool-4821"])

        assert exc_info.value.returncode == 127

    def test_quiet_discards_stdout(self, capfd: pytest.CaptureFixture[str]) -> None:
        CommandRunner().run([sys.executable, "-c", "print('noisy build')"], quiet=True)

        assert "noisy build" not in capfd.readouterr().out

    def test_stdout_forwarded_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        CommandRunner().run([sys.executable, "-c", "print('build line')"])

        assert "build line" in capfd.readouterr().out

    def test_unlaunchable_executable(self, tmp_path: Path) -> None:
        """Test an exec-format failure becomes a CommandError, not a raw OSError."""
        tool = tmp_path / "broken-tool"
        tool.write_bytes(b"\x7fELF\x00\x13\x37garbage\xff\xfe" * 8)
        tool.chmod(0o755)

        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run([str(tool)])

        assert exc_info.value.returncode == 126
        assert exc_info.value.exit_code == 126

    def test_missing_working_directory(self, tmp_path: Path) -> None:
        """Test a missing cwd is reported as such, not as a missing command."""
        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run([sys.executable, "-c", "pass"], cwd=tmp_path / "no-src")

        assert exc_info.value.message == "Working directory does not exist"
        assert exc_info.value.returncode == 1
        assert exc_info.value.context["cwd"] == str(tmp_path / "no-src")

    def test_working_directory_is_a_file(self, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "src"
        not_a_dir.write_text("")

        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run([sys.executable, "-c", "pass"], cwd=not_a_dir)

        assert exc_info.value.message == "Working directory is not a directory"
        assert exc_info.value.returncode == 1

"""
Unit tests for domain models and the exception hierarchy.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from stockfish_builder.core.exceptions import (
    BuildError,
    BuilderError,
    CommandError,
    FetchError,
    InstallError,
)
from stockfish_builder.domain.models import InstallOutcome, InstallResult, InstallStep


class TestInstallResult:
    """Tests for InstallResult model."""

    def test_already_installed(self) -> None:
        result = InstallResult(
            outcome=InstallOutcome.ALREADY_INSTALLED,
            binary_path=Path("/opt/project/stockfish"),
        )

        assert result.skipped
        assert not result.has_weights
        assert not result.weights_downloaded

    def test_duration(self) -> None:
        """Test run duration calculation."""
        now = datetime.now(timezone.utc)
        result = InstallResult(
            outcome=InstallOutcome.INSTALLED,
            binary_path=Path("stockfish"),
            started_at=now,
            finished_at=now + timedelta(seconds=42),
        )

        assert result.duration_seconds == pytest.approx(42.0)

    def test_duration_unfinished(self) -> None:
        result = InstallResult(
            outcome=InstallOutcome.INSTALLED,
            binary_path=Path("stockfish"),
        )

        assert result.duration_seconds is None

    def test_to_dict_conversion(self) -> None:
        """Test conversion to a JSON-safe dictionary."""
        result = InstallResult(
            outcome=InstallOutcome.INSTALLED,
            binary_path=Path("/p/stockfish"),
            weights_paths=[Path("/p/nn-abc.nnue")],
            weights_downloaded=True,
        )

        data = result.to_dict()

        assert data["outcome"] == "installed"
        assert data["binary_path"] == "/p/stockfish"
        assert data["weights_paths"] == ["/p/nn-abc.nnue"]
        assert data["weights_downloaded"] is True

    def test_result_immutable(self) -> None:
        """Test that results are immutable (frozen)."""
        result = InstallResult(
            outcome=InstallOutcome.INSTALLED,
            binary_path=Path("stockfish"),
        )

        with pytest.raises(ValidationError):
            result.weights_downloaded = True  # type: ignore


class TestInstallStep:
    def test_every_step_has_description(self) -> None:
        for step in InstallStep:
            assert step.description


class TestExceptions:
    """Tests for error context and exit codes."""

    def test_context_in_message(self) -> None:
        error = InstallError("Build produced no engine binary", expected="src/stockfish")

        assert str(error) == "Build produced no engine binary (expected=src/stockfish)"
        assert error.exit_code == 1

    def test_plain_message(self) -> None:
        assert str(BuilderError("boom")) == "boom"

    def test_command_exit_code_propagates(self) -> None:
        error = FetchError("clone failed", returncode=128, command="git clone")

        assert isinstance(error, CommandError)
        assert error.exit_code == 128
        assert error.context["command"] == "git clone"

    def test_signal_exit_code(self) -> None:
        error = BuildError("killed", returncode=-9, command="make build")

        assert error.exit_code == 137

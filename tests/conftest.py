"""
Pytest configuration and fixtures.

Provides shared fixtures and a fake command runner that imitates git and
make by creating the files a real run would leave behind.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from stockfish_builder.core.config import Settings
from stockfish_builder.core.exceptions import CommandError

WEIGHTS_NAME = "nn-1111cefa1111.nnue"


class FakeRunner:
    """Records commands and simulates their filesystem effects."""

    def __init__(
        self,
        failures: dict[str, int] | None = None,
        produce_binary: bool = True,
    ) -> None:
        # Keys: "clone", "build", "net"; values: exit codes to fail with
        self.failures = failures or {}
        self.produce_binary = produce_binary
        self.calls: list[tuple[list[str], Path | None, bool]] = []

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        quiet: bool = False,
    ) -> None:
        args = list(args)
        self.calls.append((args, cwd, quiet))

        action = args[1]
        if action in self.failures:
            raise CommandError(
                "Command failed",
                returncode=self.failures[action],
                command=" ".join(args),
            )

        if action == "clone":
            (Path(args[-1]) / "src").mkdir(parents=True)
            (Path(args[-1]) / "README.md").write_text("Stockfish")
        elif action == "build" and self.produce_binary:
            binary = Path(cwd) / "stockfish"
            binary.write_text("#!/bin/sh\necho Stockfish\n")
            binary.chmod(0o755)
        elif action == "net":
            (Path(cwd) / WEIGHTS_NAME).write_bytes(b"\x00" * 64)

    @property
    def actions(self) -> list[str]:
        return [args[1] for args, _, _ in self.calls]


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    """Empty project root for an install run."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def test_settings(install_dir: Path) -> Settings:
    """Settings pointing at the temporary project root."""
    return Settings(
        install_dir=install_dir,
        environment="testing",
        build_jobs=2,
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """Factory for runners configured to fail or misbehave."""
    return FakeRunner


@pytest.fixture
def weights_name() -> str:
    return WEIGHTS_NAME


@pytest.fixture
def installed_binary(install_dir: Path) -> Path:
    """An executable engine binary already sitting in the project root."""
    binary = install_dir / "stockfish"
    binary.write_text("#!/bin/sh\n")
    binary.chmod(0o755)
    return binary

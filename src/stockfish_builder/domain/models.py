"""
Domain models using Pydantic V2.

The only entities here are filesystem paths plus the outcome of one
install run.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InstallStep(str, Enum):
    """Steps of the install pipeline, in execution order."""

    CHECK = "check"
    FETCH = "fetch"
    BUILD = "build"
    WEIGHTS = "weights"
    INSTALL = "install"
    CLEANUP = "cleanup"

    @property
    def description(self) -> str:
        """Human-readable progress label."""
        return _STEP_DESCRIPTIONS[self]


_STEP_DESCRIPTIONS = {
    InstallStep.CHECK: "Checking for an existing engine",
    InstallStep.FETCH: "Cloning engine sources",
    InstallStep.BUILD: "Compiling engine",
    InstallStep.WEIGHTS: "Downloading NNUE weights",
    InstallStep.INSTALL: "Installing artifacts",
    InstallStep.CLEANUP: "Removing temporary checkout",
}


class InstallOutcome(str, Enum):
    """How an install run finished."""

    ALREADY_INSTALLED = "already_installed"
    INSTALLED = "installed"


class InstallResult(BaseModel):
    """
    Result of one install run.

    Attributes:
        outcome: Whether work was done or skipped
        binary_path: Location of the engine binary
        weights_paths: Weights files placed next to the binary
        weights_downloaded: Whether the weights step succeeded
        started_at: Run start timestamp
        finished_at: Run end timestamp
    """

    model_config = ConfigDict(frozen=True)

    outcome: InstallOutcome = Field(..., description="Run outcome")

    binary_path: Path = Field(..., description="Installed engine binary")

    weights_paths: list[Path] = Field(
        default_factory=list,
        description="Installed weights files",
    )

    weights_downloaded: bool = Field(
        default=False,
        description="Whether the weights download step succeeded",
    )

    started_at: datetime = Field(
        default_factory=_utcnow,
        description="Run start timestamp",
    )

    finished_at: datetime | None = Field(
        default=None,
        description="Run end timestamp",
    )

    @property
    def skipped(self) -> bool:
        """True when an existing binary short-circuited the run."""
        return self.outcome == InstallOutcome.ALREADY_INSTALLED

    @property
    def has_weights(self) -> bool:
        """True when at least one weights file was installed."""
        return bool(self.weights_paths)

    @property
    def duration_seconds(self) -> float | None:
        """Get run duration in seconds."""
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "outcome": self.outcome.value,
            "binary_path": str(self.binary_path),
            "weights_paths": [str(p) for p in self.weights_paths],
            "weights_downloaded": self.weights_downloaded,
            "duration_seconds": self.duration_seconds,
        }

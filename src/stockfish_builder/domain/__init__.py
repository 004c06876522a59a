"""Domain models and business entities."""

from __future__ import annotations

from .models import InstallOutcome, InstallResult, InstallStep

__all__ = [
    "InstallOutcome",
    "InstallResult",
    "InstallStep",
]

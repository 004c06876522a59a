"""Business services: command execution, install pipeline, engine lookup."""

from __future__ import annotations

from .commands import CommandRunner
from .installer import InstallerService, install_engine
from .locator import locate_engine

__all__ = ["CommandRunner", "InstallerService", "install_engine", "locate_engine"]

"""
Stockfish Builder - fetch, compile and install the Stockfish chess engine.

Clones the official sources, builds them with the engine's own Makefile,
downloads the default NNUE network when reachable and leaves the binary
(plus weights) in the project root.
"""

from __future__ import annotations

__version__ = "1.0.0"

from .core.config import settings
from .domain.models import InstallOutcome, InstallResult, InstallStep
from .services.installer import InstallerService, install_engine
from .services.locator import locate_engine

__all__ = [
    "__version__",
    "settings",
    "install_engine",
    "locate_engine",
    "InstallerService",
    "InstallOutcome",
    "InstallResult",
    "InstallStep",
]

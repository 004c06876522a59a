"""Locate an engine binary: the project-local install first, then PATH."""

from __future__ import annotations

import shutil
from pathlib import Path

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import EngineNotFoundError
from ..core.logging import get_logger

logger = get_logger(__name__)


def locate_engine(settings: Settings | None = None) -> Path:
    """
    Find the engine binary the project would use.

    Args:
        settings: Optional configuration override

    Returns:
        Path to the local binary, or the one resolved on PATH

    Raises:
        EngineNotFoundError: If neither exists
    """
    cfg = settings or default_settings

    local = cfg.binary_path
    if local.exists():
        logger.debug("engine_found_locally", path=str(local))
        return local

    on_path = shutil.which(cfg.engine_name)
    if on_path:
        logger.debug("engine_found_on_path", path=on_path)
        return Path(on_path)

    raise EngineNotFoundError(
        "Engine binary not found",
        engine=cfg.engine_name,
        searched=str(local),
    )

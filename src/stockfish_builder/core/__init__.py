"""Core application components."""

from __future__ import annotations

from .config import settings
from .exceptions import BuilderError
from .logging import get_logger

__all__ = ["settings", "BuilderError", "get_logger"]

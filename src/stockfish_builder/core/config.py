"""
Core configuration management using Pydantic V2 Settings.

Every knob of the build pipeline can be overridden via environment
variables prefixed with ``STOCKFISH_BUILDER_`` or a ``.env`` file. The
defaults reproduce a plain "clone, make, install into the current
directory" run.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide configuration with environment variable support.

    All settings can be overridden via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="STOCKFISH_BUILDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ═══════════════════════════════════════════════════════════════════════
    # Engine Source Configuration
    # ═══════════════════════════════════════════════════════════════════════
    engine_name: str = Field(
        default="stockfish",
        min_length=1,
        description="File name of the engine binary",
    )

    repo_url: str = Field(
        default="https://github.com/official-stockfish/Stockfish.git",
        min_length=1,
        description="Git repository holding the engine sources",
    )

    clone_depth: int = Field(
        default=1,
        ge=1,
        description="History depth of the shallow clone",
    )

    checkout_dir_name: str = Field(
        default="Stockfish",
        min_length=1,
        description="Name of the temporary checkout directory",
    )

    source_subdir: str = Field(
        default="src",
        description="Directory inside the checkout that holds the Makefile",
    )

    install_dir: Path = Field(
        default=Path("."),
        description="Project root receiving the binary and weights",
    )

    # ═══════════════════════════════════════════════════════════════════════
    # Build Configuration
    # ═══════════════════════════════════════════════════════════════════════
    build_target: str = Field(
        default="build",
        min_length=1,
        description="Make target producing the engine binary",
    )

    build_arch: str | None = Field(
        default=None,
        description="Optional ARCH value passed to make (e.g. x86-64-avx2)",
    )

    build_jobs: int | None = Field(
        default=None,
        ge=1,
        description="Parallel make jobs (defaults to CPU count)",
    )

    weights_target: str = Field(
        default="net",
        min_length=1,
        description="Make target downloading the NNUE weights",
    )

    weights_glob: str = Field(
        default="nn-*.nnue",
        min_length=1,
        description="Glob pattern naming the weights file(s)",
    )

    download_weights: bool = Field(
        default=True,
        description="Attempt the best-effort weights download",
    )

    keep_checkout: bool = Field(
        default=False,
        description="Keep the temporary checkout after the run",
    )

    show_build_output: bool = Field(
        default=False,
        description="Forward make's stdout instead of discarding it",
    )

    git_executable: str = Field(default="git", description="Git command")

    make_executable: str = Field(default="make", description="Make command")

    # ═══════════════════════════════════════════════════════════════════════
    # Application Configuration
    # ═══════════════════════════════════════════════════════════════════════
    app_name: str = Field(
        default="Stockfish Builder",
        description="Application display name",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Application version",
    )

    environment: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Runtime environment",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # ═══════════════════════════════════════════════════════════════════════
    # Logging Configuration
    # ═══════════════════════════════════════════════════════════════════════
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # ═══════════════════════════════════════════════════════════════════════
    # Validators
    # ═══════════════════════════════════════════════════════════════════════
    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is uppercase."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("engine_name", "checkout_dir_name")
    @classmethod
    def validate_plain_name(cls, v: str) -> str:
        """Reject names that would escape the install directory."""
        if "/" in v or "\\" in v or v in {".", ".."}:
            raise ValueError(f"must be a plain file name, got {v!r}")
        return v

    @field_validator("build_arch", mode="before")
    @classmethod
    def blank_arch_is_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # ═══════════════════════════════════════════════════════════════════════
    # Helper Methods
    # ═══════════════════════════════════════════════════════════════════════
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def install_path(self) -> Path:
        """Absolute install directory."""
        return self.install_dir.expanduser().resolve()

    @property
    def binary_path(self) -> Path:
        """Where the installed engine binary lives."""
        return self.install_path / self.engine_name

    @property
    def checkout_path(self) -> Path:
        """Temporary source checkout directory."""
        return self.install_path / self.checkout_dir_name

    @property
    def source_path(self) -> Path:
        """Directory the build commands run in."""
        if not self.source_subdir:
            return self.checkout_path
        return self.checkout_path / self.source_subdir

    @property
    def effective_build_jobs(self) -> int:
        """Job count handed to make."""
        return self.build_jobs or os.cpu_count() or 1


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Settings: Singleton settings object
    """
    return Settings()


# Convenience export
settings: Settings = get_settings()

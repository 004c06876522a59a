"""
Custom exception hierarchy for the Stockfish builder.

Provides domain-specific exceptions with rich error context. Every error
knows the process exit code the CLI should finish with.
"""

from __future__ import annotations

from typing import Any

# Shell conventions for commands that cannot be started.
EXIT_NOT_EXECUTABLE = 126
EXIT_COMMAND_NOT_FOUND = 127


class BuilderError(Exception):
    """Base exception for all builder errors."""

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize exception with message and context.

        Args:
            message: Human-readable error message
            **context: Additional error context for logging
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    @property
    def exit_code(self) -> int:
        """Process exit status the CLI reports for this error."""
        return 1


class CommandError(BuilderError):
    """Raised when an external command fails or cannot be started."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int,
        command: str = "",
        **context: Any,
    ) -> None:
        super().__init__(message, command=command, returncode=returncode, **context)
        self.returncode = returncode
        self.command = command

    @property
    def exit_code(self) -> int:
        # A negative code means the child died from a signal; report it the
        # way a shell would.
        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode or 1


class FetchError(CommandError):
    """Raised when cloning the engine sources fails."""


class BuildError(CommandError):
    """Raised when compiling the engine fails."""


class WeightsDownloadError(CommandError):
    """Raised when downloading the NNUE weights fails."""


class InstallError(BuilderError):
    """Raised when the built artifacts cannot be placed."""


class EngineNotFoundError(BuilderError):
    """Raised when no engine binary can be located."""


class ConfigurationError(BuilderError):
    """Raised when configuration is invalid."""

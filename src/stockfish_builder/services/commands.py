"""
Thin wrapper around :mod:`subprocess` for the external tools.

Commands run synchronously with stderr inherited, so git and make report
their own failures exactly as they would from a shell.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ..core.exceptions import (
    EXIT_COMMAND_NOT_FOUND,
    EXIT_NOT_EXECUTABLE,
    CommandError,
)
from ..core.logging import LoggerMixin


class CommandRunner(LoggerMixin):
    """Runs one external command at a time and raises on failure."""

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        quiet: bool = False,
    ) -> None:
        """
        Run a command to completion.

        Args:
            args: Program and arguments
            cwd: Working directory for the command
            quiet: Discard the command's stdout

        Raises:
            CommandError: If the command exits non-zero or cannot be started
        """
        command = shlex.join(args)
        self.logger.debug("running_command", command=command, cwd=str(cwd or "."))

        if cwd is not None and not Path(cwd).is_dir():
            # Same status a shell reports when `cd` fails.
            raise CommandError(
                "Working directory does not exist"
                if not Path(cwd).exists()
                else "Working directory is not a directory",
                returncode=1,
                command=command,
                cwd=str(cwd),
            )

        try:
            completed = subprocess.run(
                list(args),
                cwd=cwd,
                stdout=subprocess.DEVNULL if quiet else None,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(
                "Command not found",
                returncode=EXIT_COMMAND_NOT_FOUND,
                command=command,
            ) from e
        except PermissionError as e:
            raise CommandError(
                "Command is not executable",
                returncode=EXIT_NOT_EXECUTABLE,
                command=command,
            ) from e
        except OSError as e:
            raise CommandError(
                "Command could not be started",
                returncode=EXIT_NOT_EXECUTABLE,
                command=command,
                reason=e.strerror or str(e),
            ) from e

        if completed.returncode != 0:
            raise CommandError(
                "Command failed",
                returncode=completed.returncode,
                command=command,
            )

        self.logger.debug("command_finished", command=command)

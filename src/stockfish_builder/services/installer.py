"""
Install pipeline for the Stockfish engine.

Clones the official sources, builds them with the engine's own Makefile,
downloads the NNUE weights on a best-effort basis and moves the results
into the install directory:

1. Guard (existing executable binary -> nothing to do)
2. Shallow clone
3. ``make build``
4. ``make net`` (failure tolerated)
5. Copy binary / move weights
6. Remove the checkout
"""

from __future__ import annotations

import os
import shutil
import stat
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import (
    BuildError,
    CommandError,
    FetchError,
    InstallError,
    WeightsDownloadError,
)
from ..core.logging import LoggerMixin
from ..domain.models import InstallOutcome, InstallResult, InstallStep
from .commands import CommandRunner

StepCallback = Callable[[InstallStep], None]

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class InstallerService(LoggerMixin):
    """
    Fetches, builds and installs the engine binary and its weights.

    Each step is a public method so callers (and tests) can drive the
    pipeline piecewise; :meth:`run` chains them.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        """
        Initialize installer service.

        Args:
            settings: Configuration (uses the global settings if None)
            runner: Command runner (a real subprocess runner if None)
        """
        self.settings = settings or default_settings
        self.runner = runner or CommandRunner()

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #
    def is_installed(self) -> bool:
        """Check whether an executable engine binary is already in place."""
        binary = self.settings.binary_path
        return binary.is_file() and os.access(binary, os.X_OK)

    def fetch_source(self) -> None:
        """
        Shallow-clone the engine repository into the checkout directory.

        Raises:
            FetchError: If git fails
        """
        checkout = self.settings.checkout_path
        if checkout.exists():
            self.logger.warning("removing_stale_checkout", path=str(checkout))
            self._remove_tree(checkout)

        self.settings.install_path.mkdir(parents=True, exist_ok=True)
        self.logger.info(
            "cloning_source",
            repo=self.settings.repo_url,
            depth=self.settings.clone_depth,
        )
        try:
            self.runner.run(
                [
                    self.settings.git_executable,
                    "clone",
                    f"--depth={self.settings.clone_depth}",
                    "-q",
                    self.settings.repo_url,
                    str(checkout),
                ],
                cwd=self.settings.install_path,
            )
        except CommandError as e:
            raise FetchError(
                "Failed to clone engine sources",
                returncode=e.returncode,
                command=e.command,
                reason=e.message,
                repo=self.settings.repo_url,
            ) from e

    def build_engine(self) -> None:
        """
        Compile the engine with its own Makefile.

        Raises:
            BuildError: If make fails
        """
        args = [
            self.settings.make_executable,
            self.settings.build_target,
            f"-j{self.settings.effective_build_jobs}",
        ]
        if self.settings.build_arch:
            args.append(f"ARCH={self.settings.build_arch}")

        self.logger.info(
            "building_engine",
            target=self.settings.build_target,
            jobs=self.settings.effective_build_jobs,
            arch=self.settings.build_arch,
        )
        try:
            self.runner.run(
                args,
                cwd=self.settings.source_path,
                quiet=not self.settings.show_build_output,
            )
        except CommandError as e:
            raise BuildError(
                "Failed to build engine",
                returncode=e.returncode,
                command=e.command,
                reason=e.message,
            ) from e

    def fetch_weights(self) -> bool:
        """
        Download the default NNUE weights.

        The engine binary is the required artifact; the weights are a
        nice-to-have, so a failure here is logged and reported as False.

        Returns:
            True if the download step succeeded
        """
        self.logger.info("downloading_weights", target=self.settings.weights_target)
        try:
            self._download_weights()
        except WeightsDownloadError as e:
            self.logger.warning(
                "weights_download_failed",
                error=e.message,
                returncode=e.returncode,
            )
            return False
        return True

    def install_artifacts(self) -> list[Path]:
        """
        Place the built binary and any weights files in the install dir.

        Returns:
            Paths of the installed weights files

        Raises:
            InstallError: If the binary is missing or cannot be placed
        """
        source = self.settings.source_path
        built = source / self.settings.engine_name
        target = self.settings.binary_path

        if not built.is_file():
            raise InstallError(
                "Build produced no engine binary",
                expected=str(built),
            )

        try:
            shutil.copy2(built, target)
        except OSError as copy_error:
            self.logger.debug("copy_failed_trying_move", error=str(copy_error))
            try:
                shutil.move(str(built), str(target))
            except OSError as e:
                raise InstallError(
                    "Failed to install engine binary",
                    source=str(built),
                    target=str(target),
                    reason=str(e),
                ) from e

        mode = target.stat().st_mode
        if mode & _EXEC_BITS != _EXEC_BITS:
            target.chmod(mode | _EXEC_BITS)
        self.logger.info("engine_installed", path=str(target))

        installed: list[Path] = []
        for weights in sorted(source.glob(self.settings.weights_glob)):
            if not weights.is_file():
                continue
            destination = self.settings.install_path / weights.name
            try:
                shutil.move(str(weights), str(destination))
            except OSError as e:
                raise InstallError(
                    "Failed to install weights file",
                    source=str(weights),
                    target=str(destination),
                    reason=str(e),
                ) from e
            installed.append(destination)
            self.logger.info("weights_installed", path=str(destination))

        return installed

    def cleanup(self) -> None:
        """Remove the temporary checkout; a missing checkout is fine."""
        checkout = self.settings.checkout_path
        if not checkout.exists():
            return
        self.logger.debug("removing_checkout", path=str(checkout))
        self._remove_tree(checkout)

    # ------------------------------------------------------------------ #
    # Pipeline
    # ------------------------------------------------------------------ #
    def run(self, on_step: StepCallback | None = None) -> InstallResult:
        """
        Execute the whole install pipeline.

        Args:
            on_step: Optional callback notified as each step starts

        Returns:
            Result describing what was done

        Raises:
            FetchError: If cloning fails
            BuildError: If compiling fails
            InstallError: If the binary cannot be placed
        """
        started_at = datetime.now(timezone.utc)

        def notify(step: InstallStep) -> None:
            if on_step is not None:
                on_step(step)

        notify(InstallStep.CHECK)
        if self.is_installed():
            self.logger.info(
                "engine_already_installed",
                path=str(self.settings.binary_path),
            )
            return InstallResult(
                outcome=InstallOutcome.ALREADY_INSTALLED,
                binary_path=self.settings.binary_path,
                started_at=started_at,
                finished_at=datetime.now(timezone.utc),
            )

        weights_downloaded = False
        try:
            notify(InstallStep.FETCH)
            self.fetch_source()

            notify(InstallStep.BUILD)
            self.build_engine()

            if self.settings.download_weights:
                notify(InstallStep.WEIGHTS)
                weights_downloaded = self.fetch_weights()
            else:
                self.logger.info("weights_download_disabled")

            notify(InstallStep.INSTALL)
            weights_paths = self.install_artifacts()
        finally:
            if self.settings.keep_checkout:
                self.logger.info(
                    "keeping_checkout",
                    path=str(self.settings.checkout_path),
                )
            else:
                notify(InstallStep.CLEANUP)
                self.cleanup()

        result = InstallResult(
            outcome=InstallOutcome.INSTALLED,
            binary_path=self.settings.binary_path,
            weights_paths=weights_paths,
            weights_downloaded=weights_downloaded,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )
        self.logger.info(
            "install_completed",
            binary=str(result.binary_path),
            weights=len(result.weights_paths),
            duration_seconds=result.duration_seconds,
        )
        return result

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _download_weights(self) -> None:
        try:
            self.runner.run(
                [self.settings.make_executable, self.settings.weights_target],
                cwd=self.settings.source_path,
                quiet=not self.settings.show_build_output,
            )
        except CommandError as e:
            raise WeightsDownloadError(
                "Failed to download NNUE weights",
                returncode=e.returncode,
                command=e.command,
                reason=e.message,
            ) from e

    def _remove_tree(self, path: Path) -> None:
        shutil.rmtree(path)


def install_engine(settings: Settings | None = None) -> InstallResult:
    """
    High-level convenience function to install the engine.

    Args:
        settings: Optional configuration override

    Returns:
        Install result

    Example:
        >>> result = install_engine()
        >>> print(result.binary_path)
    """
    service = InstallerService(settings=settings)
    return service.run()

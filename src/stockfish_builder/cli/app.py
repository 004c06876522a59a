"""
Command-line interface using Typer and Rich.

Running ``stockfish-builder`` without a subcommand behaves like the
classic build script: install into the current directory, skip when the
binary is already there.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any, Optional

import click
import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from ..core.config import Settings, settings
from ..core.exceptions import BuilderError, ConfigurationError
from ..core.logging import get_logger, set_level
from ..domain.models import InstallResult, InstallStep

app = typer.Typer(
    name="stockfish-builder",
    help="♟️  Stockfish Builder - fetch, compile and install the Stockfish engine",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def resolve_settings(**overrides: Any) -> Settings:
    """
    Build effective settings from the global ones plus CLI overrides.

    ``None`` values mean "not given on the command line".

    Raises:
        ConfigurationError: If an override fails validation
    """
    given = {k: v for k, v in overrides.items() if v is not None}
    if not given:
        return settings
    try:
        return Settings(**{**settings.model_dump(), **given})
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid option",
            fields=", ".join(str(err["loc"][0]) for err in e.errors()),
        ) from e


def print_install_result(result: InstallResult) -> None:
    """Display a finished install."""
    body = Text()
    body.append("Binary:  ", style="cyan")
    body.append(f"{result.binary_path}\n", style="green")
    body.append("Weights: ", style="cyan")
    if result.weights_paths:
        body.append(", ".join(p.name for p in result.weights_paths), style="green")
    else:
        body.append("none (download skipped or failed)", style="yellow")
    if result.duration_seconds is not None:
        body.append(f"\nTime:    {result.duration_seconds:.1f}s", style="dim")

    console.print(
        Panel(body, title="✅ Stockfish installed", border_style="green", expand=False)
    )


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """Install Stockfish when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


@app.command()
def install(
    install_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--install-dir",
            "-d",
            help="Directory receiving the binary and weights (default: current)",
            file_okay=False,
        ),
    ] = None,
    repo_url: Annotated[
        Optional[str],
        typer.Option("--repo-url", help="Git repository to clone"),
    ] = None,
    jobs: Annotated[
        Optional[int],
        typer.Option("--jobs", "-j", help="Parallel make jobs (default: CPU count)"),
    ] = None,
    arch: Annotated[
        Optional[str],
        typer.Option("--arch", help="ARCH passed to make, e.g. x86-64-avx2"),
    ] = None,
    no_weights: Annotated[
        bool,
        typer.Option("--no-weights", help="Skip the NNUE weights download"),
    ] = False,
    keep_checkout: Annotated[
        bool,
        typer.Option("--keep-checkout", help="Keep the cloned sources"),
    ] = False,
    show_build_output: Annotated[
        bool,
        typer.Option("--show-build-output", help="Show make's output"),
    ] = False,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the result as JSON to this file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    """
    Fetch, build and install Stockfish.

    Does nothing (exit code 0) when an executable binary already exists
    in the install directory.
    """
    # Lazy import keeps `version`/`config` free of subprocess machinery
    from ..services.installer import InstallerService

    if verbose:
        set_level("DEBUG")

    try:
        cfg = resolve_settings(
            install_dir=install_dir,
            repo_url=repo_url,
            build_jobs=jobs,
            build_arch=arch,
            download_weights=False if no_weights else None,
            keep_checkout=True if keep_checkout else None,
            show_build_output=True if show_build_output else None,
        )
    except ConfigurationError as e:
        err_console.print(f"❌ [red]{e}[/red]")
        raise typer.Exit(2)

    service = InstallerService(settings=cfg)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=err_console,
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Starting...", total=None)

        def on_step(step: InstallStep) -> None:
            progress.update(task, description=f"[cyan]{step.description}...")

        try:
            result = service.run(on_step=on_step)
        except BuilderError as e:
            progress.stop()
            err_console.print(f"\n❌ [red]Install failed:[/red] {e.message}")
            if verbose and e.context:
                err_console.print(f"[dim]Context: {e.context}[/dim]")
            logger.error("install_failed", error=e.message, **e.context)
            raise typer.Exit(e.exit_code)
        except Exception as e:
            progress.stop()
            err_console.print(f"\n❌ [red]Unexpected error:[/red] {e}")
            logger.exception("unexpected_error")
            raise typer.Exit(1)

    if result.skipped:
        err_console.print("Stockfish is already installed. Skipping build.")
    else:
        print_install_result(result)

    if output:
        output.write_text(json.dumps(result.to_dict(), indent=2))
        console.print(f"💾 [green]Result saved to:[/green] {output}")


@app.command()
def locate(
    install_dir: Annotated[
        Optional[Path],
        typer.Option("--install-dir", "-d", help="Project directory to search"),
    ] = None,
) -> None:
    """Show which Stockfish binary would be used."""
    from ..services.locator import locate_engine

    try:
        path = locate_engine(resolve_settings(install_dir=install_dir))
    except BuilderError as e:
        err_console.print(f"❌ [red]{e.message}[/red]")
        raise typer.Exit(e.exit_code)

    console.print(f"[bold blue]Using Stockfish at:[/bold blue] {path}")


@app.command()
def version() -> None:
    """Display version information."""
    version_text = Text()
    version_text.append(f"{settings.app_name}\n", style="bold blue")
    version_text.append(f"Version: {settings.app_version}\n", style="green")
    version_text.append(f"Environment: {settings.environment}\n", style="yellow")
    version_text.append(f"Source: {settings.repo_url}", style="cyan")

    console.print(Panel(version_text, border_style="blue"))


@app.command()
def config() -> None:
    """Display current configuration."""
    config_table = Table(
        title="⚙️  Current Configuration",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="yellow")
    config_table.add_column("Value", style="green")

    config_items = [
        ("Engine", settings.engine_name),
        ("Repository", settings.repo_url),
        ("Install Dir", str(settings.install_path)),
        ("Checkout Dir", settings.checkout_dir_name),
        ("Build Target", settings.build_target),
        ("Build Arch", settings.build_arch or "(Makefile default)"),
        ("Build Jobs", str(settings.effective_build_jobs)),
        ("Weights", settings.weights_glob if settings.download_weights else "disabled"),
        ("Keep Checkout", str(settings.keep_checkout)),
        ("Log Level", settings.log_level),
    ]

    for key, value in config_items:
        config_table.add_row(key, value)

    console.print(config_table)


def main() -> None:
    """Main entry point for CLI."""
    # Non-standalone mode lets Ctrl-C surface as Abort instead of exit 1.
    try:
        exit_code = app(standalone_mode=False)
    except click.exceptions.Abort:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    sys.exit(exit_code if isinstance(exit_code, int) else 0)

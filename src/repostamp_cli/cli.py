from __future__ import annotations

from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from repostamp_core import __version__
from repostamp_core.config import ConfigLoader
from repostamp_core.errors import RepostampError
from repostamp_core.vcs.detector import detect_executor
from repostamp_ops.descriptor import derive_descriptor
from repostamp_ops.emit import render_descriptor

from .util import configure_logging, configure_stdio, resolve_repo_path

USAGE = "Usage: repostamp [OPTIONS] PATH"

app = typer.Typer(help="repostamp: describe a working copy's branch, commit and version", add_completion=False)
console = Console(stderr=True, soft_wrap=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"repostamp {__version__}")
        raise typer.Exit()


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise typer.Exit(1)


@app.command()
def describe(
    paths: Optional[List[str]] = typer.Argument(None, metavar="PATH", help="Repository root"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config-file",
        help="Path to a repostamp TOML config (overrides REPOSTAMP_CONFIG and the environment default)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every query at DEBUG level"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress progress and fallback messages"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Print the working copy descriptor of PATH as marker-wrapped JSON."""
    configure_stdio()
    configure_logging(verbose=verbose, quiet=quiet)

    if not paths or len(paths) != 1:
        console.print(escape(USAGE), highlight=False)
        console.print("Expected exactly one argument: the repository root path.", highlight=False)
        raise typer.Exit(1)

    try:
        repo_root = resolve_repo_path(paths[0])
        config = ConfigLoader.load(explicit=config_file)
    except RepostampError as e:
        _fail(str(e))

    if config.source and not quiet:
        console.print(f"Using config {escape(str(config.source))}", highlight=False)

    progress = None if quiet else (lambda message: console.print(f"{message}...", highlight=False))
    descriptor = derive_descriptor(repo_root, detect_executor(), config, progress=progress)

    if descriptor.diagnostics and not quiet:
        fields = ", ".join(d.field for d in descriptor.diagnostics)
        console.print(f"[yellow]{len(descriptor.diagnostics)} fallback(s) used:[/yellow] {fields}", highlight=False)

    typer.echo(render_descriptor(descriptor))


def main():
    app()

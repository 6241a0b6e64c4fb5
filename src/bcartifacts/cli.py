"""
Defines the command-line interface for bcartifacts using Typer.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from bcartifacts.artifact_fetcher import ArtifactFetcher
from bcartifacts.bcartifacts_config import ArtifactConfig
from bcartifacts.bcartifacts_exceptions import BcArtifactsException
from bcartifacts.bcartifacts_logger import MessageFormatter

console = Console(stderr=True)

app = typer.Typer(
    name="bcartifacts",
    help="Download application and platform artifacts into the local artifact cache.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(MessageFormatter(datefmt="[%X]"))
    logging.basicConfig(level="DEBUG" if verbose else "INFO", handlers=[handler])


@app.callback()
def main_callback() -> None:
    """Artifact cache tooling."""


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL of the application artifact."),
    include_platform: bool = typer.Option(
        False, "--include-platform", help="Also fetch the platform artifact."
    ),
    force: bool = typer.Option(
        False, "--force", help="Download again even when the artifact is cached."
    ),
    force_redirection: bool = typer.Option(
        False,
        "--force-redirection",
        help="Download cached redirect manifests again.",
    ),
    base_path: Optional[str] = typer.Option(
        None, "--base-path", help="Cache folder. Defaults to BCARTIFACTS_CACHE_FOLDER."
    ),
    timeout: Optional[int] = typer.Option(
        None, "--timeout", min=1, help="Download timeout per file in seconds."
    ),
    max_redirects: Optional[int] = typer.Option(
        None, "--max-redirects", min=0, help="Maximum number of manifest redirects."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """
    Fetch an artifact and print the local path of every artifact fetched.
    """
    _configure_logging(verbose)
    config = ArtifactConfig.from_env()
    if max_redirects is not None:
        config.max_redirects = max_redirects

    fetcher = ArtifactFetcher(config)
    try:
        paths = fetcher.download_artifacts(
            url,
            include_platform=include_platform,
            force=force,
            force_redirection=force_redirection,
            base_path=base_path,
            timeout=timeout,
        )
    except BcArtifactsException as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1)

    for path in paths:
        typer.echo(path)

"""
CLI for manifest-require.

Provides `manifest-require resolve`, `candidates` and `wait` for checking
how requests map onto a bundler's asset manifest.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import load_config
from .config import parse_config
from .errors import ManifestRequireError
from .models import Mode
from .models import ToolsConfig
from .paths import normalize_asset_path
from .resolver import candidate_keys
from .tools import AssetTools

console = Console()


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _build_config(
    config_path: str | None, project: str | None, mode: str | None
) -> ToolsConfig:
    config = load_config(config_path) if config_path else parse_config({})
    if project:
        config.project_path = Path(project).resolve()
    if config.project_path is None:
        config.project_path = Path.cwd()
    if mode:
        config.mode = Mode(mode)
    return config


@click.group()
@click.version_option(version=__version__, prog_name="manifest-require")
@click.option("--debug", is_flag=True, help="Log every lookup")
def cli(debug: bool) -> None:
    """manifest-require - resolve requests against a bundler asset manifest."""
    _configure_logging(debug)


@cli.command()
@click.argument("request")
@click.option(
    "--config", "-c", "config_path", type=click.Path(exists=True), help="YAML config"
)
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False))
@click.option("--mode", type=click.Choice([m.value for m in Mode]))
def resolve(
    request: str, config_path: str | None, project: str | None, mode: str | None
) -> None:
    """Resolve REQUEST (a file path or loader chain) to its built artifact.

    Relative requests are resolved against the current directory.

    Examples:

        manifest-require resolve ./src/styles/app.css -c assets.yaml

        manifest-require resolve 'style!./src/img.png' -p ./frontend
    """
    tools: AssetTools | None = None
    try:
        config = _build_config(config_path, project, mode)
        tools = AssetTools(config).setup(config.project_path)
        importer = str(Path.cwd() / "__main__")
        value = tools.require(request, importer)
    except (ManifestRequireError, ModuleNotFoundError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    finally:
        if tools is not None:
            tools.undo()

    click.echo(json.dumps(value, indent=2) if not isinstance(value, str) else value)


@cli.command()
@click.argument("path")
@click.option("--project", "-p", type=click.Path(file_okay=False), default=".")
def candidates(path: str, project: str) -> None:
    """List the manifest keys tried for PATH, in lookup order."""
    key = normalize_asset_path(Path(path).resolve(), Path(project).resolve())

    table = Table(title=f"Candidates for {key}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Manifest key", style="cyan")
    for index, candidate in enumerate(candidate_keys(key), start=1):
        table.add_row(str(index), candidate)

    console.print(table)


@cli.command()
@click.option(
    "--config", "-c", "config_path", type=click.Path(exists=True), help="YAML config"
)
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False))
def wait(config_path: str | None, project: str | None) -> None:
    """Block until the asset manifest is available."""
    tools: AssetTools | None = None
    try:
        config = _build_config(config_path, project, None)
        tools = AssetTools(config)
        asyncio.run(tools.server(config.project_path))
    except ManifestRequireError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    finally:
        if tools is not None:
            tools.undo()

    click.secho("Asset manifest is ready", fg="green")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()

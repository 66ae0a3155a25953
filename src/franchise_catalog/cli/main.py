"""
Main CLI entry point for the Franchise Catalog.
"""

import asyncio
import logging
from typing import Optional

import click

from .. import __version__
from ..bootstrap import build_container
from ..core.config import Config
from ..core.exceptions import CatalogError
from ..core.logging import configure_logging
from .config import config_commands

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str]) -> Config:
    """Configuration from a YAML file when given, else from FC_* variables."""
    if config_path:
        return Config.from_file(config_path)
    return Config.from_env()


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", "-d", is_flag=True, help="Enable debug output")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """
    Franchise Catalog CLI

    Serve the catalog API and manage its document store.
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.option("--host", default=None, help="Host to bind the API to")
@click.option("--port", type=int, default=None, help="Port to run the API on")
@click.option(
    "--config", "config_path", type=click.Path(exists=True), help="YAML config file"
)
def serve(host: Optional[str], port: Optional[int], config_path: Optional[str]) -> None:
    """Run the catalog HTTP API."""
    import uvicorn

    from ..web.app import create_app

    try:
        config = load_config(config_path)
    except CatalogError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        raise click.Abort()

    host = host or config.api.host
    port = port or config.api.port
    click.echo(f"Starting Franchise Catalog API on {host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port, log_level="info")


async def _init_indexes(config: Config) -> None:
    container = build_container(config)
    try:
        await container.ensure_indexes()
    finally:
        await container.close()


@cli.command("init-indexes")
@click.option(
    "--config", "config_path", type=click.Path(exists=True), help="YAML config file"
)
def init_indexes(config_path: Optional[str]) -> None:
    """Create the unique indexes of every catalog collection."""
    try:
        config = load_config(config_path)
        configure_logging(config.logging.level, config.logging.json_format)
        asyncio.run(_init_indexes(config))
    except CatalogError as e:
        click.echo(f"Error creating indexes: {e}", err=True)
        raise click.Abort()

    click.echo(
        f"✓ Indexes ensured on {config.store.backend.value} store "
        f"({config.store.database})"
    )


cli.add_command(config_commands, name="config")

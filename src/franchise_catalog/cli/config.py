"""
Configuration management commands for the Franchise Catalog CLI.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click
import yaml

from ..core.config import Config
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _load(config_path: Optional[str]) -> Config:
    return Config.from_file(config_path) if config_path else Config.from_env()


@click.group()
def config_commands() -> None:
    """Configuration management commands."""
    pass


@config_commands.command()
@click.option(
    "--format",
    type=click.Choice(["json", "yaml", "table"]),
    default="table",
    help="Output format",
)
@click.option("--section", help="Show specific configuration section")
@click.option(
    "--config", "config_path", type=click.Path(exists=True), help="YAML config file"
)
def show(format: str, section: Optional[str], config_path: Optional[str]) -> None:
    """Show current configuration."""
    try:
        data = _load(config_path).to_dict()
    except ConfigurationError as e:
        click.echo(f"Error showing configuration: {e}", err=True)
        raise click.Abort()

    if section:
        if not isinstance(data.get(section), dict):
            click.echo(f"Unknown section: {section}", err=True)
            raise click.Abort()
        data = {section: data[section]}

    if format == "json":
        click.echo(json.dumps(data, indent=2, default=str))
    elif format == "yaml":
        click.echo(yaml.dump(data, default_flow_style=False))
    else:
        click.echo("Franchise Catalog Configuration")
        click.echo("=" * 50)
        for key, value in data.items():
            if isinstance(value, dict):
                click.echo(f"\n{key.title()}:")
                for sub_key, sub_value in value.items():
                    click.echo(f"  {sub_key}: {sub_value}")
            else:
                click.echo(f"{key}: {value}")


@config_commands.command()
@click.argument("file_path")
def save(file_path: str) -> None:
    """Save the configuration read from FC_* variables to a YAML file."""
    try:
        config = Config.from_env()
        output_path = Path(file_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        config.save(output_path)
    except (ConfigurationError, OSError) as e:
        click.echo(f"Error saving configuration: {e}", err=True)
        raise click.Abort()

    click.echo(f"✓ Configuration saved to {file_path}")


@config_commands.command()
@click.argument("file_path", type=click.Path(exists=True))
def validate(file_path: str) -> None:
    """Validate a YAML configuration file."""
    try:
        config = Config.from_file(file_path)
    except (ConfigurationError, yaml.YAMLError) as e:
        click.echo(f"✗ Configuration has errors: {e}", err=True)
        raise click.Abort()

    click.echo("✓ Configuration is valid")
    if config.api.host == "0.0.0.0" and config.environment.value == "production":  # nosec B104
        click.echo("\nWarnings:")
        click.echo(
            "  - Binding to 0.0.0.0 in production may be insecure. "
            "Consider using a reverse proxy."
        )

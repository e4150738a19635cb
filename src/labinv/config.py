"""Configuration management commands."""

import click

from labinv import logger
from labinv.inventory import create_default_config, get_config_file, load_client_config


@click.group("config")
def config_group() -> None:
    """Manage labinv configuration."""


@config_group.command("init")
def init_config() -> None:
    """Initialize configuration file with default settings.

    Creates ~/.labinv/config.toml pointing at a local backend.
    """
    try:
        create_default_config()
        config_file = get_config_file()
        click.echo(f"✓ Created configuration file: {config_file}")
        click.echo("\nEdit base_url to point at your inventory server.")
        click.echo("You can also set LABINV_API_URL and LABINV_API_TOKEN.")
    except Exception as e:
        click.echo(f"❌ Failed to create config file: {e}")
        logger.error(f"Config init failed: {e}")
        raise click.exceptions.Exit(1)


@config_group.command("show")
def show_config() -> None:
    """Display the active configuration with the token masked."""
    config_file = get_config_file()

    if not config_file.exists():
        click.echo(f"⚠️  No config file found at {config_file} (using defaults)")
        click.echo("Run 'labinv config init' to create one.\n")

    try:
        config = load_client_config()
    except Exception as e:
        click.echo(f"❌ Failed to load config: {e}")
        logger.error(f"Config show failed: {e}")
        raise click.exceptions.Exit(1)

    click.echo(f"API URL:    {config.base_url}")
    if config.api_token:
        masked = config.api_token[:6] + "..." + config.api_token[-4:]
        click.echo(f"✓ API token: {masked}")
    else:
        click.echo("⚠️  API token: Not configured")
    click.echo(f"Timeout:    {config.timeout}s")
    click.echo(f"Page size:  {config.page_size}")
    click.echo(f"Card width: {config.card_width}")

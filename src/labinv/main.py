import click

from labinv.config import config_group
from labinv.inventory.command import components
from labinv.utils.logger import setup_logger

setup_logger()


@click.group()
def main() -> None:
    """labinv – laboratory inventory client."""


main.add_command(components)
main.add_command(config_group)

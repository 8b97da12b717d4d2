"""riskplan CLI main entry point."""

import click

from riskplan import __version__
from riskplan.cli.commands import calculate_command, profiles_command, strategies_command


@click.group()
@click.version_option(version=__version__)
def main():
    """riskplan - Position Sizing and Risk Planning"""
    pass


# Register commands
main.add_command(calculate_command)
main.add_command(strategies_command)
main.add_command(profiles_command)


if __name__ == "__main__":
    main()

"""Commands __init__ - exports all commands."""

from riskplan.cli.commands.calculate import calculate_command
from riskplan.cli.commands.profiles import profiles_command
from riskplan.cli.commands.strategies import strategies_command

__all__ = ["calculate_command", "profiles_command", "strategies_command"]

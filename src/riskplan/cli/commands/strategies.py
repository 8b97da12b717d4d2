"""Strategy listing command."""

import click
from rich.console import Console
from rich.markup import escape

from riskplan.cli.ui.formatters import create_strategies_table
from riskplan.libraries.registry import get_strategy_registry
from riskplan.libraries.risk.errors import ValidationFailedError

console = Console()


@click.command("strategies")
def strategies_command():
    """
    List registered risk strategies with their default configuration.

    A strategy whose config cannot be built from defaults is still listed,
    with the validation error in place of its description.
    """
    registry = get_strategy_registry()
    table = create_strategies_table()

    for name in registry.list_names():
        source = registry.get_metadata(name).get("source_type", "custom")
        try:
            strategy = registry.create(name)
        except ValidationFailedError as e:
            table.add_row(name, "-", source, f"[red]invalid: {escape(str(e))}[/red]")
            continue
        table.add_row(name, strategy.display_name, source, strategy.description())

    console.print(table)

"""Risk profile listing command."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from riskplan.cli.ui.formatters import create_profiles_table
from riskplan.libraries.risk.loaders import list_builtin_profiles, list_custom_profiles, load_profile
from riskplan.system.config import reload_system_config

console = Console()


@click.command("profiles")
@click.option(
    "--custom-path",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory of custom profiles (default: custom_libraries.risk_profiles)",
)
def profiles_command(custom_path: Optional[Path]):
    """
    List built-in and custom risk profiles.

    Each profile is loaded so broken files show up here rather than at
    calculation time.
    """
    reload_system_config()
    table = create_profiles_table()

    builtin = list_builtin_profiles()
    custom = [name for name in list_custom_profiles(custom_path) if name not in builtin]

    for source, names in (("built-in", builtin), ("custom", custom)):
        for name in names:
            try:
                summary = load_profile(name, custom_path=custom_path).description()
            except (FileNotFoundError, ValueError) as e:
                summary = f"[red]invalid: {escape(str(e))}[/red]"
            table.add_row(name, source, summary)

    console.print(table)
    if not custom:
        console.print("[dim]No custom profiles (set custom_libraries.risk_profiles in riskplan.yaml)[/dim]")

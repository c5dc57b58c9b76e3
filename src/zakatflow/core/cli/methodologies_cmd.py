"""zakatflow methodologies: list the supported methodologies."""

import click


@click.command()
def methodologies() -> None:
    """List supported methodologies."""
    from rich.console import Console
    from rich.table import Table

    from zakatflow.financial.calculators.methodology import METHODOLOGY_RULES

    table = Table(title="Methodologies")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Summary")
    for methodology, rules in METHODOLOGY_RULES.items():
        table.add_row(methodology.value, rules.display_name, rules.description)
    Console().print(table)

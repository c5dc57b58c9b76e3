"""zakatflow compare: one input under every methodology."""

from __future__ import annotations

import click

from zakatflow.financial.calculators.methodology import list_methodologies


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--first",
    type=click.Choice(list_methodologies(), case_sensitive=False),
    default="bradford",
    show_default=True,
    help="First methodology for the rulings table.",
)
@click.option(
    "--second",
    type=click.Choice(list_methodologies(), case_sensitive=False),
    default="hanafi",
    show_default=True,
    help="Second methodology for the rulings table.",
)
@click.option("--json", "as_json", is_flag=True, help="Print results and rulings as JSON.")
@click.pass_context
def compare(ctx: click.Context, input_file: str, first: str, second: str, as_json: bool) -> None:
    """Compare zakat for INPUT_FILE across all methodologies."""
    from zakatflow.financial.calculators.comparison import compare_methodologies
    from zakatflow.financial.calculators.zakat import ZakatCalculator

    from .common import cli_errors, echo_json, get_config, load_input, money

    config = get_config(ctx)
    with cli_errors():
        data = load_input(input_file, config)
        results = ZakatCalculator.from_config(config).calculate_with_methodologies(data)
        differences = compare_methodologies(first, second)

    if as_json:
        echo_json(
            {
                "results": {name: result.to_dict() for name, result in results.items()},
                "differences": [d.to_dict() for d in differences],
            }
        )
        return

    from rich.console import Console
    from rich.table import Table

    console = Console()

    table = Table(title="Zakat by methodology")
    table.add_column("Methodology")
    table.add_column("Zakatable", justify="right")
    table.add_column("Deducted", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("Zakat due", justify="right")
    for name, result in results.items():
        table.add_row(
            name,
            money(result.total_zakatable_gross, result.currency),
            money(result.deductible_liabilities, result.currency),
            money(result.net_zakatable_wealth, result.currency),
            money(result.zakat_due, result.currency),
        )
    console.print(table)

    rulings = Table(title=f"Rulings: {first} vs {second}")
    rulings.add_column("Topic")
    rulings.add_column(first)
    rulings.add_column(second)
    for d in differences:
        style = "bold" if d.is_different else None
        rulings.add_row(d.topic, d.first_verdict, d.second_verdict, style=style)
    console.print(rulings)

"""zakatflow calculate: zakat due for one input file."""

from __future__ import annotations

import click

from zakatflow.financial.calculators.methodology import list_methodologies


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--methodology",
    "-m",
    type=click.Choice(list_methodologies(), case_sensitive=False),
    default=None,
    help="Methodology to apply (overrides the input file).",
)
@click.option("--calendar", type=click.Choice(["lunar", "solar"]), default=None, help="Accounting year.")
@click.option("--nisab", "nisab_standard", type=click.Choice(["silver", "gold"]), default=None, help="Nisab standard.")
@click.option("--nisab-threshold", type=float, default=None, help="Explicit nisab threshold in currency units.")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON.")
@click.pass_context
def calculate(
    ctx: click.Context,
    input_file: str,
    methodology: str | None,
    calendar: str | None,
    nisab_standard: str | None,
    nisab_threshold: float | None,
    as_json: bool,
) -> None:
    """Calculate zakat for the financial position in INPUT_FILE (YAML or JSON)."""
    from zakatflow.financial.calculators.zakat import ZakatCalculator
    from zakatflow.financial.calculators.zakat import calculate as run_calculation

    from .common import cli_errors, echo_json, get_config, load_input

    config = get_config(ctx)
    with cli_errors():
        data = load_input(
            input_file,
            config,
            methodology=methodology,
            calendar_type=calendar,
            nisab_standard=nisab_standard,
        )
        calculator = ZakatCalculator.from_config(config)
        if nisab_threshold is None:
            result = calculator.calculate(data)
        else:
            result = run_calculation(data, nisab_threshold=nisab_threshold)

    if as_json:
        echo_json(result.to_dict())
        return

    _render(result)


def _render(result) -> None:
    from rich.console import Console
    from rich.panel import Panel
    from rich.table import Table

    from .common import money

    console = Console()
    currency = result.currency

    table = Table(title=f"Assets ({result.methodology.value})")
    table.add_column("Category")
    table.add_column("Gross", justify="right")
    table.add_column("Zakatable", justify="right")
    table.add_column("%", justify="right")
    for category in result.categories:
        if category.gross_total <= 0:
            continue
        table.add_row(
            category.label,
            money(category.gross_total, currency),
            money(category.zakatable_amount, currency),
            f"{category.zakatable_fraction:.0%}",
        )
    console.print(table)

    if result.liabilities:
        liabilities = Table(title="Liabilities")
        liabilities.add_column("Liability")
        liabilities.add_column("Owed", justify="right")
        liabilities.add_column("Policy")
        liabilities.add_column("Deducted", justify="right")
        for item in result.liabilities:
            liabilities.add_row(
                item.label, money(item.owed, currency), item.policy.value, money(item.deductible, currency)
            )
        console.print(liabilities)

    status = "above" if result.is_above_nisab else "below"
    lines = [
        f"Zakatable wealth: {money(result.total_zakatable_gross, currency)}",
        f"Deductible liabilities: {money(result.deductible_liabilities, currency)}",
        f"Net zakatable wealth: {money(result.net_zakatable_wealth, currency)}",
        f"Nisab ({result.nisab_standard.value}): {money(result.nisab_threshold, currency)} ({status})",
        f"[bold]Zakat due: {money(result.zakat_due, currency)}[/bold] at {result.zakat_rate:.3%}",
    ]
    if result.purification.total > 0:
        lines.append(f"Purification (separate from zakat): {money(result.purification.total, currency)}")
    console.print(Panel("\n".join(lines), title="Summary"))

    for issue in result.input_issues:
        console.print(f"[yellow]Adjusted input:[/yellow] {issue}")

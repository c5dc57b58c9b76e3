"""zakatflow layout: flow-diagram geometry as JSON."""

from __future__ import annotations

import click


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--width", type=float, default=None, help="Canvas width in pixels (default: layout.width).")
@click.option("--height", type=float, default=None, help="Canvas height in pixels (default: layout.height).")
@click.pass_context
def layout(ctx: click.Context, input_file: str, width: float | None, height: float | None) -> None:
    """Print allocation and diagram geometry for INPUT_FILE as JSON."""
    from zakatflow.financial.calculators.zakat import ZakatCalculator
    from zakatflow.flow.allocator import allocate
    from zakatflow.flow.layout import LayoutOptions
    from zakatflow.flow.layout import layout as compute_layout

    from .common import cli_errors, echo_json, get_config, load_input

    config = get_config(ctx)
    with cli_errors():
        data = load_input(input_file, config)
        result = ZakatCalculator.from_config(config).calculate(data)
        allocation = allocate(result)
        geometry = compute_layout(
            allocation,
            width if width is not None else float(config.get("layout.width", 800)),
            height if height is not None else float(config.get("layout.height", 500)),
            LayoutOptions.from_config(config),
        )

    echo_json({"allocation": allocation.to_dict(), "layout": geometry.to_dict()})

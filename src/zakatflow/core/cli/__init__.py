"""ZakatFlow CLI: entry point for calculate, compare, layout and methodologies."""

import click

from zakatflow import __version__

_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version=__version__, package_name="zakatflow")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML or JSON config file.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override logging.level from the config.",
)
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """ZakatFlow: zakat calculations across scholarly methodologies."""
    from zakatflow.core.config import Config
    from zakatflow.core.utils.logging import configure_logging

    from .common import cli_errors

    with cli_errors():
        config = Config(config_file=config_file)
        settings = config.validated()

    configure_logging(settings, level=log_level)
    ctx.obj = config


# Register subcommands
from .calculate_cmd import calculate
from .compare_cmd import compare
from .layout_cmd import layout
from .methodologies_cmd import methodologies

main.add_command(calculate)
main.add_command(compare)
main.add_command(layout)
main.add_command(methodologies)

"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click
import yaml

from zakatflow.core.config import Config
from zakatflow.core.exceptions import InvalidInput, ZakatFlowError


@contextmanager
def cli_errors() -> Iterator[None]:
    """Turn library errors into a one-line message and exit status 1."""
    try:
        yield
    except ZakatFlowError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def get_config(ctx: click.Context) -> Config:
    """The Config loaded by the top-level group (defaults when run standalone)."""
    config = ctx.find_object(Config)
    return config if config is not None else Config()


def read_mapping(path: str) -> dict:
    """Read a YAML or JSON document that must hold a flat mapping.

    Raises:
        InvalidInput: If the file cannot be parsed or is not a mapping.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
        if Path(path).suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise InvalidInput(f"Could not parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput(f"{path} must contain a mapping of input fields, got {type(data).__name__}")
    return data


def load_input(path: str, config: Config, **overrides):
    """Build a FinancialInput from a file, with config defaults and CLI overrides.

    Precedence (highest wins): CLI options, the input file, the
    ``calculation`` section of the config.
    """
    from zakatflow.financial.models import FinancialInput, canonical_field

    data = {
        key: config.get(f"calculation.{key}")
        for key in ("methodology", "nisab_standard", "calendar_type", "currency")
        if config.get(f"calculation.{key}") is not None
    }
    data.update({canonical_field(key): value for key, value in read_mapping(path).items()})
    data.update({key: value for key, value in overrides.items() if value is not None})
    return FinancialInput.from_mapping(data)


def money(value: float, currency: str = "USD") -> str:
    symbol = "$" if currency == "USD" else f"{currency} "
    return f"{symbol}{value:,.2f}"


def echo_json(data: dict) -> None:
    click.echo(json.dumps(data, indent=2))

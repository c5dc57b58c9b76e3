"""Tests for the CLI entry point."""

import json
import sys

import pytest
from click.testing import CliRunner
from loguru import logger

from zakatflow.core.cli import main

SIMPLE = {"checkingAccounts": 10_000, "passiveInvestments": 50_000}


@pytest.fixture(autouse=True)
def _restore_logging():
    """The group callback points loguru at the runner's stderr; undo that."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def runner():
    return CliRunner()


class TestCliGroup:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "ZakatFlow" in result.output
        for command in ("calculate", "compare", "layout", "methodologies"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config(self, runner, tmp_dir):
        config_path = f"{tmp_dir}/bad.yaml"
        with open(config_path, "w") as f:
            f.write("calculation:\n  methodology: zahiri\n")

        result = runner.invoke(main, ["--config", config_path, "methodologies"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestMethodologiesCommand:
    def test_lists_methodologies(self, runner):
        result = runner.invoke(main, ["methodologies"])
        assert result.exit_code == 0
        assert "bradford" in result.output
        assert "hanbali" in result.output


class TestCalculateCommand:
    def test_json(self, runner, input_file):
        result = runner.invoke(main, ["calculate", input_file(SIMPLE), "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data["methodology"] == "bradford"
        assert data["totals"]["total_zakatable_gross"] == 25_000
        assert data["zakat"]["due"] == 625.0

    def test_methodology_option_overrides_file(self, runner, input_file):
        path = input_file({**SIMPLE, "madhab": "bradford"})
        result = runner.invoke(main, ["calculate", path, "-m", "hanafi", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["zakat"]["due"] == 1_500.0

    def test_config_default_methodology(self, runner, input_file, tmp_config_file):
        result = runner.invoke(main, ["--config", tmp_config_file, "calculate", input_file(SIMPLE), "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["methodology"] == "hanafi"

    def test_json_input_file(self, runner, tmp_dir):
        path = f"{tmp_dir}/input.json"
        with open(path, "w") as f:
            json.dump(SIMPLE, f)

        result = runner.invoke(main, ["calculate", path, "--json", "--calendar", "solar"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["zakat"]["rate"] == 0.02577

    def test_explicit_threshold(self, runner, input_file):
        result = runner.invoke(main, ["calculate", input_file(SIMPLE), "--nisab-threshold", "100000", "--json"])
        data = json.loads(result.output)
        assert data["nisab"]["is_above_nisab"] is False
        assert data["zakat"]["due"] == 0.0

    def test_nan_threshold_reported(self, runner, input_file):
        args = ["--log-level", "ERROR", "calculate", input_file(SIMPLE), "--nisab-threshold", "nan", "--json"]
        result = runner.invoke(main, args)
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data["nisab"]["threshold"] == 0.0
        assert data["zakat"]["due"] == 625.0
        assert any("nisab_threshold" in issue for issue in data["input_issues"])

    def test_table_output(self, runner, input_file):
        result = runner.invoke(main, ["calculate", input_file(SIMPLE)])
        assert result.exit_code == 0, result.output
        assert "Summary" in result.output
        assert "$625.00" in result.output

    def test_unknown_methodology_in_file(self, runner, input_file):
        result = runner.invoke(main, ["calculate", input_file({**SIMPLE, "methodology": "zahiri"})])
        assert result.exit_code == 1
        assert "Unknown methodology" in result.output

    def test_input_not_utf8(self, runner, tmp_dir):
        path = f"{tmp_dir}/input.yaml"
        with open(path, "wb") as f:
            f.write(b"checkingAccounts: \xff\xfe10000\n")

        result = runner.invoke(main, ["calculate", path])
        assert result.exit_code == 1
        assert "Could not parse" in result.output

    def test_input_must_be_mapping(self, runner, input_file):
        result = runner.invoke(main, ["calculate", input_file([1, 2, 3])])
        assert result.exit_code == 1
        assert "mapping" in result.output


class TestCompareCommand:
    def test_json(self, runner, input_file):
        result = runner.invoke(main, ["compare", input_file(SIMPLE), "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert set(data["results"]) == {"bradford", "hanafi", "maliki-shafii", "hanbali"}
        assert data["results"]["hanafi"]["zakat"]["due"] == 1_500.0
        assert len(data["differences"]) == 4

    def test_table_output(self, runner, input_file):
        result = runner.invoke(main, ["compare", input_file(SIMPLE), "--second", "hanbali"])
        assert result.exit_code == 0, result.output
        assert "Zakat by methodology" in result.output


class TestLayoutCommand:
    def test_json(self, runner, input_file):
        result = runner.invoke(main, ["layout", input_file(SIMPLE), "--width", "1000", "--height", "600"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data["allocation"]["totals"]["obligation"] == 625.0
        assert data["layout"]["width"] == 1000
        assert [n["key"] for n in data["layout"]["nodes"]][:2] == ["liquid", "investments"]

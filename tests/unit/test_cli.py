"""Tests for the CLI module."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from energy_projections.cli import _resolve_commodity, cli
from energy_projections.core.models import CommodityKey


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched_config(config):
    with patch("energy_projections.cli._load_config", return_value=config):
        yield config


@pytest.fixture
def fetch(sample_quote):
    with patch("energy_projections.cli._fetch_quote", new=AsyncMock(return_value=sample_quote)) as m:
        yield m


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestResolveCommodity:
    def test_valid(self):
        assert _resolve_commodity("COAL") == CommodityKey.COAL

    def test_invalid(self):
        import click

        with pytest.raises(click.BadParameter):
            _resolve_commodity("uranium")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestCLIGroup:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("prices", "project", "serve", "status"):
            assert command in result.output


class TestPricesCommand:
    def test_table_output(self, runner, patched_config, fetch):
        result = runner.invoke(cli, ["prices", "oil"])

        assert result.exit_code == 0, result.output
        assert "Sources: EIA, Yahoo Finance (Brent)" in result.output
        assert "estimated data" not in result.output
        fetch.assert_awaited_once_with(patched_config, CommodityKey.OIL)

    def test_json_output(self, runner, patched_config, fetch):
        result = runner.invoke(cli, ["prices", "oil", "--format", "json"])

        assert result.exit_code == 0, result.output
        start = result.output.index("{")
        body = json.loads(result.output[start:])
        assert body["commodity"] == "oil"
        assert body["us"]["value"] == 74.50
        assert body["contributing_sources"] == ["EIA", "Yahoo Finance (Brent)"]

    def test_fallback_notice(self, runner, patched_config, aggregator):
        quote = aggregator.fallback_quote("coal")
        with patch("energy_projections.cli._fetch_quote", new=AsyncMock(return_value=quote)):
            result = runner.invoke(cli, ["prices", "coal"])

        assert result.exit_code == 0, result.output
        assert "Sources: Fallback estimates" in result.output
        assert "Using estimated data" in result.output

    def test_unknown_commodity(self, runner, patched_config, fetch):
        result = runner.invoke(cli, ["prices", "uranium"])

        assert result.exit_code == 2
        assert "COMMODITY" in result.output
        fetch.assert_not_awaited()


class TestProjectCommand:
    def test_prints_summary(self, runner, patched_config, fetch):
        result = runner.invoke(cli, ["project", "oil", "--usage-change", "10"])

        assert result.exit_code == 0, result.output
        assert "ENERGY PRICE PROJECTION SUMMARY" in result.output
        assert "New Price:       $96.85/barrel" in result.output
        assert "LIVE DATA" in result.output

    def test_world_region(self, runner, patched_config, fetch):
        result = runner.invoke(cli, ["project", "oil", "-u", "-10", "-r", "world"])

        assert result.exit_code == 0, result.output
        assert "Region: World" in result.output
        assert "Current Price: $78.80/barrel" in result.output

    def test_usage_change_required(self, runner, patched_config, fetch):
        result = runner.invoke(cli, ["project", "oil"])
        assert result.exit_code == 2
        assert "--usage-change" in result.output


class TestStatusCommand:
    def test_keys_missing_hint(self, runner, unkeyed_config):
        with patch("energy_projections.cli._load_config", return_value=unkeyed_config):
            result = runner.invoke(cli, ["status"])

        assert result.exit_code == 0, result.output
        assert "EIA_API_KEY" in result.output

    def test_keys_present(self, runner, patched_config):
        result = runner.invoke(cli, ["status"])

        assert result.exit_code == 0, result.output
        assert "EIA_API_KEY" not in result.output


class TestServeCommand:
    def test_runs_uvicorn_factory(self, runner, patched_config):
        with patch("uvicorn.run") as run:
            result = runner.invoke(cli, ["serve", "--port", "8123"])

        assert result.exit_code == 0, result.output
        run.assert_called_once_with(
            "energy_projections.api.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=8123,
            reload=False,
        )

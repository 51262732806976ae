"""Integration tests for the pricing CLI.

These tests verify the commands end-to-end through typer's CliRunner:
- quotes and from-prices print the expected totals
- pricing errors exit with code 1
- scan and validate use their documented exit codes
- a ``--catalog`` file is read and written back
"""

import copy
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pricing.application.factory import set_factory
from pricing.cli.main import app


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def cli_factory(factory):
    """Point the CLI at the shared test catalog."""
    set_factory(factory)
    return factory


@pytest.fixture
def catalog_path(tmp_path: Path, stickers_preset) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "presets": [
                    {"key": stickers_preset.key, "name": "Stickers", "model": "QTY_TIERED",
                     "config": stickers_preset.config}
                ],
                "products": [
                    {"slug": "stickers", "name": "Stickers", "category": "stickers",
                     "pricingPresetKey": "stickers_default"},
                ],
            }
        )
    )
    return path


def _write_config(tmp_path: Path, config) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config))
    return path


@pytest.mark.usefixtures("cli_factory")
class TestQuoteCommand:
    """Tests for the quote command."""

    def test_table_output(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["quote", "stickers", "-q", "60"])

        assert result.exit_code == 0
        assert "TOTAL" in result.output
        assert "$72.00 CAD" in result.output

    def test_json_output(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["quote", "vinyl-banner", "-q", "2", "-w", "24", "-h", "36",
                                     "-o", "finish=lamination", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["totalCents"] == 3500

    def test_size_and_accessory(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["quote", "business-cards", "-q", "500", "-s", "3.5x2",
                                     "-a", "rounded:100", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["totalCents"] == 4700

    def test_unknown_product(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["quote", "missing", "-q", "1"])

        assert result.exit_code == 1
        assert "Error: Product not found" in result.output

    def test_invalid_quantity(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["quote", "stickers", "-q", "0"])

        assert result.exit_code == 1
        assert "quantity must be a positive integer" in result.output

    def test_unquotable_product(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["quote", "legacy-poster", "-q", "1"])

        assert result.exit_code == 1
        assert "not quotable" in result.output

    def test_malformed_option(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["quote", "stickers", "-q", "60", "-o", "lamination"])
        assert result.exit_code != 0


@pytest.mark.usefixtures("cli_factory")
class TestCatalogCommands:
    """from-price, scan, refresh and bulk-adjust against the test catalog."""

    def test_from_price(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["from-price", "stickers"])

        assert result.exit_code == 0
        assert "stickers: from $60.00 CAD (live_quote)" in result.output

    def test_from_price_inactive(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["from-price", "retired-labels"])
        assert result.exit_code == 1

    def test_clean_scan(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["scan"])

        assert result.exit_code == 0
        assert "No anomalies found." in result.output

    def test_scan_with_anomalies(self, runner: CliRunner, store) -> None:
        preset = store.get_preset("stickers_default")
        preset.config = {"tiers": []}
        store.save_preset(preset)

        result = runner.invoke(app, ["scan", "--json"])

        assert result.exit_code == 2
        assert json.loads(result.stdout)["presetAnomalies"][0]["type"] == "missing_tiers"

    def test_refresh(self, runner: CliRunner, store) -> None:
        result = runner.invoke(app, ["refresh"])

        assert result.exit_code == 0
        assert "Refreshed 3 product(s), 0 failed." in result.output
        assert store.get_product("vinyl-banner").min_price.cents == 2500

    def test_refresh_failure_exits_1(self, runner: CliRunner, store) -> None:
        preset = store.get_preset("largeformat_roll_default")
        preset.config = {"tiers": "broken"}
        store.save_preset(preset)

        result = runner.invoke(app, ["refresh", "--preset", "largeformat_roll_default"])

        assert result.exit_code == 1
        assert "FAIL  vinyl-banner" in result.output

    def test_bulk_adjust_preview(self, runner: CliRunner, store) -> None:
        result = runner.invoke(app, ["bulk-adjust", "10", "--category", "stickers"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["mode"] == "preview"
        assert data["results"][0]["sample"]["after"] == 1.32
        assert store.get_preset("stickers_default").config["tiers"][0]["unitPrice"] == 1.2

    def test_bulk_adjust_apply(self, runner: CliRunner, store) -> None:
        result = runner.invoke(app, ["bulk-adjust", "10", "--apply", "--category", "stickers"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["applied"] == 1
        assert store.get_preset("stickers_default").config["tiers"][0]["unitPrice"] == 1.32

    def test_bulk_rollback(self, runner: CliRunner, store, tmp_path: Path) -> None:
        applied = runner.invoke(app, ["bulk-adjust", "10", "--apply", "--category", "stickers"])
        report_file = tmp_path / "adjust.json"
        report_file.write_text(applied.stdout)

        result = runner.invoke(app, ["bulk-rollback", str(report_file)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["restored"] == ["stickers_default"]
        assert store.get_preset("stickers_default").config["tiers"][0]["unitPrice"] == 1.2

    def test_bulk_rollback_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["bulk-rollback", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_bulk_adjust_out_of_range(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["bulk-adjust", "600"])

        assert result.exit_code == 1
        assert "percent must be between -95 and 500" in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_config(self, runner: CliRunner, tmp_path: Path, stickers_preset) -> None:
        path = _write_config(tmp_path, stickers_preset.config)
        result = runner.invoke(app, ["validate", "QTY_TIERED", str(path)])

        assert result.exit_code == 0
        assert "Validation passed. Config is valid." in result.output

    def test_invalid_config(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write_config(tmp_path, {"tiers": [{"upToSqft": -1, "rate": 2}]})
        result = runner.invoke(app, ["validate", "AREA_TIERED", str(path)])

        assert result.exit_code == 1
        assert "tiers[0].upToSqft" in result.output

    def test_warnings_exit_2(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write_config(tmp_path, {"tiers": [{"minQty": 1, "unitPrice": 1}, {"minQty": 10, "unitPrice": 2}]})
        result = runner.invoke(app, ["validate", "QTY_TIERED", str(path)])

        assert result.exit_code == 2
        assert "Warnings:" in result.output

    def test_file_not_found(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["validate", "QTY_TIERED", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{ nope")
        result = runner.invoke(app, ["validate", "QTY_TIERED", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output


class TestPresetsCommand:
    """Tests for the presets command group."""

    @pytest.mark.usefixtures("cli_factory")
    def test_list(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["presets", "list"])

        assert result.exit_code == 0
        assert "business_cards_default" in result.output
        assert "QTY_OPTIONS" in result.output

    @pytest.mark.usefixtures("cli_factory")
    def test_show(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["presets", "show", "stickers_default"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["model"] == "QTY_TIERED"

    @pytest.mark.usefixtures("cli_factory")
    def test_show_missing(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["presets", "show", "nope"])

        assert result.exit_code == 1
        assert "Pricing preset not found" in result.output

    def test_seeds(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["presets", "seeds"])

        assert result.exit_code == 0
        assert "Bundled presets:" in result.output
        assert "largeformat_roll_default" in result.output

    def test_init(self, runner: CliRunner, tmp_path: Path) -> None:
        output = tmp_path / "cards.json"
        result = runner.invoke(app, ["presets", "init", "business_cards_default", "-o", str(output)])

        assert result.exit_code == 0
        assert f"Created: {output}" in result.output
        assert json.loads(output.read_text())["sizes"][0]["label"] == "3.5x2"

        again = runner.invoke(app, ["presets", "init", "business_cards_default", "-o", str(output)])
        assert again.exit_code == 1
        assert "--force" in again.output

    def test_init_unknown(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["presets", "init", "nope", "-o", str(tmp_path / "x.json")])

        assert result.exit_code == 1
        assert "Available presets:" in result.output


class TestCatalogOption:
    """``--catalog`` reads and writes a JSON catalog file."""

    def test_quote_from_catalog_file(self, runner: CliRunner, catalog_path: Path) -> None:
        result = runner.invoke(app, ["--catalog", str(catalog_path), "quote", "stickers", "-q", "100", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["totalCents"] == 9500

    def test_refresh_writes_catalog(self, runner: CliRunner, catalog_path: Path) -> None:
        result = runner.invoke(app, ["--catalog", str(catalog_path), "refresh"])

        assert result.exit_code == 0
        data = json.loads(catalog_path.read_text())
        assert data["products"][0]["minPrice"]["cents"] == 6000
        assert data["products"][0]["minPrice"]["refreshedAt"] is not None

    def test_bulk_apply_writes_catalog(self, runner: CliRunner, catalog_path: Path, stickers_preset) -> None:
        before = copy.deepcopy(stickers_preset.config)
        result = runner.invoke(app, ["-c", str(catalog_path), "bulk-adjust", "10", "--apply"])

        assert result.exit_code == 0
        data = json.loads(catalog_path.read_text())
        assert data["presets"][0]["config"]["tiers"][0]["unitPrice"] == 1.32
        assert before["tiers"][0]["unitPrice"] == 1.2

    @pytest.mark.parametrize("command", [["scan"], ["refresh"], ["from-price", "stickers"]])
    def test_missing_catalog_file(self, runner: CliRunner, tmp_path: Path, command) -> None:
        result = runner.invoke(app, ["--catalog", str(tmp_path / "missing.json"), *command])

        assert result.exit_code == 1
        assert "Error: File not found" in result.output

    def test_invalid_catalog_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text('{"presets": [{"name": "no key"}]}')
        result = runner.invoke(app, ["--catalog", str(path), "refresh"])

        assert result.exit_code == 1
        assert "Error: Invalid catalog file:" in result.output

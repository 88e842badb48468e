import json
import logging

from typer.testing import CliRunner

from rent_vs_buy.cli import app
from rent_vs_buy.config import SCENARIO_ENV_VAR

runner = CliRunner()


def test_run_default_scenario():
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0
    assert "Total cost of owning" in result.output
    assert "Total cost of renting" in result.output
    assert "over 7 years." in result.output


def test_run_json_with_timeline():
    result = runner.invoke(app, ["run", "--json", "--show-timeline", "--holding-period", "5"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["buying"]["holding_period_years"] == 5
    assert payload["renting"]["holding_period_years"] == 5
    assert len(payload["timeline"]) == 5
    assert payload["comparison"]["recommendation"] in {
        "buying_cheaper",
        "renting_cheaper",
        "roughly_equal",
    }


def test_run_text_timeline():
    result = runner.invoke(app, ["run", "--show-timeline", "--holding-period", "3"])
    assert result.exit_code == 0
    assert "Year  Buying (cumulative)" in result.output


def test_invalid_override_exits_with_error():
    result = runner.invoke(app, ["run", "--home-price", "0"])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_scenario_file(tmp_path):
    path = tmp_path / "scenario.yaml"
    path.write_text("renting:\n  monthly_rent: 900\n", encoding="utf-8")
    result = runner.invoke(app, ["run", "--json", "--scenario", str(path)])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["renting"]["yearly_rents"][0] == 900


def test_scenario_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "scenario.yaml"
    path.write_text("shared:\n  holding_period_years: 2\n", encoding="utf-8")
    monkeypatch.setenv(SCENARIO_ENV_VAR, str(path))
    result = runner.invoke(app, ["run", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["buying"]["holding_period_years"] == 2


def test_defaults_prints_yaml():
    result = runner.invoke(app, ["defaults"])
    assert result.exit_code == 0
    assert "home_price: 350000.0" in result.output
    assert "monthly_rent: 1800.0" in result.output


def test_overflowing_scenario_exits_with_error(tmp_path):
    path = tmp_path / "scenario.yaml"
    path.write_text(
        "shared:\n  holding_period_years: 30\nrenting:\n  rent_increase_rate: 1.0e+15\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["run", "--scenario", str(path)])
    assert result.exit_code == 1
    assert "rent_increase_rate" in result.output


def test_verbose_enables_debug_logging(caplog):
    result = runner.invoke(app, ["run", "--verbose"])
    assert result.exit_code == 0
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
    assert any(m.startswith("Recommendation:") for m in messages)


def test_quiet_by_default(caplog):
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0
    assert not [r for r in caplog.records if r.name.startswith("rent_vs_buy")]

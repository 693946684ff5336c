"""Tests for settings loaded from the environment."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from groupsplit.cli import app
from groupsplit.config import load_settings
from groupsplit.exceptions import ConfigurationError
from groupsplit.models import OverDeductionPolicy, TaxPairing

runner = CliRunner()

ENV_VARS = [
    "GROUPSPLIT_LEDGER_PATH",
    "GROUPSPLIT_TAX_PAIRING",
    "GROUPSPLIT_OVER_DEDUCTION",
    "GROUPSPLIT_SKIP_INVALID_EXPENSES",
    "GROUPSPLIT_CURRENCY_SYMBOL",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Run every test away from any real .env file and GROUPSPLIT_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def over_deducted_ledger(tmp_path) -> Path:
    path = tmp_path / "ledger.json"
    path.write_text(
        json.dumps(
            {
                "people": [
                    {"id": "p1", "name": "Alice"},
                    {"id": "p2", "name": "Bob"},
                    {"id": "p3", "name": "Carol"},
                ],
                "expenses": [
                    {
                        "id": "x1",
                        "description": "Snacks",
                        "amount": 10,
                        "date": "2024-05-01T12:00:00",
                        "paidBy": "p1",
                        "participants": ["p1", "p2", "p3"],
                        "deductions": [
                            {
                                "id": "d1",
                                "amount": 30,
                                "description": "Wine",
                                "excludedParticipants": ["p2"],
                            }
                        ],
                    }
                ],
            }
        )
    )
    return path


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.tax_pairing is TaxPairing.FIRST_MATCH
        assert settings.over_deduction is OverDeductionPolicy.PROPAGATE
        assert settings.skip_invalid_expenses is False
        assert settings.currency_symbol == "$"

    def test_policies_from_environment(self, monkeypatch):
        monkeypatch.setenv("GROUPSPLIT_TAX_PAIRING", "exclusive")
        monkeypatch.setenv("GROUPSPLIT_OVER_DEDUCTION", "reject")

        settings = load_settings()

        assert settings.tax_pairing is TaxPairing.EXCLUSIVE
        assert settings.over_deduction is OverDeductionPolicy.REJECT

    def test_skip_invalid_and_paths_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GROUPSPLIT_SKIP_INVALID_EXPENSES", "true")
        monkeypatch.setenv("GROUPSPLIT_LEDGER_PATH", str(tmp_path / "trip.json"))
        monkeypatch.setenv("GROUPSPLIT_CURRENCY_SYMBOL", "€")

        settings = load_settings()

        assert settings.skip_invalid_expenses is True
        assert settings.ledger_path == tmp_path / "trip.json"
        assert settings.currency_symbol == "€"

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("GROUPSPLIT_TAX_PAIRING=exclusive\n")

        assert load_settings().tax_pairing is TaxPairing.EXCLUSIVE

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("GROUPSPLIT_OVER_DEDUCTION", "reject")

        settings = load_settings(over_deduction=OverDeductionPolicy.PROPAGATE)

        assert settings.over_deduction is OverDeductionPolicy.PROPAGATE

    def test_unknown_policy_raises(self, monkeypatch):
        monkeypatch.setenv("GROUPSPLIT_TAX_PAIRING", "bogus")

        with pytest.raises(ConfigurationError, match="GROUPSPLIT_"):
            load_settings()


class TestSettingsReachCommands:
    """Environment settings change what the CLI computes."""

    def test_reject_policy_fails_balances(self, over_deducted_ledger, monkeypatch):
        monkeypatch.setenv("GROUPSPLIT_OVER_DEDUCTION", "reject")

        result = runner.invoke(app, ["balances", "--file", str(over_deducted_ledger)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "x1" in result.output

    def test_propagate_policy_reports_balances(self, over_deducted_ledger):
        result = runner.invoke(app, ["balances", "--file", str(over_deducted_ledger)])

        assert result.exit_code == 0
        assert "Balances sum to zero" in result.output

    def test_bad_setting_fails_command(self, over_deducted_ledger, monkeypatch):
        monkeypatch.setenv("GROUPSPLIT_TAX_PAIRING", "bogus")

        result = runner.invoke(app, ["balances", "--file", str(over_deducted_ledger)])

        assert result.exit_code == 1
        assert "Failed to load settings" in result.output

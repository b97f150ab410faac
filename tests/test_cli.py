"""Tests for the split-ledger CLI."""

import json
from decimal import Decimal

import pytest
import typer
from typer.testing import CliRunner

from split_ledger.cli import app, parse_values

runner = CliRunner()


@pytest.fixture
def ledger_file(tmp_path, monkeypatch):
    """A ledger where Alice paid $30 for three and Bob has paid her back."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "ledger.json"
    path.write_text(
        json.dumps(
            {
                "home_currency": "USD",
                "members": [
                    {"id": "A", "name": "Alice"},
                    {"id": "B", "name": "Bob"},
                    {"id": "C", "name": "Carol"},
                ],
                "expenses": [
                    {
                        "id": "e1",
                        "payer_id": "A",
                        "amount": "30.00",
                        "splits": [
                            {"member_id": "A", "amount": "10.00"},
                            {"member_id": "B", "amount": "10.00"},
                            {"member_id": "C", "amount": "10.00"},
                        ],
                    }
                ],
                "settlements": [
                    {"from_member_id": "B", "to_member_id": "A", "amount": "10.00"}
                ],
            }
        )
    )
    return path


@pytest.fixture
def settled_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "settled.json"
    path.write_text(json.dumps({"members": [{"id": "A", "name": "Alice"}]}))
    return path


class TestBalancesCommand:
    def test_shows_member_balances(self, ledger_file):
        result = runner.invoke(app, ["balances", str(ledger_file)])

        assert result.exit_code == 0
        assert "Alice" in result.output
        assert "Carol" in result.output
        assert "$10.00" in result.output

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["balances", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestSettleUpCommand:
    def test_suggests_payment(self, ledger_file):
        result = runner.invoke(app, ["settle-up", str(ledger_file)])

        assert result.exit_code == 0
        assert "Suggested Payments" in result.output
        assert "Carol" in result.output
        assert "$10.00" in result.output

    def test_settled_group(self, settled_file):
        result = runner.invoke(app, ["settle-up", str(settled_file)])

        assert result.exit_code == 0
        assert "Everyone is settled up" in result.output

    def test_home_currency_override(self, ledger_file):
        result = runner.invoke(app, ["settle-up", str(ledger_file), "--home-currency", "EUR"])

        assert result.exit_code == 0
        assert "€10.00" in result.output

    def test_one_cent_balances_are_paid_not_flagged(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "pennies.json"
        path.write_text(
            json.dumps(
                {
                    "members": [
                        {"id": "A", "name": "Alice"},
                        {"id": "B", "name": "Bob"},
                        {"id": "C", "name": "Carol"},
                    ],
                    "expenses": [
                        {
                            "id": "e1",
                            "payer_id": "A",
                            "amount": "0.02",
                            "splits": [
                                {"member_id": "B", "amount": "0.01"},
                                {"member_id": "C", "amount": "0.01"},
                            ],
                        }
                    ],
                }
            )
        )

        result = runner.invoke(app, ["settle-up", str(path)])

        assert result.exit_code == 0
        assert "Bob" in result.output
        assert "Carol" in result.output
        assert "$0.01" in result.output
        assert "don't add up" not in result.output


class TestSplitCommand:
    def test_equal_split(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["split", "10", "-p", "A", "-p", "B", "-p", "C"])

        assert result.exit_code == 0
        assert "3.34" in result.output
        assert "3.33" in result.output

    def test_shares_from_values(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(
            app, ["split", "10", "-m", "shares", "--value", "A=2", "--value", "B=1"]
        )

        assert result.exit_code == 0
        assert "6.67" in result.output

    def test_invalid_split(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(
            app, ["split", "20", "-m", "exact", "--value", "A=10", "--value", "B=5"]
        )

        assert result.exit_code == 1
        assert "mismatched_split_total" in result.output

    def test_bad_amount(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["split", "ten", "-p", "A"])

        assert result.exit_code == 1
        assert "Not a number" in result.output

    @pytest.mark.parametrize("amount", ["NaN", "Infinity", "sNaN"])
    def test_non_finite_amount(self, tmp_path, monkeypatch, amount):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["split", amount, "-p", "A", "-p", "B"])

        assert result.exit_code == 1
        assert "Not a number" in result.output


class TestParseValues:
    def test_pairs(self):
        assert parse_values(["A=1.5", "B=2"]) == {"A": Decimal("1.5"), "B": Decimal("2")}

    def test_malformed_pair(self):
        with pytest.raises(typer.BadParameter):
            parse_values(["A"])

    def test_non_numeric_value(self):
        with pytest.raises(typer.BadParameter, match="Not a number"):
            parse_values(["A=lots"])

    @pytest.mark.parametrize("raw", ["NaN", "Infinity"])
    def test_non_finite_value(self, raw):
        with pytest.raises(typer.BadParameter, match="Not a number"):
            parse_values([f"A={raw}"])

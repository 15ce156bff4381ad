"""Tests for the trip-split CLI."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from trip_split.cli import app, format_money
from trip_split.exceptions import MissingCredentialError

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep a developer's .env and OpenAI key out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def trip_file(tmp_path):
    """Write a small mixed-currency trip to disk."""
    path = tmp_path / "trip.json"
    path.write_text(
        json.dumps(
            {
                "settings": {"name": "Kyoto", "members": ["A", "B", "C"]},
                "expenses": [
                    {
                        "id": "1",
                        "payer": "A",
                        "amount": "3000",
                        "currency": "JPY",
                        "participants": ["A", "B", "C"],
                        "description": "Dinner",
                        "date": "2024-11-15",
                    },
                    {
                        "id": "2",
                        "payer": "B",
                        "amount": "600",
                        "currency": "TWD",
                        "participants": ["A", "B", "C"],
                        "description": "Taxi",
                        "date": "2024-11-16",
                    },
                    {
                        "id": "3",
                        "payer": "C",
                        "amount": "99",
                        "currency": "JPY",
                        "participants": [],
                        "description": "Broken",
                        "date": "2024-11-16",
                    },
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


class TestFormatMoney:
    def test_positive(self):
        assert format_money(1234.5, "JPY", use_color=False) == " ¥1,234.50 "

    def test_negative(self):
        assert format_money(-200, "TWD", use_color=False) == "(NT$200.00)"

    def test_unknown_currency(self):
        assert format_money(5, "CHF", use_color=False) == " CHF 5.00 "


class TestSettleCommand:
    def test_json_output(self, trip_file):
        result = runner.invoke(app, ["settle", str(trip_file), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout[result.stdout.index("[") :])
        assert payload == [
            {"from": "B", "to": "A", "amount": "1000.00", "currency": "JPY"},
            {"from": "C", "to": "A", "amount": "1000.00", "currency": "JPY"},
            {"from": "A", "to": "B", "amount": "200.00", "currency": "TWD"},
            {"from": "C", "to": "B", "amount": "200.00", "currency": "TWD"},
        ]

    def test_currency_filter(self, trip_file):
        result = runner.invoke(
            app, ["settle", str(trip_file), "--json", "--currency", "twd"]
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout[result.stdout.index("[") :])
        assert {t["currency"] for t in payload} == {"TWD"}

    def test_table_output(self, trip_file):
        result = runner.invoke(app, ["settle", str(trip_file)])

        assert result.exit_code == 0
        assert "JPY" in result.stdout
        assert "TWD" in result.stdout
        assert "Skipped 1 shared expense" in result.stdout
        assert "All balances settle to zero" in result.stdout

    def test_uneven_split_settles(self, tmp_path):
        path = tmp_path / "dinner.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "payer": "D",
                        "amount": "722",
                        "currency": "JPY",
                        "participants": ["A", "B", "C", "D", "E", "F"],
                    }
                ]
            ),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["settle", str(path)])

        assert result.exit_code == 0
        assert "All balances settle to zero" in result.stdout

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["settle", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestSummaryCommand:
    def test_totals_and_days(self, trip_file):
        result = runner.invoke(app, ["summary", str(trip_file)])

        assert result.exit_code == 0
        assert "Kyoto" in result.stdout
        assert "Total JPY" in result.stdout
        assert "Total TWD" in result.stdout
        assert "2024-11-16" in result.stdout


class TestTranslateCommand:
    @patch("trip_split.cli.Translator")
    def test_one_shot(self, mock_translator_class):
        mock_translator_class.return_value.translate.return_value = "ありがとう"

        result = runner.invoke(app, ["translate", "thank you", "--to", "Japanese"])

        assert result.exit_code == 0
        assert "ありがとう" in result.stdout
        mock_translator_class.return_value.translate.assert_called_once_with(
            "thank you", "Japanese", None
        )

    def test_missing_key_fails(self):
        result = runner.invoke(app, ["translate", "thank you"])

        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.stdout

    @patch("trip_split.cli.run_translation_repl")
    @patch("trip_split.cli.Translator")
    def test_interactive_session(self, mock_translator_class, mock_repl):
        mock_repl.side_effect = MissingCredentialError("no key")

        result = runner.invoke(app, ["translate", "--to", "Korean"])

        assert result.exit_code == 1
        session = mock_repl.call_args.args[0]
        assert session.target_language == "Korean"

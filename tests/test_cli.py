"""Tests for the command line."""

from typer.testing import CliRunner

from soundchain.cli import app

runner = CliRunner()


class TestQuote:
    def test_quote(self):
        result = runner.invoke(
            app, ["quote", "--base-price", "50", "-r", "youtube", "-r", "commercial"]
        )
        assert result.exit_code == 0
        assert "$127.50" in result.output
        assert "Final price" in result.output

    def test_quote_with_duration(self):
        result = runner.invoke(
            app,
            ["quote", "--base-price", "100", "--territory", "regional", "--duration", "12"],
        )
        assert result.exit_code == 0
        assert "$70" in result.output

"""Tests for the command-line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from keeper_cap.cli import cli, format_money

FIXTURES = Path(__file__).parent / "fixtures"
PLAYERS = str(FIXTURES / "players.csv")
ENTRIES = str(FIXTURES / "entries.csv")
LEAGUE = str(FIXTURES / "league.json")
TRADE = str(FIXTURES / "trade.csv")


def test_format_money() -> None:
    """Test salaries print in millions."""
    assert format_money(196_500_000) == "$196.5M"
    assert format_money(0) == "$0.0M"
    assert format_money(-10_000_000) == "$-10.0M"


class TestWorksheetCommand:
    """Tests for the worksheet command."""

    def test_valid_worksheet(self, tmp_path: Path) -> None:
        """Test a valid worksheet prints rounds and writes output files."""
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "worksheet",
                PLAYERS,
                ENTRIES,
                "--league",
                LEAGUE,
                "--team",
                "t1",
                "--output-dir",
                str(tmp_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Round  1  Luka Doncic" in result.output
        assert "Nikola Jokic (base 1)  [franchise tag]" in result.output
        assert "Cap used: $200.0M of $230.0M" in result.output
        assert "Total:           $75" in result.output
        assert "✅ Worksheet is valid" in result.output

        assert (tmp_path / "resolved_entries.csv").exists()
        document = json.loads((tmp_path / "summary.json").read_text())
        assert document["summary"]["cap_trade_delta"] == 5_000_000

    def test_trade_delta_override(self) -> None:
        """Test an explicit trade delta replaces the league file value."""
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "worksheet",
                PLAYERS,
                ENTRIES,
                "--league",
                LEAGUE,
                "--team",
                "t1",
                "--trade-delta",
                "-20000000",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Cap used: $200.0M of $205.0M" in result.output

    def test_locked_fees(self) -> None:
        """Test locked apron fees are applied and marked."""
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "worksheet",
                PLAYERS,
                ENTRIES,
                "--league",
                LEAGUE,
                "--team",
                "t1",
                "--locked-penalty-dues",
                "8",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Fees (locked):" in result.output
        assert "Second apron:    $8" in result.output

    def test_missing_team_selection(self) -> None:
        """Test a multi-team file without --team exits with an error."""
        runner = CliRunner()
        result = runner.invoke(cli, ["worksheet", PLAYERS, ENTRIES, "--league", LEAGUE])

        assert result.exit_code == 1
        assert "2 teams" in result.output

    def test_invalid_worksheet_exits_nonzero(self, tmp_path: Path) -> None:
        """Test validation errors fail the command."""
        entries = tmp_path / "entries.csv"
        entries.write_text("player_id,decision\np1,REDSHIRT\n")

        runner = CliRunner()
        result = runner.invoke(
            cli, ["worksheet", PLAYERS, str(entries), "--league", LEAGUE]
        )

        assert result.exit_code == 1
        assert "Luka Doncic is not a rookie and cannot be redshirted." in result.output

    def test_bad_league_file(self, tmp_path: Path) -> None:
        """Test configuration errors are reported instead of raised."""
        league = tmp_path / "league.json"
        league.write_text(json.dumps({"total_rounds": 14}))

        runner = CliRunner()
        result = runner.invoke(
            cli, ["worksheet", PLAYERS, ENTRIES, "--league", str(league)]
        )

        assert result.exit_code == 1
        assert "missing 'cap' settings section" in result.output

    def test_negative_activations_rejected(self) -> None:
        """Test a negative activation count is a usage error."""
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "worksheet",
                PLAYERS,
                ENTRIES,
                "--league",
                LEAGUE,
                "--team",
                "t1",
                "--activations",
                "-4",
            ],
        )

        assert result.exit_code == 2
        assert "--activations" in result.output
        assert "Worksheet is valid" not in result.output

    def test_negative_locked_fees_rejected(self) -> None:
        """Test locked fee amounts cannot be negative."""
        runner = CliRunner()
        for option in ("--locked-first-apron-fee", "--locked-penalty-dues"):
            result = runner.invoke(
                cli,
                [
                    "worksheet",
                    PLAYERS,
                    ENTRIES,
                    "--league",
                    LEAGUE,
                    "--team",
                    "t1",
                    option,
                    "-1",
                ],
            )

            assert result.exit_code == 2, option
            assert option in result.output

    def test_league_is_required(self) -> None:
        """Test --league must be given."""
        runner = CliRunner()
        result = runner.invoke(cli, ["worksheet", PLAYERS, ENTRIES])
        assert result.exit_code == 2


def test_trade_command() -> None:
    """Test the trade command reports both teams."""
    runner = CliRunner()
    result = runner.invoke(cli, ["trade", PLAYERS, ENTRIES, TRADE, "--league", LEAGUE])

    assert result.exit_code == 0, result.output
    assert "Team t1" in result.output
    assert "Team t2" in result.output
    assert "Cap used: $200.0M -> $230.0M" in result.output
    assert "Crosses second apron ($225M): $2/M penalty applies" in result.output
    assert "Total fees: $75 -> $85" in result.output

"""Command-line interface for keeper worksheets and trade cap projections."""

import logging
import sys
from pathlib import Path

import click

from keeper_cap.config import ONE_MILLION, ConfigurationError
from keeper_cap.data_io import (
    DataFormatError,
    load_league_config,
    load_players,
    load_roster_entries,
    load_team_rosters,
    load_trade_assets,
    load_trade_deltas,
    save_resolved_entries_csv,
    save_summary_json,
)
from keeper_cap.models import LockedFees, Player, RosterSummary
from keeper_cap.trade_impact import compute_trade_cap_impact
from keeper_cap.worksheet import WorksheetResult, run_keeper_worksheet

logger = logging.getLogger(__name__)


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    RESET = "\033[0m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors and emojis for different log levels."""

    LEVEL_COLORS = {
        "DEBUG": Colors.BLUE,
        "INFO": "",  # No color - plain white/default
        "WARNING": Colors.YELLOW,
        "ERROR": Colors.RED,
        "CRITICAL": Colors.RED,
    }

    LEVEL_EMOJIS = {
        "DEBUG": "🔍 ",
        "INFO": "",  # No emoji for info messages
        "WARNING": "⚠️  ",
        "ERROR": "❌ ",
        "CRITICAL": "💥 ",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and emojis."""
        level_color = self.LEVEL_COLORS.get(record.levelname, "")
        level_emoji = self.LEVEL_EMOJIS.get(record.levelname, "")

        message = record.getMessage()
        if level_color:
            return f"{level_emoji}{level_color}{message}{Colors.RESET}"
        return f"{level_emoji}{message}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application with colors and emojis.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColoredFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()  # Remove any existing handlers
    root_logger.addHandler(handler)


def format_money(amount: int) -> str:
    """Format a salary figure in millions, e.g. $196.5M."""
    return f"${amount / ONE_MILLION:,.1f}M"


def print_summary(summary: RosterSummary) -> None:
    """Print cap usage and the fee breakdown."""
    click.echo(
        f"Keepers: {summary.keepers_count}  Redshirts: {summary.redshirts_count}  "
        f"Int stash: {summary.int_stash_count}  "
        f"Franchise tags: {summary.franchise_tags}"
    )
    click.echo(
        f"Cap used: {format_money(summary.cap_used)} of "
        f"{format_money(summary.cap_effective)} "
        f"(base {format_money(summary.cap_base)}, "
        f"trade delta {format_money(summary.cap_trade_delta)})"
    )
    if summary.over_second_apron_by_m:
        click.echo(f"Over second apron by: {summary.over_second_apron_by_m}M")

    locked = " (locked)" if summary.fees_locked else ""
    click.echo(f"Fees{locked}:")
    click.echo(f"  Franchise tags:  ${summary.franchise_tag_dues}")
    click.echo(f"  Redshirts:       ${summary.redshirt_dues}")
    click.echo(f"  Activations:     ${summary.activation_dues}")
    click.echo(f"  First apron:     ${summary.first_apron_fee}")
    click.echo(f"  Second apron:    ${summary.penalty_dues}")
    click.echo(f"  Total:           ${summary.total_fees}")


def print_worksheet(result: WorksheetResult, players: dict[str, Player]) -> None:
    """Print resolved keeper rounds, the summary and validation messages."""
    keepers = sorted(
        (e for e in result.entries if e.keeper_round is not None),
        key=lambda e: (e.keeper_round, e.franchise_tag, e.player_id),
    )

    click.echo("=" * 60)
    click.echo("KEEPER ROUNDS")
    click.echo("=" * 60)
    for entry in keepers:
        player = players.get(entry.player_id)
        name = player.name if player else entry.player_id
        marker = ""
        if entry.franchise_tag:
            marker = "  [franchise tag]"
        elif entry.overflow:
            marker = "  [needs manual resolution]"
        click.echo(
            f"  Round {entry.keeper_round:>2}  {name} "
            f"(base {entry.base_round if entry.base_round is not None else '-'})"
            f"{marker}"
        )

    click.echo("=" * 60)
    print_summary(result.summary)
    click.echo("=" * 60)

    for message in result.messages:
        prefix = "❌" if message.type == "error" else "⚠️ "
        click.echo(f"{prefix} {message.message}")
    if result.passed:
        click.echo("✅ Worksheet is valid")


@click.group()
def cli() -> None:
    """Keeper-round stacking and salary cap/fee engine for keeper leagues."""


@cli.command()
@click.argument("players_file", type=click.Path(exists=True))
@click.argument("entries_file", type=click.Path(exists=True))
@click.option(
    "--league",
    "league_file",
    type=click.Path(exists=True),
    required=True,
    help="League settings JSON file",
)
@click.option("--team", "team_id", default=None, help="Team id to resolve")
@click.option(
    "--trade-delta",
    type=int,
    default=None,
    help="Cap adjustment from trades (default: league file value for --team, else 0)",
)
@click.option(
    "--locked-first-apron-fee",
    type=click.IntRange(min=0),
    default=None,
    help="First apron fee recorded when fees were locked",
)
@click.option(
    "--locked-penalty-dues",
    type=click.IntRange(min=0),
    default=None,
    help="Second apron penalty recorded when fees were locked",
)
@click.option(
    "--activations",
    type=click.IntRange(min=0),
    default=0,
    help="Redshirt activations charged this season (default: 0)",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to write resolved_entries.csv and summary.json to",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (DEBUG level) logging")
def worksheet(
    players_file: str,
    entries_file: str,
    league_file: str,
    team_id: str | None,
    trade_delta: int | None,
    locked_first_apron_fee: int | None,
    locked_penalty_dues: int | None,
    activations: int,
    output_dir: str | None,
    verbose: bool,
) -> None:
    """Resolve keeper rounds, cap usage and fees for one team's worksheet."""
    setup_logging(verbose)

    try:
        league = load_league_config(league_file)
        players = load_players(players_file)
        entries = load_roster_entries(entries_file, team_id)
        if trade_delta is None:
            trade_delta = load_trade_deltas(league_file).get(team_id or "", 0)
    except (ConfigurationError, DataFormatError) as e:
        logger.error(str(e))
        sys.exit(1)

    locked_fees = None
    if locked_first_apron_fee is not None or locked_penalty_dues is not None:
        locked_fees = LockedFees(
            first_apron_fee=locked_first_apron_fee or 0,
            penalty_dues=locked_penalty_dues or 0,
        )

    result = run_keeper_worksheet(
        players,
        entries,
        league,
        trade_delta=trade_delta,
        locked_fees=locked_fees,
        activations=activations,
    )
    print_worksheet(result, players)

    if output_dir:
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        save_resolved_entries_csv(
            str(output_path / "resolved_entries.csv"), result.entries, players
        )
        save_summary_json(
            str(output_path / "summary.json"), result.summary, result.messages
        )

    sys.exit(0 if result.passed else 1)


@cli.command()
@click.argument("players_file", type=click.Path(exists=True))
@click.argument("entries_file", type=click.Path(exists=True))
@click.argument("trade_file", type=click.Path(exists=True))
@click.option(
    "--league",
    "league_file",
    type=click.Path(exists=True),
    required=True,
    help="League settings JSON file",
)
@click.option("--verbose", is_flag=True, help="Enable verbose (DEBUG level) logging")
def trade(
    players_file: str,
    entries_file: str,
    trade_file: str,
    league_file: str,
    verbose: bool,
) -> None:
    """Project each team's cap usage and fees before and after a trade."""
    setup_logging(verbose)

    try:
        league = load_league_config(league_file)
        trade_deltas = load_trade_deltas(league_file)
        players = load_players(players_file)
        rosters = load_team_rosters(entries_file)
        assets = load_trade_assets(trade_file, players)
    except (ConfigurationError, DataFormatError) as e:
        logger.error(str(e))
        sys.exit(1)

    impacts = compute_trade_cap_impact(assets, rosters, players, trade_deltas, league)

    for impact in impacts:
        click.echo("=" * 60)
        click.echo(f"Team {impact.team_name}")
        click.echo(
            f"  Salary in: {format_money(impact.salary_in)}  "
            f"out: {format_money(impact.salary_out)}"
        )
        click.echo(
            f"  Cap used: {format_money(impact.before.cap_used)} -> "
            f"{format_money(impact.after.cap_used)}"
        )
        click.echo(
            f"  Total fees: ${impact.before.total_fees} -> ${impact.after.total_fees}"
        )
        for warning in impact.warnings:
            click.echo(f"  ⚠️  {warning}")


if __name__ == "__main__":
    cli()

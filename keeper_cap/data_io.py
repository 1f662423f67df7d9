"""Data input/output for players, worksheet entries, trades and league settings."""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from keeper_cap.config import ConfigurationError, LeagueConfig
from keeper_cap.models import Decision, Player, RosterEntry, RosterSummary
from keeper_cap.trade_impact import TradeAsset
from keeper_cap.validation import ValidationMessage

logger = logging.getLogger(__name__)

PLAYER_COLUMNS = ("player_id", "name", "salary")
ENTRY_COLUMNS = ("player_id", "decision")
TRADE_COLUMNS = ("kind", "player_id", "from_team_id", "to_team_id")

TRUE_VALUES = {"true", "1", "yes", "y"}
FALSE_VALUES = {"false", "0", "no", "n", ""}

RESOLVED_ENTRY_FIELDS = [
    "player_id",
    "name",
    "decision",
    "base_round",
    "keeper_round",
    "priority",
    "franchise_tag",
    "overflow",
    "salary",
]


class DataFormatError(ValueError):
    """Raised when an input file cannot be parsed."""


def _check_columns(
    csv_path: str, fieldnames: list[str] | None, required: tuple[str, ...]
) -> None:
    missing = [c for c in required if c not in (fieldnames or [])]
    if missing:
        raise DataFormatError(f"{csv_path}: missing required columns {missing}")


def parse_bool(value: str | None) -> bool:
    """Parse a CSV boolean cell (true/false, 1/0, yes/no; blank is false)."""
    text = (value or "").strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def parse_optional_int(value: str | None) -> int | None:
    """Parse an integer cell; blank cells mean None."""
    text = (value or "").strip()
    if not text:
        return None
    return int(text)


def load_players(csv_path: str) -> dict[str, Player]:
    """Load the player pool from a CSV file.

    Args:
        csv_path: Path to CSV file with one row per player

    Returns:
        Dictionary mapping player_id -> Player

    Raises:
        DataFormatError: On missing columns, bad values or duplicate ids
    """
    players: dict[str, Player] = {}

    with open(csv_path, "r", newline="") as f:
        reader = csv.DictReader(f)
        # Fail before the first row if a required column is missing
        _check_columns(csv_path, reader.fieldnames, PLAYER_COLUMNS)

        for line_num, row in enumerate(reader, start=2):
            player_id = (row.get("player_id") or "").strip()
            if not player_id:
                continue  # Skip empty rows

            if player_id in players:
                raise DataFormatError(
                    f"{csv_path}:{line_num}: duplicate player_id {player_id}"
                )

            try:
                # Positions are slash-separated, e.g. "PG/SG"
                raw_positions = (row.get("positions") or "").split("/")
                positions = tuple(p.strip() for p in raw_positions if p.strip())
                players[player_id] = Player(
                    player_id=player_id,
                    name=(row.get("name") or "").strip(),
                    salary=int(row["salary"]),
                    positions=positions,
                    nba_team=(row.get("nba_team") or "").strip(),
                    is_rookie=parse_bool(row.get("is_rookie")),
                    is_international_stash=parse_bool(
                        row.get("is_international_stash")
                    ),
                    redshirt_eligible=parse_bool(row.get("redshirt_eligible")),
                    int_eligible=parse_bool(row.get("int_eligible")),
                    prior_year_round=parse_optional_int(row.get("prior_year_round")),
                    rookie_draft_round=parse_optional_int(
                        row.get("rookie_draft_round")
                    ),
                    rookie_draft_pick=parse_optional_int(row.get("rookie_draft_pick")),
                )
            except (ValueError, TypeError) as e:
                raise DataFormatError(f"{csv_path}:{line_num}: {e}") from e

    logger.info(f"Loaded {len(players)} players from {csv_path}")
    return players


def load_team_rosters(csv_path: str) -> dict[str, list[RosterEntry]]:
    """Load worksheet entries grouped by team.

    The team_id column is optional; without it every entry belongs to the
    team id "".

    Args:
        csv_path: Path to CSV file with one row per worksheet entry

    Returns:
        Dictionary mapping team_id -> entries in file order

    Raises:
        DataFormatError: On missing columns or bad values
    """
    rosters: dict[str, list[RosterEntry]] = {}

    with open(csv_path, "r", newline="") as f:
        reader = csv.DictReader(f)
        _check_columns(csv_path, reader.fieldnames, ENTRY_COLUMNS)

        for line_num, row in enumerate(reader, start=2):
            player_id = (row.get("player_id") or "").strip()
            if not player_id:
                continue

            try:
                entry = RosterEntry(
                    player_id=player_id,
                    decision=Decision((row.get("decision") or "").strip().upper()),
                    base_round=parse_optional_int(row.get("base_round")),
                    priority=parse_optional_int(row.get("priority")),
                    locked=parse_bool(row.get("locked")),
                )
            except (ValueError, TypeError) as e:
                raise DataFormatError(f"{csv_path}:{line_num}: {e}") from e

            team_id = (row.get("team_id") or "").strip()
            rosters.setdefault(team_id, []).append(entry)

    return rosters


def load_roster_entries(csv_path: str, team_id: str | None = None) -> list[RosterEntry]:
    """Load one team's worksheet entries.

    Args:
        csv_path: Path to entries CSV
        team_id: Team to select; None takes the only team in the file

    Returns:
        The team's entries

    Raises:
        DataFormatError: If the team is missing, or the file holds several
            teams and none was selected
    """
    rosters = load_team_rosters(csv_path)

    if team_id is None:
        if len(rosters) > 1:
            raise DataFormatError(
                f"{csv_path}: holds {len(rosters)} teams, choose one with a team id"
            )
        return next(iter(rosters.values()), [])

    if team_id not in rosters:
        raise DataFormatError(f"{csv_path}: no entries for team {team_id}")
    return rosters[team_id]


def load_trade_assets(csv_path: str, players: dict[str, Player]) -> list[TradeAsset]:
    """Load a proposed trade; salaries come from the player pool.

    Raises:
        DataFormatError: On missing columns, unknown kinds or unknown players
    """
    assets = []

    with open(csv_path, "r", newline="") as f:
        reader = csv.DictReader(f)
        _check_columns(csv_path, reader.fieldnames, TRADE_COLUMNS)

        for line_num, row in enumerate(reader, start=2):
            kind = (row.get("kind") or "").strip().lower()
            player_id = (row.get("player_id") or "").strip()

            # Salary comes from the player pool, picks carry none
            salary = 0
            if kind != "rookie_pick":
                if player_id not in players:
                    raise DataFormatError(
                        f"{csv_path}:{line_num}: unknown player {player_id}"
                    )
                salary = players[player_id].salary

            try:
                assets.append(
                    TradeAsset(
                        kind=kind,
                        player_id=player_id,
                        salary=salary,
                        from_team_id=(row.get("from_team_id") or "").strip(),
                        to_team_id=(row.get("to_team_id") or "").strip(),
                    )
                )
            except ValueError as e:
                raise DataFormatError(f"{csv_path}:{line_num}: {e}") from e

    return assets


def _read_json(json_path: str) -> dict[str, Any]:
    try:
        with open(json_path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{json_path}: invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{json_path}: expected a JSON object")
    return data


def load_league_config(json_path: str) -> LeagueConfig:
    """Load league settings from a JSON file.

    Raises:
        ConfigurationError: If the file is not valid JSON or settings are
            missing or malformed
    """
    league = LeagueConfig.from_dict(_read_json(json_path))
    logger.debug(f"Loaded league settings from {json_path}: {league}")
    return league


def load_trade_deltas(json_path: str) -> dict[str, int]:
    """Load per-team cap adjustments from the league file (may be absent)."""
    deltas = _read_json(json_path).get("trade_deltas", {})
    if not isinstance(deltas, dict) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in deltas.values()
    ):
        raise ConfigurationError(
            f"{json_path}: trade_deltas must map team ids to integers"
        )
    return {str(team_id): delta for team_id, delta in deltas.items()}


def save_resolved_entries_csv(
    output_file_path: str,
    entries: list[RosterEntry],
    players: dict[str, Player],
) -> None:
    """Save resolved worksheet entries, ordered by keeper round."""

    def sort_key(entry: RosterEntry) -> tuple[int, int, str]:
        # Keepers in round order first, everyone else after
        if entry.keeper_round is None:
            return (1, 0, entry.player_id)
        return (0, entry.keeper_round, entry.player_id)

    with open(output_file_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RESOLVED_ENTRY_FIELDS)
        writer.writeheader()

        for entry in sorted(entries, key=sort_key):
            player = players.get(entry.player_id)
            writer.writerow(
                {
                    "player_id": entry.player_id,
                    "name": player.name if player else "",
                    "decision": entry.decision.value,
                    "base_round": entry.base_round,
                    "keeper_round": entry.keeper_round,
                    "priority": entry.priority,
                    "franchise_tag": entry.franchise_tag,
                    "overflow": entry.overflow,
                    "salary": player.salary if player else "",
                }
            )

    logger.info(f"Saved resolved entries to: {output_file_path}")


def save_summary_json(
    output_file_path: str,
    summary: RosterSummary,
    messages: list[ValidationMessage],
) -> None:
    """Save the roster summary and validation messages as JSON."""
    document = {
        "summary": summary.to_dict(),
        "messages": [
            {
                "type": m.type,
                "field": m.field,
                "message": m.message,
                "player_id": m.player_id,
            }
            for m in messages
        ],
    }

    Path(output_file_path).write_text(json.dumps(document, indent=2) + "\n")
    logger.info(f"Saved summary to: {output_file_path}")

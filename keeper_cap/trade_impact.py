"""Cap impact of a proposed trade for every team involved."""

import logging
from dataclasses import dataclass, field

from keeper_cap.cap import apron_crossings, compute_summary
from keeper_cap.config import LeagueConfig
from keeper_cap.models import Decision, Player, RosterEntry, RosterSummary
from keeper_cap.rounds import base_keeper_round, seed_base_rounds
from keeper_cap.stacking import stack_keeper_rounds

logger = logging.getLogger(__name__)

# Trade asset kind -> worksheet decision for the receiving team
ASSET_DECISIONS = {
    "keeper": Decision.KEEP,
    "redshirt": Decision.REDSHIRT,
    "int_stash": Decision.INT_STASH,
}
ROOKIE_PICK = "rookie_pick"
ASSET_KINDS = frozenset(ASSET_DECISIONS) | {ROOKIE_PICK}


@dataclass(frozen=True)
class TradeAsset:
    """One asset moving between two teams.

    Attributes:
        kind: keeper, redshirt, int_stash or rookie_pick
        player_id: Player (or pick) identifier
        salary: Salary carried by the asset (0 for picks)
        from_team_id: Team giving up the asset
        to_team_id: Team receiving the asset
    """

    kind: str
    player_id: str
    salary: int
    from_team_id: str
    to_team_id: str

    def __post_init__(self) -> None:
        if self.kind not in ASSET_KINDS:
            raise ValueError(f"Unknown trade asset kind: {self.kind}")

    @property
    def carries_salary(self) -> bool:
        return self.kind != ROOKIE_PICK


@dataclass
class TeamCapImpact:
    """Before/after cap picture for one team in a trade."""

    team_id: str
    team_name: str
    before: RosterSummary
    after: RosterSummary
    salary_in: int
    salary_out: int
    warnings: list[str] = field(default_factory=list)


def _summarize(
    entries: list[RosterEntry],
    players: dict[str, Player],
    trade_delta: int,
    league: LeagueConfig,
) -> RosterSummary:
    seeded = seed_base_rounds(entries, players)
    stacked = stack_keeper_rounds(seeded, league.total_rounds)
    return compute_summary(
        stacked.entries,
        players,
        trade_delta,
        stacked.franchise_tags,
        league.cap,
        league.fees,
    )


def _involved_teams(assets: list[TradeAsset]) -> list[str]:
    # First-appearance order keeps the report stable
    team_ids: list[str] = []
    for asset in assets:
        for team_id in (asset.from_team_id, asset.to_team_id):
            if team_id not in team_ids:
                team_ids.append(team_id)
    return team_ids


def compute_trade_cap_impact(
    assets: list[TradeAsset],
    rosters: dict[str, list[RosterEntry]],
    players: dict[str, Player],
    trade_deltas: dict[str, int],
    league: LeagueConfig,
    team_names: dict[str, str] | None = None,
) -> list[TeamCapImpact]:
    """Project each involved team's cap summary before and after a trade.

    Args:
        assets: Assets changing hands
        rosters: Current worksheet entries by team id
        players: Player pool keyed by player id
        trade_deltas: Cap adjustments by team id (missing means 0)
        league: League configuration
        team_names: Display names by team id

    Returns:
        List of TeamCapImpact, one per involved team
    """
    team_names = team_names or {}
    salary_assets = [a for a in assets if a.carries_salary]
    impacts = []

    for team_id in _involved_teams(assets):
        current = rosters.get(team_id, [])
        delta = trade_deltas.get(team_id, 0)
        before = _summarize(current, players, delta, league)

        outgoing = [a for a in salary_assets if a.from_team_id == team_id]
        incoming = [a for a in salary_assets if a.to_team_id == team_id]
        outgoing_ids = {a.player_id for a in outgoing}

        # Rebuild the roster as it would look after the trade
        after_entries = [e for e in current if e.player_id not in outgoing_ids]
        for asset in incoming:
            player = players.get(asset.player_id)
            base_round = base_keeper_round(player) if player else None
            after_entries.append(
                RosterEntry(
                    player_id=asset.player_id,
                    decision=ASSET_DECISIONS[asset.kind],
                    base_round=base_round,
                )
            )

        after = _summarize(after_entries, players, delta, league)
        warnings = apron_crossings(
            before.cap_used, after.cap_used, league.cap, league.fees
        )

        impact = TeamCapImpact(
            team_id=team_id,
            team_name=team_names.get(team_id, team_id),
            before=before,
            after=after,
            salary_in=sum(a.salary for a in incoming),
            salary_out=sum(a.salary for a in outgoing),
            warnings=warnings,
        )
        logger.debug(
            f"Trade impact for {impact.team_name}: cap used "
            f"{before.cap_used} -> {after.cap_used}"
        )
        impacts.append(impact)

    return impacts

"""Keeper worksheet run: derive rounds, stack, summarize and validate."""

import logging
from dataclasses import dataclass, field

from keeper_cap.cap import compute_summary
from keeper_cap.config import LeagueConfig
from keeper_cap.models import LockedFees, Player, RosterEntry, RosterSummary
from keeper_cap.rounds import seed_base_rounds
from keeper_cap.stacking import stack_keeper_rounds
from keeper_cap.validation import ValidationMessage, has_errors, validate_roster

logger = logging.getLogger(__name__)


@dataclass
class WorksheetResult:
    """Everything a keeper worksheet run produces.

    Attributes:
        entries: Entries with base and keeper rounds filled in
        franchise_tags: Franchise tags required
        summary: Cap usage and fees
        overflow: Player ids that could not be stacked into an open round
        messages: Validation findings
    """

    entries: list[RosterEntry]
    franchise_tags: int
    summary: RosterSummary
    overflow: list[str] = field(default_factory=list)
    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True when the worksheet may be submitted."""
        return not has_errors(self.messages)


def run_keeper_worksheet(
    players: dict[str, Player],
    entries: list[RosterEntry],
    league: LeagueConfig,
    trade_delta: int = 0,
    locked_fees: LockedFees | None = None,
    activations: int = 0,
) -> WorksheetResult:
    """Resolve one team's keeper worksheet end to end.

    Args:
        players: Player pool keyed by player id
        entries: The team's worksheet entries
        league: League configuration
        trade_delta: Cap adjustment acquired through trades
        locked_fees: Apron fees recorded at lock time, if fees are locked
        activations: Redshirt activations charged this season

    Returns:
        WorksheetResult with resolved entries, summary and validation messages
    """
    logger.info(f"Resolving keeper worksheet with {len(entries)} entries")

    seeded = seed_base_rounds(entries, players)
    stacked = stack_keeper_rounds(seeded, league.total_rounds)
    if stacked.franchise_tags:
        logger.info(f"Franchise tags required: {stacked.franchise_tags}")

    summary = compute_summary(
        stacked.entries,
        players,
        trade_delta,
        stacked.franchise_tags,
        league.cap,
        league.fees,
        locked_fees=locked_fees,
        activations=activations,
    )

    messages = validate_roster(stacked.entries, players, league.roster.max_keepers)

    result = WorksheetResult(
        entries=stacked.entries,
        franchise_tags=stacked.franchise_tags,
        summary=summary,
        overflow=stacked.overflow,
        messages=messages,
    )

    if result.passed:
        logger.info(
            f"Worksheet valid: {summary.keepers_count} keepers, "
            f"cap used {summary.cap_used:,}, total fees ${summary.total_fees}"
        )
    else:
        logger.warning(
            f"Worksheet has {sum(1 for m in messages if m.type == 'error')} errors"
        )

    return result

"""Salary cap and league fee calculations.

Pure projections from a resolved roster and league settings to a
RosterSummary. Nothing here reads or writes storage; locked fee values come
in from the fee ledger and the summary goes back out to the caller.

Fee rules:
- Franchise tag, redshirt and activation fees are flat per-item charges
- First apron: flat fee once counted salary is above the threshold
- Second apron: per-million penalty, overage rounded up to whole millions
- Once fees are locked, apron fees never drop below their locked values
"""

import logging

from keeper_cap.config import (
    ONE_MILLION,
    ConfigurationError,
    LeagueCapSettings,
    LeagueFeeSettings,
)
from keeper_cap.models import (
    Decision,
    FeeLedger,
    LockedFees,
    Player,
    RegularSeasonRoster,
    RosterEntry,
    RosterSummary,
)

logger = logging.getLogger(__name__)


def sum_salaries(player_ids: list[str], players: dict[str, Player]) -> int:
    """Total salary for a list of player ids.

    Ids missing from the player pool are orphaned references; they are
    logged and contribute nothing.
    """
    total = 0
    for player_id in player_ids:
        player = players.get(player_id)
        if player is None:
            logger.warning(f"Player {player_id} not found in player pool")
            continue
        total += player.salary
    return total


def effective_cap(cap: LeagueCapSettings, trade_delta: int) -> int:
    """Team's spending ceiling after trade adjustments.

    Formula:
        cap_effective = clamp(base + trade_delta, floor, max)
    """
    return max(cap.floor, min(cap.max, cap.base + trade_delta))


def millions_over_second_apron(cap_used: int, cap: LeagueCapSettings) -> int:
    """Whole millions over the second apron, always rounded up.

    A single dollar over already counts as one million.
    """
    if not cap.aprons_enabled:
        return 0
    over_by = max(0, cap_used - cap.second_apron)
    # Integer ceiling division keeps exact currency arithmetic
    return -(-over_by // ONE_MILLION)


def first_apron_fee(
    cap_used: int, cap: LeagueCapSettings, fees: LeagueFeeSettings
) -> int:
    """Flat first-apron fee, charged only above the threshold."""
    if not cap.aprons_enabled or cap_used <= cap.first_apron:
        return 0
    return fees.first_apron_fee


def apply_fee_watermark(
    live_first_apron_fee: int,
    live_penalty_dues: int,
    locked_fees: LockedFees | None,
) -> tuple[int, int]:
    """Combine live apron fees with previously locked values.

    Locked dues are never refunded: each fee is the max of the live and the
    locked figure. Without locked fees the live values pass through.

    Returns:
        Tuple of (first_apron_fee, penalty_dues)
    """
    if locked_fees is None:
        return live_first_apron_fee, live_penalty_dues

    return (
        max(live_first_apron_fee, locked_fees.first_apron_fee),
        max(live_penalty_dues, locked_fees.penalty_dues),
    )


def _assemble_summary(
    *,
    keepers_count: int,
    redshirts_count: int,
    int_stash_count: int,
    franchise_tags: int,
    cap_used: int,
    trade_delta: int,
    cap: LeagueCapSettings,
    fees: LeagueFeeSettings,
    franchise_tag_dues: int,
    redshirt_dues: int,
    activation_dues: int,
    locked_fees: LockedFees | None,
) -> RosterSummary:
    over_by_m = millions_over_second_apron(cap_used, cap)
    apron_fee, penalty_dues = apply_fee_watermark(
        first_apron_fee(cap_used, cap, fees),
        over_by_m * fees.penalty_rate_per_m,
        locked_fees,
    )

    total_fees = (
        franchise_tag_dues + redshirt_dues + activation_dues + apron_fee + penalty_dues
    )

    return RosterSummary(
        keepers_count=keepers_count,
        redshirts_count=redshirts_count,
        int_stash_count=int_stash_count,
        franchise_tags=franchise_tags,
        cap_used=cap_used,
        cap_base=cap.base,
        cap_trade_delta=trade_delta,
        cap_effective=effective_cap(cap, trade_delta),
        over_second_apron_by_m=over_by_m,
        franchise_tag_dues=franchise_tag_dues,
        redshirt_dues=redshirt_dues,
        activation_dues=activation_dues,
        first_apron_fee=apron_fee,
        penalty_dues=penalty_dues,
        total_fees=total_fees,
        fees_locked=locked_fees is not None,
    )


def compute_summary(
    entries: list[RosterEntry],
    players: dict[str, Player],
    trade_delta: int,
    franchise_tags: int,
    cap: LeagueCapSettings,
    fees: LeagueFeeSettings,
    locked_fees: LockedFees | None = None,
    activations: int = 0,
) -> RosterSummary:
    """Compute cap usage and fees for a keeper worksheet.

    Only KEEP decisions count toward the cap; redshirts and international
    stashes are cap exempt.

    Args:
        entries: Resolved worksheet entries for one team
        players: Player pool keyed by player id
        trade_delta: Cap adjustment acquired through trades
        franchise_tags: Franchise tag count from stacking
        cap: League cap settings
        fees: League fee settings
        locked_fees: Apron fees recorded at lock time, None before the lock
        activations: Number of redshirt activations charged this season

    Returns:
        RosterSummary for the worksheet

    Raises:
        ConfigurationError: If franchise_tags or activations is negative
    """
    if franchise_tags < 0 or activations < 0:
        raise ConfigurationError(
            f"franchise_tags and activations cannot be negative, got "
            f"{franchise_tags} and {activations}"
        )

    keeper_ids = [e.player_id for e in entries if e.decision == Decision.KEEP]
    redshirts_count = sum(1 for e in entries if e.decision == Decision.REDSHIRT)
    int_stash_count = sum(1 for e in entries if e.decision == Decision.INT_STASH)

    summary = _assemble_summary(
        keepers_count=len(keeper_ids),
        redshirts_count=redshirts_count,
        int_stash_count=int_stash_count,
        franchise_tags=franchise_tags,
        cap_used=sum_salaries(keeper_ids, players),
        trade_delta=trade_delta,
        cap=cap,
        fees=fees,
        franchise_tag_dues=franchise_tags * fees.franchise_tag_fee,
        redshirt_dues=redshirts_count * fees.redshirt_fee,
        activation_dues=activations * fees.activation_fee,
        locked_fees=locked_fees,
    )

    logger.debug(
        f"Worksheet summary: cap used {summary.cap_used}, "
        f"total fees {summary.total_fees}"
    )
    return summary


def compute_season_summary(
    roster: RegularSeasonRoster,
    players: dict[str, Player],
    trade_delta: int,
    cap: LeagueCapSettings,
    fees: LeagueFeeSettings,
    ledger: FeeLedger | None = None,
) -> RosterSummary:
    """Compute cap usage and fees for a regular-season roster.

    Active and injured-reserve salaries count toward the cap. Franchise tag,
    redshirt and activation dues were assessed earlier and are read from the
    ledger; without a ledger the redshirt dues fall back to the roster count.
    A locked ledger turns on the apron fee watermark.

    Args:
        roster: Post-draft roster
        players: Player pool keyed by player id
        trade_delta: Cap adjustment acquired through trades
        cap: League cap settings
        fees: League fee settings
        ledger: Fee ledger record for the team and season, if any

    Returns:
        RosterSummary for the season roster
    """
    if ledger is None:
        ledger = FeeLedger(redshirt_fees=len(roster.redshirt) * fees.redshirt_fee)

    return _assemble_summary(
        keepers_count=len(roster.active),
        redshirts_count=len(roster.redshirt),
        int_stash_count=len(roster.international),
        franchise_tags=0,
        cap_used=sum_salaries(roster.cap_counted_ids(), players),
        trade_delta=trade_delta,
        cap=cap,
        fees=fees,
        franchise_tag_dues=ledger.franchise_tag_fees,
        redshirt_dues=ledger.redshirt_fees,
        activation_dues=ledger.activation_fees,
        locked_fees=ledger.locked_fees(),
    )


def apron_crossings(
    before_cap_used: int,
    after_cap_used: int,
    cap: LeagueCapSettings,
    fees: LeagueFeeSettings,
) -> list[str]:
    """Describe apron and hard-cap thresholds crossed by a salary change.

    Args:
        before_cap_used: Counted salary before the change
        after_cap_used: Counted salary after the change
        cap: League cap settings
        fees: League fee settings

    Returns:
        List of warning messages, empty when nothing is crossed
    """
    warnings: list[str] = []

    if cap.aprons_enabled:
        if before_cap_used <= cap.first_apron < after_cap_used:
            warnings.append(
                f"Crosses first apron (${cap.first_apron // ONE_MILLION}M): "
                f"${fees.first_apron_fee} one-time fee"
            )
        if before_cap_used <= cap.second_apron < after_cap_used:
            warnings.append(
                f"Crosses second apron (${cap.second_apron // ONE_MILLION}M): "
                f"${fees.penalty_rate_per_m}/M penalty applies"
            )
        elif before_cap_used > cap.second_apron and after_cap_used > before_cap_used:
            before_penalty = (
                millions_over_second_apron(before_cap_used, cap)
                * fees.penalty_rate_per_m
            )
            after_penalty = (
                millions_over_second_apron(after_cap_used, cap)
                * fees.penalty_rate_per_m
            )
            if after_penalty > before_penalty:
                warnings.append(
                    f"Increases second apron penalty from ${before_penalty} "
                    f"to ${after_penalty}"
                )

    if after_cap_used > cap.max:
        warnings.append(f"Exceeds hard cap ceiling (${cap.max // ONE_MILLION}M)")

    return warnings

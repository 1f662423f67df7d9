"""Base keeper round derivation from prior draft history."""

import logging
from dataclasses import replace

from keeper_cap.config import ROOKIE_FIRST_ROUND_SCALE
from keeper_cap.models import Player, RosterEntry

logger = logging.getLogger(__name__)


def rookie_scale_round(player: Player) -> int | None:
    """Look up the fixed keeper round for a first-round rookie-draft pick.

    Args:
        player: Player to check

    Returns:
        Base round from the rookie scale, or None if the player has no
        first-round rookie-draft slot
    """
    if not player.is_rookie or player.rookie_draft_round != 1:
        return None
    if player.rookie_draft_pick is None:
        return None

    for first_pick, last_pick, keeper_round in ROOKIE_FIRST_ROUND_SCALE:
        if first_pick <= player.rookie_draft_pick <= last_pick:
            return keeper_round
    return None


def base_keeper_round(player: Player) -> int | None:
    """Derive the keeper round a player costs before stacking.

    A kept player gets one round more expensive every season, so the base
    round is last season's round moved one toward round 1.

    Args:
        player: Player to derive the base round for

    Returns:
        Base round, or None when the player has no draft history (callers
        treat None as the cheapest round of the league)
    """
    scaled = rookie_scale_round(player)
    if scaled is not None:
        return scaled

    if player.prior_year_round is None:
        return None

    return max(1, player.prior_year_round - 1)


def effective_base_round(base_round: int | None, total_rounds: int) -> int:
    """Resolve an absent base round to the league's last round."""
    return total_rounds if base_round is None else base_round


def seed_base_rounds(
    entries: list[RosterEntry], players: dict[str, Player]
) -> list[RosterEntry]:
    """Fill in base rounds for a team's worksheet entries.

    Entries that already carry a base round (set by an admin override) keep
    it. Entries whose player is unknown are left untouched.

    Args:
        entries: Worksheet entries for one team
        players: Player pool keyed by player id

    Returns:
        New list of entries with base rounds seeded
    """
    seeded = []
    for entry in entries:
        player = players.get(entry.player_id)
        if entry.base_round is not None or player is None:
            seeded.append(entry)
            continue

        base_round = base_keeper_round(player)
        logger.debug(f"Base round for {player.name}: {base_round}")
        seeded.append(replace(entry, base_round=base_round))

    return seeded

"""Keeper round stacking: resolve keepers that want the same draft round.

Keepers are grouped by base round and groups are resolved from round 1
downward. Within a group the owner's priority decides who keeps the contested
round; everyone else slides to the next open round below it
(Bottom-of-Draft stacking). Round 1 has nothing above it to slide from, so
extra round-1 keepers are carried by franchise tags instead
(Top-of-Draft rule).
"""

import logging
from dataclasses import dataclass, field, replace

from keeper_cap.config import ConfigurationError
from keeper_cap.models import RosterEntry
from keeper_cap.rounds import effective_base_round

logger = logging.getLogger(__name__)

FIRST_ROUND = 1


@dataclass
class StackingResult:
    """Outcome of a stacking run.

    Attributes:
        entries: All input entries, KEEP entries carrying their keeper round
        franchise_tags: Number of extra round-1 keepers needing a tag
        overflow: Player ids clamped to the last round for lack of open rounds
    """

    entries: list[RosterEntry]
    franchise_tags: int
    overflow: list[str] = field(default_factory=list)


def _stacking_round(entry: RosterEntry, total_rounds: int) -> int:
    """Base round used for grouping, clamped into 1..total_rounds."""
    base_round = effective_base_round(entry.base_round, total_rounds)
    return min(max(base_round, FIRST_ROUND), total_rounds)


def _priority_key(index: int, entry: RosterEntry) -> tuple[bool, int, int]:
    # Explicit priorities first (ascending), then unprioritized by input order
    has_no_priority = entry.priority is None
    priority = entry.priority if entry.priority is not None else 0
    return (has_no_priority, priority, index)


def group_keepers(
    entries: list[RosterEntry], total_rounds: int
) -> dict[int, list[int]]:
    """Group KEEP entries by base round in resolution order.

    Args:
        entries: Worksheet entries for one team
        total_rounds: Number of rounds in the league draft

    Returns:
        Dictionary mapping base round -> indices into ``entries``, each list
        ordered by priority (winner first)
    """
    groups: dict[int, list[int]] = {}
    for index, entry in enumerate(entries):
        if not entry.is_keeper:
            continue
        groups.setdefault(_stacking_round(entry, total_rounds), []).append(index)

    for indices in groups.values():
        indices.sort(key=lambda i: _priority_key(i, entries[i]))

    return dict(sorted(groups.items()))


def stack_keeper_rounds(
    entries: list[RosterEntry], total_rounds: int
) -> StackingResult:
    """Assign a unique keeper round to every KEEP entry.

    Args:
        entries: Worksheet entries for one team (any decision)
        total_rounds: Number of rounds R in the league draft

    Returns:
        StackingResult with new entry objects; the inputs are not modified

    Raises:
        ConfigurationError: If total_rounds is not a positive round count
    """
    if total_rounds < FIRST_ROUND:
        raise ConfigurationError(
            f"total_rounds must be at least 1, got {total_rounds}"
        )

    # Clear any earlier resolution on the copies
    resolved = [
        replace(entry, keeper_round=None, franchise_tag=False, overflow=False)
        for entry in entries
    ]

    # Rounds already held by a keeper
    claimed: set[int] = set()
    franchise_tags = 0
    overflow: list[str] = []

    # Groups come out earliest round first, winner first within each group
    for base_round, indices in group_keepers(entries, total_rounds).items():
        for position, index in enumerate(indices):
            entry = resolved[index]

            # Round 1 is taken; extra round-1 keepers ride a franchise tag
            if base_round == FIRST_ROUND and position > 0:
                entry.keeper_round = FIRST_ROUND
                entry.franchise_tag = True
                franchise_tags += 1
                logger.debug(f"{entry.player_id}: round 1 taken, franchise tag")
                continue

            # Slide down to the next round nobody holds
            target_round = base_round
            while target_round in claimed and target_round <= total_rounds:
                target_round += 1

            # Ran past the last round
            if target_round > total_rounds:
                entry.keeper_round = total_rounds
                entry.overflow = True
                overflow.append(entry.player_id)
                logger.warning(
                    f"{entry.player_id}: no open round from {base_round} "
                    f"through {total_rounds}, clamped to round {total_rounds}"
                )
                continue

            entry.keeper_round = target_round
            claimed.add(target_round)
            if target_round != base_round:
                logger.debug(
                    f"{entry.player_id}: stacked from round {base_round} "
                    f"to round {target_round}"
                )

    return StackingResult(
        entries=resolved, franchise_tags=franchise_tags, overflow=overflow
    )


def find_round_conflicts(
    entries: list[RosterEntry], total_rounds: int
) -> dict[int, list[RosterEntry]]:
    """Find base rounds wanted by more than one keeper.

    Returns:
        Dictionary mapping contested base round -> keepers in resolution order
    """
    return {
        base_round: [entries[i] for i in indices]
        for base_round, indices in group_keepers(entries, total_rounds).items()
        if len(indices) > 1
    }


def find_keeper_round_collisions(entries: list[RosterEntry]) -> dict[int, list[str]]:
    """Find resolved keeper rounds held by more than one keeper.

    Franchise-tagged keepers do not occupy a round, and overflowed keepers
    are reported separately; both are ignored.

    Returns:
        Dictionary mapping keeper round -> player ids sharing it
    """
    holders: dict[int, list[str]] = {}
    for entry in entries:
        if not entry.is_keeper or entry.franchise_tag or entry.overflow:
            continue
        if entry.keeper_round is None:
            continue
        holders.setdefault(entry.keeper_round, []).append(entry.player_id)

    return {
        keeper_round: player_ids
        for keeper_round, player_ids in sorted(holders.items())
        if len(player_ids) > 1
    }


def move_priority(
    entries: list[RosterEntry],
    player_id: str,
    direction: int,
    total_rounds: int,
) -> list[RosterEntry]:
    """Move a keeper up (-1) or down (+1) within its base-round group.

    The moved keeper swaps places with its neighbour and the whole group is
    renumbered 0..n-1. Entries outside the group come back unchanged, and a
    move past either end of the group is a no-op.

    Args:
        entries: Worksheet entries for one team
        player_id: Keeper to move
        direction: -1 to win the contested round earlier, +1 to yield it
        total_rounds: Number of rounds in the league draft

    Returns:
        New list of entries with updated priorities

    Raises:
        ValueError: If direction is not -1/+1 or the player is not a keeper
    """
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or 1, got {direction}")

    group: list[int] | None = None
    for indices in group_keepers(entries, total_rounds).values():
        if any(entries[i].player_id == player_id for i in indices):
            group = indices
            break

    if group is None:
        raise ValueError(f"{player_id} is not a keeper on this worksheet")

    current = next(
        pos for pos, i in enumerate(group) if entries[i].player_id == player_id
    )
    target = current + direction

    updated = list(entries)
    if target < 0 or target >= len(group):
        return updated

    order = list(group)
    order[current], order[target] = order[target], order[current]
    for priority, index in enumerate(order):
        updated[index] = replace(entries[index], priority=priority)

    logger.debug(f"Moved {player_id} to priority {target} in its round group")
    return updated

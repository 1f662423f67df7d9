"""Roster validation before a keeper worksheet can be submitted.

All eligibility rules for worksheet decisions live here. Validation never
mutates anything and never raises for roster-shape problems; it returns
structured messages and the caller decides whether to block submission.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from keeper_cap.config import RosterSettings
from keeper_cap.models import Decision, Player, RegularSeasonRoster, RosterEntry
from keeper_cap.stacking import find_keeper_round_collisions

logger = logging.getLogger(__name__)

MessageType = Literal["error", "warning"]


@dataclass(frozen=True)
class ValidationMessage:
    """A single validation finding.

    Attributes:
        type: "error" blocks submission, "warning" is informational
        field: Area of the roster the finding is about
        message: Human-readable description
        player_id: Player the finding is about, if any
    """

    type: MessageType
    field: str
    message: str
    player_id: str | None = None


class ValidationResult:
    """Container for validation findings."""

    def __init__(self) -> None:
        """Initialize an empty validation result."""
        self.messages: list[ValidationMessage] = []

    @property
    def passed(self) -> bool:
        """True when no error has been recorded."""
        return not self.errors

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.type == "error"]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.type == "warning"]

    def add_error(
        self, field: str, message: str, player_id: str | None = None
    ) -> None:
        """Add a blocking validation error."""
        self.messages.append(ValidationMessage("error", field, message, player_id))
        logger.warning(message)

    def add_warning(
        self, field: str, message: str, player_id: str | None = None
    ) -> None:
        """Add a non-blocking warning."""
        self.messages.append(ValidationMessage("warning", field, message, player_id))
        logger.info(message)

    def extend(self, messages: list[ValidationMessage]) -> None:
        """Add findings produced by another validation pass."""
        self.messages.extend(messages)


def has_errors(messages: list[ValidationMessage]) -> bool:
    """Check whether any message in a list blocks submission."""
    return any(m.type == "error" for m in messages)


def can_redshirt(player: Player) -> bool:
    """Only redshirt-eligible rookies can be redshirted."""
    return player.is_rookie and player.redshirt_eligible


def can_int_stash(player: Player) -> bool:
    """Check international stash eligibility.

    Players who came through the rookie draft need the stash clearance;
    everyone else must be an international stash player.
    """
    if player.rookie_draft_round is not None:
        return player.int_eligible
    return player.is_international_stash


def _check_eligibility(
    result: ValidationResult,
    entries: list[RosterEntry],
    players: dict[str, Player],
) -> None:
    for entry in entries:
        player = players.get(entry.player_id)
        if player is None:
            result.add_error(
                "unknownPlayer",
                f"Player {entry.player_id} is not in the player pool.",
                entry.player_id,
            )
            continue

        if entry.decision == Decision.REDSHIRT and not can_redshirt(player):
            if not player.is_rookie:
                message = f"{player.name} is not a rookie and cannot be redshirted."
            else:
                message = f"{player.name} is not eligible for redshirt."
            result.add_error("redshirtEligibility", message, player.player_id)

        if entry.decision == Decision.INT_STASH and not can_int_stash(player):
            if player.rookie_draft_round is not None:
                message = f"{player.name} is not eligible for international stash."
            else:
                message = f"{player.name} is not an international stash player."
            result.add_error("intStashEligibility", message, player.player_id)


def _check_keeper_rounds(
    result: ValidationResult,
    keepers: list[RosterEntry],
    players: dict[str, Player],
) -> None:
    for entry in keepers:
        player = players.get(entry.player_id)
        name = player.name if player else entry.player_id

        if entry.overflow:
            result.add_error(
                "roundOverflow",
                f"{name} could not be stacked into an open round and was placed "
                f"in round {entry.keeper_round}. Resolve manually.",
                entry.player_id,
            )
        elif entry.keeper_round is None:
            result.add_warning(
                "missingRounds",
                f"{name} is marked as KEEP but has no keeper round assigned.",
                entry.player_id,
            )

    for keeper_round, player_ids in find_keeper_round_collisions(keepers).items():
        result.add_error(
            "roundCollisions",
            f"Round {keeper_round} has {len(player_ids)} keepers. "
            f"Adjust priorities and re-run stacking.",
        )


def validate_season_roster(
    roster: RegularSeasonRoster, settings: RosterSettings
) -> list[ValidationMessage]:
    """Check a regular-season roster against the league's slot limits.

    Args:
        roster: Post-draft roster
        settings: League roster limits

    Returns:
        List of validation messages (empty when legal)
    """
    result = ValidationResult()

    if len(roster.active) > settings.max_active:
        result.add_error(
            "activeRoster",
            f"Active roster has {len(roster.active)} players. "
            f"Maximum is {settings.max_active}.",
        )

    if len(roster.injured_reserve) > settings.max_ir:
        result.add_error(
            "injuredReserve",
            f"IR has {len(roster.injured_reserve)} players. "
            f"Maximum is {settings.max_ir}.",
        )

    return result.messages


def validate_roster(
    entries: list[RosterEntry],
    players: dict[str, Player],
    max_keepers: int,
    *,
    season_roster: RegularSeasonRoster | None = None,
    roster_settings: RosterSettings | None = None,
) -> list[ValidationMessage]:
    """Validate a team's roster before submission.

    Args:
        entries: Worksheet entries for one team, ideally already stacked
        players: Player pool keyed by player id
        max_keepers: Maximum KEEP decisions allowed
        season_roster: Post-draft roster to check slot limits on, if any
        roster_settings: Slot limits, required when season_roster is given

    Returns:
        List of validation messages; any "error" blocks submission

    Raises:
        ValueError: If season_roster is given without roster_settings
    """
    if season_roster is not None and roster_settings is None:
        raise ValueError("roster_settings is required to validate a season roster")

    result = ValidationResult()

    keepers = [e for e in entries if e.decision == Decision.KEEP]
    redshirts = [e for e in entries if e.decision == Decision.REDSHIRT]

    if len(keepers) > max_keepers:
        result.add_error(
            "keepersCount",
            f"Cannot keep more than {max_keepers} players. "
            f"You have {len(keepers)} keepers.",
        )

    _check_eligibility(result, entries, players)
    _check_keeper_rounds(result, keepers, players)

    if not keepers and not redshirts:
        result.add_warning(
            "emptyWorksheet",
            "No keepers or redshirts selected. Every player will be dropped.",
        )

    if season_roster is not None and roster_settings is not None:
        result.extend(validate_season_roster(season_roster, roster_settings))

    return result.messages

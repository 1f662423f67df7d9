"""Core data structures for keeper worksheets, cap summaries and fee state."""

from dataclasses import asdict, dataclass, field
from enum import Enum

from keeper_cap.config import ConfigurationError


class Decision(str, Enum):
    """Owner's keeper-worksheet decision for one rostered player."""

    KEEP = "KEEP"
    DROP = "DROP"
    REDSHIRT = "REDSHIRT"
    INT_STASH = "INT_STASH"


@dataclass
class Player:
    """Player record as supplied by the league's player pool.

    Attributes:
        player_id: Stable player identifier
        name: Player's full name
        salary: Salary in whole currency units
        positions: Eligible position codes (PG, SG, SF, PF, C)
        nba_team: Real-world team abbreviation
        is_rookie: Player is on a rookie contract
        is_international_stash: Player is an overseas stash
        redshirt_eligible: Rookie may be redshirted this season
        int_eligible: Player may be placed on the international stash
        prior_year_round: Round the player was kept or drafted in last season
        rookie_draft_round: Rookie-draft round the player was taken in
        rookie_draft_pick: Pick number within that rookie-draft round
    """

    player_id: str
    name: str
    salary: int
    positions: tuple[str, ...] = ()
    nba_team: str = ""
    is_rookie: bool = False
    is_international_stash: bool = False
    redshirt_eligible: bool = False
    int_eligible: bool = False
    prior_year_round: int | None = None
    rookie_draft_round: int | None = None
    rookie_draft_pick: int | None = None


@dataclass
class RosterEntry:
    """One player's keeper-worksheet row for a team and season.

    Attributes:
        player_id: Player this entry belongs to
        decision: KEEP, DROP, REDSHIRT or INT_STASH
        base_round: Keeper round before stacking (None means cheapest round)
        keeper_round: Final round after stacking, set only for KEEP entries
        priority: Tie-break order within a base round (lower wins)
        franchise_tag: Extra round-1 keeper carried by a franchise tag
        overflow: Stacking ran out of rounds; needs manual resolution
        locked: Entry is read-only to the owner after the league lock
    """

    player_id: str
    decision: Decision
    base_round: int | None = None
    keeper_round: int | None = None
    priority: int | None = None
    franchise_tag: bool = False
    overflow: bool = False
    locked: bool = False

    @property
    def is_keeper(self) -> bool:
        return self.decision == Decision.KEEP


@dataclass
class RosterSummary:
    """Cap usage and itemized fees derived from a resolved roster.

    Attributes:
        keepers_count: Players counted as keepers (or active in season)
        redshirts_count: Redshirted rookies
        int_stash_count: International stash players
        franchise_tags: Extra round-1 keepers requiring a tag
        cap_used: Salary counted toward the cap
        cap_base: League base cap
        cap_trade_delta: Cap adjustment acquired through trades
        cap_effective: Base plus trade delta, clamped to floor/max
        over_second_apron_by_m: Whole millions over the second apron, rounded up
        franchise_tag_dues: Franchise tag fees
        redshirt_dues: Redshirt fees
        activation_dues: Fees for activating redshirts in season
        first_apron_fee: Flat first-apron fee
        penalty_dues: Second-apron penalty
        total_fees: Sum of all fee items
        fees_locked: Watermark from locked fees was applied
    """

    keepers_count: int
    redshirts_count: int
    int_stash_count: int
    franchise_tags: int
    cap_used: int
    cap_base: int
    cap_trade_delta: int
    cap_effective: int
    over_second_apron_by_m: int
    franchise_tag_dues: int
    redshirt_dues: int
    activation_dues: int
    first_apron_fee: int
    penalty_dues: int
    total_fees: int
    fees_locked: bool = False

    def to_dict(self) -> dict[str, int | bool]:
        """Convert summary to a plain dictionary for JSON output."""
        return asdict(self)


@dataclass(frozen=True)
class LockedFees:
    """Apron fees recorded when a season's fees were locked."""

    first_apron_fee: int = 0
    penalty_dues: int = 0

    def __post_init__(self) -> None:
        if self.first_apron_fee < 0 or self.penalty_dues < 0:
            raise ConfigurationError(
                f"locked fees cannot be negative: {self.first_apron_fee}, "
                f"{self.penalty_dues}"
            )


@dataclass
class FeeLedger:
    """Fee state for one team and season as kept by the fee ledger.

    The engine only reads this; the ledger collaborator is its sole writer.

    Attributes:
        franchise_tag_fees: Franchise tag dues assessed at keeper time
        redshirt_fees: Redshirt dues assessed at keeper time
        activation_fees: Accumulated in-season redshirt activation dues
        first_apron_fee: First-apron fee recorded at lock time
        second_apron_penalty: Second-apron penalty recorded at lock time
        fees_locked: Fees have been administratively finalized
    """

    franchise_tag_fees: int = 0
    redshirt_fees: int = 0
    activation_fees: int = 0
    first_apron_fee: int = 0
    second_apron_penalty: int = 0
    fees_locked: bool = False

    def locked_fees(self) -> LockedFees | None:
        """Return the locked apron fees, or None while fees are still live."""
        if not self.fees_locked:
            return None
        return LockedFees(
            first_apron_fee=self.first_apron_fee,
            penalty_dues=self.second_apron_penalty,
        )


@dataclass
class RegularSeasonRoster:
    """Post-draft roster split into its slots.

    Attributes:
        active: Players on the active roster (starters and bench)
        injured_reserve: Players in injury-reserve slots
        redshirt: Redshirted rookies (cap exempt)
        international: International stash players (cap exempt)
    """

    active: list[str] = field(default_factory=list)
    injured_reserve: list[str] = field(default_factory=list)
    redshirt: list[str] = field(default_factory=list)
    international: list[str] = field(default_factory=list)

    def cap_counted_ids(self) -> list[str]:
        """Player ids whose salary counts toward the cap (active + IR)."""
        return [*self.active, *self.injured_reserve]

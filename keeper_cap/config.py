"""League configuration for keeper rounds, salary cap and fees.

Settings are plain frozen dataclasses passed explicitly into every engine
call. The module-level presets are values, not ambient state: callers pick
one (or build their own with ``LeagueConfig.from_dict``) and hand it in.
"""

from dataclasses import dataclass
from typing import Any

# Cap figures are whole currency units; fees are whole dollars
ONE_MILLION = 1_000_000

# First-round rookie draft slots -> base keeper round (inclusive pick ranges)
ROOKIE_FIRST_ROUND_SCALE = (
    (1, 3, 5),  # picks 1-3 keep in round 5
    (4, 6, 6),
    (7, 9, 7),
    (10, 12, 8),
)


class ConfigurationError(ValueError):
    """Raised when league settings are missing or malformed."""


def _require_int(section: str, data: dict[str, Any], key: str) -> int:
    """Read a required integer field from a settings mapping."""
    if key not in data:
        raise ConfigurationError(f"{section}: missing required field '{key}'")
    value = data[key]
    # bool is an int subclass; a stray true/false is a config mistake
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            f"{section}: field '{key}' must be an integer, got {value!r}"
        )
    return value


def _require_non_negative(section: str, **values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise ConfigurationError(f"{section}: '{name}' cannot be negative")


@dataclass(frozen=True)
class LeagueCapSettings:
    """Salary cap thresholds for a league.

    Attributes:
        floor: Lowest effective cap a trade adjustment can push a team to
        base: Starting cap before trade adjustments
        max: Highest effective cap (hard ceiling)
        first_apron: Salary above which the flat first-apron fee applies
        second_apron: Salary above which the per-million penalty applies
        trade_limit: Largest absolute cap adjustment a team may trade for
    """

    floor: int
    base: int
    max: int
    first_apron: int
    second_apron: int
    trade_limit: int = 0

    def __post_init__(self) -> None:
        _require_non_negative(
            "cap",
            floor=self.floor,
            base=self.base,
            max=self.max,
            first_apron=self.first_apron,
            second_apron=self.second_apron,
            trade_limit=self.trade_limit,
        )
        if self.floor > self.max:
            raise ConfigurationError(
                f"cap: floor ({self.floor}) is above max ({self.max})"
            )
        if self.aprons_enabled and self.first_apron > self.second_apron:
            raise ConfigurationError(
                f"cap: first_apron ({self.first_apron}) is above "
                f"second_apron ({self.second_apron})"
            )

    @property
    def aprons_enabled(self) -> bool:
        """Aprons are switched off by setting both thresholds to zero."""
        return not (self.first_apron == 0 and self.second_apron == 0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeagueCapSettings":
        return cls(
            floor=_require_int("cap", data, "floor"),
            base=_require_int("cap", data, "base"),
            max=_require_int("cap", data, "max"),
            first_apron=_require_int("cap", data, "first_apron"),
            second_apron=_require_int("cap", data, "second_apron"),
            trade_limit=_require_int("cap", data, "trade_limit")
            if "trade_limit" in data
            else 0,
        )


@dataclass(frozen=True)
class LeagueFeeSettings:
    """Flat fees and penalty rates charged to team owners.

    Attributes:
        franchise_tag_fee: Charged per extra round-1 keeper
        redshirt_fee: Charged per redshirted rookie
        first_apron_fee: Flat fee once salary exceeds the first apron
        penalty_rate_per_m: Charged per whole million over the second apron
        activation_fee: Charged each time a redshirt is activated in season
    """

    franchise_tag_fee: int
    redshirt_fee: int
    first_apron_fee: int
    penalty_rate_per_m: int
    activation_fee: int

    def __post_init__(self) -> None:
        _require_non_negative(
            "fees",
            franchise_tag_fee=self.franchise_tag_fee,
            redshirt_fee=self.redshirt_fee,
            first_apron_fee=self.first_apron_fee,
            penalty_rate_per_m=self.penalty_rate_per_m,
            activation_fee=self.activation_fee,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeagueFeeSettings":
        return cls(
            franchise_tag_fee=_require_int("fees", data, "franchise_tag_fee"),
            redshirt_fee=_require_int("fees", data, "redshirt_fee"),
            first_apron_fee=_require_int("fees", data, "first_apron_fee"),
            penalty_rate_per_m=_require_int("fees", data, "penalty_rate_per_m"),
            activation_fee=_require_int("fees", data, "activation_fee"),
        )


@dataclass(frozen=True)
class RosterSettings:
    """Structural roster limits."""

    max_keepers: int
    max_active: int
    max_ir: int

    def __post_init__(self) -> None:
        _require_non_negative(
            "roster",
            max_keepers=self.max_keepers,
            max_active=self.max_active,
            max_ir=self.max_ir,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RosterSettings":
        return cls(
            max_keepers=_require_int("roster", data, "max_keepers"),
            max_active=_require_int("roster", data, "max_active"),
            max_ir=_require_int("roster", data, "max_ir"),
        )


@dataclass(frozen=True)
class LeagueConfig:
    """Complete per-league configuration.

    Attributes:
        total_rounds: Number of draft rounds R; rounds run 1..R
        cap: Salary cap thresholds
        fees: Fee schedule
        roster: Roster size limits
    """

    total_rounds: int
    cap: LeagueCapSettings
    fees: LeagueFeeSettings
    roster: RosterSettings

    def __post_init__(self) -> None:
        if self.total_rounds < 1:
            raise ConfigurationError(
                f"total_rounds must be at least 1, got {self.total_rounds}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LeagueConfig":
        """Build a league configuration from a parsed JSON document.

        Raises:
            ConfigurationError: If a section or field is missing or malformed
        """
        for section in ("cap", "fees", "roster"):
            if not isinstance(data.get(section), dict):
                raise ConfigurationError(f"missing '{section}' settings section")

        return cls(
            total_rounds=_require_int("league", data, "total_rounds"),
            cap=LeagueCapSettings.from_dict(data["cap"]),
            fees=LeagueFeeSettings.from_dict(data["fees"]),
            roster=RosterSettings.from_dict(data["roster"]),
        )


# Regular-season NBA league settings
NBA_CAP = LeagueCapSettings(
    floor=170 * ONE_MILLION,
    base=225 * ONE_MILLION,
    max=255 * ONE_MILLION,
    first_apron=195 * ONE_MILLION,
    second_apron=225 * ONE_MILLION,
    trade_limit=40 * ONE_MILLION,
)

NBA_FEES = LeagueFeeSettings(
    franchise_tag_fee=15,
    redshirt_fee=10,
    first_apron_fee=50,
    penalty_rate_per_m=2,
    activation_fee=25,
)

NBA_ROSTER = RosterSettings(max_keepers=8, max_active=13, max_ir=2)

NBA_LEAGUE = LeagueConfig(
    total_rounds=14,
    cap=NBA_CAP,
    fees=NBA_FEES,
    roster=NBA_ROSTER,
)

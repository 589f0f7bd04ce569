"""In-memory logbook entity."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum, IntEnum


class Rank(IntEnum):
    """Pilot rank; stored on disk as a signed 32-bit ordinal."""

    SecondLt = 0
    Lieutenant = 1
    Captain = 2
    Major = 3
    LtColonel = 4
    Colonel = 5
    BrigadierGeneral = 6


class Medal(Enum):
    # Declaration order is the on-disk flag byte order.
    AirForceCross = "AirForceCross"
    SilverStar = "SilverStar"
    DistinguishedFlyingCross = "DistinguishedFlyingCross"
    AirMedal = "AirMedal"
    KoreaCampaign = "KoreaCampaign"
    Longevity = "Longevity"


MEDAL_ORDER: tuple[Medal, ...] = tuple(Medal)


@dataclass
class DogfightStats:
    matches_won: int = 0
    matches_lost: int = 0
    matches_won_versus_humans: int = 0
    matches_lost_versus_humans: int = 0
    kills: int = 0
    killed: int = 0
    human_kills: int = 0
    killed_versus_humans: int = 0

    def values(self) -> tuple[int, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))

    @classmethod
    def from_values(cls, values) -> "DogfightStats":
        return cls(*values)


@dataclass
class CampaignStats:
    games_won: int = 0
    games_lost: int = 0
    games_tied: int = 0
    missions: int = 0
    total_score: int = 0
    total_mission_score: int = 0
    consecutive_missions: int = 0
    kills: int = 0
    killed: int = 0
    human_kills: int = 0
    killed_versus_humans: int = 0
    self_kills: int = 0
    air_to_ground_kills: int = 0
    static_kills: int = 0
    naval_kills: int = 0
    friendly_kills: int = 0
    missions_since_last_friendly_kill: int = 0

    def values(self) -> tuple[int, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))

    @classmethod
    def from_values(cls, values) -> "CampaignStats":
        return cls(*values)


COMMISSION_DATE_FMT = "%m/%d/%Y"


@dataclass
class LogbookRecord:
    name: str
    callsign: str
    password: str = ""
    commissioned: str = ""
    options_file: str = ""
    flight_hours: float = 0.0
    ace_factor: float = 1.0
    rank: Rank = Rank.SecondLt
    dogfight_stats: DogfightStats = field(default_factory=DogfightStats)
    campaign_stats: CampaignStats = field(default_factory=CampaignStats)
    medals: frozenset[Medal] = frozenset()
    picture_file: str = ""
    patch_file: str = ""
    personal_text: str = ""
    squadron: str = ""
    voice: int = 0

    def __post_init__(self):
        self.medals = frozenset(self.medals)

    @classmethod
    def create_default(
        cls,
        name: str,
        callsign: str,
        password: str = "",
        today: date | None = None,
    ) -> "LogbookRecord":
        """Fresh pilot: zeroed statistics, commissioned on ``today``."""
        if today is None:
            today = date.today()
        return cls(
            name=name,
            callsign=callsign,
            password=password,
            commissioned=today.strftime(COMMISSION_DATE_FMT),
        )

    def sorted_medals(self) -> list[Medal]:
        return [m for m in MEDAL_ORDER if m in self.medals]

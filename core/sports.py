"""
SPORTS.PY - Single Source of Truth for Sports Constants

This module provides:
1. UnifiedSport enum for type-safe canonical sport ids
2. SPORT_REGISTRY of immutable SportDescriptor entries (display metadata,
   category, season window)
3. Lookup helpers used by the normalizer, the filter and the HTTP layer
4. API-specific sport key mappings

Usage:
    from core.sports import UnifiedSport, SPORT_REGISTRY, get_sport_config

    config = get_sport_config("NBA")      # case-insensitive
    config.display_name                   # "NBA Basketball"

    for sport in get_active_sports(include_all=False):
        print(sport.emoji, sport.display_name)

    odds_key = ODDS_API_SPORTS[UnifiedSport.NBA]  # "basketball_nba"
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple


class UnifiedSport(str, Enum):
    """
    Canonical sport ids - single source of truth.

    Inherits from str for JSON serialization compatibility.
    """
    ALL = "all"
    NBA = "nba"
    WNBA = "wnba"
    NFL = "nfl"
    MLB = "mlb"
    NHL = "nhl"
    SOCCER = "soccer"
    PGA = "pga"
    TENNIS = "tennis"
    ESPORTS = "esports"
    MMA = "mma"
    COLLEGE_FOOTBALL = "college-football"
    COLLEGE_BASKETBALL = "college-basketball"


class SportCategory(str, Enum):
    PROFESSIONAL = "professional"
    COLLEGE = "college"
    INTERNATIONAL = "international"
    ESPORTS = "esports"
    OTHER = "other"


# Wildcard id meaning "no filtering"
WILDCARD_SPORT = UnifiedSport.ALL.value

DEFAULT_SPORT_EMOJI = "🏆"
DEFAULT_SPORT_COLOR = "#6366f1"

MONTH_NAMES: Tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class SportSeason:
    """Season window expressed as month names."""
    start: str
    end: str
    is_year_round: bool = False

    def months(self) -> Tuple[int, ...]:
        """
        Month numbers (1-12) covered by the season, inclusive.

        Windows that wrap the year boundary (e.g. September -> February)
        are handled.
        """
        if self.is_year_round:
            return tuple(range(1, 13))
        start = MONTH_NAMES.index(self.start) + 1
        end = MONTH_NAMES.index(self.end) + 1
        if start <= end:
            return tuple(range(start, end + 1))
        return tuple(range(start, 13)) + tuple(range(1, end + 1))

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "end": self.end, "is_year_round": self.is_year_round}


@dataclass(frozen=True)
class SportDescriptor:
    """
    Static description of a supported sport.

    Constructed once at import and never mutated; lookups are by `id`.
    """
    id: str
    name: str
    display_name: str
    abbreviation: str
    emoji: str
    color: str
    category: SportCategory
    season: SportSeason
    is_active: bool = True
    popular_stats: Tuple[str, ...] = field(default_factory=tuple)
    positions: Tuple[str, ...] = field(default_factory=tuple)
    markets: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_wildcard(self) -> bool:
        return self.id == WILDCARD_SPORT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "abbreviation": self.abbreviation,
            "emoji": self.emoji,
            "color": self.color,
            "is_active": self.is_active,
            "category": self.category.value,
            "season": self.season.to_dict(),
            "popular_stats": list(self.popular_stats),
            "positions": list(self.positions),
            "markets": list(self.markets),
        }


_STANDARD_MARKETS = ("Moneyline", "Spread", "Total", "Player Props")
_BASKETBALL_STATS = ("Points", "Rebounds", "Assists", "3-Pointers Made", "Steals", "Blocks")
_BASKETBALL_POSITIONS = ("PG", "SG", "SF", "PF", "C")
_FOOTBALL_POSITIONS = ("QB", "RB", "WR", "TE", "K", "DEF")

_DESCRIPTORS: Tuple[SportDescriptor, ...] = (
    SportDescriptor(
        id="all", name="all", display_name="All Sports", abbreviation="ALL",
        emoji="🏆", color="#6366f1", category=SportCategory.OTHER,
        season=SportSeason("January", "December", True),
    ),
    SportDescriptor(
        id="nba", name="nba", display_name="NBA Basketball", abbreviation="NBA",
        emoji="🏀", color="#FF6B35", category=SportCategory.PROFESSIONAL,
        season=SportSeason("October", "June"),
        popular_stats=_BASKETBALL_STATS, positions=_BASKETBALL_POSITIONS,
        markets=_STANDARD_MARKETS,
    ),
    SportDescriptor(
        id="wnba", name="wnba", display_name="WNBA Basketball", abbreviation="WNBA",
        emoji="🏀", color="#FF6B35", category=SportCategory.PROFESSIONAL,
        season=SportSeason("May", "October"),
        popular_stats=_BASKETBALL_STATS, positions=_BASKETBALL_POSITIONS,
        markets=_STANDARD_MARKETS,
    ),
    SportDescriptor(
        id="nfl", name="nfl", display_name="NFL Football", abbreviation="NFL",
        emoji="🏈", color="#2563eb", category=SportCategory.PROFESSIONAL,
        season=SportSeason("September", "February"),
        popular_stats=("Passing Yards", "Rushing Yards", "Receiving Yards", "Touchdowns", "Receptions"),
        positions=_FOOTBALL_POSITIONS, markets=_STANDARD_MARKETS,
    ),
    SportDescriptor(
        id="mlb", name="mlb", display_name="MLB Baseball", abbreviation="MLB",
        emoji="⚾", color="#059669", category=SportCategory.PROFESSIONAL,
        season=SportSeason("March", "October"),
        popular_stats=("Hits", "RBIs", "Runs", "Home Runs", "Strikeouts", "Walks"),
        positions=("C", "1B", "2B", "3B", "SS", "OF", "P", "DH"),
        markets=_STANDARD_MARKETS,
    ),
    SportDescriptor(
        id="nhl", name="nhl", display_name="NHL Hockey", abbreviation="NHL",
        emoji="🏒", color="#0891b2", category=SportCategory.PROFESSIONAL,
        season=SportSeason("October", "June"),
        popular_stats=("Goals", "Assists", "Points", "Shots", "Saves", "Power Play Goals"),
        positions=("C", "LW", "RW", "D", "G"), markets=_STANDARD_MARKETS,
    ),
    SportDescriptor(
        id="soccer", name="soccer", display_name="Soccer/Football", abbreviation="SOC",
        emoji="⚽", color="#16a34a", category=SportCategory.INTERNATIONAL,
        season=SportSeason("August", "May", True),
        popular_stats=("Goals", "Assists", "Shots", "Passes", "Tackles", "Cards"),
        positions=("GK", "CB", "FB", "CM", "WM", "FW"),
        markets=("Moneyline", "Draw", "Total Goals", "Player Props"),
    ),
    SportDescriptor(
        id="pga", name="pga", display_name="PGA Golf", abbreviation="PGA",
        emoji="⛳", color="#ca8a04", category=SportCategory.PROFESSIONAL,
        season=SportSeason("January", "November"),
        popular_stats=("Strokes", "Putts", "Fairways Hit", "Greens in Regulation", "Birdies"),
        positions=("Golfer",), markets=("Outright", "Top 5", "Top 10", "Player Props"),
    ),
    SportDescriptor(
        id="tennis", name="tennis", display_name="Tennis", abbreviation="TEN",
        emoji="🎾", color="#7c3aed", category=SportCategory.PROFESSIONAL,
        season=SportSeason("January", "November"),
        popular_stats=("Aces", "Double Faults", "Winners", "Unforced Errors", "Break Points"),
        positions=("Player",), markets=("Moneyline", "Set Winner", "Game Totals", "Player Props"),
    ),
    SportDescriptor(
        id="esports", name="esports", display_name="Esports", abbreviation="ESP",
        emoji="🎮", color="#8b5cf6", category=SportCategory.ESPORTS,
        season=SportSeason("January", "December", True),
        popular_stats=("Kills", "Deaths", "Assists", "Damage", "Score"),
        positions=("Player", "Support", "Tank", "DPS"),
        markets=("Moneyline", "Map Winner", "Total Maps", "Player Props"),
    ),
    SportDescriptor(
        id="mma", name="mma", display_name="Mixed Martial Arts", abbreviation="MMA",
        emoji="🥊", color="#dc2626", category=SportCategory.PROFESSIONAL,
        season=SportSeason("January", "December", True),
        popular_stats=("Significant Strikes", "Takedowns", "Submission Attempts", "Control Time"),
        positions=("Fighter",),
        markets=("Moneyline", "Method of Victory", "Round Winner", "Fighter Props"),
    ),
    SportDescriptor(
        id="college-football", name="college-football", display_name="College Football",
        abbreviation="CFB", emoji="🏈", color="#ea580c", category=SportCategory.COLLEGE,
        season=SportSeason("August", "January"),
        popular_stats=("Passing Yards", "Rushing Yards", "Receiving Yards", "Touchdowns"),
        positions=_FOOTBALL_POSITIONS, markets=_STANDARD_MARKETS,
    ),
    SportDescriptor(
        id="college-basketball", name="college-basketball", display_name="College Basketball",
        abbreviation="CBB", emoji="🏀", color="#f59e0b", category=SportCategory.COLLEGE,
        season=SportSeason("November", "April"),
        popular_stats=("Points", "Rebounds", "Assists", "3-Pointers Made", "Steals"),
        positions=_BASKETBALL_POSITIONS, markets=_STANDARD_MARKETS,
    ),
)

# Read-only registry, built once at import
SPORT_REGISTRY: Mapping[str, SportDescriptor] = MappingProxyType({d.id: d for d in _DESCRIPTORS})

# List of all sport ids (for iteration)
SUPPORTED_SPORTS: List[str] = [s.value for s in UnifiedSport]

# Set version for O(1) membership testing
SUPPORTED_SPORTS_SET: Set[str] = set(SUPPORTED_SPORTS)


# Odds API sport keys
# Maps our canonical ids to Odds API sport identifiers
ODDS_API_SPORTS: Dict[UnifiedSport, str] = {
    UnifiedSport.NBA: "basketball_nba",
    UnifiedSport.WNBA: "basketball_wnba",
    UnifiedSport.NFL: "americanfootball_nfl",
    UnifiedSport.MLB: "baseball_mlb",
    UnifiedSport.NHL: "icehockey_nhl",
    UnifiedSport.SOCCER: "soccer_epl",
    UnifiedSport.PGA: "golf_pga_championship_winner",
    UnifiedSport.TENNIS: "tennis_atp_us_open",
    UnifiedSport.MMA: "mma_mixed_martial_arts",
    UnifiedSport.COLLEGE_FOOTBALL: "americanfootball_ncaaf",
    UnifiedSport.COLLEGE_BASKETBALL: "basketball_ncaab",
}

_ODDS_API_REVERSE: Dict[str, str] = {v: k.value for k, v in ODDS_API_SPORTS.items()}


def get_sport_config(sport_id: Optional[str]) -> Optional[SportDescriptor]:
    """
    Look up a descriptor by id (case-insensitive).

    Example:
        >>> get_sport_config("NBA").display_name
        'NBA Basketball'
        >>> get_sport_config("curling") is None
        True
    """
    if not sport_id:
        return None
    return SPORT_REGISTRY.get(str(sport_id).strip().lower())


def get_sport_display_name(sport_id: str) -> str:
    config = get_sport_config(sport_id)
    return config.display_name if config else sport_id


def get_sport_emoji(sport_id: str) -> str:
    config = get_sport_config(sport_id)
    return config.emoji if config else DEFAULT_SPORT_EMOJI


def get_sport_color(sport_id: str) -> str:
    config = get_sport_config(sport_id)
    return config.color if config else DEFAULT_SPORT_COLOR


def get_active_sports(include_all: bool = True) -> List[SportDescriptor]:
    """
    Active sports, wildcard first, then alphabetical by display name.

    Args:
        include_all: Include the "all" wildcard entry

    Returns:
        List of SportDescriptor
    """
    sports = [
        d for d in SPORT_REGISTRY.values()
        if d.is_active and (include_all or not d.is_wildcard)
    ]
    return sorted(sports, key=lambda d: (not d.is_wildcard, d.display_name.lower()))


def get_sports_for_category(category: str) -> List[SportDescriptor]:
    """Active sports in a category. The wildcard is filed under 'other'."""
    category = SportCategory(category)
    return [d for d in SPORT_REGISTRY.values() if d.is_active and d.category == category]


def sport_from_odds_api_key(odds_key: str) -> Optional[str]:
    """Reverse lookup: "basketball_nba" -> "nba"."""
    return _ODDS_API_REVERSE.get((odds_key or "").strip().lower())


def odds_api_key_for(sport_id: str) -> Optional[str]:
    """Forward lookup that tolerates plain strings: "nba" -> "basketball_nba"."""
    try:
        return ODDS_API_SPORTS.get(UnifiedSport(sport_id))
    except ValueError:
        return None


# Export list
__all__ = [
    'UnifiedSport',
    'SportCategory',
    'SportSeason',
    'SportDescriptor',
    'WILDCARD_SPORT',
    'MONTH_NAMES',
    'SPORT_REGISTRY',
    'SUPPORTED_SPORTS',
    'SUPPORTED_SPORTS_SET',
    'ODDS_API_SPORTS',
    'get_sport_config',
    'get_sport_display_name',
    'get_sport_emoji',
    'get_sport_color',
    'get_active_sports',
    'get_sports_for_category',
    'sport_from_odds_api_key',
    'odds_api_key_for',
]

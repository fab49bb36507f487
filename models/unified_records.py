"""
Unified record types returned by the data facade.

Provider payloads come in several shapes (camelCase or snake_case keys,
numbers as strings, PrizePicks JSON:API `attributes`). The `from_*`
transforms below flatten them into one fixed field set per record type.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_BET_ODDS = -110
DEFAULT_BET_CONFIDENCE = 75.0
DEFAULT_BOOKMAKER = "DraftKings"
OPPORTUNITY_LIFETIME = timedelta(hours=24)

DEFAULT_PROP_CONFIDENCE = 75
PROP_CONFIDENCE_MIN = 50
PROP_CONFIDENCE_MAX = 95
PROP_STANDARD_ODDS = -110  # PrizePicks does not publish prices

SORT_ORDERS = ("asc", "desc")


def epoch_ms(when: Optional[datetime] = None) -> int:
    when = when or datetime.now(timezone.utc)
    return int(when.timestamp() * 1000)


def _first(raw: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First truthy value among keys, else default."""
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return default


def _to_float(value: Any, default: float = 0.0) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def _to_int(value: Any, default: int) -> int:
    """parseInt-style coercion: "82.7" -> 82, garbage -> default."""
    number = _to_float(value, default=float("nan"))
    if math.isnan(number):
        return default
    return int(number)


def clamp_confidence(value: Any) -> int:
    """Prop confidence as an int in [50, 95]; missing or garbage -> 75."""
    confidence = _to_int(value or DEFAULT_PROP_CONFIDENCE, DEFAULT_PROP_CONFIDENCE)
    return min(max(confidence, PROP_CONFIDENCE_MIN), PROP_CONFIDENCE_MAX)


@dataclass
class UnifiedBettingOpportunity:
    id: str
    sport: str
    game: str
    event: str
    market: str
    bet_type: str
    line: float
    odds: float
    bookmaker: str
    expected_value: float
    confidence: float
    edge: float
    risk_level: str = "medium"
    category: str = "value"
    expires: str = ""
    timestamp: int = 0
    stake: float = 0.0
    potential_profit: float = 0.0

    @classmethod
    def from_upstream(cls, raw: Dict[str, Any], index: int, now: datetime) -> "UnifiedBettingOpportunity":
        """
        Map one betting-opportunities row.

        `expectedValue`/`edge` arrive as fractions (0.045) and are exposed as
        percentages (4.5).
        """
        ts = epoch_ms(now)
        ev_fraction = _to_float(_first(raw, "expectedValue", "expected_value", "edge", default=0))
        game = _first(raw, "event", "game", default=None)
        market = _first(raw, "market", default=None)
        return cls(
            id=str(_first(raw, "id", default=f"bet_{ts}_{index}")),
            sport=str(_first(raw, "sport", default="unknown")),
            game=game or "Unknown Game",
            event=game or "Unknown Event",
            market=market or "Unknown Market",
            bet_type=market or _first(raw, "betType", "bet_type", default="Unknown Bet"),
            line=_to_float(_first(raw, "line", "odds", default=0)),
            odds=_to_float(_first(raw, "odds", default=DEFAULT_BET_ODDS), DEFAULT_BET_ODDS),
            bookmaker=_first(raw, "bookmaker", default=DEFAULT_BOOKMAKER),
            expected_value=ev_fraction * 100,
            confidence=_to_float(_first(raw, "confidence", default=DEFAULT_BET_CONFIDENCE), DEFAULT_BET_CONFIDENCE),
            edge=ev_fraction * 100,
            risk_level=_first(raw, "riskLevel", "risk_level", default="medium"),
            category=_first(raw, "category", default="value"),
            expires=_first(raw, "expires", default=(now + OPPORTUNITY_LIFETIME).isoformat()),
            timestamp=ts,
        )

    def is_expired(self, now: datetime) -> bool:
        """True when `expires` parses and is in the past. Unparseable -> not expired."""
        try:
            expires = datetime.fromisoformat(self.expires.replace("Z", "+00:00"))
        except (AttributeError, ValueError):
            return False
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires < now

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class UnifiedPlayerProp:
    id: str
    player: str
    team: str
    position: str
    stat: str
    line: float
    over_odds: int
    under_odds: int
    game_time: str
    opponent: str
    sport: str
    confidence: int
    projection: float
    edge: float
    pick_type: str = "normal"
    reasoning: str = ""
    last_game_stats: List[float] = field(default_factory=list)
    season_avg: float = 0.0
    recent_form: str = "neutral"
    injury_status: str = "healthy"
    weather_impact: Optional[float] = None
    home_away_factor: float = 1.0
    timestamp: int = 0

    @classmethod
    def from_upstream(
        cls,
        raw: Dict[str, Any],
        index: int,
        fallback_sport: str,
        now: datetime,
    ) -> "UnifiedPlayerProp":
        """
        Map one PrizePicks projection (flat dict or JSON:API resource).

        Edge comes from the upstream `edge` field when present, else 0.0.
        """
        ts = epoch_ms(now)
        attrs = raw.get("attributes") or raw
        stat = _first(attrs, "stat_type", "stat", default=None)
        line_score = _first(attrs, "line_score", default=None)
        return cls(
            id=str(_first(raw, "id", default=f"prop_{ts}_{index}")),
            player=_first(attrs, "player_name", "player", default=f"Player {index + 1}"),
            team=_first(attrs, "team", "team_name", default="Unknown Team"),
            position=_first(attrs, "position", default="Unknown"),
            stat=stat or "Points",
            line=_to_float(_first(attrs, "line_score", "line", default=0)),
            over_odds=PROP_STANDARD_ODDS,
            under_odds=PROP_STANDARD_ODDS,
            game_time=_first(attrs, "start_time", "gameTime", "game_time", default=now.isoformat()),
            opponent=_first(attrs, "opponent", default="Unknown Opponent"),
            sport=str(_first(attrs, "sport", default=fallback_sport)),
            confidence=clamp_confidence(attrs.get("confidence")),
            projection=_to_float(_first(attrs, "line_score", "projection", "line", default=0)),
            edge=_to_float(attrs.get("edge")),
            reasoning=f"AI projection for {stat or 'stat'}",
            season_avg=_to_float(line_score),
            timestamp=ts,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class UnifiedDataFilters:
    sport: Optional[str] = None
    min_confidence: Optional[float] = None
    max_results: Optional[int] = None
    include_expired: bool = False
    sort_by: Optional[str] = None
    sort_order: str = "desc"

    def __post_init__(self):
        if self.sort_order not in SORT_ORDERS:
            raise ValueError(f"sort_order must be one of {SORT_ORDERS}, got {self.sort_order!r}")
        if self.max_results is not None and self.max_results < 0:
            raise ValueError("max_results must be >= 0")

    def to_dict(self) -> Dict[str, Any]:
        """Non-default fields only; used for cache keys and echoed in responses."""
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class UnifiedApiResponse(Generic[T]):
    success: bool
    data: List[T] = field(default_factory=list)
    count: int = 0
    filters: Optional[UnifiedDataFilters] = None
    error: Optional[str] = None
    timestamp: int = 0
    cached: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "success": self.success,
            "data": [item.to_dict() if hasattr(item, "to_dict") else item for item in self.data],
            "count": self.count,
            "timestamp": self.timestamp,
            "cached": self.cached,
        }
        if self.filters is not None:
            result["filters"] = self.filters.to_dict()
        if self.error is not None:
            result["error"] = self.error
        return result


def sort_records(records: List[T], sort_by: str, sort_order: str = "desc") -> List[T]:
    """
    Stable sort on a numeric attribute. Missing or non-numeric values sort as 0.
    """
    def key(record: Any) -> float:
        return _to_float(getattr(record, sort_by, 0))

    return sorted(records, key=key, reverse=(sort_order == "desc"))


__all__ = [
    'UnifiedBettingOpportunity',
    'UnifiedPlayerProp',
    'UnifiedDataFilters',
    'UnifiedApiResponse',
    'clamp_confidence',
    'sort_records',
    'epoch_ms',
]

"""
Pydantic models for API request/response validation.
Provides type safety, automatic validation, and OpenAPI documentation.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.sport_normalizer import is_valid_sport_filter
from core.sports import WILDCARD_SPORT
from models.unified_records import UnifiedDataFilters


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# Numeric record fields the unified endpoints can sort on
SORTABLE_FIELDS = (
    "confidence",
    "edge",
    "expected_value",
    "odds",
    "line",
    "projection",
    "season_avg",
    "timestamp",
)


# ============================================================================
# BASE RESPONSE MODEL
# ============================================================================

class APIResponse(BaseModel):
    """Standardized API response wrapper."""
    model_config = ConfigDict(extra="allow")

    status: str = "ok"
    timestamp: str = Field(default_factory=_now_iso)


# ============================================================================
# SPORT REGISTRY MODELS
# ============================================================================

class SportSeasonModel(BaseModel):
    start: str
    end: str
    is_year_round: bool = False


class SportModel(BaseModel):
    """One registry entry as exposed over HTTP."""
    id: str
    name: str
    display_name: str
    abbreviation: str
    emoji: str
    color: str
    is_active: bool
    category: str
    season: SportSeasonModel
    popular_stats: List[str] = Field(default_factory=list)
    positions: List[str] = Field(default_factory=list)
    markets: List[str] = Field(default_factory=list)
    in_season: Optional[bool] = Field(None, description="Season status for today")


class SportListResponse(APIResponse):
    count: int
    sports: List[SportModel]


class AvailableSportsResponse(APIResponse):
    sports: List[str] = Field(..., description="Sport ids with live data, wildcard first")
    options: List[Dict[str, str]] = Field(default_factory=list, description="Dropdown choices")


class SportNormalizationResponse(APIResponse):
    value: Optional[str]
    sport: str
    matched_by: Literal["exact", "alias", "wildcard", "defaulted"]
    is_defaulted: bool
    display_name: str


# ============================================================================
# UNIFIED DATA MODELS
# ============================================================================

class UnifiedQuery(BaseModel):
    """Query parameters shared by the unified data endpoints."""
    sport: Optional[str] = Field(None, description="Sport id or alias; omitted or 'all' = every sport")
    min_confidence: Optional[float] = Field(None, ge=0, le=100)
    max_results: Optional[int] = Field(None, ge=1, le=500)
    include_expired: bool = False
    sort_by: Optional[str] = Field(None, description=f"One of: {', '.join(SORTABLE_FIELDS)}")
    sort_order: Literal["asc", "desc"] = "desc"
    strict_sport: bool = Field(False, description="Reject unknown sports instead of widening to 'all'")

    @field_validator("sport")
    @classmethod
    def validate_sport(cls, v):
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, v):
        if v is None:
            return v
        if v not in SORTABLE_FIELDS:
            raise ValueError(f"Invalid sort_by: {v}. Must be one of: {', '.join(SORTABLE_FIELDS)}")
        return v

    def unknown_sport(self) -> bool:
        return self.sport is not None and self.sport != WILDCARD_SPORT and not is_valid_sport_filter(self.sport)

    def to_filters(self) -> UnifiedDataFilters:
        return UnifiedDataFilters(
            sport=self.sport,
            min_confidence=self.min_confidence,
            max_results=self.max_results,
            include_expired=self.include_expired,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
        )


class BettingOpportunityModel(BaseModel):
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
    risk_level: str
    category: str
    expires: str
    timestamp: int
    stake: float = 0.0
    potential_profit: float = 0.0


class PlayerPropModel(BaseModel):
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
    confidence: int = Field(..., ge=50, le=95)
    projection: float
    edge: float
    pick_type: str
    reasoning: str
    last_game_stats: List[float] = Field(default_factory=list)
    season_avg: float
    recent_form: str
    injury_status: str
    weather_impact: Optional[float] = None
    home_away_factor: float
    timestamp: int


class UnifiedEnvelope(BaseModel):
    """`{success, data, count, filters, error, timestamp, cached}`"""
    success: bool
    count: int = 0
    filters: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    timestamp: int = Field(..., description="Epoch milliseconds")
    cached: bool = False


class BettingOpportunitiesResponse(UnifiedEnvelope):
    data: List[BettingOpportunityModel] = Field(default_factory=list)


class PlayerPropsResponse(UnifiedEnvelope):
    data: List[PlayerPropModel] = Field(default_factory=list)


class CacheStatsResponse(APIResponse):
    size: int
    keys: List[str]
    max_entries: Optional[int] = None
    default_ttl: float
    hits: int = 0
    misses: int = 0
    expired: int = 0
    evictions: int = 0
    in_flight: List[str] = Field(default_factory=list)
    shared_calls: int = 0


# ============================================================================
# THE ODDS API MODELS
# ============================================================================

class BestOddsRow(BaseModel):
    event_id: Optional[str] = None
    event: str
    market: Optional[str] = None
    team: Optional[str] = None
    point: Optional[float] = None
    best_odds: float
    bookmaker: Optional[str] = None
    implied_probability: Optional[float] = None


class BestOddsResponse(APIResponse):
    sport: str
    odds_api_key: str
    count: int
    best_odds: List[BestOddsRow]

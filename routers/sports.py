"""
SPORTS.PY - Sport registry and unified data router

Endpoints:
    GET  /api/sports                           - Registry entries (category / season filters)
    GET  /api/sports/available                 - Sports present in live data, wildcard first
    GET  /api/sports/normalize?value=          - Resolve a free-text label to a sport id
    GET  /api/sports/{sport_id}                - Single registry entry
    GET  /api/unified/betting-opportunities    - Filtered betting opportunities envelope
    GET  /api/unified/player-props             - Filtered player props envelope
    GET  /api/unified/cache/stats              - Facade cache statistics
    POST /api/unified/cache/clear              - Drop every cached response (API key)
    GET  /api/theodds/best-odds/{sport}        - Best price per outcome across books
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.auth import verify_api_key
from core.error_responses import ErrorCode, error_response, make_errors
from core.errors import UpstreamError, UpstreamNotConfigured
from core.sport_normalizer import resolve_sport
from core.sports import WILDCARD_SPORT, get_active_sports, get_sport_config, get_sports_for_category, odds_api_key_for
from core.structured_logging import log_warning
from models.api_models import (
    AvailableSportsResponse,
    BestOddsResponse,
    BettingOpportunitiesResponse,
    CacheStatsResponse,
    PlayerPropsResponse,
    SportListResponse,
    SportModel,
    SportNormalizationResponse,
    UnifiedQuery,
)
from services.theodds_service import TheOddsClient
from services.unified_data_service import UnifiedDataService
from sport_seasons import is_in_season

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sports"])

SPORT_DEFAULTED_HEADER = "X-Sport-Defaulted"


# ============================================================================
# DEPENDENCIES
# ============================================================================

def get_data_service(request: Request) -> UnifiedDataService:
    return request.app.state.data_service


def get_odds_client(request: Request) -> TheOddsClient:
    return request.app.state.odds_client


def _sport_payload(descriptor) -> dict:
    payload = descriptor.to_dict()
    payload["in_season"] = is_in_season(descriptor.id)
    return payload


# ============================================================================
# SPORT REGISTRY
# ============================================================================

@router.get("/api/sports", response_model=SportListResponse)
async def list_sports(
    category: Optional[str] = Query(None, description="professional, college, international, esports, other"),
    include_all: bool = Query(True, description="Include the 'all' wildcard entry"),
    in_season_only: bool = Query(False),
):
    if category:
        try:
            sports = get_sports_for_category(category.lower())
        except ValueError:
            return error_response(400, ErrorCode.INVALID_CATEGORY, f"Unknown category: {category}", field="category")
        if not include_all:
            sports = [s for s in sports if not s.is_wildcard]
    else:
        sports = get_active_sports(include_all=include_all)

    payload = [_sport_payload(s) for s in sports]
    if in_season_only:
        payload = [s for s in payload if s["in_season"]]

    return {"count": len(payload), "sports": payload}


@router.get("/api/sports/available", response_model=AvailableSportsResponse)
async def available_sports(service: UnifiedDataService = Depends(get_data_service)):
    sports = await service.get_available_sports()
    options = []
    for sport_id in sports:
        config = get_sport_config(sport_id)
        if config is not None:
            options.append({
                "value": config.id,
                "label": config.display_name,
                "emoji": config.emoji,
                "color": config.color,
            })
    return {"sports": sports, "options": options}


@router.get("/api/sports/normalize", response_model=SportNormalizationResponse)
async def normalize_sport(value: Optional[str] = Query(None, description="Free-text sport label")):
    resolution = resolve_sport(value)
    return {
        "value": value,
        "sport": resolution.sport,
        "matched_by": resolution.matched_by,
        "is_defaulted": resolution.is_defaulted,
        "display_name": get_sport_config(resolution.sport).display_name,
    }


@router.get("/api/sports/{sport_id}", response_model=SportModel)
async def get_sport(sport_id: str):
    config = get_sport_config(sport_id)
    if config is None:
        return error_response(404, ErrorCode.SPORT_NOT_FOUND, f"Sport '{sport_id}' is not registered", field="sport_id")
    return _sport_payload(config)


# ============================================================================
# UNIFIED DATA
# ============================================================================

def _build_query(**params):
    """UnifiedQuery or an error JSONResponse."""
    try:
        query = UnifiedQuery(**params)
    except ValidationError as e:
        errors = [
            {
                "code": ErrorCode.INVALID_PARAMETER,
                "message": err.get("msg", str(e)),
                "field": ".".join(str(p) for p in err.get("loc", ())) or None,
            }
            for err in e.errors()
        ]
        return None, JSONResponse(status_code=422, content=make_errors(errors))

    if query.unknown_sport():
        if query.strict_sport:
            return None, error_response(400, ErrorCode.INVALID_SPORT, f"Unknown sport: {query.sport}", field="sport")
        log_warning(logger, "Unknown sport widened to all sports", sport=query.sport)
    return query, None


def _mark_defaulted(response: Response, query: UnifiedQuery) -> None:
    if query.sport is not None and resolve_sport(query.sport).is_defaulted:
        response.headers[SPORT_DEFAULTED_HEADER] = "true"


@router.get("/api/unified/betting-opportunities", response_model=BettingOpportunitiesResponse)
async def betting_opportunities(
    response: Response,
    sport: Optional[str] = Query(None),
    min_confidence: Optional[float] = Query(None),
    max_results: Optional[int] = Query(None),
    include_expired: bool = Query(False),
    sort_by: Optional[str] = Query(None),
    sort_order: str = Query("desc"),
    strict_sport: bool = Query(False),
    service: UnifiedDataService = Depends(get_data_service),
):
    query, error = _build_query(
        sport=sport, min_confidence=min_confidence, max_results=max_results,
        include_expired=include_expired, sort_by=sort_by, sort_order=sort_order,
        strict_sport=strict_sport,
    )
    if error is not None:
        return error

    _mark_defaulted(response, query)
    result = await service.get_betting_opportunities(query.to_filters())
    return result.to_dict()


@router.get("/api/unified/player-props", response_model=PlayerPropsResponse)
async def player_props(
    response: Response,
    sport: Optional[str] = Query(None),
    min_confidence: Optional[float] = Query(None),
    max_results: Optional[int] = Query(None),
    sort_by: Optional[str] = Query(None),
    sort_order: str = Query("desc"),
    strict_sport: bool = Query(False),
    service: UnifiedDataService = Depends(get_data_service),
):
    query, error = _build_query(
        sport=sport, min_confidence=min_confidence, max_results=max_results,
        sort_by=sort_by, sort_order=sort_order, strict_sport=strict_sport,
    )
    if error is not None:
        return error

    _mark_defaulted(response, query)
    result = await service.get_player_props(query.to_filters())
    return result.to_dict()


@router.get("/api/unified/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(service: UnifiedDataService = Depends(get_data_service)):
    return service.get_cache_stats()


@router.post("/api/unified/cache/clear")
async def clear_cache(
    auth: bool = Depends(verify_api_key),
    service: UnifiedDataService = Depends(get_data_service),
    odds: TheOddsClient = Depends(get_odds_client),
):
    cleared = len(service.cache)
    service.clear_cache()
    odds.clear_cache()
    return {"status": "ok", "cleared": cleared}


# ============================================================================
# THE ODDS API
# ============================================================================

@router.get("/api/theodds/best-odds/{sport}", response_model=BestOddsResponse)
async def best_odds(sport: str, client: TheOddsClient = Depends(get_odds_client)):
    resolution = resolve_sport(sport)
    odds_key = odds_api_key_for(resolution.sport)
    if resolution.sport == WILDCARD_SPORT or odds_key is None:
        return error_response(400, ErrorCode.INVALID_SPORT, f"No odds feed for sport: {sport}", field="sport")

    try:
        rows = await client.get_best_odds(resolution.sport)
    except UpstreamNotConfigured as e:
        return error_response(503, ErrorCode.UPSTREAM_NOT_CONFIGURED, str(e))
    except UpstreamError as e:
        logger.error(f"Best odds failed for {resolution.sport}: {e}")
        return error_response(502, ErrorCode.UPSTREAM_UNAVAILABLE, str(e))

    return {"sport": resolution.sport, "odds_api_key": odds_key, "count": len(rows), "best_odds": rows}

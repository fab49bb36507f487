"""
Unified Data Service
====================

One entry point for betting opportunities and player props, with the same
sport handling for every caller.

Pipeline per request:
    cache lookup -> (miss) single-flight -> upstream fetch -> transform
    -> sport filter -> confidence threshold -> sort -> truncate -> cache

Callers never see an exception from get_betting_opportunities or
get_player_props: upstream and transform failures come back as
`success=False` envelopes and are not cached.

Usage:
    service = UnifiedDataService(BettingApiClient(http), PrizePicksClient(http))
    response = await service.get_player_props(UnifiedDataFilters(sport="nba", max_results=20))
"""

import asyncio
import dataclasses
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from core.single_flight import SingleFlight
from core.sport_normalizer import normalize_sport_filter
from core.sports import WILDCARD_SPORT
from core.structured_logging import log_error, log_info
from core.ttl_cache import TTLCache, build_cache_key
from models.unified_records import (
    UnifiedApiResponse,
    UnifiedBettingOpportunity,
    UnifiedDataFilters,
    UnifiedPlayerProp,
    epoch_ms,
    sort_records,
)
from utils.sport_filtering import extract_unique_sports, filter_sport_data

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 300
AVAILABLE_SPORTS_TTL_SECONDS = 120

BETTING_ENDPOINT = "betting-opportunities"
PROPS_ENDPOINT = "player-props"
AVAILABLE_SPORTS_KEY = "available-sports"

UPSTREAM_MIN_EDGE = 2.0
UPSTREAM_DEFAULT_MAX_RESULTS = 50
UPSTREAM_DEFAULT_MIN_CONFIDENCE = 70
AVAILABLE_SPORTS_SAMPLE_SIZE = 100

FALLBACK_SPORTS = [WILDCARD_SPORT, "nba", "nfl", "mlb", "nhl", "soccer"]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UnifiedDataService:
    """
    Facade over the betting and props upstreams.

    Args:
        betting_client: object with async get_betting_opportunities(sport, min_edge, max_results)
        props_client: object with async get_props(sport, min_confidence)
        cache: TTLCache to use; built from cache_ttl / max_entries when omitted
        cache_ttl: Seconds a successful response stays cached
        max_entries: Optional LRU bound for the built cache
        clock: Wall-clock source returning an aware datetime (injectable for tests)
    """

    def __init__(
        self,
        betting_client: Any,
        props_client: Any,
        cache: Optional[TTLCache] = None,
        cache_ttl: float = CACHE_TTL_SECONDS,
        max_entries: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.betting_client = betting_client
        self.props_client = props_client
        self._now = clock or _utc_now
        if cache is None:
            monotonic = (lambda: self._now().timestamp()) if clock else time.monotonic
            cache = TTLCache(default_ttl=cache_ttl, max_entries=max_entries, clock=monotonic)
        self.cache = cache
        self.cache_ttl = cache_ttl
        self._flight = SingleFlight()

    # ==========================================
    # PUBLIC API
    # ==========================================

    async def get_betting_opportunities(
        self, filters: Optional[UnifiedDataFilters] = None
    ) -> UnifiedApiResponse[UnifiedBettingOpportunity]:
        return await self._serve(BETTING_ENDPOINT, filters or UnifiedDataFilters(), self._load_betting)

    async def get_player_props(
        self, filters: Optional[UnifiedDataFilters] = None
    ) -> UnifiedApiResponse[UnifiedPlayerProp]:
        return await self._serve(PROPS_ENDPOINT, filters or UnifiedDataFilters(), self._load_props)

    async def get_available_sports(self) -> List[str]:
        """
        Sports present in current upstream data, wildcard first.

        One failing upstream contributes nothing; both failing returns a
        fixed fallback list that is not cached.
        """
        cached = self.cache.get(AVAILABLE_SPORTS_KEY)
        if cached is not None:
            return list(cached)

        sample = UnifiedDataFilters(max_results=AVAILABLE_SPORTS_SAMPLE_SIZE)
        betting, props = await asyncio.gather(
            self.get_betting_opportunities(sample),
            self.get_player_props(sample),
        )

        if not betting.success and not props.success:
            logger.warning(
                f"Available sports fell back to defaults: betting={betting.error!r} props={props.error!r}"
            )
            return list(FALLBACK_SPORTS)

        records: List[Any] = []
        for response in (betting, props):
            if response.success:
                records.extend(response.data)

        sports = extract_unique_sports(records, include_all=True, normalize=True, sort=True)
        self.cache.set(AVAILABLE_SPORTS_KEY, sports, ttl=AVAILABLE_SPORTS_TTL_SECONDS)
        return list(sports)

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Unified data service cache cleared")

    def get_cache_stats(self) -> Dict[str, Any]:
        stats = self.cache.stats()
        stats["in_flight"] = self._flight.in_flight()
        stats["shared_calls"] = self._flight.shared_calls
        return stats

    # ==========================================
    # PIPELINE
    # ==========================================

    async def _serve(self, endpoint: str, filters: UnifiedDataFilters, loader) -> UnifiedApiResponse:
        # "NBA", "nba" and "basketball" share one cache entry
        filters = dataclasses.replace(filters, sport=normalize_sport_filter(filters.sport))
        cache_key = build_cache_key(endpoint, filters.to_dict())

        cached = self.cache.get(cache_key)
        if cached is not None:
            return dataclasses.replace(cached, data=list(cached.data), cached=True)

        started = time.monotonic()
        try:
            return await self._flight.do(cache_key, lambda: self._fetch_and_store(cache_key, filters, loader))
        except Exception as e:
            # Facade boundary: every failure becomes an envelope
            message = str(e) or type(e).__name__
            log_error(
                logger,
                f"Failed to fetch {endpoint}",
                error=message,
                filters=filters.to_dict(),
                duration_ms=int((time.monotonic() - started) * 1000),
            )
            return UnifiedApiResponse(
                success=False,
                data=[],
                count=0,
                error=message,
                timestamp=epoch_ms(self._now()),
            )

    async def _fetch_and_store(self, cache_key: str, filters: UnifiedDataFilters, loader) -> UnifiedApiResponse:
        started = time.monotonic()
        sport = normalize_sport_filter(filters.sport)

        records = await loader(sport, filters)

        if sport != WILDCARD_SPORT:
            records = filter_sport_data(records, sport, use_common_mappings=True, allow_partial_match=True)

        if filters.min_confidence:
            records = [r for r in records if r.confidence >= filters.min_confidence]

        if filters.sort_by:
            records = sort_records(records, filters.sort_by, filters.sort_order)

        if filters.max_results:
            records = records[: filters.max_results]

        response = UnifiedApiResponse(
            success=True,
            data=records,
            count=len(records),
            filters=filters,
            timestamp=epoch_ms(self._now()),
            cached=False,
        )
        self.cache.set(cache_key, response, ttl=self.cache_ttl)

        log_info(
            logger,
            f"Fetched {cache_key.split(':', 1)[0]}",
            count=len(records),
            sport=sport,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return response

    async def _load_betting(self, sport: str, filters: UnifiedDataFilters) -> List[UnifiedBettingOpportunity]:
        rows = await self.betting_client.get_betting_opportunities(
            sport=sport,
            min_edge=UPSTREAM_MIN_EDGE,
            max_results=filters.max_results or UPSTREAM_DEFAULT_MAX_RESULTS,
        )
        now = self._now()
        records = [UnifiedBettingOpportunity.from_upstream(row, i, now) for i, row in enumerate(rows)]
        if not filters.include_expired:
            records = [r for r in records if not r.is_expired(now)]
        return records

    async def _load_props(self, sport: str, filters: UnifiedDataFilters) -> List[UnifiedPlayerProp]:
        rows = await self.props_client.get_props(
            sport=sport,
            min_confidence=filters.min_confidence or UPSTREAM_DEFAULT_MIN_CONFIDENCE,
        )
        now = self._now()
        return [UnifiedPlayerProp.from_upstream(row, i, sport, now) for i, row in enumerate(rows)]


__all__ = [
    'UnifiedDataService',
    'FALLBACK_SPORTS',
    'CACHE_TTL_SECONDS',
    'AVAILABLE_SPORTS_TTL_SECONDS',
]

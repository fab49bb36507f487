"""
The Odds API Integration Service
Fetches sportsbook odds and scores for line comparison.

API Key: Set ODDS_API_KEY environment variable
Docs: https://the-odds-api.com/

Sport arguments accept canonical ids ("nba") or raw Odds API keys
("basketball_nba").
"""

from typing import Any, Dict, Iterable, List, Optional

import httpx
from loguru import logger

from core.errors import UpstreamError, UpstreamNotConfigured
from core.http_retry import get_json_with_retry
from core.sports import odds_api_key_for
from core.ttl_cache import TTLCache, build_cache_key
from env_config import get_env

SOURCE = "theodds"

DEFAULT_BASE_URL = "https://api.the-odds-api.com/v4"
DEFAULT_LIVE_SPORTS = ("nfl", "nba")
RESPONSE_CACHE_TTL_SECONDS = 30


def american_to_probability(odds: float) -> float:
    """Convert American odds to implied probability"""
    if odds > 0:
        return 100 / (odds + 100)
    return abs(odds) / (abs(odds) + 100)


class TheOddsClient:
    """
    Async client for The Odds API v4.

    Every call raises UpstreamError on failure except get_live_odds, which
    reports per-sport failures as empty lists.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        cache: Optional[TTLCache] = None,
    ):
        self.client = client
        self.cache = cache if cache is not None else TTLCache(default_ttl=RESPONSE_CACHE_TTL_SECONDS)
        self.api_key = api_key or get_env("ODDS_API_KEY", "EXPO_PUBLIC_ODDS_API_KEY")
        self.base_url = (base_url or get_env("ODDS_API_BASE", default=DEFAULT_BASE_URL)).rstrip("/")
        self.timeout = timeout
        if not self.api_key:
            logger.warning("ODDS_API_KEY not set - The Odds API calls will fail")

    @staticmethod
    def resolve_sport_key(sport: str) -> str:
        return odds_api_key_for((sport or "").strip().lower()) or sport

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if not self.api_key:
            raise UpstreamNotConfigured(SOURCE, "ODDS_API_KEY")

        # apiKey stays out of the cache key
        cache_key = build_cache_key(path, params)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Odds API cache hit: {path}")
            return cached

        query = {"apiKey": self.api_key}
        query.update(params or {})

        ok, status, data, error = await get_json_with_retry(
            self.client,
            f"{self.base_url}{path}",
            params=query,
            timeout=self.timeout,
        )
        if not ok:
            raise UpstreamError(SOURCE, error or "request failed", status_code=status)

        self.cache.set(cache_key, data)
        return data

    def clear_cache(self) -> None:
        self.cache.clear()

    # ==========================================
    # CORE API METHODS
    # ==========================================

    async def get_sports(self) -> List[Dict[str, Any]]:
        """Get list of available sports"""
        return await self._get("/sports")

    async def get_odds(
        self,
        sport: str,
        regions: str = "us",
        markets: str = "h2h",
        odds_format: str = "american",
        bookmakers: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get odds for every upcoming event of a sport

        Args:
            sport: Canonical id or Odds API sport key
            regions: us, us2, uk, eu, au
            markets: h2h (moneyline), spreads, totals
            odds_format: american or decimal
            bookmakers: Specific books to query
        """
        params = {"regions": regions, "markets": markets, "oddsFormat": odds_format}
        if bookmakers:
            params["bookmakers"] = ",".join(bookmakers)
        return await self._get(f"/sports/{self.resolve_sport_key(sport)}/odds", params)

    async def get_event_odds(
        self,
        sport: str,
        event_id: str,
        regions: str = "us",
        markets: str = "h2h,spreads,totals",
        odds_format: str = "american",
    ) -> Dict[str, Any]:
        params = {"regions": regions, "markets": markets, "oddsFormat": odds_format}
        return await self._get(f"/sports/{self.resolve_sport_key(sport)}/events/{event_id}/odds", params)

    async def get_scores(self, sport: str, days_from: int = 1) -> List[Dict[str, Any]]:
        """Live and recently completed scores (days_from: 1-3)."""
        return await self._get(f"/sports/{self.resolve_sport_key(sport)}/scores", {"daysFrom": days_from})

    async def get_live_odds(
        self,
        sports: Iterable[str] = DEFAULT_LIVE_SPORTS,
        markets: str = "h2h,spreads,totals",
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Odds for several sports, keyed by the sport as passed in.
        A failing sport maps to [] instead of failing the batch.
        """
        results: Dict[str, List[Dict[str, Any]]] = {}
        for sport in sports:
            try:
                results[sport] = await self.get_odds(sport, markets=markets)
            except UpstreamError as e:
                logger.warning(f"Failed to fetch odds for {sport}: {e}")
                results[sport] = []
        return results

    async def get_best_odds(self, sport: str, markets: str = "h2h,spreads,totals") -> List[Dict[str, Any]]:
        events = await self.get_odds(sport, markets=markets)
        return find_best_odds(events)


def find_best_odds(events: Iterable[Dict[str, Any]], odds_format: str = "american") -> List[Dict[str, Any]]:
    """
    Best price per (event, market, outcome) across bookmakers.

    Ties keep the first bookmaker seen. Output order follows first
    appearance of each (event, market, outcome).
    """
    best: Dict[tuple, Dict[str, Any]] = {}

    for event in events or []:
        label = f"{event.get('home_team')} vs {event.get('away_team')}"
        for bookmaker in event.get("bookmakers", []):
            book_title = bookmaker.get("title") or bookmaker.get("key")
            for market in bookmaker.get("markets", []):
                for outcome in market.get("outcomes", []):
                    price = outcome.get("price")
                    if price is None:
                        continue
                    key = (event.get("id"), market.get("key"), outcome.get("name"))
                    current = best.get(key)
                    if current is None or price > current["best_odds"]:
                        best[key] = {
                            "event_id": event.get("id"),
                            "event": label,
                            "market": market.get("key"),
                            "team": outcome.get("name"),
                            "point": outcome.get("point"),
                            "best_odds": price,
                            "bookmaker": book_title,
                        }

    results = list(best.values())
    if odds_format == "american":
        for row in results:
            row["implied_probability"] = round(american_to_probability(row["best_odds"]), 4)
    return results

"""
Betting opportunities client for the analytics backend.

GET {BACKEND_URL}/api/betting-opportunities
Query: sport, min_edge, max_results (also sent as `limit` for the dev backend)

The backend has returned three body shapes over time:
  [ {...}, ... ]                              bare list
  {"success": true, "data": [ {...}, ... ]}   envelope
  {"success": false, "error": "..."}          failure envelope
"""

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from core.errors import UpstreamError, UpstreamNotConfigured
from core.http_retry import get_json_with_retry
from core.sports import WILDCARD_SPORT
from env_config import get_env

SOURCE = "betting-opportunities"


class BettingApiClient:
    """Thin async client; raises UpstreamError on any failed call."""

    PATH = "/api/betting-opportunities"

    def __init__(self, client: httpx.AsyncClient, base_url: Optional[str] = None, timeout: float = 10.0):
        self.client = client
        self.base_url = (base_url or get_env("BACKEND_URL", "EXPO_PUBLIC_BACKEND_URL") or "").rstrip("/")
        self.timeout = timeout
        if not self.base_url:
            logger.warning("BACKEND_URL not set - betting opportunities unavailable")

    async def get_betting_opportunities(
        self,
        sport: str = WILDCARD_SPORT,
        min_edge: float = 2.0,
        max_results: int = 50,
    ) -> List[Dict[str, Any]]:
        if not self.base_url:
            raise UpstreamNotConfigured(SOURCE, "BACKEND_URL")

        params: Dict[str, Any] = {
            "min_edge": min_edge,
            "max_results": max_results,
            "limit": max_results,
        }
        if sport and sport != WILDCARD_SPORT:
            params["sport"] = sport

        ok, status, data, error = await get_json_with_retry(
            self.client,
            f"{self.base_url}{self.PATH}",
            params=params,
            timeout=self.timeout,
        )
        if not ok:
            raise UpstreamError(SOURCE, error or "request failed", status_code=status)

        return extract_opportunities(data, status)


def extract_opportunities(data: Any, status: Optional[int] = None) -> List[Dict[str, Any]]:
    """Unwrap the list of opportunity rows from any of the accepted body shapes."""
    if isinstance(data, list):
        return data

    if isinstance(data, dict):
        if data.get("success") is False:
            raise UpstreamError(
                SOURCE,
                data.get("error") or "Failed to fetch betting opportunities",
                status_code=status,
            )
        rows = data.get("data")
        if isinstance(rows, list):
            return rows

    raise UpstreamError(SOURCE, "Failed to fetch betting opportunities: unexpected response shape", status_code=status)

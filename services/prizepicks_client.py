"""
PrizePicks props client (proxied through the analytics backend).

GET {BACKEND_URL}/api/prizepicks/props
Query: sport, min_confidence

Accepted bodies:
  [ {...}, ... ]
  {"data": [ {...}, ... ]}
  {"data": {"data": [ {...}, ... ]}}     JSON:API passthrough
Anything else yields an empty list with a warning; the props endpoint
being quiet is not an error.
"""

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from core.errors import UpstreamError, UpstreamNotConfigured
from core.http_retry import get_json_with_retry
from core.sports import WILDCARD_SPORT
from env_config import get_env

SOURCE = "prizepicks"


class PrizePicksClient:

    PATH = "/api/prizepicks/props"

    def __init__(self, client: httpx.AsyncClient, base_url: Optional[str] = None, timeout: float = 10.0):
        self.client = client
        self.base_url = (base_url or get_env("BACKEND_URL", "EXPO_PUBLIC_BACKEND_URL") or "").rstrip("/")
        self.timeout = timeout
        if not self.base_url:
            logger.warning("BACKEND_URL not set - PrizePicks props unavailable")

    async def get_props(self, sport: str = WILDCARD_SPORT, min_confidence: float = 70) -> List[Dict[str, Any]]:
        if not self.base_url:
            raise UpstreamNotConfigured(SOURCE, "BACKEND_URL")

        params: Dict[str, Any] = {"min_confidence": min_confidence}
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

        if isinstance(data, dict) and data.get("success") is False:
            raise UpstreamError(SOURCE, data.get("error") or "Failed to fetch player props", status_code=status)

        return extract_props(data)


def extract_props(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        return data

    if isinstance(data, dict):
        inner = data.get("data")
        if isinstance(inner, list):
            return inner
        if isinstance(inner, dict) and isinstance(inner.get("data"), list):
            return inner["data"]

    logger.warning(f"No valid player props data received (got {type(data).__name__})")
    return []

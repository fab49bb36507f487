"""
AUTH.PY - API key check for mutating endpoints

Only the cache administration endpoints are protected; read endpoints stay
open so a frontend can call them directly.

Usage:
    from core.auth import verify_api_key

    @router.post("/cache/clear")
    async def clear_cache(auth: bool = Depends(verify_api_key)):
        ...
"""

import logging
from typing import Optional

from fastapi import Header, HTTPException

from core.error_responses import ErrorCode, make_error
from env_config import get_env, get_env_bool

logger = logging.getLogger(__name__)


def auth_settings():
    """
    Return (enabled, key) from API_AUTH_ENABLED / API_AUTH_KEY.

    Enabled without a key is treated as disabled, with a warning.
    """
    enabled = get_env_bool("API_AUTH_ENABLED", False)
    key = get_env("API_AUTH_KEY", default="")
    if enabled and not key:
        logger.warning("API_AUTH_ENABLED is true but API_AUTH_KEY not set - auth disabled")
        return False, ""
    return enabled, key


async def verify_api_key(x_api_key: Optional[str] = Header(None, alias="X-API-Key")):
    """
    Verify API key if authentication is enabled.

    Raises:
        HTTPException: 401 if missing key, 403 if invalid key
    """
    enabled, expected = auth_settings()
    if not enabled:
        return True

    if not x_api_key:
        raise HTTPException(
            status_code=401,
            detail=make_error(ErrorCode.API_KEY_MISSING, "Missing X-API-Key header"),
        )

    if x_api_key != expected:
        raise HTTPException(
            status_code=403,
            detail=make_error(ErrorCode.API_KEY_INVALID, "Invalid API key"),
        )

    return True


__all__ = [
    'auth_settings',
    'verify_api_key',
]

"""
Environment Configuration Helper
================================
Centralized env var loading with fallbacks.
Handles both server-side vars and EXPO_PUBLIC_ prefixed vars shared with
the mobile frontend.
"""

import os
import logging
from typing import Optional, Any

logger = logging.getLogger(__name__)


def get_env(*names: str, default: Any = None) -> Optional[str]:
    """
    Get environment variable with fallback names.

    Tries each name in order, returns first non-empty value.

    Example:
        get_env("ODDS_API_KEY", "EXPO_PUBLIC_ODDS_API_KEY")

    Args:
        *names: Variable names to try in order
        default: Default value if none found

    Returns:
        First non-empty value found, or default
    """
    for name in names:
        value = os.getenv(name)
        if value and str(value).strip():
            return value.strip()
    return default


def get_env_bool(name: str, default: bool = False) -> bool:
    """Get boolean env var (true/false/1/0)."""
    value = os.getenv(name, "").lower().strip()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    """Get integer env var; unparseable values fall back to default with a warning."""
    value = get_env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{name}={value!r} is not an integer, using {default}")
        return default


def get_env_list(name: str, default: Optional[list] = None) -> list:
    """Comma-separated env var as a list of stripped, non-empty items."""
    value = get_env(name)
    if value is None:
        return list(default or [])
    return [part.strip() for part in value.split(",") if part.strip()]


# ============================================================================
# CENTRALIZED CONFIG
# ============================================================================

class Config:
    """
    Configuration snapshot taken from the environment.

    Class attributes are read at import. Upstream clients call get_env()
    themselves at construction, so tests can patch os.environ per case.
    """

    # ============================================================================
    # VERSION CONSTANTS - Single source of truth for API versioning
    # ============================================================================
    SERVICE_NAME = "unified-sports-data"
    API_VERSION = "1.4"

    # Upstream providers
    BACKEND_URL = get_env("BACKEND_URL", "EXPO_PUBLIC_BACKEND_URL")
    ODDS_API_KEY = get_env("ODDS_API_KEY", "EXPO_PUBLIC_ODDS_API_KEY")

    # Unified data cache
    CACHE_TTL_SECONDS = get_env_int("UNIFIED_CACHE_TTL_SECONDS", 300)
    CACHE_MAX_ENTRIES = get_env_int("UNIFIED_CACHE_MAX_ENTRIES", None)

    # HTTP
    CORS_ORIGINS = get_env_list("CORS_ORIGINS", ["*"])
    PORT = get_env_int("PORT", 8000)

    # Auth
    API_AUTH_ENABLED = get_env_bool("API_AUTH_ENABLED", False)
    API_AUTH_KEY = get_env("API_AUTH_KEY")

    @classmethod
    def log_status(cls):
        """Log config status at boot (no secrets, just availability)."""
        status = {
            "backend": bool(cls.BACKEND_URL),
            "odds": bool(cls.ODDS_API_KEY),
            "cache_ttl": cls.CACHE_TTL_SECONDS,
            "cache_max": cls.CACHE_MAX_ENTRIES or "unbounded",
            "auth": cls.API_AUTH_ENABLED,
        }

        status_str = " ".join(f"{k}={v}" for k, v in status.items())
        logger.info(f"ENV OK: {status_str}")

        return status

    @classmethod
    def validate_required(cls):
        """Check recommended vars are set."""
        missing = []

        if not cls.BACKEND_URL:
            missing.append("BACKEND_URL")
        if not cls.ODDS_API_KEY:
            missing.append("ODDS_API_KEY")

        if missing:
            logger.warning(f"Missing recommended env vars: {missing}")

        return len(missing) == 0

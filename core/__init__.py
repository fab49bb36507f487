"""
Core module - sport registry, normalization and shared infrastructure
"""

from .sports import (
    UnifiedSport,
    SportCategory,
    SportDescriptor,
    SportSeason,
    SPORT_REGISTRY,
    WILDCARD_SPORT,
    get_sport_config,
    get_active_sports,
)

from .sport_normalizer import (
    SPORT_ALIASES,
    SportResolution,
    normalize_sport_id,
    normalize_sport_filter,
    resolve_sport,
    is_valid_sport,
)

from .ttl_cache import TTLCache, CacheEntry, build_cache_key
from .single_flight import SingleFlight
from .errors import UnifiedDataError, UpstreamError, UpstreamNotConfigured

__all__ = [
    # Registry
    'UnifiedSport',
    'SportCategory',
    'SportDescriptor',
    'SportSeason',
    'SPORT_REGISTRY',
    'WILDCARD_SPORT',
    'get_sport_config',
    'get_active_sports',

    # Normalization
    'SPORT_ALIASES',
    'SportResolution',
    'normalize_sport_id',
    'normalize_sport_filter',
    'resolve_sport',
    'is_valid_sport',

    # Caching
    'TTLCache',
    'CacheEntry',
    'build_cache_key',
    'SingleFlight',

    # Errors
    'UnifiedDataError',
    'UpstreamError',
    'UpstreamNotConfigured',
]

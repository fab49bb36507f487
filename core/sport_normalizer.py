"""
Sport Normalizer - Maps free-text sport labels to canonical sport ids

Rules:
- Lowercase, trim
- Runs of '-', '_' and whitespace collapse to a single '-'
- Alias table first, then direct registry lookup
- Anything unrecognized degrades to the "all" wildcard (never raises)

SPORT_ALIASES is the only alias table in the codebase. The sport filter's
"common mappings" read from it too, so the two can't drift apart.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional

from core.sports import SPORT_REGISTRY, WILDCARD_SPORT

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[-_\s]+")

# Keys are stored in canonical form (see canonicalize)
SPORT_ALIASES: Dict[str, str] = {
    # Generic sport names
    'basketball': 'nba',
    'football': 'nfl',
    'american-football': 'nfl',
    'baseball': 'mlb',
    'hockey': 'nhl',
    'ice-hockey': 'nhl',
    'golf': 'pga',
    'ufc': 'mma',
    'mixed-martial-arts': 'mma',
    'esport': 'esports',
    'gaming': 'esports',
    'futbol': 'soccer',
    'football-eu': 'soccer',
    'association-football': 'soccer',

    # College shorthands
    'ncaaf': 'college-football',
    'cfb': 'college-football',
    'ncaab': 'college-basketball',
    'cbb': 'college-basketball',

    # The Odds API sport keys (after separator folding)
    'basketball-nba': 'nba',
    'basketball-wnba': 'wnba',
    'americanfootball-nfl': 'nfl',
    'baseball-mlb': 'mlb',
    'icehockey-nhl': 'nhl',
    'americanfootball-ncaaf': 'college-football',
    'basketball-ncaab': 'college-basketball',
    'mma-mixed-martial-arts': 'mma',
}


def canonicalize(value: Optional[str]) -> str:
    """
    Fold case and separators.

    Example:
        >>> canonicalize("  College_Football ")
        'college-football'
    """
    if not value:
        return ""
    return _SEPARATORS.sub("-", str(value).strip().lower()).strip("-")


def lookup_alias(value: Optional[str]) -> Optional[str]:
    """Alias or registry id for a label, or None when unknown."""
    key = canonicalize(value)
    if not key:
        return None
    if key in SPORT_ALIASES:
        return SPORT_ALIASES[key]
    if key in SPORT_REGISTRY:
        return key
    return None


@dataclass(frozen=True)
class SportResolution:
    """
    Outcome of normalizing one sport label.

    matched_by:
        exact     - label was already a registry id
        alias     - resolved through SPORT_ALIASES
        wildcard  - label was empty or "all"
        defaulted - label was not recognized; degraded to "all"
    """
    raw: Optional[str]
    sport: str
    matched_by: str

    @property
    def is_defaulted(self) -> bool:
        return self.matched_by == "defaulted"


def resolve_sport(value: Optional[str]) -> SportResolution:
    """
    Normalize a label and report how the result was reached.

    Callers that need to tell "user asked for everything" apart from
    "user asked for something we don't know" should use this instead of
    normalize_sport_id.
    """
    key = canonicalize(value)
    if not key or key == WILDCARD_SPORT:
        return SportResolution(raw=value, sport=WILDCARD_SPORT, matched_by="wildcard")
    if key in SPORT_ALIASES:
        return SportResolution(raw=value, sport=SPORT_ALIASES[key], matched_by="alias")
    if key in SPORT_REGISTRY:
        return SportResolution(raw=value, sport=key, matched_by="exact")
    return SportResolution(raw=value, sport=WILDCARD_SPORT, matched_by="defaulted")


def normalize_sport_id(value: Optional[str]) -> str:
    """
    Canonical sport id for any input. Total: unknown input returns "all".

    Examples:
        >>> normalize_sport_id("NBA")
        'nba'
        >>> normalize_sport_id("UFC")
        'mma'
        >>> normalize_sport_id("curling")
        'all'
    """
    resolution = resolve_sport(value)
    if resolution.is_defaulted:
        logger.debug(f"Unknown sport '{value}' normalized to '{WILDCARD_SPORT}'")
    return resolution.sport


def normalize_sport_filter(value: Optional[str]) -> str:
    """Normalize a filter selection. Empty and "all" are the wildcard."""
    if not value or value == WILDCARD_SPORT:
        return WILDCARD_SPORT
    return normalize_sport_id(value)


def is_valid_sport(value: Optional[str]) -> bool:
    """True when the label resolves to a registry id without defaulting."""
    return lookup_alias(value) is not None


def is_valid_sport_filter(value: Optional[str]) -> bool:
    """Valid filter selection: the wildcard or a known sport."""
    if not value:
        return False
    if value == WILDCARD_SPORT:
        return True
    return is_valid_sport(value)


__all__ = [
    'SPORT_ALIASES',
    'SportResolution',
    'canonicalize',
    'lookup_alias',
    'resolve_sport',
    'normalize_sport_id',
    'normalize_sport_filter',
    'is_valid_sport',
    'is_valid_sport_filter',
]

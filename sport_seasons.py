"""
Sport Season Gating Module
==========================

Month-granular season windows taken from each sport's registry entry.

Rules:
- Year-round sports are always in season
- Windows may wrap the year boundary (NFL: September -> February)
- Unknown sports are treated as in season so callers never hide data
  because of a missing season definition
"""

from datetime import datetime, date
from typing import List, Optional

from loguru import logger

from core.sports import MONTH_NAMES, get_active_sports, get_sport_config


def is_in_season(sport: str, today: Optional[date] = None) -> bool:
    """
    Check if a sport is in season on the given date.

    Examples:
        >>> is_in_season("nfl", date(2026, 1, 15))  # Mid-January
        True
        >>> is_in_season("nfl", date(2026, 5, 15))  # Mid-May
        False
        >>> is_in_season("esports", date(2026, 7, 4))
        True
    """
    config = get_sport_config(sport)
    if config is None:
        logger.debug(f"No season data for '{sport}' - treating as in season")
        return True

    if config.season.is_year_round:
        return True

    if today is None:
        today = datetime.now().date()

    return today.month in config.season.months()


def get_in_season_sports(today: Optional[date] = None, include_all: bool = False) -> List[str]:
    """Ids of active sports in season on the given date, in registry display order."""
    if today is None:
        today = datetime.now().date()

    return [
        d.id for d in get_active_sports(include_all=include_all)
        if is_in_season(d.id, today)
    ]


def get_season_info(sport: str, today: Optional[date] = None) -> dict:
    """
    Get season status for a sport.

    Returns:
        Dict with the season window, in/off-season flag and a message
    """
    if today is None:
        today = datetime.now().date()

    config = get_sport_config(sport)
    if config is None:
        return {
            "sport": sport,
            "valid": False,
            "in_season": True,
            "message": f"Unknown sport: {sport}",
        }

    in_season = is_in_season(config.id, today)
    season = config.season

    return {
        "sport": config.id,
        "sport_name": config.display_name,
        "valid": True,
        "in_season": in_season,
        "is_year_round": season.is_year_round,
        "season_start": season.start,
        "season_end": season.end,
        "season_months": [MONTH_NAMES[m - 1] for m in season.months()],
        "message": f"{config.display_name} is {'IN SEASON' if in_season else 'OFF-SEASON'}",
        "checked_date": today.isoformat(),
    }

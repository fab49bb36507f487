# services/__init__.py
# Upstream clients and the unified data facade

from .betting_api_client import BettingApiClient
from .prizepicks_client import PrizePicksClient
from .theodds_service import TheOddsClient, find_best_odds
from .unified_data_service import UnifiedDataService
from .sport_filter_state import SportFilterController, SportFilterState

__all__ = [
    "BettingApiClient",
    "PrizePicksClient",
    "TheOddsClient",
    "find_best_odds",
    "UnifiedDataService",
    "SportFilterController",
    "SportFilterState",
]

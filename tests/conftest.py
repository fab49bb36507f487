"""
tests/conftest.py - Pytest configuration and fixtures

Shared fakes for the unified data layer:
- FakeClock: controllable wall clock (drives both TTLs and timestamps)
- betting_client / props_client: AsyncMock upstreams with realistic rows
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.unified_data_service import UnifiedDataService


class FakeClock:
    """Callable returning an aware datetime; advance() moves it forward."""

    def __init__(self, start: datetime = datetime(2026, 1, 15, 18, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)

    def monotonic(self) -> float:
        return self.now.timestamp()


BETTING_ROWS = [
    {
        "id": "opp-1", "sport": "NBA", "event": "Lakers vs Celtics", "market": "spread",
        "odds": -105, "line": -3.5, "bookmaker": "FanDuel", "expected_value": 0.045,
        "confidence": 82, "expires": "2026-01-16T00:00:00+00:00",
    },
    {
        "id": "opp-2", "sport": "nfl", "event": "Chiefs vs Bills", "market": "moneyline",
        "odds": 120, "edge": 0.031, "confidence": 71,
    },
    {
        "id": "opp-3", "sport": "basketball", "event": "Heat vs Knicks", "market": "total",
        "odds": -110, "line": 214.5, "expectedValue": 0.052, "confidence": 90,
    },
]

PROP_ROWS = {
    "data": {
        "data": [
            {
                "id": "pp-1",
                "attributes": {
                    "player_name": "LeBron James", "team": "LAL", "stat_type": "Points",
                    "line_score": "25.5", "sport": "nba", "confidence": "88", "edge": 6.2,
                },
            },
            {
                "id": "pp-2",
                "attributes": {
                    "player_name": "Patrick Mahomes", "team": "KC", "stat_type": "Pass Yards",
                    "line_score": 275.5, "sport": "nfl", "confidence": 99,
                },
            },
            {
                "id": "pp-3",
                "attributes": {
                    "player_name": "Jalen Brunson", "team": "NYK", "stat_type": "Assists",
                    "line_score": 7.5, "sport": "NBA", "confidence": 40, "edge": "3.1",
                },
            },
        ]
    }
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def betting_client():
    client = AsyncMock()
    client.get_betting_opportunities.return_value = [dict(r) for r in BETTING_ROWS]
    return client


@pytest.fixture
def props_client():
    from services.prizepicks_client import extract_props

    client = AsyncMock()
    client.get_props.return_value = extract_props(PROP_ROWS)
    return client


@pytest.fixture
def data_service(betting_client, props_client, clock):
    return UnifiedDataService(betting_client, props_client, clock=clock)

"""
TEST_UNIFIED_DATA_SERVICE.PY - Unified data facade

Tests verify:
1. Transform, sport filter, threshold, sort and truncate pipeline
2. Cache hits tagged cached=True, expiry after the TTL
3. Failures become success=False envelopes and are not cached
4. Concurrent identical misses share one upstream call
5. Available sports aggregation and fallbacks
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from core.errors import UpstreamError
from models.unified_records import UnifiedDataFilters
from services.unified_data_service import FALLBACK_SPORTS, UnifiedDataService


class TestBettingOpportunities:

    @pytest.mark.asyncio
    async def test_transform_and_envelope(self, data_service, clock):
        response = await data_service.get_betting_opportunities()

        assert response.success is True
        assert response.cached is False
        assert response.count == 3
        assert response.timestamp == int(clock().timestamp() * 1000)

        first = response.data[0]
        assert first.id == "opp-1"
        assert first.game == first.event == "Lakers vs Celtics"
        assert first.expected_value == pytest.approx(4.5)
        assert first.edge == pytest.approx(4.5)
        assert first.bet_type == "spread"

        second = response.data[1]
        assert second.line == 120  # line falls back to odds
        assert second.bookmaker == "DraftKings"
        assert second.expires  # defaulted to now + 24h

    @pytest.mark.asyncio
    async def test_upstream_called_with_normalized_sport(self, data_service, betting_client):
        await data_service.get_betting_opportunities(UnifiedDataFilters(sport="Basketball"))
        betting_client.get_betting_opportunities.assert_awaited_once_with(
            sport="nba", min_edge=2.0, max_results=50,
        )

    @pytest.mark.asyncio
    async def test_sport_filter_uses_common_mappings(self, data_service):
        response = await data_service.get_betting_opportunities(UnifiedDataFilters(sport="nba"))
        assert [r.id for r in response.data] == ["opp-1", "opp-3"]

    @pytest.mark.asyncio
    async def test_unknown_sport_widens_to_all(self, data_service):
        response = await data_service.get_betting_opportunities(UnifiedDataFilters(sport="curling"))
        assert response.count == 3

    @pytest.mark.asyncio
    async def test_threshold_sort_truncate(self, data_service):
        filters = UnifiedDataFilters(min_confidence=75, sort_by="edge", sort_order="desc", max_results=1)
        response = await data_service.get_betting_opportunities(filters)
        assert [r.id for r in response.data] == ["opp-3"]

    @pytest.mark.asyncio
    async def test_ascending_sort(self, data_service):
        filters = UnifiedDataFilters(sort_by="confidence", sort_order="asc")
        response = await data_service.get_betting_opportunities(filters)
        assert [r.confidence for r in response.data] == [71, 82, 90]

    @pytest.mark.asyncio
    async def test_expired_rows_dropped_unless_requested(self, data_service, betting_client, clock):
        clock.advance(24 * 3600)  # past opp-1's expiry
        response = await data_service.get_betting_opportunities()
        assert "opp-1" not in [r.id for r in response.data]

        response = await data_service.get_betting_opportunities(UnifiedDataFilters(include_expired=True))
        assert "opp-1" in [r.id for r in response.data]


class TestPlayerProps:

    @pytest.mark.asyncio
    async def test_jsonapi_rows_and_confidence_clamp(self, data_service):
        response = await data_service.get_player_props()

        assert response.success is True
        by_id = {p.id: p for p in response.data}
        assert by_id["pp-1"].player == "LeBron James"
        assert by_id["pp-1"].line == 25.5
        assert by_id["pp-1"].confidence == 88
        assert by_id["pp-1"].edge == pytest.approx(6.2)
        assert by_id["pp-2"].confidence == 95
        assert by_id["pp-2"].edge == 0.0
        assert by_id["pp-3"].confidence == 50
        assert all(50 <= p.confidence <= 95 for p in response.data)
        assert all(p.over_odds == p.under_odds == -110 for p in response.data)

    @pytest.mark.asyncio
    async def test_upstream_min_confidence_default(self, data_service, props_client):
        await data_service.get_player_props(UnifiedDataFilters(sport="nfl"))
        props_client.get_props.assert_awaited_once_with(sport="nfl", min_confidence=70)

    @pytest.mark.asyncio
    async def test_sport_filter(self, data_service):
        response = await data_service.get_player_props(UnifiedDataFilters(sport="NBA"))
        assert [p.id for p in response.data] == ["pp-1", "pp-3"]

    @pytest.mark.asyncio
    async def test_missing_sport_uses_requested_sport(self, betting_client, clock):
        props = AsyncMock()
        props.get_props.return_value = [{"id": "x", "player": "Connor McDavid", "line": 1.5}]
        service = UnifiedDataService(betting_client, props, clock=clock)

        response = await service.get_player_props(UnifiedDataFilters(sport="hockey"))
        assert response.data[0].sport == "nhl"
        assert response.data[0].confidence == 75


class TestCaching:

    @pytest.mark.asyncio
    async def test_second_call_is_cached(self, data_service, betting_client):
        first = await data_service.get_betting_opportunities(UnifiedDataFilters(sport="nba"))
        second = await data_service.get_betting_opportunities(UnifiedDataFilters(sport="nba"))

        assert first.cached is False
        assert second.cached is True
        assert [r.id for r in second.data] == [r.id for r in first.data]
        assert betting_client.get_betting_opportunities.await_count == 1

    @pytest.mark.asyncio
    async def test_different_filters_are_separate_entries(self, data_service, betting_client):
        await data_service.get_betting_opportunities(UnifiedDataFilters(sport="nba"))
        await data_service.get_betting_opportunities(UnifiedDataFilters(sport="nfl"))
        assert betting_client.get_betting_opportunities.await_count == 2

    @pytest.mark.asyncio
    async def test_sport_aliases_share_one_entry(self, data_service, betting_client):
        first = await data_service.get_betting_opportunities(UnifiedDataFilters(sport="NBA"))
        second = await data_service.get_betting_opportunities(UnifiedDataFilters(sport="basketball"))
        third = await data_service.get_betting_opportunities(UnifiedDataFilters(sport="nba"))

        assert second.cached is True and third.cached is True
        assert [r.id for r in third.data] == [r.id for r in first.data]
        assert first.filters.sport == "nba"
        assert betting_client.get_betting_opportunities.await_count == 1
        assert len(data_service.get_cache_stats()["keys"]) == 1

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self, data_service, betting_client, clock):
        await data_service.get_player_props()
        clock.advance(299)
        assert (await data_service.get_player_props()).cached is True
        clock.advance(2)
        assert (await data_service.get_player_props()).cached is False

    @pytest.mark.asyncio
    async def test_clear_cache(self, data_service, betting_client):
        await data_service.get_betting_opportunities()
        data_service.clear_cache()
        assert data_service.get_cache_stats()["size"] == 0
        await data_service.get_betting_opportunities()
        assert betting_client.get_betting_opportunities.await_count == 2

    @pytest.mark.asyncio
    async def test_cache_stats_lists_keys(self, data_service):
        await data_service.get_player_props(UnifiedDataFilters(sport="nba"))
        stats = data_service.get_cache_stats()
        assert stats["size"] == 1
        assert stats["keys"][0].startswith("player-props:")
        assert stats["in_flight"] == []

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_upstream_call(self, betting_client, props_client, clock):
        release = asyncio.Event()

        async def slow_props(**kwargs):
            await release.wait()
            return [{"id": "p", "player": "A", "sport": "nba", "confidence": 80}]

        props_client.get_props.side_effect = slow_props
        service = UnifiedDataService(betting_client, props_client, clock=clock)

        tasks = [asyncio.create_task(service.get_player_props()) for _ in range(4)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks)

        assert props_client.get_props.await_count == 1
        assert all(r.success and r.count == 1 for r in results)


class TestFailures:

    @pytest.mark.asyncio
    async def test_upstream_error_becomes_envelope(self, data_service, betting_client):
        betting_client.get_betting_opportunities.side_effect = UpstreamError(
            "betting-opportunities", "HTTP 500: boom", status_code=500,
        )
        response = await data_service.get_betting_opportunities(UnifiedDataFilters(sport="nba"))

        assert response.success is False
        assert response.data == []
        assert response.count == 0
        assert "HTTP 500" in response.error
        assert response.cached is False

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, data_service, props_client):
        props_client.get_props.side_effect = [RuntimeError("timeout"), [{"id": "ok", "sport": "nba"}]]

        failed = await data_service.get_player_props()
        recovered = await data_service.get_player_props()

        assert failed.success is False
        assert recovered.success is True
        assert recovered.cached is False
        assert props_client.get_props.await_count == 2

    @pytest.mark.asyncio
    async def test_malformed_rows_do_not_raise(self, data_service, betting_client):
        betting_client.get_betting_opportunities.return_value = ["not-a-dict"]
        response = await data_service.get_betting_opportunities()
        assert response.success is False
        assert response.error


class TestAvailableSports:

    @pytest.mark.asyncio
    async def test_union_of_both_sources(self, data_service, betting_client, props_client):
        sports = await data_service.get_available_sports()
        assert sports == ["all", "nba", "nfl"]
        betting_client.get_betting_opportunities.assert_awaited_once_with(
            sport="all", min_edge=2.0, max_results=100,
        )

    @pytest.mark.asyncio
    async def test_cached_for_two_minutes(self, data_service, betting_client, clock):
        await data_service.get_available_sports()
        clock.advance(119)
        await data_service.get_available_sports()
        assert betting_client.get_betting_opportunities.await_count == 1

    @pytest.mark.asyncio
    async def test_one_source_failing_uses_the_other(self, data_service, betting_client):
        betting_client.get_betting_opportunities.side_effect = UpstreamError("betting-opportunities", "down")
        sports = await data_service.get_available_sports()
        assert sports == ["all", "nba", "nfl"]

    @pytest.mark.asyncio
    async def test_both_failing_returns_fallback_uncached(self, data_service, betting_client, props_client):
        betting_client.get_betting_opportunities.side_effect = UpstreamError("betting-opportunities", "down")
        props_client.get_props.side_effect = UpstreamError("prizepicks", "down")

        assert await data_service.get_available_sports() == FALLBACK_SPORTS
        assert "available-sports" not in data_service.cache

"""Tests for sport season gating"""
from datetime import date

import pytest

from sport_seasons import get_in_season_sports, get_season_info, is_in_season


class TestIsInSeason:

    @pytest.mark.parametrize("sport,day,expected", [
        ("nfl", date(2026, 1, 15), True),     # wraps the new year
        ("nfl", date(2026, 5, 15), False),
        ("NFL", date(2026, 9, 1), True),
        ("mlb", date(2026, 7, 4), True),
        ("mlb", date(2026, 12, 1), False),
        ("college-basketball", date(2026, 3, 20), True),
        ("college-basketball", date(2026, 8, 1), False),
    ])
    def test_month_windows(self, sport, day, expected):
        assert is_in_season(sport, day) is expected

    def test_year_round_sports(self):
        for sport in ("esports", "mma", "soccer", "all"):
            assert is_in_season(sport, date(2026, 7, 1)) is True

    def test_unknown_sport_is_in_season(self):
        assert is_in_season("curling", date(2026, 7, 1)) is True


class TestInSeasonSports:

    def test_july(self):
        sports = get_in_season_sports(date(2026, 7, 15))
        assert "mlb" in sports
        assert "wnba" in sports
        assert "nfl" not in sports
        assert "all" not in sports

    def test_include_all(self):
        assert get_in_season_sports(date(2026, 7, 15), include_all=True)[0] == "all"


class TestSeasonInfo:

    def test_known_sport(self):
        info = get_season_info("NHL", date(2026, 12, 1))
        assert info["valid"] is True
        assert info["sport"] == "nhl"
        assert info["in_season"] is True
        assert info["season_start"] == "October"
        assert info["season_months"][0] == "October"
        assert info["checked_date"] == "2026-12-01"
        assert "IN SEASON" in info["message"]

    def test_unknown_sport(self):
        info = get_season_info("curling", date(2026, 12, 1))
        assert info["valid"] is False

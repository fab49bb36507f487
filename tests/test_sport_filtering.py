"""Tests for sport filtering utilities"""
from collections import namedtuple

import pytest

from utils.sport_filtering import (
    SportFilterOptions,
    count_by_sport,
    create_sport_filter,
    extract_unique_sports,
    filter_by_sport,
    filter_sport_data,
    get_item_sport,
    group_by_sport,
)

Line = namedtuple("Line", ["id", "sport"])


def _rows(*sports):
    return [{"id": i, "sport": s} for i, s in enumerate(sports)]


class TestWildcard:

    @pytest.mark.parametrize("target", ["all", "ALL", "", None])
    def test_wildcard_returns_input_unchanged(self, target):
        items = _rows("nba", "nfl", None, "curling")
        assert filter_by_sport(items, target) is items

    def test_wildcard_without_include_all_filters_on_literal(self):
        items = _rows("all", "nba")
        result = filter_by_sport(items, "all", SportFilterOptions(include_all=False))
        assert [r["sport"] for r in result] == ["all"]


class TestExactMatch:

    def test_common_mappings_example(self):
        items = [{"sport": "NBA"}, {"sport": "nfl"}, {"sport": "basketball"}]
        result = filter_by_sport(items, "nba", SportFilterOptions(use_common_mappings=True))
        assert result == [{"sport": "NBA"}, {"sport": "basketball"}]

    def test_case_insensitive_by_default(self):
        items = _rows("NBA", "Nba", "nba")
        assert len(filter_by_sport(items, "NBA")) == 3

    def test_case_sensitive(self):
        items = _rows("NBA", "nba")
        result = filter_by_sport(items, "nba", SportFilterOptions(case_sensitive=True))
        assert [r["sport"] for r in result] == ["nba"]

    def test_every_result_matches_and_order_is_kept(self):
        items = _rows("nba", "nfl", "nba", "mlb", "nba", "nhl")
        result = filter_by_sport(items, "nba", SportFilterOptions(allow_partial_match=False))
        assert [r["id"] for r in result] == [0, 2, 4]
        assert all(r["sport"] == "nba" for r in result)

    def test_substring_matches_either_way(self):
        items = _rows("wnba", "nba")
        result = filter_by_sport(items, "nba")
        assert [r["sport"] for r in result] == ["wnba", "nba"]

    def test_exact_registry_ids_opt_in(self):
        items = _rows("wnba", "nba", "nba-playoffs")
        result = filter_by_sport(items, "nba", SportFilterOptions(exact_registry_ids=True))
        assert [r["sport"] for r in result] == ["nba", "nba-playoffs"]

    def test_items_without_sport_are_dropped(self):
        items = [{"id": 1}, {"id": 2, "sport": None}, {"id": 3, "sport": "nba"}]
        assert [r["id"] for r in filter_by_sport(items, "nba")] == [3]


class TestPartialAndMappings:

    def test_partial_substring_match(self):
        items = _rows("nba-playoffs", "NBA Summer League", "nfl")
        assert len(filter_by_sport(items, "nba")) == 2

    def test_partial_match_disabled(self):
        items = _rows("nba-playoffs")
        assert filter_by_sport(items, "nba", SportFilterOptions(allow_partial_match=False)) == []

    def test_without_common_mappings_aliases_do_not_match(self):
        items = _rows("basketball")
        assert filter_by_sport(items, "nba") == []

    def test_per_call_mapping_applies_first(self):
        items = _rows("hoops", "nfl")
        options = SportFilterOptions(map_sport_names={"hoops": "nba"})
        assert [r["sport"] for r in filter_by_sport(items, "nba", options)] == ["hoops"]

    def test_odds_api_keys_map_through_aliases(self):
        items = _rows("basketball_nba", "americanfootball_nfl")
        result = filter_sport_data(items, "nfl")
        assert [r["sport"] for r in result] == ["americanfootball_nfl"]


class TestRecordShapes:

    def test_objects_with_sport_attribute(self):
        items = [Line(1, "NFL"), Line(2, "nba")]
        assert filter_sport_data(items, "nfl") == [Line(1, "NFL")]

    def test_get_item_sport(self):
        assert get_item_sport({"sport": "nba"}) == "nba"
        assert get_item_sport(Line(1, "mlb")) == "mlb"
        assert get_item_sport(object()) is None

    def test_create_sport_filter_predicate(self):
        predicate = create_sport_filter("nhl", SportFilterOptions(use_common_mappings=True))
        items = _rows("hockey", "nba", "NHL")
        assert [r["sport"] for r in filter(predicate, items)] == ["hockey", "NHL"]


class TestAggregations:

    def test_extract_unique_sports_wildcard_first(self):
        items = _rows("nfl", "Basketball", "NBA", "mlb", None)
        assert extract_unique_sports(items) == ["all", "mlb", "nba", "nfl"]

    def test_extract_unique_sports_raw(self):
        items = _rows("nfl", "NBA", "nfl")
        assert extract_unique_sports(items, include_all=False, normalize=False, sort=False) == ["nfl", "NBA"]

    def test_group_by_sport_keeps_insertion_order(self):
        items = _rows("nba", "nfl", "basketball", "nfl")
        groups = group_by_sport(items)
        assert list(groups) == ["nba", "nfl"]
        assert [r["id"] for r in groups["nba"]] == [0, 2]
        assert [r["id"] for r in groups["nfl"]] == [1, 3]

    def test_count_by_sport(self):
        items = _rows("NBA", "nba", "hockey", "nfl")
        assert count_by_sport(items) == {"nba": 2, "nhl": 1, "nfl": 1}

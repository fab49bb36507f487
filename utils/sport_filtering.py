"""
Unified Sport Filtering Utilities

Centralizes sport filtering for every record type that carries a free-text
`sport` field (betting lines, player props, game events). Records may be
dicts or objects with a `sport` attribute.

All functions are pure, synchronous and O(n). None of them reorder the
input: results keep the relative order of the records they came from.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

from core.sport_normalizer import SPORT_ALIASES, canonicalize, normalize_sport_id
from core.sports import SPORT_REGISTRY, WILDCARD_SPORT

T = TypeVar("T")


@dataclass
class SportFilterOptions:
    """Options for filter_by_sport."""
    include_all: bool = True
    case_sensitive: bool = False
    allow_partial_match: bool = True
    # Map item sports through SPORT_ALIASES before comparing
    use_common_mappings: bool = False
    # Extra per-call mapping, applied before the common mappings
    map_sport_names: Mapping[str, str] = field(default_factory=dict)
    # Registry ids skip partial matching ("wnba" no longer matches "nba")
    exact_registry_ids: bool = False


def get_item_sport(item: Any) -> Optional[str]:
    """Read the sport tag from a dict or an object."""
    if isinstance(item, Mapping):
        value = item.get("sport")
    else:
        value = getattr(item, "sport", None)
    if value is None:
        return None
    return str(value)


def _map_item_sport(sport: str, options: SportFilterOptions) -> str:
    if sport in options.map_sport_names:
        sport = options.map_sport_names[sport]
    if options.use_common_mappings:
        mapped = SPORT_ALIASES.get(canonicalize(sport))
        if mapped:
            return mapped
    return sport


def _is_wildcard(sport: Optional[str]) -> bool:
    return not sport or sport == WILDCARD_SPORT or sport.lower() == WILDCARD_SPORT


def _matches(item_sport: str, target: str, options: SportFilterOptions) -> bool:
    if not options.case_sensitive:
        item_sport = item_sport.lower()
    if item_sport == target:
        return True
    if options.exact_registry_ids and item_sport.lower() in SPORT_REGISTRY:
        return False
    if options.allow_partial_match and item_sport:
        return item_sport in target or target in item_sport
    return False


def filter_by_sport(
    items: List[T],
    target_sport: Optional[str],
    options: Optional[SportFilterOptions] = None,
) -> List[T]:
    """
    Filter records by sport.

    A wildcard or empty target with include_all returns `items` itself,
    untouched. Records with no sport tag never match a concrete target.

    Args:
        items: Records carrying a `sport` field
        target_sport: Sport to keep
        options: SportFilterOptions (defaults: partial match on,
            case-insensitive, no common mappings)

    Returns:
        Matching records in their original order
    """
    options = options or SportFilterOptions()

    if options.include_all and _is_wildcard(target_sport):
        return items

    target = target_sport or ""
    if not options.case_sensitive:
        target = target.lower()

    result = []
    for item in items:
        item_sport = get_item_sport(item)
        if not item_sport:
            continue
        if _matches(_map_item_sport(item_sport, options), target, options):
            result.append(item)
    return result


def filter_sport_data(
    items: List[T],
    selected_sport: Optional[str],
    use_common_mappings: bool = True,
    allow_partial_match: bool = True,
    case_sensitive: bool = False,
) -> List[T]:
    """
    High-level filter used by the data service and the filter controller.

    Example:
        >>> items = [{"sport": "NBA"}, {"sport": "nfl"}, {"sport": "basketball"}]
        >>> filter_sport_data(items, "nba")
        [{'sport': 'NBA'}, {'sport': 'basketball'}]
    """
    return filter_by_sport(
        items,
        selected_sport,
        SportFilterOptions(
            include_all=True,
            case_sensitive=case_sensitive,
            allow_partial_match=allow_partial_match,
            use_common_mappings=use_common_mappings,
        ),
    )


def create_sport_filter(
    target_sport: Optional[str],
    options: Optional[SportFilterOptions] = None,
) -> Callable[[Any], bool]:
    """Predicate form of filter_by_sport, for use with filter()."""
    def predicate(item: Any) -> bool:
        return len(filter_by_sport([item], target_sport, options)) > 0
    return predicate


def extract_unique_sports(
    items: Iterable[Any],
    include_all: bool = True,
    normalize: bool = True,
    sort: bool = True,
) -> List[str]:
    """
    Distinct sports present in `items`.

    With sort, the wildcard comes first and the rest are alphabetical.
    """
    seen: Dict[str, None] = {}
    for item in items:
        sport = get_item_sport(item)
        if not sport:
            continue
        seen[normalize_sport_id(sport) if normalize else sport] = None

    sports = [s for s in seen if s != WILDCARD_SPORT]
    if sort:
        sports.sort()
    if include_all:
        sports.insert(0, WILDCARD_SPORT)
    return sports


def group_by_sport(items: Iterable[T], normalize: bool = True) -> "OrderedDict[str, List[T]]":
    """Group records by sport. Groups appear in first-seen order."""
    groups: "OrderedDict[str, List[T]]" = OrderedDict()
    for item in items:
        sport = get_item_sport(item)
        if not sport:
            continue
        key = normalize_sport_id(sport) if normalize else sport
        groups.setdefault(key, []).append(item)
    return groups


def count_by_sport(items: Iterable[Any], normalize: bool = True) -> Dict[str, int]:
    return {sport: len(group) for sport, group in group_by_sport(items, normalize).items()}


__all__ = [
    'SportFilterOptions',
    'get_item_sport',
    'filter_by_sport',
    'filter_sport_data',
    'create_sport_filter',
    'extract_unique_sports',
    'group_by_sport',
    'count_by_sport',
]

"""
Per-consumer sport selection state.

A SportFilterController holds one consumer's selected sport and the list of
sports it may pick from, and filters record lists by that selection. It is
not shared: build one per dashboard, websocket session or CLI run.

Usage:
    controller = SportFilterController(data_service=service, initial_sport="NBA")
    await controller.refresh_sports()
    controller.set_sport("football")          # -> "nfl"
    visible = controller.get_filtered_data(records)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TypeVar

from core.sport_normalizer import normalize_sport_filter, resolve_sport
from core.sports import WILDCARD_SPORT, SportDescriptor, get_active_sports, get_sport_config
from utils.sport_filtering import filter_sport_data

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SportFilterState:
    selected_sport: str = WILDCARD_SPORT
    available_sports: List[SportDescriptor] = field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selected_sport": self.selected_sport,
            "available_sports": [s.id for s in self.available_sports],
            "is_loading": self.is_loading,
            "error": self.error,
        }


class SportFilterController:
    """
    Args:
        data_service: UnifiedDataService (or anything with async
            get_available_sports); required for refresh_sports
        initial_sport: Starting selection, normalized
        include_all: Offer the "all" wildcard as a choice
        auto_refresh: When False, refresh_sports is a no-op and the
            registry's active sports are used as-is
        on_sport_change: Called with the new sport id after every change
    """

    def __init__(
        self,
        data_service: Any = None,
        initial_sport: str = WILDCARD_SPORT,
        include_all: bool = True,
        auto_refresh: bool = True,
        on_sport_change: Optional[Callable[[str], None]] = None,
    ):
        self.data_service = data_service
        self.include_all = include_all
        self.auto_refresh = auto_refresh
        self.on_sport_change = on_sport_change
        self.state = SportFilterState(
            selected_sport=normalize_sport_filter(initial_sport),
            available_sports=get_active_sports(include_all),
        )

    @property
    def selected_sport(self) -> str:
        return self.state.selected_sport

    @property
    def available_sport_ids(self) -> List[str]:
        return [s.id for s in self.state.available_sports]

    def _select(self, sport: str) -> None:
        self.state.selected_sport = sport
        if self.on_sport_change is not None:
            self.on_sport_change(sport)

    def set_sport(self, sport: str) -> str:
        """
        Change the selection. Unknown or unavailable sports select the
        wildcard (with a warning) instead of raising.

        Returns:
            The sport id actually selected
        """
        resolution = resolve_sport(sport)
        normalized = resolution.sport

        if resolution.is_defaulted or (
            normalized != WILDCARD_SPORT and normalized not in self.available_sport_ids
        ):
            logger.warning(
                'Invalid sport selected, falling back to "all"',
                extra={"sport": sport, "normalized_sport": normalized},
            )
            self._select(WILDCARD_SPORT)
            return WILDCARD_SPORT

        previous = self.state.selected_sport
        self._select(normalized)
        logger.info(
            "Sport filter changed",
            extra={"previous_sport": previous, "new_sport": normalized},
        )
        return normalized

    def reset_to_all(self) -> str:
        return self.set_sport(WILDCARD_SPORT)

    async def refresh_sports(self) -> None:
        """
        Reload the choices from the data service.

        On failure the registry's active sports are used and `state.error`
        is set; the exception does not propagate.
        """
        if not self.auto_refresh:
            return
        if self.data_service is None:
            raise ValueError("refresh_sports requires a data_service")

        self.state.is_loading = True
        self.state.error = None
        try:
            sport_ids = await self.data_service.get_available_sports()

            configs = [c for c in (get_sport_config(s) for s in sport_ids) if c is not None]
            if not self.include_all:
                configs = [c for c in configs if not c.is_wildcard]
            elif not any(c.is_wildcard for c in configs):
                configs.insert(0, get_sport_config(WILDCARD_SPORT))

            self.state.available_sports = configs
            logger.info(
                "Updated available sports",
                extra={"count": len(configs), "sports": [c.id for c in configs]},
            )

            if self.state.selected_sport not in self.available_sport_ids:
                logger.warning(
                    'Selected sport is no longer available, resetting to "all"',
                    extra={"selected_sport": self.state.selected_sport},
                )
                self._select(WILDCARD_SPORT)
        except Exception:
            logger.exception("Failed to refresh available sports")
            self.state.error = "Failed to load available sports"
            self.state.available_sports = get_active_sports(self.include_all)
        finally:
            self.state.is_loading = False

    def get_filtered_data(self, items: List[T]) -> List[T]:
        if not items:
            return items
        return filter_sport_data(
            items,
            self.state.selected_sport,
            use_common_mappings=True,
            allow_partial_match=True,
            case_sensitive=False,
        )

    def is_current_sport_valid(self) -> bool:
        return self.state.selected_sport in self.available_sport_ids

    def current_sport_config(self) -> Optional[SportDescriptor]:
        for sport in self.state.available_sports:
            if sport.id == self.state.selected_sport:
                return sport
        return None

    def sport_options(self) -> List[Dict[str, str]]:
        """Choices formatted for a dropdown."""
        return [
            {"value": s.id, "label": s.display_name, "emoji": s.emoji, "color": s.color}
            for s in self.state.available_sports
        ]


__all__ = [
    'SportFilterState',
    'SportFilterController',
]

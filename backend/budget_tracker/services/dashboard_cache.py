"""
Per-owner dashboard cache kept fresh by the notification bus.

Created/updated events carry the record, so only that owner's entry is
dropped. Deleted events carry just an id, so every entry is dropped.
"""

import logging
from typing import Callable, Dict, List, Optional

from budget_tracker.schemas.dashboard import DashboardSummary
from budget_tracker.services.event_bus import Events, NotificationBus

logger = logging.getLogger(__name__)


class DashboardCache:
    """In-memory dashboard summaries keyed by owner id."""

    def __init__(self):
        self._entries: Dict[str, DashboardSummary] = {}
        self._hits = 0
        self._misses = 0
        self._generation = 0
        self._unsubscribers: List[Callable[[], None]] = []

    def get(self, owner_id: str) -> Optional[DashboardSummary]:
        summary = self._entries.get(owner_id)
        if summary is None:
            self._misses += 1
        else:
            self._hits += 1
        return summary

    @property
    def generation(self) -> int:
        """Bumped by every invalidation."""
        return self._generation

    def put(self, owner_id: str, summary: DashboardSummary, generation: Optional[int] = None) -> None:
        """
        Store a summary. When ``generation`` is given and an invalidation
        happened since it was read, the summary is stale and is dropped.
        """
        if generation is not None and generation != self._generation:
            logger.debug(f"Discarding stale dashboard for {owner_id}")
            return
        self._entries[owner_id] = summary

    def invalidate(self, owner_id: Optional[str] = None) -> None:
        """Drop one owner's entry, or everything when no owner is given."""
        self._generation += 1
        if owner_id is None:
            self._entries.clear()
        else:
            self._entries.pop(owner_id, None)

    def get_stats(self) -> dict:
        total_lookups = self._hits + self._misses
        return {
            "total_entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total_lookups, 4) if total_lookups else 0.0,
        }

    # Bus wiring

    def _on_record_saved(self, record) -> None:
        self.invalidate(getattr(record, "owner_id", None) or None)

    def _on_record_deleted(self, _record_id: str) -> None:
        self.invalidate()

    def _on_refresh(self) -> None:
        self.invalidate()

    def attach(self, bus: NotificationBus) -> None:
        """Subscribe to every event that can change a dashboard."""
        self._unsubscribers = [
            bus.subscribe(Events.CATEGORY_CREATED, self._on_record_saved),
            bus.subscribe(Events.CATEGORY_UPDATED, self._on_record_saved),
            bus.subscribe(Events.TRANSACTION_CREATED, self._on_record_saved),
            bus.subscribe(Events.TRANSACTION_UPDATED, self._on_record_saved),
            bus.subscribe(Events.CATEGORY_DELETED, self._on_record_deleted),
            bus.subscribe(Events.TRANSACTION_DELETED, self._on_record_deleted),
            bus.subscribe(Events.DATA_REFRESH_NEEDED, self._on_refresh),
        ]
        logger.debug("Dashboard cache attached to notification bus")

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

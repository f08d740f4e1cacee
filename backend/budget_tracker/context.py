"""
Application context: the record store, notification bus and caches owned by
one running application, built once at startup and passed to consumers.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import sessionmaker

from budget_tracker.config import Settings
from budget_tracker.services.dashboard_cache import DashboardCache
from budget_tracker.services.data_service import DataService
from budget_tracker.services.event_bus import NotificationBus
from budget_tracker.services.identity_service import IdentityService
from budget_tracker.services.storage import RecordStore, create_record_store

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    store: RecordStore
    bus: NotificationBus = field(default_factory=NotificationBus)
    cache: DashboardCache = field(default_factory=DashboardCache)
    identity: Optional[IdentityService] = None

    def __post_init__(self):
        self.cache.attach(self.bus)

    @property
    def is_remote(self) -> bool:
        return self.store.backend_name == "remote"

    def data_service(self, access_token: Optional[str] = None) -> DataService:
        """A data service acting for the caller holding ``access_token``."""
        return DataService(self.store.bind(access_token), self.bus, self.settings, cache=self.cache)

    async def close(self) -> None:
        self.cache.detach()
        self.bus.clear_all()
        await self.store.aclose()
        if self.identity is not None:
            await self.identity.aclose()


def build_context(settings: Settings, session_factory: Optional[sessionmaker] = None) -> AppContext:
    """Assemble the context; the storage backend is fixed from here on."""
    store = create_record_store(settings, session_factory=session_factory)
    identity = None
    if store.backend_name == "remote":
        identity = IdentityService(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.http_timeout,
        )
    return AppContext(settings=settings, store=store, identity=identity)

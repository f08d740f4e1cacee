"""
Record store backends and the startup factory that picks one.
"""

import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from budget_tracker.config import Settings
from budget_tracker.database import create_local_engine, create_session_factory, init_db
from budget_tracker.services.storage.interface import RecordStore
from budget_tracker.services.storage.local_store import LocalRecordStore
from budget_tracker.services.storage.remote_store import RemoteRecordStore

logger = logging.getLogger(__name__)


def create_record_store(settings: Settings, session_factory: Optional[sessionmaker] = None) -> RecordStore:
    """
    Choose the backend once, at startup.

    Supabase is used when real credentials are configured; otherwise the
    local key-value store stands in for it.
    """
    if settings.has_remote_credentials:
        logger.info(f"Using Supabase record store at {settings.supabase_url}")
        return RemoteRecordStore(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.http_timeout,
        )

    logger.warning(
        "Supabase credentials missing or placeholders; using local storage. "
        "Set SUPABASE_URL and SUPABASE_ANON_KEY for full functionality."
    )
    if session_factory is None:
        engine = create_local_engine(settings.local_database_url)
        init_db(engine)
        session_factory = create_session_factory(engine)
    return LocalRecordStore(session_factory, namespace=settings.local_storage_namespace)


__all__ = [
    "RecordStore",
    "LocalRecordStore",
    "RemoteRecordStore",
    "create_record_store",
]

"""
SQLAlchemy setup for the local key-value store used in developer mode.
"""

import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_local_engine(database_url: str) -> Engine:
    """Create an engine, making sure the SQLite data directory exists."""
    engine_args = {}
    if database_url.startswith("sqlite"):
        engine_args["connect_args"] = {"check_same_thread": False}
        path = database_url.split("///", 1)[-1]
        directory = os.path.dirname(path)
        if path != ":memory:" and directory:
            os.makedirs(directory, exist_ok=True)

    return create_engine(database_url, echo=False, **engine_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create the local storage table if it doesn't exist."""
    # Import models so they register with Base.metadata
    from budget_tracker.models.local_entry import LocalEntry  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Local storage initialized")

"""
Local storage database model.
"""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from budget_tracker.database import Base


class LocalEntry(Base):
    """One namespaced key holding a JSON document, like a browser's local storage."""

    __tablename__ = "local_storage"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

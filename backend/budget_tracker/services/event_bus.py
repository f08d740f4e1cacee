"""
In-process notification bus.

Keeps independent consumers consistent after a record is created, updated
or deleted. Dispatch is synchronous and single-process; it stands in for a
realtime push channel and is not a messaging system. There is no cycle
detection: a handler that republishes its own event forever is a bug in
the handler.
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Events:
    """Event names and their payloads."""
    CATEGORY_CREATED = "category:created"          # Category
    CATEGORY_UPDATED = "category:updated"          # Category
    CATEGORY_DELETED = "category:deleted"          # category id
    TRANSACTION_CREATED = "transaction:created"    # Transaction
    TRANSACTION_UPDATED = "transaction:updated"    # Transaction
    TRANSACTION_DELETED = "transaction:deleted"    # transaction id
    DATA_REFRESH_NEEDED = "data:refresh"           # no payload


class _Registration:
    __slots__ = ("handler",)

    def __init__(self, handler: Handler):
        self.handler = handler


class NotificationBus:
    """Publish/subscribe keyed by event name."""

    def __init__(self):
        self._handlers: Dict[str, List[_Registration]] = {}

    def subscribe(self, event_name: str, handler: Handler) -> Callable[[], None]:
        """
        Register ``handler`` for ``event_name``.

        Returns a function removing exactly this registration, even if the
        same handler was subscribed more than once. Calling it again is a no-op.
        """
        registration = _Registration(handler)
        self._handlers.setdefault(event_name, []).append(registration)

        def unsubscribe() -> None:
            registrations = self._handlers.get(event_name)
            if registrations and registration in registrations:
                registrations.remove(registration)
                if not registrations:
                    del self._handlers[event_name]

        return unsubscribe

    def publish(self, event_name: str, *payload: Any) -> None:
        """Invoke every handler for ``event_name`` in registration order."""
        # Snapshot so handlers may (un)subscribe while we dispatch
        for registration in list(self._handlers.get(event_name, [])):
            try:
                registration.handler(*payload)
            except Exception:
                logger.exception(f"Handler for {event_name} failed")

    def clear(self, event_name: str) -> None:
        """Remove every handler for one event."""
        self._handlers.pop(event_name, None)

    def clear_all(self) -> None:
        """Remove every handler for every event."""
        self._handlers = {}

    def handler_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, []))

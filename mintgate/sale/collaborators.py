"""Collaborators notified by the mint ledger.

The ownership registry and the event sink sit outside the sale core. The
ledger calls each exactly once per successful mint, after the token record
is staged and before the transaction commits, and never retries.
"""

import logging
from typing import Protocol

from ..core.models import EventLog
from ..storage import SaleStore

event_logger = logging.getLogger("mintgate.events")


class OwnershipRegistry(Protocol):
    def notify_acquired(self, owner_id: str, token_id: str) -> None: ...


class EventSink(Protocol):
    def emit(self, event: EventLog) -> None: ...


class StoreOwnershipRegistry:
    """Owner -> tokens index kept in the sale store.

    Shares the store's transaction, so a rolled-back mint leaves no index entry.
    """

    def __init__(self, store: SaleStore):
        self.store = store

    def notify_acquired(self, owner_id: str, token_id: str) -> None:
        self.store.add_owner_token(owner_id, token_id)

    def tokens_for_owner(self, owner_id: str) -> list[str]:
        return self.store.tokens_for_owner(owner_id)


class LoggingEventSink:
    """Writes every event as an ``EVENT_JSON:`` line on the ``mintgate.events`` logger."""

    def emit(self, event: EventLog) -> None:
        event_logger.info(event.to_log_line())


class MemoryEventSink:
    """Keeps emitted events in a list."""

    def __init__(self) -> None:
        self.events: list[EventLog] = []

    def emit(self, event: EventLog) -> None:
        self.events.append(event)

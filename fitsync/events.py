# -*- coding: utf-8 -*-
"""Typed publish/subscribe dispatcher for nutrition state changes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    PROFILE_UPDATED = "profileUpdated"
    PROTEIN_DATA_UPDATED = "proteinDataUpdated"
    FOOD_LOG_UPDATED = "foodLogUpdated"
    SYNC_COMPLETED = "syncCompleted"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_message(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "payload": self.payload}


Handler = Callable[[Event], None]


class EventBus:
    """In-process event dispatcher.

    Handlers run synchronously inside ``dispatch``. Each dispatch walks a
    snapshot of the subscribers, so a handler may subscribe, unsubscribe or
    dispatch again without disturbing the iteration in progress. A handler
    that raises is logged and skipped; the error never reaches the caller.
    """

    def __init__(self) -> None:
        self._handlers: Dict[EventKind, List[Handler]] = {}

    def subscribe(self, kind: EventKind, handler: Handler) -> None:
        handlers = self._handlers.setdefault(EventKind(kind), [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, kind: EventKind, handler: Handler) -> None:
        handlers = self._handlers.get(EventKind(kind))
        if handlers and handler in handlers:
            handlers.remove(handler)

    def subscribe_all(self, handler: Handler) -> None:
        for kind in EventKind:
            self.subscribe(kind, handler)

    def unsubscribe_all(self, handler: Handler) -> None:
        for kind in EventKind:
            self.unsubscribe(kind, handler)

    def handler_count(self, kind: EventKind) -> int:
        return len(self._handlers.get(EventKind(kind), ()))

    def dispatch(self, kind: EventKind, payload: Optional[Mapping[str, Any]] = None) -> Event:
        event = Event(kind=EventKind(kind), payload=dict(payload or {}))
        snapshot = tuple(self._handlers.get(event.kind, ()))
        for handler in snapshot:
            try:
                handler(event)
            except Exception:
                logger.exception("Error in %s handler %r", event.kind.value, handler)
        return event

"""Event aggregator — named events with payloads, in process.

Input capture, controller, notification gateway, and renderer only know
each other through this bus.

Usage:
    bus = EventAggregator()
    bus.subscribe(controller.on_insert_row, [EventType.USER_REQUESTED_INSERT_ROW])

    await bus.publish(AppEvent(event_type=EventType.USER_REQUESTED_INSERT_ROW))

Dispatch is sequential and awaited by the publisher: a published intent
has been fully handled (including any notifications it raised) when
``publish`` returns. There is no background worker and no reordering.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from quickquote.schemas.events import AppEvent, EventType

logger = logging.getLogger(__name__)

# Type alias for event handler functions
EventHandler = Callable[[AppEvent], Coroutine[Any, Any, None]]


class EventAggregator:
    """Routes AppEvents to global and per-type subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[EventHandler] = []
        self._type_subscribers: dict[EventType, list[EventHandler]] = {}

    def subscribe(self, handler: EventHandler, event_types: list[EventType] | None = None) -> None:
        """Register an event handler.

        Args:
            handler: Async function that accepts an AppEvent.
            event_types: If provided, handler only receives these event types.
                         If None, handler receives ALL events.
        """
        if event_types is None:
            self._subscribers.append(handler)
            logger.debug("Registered global event subscriber: %s", _name(handler))
        else:
            for et in event_types:
                self._type_subscribers.setdefault(et, []).append(handler)
            logger.debug(
                "Registered event subscriber %s for types: %s",
                _name(handler),
                [t.value for t in event_types],
            )

    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove a previously registered handler."""
        if handler in self._subscribers:
            self._subscribers.remove(handler)
        for handlers in self._type_subscribers.values():
            if handler in handlers:
                handlers.remove(handler)

    async def publish(self, event: AppEvent) -> None:
        """Deliver an event to every matching subscriber, in registration order.

        A failing handler is logged and skipped; the remaining handlers still run.
        """
        handlers: list[EventHandler] = list(self._subscribers)
        handlers.extend(self._type_subscribers.get(event.event_type, []))

        logger.debug("Event published: %s %s", event.event_type.value, event.data)
        for handler in handlers:
            try:
                await handler(event)
            except Exception:
                logger.exception("Handler %s failed for event %s", _name(handler), event.event_type.value)

    async def fire(self, event_type: EventType, source_module: str | None = None, **data: Any) -> None:
        """Shorthand for publishing a named event with a keyword payload."""
        await self.publish(AppEvent(event_type=event_type, data=data, source_module=source_module))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers) + sum(len(v) for v in self._type_subscribers.values())


def _name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", repr(handler))

"""Notification gateway — forwards controller UI requests to a presenter.

Decoupled from any toolkit via ``set_presenter()``. The gateway listens for
show-notification and show-confirmation events and hands them to whatever
presenter is injected (a toast widget, a modal, a test recorder).

Never raises — presenter failures are logged but never propagate to the bus.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from quickquote.events.bus import EventAggregator
from quickquote.models.enums import NotificationType
from quickquote.schemas.dialogs import ConfirmationRequest
from quickquote.schemas.events import AppEvent, EventType

logger = logging.getLogger(__name__)

NotifyFn = Callable[[str, NotificationType], Coroutine[Any, Any, None]]
ConfirmFn = Callable[[ConfirmationRequest], Coroutine[Any, Any, None]]


class NotificationGateway:
    """Bridges UI request events to an injected presenter."""

    watched_types: list[EventType] = [EventType.SHOW_NOTIFICATION, EventType.SHOW_CONFIRMATION_DIALOG]

    def __init__(self) -> None:
        self._notify_fn: NotifyFn | None = None
        self._confirm_fn: ConfirmFn | None = None

    def set_presenter(self, notify: NotifyFn, confirm: ConfirmFn) -> None:
        """Inject the presenter callbacks for messages and confirmation dialogs."""
        self._notify_fn = notify
        self._confirm_fn = confirm

    def register(self, bus: EventAggregator) -> None:
        bus.subscribe(self.on_event, event_types=self.watched_types)

    async def on_event(self, event: AppEvent) -> None:
        if event.event_type == EventType.SHOW_NOTIFICATION:
            await self._show_notification(event)
        elif event.event_type == EventType.SHOW_CONFIRMATION_DIALOG:
            await self._show_confirmation(event)

    async def _show_notification(self, event: AppEvent) -> None:
        message = str(event.data.get("message", ""))
        try:
            level = NotificationType(event.data.get("type") or NotificationType.INFO)
        except ValueError:
            logger.warning("Unknown notification type %r, showing as info", event.data.get("type"))
            level = NotificationType.INFO

        if self._notify_fn is None:
            logger.info("Notification (%s, no presenter): %s", level.value, message)
            return
        try:
            await self._notify_fn(message, level)
        except Exception:
            logger.exception("Presenter failed to show notification: %s", message)

    async def _show_confirmation(self, event: AppEvent) -> None:
        request = event.data.get("request")
        if not isinstance(request, ConfirmationRequest):
            logger.error("Confirmation event without a ConfirmationRequest payload: %r", event.data)
            return

        if self._confirm_fn is None:
            logger.info("Confirmation (no presenter): %s", request.message)
            return
        try:
            await self._confirm_fn(request)
        except Exception:
            logger.exception("Presenter failed to show confirmation: %s", request.message)

"""Input handler — translates raw input signals into AppEvents.

Toolkit adapters call the ``handle_*`` methods with plain values (key
names, button ids, cell coordinates); the handler publishes the matching
intent on the bus and never touches quote state.

Long-press detection is timer-gated. ``press()`` starts a timer;
``release()`` before it fires cancels it with no effect. If the timer
fires first, the long-press event is published, the following release is
a no-op, and the click that toolkits emit on release is swallowed. Only
one timer is live at a time.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from quickquote.config import settings
from quickquote.events.bus import EventAggregator
from quickquote.models.enums import Column, Direction
from quickquote.schemas.events import AppEvent, EventType

logger = logging.getLogger(__name__)

SOURCE = "input.handler"

ARROW_KEYS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
}

# Virtual keyboard buttons without a payload
BUTTON_EVENTS: dict[str, EventType] = {
    "PRICE": EventType.USER_REQUESTED_CALCULATE_AND_SUM,
    "TYPE": EventType.USER_REQUESTED_CYCLE_TYPE,
    "M-SET": EventType.USER_TOGGLED_MULTI_SELECT_MODE,
    "INS-GRID": EventType.USER_REQUESTED_INSERT_ROW,
    "CLEAR": EventType.USER_REQUESTED_CLEAR_ROW,
    "SAVE": EventType.USER_REQUESTED_SAVE,
    "EXPORT": EventType.USER_REQUESTED_EXPORT_CSV,
    "LOAD": EventType.USER_REQUESTED_SAVE_THEN_LOAD,
    "RESET": EventType.USER_REQUESTED_RESET,
}

NUMERIC_BUTTONS: frozenset[str] = frozenset({"W", "H", "ENT", "DEL"})
DIGITS: frozenset[str] = frozenset("0123456789")


class PressContext(str, Enum):
    """Where a press started."""

    TYPE_CELL = "typeCell"
    TYPE_BUTTON = "typeButton"


class InputHandler:
    """Publishes intents for raw input and owns the long-press timer."""

    def __init__(self, bus: EventAggregator, long_press_ms: int | None = None) -> None:
        self.bus = bus
        self.long_press_ms = long_press_ms if long_press_ms is not None else settings.editor.long_press_ms
        self._timer: asyncio.Task[None] | None = None
        self._suppress_click = False

    async def _publish(self, event_type: EventType, **data: Any) -> None:
        await self.bus.publish(AppEvent(event_type=event_type, data=data, source_module=SOURCE))

    # ── Keyboard ─────────────────────────────────────────────────────

    async def handle_key_down(self, key: str) -> bool:
        """Arrow keys move the active cell. Returns True when the key was consumed."""
        direction = ARROW_KEYS.get(key)
        if direction is None:
            return False
        await self._publish(EventType.USER_MOVED_ACTIVE_CELL, direction=direction.value)
        return True

    async def handle_keyboard_click(self, button_id: str) -> None:
        """Virtual keyboard button, identified by its element id (``key-7``, ``key-ent``, ...)."""
        if self._consume_suppressed_click():
            return

        key = button_id.replace("key-", "", 1).upper()
        if key in NUMERIC_BUTTONS or key in DIGITS:
            await self._publish(EventType.NUMERIC_KEY_PRESSED, key=key)
        elif key in BUTTON_EVENTS:
            await self._publish(BUTTON_EVENTS[key])
        else:
            logger.debug("Unmapped keyboard button %s", button_id)

    async def handle_panel_toggle(self) -> None:
        await self._publish(EventType.USER_TOGGLED_NUMERIC_KEYBOARD)

    # ── Table ────────────────────────────────────────────────────────

    async def handle_table_click(self, row_index: int, column: str) -> None:
        """Cell click. Row-number cells become selection toggles; everything else a cell click."""
        if self._consume_suppressed_click():
            return

        if column == Column.SEQUENCE.value:
            await self._publish(EventType.SEQUENCE_CELL_CLICKED, rowIndex=row_index)
            return
        await self._publish(EventType.TABLE_CELL_CLICKED, rowIndex=row_index, column=column)

    # ── Long press ───────────────────────────────────────────────────

    def press(self, context: PressContext, row_index: int | None = None, column: str | None = None) -> None:
        """Start the long-press timer. Must be called from the running event loop."""
        self._cancel_timer()
        self._suppress_click = False

        if context == PressContext.TYPE_CELL:
            if column != Column.TYPE.value or row_index is None:
                return
            event = AppEvent(
                event_type=EventType.TYPE_CELL_LONG_PRESSED,
                data={"rowIndex": row_index},
                source_module=SOURCE,
            )
        else:
            event = AppEvent(event_type=EventType.TYPE_BUTTON_LONG_PRESSED, source_module=SOURCE)

        self._timer = asyncio.get_running_loop().create_task(self._fire_after_delay(event))

    def release(self) -> bool:
        """End a press. Returns True when a pending long press was cancelled (a short press)."""
        return self._cancel_timer()

    @property
    def long_press_pending(self) -> bool:
        return self._timer is not None

    async def _fire_after_delay(self, event: AppEvent) -> None:
        await asyncio.sleep(self.long_press_ms / 1000)
        self._timer = None
        self._suppress_click = True
        logger.debug("Long press fired: %s", event.event_type.value)
        await self.bus.publish(event)

    def _cancel_timer(self) -> bool:
        if self._timer is None:
            return False
        self._timer.cancel()
        self._timer = None
        return True

    def _consume_suppressed_click(self) -> bool:
        if self._suppress_click:
            self._suppress_click = False
            return True
        return False

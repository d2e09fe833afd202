"""AppEvent schema — the named event that flows between input capture,
controller, notification gateway, and renderer.

Input capture publishes intent events; the controller publishes UI
requests (notifications, confirmation dialogs) back onto the same bus.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types carried by the event aggregator."""

    # Input intents
    USER_MOVED_ACTIVE_CELL = "input.moved_active_cell"          # {direction}
    NUMERIC_KEY_PRESSED = "input.numeric_key_pressed"           # {key}
    USER_REQUESTED_CALCULATE_AND_SUM = "input.calculate_and_sum"
    USER_REQUESTED_CYCLE_TYPE = "input.cycle_type"
    USER_TOGGLED_MULTI_SELECT_MODE = "input.toggle_multi_select"
    USER_REQUESTED_INSERT_ROW = "input.insert_row"
    USER_REQUESTED_DELETE_ROW = "input.delete_row"
    USER_REQUESTED_CLEAR_ROW = "input.clear_row"
    SEQUENCE_CELL_CLICKED = "input.sequence_cell_clicked"       # {rowIndex}
    TABLE_CELL_CLICKED = "input.table_cell_clicked"             # {rowIndex, column}
    TYPE_CELL_LONG_PRESSED = "input.type_cell_long_pressed"     # {rowIndex}
    TYPE_BUTTON_LONG_PRESSED = "input.type_button_long_pressed"
    USER_TOGGLED_NUMERIC_KEYBOARD = "input.toggle_keyboard"
    USER_REQUESTED_SAVE = "input.save"
    USER_REQUESTED_EXPORT_CSV = "input.export_csv"
    USER_REQUESTED_SAVE_THEN_LOAD = "input.save_then_load"
    USER_REQUESTED_RESET = "input.reset"
    DIALOG_EFFECT_CHOSEN = "input.dialog_effect_chosen"         # {requestId, effect}
    DIALOG_DISMISSED = "input.dialog_dismissed"                 # {requestId}

    # Controller → UI
    SHOW_NOTIFICATION = "ui.show_notification"                  # {message, type}
    SHOW_CONFIRMATION_DIALOG = "ui.show_confirmation_dialog"    # {request}
    TRIGGER_FILE_LOAD = "file.trigger_load"


class AppEvent(BaseModel):
    """A named event with a free-form payload.

    Immutable once created. Payload keys follow the camelCase names used by
    the input capture layer (``rowIndex``, ``column``, ``direction``, ``key``).
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source_module: str | None = Field(default=None, description="Module that published this event")

    model_config = {"frozen": True}

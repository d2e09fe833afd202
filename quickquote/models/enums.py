"""Domain enums used across the store, focus policy, and controller.

All enums use str mixin so values serialize cleanly into event payloads
and settings files.
"""

from __future__ import annotations

from enum import Enum


class Column(str, Enum):
    """Columns of the quote grid, keyed by the names the renderer uses."""

    SEQUENCE = "sequence"
    WIDTH = "width"
    HEIGHT = "height"
    TYPE = "TYPE"
    PRICE = "price"
    WINDER = "winder"
    MOTOR = "motor"
    DUAL = "dual"


class ColumnKind(str, Enum):
    """Behavioural family of a column; drives click and input handling."""

    SEQUENCE = "sequence"
    NUMERIC = "numeric"
    FABRIC_TYPE = "fabric_type"
    ACCESSORY = "accessory"
    PRICE = "price"


# The column set is fixed, so behaviour is looked up here instead of dispatched dynamically.
COLUMN_KINDS: dict[Column, ColumnKind] = {
    Column.SEQUENCE: ColumnKind.SEQUENCE,
    Column.WIDTH: ColumnKind.NUMERIC,
    Column.HEIGHT: ColumnKind.NUMERIC,
    Column.TYPE: ColumnKind.FABRIC_TYPE,
    Column.PRICE: ColumnKind.PRICE,
    Column.WINDER: ColumnKind.ACCESSORY,
    Column.MOTOR: ColumnKind.ACCESSORY,
    Column.DUAL: ColumnKind.ACCESSORY,
}

# Left-to-right order used by arrow-key navigation
NAVIGABLE_COLUMNS: tuple[Column, ...] = (
    Column.WIDTH,
    Column.HEIGHT,
    Column.TYPE,
    Column.WINDER,
    Column.MOTOR,
    Column.DUAL,
)

# Item attribute backing each editable column
COLUMN_FIELDS: dict[Column, str] = {
    Column.WIDTH: "width",
    Column.HEIGHT: "height",
    Column.TYPE: "fabric_type",
    Column.WINDER: "winder",
    Column.MOTOR: "motor",
    Column.DUAL: "dual",
}


def is_numeric(column: Column) -> bool:
    """True for the columns fed through the numeric input buffer."""
    return COLUMN_KINDS.get(column) == ColumnKind.NUMERIC


class Direction(str, Enum):
    """Arrow-key move directions."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class NotificationType(str, Enum):
    """Severity passed to the notification gateway."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SequenceClickPolicy(str, Enum):
    """How a click on the row-number cell treats other selected rows."""

    PRESERVE = "preserve"    # toggle the clicked row, keep the rest
    EXCLUSIVE = "exclusive"  # outside multi-select mode, clear the rest first


class TypeButtonLongPressPolicy(str, Enum):
    """Which rows the batch fabric-type dialog targets from the TYPE button."""

    USE_SELECTION = "use_selection"
    AUTO_SELECT_WITH_DATA = "auto_select_with_data"  # only when nothing is selected


class ClearRowPolicy(str, Enum):
    """How many selected rows the clear/delete confirmation accepts."""

    SINGLE = "single"
    MULTI = "multi"

"""Quote state snapshots.

Every model here is frozen. The store never mutates a snapshot; each
transition builds the next one with ``model_copy(update=...)``, so a
before/after pair can always be compared to see what an action changed.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from quickquote.models.enums import COLUMN_FIELDS, Column


class Item(BaseModel):
    """One row of the quote."""

    model_config = ConfigDict(frozen=True)

    width: float | None = None
    height: float | None = None
    fabric_type: str | None = None   # code from the configured sequence, e.g. "B2"
    winder: str | None = None        # accessory sub-data, e.g. "HD"
    motor: str | None = None
    dual: str | None = None
    line_price: Decimal | None = None  # written by the calculation service only

    @property
    def has_data(self) -> bool:
        """A row counts as populated once a dimension or fabric type is set."""
        return bool(self.width or self.height or self.fabric_type)

    def value_of(self, column: Column) -> float | str | None:
        """Committed value behind an editable column (None for display-only columns)."""
        field = COLUMN_FIELDS.get(column)
        if field is None:
            return None
        return getattr(self, field)


class ActiveCell(BaseModel):
    """The single (row, column) currently being edited."""

    model_config = ConfigDict(frozen=True)

    row_index: int
    column: Column


class QuoteData(BaseModel):
    """The row collection of the product currently being quoted.

    ``items`` always ends with the sentinel row: an empty placeholder that
    receives new entries but is never selected, deleted, or cleared.
    """

    model_config = ConfigDict(frozen=True)

    current_product: str = "roller_blind"
    items: tuple[Item, ...] = (Item(),)
    summary_total: Decimal | None = None

    @property
    def sentinel_index(self) -> int:
        return len(self.items) - 1

    def is_sentinel(self, row_index: int) -> bool:
        return row_index == self.sentinel_index

    def is_data_row(self, row_index: int) -> bool:
        """True for indexes that exist and are not the sentinel."""
        return 0 <= row_index < self.sentinel_index


class UiState(BaseModel):
    """Editing state owned by the store alongside the row collection."""

    model_config = ConfigDict(frozen=True)

    active_cell: ActiveCell | None = ActiveCell(row_index=0, column=Column.WIDTH)
    input_value: str = ""
    selected_indexes: frozenset[int] = frozenset()
    multi_select_mode: bool = False
    is_sum_outdated: bool = False
    keyboard_collapsed: bool = False


class QuoteState(BaseModel):
    """Complete snapshot handed to the controller and the renderer."""

    model_config = ConfigDict(frozen=True)

    quote_data: QuoteData = Field(default_factory=QuoteData)
    ui: UiState = Field(default_factory=UiState)

    @property
    def items(self) -> tuple[Item, ...]:
        return self.quote_data.items

"""Confirmation request schema.

A confirmation is plain data: a message plus rows of cells. Button cells
carry an ``Effect`` that the controller resolves when the user picks it,
so the dialog presenter never holds business logic.
"""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EffectKind(str, Enum):
    """Everything a confirmation button can ask the controller to do."""

    DELETE_ROWS = "delete_rows"
    CLEAR_ROWS = "clear_rows"
    SET_FABRIC_TYPE = "set_fabric_type"
    RESET_QUOTE = "reset_quote"
    CANCEL = "cancel"


class Effect(BaseModel):
    """Declarative effect bound to a dialog button."""

    model_config = ConfigDict(frozen=True)

    kind: EffectKind
    row_indexes: tuple[int, ...] = ()
    fabric_type: str | None = None


class DialogButton(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    effect: Effect
    style_class: str | None = None


class DialogText(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    style_class: str | None = None


DialogCell = DialogButton | DialogText


class ConfirmationRequest(BaseModel):
    """One pending user decision. Lives only until an effect is chosen or it is dismissed."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    message: str
    layout: tuple[tuple[DialogCell, ...], ...]
    position: str | None = None  # presenter hint, e.g. "bottomThird"

    @property
    def buttons(self) -> list[DialogButton]:
        """All selectable buttons, row by row."""
        return [cell for row in self.layout for cell in row if isinstance(cell, DialogButton)]

    def offers(self, effect: Effect) -> bool:
        return any(button.effect == effect for button in self.buttons)

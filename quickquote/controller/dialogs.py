"""Builders for the confirmation requests the controller raises.

Each builder returns a ``ConfirmationRequest`` whose buttons carry
declarative effects; nothing here touches the store.
"""

from __future__ import annotations

from collections.abc import Iterable

from quickquote.schemas.collaborators import PriceMatrix
from quickquote.schemas.dialogs import ConfirmationRequest, DialogButton, DialogText, Effect, EffectKind

CANCEL = Effect(kind=EffectKind.CANCEL)

UNKNOWN_DESCRIPTION = "Unknown"


def _row_numbers(row_indexes: Iterable[int]) -> str:
    """1-based row numbers as shown in the sequence column."""
    return ", ".join(str(i + 1) for i in sorted(row_indexes))


def row_action_request(row_indexes: tuple[int, ...]) -> ConfirmationRequest:
    """Delete / Clear / Cancel choice for the selected rows."""
    rows = tuple(sorted(row_indexes))
    if len(rows) == 1:
        message = f"Perform action on row {rows[0] + 1}. What would you like to do?"
        delete_label, clear_label = "Delete Row", "Clear Row"
    else:
        message = f"Perform action on rows {_row_numbers(rows)}. What would you like to do?"
        delete_label, clear_label = "Delete Rows", "Clear Rows"

    return ConfirmationRequest(
        message=message,
        layout=((
            DialogButton(
                label=delete_label,
                style_class="secondary",
                effect=Effect(kind=EffectKind.DELETE_ROWS, row_indexes=rows),
            ),
            DialogButton(label=clear_label, effect=Effect(kind=EffectKind.CLEAR_ROWS, row_indexes=rows)),
            DialogButton(label="Cancel", style_class="secondary", effect=CANCEL),
        ),),
    )


def reset_request() -> ConfirmationRequest:
    return ConfirmationRequest(
        message="Are you sure you want to clear all data and start a new quote?",
        layout=((
            DialogButton(label="Confirm Reset", effect=Effect(kind=EffectKind.RESET_QUOTE)),
            DialogButton(label="Cancel", style_class="secondary", effect=CANCEL),
        ),),
    )


def fabric_type_request(
    row_indexes: tuple[int, ...],
    fabric_types: list[str],
    matrices: dict[str, PriceMatrix | None],
) -> ConfirmationRequest:
    """One row per fabric type: the code as a button, its matrix name beside it."""
    rows = tuple(sorted(row_indexes))
    layout = []
    for fabric_type in fabric_types:
        matrix = matrices.get(fabric_type)
        description = matrix.name if matrix else UNKNOWN_DESCRIPTION
        layout.append((
            DialogButton(
                label=fabric_type,
                effect=Effect(kind=EffectKind.SET_FABRIC_TYPE, row_indexes=rows, fabric_type=fabric_type),
            ),
            DialogText(text=description, style_class="text-cell"),
        ))

    return ConfirmationRequest(
        message=f"Set fabric type for selected rows ({len(rows)}):",
        layout=tuple(layout),
        position="bottomThird",
    )

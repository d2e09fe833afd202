"""Pure state transitions for the quote store.

``reduce(state, action)`` is deterministic and side-effect free: no
notifications, no logging of user-facing messages, no I/O. Structural
changes (insert/delete) remap every cached row index in the same
transition, so a snapshot never points at a row that does not exist.

Invalid targets (sentinel row, out-of-range indexes, non-editable columns)
are inert: the handler returns the incoming snapshot unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal, InvalidOperation

from quickquote.models.enums import COLUMN_FIELDS, NAVIGABLE_COLUMNS, Column, is_numeric
from quickquote.schemas.quote import ActiveCell, Item, QuoteData, QuoteState, UiState
from quickquote.store.actions import (
    Action,
    ActionType,
    AppendInputValue,
    Batch,
    BatchSetFabricType,
    ClearRows,
    CycleItemType,
    DeleteRows,
    InsertRow,
    SetActiveCell,
    SetInputValue,
    SetQuoteData,
    SetSelection,
    SetSumOutdated,
    ToggleSelection,
    UpdateItemValue,
)

Handler = Callable[[QuoteState, Action, tuple[str, ...]], QuoteState]

_EDITABLE_FIELDS: tuple[str, ...] = tuple(COLUMN_FIELDS.values())


# ── Helpers ──────────────────────────────────────────────────────────


def format_number(value: float | None) -> str:
    """Render a committed dimension the way the input buffer holds it (``150``, ``150.5``)."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def parse_number(text: str) -> float | None:
    """Parse an input buffer. Returns None for empty, non-numeric, or non-finite text."""
    try:
        number = Decimal(text.strip())
    except (InvalidOperation, AttributeError):
        return None
    if not number.is_finite():
        return None
    return float(number)


def next_fabric_type(current: str | None, sequence: Sequence[str]) -> str | None:
    """Next code in the configured sequence, wrapping. Unset or unknown codes restart at the first."""
    if not sequence:
        return current
    if current in sequence:
        return sequence[(sequence.index(current) + 1) % len(sequence)]
    return sequence[0]


def _is_blank(item: Item) -> bool:
    return all(getattr(item, field) is None for field in _EDITABLE_FIELDS)


def _ensure_sentinel(items: tuple[Item, ...]) -> tuple[Item, ...]:
    """Append a fresh empty row when the last row has received a value."""
    if not items or not _is_blank(items[-1]):
        return (*items, Item())
    return items


def _seed_input(item: Item, column: Column) -> str:
    if is_numeric(column):
        return format_number(item.value_of(column))  # type: ignore[arg-type]
    return ""


def _replace_items(state: QuoteState, items: tuple[Item, ...], ui: UiState | None = None) -> QuoteState:
    quote_data = state.quote_data.model_copy(update={"items": _ensure_sentinel(items)})
    return state.model_copy(update={"quote_data": quote_data, "ui": ui if ui is not None else state.ui})


def _data_rows(quote_data: QuoteData, indexes: Iterable[int]) -> frozenset[int]:
    """Keep only indexes of existing, non-sentinel rows."""
    return frozenset(i for i in indexes if quote_data.is_data_row(i))


def _sanitize_ui(ui: UiState, quote_data: QuoteData) -> UiState:
    """Drop references that fall outside a wholesale-replaced collection."""
    selected = _data_rows(quote_data, ui.selected_indexes)
    active = ui.active_cell
    input_value = ui.input_value
    if active is not None and not 0 <= active.row_index < len(quote_data.items):
        active = None
        input_value = ""
    return ui.model_copy(update={
        "selected_indexes": selected,
        "active_cell": active,
        "input_value": input_value,
    })


# ── Focus and input buffer ───────────────────────────────────────────


def _set_active_cell(state: QuoteState, action: SetActiveCell, _seq: tuple[str, ...]) -> QuoteState:
    items = state.items
    if not 0 <= action.row_index < len(items) or action.column not in NAVIGABLE_COLUMNS:
        return state
    ui = state.ui.model_copy(update={
        "active_cell": ActiveCell(row_index=action.row_index, column=action.column),
        "input_value": _seed_input(items[action.row_index], action.column),
    })
    return state.model_copy(update={"ui": ui})


def _clear_active_cell(state: QuoteState, _action: Action, _seq: tuple[str, ...]) -> QuoteState:
    ui = state.ui.model_copy(update={"active_cell": None, "input_value": ""})
    return state.model_copy(update={"ui": ui})


def _set_input_value(state: QuoteState, action: SetInputValue, _seq: tuple[str, ...]) -> QuoteState:
    return state.model_copy(update={"ui": state.ui.model_copy(update={"input_value": action.value})})


def _append_input_value(state: QuoteState, action: AppendInputValue, _seq: tuple[str, ...]) -> QuoteState:
    active = state.ui.active_cell
    if active is None or not is_numeric(active.column):
        return state
    value = state.ui.input_value + action.value
    return state.model_copy(update={"ui": state.ui.model_copy(update={"input_value": value})})


def _delete_last_input_char(state: QuoteState, _action: Action, _seq: tuple[str, ...]) -> QuoteState:
    if not state.ui.input_value:
        return state
    value = state.ui.input_value[:-1]
    return state.model_copy(update={"ui": state.ui.model_copy(update={"input_value": value})})


def _clear_input_value(state: QuoteState, _action: Action, _seq: tuple[str, ...]) -> QuoteState:
    return state.model_copy(update={"ui": state.ui.model_copy(update={"input_value": ""})})


# ── Selection and flags ──────────────────────────────────────────────


def _toggle_selection(state: QuoteState, action: ToggleSelection, _seq: tuple[str, ...]) -> QuoteState:
    if not state.quote_data.is_data_row(action.row_index):
        return state
    selected = state.ui.selected_indexes ^ {action.row_index}
    return state.model_copy(update={"ui": state.ui.model_copy(update={"selected_indexes": selected})})


def _set_selection(state: QuoteState, action: SetSelection, _seq: tuple[str, ...]) -> QuoteState:
    selected = _data_rows(state.quote_data, action.row_indexes)
    return state.model_copy(update={"ui": state.ui.model_copy(update={"selected_indexes": selected})})


def _clear_selection(state: QuoteState, _action: Action, _seq: tuple[str, ...]) -> QuoteState:
    if not state.ui.selected_indexes:
        return state
    return state.model_copy(update={"ui": state.ui.model_copy(update={"selected_indexes": frozenset()})})


def _toggle_multi_select_mode(state: QuoteState, _action: Action, _seq: tuple[str, ...]) -> QuoteState:
    ui = state.ui.model_copy(update={"multi_select_mode": not state.ui.multi_select_mode})
    return state.model_copy(update={"ui": ui})


def _toggle_keyboard(state: QuoteState, _action: Action, _seq: tuple[str, ...]) -> QuoteState:
    ui = state.ui.model_copy(update={"keyboard_collapsed": not state.ui.keyboard_collapsed})
    return state.model_copy(update={"ui": ui})


def _set_sum_outdated(state: QuoteState, action: SetSumOutdated, _seq: tuple[str, ...]) -> QuoteState:
    if state.ui.is_sum_outdated == action.outdated:
        return state
    ui = state.ui.model_copy(update={"is_sum_outdated": action.outdated})
    return state.model_copy(update={"ui": ui})


def _reset_ui(state: QuoteState, _action: Action, _seq: tuple[str, ...]) -> QuoteState:
    return state.model_copy(update={"ui": _sanitize_ui(UiState(), state.quote_data)})


# ── Row collection ───────────────────────────────────────────────────


def _insert_row(state: QuoteState, action: InsertRow, _seq: tuple[str, ...]) -> QuoteState:
    if not state.quote_data.is_data_row(action.after_index):
        return state
    position = action.after_index + 1
    items = (*state.items[:position], Item(), *state.items[position:])

    ui = state.ui
    active = ui.active_cell
    if active is not None and active.row_index >= position:
        active = active.model_copy(update={"row_index": active.row_index + 1})
    selected = frozenset(i + 1 if i >= position else i for i in ui.selected_indexes)
    ui = ui.model_copy(update={"active_cell": active, "selected_indexes": selected})
    return _replace_items(state, items, ui)


def _delete_rows(state: QuoteState, action: DeleteRows, _seq: tuple[str, ...]) -> QuoteState:
    doomed = _data_rows(state.quote_data, action.row_indexes)
    if not doomed:
        return state
    items = tuple(item for i, item in enumerate(state.items) if i not in doomed)

    def remap(index: int) -> int:
        return index - sum(1 for d in doomed if d < index)

    ui = state.ui
    active = ui.active_cell
    input_value = ui.input_value
    if active is not None:
        if active.row_index in doomed:
            active = None
            input_value = ""
        else:
            active = active.model_copy(update={"row_index": remap(active.row_index)})
    selected = frozenset(remap(i) for i in ui.selected_indexes if i not in doomed)
    ui = ui.model_copy(update={
        "active_cell": active,
        "input_value": input_value,
        "selected_indexes": selected,
    })
    return _replace_items(state, items, ui)


def _clear_rows(state: QuoteState, action: ClearRows, _seq: tuple[str, ...]) -> QuoteState:
    targets = _data_rows(state.quote_data, action.row_indexes)
    if not targets:
        return state
    items = tuple(Item() if i in targets else item for i, item in enumerate(state.items))
    ui = state.ui
    if ui.active_cell is not None and ui.active_cell.row_index in targets:
        ui = ui.model_copy(update={"input_value": ""})
    return _replace_items(state, items, ui)


def _update_item_value(state: QuoteState, action: UpdateItemValue, _seq: tuple[str, ...]) -> QuoteState:
    field = COLUMN_FIELDS.get(action.column)
    if field is None or not 0 <= action.row_index < len(state.items):
        return state
    value = action.value
    if is_numeric(action.column) and value is not None:
        value = float(value)
    elif value is not None:
        value = str(value)
    item = state.items[action.row_index].model_copy(update={field: value})
    items = tuple(item if i == action.row_index else row for i, row in enumerate(state.items))
    return _replace_items(state, items)


def _cycle_item_type(state: QuoteState, action: CycleItemType, seq: tuple[str, ...]) -> QuoteState:
    if not seq or not 0 <= action.row_index < len(state.items):
        return state
    items = tuple(
        row.model_copy(update={"fabric_type": next_fabric_type(row.fabric_type, seq)})
        if i == action.row_index else row
        for i, row in enumerate(state.items)
    )
    return _replace_items(state, items)


def _batch_cycle_fabric_type(state: QuoteState, _action: Action, seq: tuple[str, ...]) -> QuoteState:
    quote_data = state.quote_data
    if not seq or quote_data.sentinel_index == 0:
        return state
    items = tuple(
        row.model_copy(update={"fabric_type": next_fabric_type(row.fabric_type, seq)})
        if quote_data.is_data_row(i) else row
        for i, row in enumerate(state.items)
    )
    return _replace_items(state, items)


def _batch_set_fabric_type(state: QuoteState, action: BatchSetFabricType, _seq: tuple[str, ...]) -> QuoteState:
    targets = _data_rows(state.quote_data, action.row_indexes)
    if not targets:
        return state
    items = tuple(
        row.model_copy(update={"fabric_type": action.fabric_type}) if i in targets else row
        for i, row in enumerate(state.items)
    )
    return _replace_items(state, items)


def _set_quote_data(state: QuoteState, action: SetQuoteData, _seq: tuple[str, ...]) -> QuoteState:
    items = _ensure_sentinel(action.quote_data.items)
    quote_data = action.quote_data.model_copy(update={"items": items})
    return state.model_copy(update={"quote_data": quote_data, "ui": _sanitize_ui(state.ui, quote_data)})


def _reset_quote_data(state: QuoteState, _action: Action, _seq: tuple[str, ...]) -> QuoteState:
    quote_data = QuoteData(current_product=state.quote_data.current_product)
    return state.model_copy(update={"quote_data": quote_data, "ui": _sanitize_ui(state.ui, quote_data)})


def _batch(state: QuoteState, action: Batch, seq: tuple[str, ...]) -> QuoteState:
    for inner in action.actions:
        state = reduce(state, inner, seq)
    return state


_HANDLERS: dict[ActionType, Handler] = {
    ActionType.SET_ACTIVE_CELL: _set_active_cell,
    ActionType.CLEAR_ACTIVE_CELL: _clear_active_cell,
    ActionType.SET_INPUT_VALUE: _set_input_value,
    ActionType.APPEND_INPUT_VALUE: _append_input_value,
    ActionType.DELETE_LAST_INPUT_CHAR: _delete_last_input_char,
    ActionType.CLEAR_INPUT_VALUE: _clear_input_value,
    ActionType.TOGGLE_SELECTION: _toggle_selection,
    ActionType.SET_SELECTION: _set_selection,
    ActionType.CLEAR_SELECTION: _clear_selection,
    ActionType.TOGGLE_MULTI_SELECT_MODE: _toggle_multi_select_mode,
    ActionType.TOGGLE_KEYBOARD: _toggle_keyboard,
    ActionType.SET_SUM_OUTDATED: _set_sum_outdated,
    ActionType.RESET_UI: _reset_ui,
    ActionType.INSERT_ROW: _insert_row,
    ActionType.DELETE_ROWS: _delete_rows,
    ActionType.CLEAR_ROWS: _clear_rows,
    ActionType.UPDATE_ITEM_VALUE: _update_item_value,
    ActionType.CYCLE_ITEM_TYPE: _cycle_item_type,
    ActionType.BATCH_CYCLE_FABRIC_TYPE: _batch_cycle_fabric_type,
    ActionType.BATCH_SET_FABRIC_TYPE: _batch_set_fabric_type,
    ActionType.SET_QUOTE_DATA: _set_quote_data,
    ActionType.RESET_QUOTE_DATA: _reset_quote_data,
    ActionType.BATCH: _batch,
}


def reduce(state: QuoteState, action: Action, fabric_sequence: Sequence[str] = ()) -> QuoteState:
    """Apply one action and return the next snapshot.

    Raises:
        ValueError: If the action type has no handler.
    """
    handler = _HANDLERS.get(action.type)
    if handler is None:
        msg = f"Unknown action type: {action.type!r}"
        raise ValueError(msg)
    return handler(state, action, tuple(fabric_sequence))

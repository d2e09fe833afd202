"""Action set — pure descriptions of state changes.

Actions carry no behaviour; ``quickquote.store.reducer`` interprets them.
Each action has a creator function so call sites read like the intent:

    store.dispatch(insert_row(2))
    store.dispatch(batch(set_sum_outdated(True), clear_selection()))
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from quickquote.models.enums import Column
from quickquote.schemas.quote import QuoteData


class ActionType(str, Enum):
    """Every action the store understands."""

    # Focus and input buffer
    SET_ACTIVE_CELL = "ui.set_active_cell"
    CLEAR_ACTIVE_CELL = "ui.clear_active_cell"
    SET_INPUT_VALUE = "ui.set_input_value"
    APPEND_INPUT_VALUE = "ui.append_input_value"
    DELETE_LAST_INPUT_CHAR = "ui.delete_last_input_char"
    CLEAR_INPUT_VALUE = "ui.clear_input_value"

    # Selection
    TOGGLE_SELECTION = "ui.toggle_selection"
    SET_SELECTION = "ui.set_selection"
    CLEAR_SELECTION = "ui.clear_selection"
    TOGGLE_MULTI_SELECT_MODE = "ui.toggle_multi_select_mode"
    TOGGLE_KEYBOARD = "ui.toggle_keyboard"

    # Flags and resets
    SET_SUM_OUTDATED = "ui.set_sum_outdated"
    RESET_UI = "ui.reset"

    # Row collection
    INSERT_ROW = "quote.insert_row"
    DELETE_ROWS = "quote.delete_rows"
    CLEAR_ROWS = "quote.clear_rows"
    UPDATE_ITEM_VALUE = "quote.update_item_value"
    CYCLE_ITEM_TYPE = "quote.cycle_item_type"
    BATCH_CYCLE_FABRIC_TYPE = "quote.batch_cycle_fabric_type"
    BATCH_SET_FABRIC_TYPE = "quote.batch_set_fabric_type"
    SET_QUOTE_DATA = "quote.set_quote_data"
    RESET_QUOTE_DATA = "quote.reset"

    # Composite
    BATCH = "batch"


class Action(BaseModel):
    """Base for all actions. Frozen, so an action can be logged and replayed."""

    model_config = ConfigDict(frozen=True)

    type: ActionType


class SetActiveCell(Action):
    type: Literal[ActionType.SET_ACTIVE_CELL] = ActionType.SET_ACTIVE_CELL
    row_index: int
    column: Column


class ClearActiveCell(Action):
    type: Literal[ActionType.CLEAR_ACTIVE_CELL] = ActionType.CLEAR_ACTIVE_CELL


class SetInputValue(Action):
    type: Literal[ActionType.SET_INPUT_VALUE] = ActionType.SET_INPUT_VALUE
    value: str


class AppendInputValue(Action):
    type: Literal[ActionType.APPEND_INPUT_VALUE] = ActionType.APPEND_INPUT_VALUE
    value: str


class DeleteLastInputChar(Action):
    type: Literal[ActionType.DELETE_LAST_INPUT_CHAR] = ActionType.DELETE_LAST_INPUT_CHAR


class ClearInputValue(Action):
    type: Literal[ActionType.CLEAR_INPUT_VALUE] = ActionType.CLEAR_INPUT_VALUE


class ToggleSelection(Action):
    type: Literal[ActionType.TOGGLE_SELECTION] = ActionType.TOGGLE_SELECTION
    row_index: int


class SetSelection(Action):
    type: Literal[ActionType.SET_SELECTION] = ActionType.SET_SELECTION
    row_indexes: frozenset[int]


class ClearSelection(Action):
    type: Literal[ActionType.CLEAR_SELECTION] = ActionType.CLEAR_SELECTION


class ToggleMultiSelectMode(Action):
    type: Literal[ActionType.TOGGLE_MULTI_SELECT_MODE] = ActionType.TOGGLE_MULTI_SELECT_MODE


class ToggleKeyboard(Action):
    type: Literal[ActionType.TOGGLE_KEYBOARD] = ActionType.TOGGLE_KEYBOARD


class SetSumOutdated(Action):
    type: Literal[ActionType.SET_SUM_OUTDATED] = ActionType.SET_SUM_OUTDATED
    outdated: bool


class ResetUi(Action):
    type: Literal[ActionType.RESET_UI] = ActionType.RESET_UI


class InsertRow(Action):
    """Insert an empty item directly below ``after_index``."""

    type: Literal[ActionType.INSERT_ROW] = ActionType.INSERT_ROW
    after_index: int


class DeleteRows(Action):
    type: Literal[ActionType.DELETE_ROWS] = ActionType.DELETE_ROWS
    row_indexes: frozenset[int]


class ClearRows(Action):
    type: Literal[ActionType.CLEAR_ROWS] = ActionType.CLEAR_ROWS
    row_indexes: frozenset[int]


class UpdateItemValue(Action):
    type: Literal[ActionType.UPDATE_ITEM_VALUE] = ActionType.UPDATE_ITEM_VALUE
    row_index: int
    column: Column
    value: float | str | None


class CycleItemType(Action):
    type: Literal[ActionType.CYCLE_ITEM_TYPE] = ActionType.CYCLE_ITEM_TYPE
    row_index: int


class BatchCycleFabricType(Action):
    type: Literal[ActionType.BATCH_CYCLE_FABRIC_TYPE] = ActionType.BATCH_CYCLE_FABRIC_TYPE


class BatchSetFabricType(Action):
    type: Literal[ActionType.BATCH_SET_FABRIC_TYPE] = ActionType.BATCH_SET_FABRIC_TYPE
    row_indexes: frozenset[int]
    fabric_type: str


class SetQuoteData(Action):
    type: Literal[ActionType.SET_QUOTE_DATA] = ActionType.SET_QUOTE_DATA
    quote_data: QuoteData


class ResetQuoteData(Action):
    type: Literal[ActionType.RESET_QUOTE_DATA] = ActionType.RESET_QUOTE_DATA


class Batch(Action):
    """Several actions applied as one transition."""

    type: Literal[ActionType.BATCH] = ActionType.BATCH
    actions: tuple[Action, ...]


# ── Creators ─────────────────────────────────────────────────────────


def set_active_cell(row_index: int, column: Column | str) -> SetActiveCell:
    return SetActiveCell(row_index=row_index, column=Column(column))


def clear_active_cell() -> ClearActiveCell:
    return ClearActiveCell()


def set_input_value(value: str) -> SetInputValue:
    return SetInputValue(value=value)


def append_input_value(value: str) -> AppendInputValue:
    return AppendInputValue(value=value)


def delete_last_input_char() -> DeleteLastInputChar:
    return DeleteLastInputChar()


def clear_input_value() -> ClearInputValue:
    return ClearInputValue()


def toggle_selection(row_index: int) -> ToggleSelection:
    return ToggleSelection(row_index=row_index)


def set_selection(row_indexes: list[int] | set[int] | frozenset[int]) -> SetSelection:
    return SetSelection(row_indexes=frozenset(row_indexes))


def clear_selection() -> ClearSelection:
    return ClearSelection()


def toggle_multi_select_mode() -> ToggleMultiSelectMode:
    return ToggleMultiSelectMode()


def toggle_keyboard() -> ToggleKeyboard:
    return ToggleKeyboard()


def set_sum_outdated(outdated: bool) -> SetSumOutdated:
    return SetSumOutdated(outdated=outdated)


def reset_ui() -> ResetUi:
    return ResetUi()


def insert_row(after_index: int) -> InsertRow:
    return InsertRow(after_index=after_index)


def delete_row(row_index: int) -> DeleteRows:
    return DeleteRows(row_indexes=frozenset({row_index}))


def delete_multiple_rows(row_indexes: list[int] | set[int] | frozenset[int]) -> DeleteRows:
    return DeleteRows(row_indexes=frozenset(row_indexes))


def clear_row(row_index: int) -> ClearRows:
    return ClearRows(row_indexes=frozenset({row_index}))


def clear_multiple_rows(row_indexes: list[int] | set[int] | frozenset[int]) -> ClearRows:
    return ClearRows(row_indexes=frozenset(row_indexes))


def update_item_value(row_index: int, column: Column | str, value: float | str | None) -> UpdateItemValue:
    return UpdateItemValue(row_index=row_index, column=Column(column), value=value)


def cycle_item_type(row_index: int) -> CycleItemType:
    return CycleItemType(row_index=row_index)


def batch_cycle_fabric_type() -> BatchCycleFabricType:
    return BatchCycleFabricType()


def batch_set_fabric_type(
    row_indexes: list[int] | set[int] | frozenset[int] | tuple[int, ...],
    fabric_type: str,
) -> BatchSetFabricType:
    return BatchSetFabricType(row_indexes=frozenset(row_indexes), fabric_type=fabric_type)


def set_quote_data(quote_data: QuoteData) -> SetQuoteData:
    return SetQuoteData(quote_data=quote_data)


def reset_quote_data() -> ResetQuoteData:
    return ResetQuoteData()


def batch(*actions: Action) -> Batch:
    return Batch(actions=tuple(actions))

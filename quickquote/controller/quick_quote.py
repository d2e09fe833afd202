"""Quick quote controller — the brain of the grid editor.

Receives intents from input capture, reads the current snapshot, validates
business rules, and dispatches actions to the store. Refused intents are
reported through a notification and leave state untouched; destructive
intents always go through a confirmation request first.

The controller never mutates state itself. The store is the only writer.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Coroutine
from typing import Any

from quickquote.catalog import ConfigManager
from quickquote.config import EditorSettings, settings
from quickquote.controller import dialogs
from quickquote.events.bus import EventAggregator
from quickquote.focus.policy import FocusPolicy
from quickquote.models.enums import (
    COLUMN_KINDS,
    ClearRowPolicy,
    Column,
    ColumnKind,
    Direction,
    NotificationType,
    SequenceClickPolicy,
    TypeButtonLongPressPolicy,
    is_numeric,
)
from quickquote.schemas.dialogs import ConfirmationRequest, Effect, EffectKind
from quickquote.schemas.events import AppEvent, EventType
from quickquote.schemas.quote import ActiveCell, Item, QuoteState
from quickquote.services.protocols import CalculationService, ConfigProvider, FileService, ProductFactory
from quickquote.store import actions
from quickquote.store.reducer import parse_number
from quickquote.store.service import QuoteStore

logger = logging.getLogger(__name__)

SOURCE = "controller.quick_quote"

# Virtual keyboard keys that are not digits
KEY_WIDTH = "W"
KEY_HEIGHT = "H"
KEY_DELETE = "DEL"
KEY_ENTER = "ENT"
DIGITS = frozenset("0123456789")

MSG_INSERT_NEEDS_ONE = "Please select exactly one row to insert a new row below it."
MSG_INSERT_BELOW_LAST = "Cannot insert a row below the last data entry row."
MSG_INSERT_ABOVE_EMPTY = "You can only insert a row above a row that contains data."
MSG_DELETE_NEEDS_SELECTION = "Please select one or more rows to delete."
MSG_CLEAR_NEEDS_ONE = "Please select exactly one row to proceed."
MSG_CLEAR_NEEDS_SELECTION = "Please select one or more rows to proceed."
MSG_BATCH_CYCLE_BLOCKED = "Batch cycle is disabled when rows are selected. Use the long-press menu instead."
MSG_TYPE_SET_NEEDS_SELECTION = "Please select one or more rows first by tapping their row numbers."
MSG_TYPE_SET_NEEDS_SELECTION_AUTO = (
    "Please select one or more rows first, or long-press the 'Type' button to select all rows with data."
)
MSG_CALCULATION_FAILED = "Calculation failed. Please check the quote and try again."
MSG_FILE_SERVICE_MISSING = "Saving is not available."


class QuickQuoteController:
    """Validates intents and orchestrates store actions for one quote session."""

    def __init__(
        self,
        store: QuoteStore,
        bus: EventAggregator,
        *,
        config_manager: ConfigProvider | None = None,
        focus_policy: FocusPolicy | None = None,
        calculation_service: CalculationService | None = None,
        product_factory: ProductFactory | None = None,
        file_service: FileService | None = None,
        editor_settings: EditorSettings | None = None,
    ) -> None:
        self.store = store
        self.bus = bus
        self.config_manager = config_manager or ConfigManager()
        self.focus_policy = focus_policy or FocusPolicy()
        self.calculation_service = calculation_service
        self.product_factory = product_factory
        self.file_service = file_service
        self.editor_settings = editor_settings or settings.editor
        self._pending: ConfirmationRequest | None = None
        self._pending_row_count = 0
        store.subscribe(self._on_state_change)

    # ── State access ─────────────────────────────────────────────────

    def _get_state(self) -> QuoteState:
        return self.store.get_state()

    def _get_items(self) -> tuple[Item, ...]:
        return self._get_state().items

    @property
    def pending_confirmation(self) -> ConfirmationRequest | None:
        return self._pending

    # ── Outbound requests ────────────────────────────────────────────

    async def _notify(self, message: str, type_: NotificationType | None = None) -> None:
        data: dict[str, Any] = {"message": message}
        if type_ is not None:
            data["type"] = type_.value
        await self.bus.publish(AppEvent(event_type=EventType.SHOW_NOTIFICATION, data=data, source_module=SOURCE))

    async def _refuse(self, intent: str, message: str) -> None:
        logger.info("%s refused: %s", intent, message)
        await self._notify(message)

    async def _confirm(self, request: ConfirmationRequest) -> None:
        if self._pending is not None:
            logger.debug("Confirmation %s superseded by %s", self._pending.id, request.id)
        self._pending = request
        self._pending_row_count = len(self._get_items())
        await self.bus.publish(AppEvent(
            event_type=EventType.SHOW_CONFIRMATION_DIALOG,
            data={"request": request},
            source_module=SOURCE,
        ))

    def _on_state_change(self, state: QuoteState) -> None:
        """Drop a pending confirmation once rows shift under its captured indexes."""
        if self._pending is not None and len(state.items) != self._pending_row_count:
            logger.info("Confirmation %s invalidated by a row count change", self._pending.id)
            self._pending = None

    def _focus(self, cell: ActiveCell) -> None:
        self.store.dispatch(actions.set_active_cell(cell.row_index, cell.column))

    # ── Numeric keyboard ─────────────────────────────────────────────

    def _commit_input_value(self) -> bool:
        """Write the input buffer into the active cell. Returns False when nothing was committed."""
        ui = self._get_state().ui
        active = ui.active_cell
        if active is None or not is_numeric(active.column):
            return False

        value = parse_number(ui.input_value)
        if value is None:
            logger.warning("Invalid number for commit: %r (cell=%s/%s)", ui.input_value, active.row_index, active.column.value)
            return False

        self.store.dispatch(actions.batch(
            actions.update_item_value(active.row_index, active.column, value),
            actions.set_sum_outdated(True),
        ))
        return True

    async def handle_numeric_key_press(self, key: str) -> None:
        """W/H jump to the first empty cell, digits edit the buffer, DEL backspaces, ENT commits."""
        active = self._get_state().ui.active_cell
        if active is None:
            return

        key = str(key).upper()
        if key == KEY_WIDTH:
            self._focus(self.focus_policy.focus_first_empty_cell(Column.WIDTH, self._get_items()))
        elif key == KEY_HEIGHT:
            self._focus(self.focus_policy.focus_first_empty_cell(Column.HEIGHT, self._get_items()))
        elif key == KEY_DELETE:
            self.store.dispatch(actions.delete_last_input_char())
        elif key == KEY_ENTER:
            if self._commit_input_value():
                self._focus(self.focus_policy.after_commit(active, self._get_items()))
        elif key in DIGITS:
            if is_numeric(active.column):
                self.store.dispatch(actions.append_input_value(key))
        else:
            logger.debug("Ignoring unknown numeric key %r", key)

    # ── Row structure ────────────────────────────────────────────────

    async def handle_insert_row(self) -> None:
        """Insert an empty row below the single selected row.

        The row after the selection must already hold data: inserting above an
        empty row is refused even when that row is the last data row.
        """
        state = self._get_state()
        selected = state.ui.selected_indexes
        items = state.items

        if len(selected) != 1:
            await self._refuse("Insert row", MSG_INSERT_NEEDS_ONE)
            return

        (selected_index,) = selected
        if selected_index == len(items) - 2:
            await self._refuse("Insert row", MSG_INSERT_BELOW_LAST)
            return

        next_index = selected_index + 1
        if next_index < len(items) and not items[next_index].has_data:
            await self._refuse("Insert row", MSG_INSERT_ABOVE_EMPTY)
            return

        self.store.dispatch(actions.batch(
            actions.insert_row(selected_index),
            actions.set_active_cell(next_index, Column.WIDTH),
            actions.clear_selection(),
        ))
        logger.info("Inserted row at %d", next_index)

    async def handle_delete_row(self) -> None:
        selected = self._get_state().ui.selected_indexes
        if not selected:
            await self._refuse("Delete row", MSG_DELETE_NEEDS_SELECTION)
            return

        self._delete_rows(tuple(sorted(selected)))

    def _delete_rows(self, row_indexes: tuple[int, ...]) -> None:
        self.store.dispatch(actions.delete_multiple_rows(row_indexes))
        self._focus(self.focus_policy.after_delete(self._get_items()))
        self.store.dispatch(actions.clear_selection())
        logger.info("Deleted rows %s", list(row_indexes))

    def _clear_rows(self, row_indexes: tuple[int, ...]) -> None:
        self.store.dispatch(actions.clear_multiple_rows(row_indexes))
        self._focus(self.focus_policy.after_clear(min(row_indexes), self._get_items()))
        logger.info("Cleared rows %s", list(row_indexes))

    async def handle_clear_row(self) -> None:
        """Ask whether to delete or clear the selected row(s)."""
        selected = self._get_state().ui.selected_indexes

        if self.editor_settings.clear_row_policy == ClearRowPolicy.SINGLE:
            if len(selected) != 1:
                await self._refuse("Clear row", MSG_CLEAR_NEEDS_ONE)
                return
        elif not selected:
            await self._refuse("Clear row", MSG_CLEAR_NEEDS_SELECTION)
            return

        await self._confirm(dialogs.row_action_request(tuple(sorted(selected))))

    # ── Fabric type ──────────────────────────────────────────────────

    async def handle_cycle_type(self, row_index: int | None = None) -> None:
        """Cycle one row's fabric type, or every row's when no row is given."""
        if isinstance(row_index, int) and not isinstance(row_index, bool):
            self.store.dispatch(actions.batch(
                actions.cycle_item_type(row_index),
                actions.set_sum_outdated(True),
            ))
            return

        if self._get_state().ui.selected_indexes:
            await self._refuse("Batch cycle", MSG_BATCH_CYCLE_BLOCKED)
            return

        self.store.dispatch(actions.batch(
            actions.batch_cycle_fabric_type(),
            actions.set_sum_outdated(True),
        ))

    async def handle_type_cell_long_press(self, row_index: int) -> None:
        """Select only the pressed row, then offer the fabric type menu."""
        self.store.dispatch(actions.batch(
            actions.clear_selection(),
            actions.toggle_selection(row_index),
        ))
        await self.handle_multi_type_set()

    async def handle_type_button_long_press(self) -> None:
        state = self._get_state()
        policy = self.editor_settings.type_button_long_press_policy

        if policy == TypeButtonLongPressPolicy.AUTO_SELECT_WITH_DATA and not state.ui.selected_indexes:
            with_data = [i for i, item in enumerate(state.items) if item.width or item.height]
            if with_data:
                self.store.dispatch(actions.set_selection(with_data))

        await self.handle_multi_type_set()

    async def handle_multi_type_set(self) -> None:
        """Offer every configured fabric type for the selected rows."""
        selected = self._get_state().ui.selected_indexes
        if not selected:
            if self.editor_settings.type_button_long_press_policy == TypeButtonLongPressPolicy.AUTO_SELECT_WITH_DATA:
                await self._refuse("Set fabric type", MSG_TYPE_SET_NEEDS_SELECTION_AUTO)
            else:
                await self._refuse("Set fabric type", MSG_TYPE_SET_NEEDS_SELECTION)
            return

        fabric_types = self.config_manager.get_fabric_type_sequence()
        matrices = {fabric_type: self.config_manager.get_price_matrix(fabric_type) for fabric_type in fabric_types}
        await self._confirm(dialogs.fabric_type_request(tuple(selected), fabric_types, matrices))

    # ── Clicks and navigation ────────────────────────────────────────

    async def handle_sequence_cell_click(self, row_index: int) -> None:
        """Toggle the clicked row's selection, per the configured click policy."""
        state = self._get_state()
        if not state.quote_data.is_data_row(row_index):
            logger.debug("Ignoring sequence click on row %d (not selectable)", row_index)
            return

        exclusive = (
            self.editor_settings.sequence_click_policy == SequenceClickPolicy.EXCLUSIVE
            and not state.ui.multi_select_mode
        )
        if exclusive:
            selected = frozenset() if row_index in state.ui.selected_indexes else frozenset({row_index})
            self.store.dispatch(actions.set_selection(selected))
        else:
            self.store.dispatch(actions.toggle_selection(row_index))

    async def handle_table_cell_click(self, row_index: int, column: Column | str) -> None:
        try:
            column = Column(column)
        except ValueError:
            logger.warning("Click on unknown column %r ignored", column)
            return

        kind = COLUMN_KINDS[column]
        if kind == ColumnKind.FABRIC_TYPE:
            await self.handle_cycle_type(row_index)
        elif kind == ColumnKind.SEQUENCE:
            await self.handle_sequence_cell_click(row_index)
        elif kind in (ColumnKind.NUMERIC, ColumnKind.ACCESSORY):
            # Setting the active cell also seeds the input buffer from the committed value.
            self.store.dispatch(actions.set_active_cell(row_index, column))
        else:
            logger.debug("Click on display-only column %s ignored", column.value)

    async def handle_move_active_cell(self, direction: Direction | str) -> None:
        state = self._get_state()
        self._focus(self.focus_policy.move(state.ui.active_cell, direction, state.items))

    async def handle_toggle_multi_select_mode(self) -> None:
        self.store.dispatch(actions.toggle_multi_select_mode())

    async def handle_toggle_keyboard(self) -> None:
        self.store.dispatch(actions.toggle_keyboard())

    # ── Collaborators ────────────────────────────────────────────────

    async def handle_calculate_and_sum(self) -> None:
        """Price the quote; on the first invalid cell, report it and move focus there."""
        if self.calculation_service is None or self.product_factory is None:
            logger.error("Calculate requested without a calculation service")
            await self._notify(MSG_CALCULATION_FAILED, NotificationType.ERROR)
            return

        quote_data = self._get_state().quote_data
        try:
            strategy = self.product_factory.get_product_strategy(quote_data.current_product)
            result = self.calculation_service.calculate_and_sum(quote_data, strategy)
        except Exception:
            logger.exception("Calculation failed for product %s", quote_data.current_product)
            self.store.dispatch(actions.set_sum_outdated(True))
            await self._notify(MSG_CALCULATION_FAILED, NotificationType.ERROR)
            return

        self.store.dispatch(actions.set_quote_data(result.updated_quote_data))

        error = result.first_error
        if error is None:
            self.store.dispatch(actions.set_sum_outdated(False))
            return

        self.store.dispatch(actions.set_sum_outdated(True))
        await self._notify(error.message, NotificationType.ERROR)
        self.store.dispatch(actions.set_active_cell(error.row_index, error.column))

    async def handle_save_to_file(self) -> None:
        await self._run_file_operation("save", lambda service, data: service.save_to_json(data))

    async def handle_export_csv(self) -> None:
        await self._run_file_operation("export", lambda service, data: service.export_to_csv(data))

    async def handle_save_then_load(self) -> None:
        await self.handle_save_to_file()
        await self.bus.publish(AppEvent(event_type=EventType.TRIGGER_FILE_LOAD, source_module=SOURCE))

    async def _run_file_operation(self, name: str, operation: Callable[[FileService, Any], Any]) -> None:
        if self.file_service is None:
            await self._notify(MSG_FILE_SERVICE_MISSING, NotificationType.ERROR)
            return

        try:
            result = operation(self.file_service, self._get_state().quote_data)
        except Exception:
            logger.exception("File %s failed", name)
            await self._notify(f"Failed to {name} the quote.", NotificationType.ERROR)
            return

        level = NotificationType.INFO if result.success else NotificationType.ERROR
        await self._notify(result.message, level)

    async def handle_reset(self) -> None:
        await self._confirm(dialogs.reset_request())

    # ── Confirmation resolution ──────────────────────────────────────

    async def resolve_confirmation(self, request_id: uuid.UUID, effect: Effect) -> bool:
        """Run the effect the user picked. Returns False for stale or foreign choices."""
        pending = self._pending
        if pending is None or pending.id != request_id:
            logger.warning("Ignoring choice for stale confirmation %s", request_id)
            return False
        if not pending.offers(effect):
            logger.warning("Effect %s was not offered by confirmation %s", effect.kind.value, request_id)
            return False

        self._pending = None
        self._apply_effect(effect)
        return True

    async def dismiss_confirmation(self, request_id: uuid.UUID | None = None) -> None:
        """Implicit cancel: drop the pending request without side effects."""
        if self._pending is not None and (request_id is None or self._pending.id == request_id):
            logger.debug("Confirmation %s dismissed", self._pending.id)
            self._pending = None

    def _apply_effect(self, effect: Effect) -> None:
        if effect.kind == EffectKind.DELETE_ROWS:
            self._delete_rows(effect.row_indexes)
        elif effect.kind == EffectKind.CLEAR_ROWS:
            self._clear_rows(effect.row_indexes)
        elif effect.kind == EffectKind.SET_FABRIC_TYPE and effect.fabric_type is not None:
            self.store.dispatch(actions.batch(
                actions.batch_set_fabric_type(effect.row_indexes, effect.fabric_type),
                actions.set_sum_outdated(True),
                actions.clear_selection(),
            ))
        elif effect.kind == EffectKind.RESET_QUOTE:
            self.store.dispatch(actions.batch(actions.reset_quote_data(), actions.reset_ui()))
            logger.info("Quote reset")
        else:
            logger.debug("Confirmation cancelled")

    # ── Event wiring ─────────────────────────────────────────────────

    def register(self, bus: EventAggregator | None = None) -> None:
        """Subscribe one handler per input event type."""
        bus = bus or self.bus
        for event_type, handler in self._event_handlers().items():
            bus.subscribe(handler, event_types=[event_type])

    def _event_handlers(self) -> dict[EventType, Callable[[AppEvent], Coroutine[Any, Any, None]]]:
        async def on_move(event: AppEvent) -> None:
            await self.handle_move_active_cell(event.data["direction"])

        async def on_numeric_key(event: AppEvent) -> None:
            await self.handle_numeric_key_press(event.data["key"])

        async def on_cycle_type(event: AppEvent) -> None:
            await self.handle_cycle_type(event.data.get("rowIndex"))

        async def on_sequence_click(event: AppEvent) -> None:
            await self.handle_sequence_cell_click(int(event.data["rowIndex"]))

        async def on_table_click(event: AppEvent) -> None:
            await self.handle_table_cell_click(int(event.data["rowIndex"]), event.data["column"])

        async def on_type_cell_long_press(event: AppEvent) -> None:
            await self.handle_type_cell_long_press(int(event.data["rowIndex"]))

        async def on_dialog_choice(event: AppEvent) -> None:
            effect = Effect.model_validate(event.data["effect"])
            await self.resolve_confirmation(uuid.UUID(str(event.data["requestId"])), effect)

        async def on_dialog_dismissed(event: AppEvent) -> None:
            request_id = event.data.get("requestId")
            await self.dismiss_confirmation(uuid.UUID(str(request_id)) if request_id else None)

        def no_payload(handler: Callable[[], Coroutine[Any, Any, None]]):
            async def _handle(_event: AppEvent) -> None:
                await handler()
            _handle.__qualname__ = handler.__qualname__
            return _handle

        return {
            EventType.USER_MOVED_ACTIVE_CELL: on_move,
            EventType.NUMERIC_KEY_PRESSED: on_numeric_key,
            EventType.USER_REQUESTED_CALCULATE_AND_SUM: no_payload(self.handle_calculate_and_sum),
            EventType.USER_REQUESTED_CYCLE_TYPE: on_cycle_type,
            EventType.USER_TOGGLED_MULTI_SELECT_MODE: no_payload(self.handle_toggle_multi_select_mode),
            EventType.USER_REQUESTED_INSERT_ROW: no_payload(self.handle_insert_row),
            EventType.USER_REQUESTED_DELETE_ROW: no_payload(self.handle_delete_row),
            EventType.USER_REQUESTED_CLEAR_ROW: no_payload(self.handle_clear_row),
            EventType.SEQUENCE_CELL_CLICKED: on_sequence_click,
            EventType.TABLE_CELL_CLICKED: on_table_click,
            EventType.TYPE_CELL_LONG_PRESSED: on_type_cell_long_press,
            EventType.TYPE_BUTTON_LONG_PRESSED: no_payload(self.handle_type_button_long_press),
            EventType.USER_TOGGLED_NUMERIC_KEYBOARD: no_payload(self.handle_toggle_keyboard),
            EventType.USER_REQUESTED_SAVE: no_payload(self.handle_save_to_file),
            EventType.USER_REQUESTED_EXPORT_CSV: no_payload(self.handle_export_csv),
            EventType.USER_REQUESTED_SAVE_THEN_LOAD: no_payload(self.handle_save_then_load),
            EventType.USER_REQUESTED_RESET: no_payload(self.handle_reset),
            EventType.DIALOG_EFFECT_CHOSEN: on_dialog_choice,
            EventType.DIALOG_DISMISSED: on_dialog_dismissed,
        }

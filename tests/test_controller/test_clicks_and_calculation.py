"""Tests for cell clicks, selection policies, collaborators, and bus wiring."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from quickquote.controller.quick_quote import MSG_CALCULATION_FAILED, MSG_FILE_SERVICE_MISSING
from quickquote.models.enums import Column, SequenceClickPolicy
from quickquote.schemas.collaborators import CalculationResult, CellError, FileResult
from quickquote.schemas.events import EventType
from quickquote.schemas.quote import ActiveCell, Item, QuoteData

A = Item(width=1000, height=1200)
B = Item(width=2000, height=1500, fabric_type="B1")
C = Item(width=3000)


# ── Sequence cell ────────────────────────────────────────────────────


class TestSequenceClickPreserve:
    @pytest.mark.asyncio()
    async def test_toggles_without_touching_others(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={0}))

        await h.controller.handle_sequence_cell_click(2)
        assert h.state.ui.selected_indexes == {0, 2}

        await h.controller.handle_sequence_cell_click(2)
        assert h.state.ui.selected_indexes == {0}

    @pytest.mark.asyncio()
    async def test_sentinel_click_ignored(self, make_harness, make_state):
        state = make_state([A, B])
        h = make_harness(state)
        await h.controller.handle_sequence_cell_click(2)
        assert h.state is state


class TestSequenceClickExclusive:
    @pytest.mark.asyncio()
    async def test_replaces_other_selection(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={0}), sequence_click_policy=SequenceClickPolicy.EXCLUSIVE)

        await h.controller.handle_sequence_cell_click(1)

        assert h.state.ui.selected_indexes == {1}

    @pytest.mark.asyncio()
    async def test_clicking_selected_row_deselects(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={0, 1}), sequence_click_policy=SequenceClickPolicy.EXCLUSIVE)

        await h.controller.handle_sequence_cell_click(1)

        assert h.state.ui.selected_indexes == frozenset()

    @pytest.mark.asyncio()
    async def test_multi_select_mode_accumulates(self, make_harness, make_state):
        h = make_harness(
            make_state([A, B, C], selected={0}, multi_select_mode=True),
            sequence_click_policy=SequenceClickPolicy.EXCLUSIVE,
        )

        await h.controller.handle_sequence_cell_click(2)

        assert h.state.ui.selected_indexes == {0, 2}


class TestToggles:
    @pytest.mark.asyncio()
    async def test_multi_select_mode(self, make_harness):
        h = make_harness()
        await h.controller.handle_toggle_multi_select_mode()
        assert h.state.ui.multi_select_mode is True

    @pytest.mark.asyncio()
    async def test_keyboard_panel(self, make_harness):
        h = make_harness()
        await h.controller.handle_toggle_keyboard()
        await h.controller.handle_toggle_keyboard()
        assert h.state.ui.keyboard_collapsed is False


# ── Table cell ───────────────────────────────────────────────────────


class TestTableCellClick:
    @pytest.mark.asyncio()
    async def test_numeric_cell_focuses_and_seeds(self, make_harness, make_state):
        h = make_harness(make_state([A, B], input_value="77"))

        await h.controller.handle_table_cell_click(1, "height")

        assert h.state.ui.active_cell == ActiveCell(row_index=1, column=Column.HEIGHT)
        assert h.state.ui.input_value == "1500"

    @pytest.mark.asyncio()
    async def test_accessory_cell_focuses_with_empty_buffer(self, make_harness, make_state):
        h = make_harness(make_state([A], input_value="77"))
        await h.controller.handle_table_cell_click(0, Column.MOTOR)
        assert h.state.ui.active_cell == ActiveCell(row_index=0, column=Column.MOTOR)
        assert h.state.ui.input_value == ""

    @pytest.mark.asyncio()
    async def test_type_cell_cycles(self, make_harness, make_state):
        h = make_harness(make_state([A, B]))
        await h.controller.handle_table_cell_click(1, "TYPE")
        assert h.state.items[1].fabric_type == "B2"
        assert h.state.ui.is_sum_outdated is True

    @pytest.mark.asyncio()
    async def test_sequence_cell_toggles_selection(self, make_harness, make_state):
        h = make_harness(make_state([A, B]))
        await h.controller.handle_table_cell_click(0, "sequence")
        assert h.state.ui.selected_indexes == {0}

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("column", ["price", "colour"])
    async def test_display_only_and_unknown_columns_ignored(self, make_harness, make_state, column):
        state = make_state([A, B])
        h = make_harness(state)
        await h.controller.handle_table_cell_click(0, column)
        assert h.state is state


# ── Calculation ──────────────────────────────────────────────────────


@pytest.fixture()
def calc_harness(make_harness, make_state):
    def _make(result=None, error=None):
        h = make_harness(make_state([A, B], is_sum_outdated=True))
        h.controller.product_factory = MagicMock()
        h.controller.product_factory.get_product_strategy.return_value = "roller-strategy"
        h.controller.calculation_service = MagicMock()
        if error is not None:
            h.controller.calculation_service.calculate_and_sum.side_effect = error
        else:
            h.controller.calculation_service.calculate_and_sum.return_value = result
        return h
    return _make


def _priced(first_error: CellError | None = None) -> CalculationResult:
    quote = QuoteData(
        items=(A.model_copy(update={"line_price": Decimal("120")}), B.model_copy(update={"line_price": Decimal("80")})),
        summary_total=Decimal("200"),
    )
    return CalculationResult(updated_quote_data=quote, first_error=first_error)


class TestCalculateAndSum:
    @pytest.mark.asyncio()
    async def test_success_replaces_quote_and_clears_flag(self, calc_harness):
        h = calc_harness(_priced())

        await h.controller.handle_calculate_and_sum()

        h.controller.product_factory.get_product_strategy.assert_called_once_with("roller_blind")
        quote_arg, strategy_arg = h.controller.calculation_service.calculate_and_sum.call_args.args
        assert quote_arg.items[:2] == (A, B)
        assert strategy_arg == "roller-strategy"
        assert h.state.quote_data.summary_total == Decimal("200")
        assert h.state.items[-1] == Item()
        assert h.state.ui.is_sum_outdated is False
        assert h.notifications == []

    @pytest.mark.asyncio()
    async def test_first_error_reports_and_focuses_cell(self, calc_harness):
        error = CellError(message="Height is required.", row_index=1, column=Column.HEIGHT)
        h = calc_harness(_priced(first_error=error))

        await h.controller.handle_calculate_and_sum()

        assert h.notifications == [{"message": "Height is required.", "type": "error"}]
        assert h.state.ui.active_cell == ActiveCell(row_index=1, column=Column.HEIGHT)
        assert h.state.ui.input_value == "1500"
        assert h.state.ui.is_sum_outdated is True

    @pytest.mark.asyncio()
    async def test_service_exception_is_reported(self, calc_harness):
        h = calc_harness(error=RuntimeError("matrix missing"))
        before_items = h.state.items

        await h.controller.handle_calculate_and_sum()

        assert h.notifications == [{"message": MSG_CALCULATION_FAILED, "type": "error"}]
        assert h.state.items == before_items
        assert h.state.ui.is_sum_outdated is True

    @pytest.mark.asyncio()
    async def test_missing_service_is_reported(self, make_harness):
        h = make_harness()
        await h.controller.handle_calculate_and_sum()
        assert h.notifications == [{"message": MSG_CALCULATION_FAILED, "type": "error"}]


# ── Files ────────────────────────────────────────────────────────────


class TestFileOperations:
    @pytest.mark.asyncio()
    async def test_save_success(self, make_harness):
        h = make_harness()
        h.controller.file_service = MagicMock()
        h.controller.file_service.save_to_json.return_value = FileResult(success=True, message="Quote saved.")

        await h.controller.handle_save_to_file()

        h.controller.file_service.save_to_json.assert_called_once_with(h.state.quote_data)
        assert h.notifications == [{"message": "Quote saved.", "type": "info"}]

    @pytest.mark.asyncio()
    async def test_export_failure_result(self, make_harness):
        h = make_harness()
        h.controller.file_service = MagicMock()
        h.controller.file_service.export_to_csv.return_value = FileResult(success=False, message="Nothing to export.")

        await h.controller.handle_export_csv()

        assert h.notifications == [{"message": "Nothing to export.", "type": "error"}]

    @pytest.mark.asyncio()
    async def test_save_exception(self, make_harness):
        h = make_harness()
        h.controller.file_service = MagicMock()
        h.controller.file_service.save_to_json.side_effect = OSError("disk full")

        await h.controller.handle_save_to_file()

        assert h.notifications == [{"message": "Failed to save the quote.", "type": "error"}]

    @pytest.mark.asyncio()
    async def test_missing_file_service(self, make_harness):
        h = make_harness()
        await h.controller.handle_export_csv()
        assert h.notifications == [{"message": MSG_FILE_SERVICE_MISSING, "type": "error"}]

    @pytest.mark.asyncio()
    async def test_save_then_load_triggers_loader(self, make_harness):
        h = make_harness()
        h.controller.file_service = MagicMock()
        h.controller.file_service.save_to_json.return_value = FileResult(success=True, message="Quote saved.")

        await h.controller.handle_save_then_load()

        assert [e.event_type for e in h.events] == [EventType.SHOW_NOTIFICATION, EventType.TRIGGER_FILE_LOAD]


# ── Bus wiring ───────────────────────────────────────────────────────


class TestRegister:
    def test_every_input_event_has_a_handler(self, make_harness):
        h = make_harness()
        handlers = h.controller._event_handlers()
        inputs = [t for t in EventType if t.value.startswith("input.")]
        assert set(handlers) == set(inputs)

    @pytest.mark.asyncio()
    async def test_events_reach_controller(self, make_harness, make_state):
        h = make_harness(make_state([A, B]))
        h.controller.register()

        await h.bus.fire(EventType.NUMERIC_KEY_PRESSED, key="7")
        await h.bus.fire(EventType.SEQUENCE_CELL_CLICKED, rowIndex=1)
        await h.bus.fire(EventType.USER_MOVED_ACTIVE_CELL, direction="down")

        assert h.state.ui.selected_indexes == {1}
        assert h.state.ui.active_cell == ActiveCell(row_index=1, column=Column.WIDTH)

    @pytest.mark.asyncio()
    async def test_dialog_choice_event_resolves_pending(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}))
        h.controller.register()

        await h.bus.fire(EventType.USER_REQUESTED_CLEAR_ROW)
        request = h.confirmations[0]
        delete = next(b for b in request.buttons if b.label == "Delete Row")
        await h.bus.fire(
            EventType.DIALOG_EFFECT_CHOSEN,
            requestId=str(request.id),
            effect=delete.effect.model_dump(mode="json"),
        )

        assert h.state.items == (B, Item())
        assert h.controller.pending_confirmation is None

    @pytest.mark.asyncio()
    async def test_dialog_dismissed_event(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}))
        h.controller.register()

        await h.bus.fire(EventType.USER_REQUESTED_RESET)
        await h.bus.fire(EventType.DIALOG_DISMISSED, requestId=str(h.confirmations[0].id))

        assert h.controller.pending_confirmation is None
        assert h.state.items == (A, B, Item())

"""Tests for insert, delete, clear, and the row action confirmation."""

from __future__ import annotations

import uuid

import pytest

from quickquote.controller.quick_quote import (
    MSG_CLEAR_NEEDS_ONE,
    MSG_CLEAR_NEEDS_SELECTION,
    MSG_DELETE_NEEDS_SELECTION,
    MSG_INSERT_ABOVE_EMPTY,
    MSG_INSERT_BELOW_LAST,
    MSG_INSERT_NEEDS_ONE,
)
from quickquote.models.enums import ClearRowPolicy, Column
from quickquote.schemas.dialogs import Effect, EffectKind
from quickquote.schemas.quote import ActiveCell, Item

A = Item(width=1000, height=1200, fabric_type="B1")
B = Item(width=2000, height=1500)
C = Item(width=3000, height=1800, fabric_type="B2")


def _button(request, label):
    return next(b for b in request.buttons if b.label == label)


# ── Insert ───────────────────────────────────────────────────────────


class TestInsertRow:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("selected", [(), (0, 1)])
    async def test_requires_exactly_one_selection(self, make_harness, make_state, selected):
        state = make_state([A, B, C], selected=selected)
        h = make_harness(state)

        await h.controller.handle_insert_row()

        assert h.notifications == [{"message": MSG_INSERT_NEEDS_ONE}]
        assert h.state is state

    @pytest.mark.asyncio()
    async def test_refuses_below_last_data_row(self, make_harness, make_state):
        state = make_state([A, B], selected={1})
        h = make_harness(state)

        await h.controller.handle_insert_row()

        assert h.notifications == [{"message": MSG_INSERT_BELOW_LAST}]
        assert h.state is state

    @pytest.mark.asyncio()
    async def test_refuses_above_empty_row(self, make_harness, make_state):
        state = make_state([A, Item(), C], selected={0})
        h = make_harness(state)

        await h.controller.handle_insert_row()

        assert h.notifications == [{"message": MSG_INSERT_ABOVE_EMPTY}]
        assert h.state is state

    @pytest.mark.asyncio()
    async def test_inserts_below_selected_row(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}, active=(1, Column.HEIGHT)))

        await h.controller.handle_insert_row()

        assert h.state.items == (A, Item(), B, Item())
        assert h.state.ui.active_cell == ActiveCell(row_index=1, column=Column.WIDTH)
        assert h.state.ui.selected_indexes == frozenset()
        assert h.notifications == []


# ── Delete ───────────────────────────────────────────────────────────


class TestDeleteRow:
    @pytest.mark.asyncio()
    async def test_requires_selection(self, make_harness, make_state):
        state = make_state([A, B])
        h = make_harness(state)

        await h.controller.handle_delete_row()

        assert h.notifications == [{"message": MSG_DELETE_NEEDS_SELECTION}]
        assert h.state is state

    @pytest.mark.asyncio()
    async def test_deletes_selected_rows(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={0, 2}, active=(2, Column.WIDTH)))

        await h.controller.handle_delete_row()

        assert h.state.items == (B, Item())
        assert h.state.ui.selected_indexes == frozenset()
        assert h.state.ui.active_cell == ActiveCell(row_index=1, column=Column.WIDTH)


# ── Clear / row action confirmation ──────────────────────────────────


class TestClearRowSinglePolicy:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("selected", [(), (0, 1)])
    async def test_requires_exactly_one_selection(self, make_harness, make_state, selected):
        state = make_state([A, B], selected=selected)
        h = make_harness(state)

        await h.controller.handle_clear_row()

        assert h.notifications == [{"message": MSG_CLEAR_NEEDS_ONE}]
        assert h.confirmations == []
        assert h.controller.pending_confirmation is None

    @pytest.mark.asyncio()
    async def test_offers_delete_clear_cancel(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={1}))

        await h.controller.handle_clear_row()

        (request,) = h.confirmations
        assert request.message == "Perform action on row 2. What would you like to do?"
        assert [b.label for b in request.buttons] == ["Delete Row", "Clear Row", "Cancel"]
        assert _button(request, "Delete Row").style_class == "secondary"
        assert h.controller.pending_confirmation is request

    @pytest.mark.asyncio()
    async def test_confirm_clear_keeps_row(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={1}, active=(2, Column.HEIGHT)))
        await h.controller.handle_clear_row()
        request = h.confirmations[0]

        ok = await h.controller.resolve_confirmation(request.id, _button(request, "Clear Row").effect)

        assert ok is True
        assert h.state.items == (A, Item(), C, Item())
        assert h.state.ui.active_cell == ActiveCell(row_index=1, column=Column.WIDTH)
        assert h.state.ui.selected_indexes == {1}
        assert h.controller.pending_confirmation is None

    @pytest.mark.asyncio()
    async def test_confirm_delete_removes_row(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={1}))
        await h.controller.handle_clear_row()
        request = h.confirmations[0]

        await h.controller.resolve_confirmation(request.id, _button(request, "Delete Row").effect)

        assert h.state.items == (A, C, Item())
        assert h.state.ui.selected_indexes == frozenset()

    @pytest.mark.asyncio()
    async def test_cancel_changes_nothing(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}))
        await h.controller.handle_clear_row()
        before = h.state
        request = h.confirmations[0]

        ok = await h.controller.resolve_confirmation(request.id, _button(request, "Cancel").effect)

        assert ok is True
        assert h.state is before
        assert h.controller.pending_confirmation is None


class TestClearRowMultiPolicy:
    @pytest.mark.asyncio()
    async def test_requires_some_selection(self, make_harness, make_state):
        h = make_harness(make_state([A, B]), clear_row_policy=ClearRowPolicy.MULTI)

        await h.controller.handle_clear_row()

        assert h.notifications == [{"message": MSG_CLEAR_NEEDS_SELECTION}]

    @pytest.mark.asyncio()
    async def test_accepts_several_rows(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={0, 2}), clear_row_policy=ClearRowPolicy.MULTI)

        await h.controller.handle_clear_row()
        request = h.confirmations[0]
        assert request.message == "Perform action on rows 1, 3. What would you like to do?"

        await h.controller.resolve_confirmation(request.id, _button(request, "Clear Rows").effect)

        assert h.state.items == (Item(), B, Item(), Item())
        assert h.state.ui.active_cell == ActiveCell(row_index=0, column=Column.WIDTH)


class TestConfirmationLifecycle:
    @pytest.mark.asyncio()
    async def test_unknown_request_id_is_ignored(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}))
        await h.controller.handle_clear_row()
        before = h.state
        effect = _button(h.confirmations[0], "Delete Row").effect

        ok = await h.controller.resolve_confirmation(uuid.uuid4(), effect)

        assert ok is False
        assert h.state is before
        assert h.controller.pending_confirmation is not None

    @pytest.mark.asyncio()
    async def test_effect_not_offered_is_ignored(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}))
        await h.controller.handle_clear_row()
        request = h.confirmations[0]

        forged = Effect(kind=EffectKind.DELETE_ROWS, row_indexes=(1,))
        ok = await h.controller.resolve_confirmation(request.id, forged)

        assert ok is False
        assert h.state.items == (A, B, Item())

    @pytest.mark.asyncio()
    async def test_dismiss_then_choice_is_stale(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}))
        await h.controller.handle_clear_row()
        request = h.confirmations[0]

        await h.controller.dismiss_confirmation(request.id)
        ok = await h.controller.resolve_confirmation(request.id, _button(request, "Delete Row").effect)

        assert ok is False
        assert h.state.items == (A, B, Item())

    @pytest.mark.asyncio()
    async def test_dismiss_with_other_id_keeps_pending(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}))
        await h.controller.handle_clear_row()

        await h.controller.dismiss_confirmation(uuid.uuid4())

        assert h.controller.pending_confirmation is h.confirmations[0]

    @pytest.mark.asyncio()
    async def test_new_request_supersedes_pending(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={0}))
        await h.controller.handle_clear_row()
        first = h.confirmations[0]
        await h.controller.handle_reset()

        ok = await h.controller.resolve_confirmation(first.id, _button(first, "Delete Row").effect)

        assert ok is False
        assert h.state.items == (A, B, Item())
        assert h.controller.pending_confirmation is h.confirmations[1]


class TestReset:
    @pytest.mark.asyncio()
    async def test_confirm_reset_starts_new_quote(self, make_harness, make_state):
        h = make_harness(make_state([A, B], selected={1}, multi_select_mode=True, is_sum_outdated=True))

        await h.controller.handle_reset()
        request = h.confirmations[0]
        assert [b.label for b in request.buttons] == ["Confirm Reset", "Cancel"]

        await h.controller.resolve_confirmation(request.id, _button(request, "Confirm Reset").effect)

        assert h.state.items == (Item(),)
        assert h.state.ui.selected_indexes == frozenset()
        assert h.state.ui.multi_select_mode is False
        assert h.state.ui.active_cell == ActiveCell(row_index=0, column=Column.WIDTH)


class TestPendingConfirmationAfterRowShift:
    """A dialog's row indexes go stale once rows are inserted or deleted."""

    @pytest.mark.asyncio()
    async def test_delete_choice_after_intervening_delete(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={0}))
        await h.controller.handle_clear_row()
        request = h.confirmations[0]

        await h.controller.handle_delete_row()
        ok = await h.controller.resolve_confirmation(request.id, _button(request, "Delete Row").effect)

        assert ok is False
        assert h.state.items == (B, C, Item())
        assert h.controller.pending_confirmation is None

    @pytest.mark.asyncio()
    async def test_clear_choice_after_intervening_insert(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={1}))
        await h.controller.handle_clear_row()
        request = h.confirmations[0]

        await h.controller.handle_insert_row()
        ok = await h.controller.resolve_confirmation(request.id, _button(request, "Clear Row").effect)

        assert ok is False
        assert h.state.items == (A, B, Item(), C, Item())

    @pytest.mark.asyncio()
    async def test_fabric_type_choice_after_intervening_delete(self, make_harness, make_state):
        rows = [Item(width=w) for w in (10, 20, 30, 40, 50)]
        h = make_harness(make_state(rows))
        await h.controller.handle_type_cell_long_press(3)
        request = h.confirmations[0]

        await h.controller.handle_delete_row()
        b1 = _button(request, "B1")
        ok = await h.controller.resolve_confirmation(request.id, b1.effect)

        assert ok is False
        assert [item.width for item in h.state.items] == [10, 20, 30, 50, None]
        assert all(item.fabric_type is None for item in h.state.items)

    @pytest.mark.asyncio()
    async def test_fabric_type_choice_after_intervening_insert(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C]))
        await h.controller.handle_type_cell_long_press(0)
        request = h.confirmations[0]

        await h.controller.handle_insert_row()
        ok = await h.controller.resolve_confirmation(request.id, _button(request, "B3").effect)

        assert ok is False
        assert [item.fabric_type for item in h.state.items] == ["B1", None, None, "B2", None]

    @pytest.mark.asyncio()
    async def test_edits_that_keep_rows_in_place_keep_the_dialog(self, make_harness, make_state):
        h = make_harness(make_state([A, B, C], selected={1}))
        await h.controller.handle_clear_row()
        request = h.confirmations[0]

        await h.controller.handle_cycle_type(0)
        ok = await h.controller.resolve_confirmation(request.id, _button(request, "Delete Row").effect)

        assert ok is True
        assert [item.width for item in h.state.items] == [1000, 3000, None]
        assert h.state.items[0].fabric_type == "B2"

"""QuoteStore — the single writer of quote state.

The controller never touches snapshots directly; it dispatches actions and
reads ``get_state()``. Listeners (typically the renderer) are called once
per effective transition with the new snapshot.

Usage:
    store = QuoteStore(fabric_sequence=["B1", "B2", "SN"])
    store.subscribe(renderer.render)
    store.dispatch(set_active_cell(0, Column.WIDTH))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from quickquote.schemas.quote import QuoteData, QuoteState, UiState
from quickquote.store.actions import Action
from quickquote.store.reducer import reduce

logger = logging.getLogger(__name__)

StateListener = Callable[[QuoteState], None]


class QuoteStore:
    """Holds the current snapshot and applies actions to it."""

    def __init__(
        self,
        initial_state: QuoteState | None = None,
        fabric_sequence: Sequence[str] = (),
    ) -> None:
        self._state = initial_state or QuoteState()
        self._fabric_sequence = tuple(fabric_sequence)
        self._listeners: list[StateListener] = []

    def get_state(self) -> QuoteState:
        """Current read-only snapshot."""
        return self._state

    @property
    def fabric_sequence(self) -> tuple[str, ...]:
        return self._fabric_sequence

    def dispatch(self, action: Action) -> QuoteState:
        """Apply an action and notify listeners if the snapshot changed."""
        before = self._state
        after = reduce(before, action, self._fabric_sequence)
        if after is before or after == before:
            logger.debug("Action %s left state unchanged", action.type.value)
            return before

        self._state = after
        logger.debug("Action %s changed %s", action.type.value, diff_states(before, after))

        for listener in list(self._listeners):
            try:
                listener(after)
            except Exception:
                logger.exception("State listener %r failed after %s", listener, action.type.value)
        return after

    # The store contract is apply(action) -> newState; dispatch is the name call sites use.
    apply = dispatch

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)


def diff_states(before: QuoteState, after: QuoteState) -> list[str]:
    """List the field paths that differ between two snapshots.

    Item changes are reported per cell (``quote_data.items[2].width``);
    a change in row count is reported once as ``quote_data.items``.
    """
    changes: list[str] = []

    for name in UiState.model_fields:
        if getattr(before.ui, name) != getattr(after.ui, name):
            changes.append(f"ui.{name}")

    for name in QuoteData.model_fields:
        if name == "items":
            continue
        if getattr(before.quote_data, name) != getattr(after.quote_data, name):
            changes.append(f"quote_data.{name}")

    old_items, new_items = before.items, after.items
    if len(old_items) != len(new_items):
        changes.append("quote_data.items")
    else:
        for index, (old, new) in enumerate(zip(old_items, new_items)):
            if old == new:
                continue
            for field in type(old).model_fields:
                if getattr(old, field) != getattr(new, field):
                    changes.append(f"quote_data.items[{index}].{field}")

    return changes

"""Focus policy — decides where the active cell goes next.

Pure functions over the row collection. Nothing here dispatches or raises:
every method returns a cell, falling back to the first width cell when no
better candidate exists. The controller turns the answer into a
``set_active_cell`` action.

The sentinel row is a legal focus target: typing into it is how new rows
are added.
"""

from __future__ import annotations

from collections.abc import Sequence

from quickquote.models.enums import NAVIGABLE_COLUMNS, Column, Direction
from quickquote.schemas.quote import ActiveCell, Item

_ROW_STEPS: dict[Direction, int] = {Direction.UP: -1, Direction.DOWN: 1}
_COLUMN_STEPS: dict[Direction, int] = {Direction.LEFT: -1, Direction.RIGHT: 1}


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class FocusPolicy:
    """Computes the next active cell for moves and semantic targets."""

    def __init__(self, columns: Sequence[Column] = NAVIGABLE_COLUMNS) -> None:
        self.columns = tuple(columns)

    @staticmethod
    def fallback() -> ActiveCell:
        return ActiveCell(row_index=0, column=Column.WIDTH)

    def move(self, active: ActiveCell | None, direction: Direction | str, items: Sequence[Item]) -> ActiveCell:
        """Step one cell in ``direction``, clamped at the grid edges (no wraparound)."""
        if active is None or not items:
            return self.fallback()
        try:
            direction = Direction(direction)
        except ValueError:
            return active
        last_row = len(items) - 1

        row = _clamp(active.row_index + _ROW_STEPS.get(direction, 0), 0, last_row)
        column = active.column
        if column in self.columns:
            position = self.columns.index(column) + _COLUMN_STEPS.get(direction, 0)
            column = self.columns[_clamp(position, 0, len(self.columns) - 1)]
        else:
            column = self.columns[0]
        return ActiveCell(row_index=row, column=column)

    def first_empty_cell(self, column: Column | str, items: Sequence[Item], skip_row: int | None = None) -> ActiveCell | None:
        """First row, in index order, whose ``column`` is unset. None for unknown columns."""
        try:
            column = Column(column)
        except ValueError:
            return None
        for index, item in enumerate(items):
            if index == skip_row:
                continue
            if item.value_of(column) is None:
                return ActiveCell(row_index=index, column=column)
        return None

    def focus_first_empty_cell(self, column: Column | str, items: Sequence[Item]) -> ActiveCell:
        """``W``/``H`` key target: first empty cell in the column, or the fallback row."""
        cell = self.first_empty_cell(column, items)
        if cell is not None:
            return cell
        try:
            return ActiveCell(row_index=0, column=Column(column))
        except ValueError:
            return self.fallback()

    def after_commit(self, active: ActiveCell | None, items: Sequence[Item]) -> ActiveCell:
        """Next cell after ENT: first other row missing this column, else the row below.

        The row below is clamped to the last row, which may be the sentinel: it
        takes input like any other row, and a commit there promotes it.
        """
        if active is None or not items:
            return self.fallback()
        cell = self.first_empty_cell(active.column, items, skip_row=active.row_index)
        if cell is not None:
            return cell
        row = _clamp(active.row_index + 1, 0, len(items) - 1)
        return ActiveCell(row_index=row, column=active.column)

    def after_delete(self, items: Sequence[Item]) -> ActiveCell:
        return self.focus_first_empty_cell(Column.WIDTH, items)

    def after_clear(self, row_index: int, items: Sequence[Item]) -> ActiveCell:
        if not items:
            return self.fallback()
        return ActiveCell(row_index=_clamp(row_index, 0, len(items) - 1), column=Column.WIDTH)

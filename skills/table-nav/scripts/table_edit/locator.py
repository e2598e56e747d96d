"""Resolve the current cell, row and table from a caret position."""

from typing import List, Optional

from .common import Cursor, index_of, iter_ancestors


class CellLocatorMixin:
    def _active_cursor(self, cursor: Optional[Cursor] = None) -> Optional[Cursor]:
        """Explicit cursor if given, else the selection's anchor."""
        if cursor is not None:
            return cursor
        if self.selection is None:
            return None
        return self.selection.anchor

    def is_in_table(self, cursor: Optional[Cursor] = None) -> bool:
        """
        Check whether the caret sits inside a table.

        Walks upward from the cursor node (inclusive) and accepts any table,
        data cell or header cell on the way.

        Args:
            cursor: Position to test (default: selection anchor)

        Returns:
            False when there is no cursor or it has no node
        """
        cursor = self._active_cursor(cursor)
        if cursor is None or cursor.node is None:
            return False
        for node in iter_ancestors(cursor.node):
            if self.markup.is_table(node) or self.markup.is_cell(node):
                return True
        return False

    def get_current_cell(self, cursor: Optional[Cursor] = None):
        """Find the nearest cell (data or header) containing the caret, if any."""
        cursor = self._active_cursor(cursor)
        if cursor is None or cursor.node is None:
            return None
        for node in iter_ancestors(cursor.node):
            if self.markup.is_cell(node):
                return node
        return None

    def get_parent_table(self, node):
        """Find the table containing node (node itself included), if any."""
        for ancestor in iter_ancestors(node):
            if self.markup.is_table(ancestor):
                return ancestor
        return None

    def get_row(self, cell):
        """Row owning the cell, or None for a detached or misplaced cell."""
        if cell is None:
            return None
        parent = cell.getparent()
        return parent if self.markup.is_row(parent) else None

    def get_table_rows(self, table) -> List:
        if table is None:
            return []
        return self.markup.table_rows(table)

    def get_section_rows(self, table) -> List:
        """Rows used for vertical movement: the body section's, else the table's."""
        if table is None:
            return []
        return self.markup.section_rows(table)

    def get_row_cells(self, row) -> List:
        if row is None:
            return []
        return self.markup.row_cells(row)

    def get_cell_index(self, cell) -> int:
        """Position of the cell among its row's cells (-1 if it has no row)."""
        row = self.get_row(cell)
        if row is None:
            return -1
        return index_of(self.get_row_cells(row), cell)

    def get_row_index(self, row, rows: List) -> int:
        return index_of(rows, row)

    def get_cell_at(self, row, index: int, clamp: bool = False):
        """
        Cell at a column index within a row.

        With clamp=True an index past the end resolves to the row's last cell
        (jagged rows); otherwise a missing column yields None.
        """
        cells = self.get_row_cells(row)
        if not cells or index < 0:
            return None
        if index >= len(cells):
            return cells[-1] if clamp else None
        return cells[index]

    def get_flattened_cells(self, table) -> List:
        """All cells of the table's own rows, row-major."""
        cells = []
        for row in self.get_table_rows(table):
            cells.extend(self.get_row_cells(row))
        return cells

"""
Structural table edits: insert/delete rows and columns, insert a new table.

Every operation resolves the current cell from the live selection and
returns True when the tree changed, False when it was a no-op (caret
outside any table, guard hit, malformed fragment).
"""

from .common import CELL_KIND_DATA, CELL_KIND_HEADER, insert_sibling, iter_ancestors


class GridEditMixin:
    def _resolve_cell_and_table(self):
        cell = self.get_current_cell()
        if cell is None:
            return None, None
        return cell, self.get_parent_table(cell)

    def _build_row_like(self, row, keep_kinds: bool):
        """New row with one placeholder cell per cell of `row`."""
        cells = self.get_row_cells(row)
        kinds = [
            self.markup.cell_kind(c) if keep_kinds else CELL_KIND_DATA
            for c in cells
        ]
        new_row = self.markup.new_row(row, header=CELL_KIND_HEADER in kinds)
        for source, kind in zip(cells, kinds):
            new_row.append(self.markup.new_cell(kind, like=source))
        return new_row

    def _append_cell(self, row, new_cell):
        cells = self.get_row_cells(row)
        if cells:
            insert_sibling(cells[-1], new_cell, after=True)
        else:
            row.append(new_cell)

    # ------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------

    def insert_row_above(self) -> bool:
        """Insert a row before the current one, copying its cell kinds. Caret stays put."""
        cell = self.get_current_cell()
        row = self.get_row(cell)
        if row is None or row.getparent() is None:
            return False

        new_row = self._build_row_like(row, keep_kinds=True)
        insert_sibling(row, new_row, after=False)
        if self.verbose:
            print(f"  [Grid] Inserted row above ({len(self.get_row_cells(new_row))} cells)")
        return True

    def insert_row_below(self) -> bool:
        """Insert a row of data cells after the current one and focus its first cell."""
        cell = self.get_current_cell()
        row = self.get_row(cell)
        if row is None or row.getparent() is None:
            return False

        new_row = self._build_row_like(row, keep_kinds=False)
        insert_sibling(row, new_row, after=True)
        if self.verbose:
            print(f"  [Grid] Inserted row below ({len(self.get_row_cells(new_row))} cells)")

        first = self.get_cell_at(new_row, 0)
        if first is not None:
            self.focus_cell(first)
        return True

    def delete_row(self) -> bool:
        """
        Delete the current row unless it is the table's only row.

        The caret moves first: to the same column of the previous row, or of
        the second row when the first row is deleted.
        """
        cell, table = self._resolve_cell_and_table()
        row = self.get_row(cell)
        if row is None or table is None:
            return False

        rows = self.get_table_rows(table)
        if len(rows) < 2:
            return False
        row_index = self.get_row_index(row, rows)
        if row_index < 0:
            return False

        col = self.get_cell_index(cell)
        target_row = rows[row_index - 1] if row_index > 0 else rows[1]
        target = self.get_cell_at(target_row, col, clamp=True)
        if target is not None:
            self.focus_cell(target)

        row.getparent().remove(row)
        if self.verbose:
            print(f"  [Grid] Deleted row {row_index} ({len(rows) - 1} rows left)")
        return True

    # ------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------

    def _insert_column(self, after: bool) -> bool:
        cell, table = self._resolve_cell_and_table()
        if cell is None or table is None:
            return False

        col = self.get_cell_index(cell)
        if col < 0:
            return False

        for row in self.get_table_rows(table):
            cells = self.get_row_cells(row)
            anchor = cells[col] if col < len(cells) else None
            kind = self.markup.cell_kind(anchor) if anchor is not None else CELL_KIND_DATA
            new_cell = self.markup.new_cell(kind, like=anchor)

            if after and col < len(cells) - 1:
                insert_sibling(cells[col + 1], new_cell, after=False)
            elif not after and anchor is not None:
                insert_sibling(anchor, new_cell, after=False)
            else:
                self._append_cell(row, new_cell)

        self.markup.column_inserted(table, col, after)
        if self.verbose:
            side = 'right' if after else 'left'
            print(f"  [Grid] Inserted column {side} of column {col}")
        return True

    def insert_column_left(self) -> bool:
        """Insert a column before the current column in every row."""
        return self._insert_column(after=False)

    def insert_column_right(self) -> bool:
        """Insert a column after the current column in every row."""
        return self._insert_column(after=True)

    def delete_column(self) -> bool:
        """
        Delete the current column unless the first row has a single cell.

        The caret moves first: to the previous column of the current row, or
        the next one when the first column is deleted. Rows too short to have
        the column are left alone.
        """
        cell, table = self._resolve_cell_and_table()
        if cell is None or table is None:
            return False

        rows = self.get_table_rows(table)
        if not rows or len(self.get_row_cells(rows[0])) < 2:
            return False

        col = self.get_cell_index(cell)
        if col < 0:
            return False

        row_cells = self.get_row_cells(self.get_row(cell))
        if col > 0:
            target = row_cells[col - 1]
        elif len(row_cells) > 1:
            target = row_cells[1]
        else:
            target = None
        if target is not None:
            self.focus_cell(target)

        for row in rows:
            cells = self.get_row_cells(row)
            if col < len(cells):
                row.remove(cells[col])

        self.markup.column_deleted(table, col)
        if self.verbose:
            print(f"  [Grid] Deleted column {col}")
        return True

    # ------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------

    def _top_level_block(self, node, content_root):
        """Ancestor of node that is a direct child of content_root, if any."""
        for ancestor in iter_ancestors(node):
            if ancestor.getparent() is content_root:
                return ancestor
        return None

    def insert_table(self, rows: int, cols: int) -> bool:
        """
        Insert a rows x cols table of placeholder cells and focus its first cell.

        The table goes right after the top-level block holding the caret, or
        at the end of the document content when there is no caret.
        """
        if rows < 1 or cols < 1:
            return False

        content_root = self.markup.content_root(self.root)
        table = self.markup.new_table(rows, cols)

        anchor = self.selection.anchor_node if self.selection is not None else None
        block = self._top_level_block(anchor, content_root) if anchor is not None else None
        if block is not None:
            insert_sibling(block, table, after=True)
        else:
            trailer = self._trailing_section(content_root)
            if trailer is not None:
                trailer.addprevious(table)
            else:
                content_root.append(table)

        if self.verbose:
            print(f"  [Grid] Inserted {rows}x{cols} table")
        self.focus_cell(self.get_cell_at(self.get_table_rows(table)[0], 0))
        return True

    def _trailing_section(self, content_root):
        """Last child that must stay last (w:sectPr in a Word body)."""
        if len(content_root) == 0:
            return None
        last = content_root[-1]
        if self.markup.is_trailer(last):
            return last
        return None

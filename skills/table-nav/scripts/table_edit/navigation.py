"""Keyboard navigation in and around tables (Tab, Shift+Tab, arrow keys)."""

from typing import Optional

from .common import (
    ARROW_KEYS,
    KEY_DOWN,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_TAB,
    KEY_UP,
    Cursor,
    KeyEvent,
    index_of,
    insert_sibling,
    is_element,
    next_element_sibling,
    previous_element_sibling,
    text_content,
)


class TableNavigationMixin:
    def handle_key_down(self, event: KeyEvent) -> bool:
        """
        Route a key event to the table handlers.

        Inside a table: Tab and the arrow keys. Outside: ArrowUp/ArrowDown may
        enter an adjacent table.

        Returns:
            True if the event was handled (its default action is prevented)
        """
        if self.is_in_table():
            if event.key == KEY_TAB:
                return self.handle_tab_in_table(event)
            if event.key in ARROW_KEYS:
                return self.handle_arrow_key_in_table(event)
            return False

        if event.key in (KEY_UP, KEY_DOWN):
            return self.handle_arrow_key_to_enter_table(event)
        return False

    def handle_tab_in_table(self, event: KeyEvent) -> bool:
        """
        Tab / Shift+Tab through the table's cells in row-major order.

        Tab on the last cell appends a row below it. Shift+Tab on the first
        cell stays put but still counts as handled.
        """
        if not self.is_in_table():
            return False

        cell = self.get_current_cell()
        if cell is None:
            return False
        table = self.get_parent_table(cell)
        if table is None:
            # Cell outside any table: leave the key to the host untouched
            return False

        cells = self.get_flattened_cells(table)
        index = index_of(cells, cell)
        if index < 0:
            return False

        event.prevent_default()

        if event.shift:
            if index > 0:
                self.focus_cell(cells[index - 1])
            elif self.verbose:
                print("  [Tab] Already at first cell")
        else:
            if index < len(cells) - 1:
                self.focus_cell(cells[index + 1])
            else:
                if self.verbose:
                    print("  [Tab] Last cell reached, adding a row")
                self.insert_row_below()
        return True

    def handle_arrow_key_in_table(self, event: KeyEvent) -> bool:
        """
        Arrow keys inside a table.

        Left/Right stay within the current row. Up/Down move across rows,
        clamping the column for shorter rows, and leave the table past its
        first or last row.
        """
        if not self.is_in_table():
            return False

        cell = self.get_current_cell()
        table = self.get_parent_table(cell) if cell is not None else None
        row = self.get_row(cell)
        if table is None or row is None:
            return False

        col = self.get_cell_index(cell)

        if event.key in (KEY_LEFT, KEY_RIGHT):
            step = -1 if event.key == KEY_LEFT else 1
            target = self.get_cell_at(row, col + step)
            if target is None:
                return False
            event.prevent_default()
            self.focus_cell(target)
            return True

        if event.key not in (KEY_UP, KEY_DOWN):
            return False

        rows = self.get_section_rows(table)
        row_index = self.get_row_index(row, rows)
        forward = event.key == KEY_DOWN
        if row_index < 0 and not forward:
            # e.g. ArrowUp in a thead row while moving through the tbody
            return False

        # From a row outside the body section, ArrowDown lands on its first row
        target_index = row_index + 1 if forward else row_index - 1
        if target_index < 0 or target_index >= len(rows):
            return self._exit_table(event, table, forward)

        target = self.get_cell_at(rows[target_index], col, clamp=True)
        if target is None:
            return False
        event.prevent_default()
        self.focus_cell(target)
        return True

    def _exit_table(self, event: KeyEvent, table, forward: bool) -> bool:
        """
        Move the caret to the block after (forward) or before the table.

        Loose text right next to the table (HTML mixed content) counts as that
        block. Without such a block a placeholder paragraph is created in its
        place. The caret lands at the start of the next block or the end of
        the previous one.
        """
        cursor = self._adjacent_text_cursor(table, forward)
        if cursor is not None:
            self.place_cursor(cursor.node, cursor.offset)
            event.prevent_default()
            if self.verbose:
                print(f"  [Exit] Left table {'downwards' if forward else 'upwards'} into text")
            return True

        block = self.markup.adjacent_block(table, forward)
        if block is None:
            if table.getparent() is None:
                return False
            block = self.markup.new_paragraph()
            insert_sibling(table, block, after=forward)
            if self.verbose:
                print(f"  [Exit] Created placeholder paragraph {'after' if forward else 'before'} table")

        offset = 0 if forward else len(text_content(block))
        self.place_cursor(block, offset)
        event.prevent_default()
        if self.verbose:
            print(f"  [Exit] Left table {'downwards' if forward else 'upwards'}")
        return True

    def _adjacent_text_cursor(self, table, forward: bool) -> Optional[Cursor]:
        """Caret on the parent at the edge of non-blank text touching the table, if any."""
        parent = table.getparent()
        if parent is None:
            return None

        if forward:
            text = table.tail
        else:
            previous = table.getprevious()
            text = previous.tail if previous is not None else parent.text
        if not text or not text.strip():
            return None

        # Offset of the table's first character within the parent's text
        offset = len(parent.text or '')
        for child in parent:
            if child is table:
                break
            if is_element(child):
                offset += len(text_content(child))
            offset += len(child.tail or '')
        if forward:
            offset += len(text_content(table))
        return Cursor(parent, offset)

    def handle_arrow_key_to_enter_table(self, event: KeyEvent) -> bool:
        """
        Enter a table from the block right above or below it.

        ArrowDown enters at the first cell of the first row. ArrowUp enters at
        the FIRST cell of the LAST row, whatever column the caret came from.
        """
        if event.key not in (KEY_UP, KEY_DOWN):
            return False

        anchor = self.selection.anchor_node if self.selection is not None else None
        if anchor is None:
            return False

        element = self.markup.containing_block(anchor)
        if event.key == KEY_DOWN:
            table = next_element_sibling(element)
        else:
            table = previous_element_sibling(element)
        if not self.markup.is_table(table):
            return False

        rows = self.get_section_rows(table)
        if not rows:
            return False
        entry_row = rows[0] if event.key == KEY_DOWN else rows[-1]
        target = self.get_cell_at(entry_row, 0)
        if target is None:
            return False

        event.prevent_default()
        self.focus_cell(target)
        if self.verbose:
            print(f"  [Enter] Entered table at row {0 if event.key == KEY_DOWN else len(rows) - 1}")
        return True

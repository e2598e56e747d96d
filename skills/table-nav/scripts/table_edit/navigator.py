"""Table navigator composed from focused mixins."""

from typing import Optional

from .cell_focus import CellFocusMixin
from .common import Cursor, format_text_preview, index_of, local_name, text_content
from .grid_ops import GridEditMixin
from .locator import CellLocatorMixin
from .markup import TableMarkup, markup_for
from .navigation import TableNavigationMixin
from .selection import Selection


class TableNavigator(CellLocatorMixin, CellFocusMixin, GridEditMixin, TableNavigationMixin):
    def __init__(self, root, selection: Selection = None,
                 markup: TableMarkup = None, verbose: bool = False):
        """
        Args:
            root: Document root element (HTML element or Word body/document)
            selection: Host caret primitive (default: a fresh Selection on root)
            markup: Dialect describing the tree (default: detected from root)
            verbose: Print progress lines
        """
        self.root = root
        self.markup = markup if markup is not None else markup_for(root)
        self.selection = selection if selection is not None else Selection(root)
        self.verbose = verbose

    def get_tables(self):
        """Top-level and nested tables under the root, in document order."""
        return [
            elem for elem in self.root.iter(self.markup.table_tag)
            if self.markup.is_table(elem)
        ]

    def describe_cursor(self, cursor: Optional[Cursor] = None) -> str:
        """Human-readable caret position for logs and CLI output."""
        cursor = self._active_cursor(cursor)
        if cursor is None or cursor.node is None:
            return 'no cursor'

        cell = self.get_current_cell(cursor)
        if cell is not None:
            table = self.get_parent_table(cell)
            row = self.get_row(cell)
            table_index = index_of(self.get_tables(), table)
            row_index = self.get_row_index(row, self.get_table_rows(table))
            return f"table {table_index}, row {row_index}, col {self.get_cell_index(cell)}"

        preview = format_text_preview(text_content(cursor.node))
        return f"outside table: <{local_name(cursor.node)}> '{preview}'"

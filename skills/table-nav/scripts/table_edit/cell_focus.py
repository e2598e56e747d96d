"""Move the edit caret into a table cell."""

from .common import Cursor, FocusResult, format_text_preview, text_content


class CellFocusMixin:
    def focus_cell(self, cell) -> FocusResult:
        """
        Place the caret in a cell and give it input focus.

        Non-empty cells keep their content and get the caret at the end.
        Empty cells receive a single placeholder unit with the caret at
        offset 0. A failing focus primitive does not abort the move: the
        caret is already placed and the failure is reported in the result.

        Args:
            cell: Target cell element

        Returns:
            FocusResult; success is False when the cell is missing or could
            not take focus
        """
        if cell is None:
            return FocusResult(False, None, error_message="No target cell")

        text = text_content(cell)
        if text:
            cursor = Cursor(cell, len(text))
        else:
            self.markup.fill_placeholder(cell)
            cursor = Cursor(cell, 0)

        self.selection.remove_all_ranges()
        self.selection.add_range(cursor)
        self.markup.make_editable(cell)

        try:
            self.selection.focus(cell)
        except Exception as e:
            if self.verbose:
                print(f"  [Warning] Focus failed, caret kept: {e}")
            return FocusResult(False, cell, cursor, str(e))

        if self.verbose:
            print(f"  [Focus] Cell '{format_text_preview(text_content(cell))}' at offset {cursor.offset}")
        return FocusResult(True, cell, cursor)

    def place_cursor(self, node, offset: int = 0) -> Cursor:
        """Collapse the selection to (node, offset) without moving input focus."""
        self.selection.collapse(node, offset)
        return self.selection.anchor

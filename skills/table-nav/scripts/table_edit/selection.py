"""
Caret / selection primitive consumed by the table navigator.

Hosts embedding the navigator normally pass their own object with the same
surface; this implementation backs the CLI and the tests.
"""

from typing import List, Optional

from .common import Cursor, iter_ancestors


class FocusError(Exception):
    """Raised when an element cannot receive input focus."""


class Selection:
    """Collapsed caret ranges plus the element holding input focus."""

    def __init__(self, root=None):
        self.root = root
        self._ranges: List[Cursor] = []
        self.focused = None

    @property
    def range_count(self) -> int:
        return len(self._ranges)

    @property
    def anchor(self) -> Optional[Cursor]:
        """Cursor of the first range, or None when nothing is selected."""
        return self._ranges[0] if self._ranges else None

    @property
    def anchor_node(self):
        anchor = self.anchor
        return anchor.node if anchor is not None else None

    def get_range_at(self, index: int) -> Cursor:
        return self._ranges[index]

    def remove_all_ranges(self):
        self._ranges = []

    def add_range(self, cursor: Cursor):
        self._ranges.append(cursor)

    def collapse(self, node, offset: int = 0):
        """Replace the active ranges with a single caret at (node, offset)."""
        self.remove_all_ranges()
        self.add_range(Cursor(node, offset))

    def focus(self, element):
        """
        Move input focus to element.

        Raises:
            FocusError: If element is None or no longer attached under root
        """
        if element is None:
            raise FocusError("Cannot focus a missing element")
        if self.root is not None:
            attached = any(a is self.root for a in iter_ancestors(element))
            if not attached:
                raise FocusError(f"Element <{element.tag}> is detached from the document")
        self.focused = element

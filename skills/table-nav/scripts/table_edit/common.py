#!/usr/bin/env python3
"""
ABOUTME: Shared constants, data classes and tree helpers for table navigation
ABOUTME: Cursor / KeyEvent / FocusResult live here so every mixin can import them
"""

from dataclasses import dataclass
from typing import Iterator, Optional


# ============================================================
# Constants
# ============================================================

NS = {
    'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main',
    'w14': 'http://schemas.microsoft.com/office/word/2010/wordml',
}

# Minimal non-empty content that keeps an empty cell or paragraph focusable
# (the &nbsp; an HTML editor would insert)
PLACEHOLDER = '\xa0'

CELL_KIND_DATA = 'data'
CELL_KIND_HEADER = 'header'

KEY_TAB = 'Tab'
KEY_UP = 'ArrowUp'
KEY_DOWN = 'ArrowDown'
KEY_LEFT = 'ArrowLeft'
KEY_RIGHT = 'ArrowRight'

ARROW_KEYS = (KEY_UP, KEY_DOWN, KEY_LEFT, KEY_RIGHT)
VERTICAL_KEYS = (KEY_UP, KEY_DOWN)

# ============================================================
# Data Classes
# ============================================================

@dataclass
class Cursor:
    """Caret position: an element plus a character offset into its text content"""
    node: object = None
    offset: int = 0


@dataclass
class KeyEvent:
    """Keyboard event as delivered by the host editor"""
    key: str
    shift: bool = False
    default_prevented: bool = False

    def prevent_default(self):
        self.default_prevented = True

    @classmethod
    def parse(cls, spec: str) -> 'KeyEvent':
        """
        Build an event from a key spec such as 'Tab', 'Shift+Tab' or 'ArrowUp'.

        Raises:
            ValueError: If the spec is empty
        """
        parts = [p.strip() for p in (spec or '').split('+') if p.strip()]
        if not parts:
            raise ValueError(f"Empty key spec: {spec!r}")
        modifiers = {p.lower() for p in parts[:-1]}
        return cls(key=parts[-1], shift='shift' in modifiers)


@dataclass
class FocusResult:
    """Result of moving the edit cursor into a cell"""
    success: bool
    cell: object = None
    cursor: Optional[Cursor] = None
    error_message: Optional[str] = None


# ============================================================
# Helper Functions
# ============================================================

def is_element(node) -> bool:
    """True for real elements (comments and processing instructions have non-string tags)."""
    return node is not None and isinstance(node.tag, str)


def iter_ancestors(node) -> Iterator:
    """Yield node itself and then each of its ancestors up to the root."""
    while node is not None:
        yield node
        node = node.getparent()


def next_element_sibling(node):
    """Following sibling element, skipping comments and processing instructions."""
    sibling = node.getnext()
    while sibling is not None and not is_element(sibling):
        sibling = sibling.getnext()
    return sibling


def previous_element_sibling(node):
    """Preceding sibling element, skipping comments and processing instructions."""
    sibling = node.getprevious()
    while sibling is not None and not is_element(sibling):
        sibling = sibling.getprevious()
    return sibling


def text_content(node) -> str:
    """Concatenated text of an element subtree (the DOM's textContent)."""
    if node is None:
        return ''
    return ''.join(node.itertext())


def insert_sibling(ref, new_elem, after: bool):
    """
    Insert new_elem next to ref, keeping the pretty-print indentation.

    lxml keeps ref.tail attached to ref, so the whitespace that separated ref
    from its neighbour is copied onto the new element.
    """
    tail = ref.tail if ref.tail is not None and not ref.tail.strip() else None
    if after:
        ref.addnext(new_elem)
    else:
        ref.addprevious(new_elem)
    if tail is not None:
        new_elem.tail = tail


def local_name(node) -> str:
    """Tag name without namespace ('{ns}tc' -> 'tc')."""
    if not is_element(node):
        return ''
    return node.tag.split('}')[-1]


def format_text_preview(text: str, max_len: int = 30) -> str:
    """
    Format text for log output: remove newlines and truncate.

    Args:
        text: Text to format
        max_len: Maximum length before truncation

    Returns:
        Clean, truncated text with "..." suffix if truncated
    """
    clean = text.replace('\n', ' ').replace('\r', '').replace('\t', ' ')
    clean = clean.replace(PLACEHOLDER, ' ')
    # Collapse multiple spaces
    while '  ' in clean:
        clean = clean.replace('  ', ' ')
    clean = clean.strip()
    if len(clean) > max_len:
        return clean[:max_len] + "..."
    return clean


def index_of(items, target) -> int:
    """Identity-based index (-1 if absent); lxml elements do not define equality."""
    for i, item in enumerate(items):
        if item is target:
            return i
    return -1

#!/usr/bin/env python3
"""
ABOUTME: Replays table navigation keys and grid commands on an HTML or DOCX document
ABOUTME: Places the caret in a table cell (or block), runs each action, saves the result
"""

import argparse
import sys
from pathlib import Path
from typing import List, Tuple

import lxml.html
from docx import Document

from table_edit.common import ARROW_KEYS, KEY_TAB, KeyEvent, text_content
from table_edit.markup import HtmlMarkup, WordMarkup
from table_edit.navigator import TableNavigator

HTML_SUFFIXES = {'.html', '.htm'}
DOCX_SUFFIXES = {'.docx'}

# Command action -> navigator method
GRID_COMMANDS = {
    'insert-row-above': 'insert_row_above',
    'insert-row-below': 'insert_row_below',
    'insert-column-left': 'insert_column_left',
    'insert-column-right': 'insert_column_right',
    'delete-row': 'delete_row',
    'delete-column': 'delete_column',
}

INSERT_TABLE_PREFIX = 'insert-table='


class NavDocument:
    """Loaded document: root element for the navigator plus a way to save it."""

    def __init__(self, path: Path):
        self.path = path
        suffix = path.suffix.lower()
        if suffix in DOCX_SUFFIXES:
            self.doc = Document(str(path))
            self.tree = None
            self.root = self.doc.element.body
            self.markup = WordMarkup()
        elif suffix in HTML_SUFFIXES:
            self.doc = None
            self.tree = lxml.html.parse(str(path))
            self.root = self.tree.getroot()
            self.markup = HtmlMarkup()
        else:
            raise ValueError(f"Unsupported file type '{path.suffix}' (expected .html, .htm or .docx)")

    def save(self, output_path: Path):
        if self.doc is not None:
            self.doc.save(str(output_path))
        else:
            self.tree.write(str(output_path), method='html', encoding='utf-8')


def parse_cell_spec(spec: str) -> Tuple[int, int]:
    """Parse 'ROW,COL' into a tuple of ints."""
    try:
        row, col = (int(part) for part in spec.split(','))
    except ValueError:
        raise ValueError(f"Invalid --cell '{spec}' (expected ROW,COL)")
    return row, col


def parse_table_size(spec: str) -> Tuple[int, int]:
    """Parse 'RxC' (as in insert-table=3x4) into a tuple of ints."""
    try:
        rows, cols = (int(part) for part in spec.lower().split('x'))
    except ValueError:
        raise ValueError(f"Invalid table size '{spec}' (expected ROWSxCOLS)")
    return rows, cols


def validate_action(action: str):
    """Raise ValueError for actions that are neither a known key nor a command."""
    if action in GRID_COMMANDS:
        return
    if action.startswith(INSERT_TABLE_PREFIX):
        parse_table_size(action[len(INSERT_TABLE_PREFIX):])
        return
    event = KeyEvent.parse(action)
    if event.key != KEY_TAB and event.key not in ARROW_KEYS:
        raise ValueError(f"Unknown action '{action}'")


def place_initial_cursor(navigator: TableNavigator, table_index: int,
                         cell_spec: str = None, block_index: int = None):
    """
    Put the caret at the end of a table cell or of a top-level block.

    Raises:
        ValueError: If the requested table, cell or block does not exist
    """
    if block_index is not None:
        content_root = navigator.markup.content_root(navigator.root)
        blocks = [child for child in content_root if isinstance(child.tag, str)]
        if not 0 <= block_index < len(blocks):
            raise ValueError(f"Block {block_index} not found ({len(blocks)} blocks)")
        block = blocks[block_index]
        navigator.place_cursor(block, len(text_content(block)))
        return

    tables = navigator.get_tables()
    if not 0 <= table_index < len(tables):
        raise ValueError(f"Table {table_index} not found ({len(tables)} tables)")
    row_index, col_index = parse_cell_spec(cell_spec or '0,0')
    rows = navigator.get_table_rows(tables[table_index])
    if not 0 <= row_index < len(rows):
        raise ValueError(f"Row {row_index} not found in table {table_index}")
    cell = navigator.get_cell_at(rows[row_index], col_index)
    if cell is None:
        raise ValueError(f"Cell {row_index},{col_index} not found in table {table_index}")
    navigator.place_cursor(cell, len(text_content(cell)))


def run_action(navigator: TableNavigator, action: str) -> bool:
    """Run one key or command action; returns whether it was handled / changed the table."""
    if action in GRID_COMMANDS:
        return getattr(navigator, GRID_COMMANDS[action])()
    if action.startswith(INSERT_TABLE_PREFIX):
        rows, cols = parse_table_size(action[len(INSERT_TABLE_PREFIX):])
        return navigator.insert_table(rows, cols)
    return navigator.handle_key_down(KeyEvent.parse(action))


def run_actions(navigator: TableNavigator, actions: List[str]) -> List[Tuple[str, bool]]:
    results = []
    for action in actions:
        handled = run_action(navigator, action)
        results.append((action, handled))
        if navigator.verbose:
            status = 'handled' if handled else 'not handled'
            print(f"  {action}: {status} -> {navigator.describe_cursor()}")
    return results


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Replay table navigation keys and grid commands on a document"
    )
    parser.add_argument('input_file', help='HTML (.html/.htm) or Word (.docx) document')
    parser.add_argument('actions', nargs='*',
                        help="Keys (Tab, Shift+Tab, ArrowUp, ...) or commands "
                             "(insert-row-above, delete-column, insert-table=2x3, ...)")
    parser.add_argument('-o', '--output', help='Output file path (default: <name>_nav<suffix>)')
    parser.add_argument('--table', type=int, default=0,
                        help='Index of the table holding the initial caret (default: 0)')
    start = parser.add_mutually_exclusive_group()
    start.add_argument('--cell', help='Initial caret cell as ROW,COL (default: 0,0)')
    start.add_argument('--block', type=int,
                       help='Put the initial caret at the end of this top-level block instead')
    parser.add_argument('--dry-run', action='store_true',
                        help='Run actions but do not save')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')

    args = parser.parse_args()

    try:
        for action in args.actions:
            validate_action(action)

        input_path = Path(args.input_file)
        output_path = Path(args.output) if args.output else \
            input_path.with_stem(input_path.stem + '_nav')

        document = NavDocument(input_path)
        navigator = TableNavigator(document.root, markup=document.markup, verbose=args.verbose)
        place_initial_cursor(navigator, args.table, args.cell, args.block)

        print(f"Source file: {input_path}")
        if not args.dry_run:
            print(f"Output to: {output_path}")
        print(f"Start: {navigator.describe_cursor()}")
        if args.verbose:
            print("-" * 50)

        results = run_actions(navigator, args.actions)
        handled_count = sum(1 for _, handled in results if handled)

        print("-" * 50)
        print(f"Completed: {len(results)} actions, {handled_count} handled")
        print(f"Cursor: {navigator.describe_cursor()}")

        if not args.dry_run:
            document.save(output_path)
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

"""Markup dialects: tag names and element factories for HTML and WordprocessingML trees."""

import copy
from typing import List, Optional

import lxml.html
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from .common import (
    CELL_KIND_DATA,
    CELL_KIND_HEADER,
    NS,
    PLACEHOLDER,
    is_element,
    iter_ancestors,
    next_element_sibling,
    previous_element_sibling,
)


class TableMarkup:
    """
    Describes how tables are spelled in one document dialect.

    Subclasses set the tag attributes and implement the element factories;
    the traversal helpers here only depend on the tag names.
    """

    name = ''
    table_tag = ''
    row_tag = ''
    cell_tags = ()
    section_tags = ()
    body_tag = None

    # ------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------

    def is_table(self, node) -> bool:
        return is_element(node) and node.tag == self.table_tag

    def is_row(self, node) -> bool:
        return is_element(node) and node.tag == self.row_tag

    def is_cell(self, node) -> bool:
        return is_element(node) and node.tag in self.cell_tags

    def cell_kind(self, cell) -> str:
        raise NotImplementedError

    # ------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------

    def table_rows(self, table) -> List:
        """Rows owned by this table in document order (nested tables excluded)."""
        rows = []
        for child in table:
            if self.is_row(child):
                rows.append(child)
            elif is_element(child) and child.tag in self.section_tags:
                rows.extend(c for c in child if self.is_row(c))
        return rows

    def body_section(self, table):
        if self.body_tag is None:
            return None
        for child in table:
            if is_element(child) and child.tag == self.body_tag:
                return child
        return None

    def section_rows(self, table) -> List:
        """Rows of the body section, or all of the table's rows when it has none."""
        body = self.body_section(table)
        if body is None:
            return self.table_rows(table)
        return [c for c in body if self.is_row(c)]

    def row_cells(self, row) -> List:
        return [c for c in row if self.is_cell(c)]

    def content_root(self, root):
        """Element whose children are the document's top-level blocks."""
        return root

    def containing_block(self, node):
        """Element the caret belongs to when looking for neighbouring blocks."""
        return node

    def is_trailer(self, node) -> bool:
        """True for elements that close the content and are not content themselves."""
        return False

    def is_property(self, node) -> bool:
        """True for elements describing their parent (cell or paragraph properties)."""
        return False

    def adjacent_block(self, table, forward: bool):
        """Sibling content right after (forward) or before the table, if any."""
        step = next_element_sibling if forward else previous_element_sibling
        block = step(table)
        while block is not None and self.is_property(block):
            block = step(block)
        if block is not None and self.is_trailer(block):
            return None
        return block

    # ------------------------------------------------------------
    # Factories and in-place edits
    # ------------------------------------------------------------

    def new_cell(self, kind: str, like=None):
        raise NotImplementedError

    def new_row(self, template=None, header: bool = False):
        raise NotImplementedError

    def new_paragraph(self):
        raise NotImplementedError

    def new_table(self, rows: int, cols: int):
        raise NotImplementedError

    def fill_placeholder(self, cell):
        raise NotImplementedError

    def make_editable(self, cell):
        pass

    def column_inserted(self, table, index: int, after: bool):
        pass

    def column_deleted(self, table, index: int):
        pass


class HtmlMarkup(TableMarkup):
    """HTML tables (table/thead/tbody/tfoot/tr/td/th) parsed with lxml.html."""

    name = 'html'
    table_tag = 'table'
    row_tag = 'tr'
    cell_tags = ('td', 'th')
    section_tags = ('thead', 'tbody', 'tfoot')
    body_tag = 'tbody'

    def cell_kind(self, cell) -> str:
        return CELL_KIND_HEADER if cell.tag == 'th' else CELL_KIND_DATA

    def content_root(self, root):
        if root.tag == 'html':
            body = root.find('body')
            if body is not None:
                return body
        return root

    def new_cell(self, kind: str, like=None):
        cell = lxml.html.Element('th' if kind == CELL_KIND_HEADER else 'td')
        cell.text = PLACEHOLDER
        return cell

    def new_row(self, template=None, header: bool = False):
        # Shallow clone: attributes survive, children do not; ids must stay unique
        attrib = {}
        if template is not None:
            attrib = {k: v for k, v in template.attrib.items() if k != 'id'}
        return lxml.html.Element('tr', attrib)

    def new_paragraph(self):
        p = lxml.html.Element('p')
        p.text = PLACEHOLDER
        return p

    def new_table(self, rows: int, cols: int):
        table = lxml.html.Element('table')
        tbody = lxml.html.Element('tbody')
        table.append(tbody)
        for _ in range(rows):
            tr = self.new_row()
            for _ in range(cols):
                tr.append(self.new_cell(CELL_KIND_DATA))
            tbody.append(tr)
        return table

    def fill_placeholder(self, cell):
        for child in list(cell):
            cell.remove(child)
        cell.text = PLACEHOLDER

    def make_editable(self, cell):
        if cell.get('contenteditable') != 'true':
            cell.set('contenteditable', 'true')


class WordMarkup(TableMarkup):
    """
    WordprocessingML tables (w:tbl/w:tr/w:tc) from a python-docx document body.

    Word has no header cell element: a cell is a header cell when its row is
    marked as a repeating header row (w:trPr/w:tblHeader).
    """

    name = 'docx'
    table_tag = qn('w:tbl')
    row_tag = qn('w:tr')
    cell_tags = (qn('w:tc'),)
    property_tags = (qn('w:tblPr'), qn('w:trPr'), qn('w:tcPr'), qn('w:pPr'))

    def cell_kind(self, cell) -> str:
        row = cell.getparent()
        if row is not None and self._is_header_row(row):
            return CELL_KIND_HEADER
        return CELL_KIND_DATA

    def _is_header_row(self, row) -> bool:
        trPr = row.find(qn('w:trPr'))
        if trPr is None:
            return False
        tbl_header = trPr.find(qn('w:tblHeader'))
        if tbl_header is None:
            return False
        return tbl_header.get(qn('w:val')) not in ('0', 'false', 'off')

    def content_root(self, root):
        if root.tag == qn('w:document'):
            body = root.find(qn('w:body'))
            if body is not None:
                return body
        return root

    def containing_block(self, node):
        for ancestor in iter_ancestors(node):
            if ancestor.tag == qn('w:p'):
                return ancestor
        return node

    def is_trailer(self, node) -> bool:
        # Section properties close the body
        return is_element(node) and node.tag == qn('w:sectPr')

    def is_property(self, node) -> bool:
        return is_element(node) and node.tag in self.property_tags

    def new_cell(self, kind: str, like=None):
        # kind is carried by the row (w:tblHeader), not by the cell
        tc = OxmlElement('w:tc')
        if like is not None:
            tcPr = like.find(qn('w:tcPr'))
            if tcPr is not None:
                tcPr = copy.deepcopy(tcPr)
                for tag in ('w:vMerge', 'w:gridSpan'):
                    merge = tcPr.find(qn(tag))
                    if merge is not None:
                        tcPr.remove(merge)
                tc.append(tcPr)
        tc.append(self.new_paragraph())
        return tc

    def new_row(self, template=None, header: bool = False):
        tr = OxmlElement('w:tr')
        if template is not None:
            skip = (f'{{{NS["w14"]}}}paraId', f'{{{NS["w14"]}}}textId')
            for key, value in template.attrib.items():
                if key not in skip:
                    tr.set(key, value)
        if header:
            trPr = OxmlElement('w:trPr')
            trPr.append(OxmlElement('w:tblHeader'))
            tr.append(trPr)
        return tr

    def new_paragraph(self):
        p = OxmlElement('w:p')
        r = OxmlElement('w:r')
        t = OxmlElement('w:t')
        t.set(qn('xml:space'), 'preserve')
        t.text = PLACEHOLDER
        r.append(t)
        p.append(r)
        return p

    def new_table(self, rows: int, cols: int):
        tbl = OxmlElement('w:tbl')
        tblPr = OxmlElement('w:tblPr')
        tblW = OxmlElement('w:tblW')
        tblW.set(qn('w:type'), 'auto')
        tblW.set(qn('w:w'), '0')
        tblPr.append(tblW)
        tbl.append(tblPr)
        grid = OxmlElement('w:tblGrid')
        for _ in range(cols):
            grid.append(OxmlElement('w:gridCol'))
        tbl.append(grid)
        for _ in range(rows):
            tr = self.new_row()
            for _ in range(cols):
                tr.append(self.new_cell(CELL_KIND_DATA))
            tbl.append(tr)
        return tbl

    def fill_placeholder(self, cell):
        for child in list(cell):
            if child.tag != qn('w:tcPr'):
                cell.remove(child)
        cell.append(self.new_paragraph())

    def _grid_cols(self, table):
        grid = table.find(qn('w:tblGrid'))
        if grid is None:
            return None, []
        return grid, grid.findall(qn('w:gridCol'))

    def column_inserted(self, table, index: int, after: bool):
        grid, cols = self._grid_cols(table)
        if not cols:
            return
        ref = cols[min(index, len(cols) - 1)]
        new_col = copy.deepcopy(ref)
        if after:
            ref.addnext(new_col)
        else:
            ref.addprevious(new_col)

    def column_deleted(self, table, index: int):
        grid, cols = self._grid_cols(table)
        # Keep at least one gridCol; the delete guard keeps one column anyway
        if index < len(cols) and len(cols) > 1:
            grid.remove(cols[index])


def markup_for(root) -> TableMarkup:
    """Pick the dialect from the root element's namespace."""
    if is_element(root) and root.tag.startswith(f'{{{NS["w"]}}}'):
        return WordMarkup()
    return HtmlMarkup()

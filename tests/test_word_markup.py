#!/usr/bin/env python3
"""
Tests for table navigation over WordprocessingML (python-docx document bodies).

Word has no <th>: header cells are cells of rows marked with w:tblHeader,
and column edits must keep w:tblGrid in step.
"""

import lxml.html
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from _table_nav_helpers import (
    PLACEHOLDER,
    Cursor,
    TableNavigator,
    create_word_document,
    key,
    mark_header_row,
    text_content,
)
from table_edit.markup import HtmlMarkup, WordMarkup, markup_for  # type: ignore


def word_navigator_at(table, row: int, col: int) -> TableNavigator:
    body = table._tbl.getparent()
    nav = TableNavigator(body)
    tc = table.cell(row, col)._tc
    nav.place_cursor(tc, len(text_content(tc)))
    return nav


def word_grid(nav, tbl):
    return [[text_content(tc) for tc in nav.get_row_cells(tr)] for tr in nav.get_table_rows(tbl)]


def grid_col_count(tbl) -> int:
    return len(tbl.find(qn('w:tblGrid')).findall(qn('w:gridCol')))


class TestDialectDetection:
    def test_word_body_selects_word_markup(self):
        doc, _ = create_word_document([['a']])
        assert isinstance(markup_for(doc.element.body), WordMarkup)
        assert isinstance(markup_for(doc.element), WordMarkup)

    def test_html_root_selects_html_markup(self):
        assert isinstance(markup_for(lxml.html.fragment_fromstring('<div></div>')), HtmlMarkup)

    def test_content_root_of_document_is_body(self):
        doc, _ = create_word_document([['a']])
        assert WordMarkup().content_root(doc.element) is doc.element.body


class TestWordNavigation:
    def test_tab_moves_through_cells(self):
        doc, table = create_word_document([['a', 'b'], ['c', 'd']])
        nav = word_navigator_at(table, 0, 1)

        assert nav.handle_key_down(key('Tab')) is True
        assert text_content(nav.get_current_cell()) == 'c'

    def test_caret_in_run_resolves_cell(self):
        doc, table = create_word_document([['a', 'b']])
        nav = TableNavigator(doc.element.body)
        t_elem = table.cell(0, 1)._tc.find('.//' + qn('w:t'))
        nav.place_cursor(t_elem, 1)

        assert nav.is_in_table() is True
        assert nav.get_current_cell() is table.cell(0, 1)._tc

    def test_tab_on_last_cell_appends_row_with_placeholders(self):
        doc, table = create_word_document([['a', 'b'], ['c', 'd']])
        nav = word_navigator_at(table, 1, 1)

        nav.handle_key_down(key('Tab'))

        assert word_grid(nav, table._tbl) == [['a', 'b'], ['c', 'd'], [PLACEHOLDER, PLACEHOLDER]]
        new_tc = nav.get_current_cell()
        assert new_tc.find(qn('w:p')) is not None
        assert len(table.rows) == 3

    def test_focus_empty_cell_keeps_cell_properties(self):
        doc, table = create_word_document([['a', '']])
        nav = TableNavigator(doc.element.body)
        tc = table.cell(0, 1)._tc
        had_tcPr = tc.find(qn('w:tcPr')) is not None

        result = nav.focus_cell(tc)

        assert result.success is True
        assert result.cursor.offset == 0
        assert text_content(tc) == PLACEHOLDER
        assert len(tc.findall(qn('w:p'))) == 1
        assert (tc.find(qn('w:tcPr')) is not None) == had_tcPr

    def test_arrow_down_from_last_row_creates_paragraph_before_sectPr(self):
        doc, table = create_word_document([['a'], ['b']])
        nav = word_navigator_at(table, 1, 0)
        tbl = table._tbl

        assert nav.handle_key_down(key('ArrowDown')) is True

        created = tbl.getnext()
        assert created.tag == qn('w:p')
        assert text_content(created) == PLACEHOLDER
        assert created.getnext().tag == qn('w:sectPr')
        assert nav.selection.anchor.node is created
        assert nav.is_in_table() is False

    def test_arrow_up_enters_from_paragraph_below(self):
        doc, table = create_word_document([['a', 'b'], ['c', 'd']])
        para = doc.add_paragraph('After')
        nav = TableNavigator(doc.element.body)
        # Caret inside the run text, not on the paragraph itself
        nav.place_cursor(para._p.find('.//' + qn('w:t')), 2)

        assert nav.handle_key_down(key('ArrowUp')) is True
        assert nav.get_current_cell() is table.cell(1, 0)._tc

    def test_arrow_down_enters_from_intro_paragraph(self):
        doc, table = create_word_document([['a', 'b']], intro='Intro')
        nav = TableNavigator(doc.element.body)
        intro_p = table._tbl.getprevious()
        nav.place_cursor(intro_p, 0)

        assert nav.handle_key_down(key('ArrowDown')) is True
        assert nav.get_current_cell() is table.cell(0, 0)._tc

    def test_describe_cursor(self):
        doc, table = create_word_document([['a', 'b'], ['c', 'd']])
        nav = word_navigator_at(table, 1, 0)
        assert nav.describe_cursor() == 'table 0, row 1, col 0'


    def test_arrow_up_out_of_nested_table_skips_cell_properties(self):
        doc, table = create_word_document([['outer']])
        outer_tc = table.cell(0, 0)._tc
        tcPr = outer_tc.get_or_add_tcPr()
        for p in outer_tc.findall(qn('w:p')):
            outer_tc.remove(p)
        inner = WordMarkup().new_table(1, 1)
        outer_tc.append(inner)
        nav = TableNavigator(doc.element.body)
        nav.place_cursor(inner.find('.//' + qn('w:tc')), 0)

        assert nav.handle_key_down(key('ArrowUp')) is True

        assert [child.tag for child in outer_tc] == [qn('w:tcPr'), qn('w:p'), qn('w:tbl')]
        created = outer_tc[1]
        assert outer_tc[0] is tcPr
        assert nav.selection.anchor.node is created
        assert nav.get_current_cell() is outer_tc

    def test_property_elements_are_not_blocks(self):
        markup = WordMarkup()

        assert markup.is_property(OxmlElement('w:tcPr')) is True
        assert markup.is_property(OxmlElement('w:pPr')) is True
        assert markup.is_property(OxmlElement('w:p')) is False
        assert HtmlMarkup().is_property(lxml.html.Element('p')) is False


class TestWordGridEdits:
    def test_header_kind_follows_row(self):
        doc, table = create_word_document([['H1', 'H2'], ['a', 'b']])
        mark_header_row(table.rows[0]._tr)
        nav = word_navigator_at(table, 0, 0)
        markup = nav.markup

        assert markup.cell_kind(table.cell(0, 0)._tc) == 'header'
        assert markup.cell_kind(table.cell(1, 0)._tc) == 'data'

    def test_insert_row_above_header_row_is_header(self):
        doc, table = create_word_document([['H1', 'H2'], ['a', 'b']])
        mark_header_row(table.rows[0]._tr)
        nav = word_navigator_at(table, 0, 0)

        nav.insert_row_above()

        rows = nav.get_table_rows(table._tbl)
        assert len(rows) == 3
        new_tc = nav.get_row_cells(rows[0])[0]
        assert nav.markup.cell_kind(new_tc) == 'header'

    def test_insert_row_below_is_data_row(self):
        doc, table = create_word_document([['H1', 'H2'], ['a', 'b']])
        mark_header_row(table.rows[0]._tr)
        nav = word_navigator_at(table, 0, 0)

        nav.insert_row_below()

        rows = nav.get_table_rows(table._tbl)
        new_tc = nav.get_row_cells(rows[1])[0]
        assert nav.markup.cell_kind(new_tc) == 'data'
        assert rows[1].find(qn('w:trPr')) is None

    def test_new_row_drops_paragraph_ids(self):
        doc, table = create_word_document([['a']])
        tr = table.rows[0]._tr
        tr.set('{http://schemas.microsoft.com/office/word/2010/wordml}paraId', '0000000A')
        nav = word_navigator_at(table, 0, 0)

        nav.insert_row_below()

        new_tr = nav.get_table_rows(table._tbl)[1]
        assert new_tr.get('{http://schemas.microsoft.com/office/word/2010/wordml}paraId') is None

    def test_insert_column_updates_grid(self):
        doc, table = create_word_document([['a', 'b'], ['c', 'd']])
        nav = word_navigator_at(table, 0, 1)
        assert grid_col_count(table._tbl) == 2

        nav.insert_column_right()

        assert grid_col_count(table._tbl) == 3
        assert word_grid(nav, table._tbl) == [['a', 'b', PLACEHOLDER], ['c', 'd', PLACEHOLDER]]

    def test_new_cell_copies_properties_without_merge(self):
        doc, table = create_word_document([['a', 'b']])
        tc = table.cell(0, 0)._tc
        tcPr = tc.get_or_add_tcPr()
        span = OxmlElement('w:gridSpan')
        span.set(qn('w:val'), '2')
        tcPr.append(span)
        # Place the caret on the element directly: the span makes python-docx's
        # cell grid inconsistent, so table.cell() is not used after this point
        nav = TableNavigator(doc.element.body)
        nav.place_cursor(tc, 1)

        nav.insert_column_left()

        new_tc = nav.get_row_cells(nav.get_table_rows(table._tbl)[0])[0]
        new_tcPr = new_tc.find(qn('w:tcPr'))
        assert new_tcPr is not None
        assert new_tcPr.find(qn('w:gridSpan')) is None
        # Source cell untouched
        assert tcPr.find(qn('w:gridSpan')) is not None

    def test_delete_column_updates_grid(self):
        doc, table = create_word_document([['a', 'b', 'c'], ['d', 'e', 'f']])
        nav = word_navigator_at(table, 1, 1)

        assert nav.delete_column() is True

        assert grid_col_count(table._tbl) == 2
        assert word_grid(nav, table._tbl) == [['a', 'c'], ['d', 'f']]
        assert text_content(nav.get_current_cell()) == 'd'

    def test_delete_row(self):
        doc, table = create_word_document([['a'], ['b']])
        nav = word_navigator_at(table, 0, 0)

        assert nav.delete_row() is True
        assert len(table.rows) == 1
        assert nav.delete_row() is False

    def test_insert_table_keeps_sectPr_last(self):
        doc, table = create_word_document([['a']])
        body = doc.element.body
        nav = TableNavigator(body)

        assert nav.insert_table(2, 2) is True

        assert body[-1].tag == qn('w:sectPr')
        assert len(doc.tables) == 2
        new_tbl = doc.tables[1]._tbl
        assert grid_col_count(new_tbl) == 2
        assert nav.get_current_cell() is nav.get_row_cells(nav.get_table_rows(new_tbl)[0])[0]

    def test_explicit_cursor_api(self):
        doc, table = create_word_document([['a']])
        nav = TableNavigator(doc.element.body)
        assert nav.is_in_table(Cursor(table.cell(0, 0)._tc, 0)) is True

"""Tests for the style catalog, the CSS overlay and cell styling."""
import pytest
from openpyxl import Workbook

from report2xlsx.styles import (CSSOverlay, DEFAULT_ROW_STYLES, DEFAULT_TABLE_STYLE, RowStyle, TableStyle,
        excel_number_format, parse_css_color, parse_font_size, resolve_format, resolve_row_style,
        resolve_table_style, style_cell)

from conftest import no_border

IZENDA_CSS = """
.ReportTable { border-color: #808080; }
.ReportHeader, .ReportHeader td { color: #FFFFFF; background-color: #336699; font-weight: bold; font-size: 10pt; }
.ReportItem td { color: black; background-color: transparent; font-size: 8pt; border: 1px solid #CCCCCC; }
.AlternatingItem { background-color: #EEE; font-style: italic; }
.AlternatingItem { background-color: inherit; }
.ReportFooter { font-weight: normal; color: red; }
"""


@pytest.mark.parametrize('class_attr, key', [
    ('xls-date xls-date-ShortDateFormat', 'xls-date-ShortDateFormat'),
    ('xls-date-ShortDateFormat xls-date', 'xls-date-ShortDateFormat'),
    ('ReportItem XLS-PERCENT', 'xls-percent'),
    (['ReportItem', 'xls-l-text'], 'xls-l-text'),
    ('xls-time', 'xls-time'),
    ('ReportItem', None),
    ('', None),
    (None, None),
])
def test_resolve_format(class_attr, key):
    assert resolve_format(class_attr) == key


def test_excel_number_format():
    assert excel_number_format('Short Date') == 'm/d/yyyy'
    assert excel_number_format('0%') == '0%'
    assert excel_number_format(None) == 'General'


@pytest.mark.parametrize('css, expected', [
    ('#fff', 'FFFFFF'), ('#336699', '336699'), ('#80336699', '80336699'), ('Gainsboro', 'DCDCDC'),
    ('grey', '808080'), ('silver', 'C0C0C0'), ('navy', '000080'), ('bogus', '000000'), ('#12', '000000'),
    ('transparent', None), ('inherit', None),
])
def test_parse_css_color(css, expected):
    assert parse_css_color(css) == expected


@pytest.mark.parametrize('css, size', [('9pt', 9), ('12px', 12), ('10', 10), ('large', 8), ('0pt', 8)])
def test_parse_font_size(css, size):
    assert parse_font_size(css) == pytest.approx(size)


def test_resolve_row_style_catalog_order():
    key, style = resolve_row_style('AlternatingItem ReportItem')
    assert key == 'ReportItem'      # catalog order, not position in the class
    assert style == DEFAULT_ROW_STYLES['ReportItem']
    assert resolve_row_style('reportheader')[0] == 'ReportHeader'
    assert resolve_row_style('SomethingElse') == (None, None)
    assert resolve_row_style('') == (None, None)


def test_no_style_blocks_means_no_overlay():
    from bs4 import BeautifulSoup
    soup = BeautifulSoup('<html><body><table class="ReportTable"></table></body></html>', 'html.parser')
    assert CSSOverlay.from_soup(soup) is None
    assert resolve_table_style(None) == DEFAULT_TABLE_STYLE


def test_overlay():
    overlay = CSSOverlay.from_css(IZENDA_CSS)
    header = overlay.row_styles['ReportHeader']
    assert header == RowStyle('FFFFFF', '336699', True, 10, False)
    item = overlay.row_styles['ReportItem']
    assert item.font_color == '000000'
    assert item.background_color == 'FFFFFF'        # transparent is ignored, so the default stays
    assert item.font_size == 8
    alternating = overlay.row_styles['AlternatingItem']
    assert alternating.background_color == 'EEEEEE'   # inherit doesn't override the earlier value
    assert alternating.italic
    footer = overlay.row_styles['ReportFooter']
    assert footer.font_color == 'FF0000'
    assert not footer.bold
    assert overlay.table_style == TableStyle('CCCCCC')    # cell border wins over the table's


def test_overlay_table_border_color():
    assert CSSOverlay.from_css('.ReportTable { border-color: navy }').table_style == TableStyle('000080')
    assert CSSOverlay.from_css('.ReportTable { border: 2px solid #00FF00 }').table_style == TableStyle('00FF00')
    assert CSSOverlay.from_css('.ReportTableX { border-color: red }').table_style == DEFAULT_TABLE_STYLE
    assert dict(CSSOverlay.from_css('').row_styles) == dict(DEFAULT_ROW_STYLES)


def test_overlay_last_declaration_wins():
    overlay = CSSOverlay.from_css('.ReportItem { color: red } .x .ReportItem { color: blue }')
    assert overlay.row_styles['ReportItem'].font_color == '0000FF'


def test_style_cell_header():
    ws = Workbook().active
    cell = ws.cell(1, 1)
    assert style_cell(cell, 'ReportHeader', 'center') == 'ReportHeader'
    assert cell.font.b
    assert cell.font.sz == 9
    assert cell.font.name == 'Tahoma'
    assert cell.font.color.rgb == '00FFFFFF'
    assert cell.fill.patternType == 'solid'
    assert cell.fill.fgColor.rgb == '00000000'
    assert cell.alignment.horizontal == 'center'
    assert cell.alignment.vertical == 'top'
    assert no_border(cell.border.left)
    assert no_border(cell.border.top)
    assert cell.border.bottom.style == 'thin'
    assert cell.border.bottom.color.rgb == '00FFFFFF'


def test_style_cell_footer_double_border():
    ws = Workbook().active
    cell = ws.cell(1, 1)
    style_cell(cell, 'ReportFooter', None)
    assert cell.border.top.style == 'double'
    assert no_border(cell.border.bottom)
    assert cell.alignment.horizontal == 'left'


def test_style_cell_with_overlay_gets_table_border():
    ws = Workbook().active
    overlay = CSSOverlay.from_css(IZENDA_CSS)
    cell = ws.cell(1, 1)
    style_cell(cell, 'ReportItem', 'right', overlay)
    for side in (cell.border.left, cell.border.right, cell.border.top, cell.border.bottom):
        assert side.style == 'thin'
        assert side.color.rgb == '00CCCCCC'
    assert cell.alignment.horizontal == 'right'
    footer = ws.cell(2, 1)
    style_cell(footer, 'ReportFooter', None, overlay)
    assert footer.border.top.style == 'double'
    assert footer.border.left.style == 'thin'


def test_style_cell_unknown_class():
    ws = Workbook().active
    cell = ws.cell(1, 1)
    assert style_cell(cell, 'Whatever', 'bogus') is None
    assert cell.font.name == 'Tahoma'
    assert cell.font.sz == 8
    assert not cell.font.b
    assert cell.font.color is None
    assert cell.fill.patternType is None
    assert no_border(cell.border.top)
    assert no_border(cell.border.left)
    assert cell.alignment.horizontal == 'left'
    assert cell.alignment.vertical == 'top'


def test_overlay_header_border_is_the_table_color():
    ws = Workbook().active
    cell = ws.cell(1, 1)
    style_cell(cell, 'ReportHeader', None, CSSOverlay.from_css(IZENDA_CSS))
    assert cell.border.bottom.style == 'thin'
    assert cell.border.bottom.color.rgb == '00CCCCCC'


def test_overlay_font_size_ignores_units():
    overlay = CSSOverlay.from_css('.ReportItem { font-size: 12px } .ReportFooter { font-size: 0px }')
    assert overlay.row_styles['ReportItem'].font_size == 12
    assert overlay.row_styles['ReportFooter'].font_size == 8

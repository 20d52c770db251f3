"""Style catalog: format classes, default row styles, and the per-document CSS overlay."""
import logging
import re
from collections import namedtuple
from types import MappingProxyType

import cssutils
import webcolors
from openpyxl.styles import PatternFill, Border, Alignment, Font, Side, Color

from .config import DEFAULT_CONFIG

cssutils.log.setLevel(logging.CRITICAL) # Remove 'Unknown Property name' messages
logger = logging.getLogger(__name__)

# The report generator tags cells with these classes purely as a data type hint
FORMAT_MAP = MappingProxyType({
    'xls-text': '@',
    'xls-l-text': 'General',
    'xls-percent': '0%',
    'xls-date': 'Short Date',
    'xls-time': 'h:mm AM/PM',
    'xls-date-ShortDateFormat': 'm/d/yyyy',
    'xls-date-LongDateFormat': 'dddd, mmmm d, yyyy',
    'xls-date-ShortTimeFormat': 'h:mm AM/PM',
    'xls-date-LongTimeFormat': 'h:mm:ss AM/PM',
    'xls-date-FullShortFormat': 'dddd, mmmm d, yyyy h:mm AM/PM',
    'xls-date-FullLongFormat': 'dddd, mmmm d, yyyy h:mm:ss AM/PM',
    'xls-date-GenShortFormat': 'm/d/yyyy h:mm AM/PM',
    'xls-date-GenLongFormat': 'm/d/yyyy h:mm:ss AM/PM',
})
# Longer keys first so "xls-date-ShortDateFormat" wins over "xls-date" (sort is stable)
FORMAT_KEYS = tuple(sorted(FORMAT_MAP, key=len, reverse=True))
TEXT_FORMAT_CLASSES = ('xls-text', 'xls-l-text')
PERCENT_FORMAT_CLASS = 'xls-percent'

# Format names that aren't real Excel format codes
NUMBER_FORMAT_REPLACEMENTS = MappingProxyType({'Fixed': '0.00', 'Number': '0.00', 'Short Date': 'm/d/yyyy',
        'Long Date': 'dddd, mmmm d, yyyy', 'Short Time': 'h:mm AM/PM', 'Long Time': 'h:mm:ss AM/PM',
        'Percent': '0.00%', 'Scientific': '0.00E+00'})

BLACK = '000000'
NAMED_COLORS = MappingProxyType({'black': BLACK, 'white': 'FFFFFF', 'red': 'FF0000', 'blue': '0000FF',
        'green': '008000', 'yellow': 'FFFF00', 'gray': '808080', 'grey': '808080', 'silver': 'C0C0C0',
        'gainsboro': 'DCDCDC'})
NO_COLOR = frozenset(('transparent', 'inherit'))
IGNORED_VALUES = frozenset(('inherit', 'transparent', 'initial'))
BORDER_KEYWORDS = frozenset(('none', 'hidden', 'solid', 'dashed', 'dotted', 'double', 'groove', 'ridge',
        'inset', 'outset', 'thin', 'medium', 'thick'))

RowStyle = namedtuple('RowStyle', 'font_color background_color bold font_size italic', defaults=(8, False))
TableStyle = namedtuple('TableStyle', 'border_color')

DEFAULT_FONT_SIZE = 8
DEFAULT_ROW_STYLES = MappingProxyType({
    'ReportHeader': RowStyle('FFFFFF', BLACK, True, 9),
    'ReportItem': RowStyle(BLACK, 'FFFFFF', False),
    'AlternatingItem': RowStyle(BLACK, 'DCDCDC', False),
    'ReportFooter': RowStyle(BLACK, 'FFFFFF', True),
})
ROW_STYLE_KEYS = tuple(DEFAULT_ROW_STYLES)
DEFAULT_TABLE_STYLE = TableStyle(BLACK)


def class_string(class_attr):
    """bs4 gives us class as a list, everybody else as a string"""
    if not class_attr:
        return ''
    if isinstance(class_attr, (list, tuple)):
        return ' '.join(class_attr)
    return class_attr


def resolve_format(class_attr):
    """Return the format class key found in class_attr, or None.  The longest key wins."""
    cl = class_string(class_attr).lower()
    if not cl:
        return None
    for key in FORMAT_KEYS:
        if key.lower() in cl:
            return key
    return None


def is_date_format_class(key):
    if not key:
        return False
    kl = key.lower()
    return kl.startswith('xls-date') or kl == 'xls-time'


def excel_number_format(number_format):
    """Map a format name like "Short Date" to the Excel format code"""
    if not number_format:
        return 'General'
    return NUMBER_FORMAT_REPLACEMENTS.get(number_format, number_format)


def parse_css_color(color):
    """Convert a CSS color to a RRGGBB (or AARRGGBB) hex string.  Returns None for "no color",
    and black for anything we can't make sense of."""
    color = color.strip().strip('"\'')
    cl = color.lower()
    if cl in NO_COLOR:
        return None
    if cl in NAMED_COLORS:
        return NAMED_COLORS[cl]
    if not color.startswith('#'):
        try:
            color = webcolors.name_to_hex(cl)
        except ValueError:
            return BLACK
    digits = color[1:]
    if len(digits) == 3:     # #345 => #334455
        digits = ''.join(c + c for c in digits)
    if len(digits) not in (6, 8) or not re.match(r'^[0-9A-Fa-f]+$', digits):
        return BLACK
    return digits.upper()


def to_xlsx_color(color):
    """RRGGBB hex string (as returned by parse_css_color) to an openpyxl Color"""
    if color is None:
        return None
    return Color(color)


def get_value(item, default=0.0):
    """For an item like 0.5pt, get the float value = 0.5"""
    m = re.match(r'([+-]?(?:\d+(?:[.]\d*)?)|[.]\d+)', item.strip())
    if m:
        return float(m.group(1))
    return default


def parse_font_size(value, default=DEFAULT_FONT_SIZE):
    """The number in a CSS font-size (9pt, 12px, 8), taken as points whatever the units"""
    size = get_value(value)
    if size <= 0:
        return default
    return size


def is_bold(font_weight):
    fw = font_weight.strip().lower()
    return fw in ('bold', 'bolder') or get_value(fw) > 400


def is_italic(font_style):
    return font_style.strip().lower() in ('italic', 'oblique')


def border_color(value):
    """Pick the color out of a border declaration like "1px solid #CCCCCC" """
    m = re.search(r'#[0-9a-fA-F]{3,8}\b', value)
    if m:
        return parse_css_color(m.group(0))
    for token in reversed(value.split()):
        if token[0].isdigit() or token[0] == '.' or token.lower() in BORDER_KEYWORDS:
            continue
        return parse_css_color(token)
    return None


def _rule_blocks(css, pattern):
    for m in re.finditer(pattern + r'[^{}]*\{(?P<props>[^}]*)\}', css, re.I | re.S):
        yield m.group('props')


def _last_property(css, pattern, prop):
    """Last value of prop, across every rule block whose selector matches pattern, that actually
    says something (inherit, transparent and initial don't)"""
    result = None
    for props in _rule_blocks(css, pattern):
        value = cssutils.parseStyle(props).getPropertyValue(prop).strip()
        if value and value.lower() not in IGNORED_VALUES:
            result = value
    return result


def _class_selector(class_name):
    return r'[^{}]*\.' + re.escape(class_name) + r'\b'


class CSSOverlay:
    """Row and table styles for one document, read from its <style> blocks.  Anything
    the author didn't set keeps the hard-coded default.

    This is not a CSS engine: a rule applies to a class if ".ClassName" appears
    anywhere in its selector, and the last matching declaration wins."""
    CELL_SELECTOR = r'(?:ReportHeader|ReportItem|AlternatingItem)\s'

    def __init__(self, row_styles=DEFAULT_ROW_STYLES, table_style=DEFAULT_TABLE_STYLE):
        self.row_styles = MappingProxyType(dict(row_styles))
        self.table_style = table_style

    def __repr__(self):
        return f'CSSOverlay({dict(self.row_styles)!r}, {self.table_style!r})'

    @classmethod
    def from_soup(cls, soup):
        """Build the overlay from every <style> in the document; None if there aren't any"""
        styles_html = soup.find_all('style')
        if not styles_html:
            return None
        return cls.from_css('\n'.join(str(s.encode_contents(), 'utf-8') for s in styles_html))

    @classmethod
    def from_css(cls, css):
        row_styles = {}
        for name, default in DEFAULT_ROW_STYLES.items():
            selector = _class_selector(name)
            color = _last_property(css, selector, 'color')
            background = _last_property(css, selector, 'background-color')
            weight = _last_property(css, selector, 'font-weight')
            style = _last_property(css, selector, 'font-style')
            size = _last_property(css, selector, 'font-size')
            row_styles[name] = RowStyle(
                    font_color=default.font_color if color is None else parse_css_color(color),
                    background_color=default.background_color if background is None else parse_css_color(background),
                    bold=default.bold if weight is None else is_bold(weight),
                    font_size=default.font_size if size is None else parse_font_size(size),
                    italic=default.italic if style is None else is_italic(style))

        table_border = None
        selector = _class_selector('ReportTable')
        value = _last_property(css, selector, 'border-color')
        if value is None:
            value = _last_property(css, selector, 'border')
        if value is not None:
            table_border = border_color(value)
        value = _last_property(css, cls.CELL_SELECTOR, 'border')
        if value is not None:
            table_border = border_color(value) or table_border
        table_style = TableStyle(table_border) if table_border else DEFAULT_TABLE_STYLE
        logger.debug(f'CSS overlay: {row_styles}, {table_style}')
        return cls(row_styles, table_style)


def resolve_row_style(class_attr, overlay=None):
    """Return (key, RowStyle) for the first catalog class contained in class_attr, or (None, None)"""
    cl = class_string(class_attr).lower()
    if cl:
        row_styles = overlay.row_styles if overlay is not None else DEFAULT_ROW_STYLES
        for key in ROW_STYLE_KEYS:
            if key.lower() in cl:
                return key, row_styles[key]
    return None, None


def resolve_table_style(overlay=None):
    if overlay is None:
        return DEFAULT_TABLE_STYLE
    return overlay.table_style


def cell_alignment(align):
    """Horizontal alignment from an align="..." attribute; always top aligned"""
    horizontal = 'left'
    if align:
        al = align.strip().lower()
        if al in ('center', 'right'):
            horizontal = al
    return Alignment(horizontal=horizontal, vertical='top')


def style_cell(cell, class_attr, align=None, overlay=None, config=DEFAULT_CONFIG):
    """Apply the row style selected by class_attr to an openpyxl cell.  With an overlay (i.e. the
    document had <style> blocks) every cell also gets a thin border in the table border color; without one, header cells
    get a thin white bottom border."""
    key, row_style = resolve_row_style(class_attr, overlay)
    table_color = to_xlsx_color(resolve_table_style(overlay).border_color)

    font = Font(name=config.cell_font_name, sz=DEFAULT_FONT_SIZE)
    fill = PatternFill()
    if row_style:
        font = Font(name=config.cell_font_name, sz=row_style.font_size, b=row_style.bold,
                    i=row_style.italic, color=to_xlsx_color(row_style.font_color))
        if row_style.background_color:
            background = to_xlsx_color(row_style.background_color)
            fill = PatternFill(patternType='solid', fgColor=background, bgColor=background)

    if overlay is not None:
        side = Side(border_style='thin', color=table_color)
        border = Border(left=side, right=side, top=side, bottom=side)
    else:
        border = Border()
        if key == 'ReportHeader':
            border.bottom = Side(border_style='thin', color=to_xlsx_color('FFFFFF'))
    if key == 'ReportFooter':
        border.top = Side(border_style='double', color=table_color)

    cell.font = font
    cell.fill = fill
    cell.border = border
    cell.alignment = cell_alignment(align)
    return key

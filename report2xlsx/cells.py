"""Decide what a report cell really holds, based on its format class and its text."""
import logging
import re
from decimal import Decimal, InvalidOperation

from .styles import FORMAT_MAP, TEXT_FORMAT_CLASSES, PERCENT_FORMAT_CLASS, resolve_format, is_date_format_class
from .utils import serial_to_datetime

logger = logging.getLogger(__name__)

TEXT_FORMAT = '@'
CURRENCY_FORMAT = '$#,##0.00'
NBSP = '\xa0'

RE_FLOAT = re.compile(r'^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$')
RE_FLOAT_THOUSANDS = re.compile(r'^\s*[+-]?(?:\d[\d,]*(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$')
RE_DECIMAL = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')


class CellValue:
    """A typed cell value and the number format to show it with (None means General)"""
    BLANK = 'blank'
    TEXT = 'text'
    NUMBER = 'number'
    CURRENCY = 'currency'
    DATETIME = 'datetime'

    __slots__ = ('kind', 'value', 'number_format')

    def __init__(self, kind, value=None, number_format=None):
        self.kind = kind
        self.value = value
        self.number_format = number_format

    def __repr__(self):
        return f'CellValue({self.kind}, {self.value!r}, {self.number_format!r})'

    def __eq__(self, other):
        if not isinstance(other, CellValue):
            return NotImplemented
        return (self.kind, self.value, self.number_format) == (other.kind, other.value, other.number_format)

    @property
    def is_blank(self):
        return self.kind == self.BLANK


def parse_float(text, thousands=False):
    """float(text) for plain decimal notation only (no nan, inf or hex), else None"""
    regex = RE_FLOAT_THOUSANDS if thousands else RE_FLOAT
    if not regex.match(text):
        return None
    return float(text.replace(',', '').strip())


def parse_currency(text):
    """ "$1,234.56" => Decimal('1234.56'), "-$45.00" => Decimal('-45.00'), None if it isn't money"""
    if '$' not in text:
        return None
    cleaned = text.replace('$', '').replace(',', '').strip()
    if not RE_DECIMAL.match(cleaned):
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def is_blank_text(text):
    return not text or not text.strip() or text == '&nbsp;' or text == NBSP


def detect_format_class(cell_class, div_classes=()):
    """Format class from the cell's own class, else from the first <div class=...> in the cell that has one"""
    key = resolve_format(cell_class)
    if key is not None:
        return key
    for div_class in div_classes:
        key = resolve_format(div_class)
        if key is not None:
            return key
    return None


def classify(raw_text, format_class=None):
    """Turn the text of a cell into a CellValue.  An explicit format class always wins over guessing;
    when the text doesn't fit the format class we fall back rather than fail."""
    if is_blank_text(raw_text):
        return CellValue(CellValue.BLANK)

    if is_date_format_class(format_class):
        serial = parse_float(raw_text)
        value = None
        if serial is not None:
            value = serial_to_datetime(serial)
        if value is not None:
            return CellValue(CellValue.DATETIME, value, FORMAT_MAP[format_class])
        logger.debug(f'{raw_text!r} is not a date serial ({format_class}): stored as text')
        return CellValue(CellValue.TEXT, raw_text, TEXT_FORMAT)

    if format_class == PERCENT_FORMAT_CLASS:
        pct = parse_float(raw_text.rstrip('%'))
        if pct is not None:
            return CellValue(CellValue.NUMBER, pct / 100.0, FORMAT_MAP[PERCENT_FORMAT_CLASS])
        logger.debug(f'{raw_text!r} is not a percentage: guessing instead')

    if format_class in TEXT_FORMAT_CLASSES:
        return CellValue(CellValue.TEXT, raw_text, TEXT_FORMAT)

    amount = parse_currency(raw_text)
    if amount is not None:
        return CellValue(CellValue.CURRENCY, amount, CURRENCY_FORMAT)

    number = parse_float(raw_text, thousands=True)
    if number is not None:
        return CellValue(CellValue.NUMBER, number)

    return CellValue(CellValue.TEXT, raw_text)


def classify_cell(cell):
    """classify() a ReportCell from the locator"""
    return classify(cell.text, detect_format_class(cell.class_, cell.div_classes))

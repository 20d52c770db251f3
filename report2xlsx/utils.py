import re
from datetime import datetime, date
from datetime import time as tm
from decimal import Decimal

from openpyxl.utils.datetime import from_excel

MAX_SHEET_NAME = 31
MAX_DATE_SERIAL = 2958466       # 10000-01-01, just past what Excel can show

SKINNY_CHARS = "1!|iIl.,;:' "
UPPER_CHARS = "ABCDEFGHJKLMNOPQRSTUVXYZmw()[]$&*-+{}<>/?"
FAT_CHARS = 'MW@#%_'

# What a date format token looks like at its widest, for sizing columns
DATE_TOKEN_SAMPLES = {'dddd': 'Wednesday', 'ddd': 'Wed', 'dd': '28', 'd': '28', 'mmmm': 'September',
        'mmm': 'Sep', 'mm': '12', 'm': '12', 'yyyy': '2000', 'yy': '00', 'hh': '12', 'h': '12',
        'ss': '00', 's': '00', 'am/pm': 'PM', 'a/p': 'P'}
RE_DATE_TOKEN = re.compile('|'.join(re.escape(t) for t in sorted(DATE_TOKEN_SAMPLES, key=len, reverse=True)), re.I)


def sanitize_sheet_name(name, default='Report'):
    """Excel sheet names can't contain \\ / ? * [ ] : and are at most 31 characters"""
    if not name or not name.strip():
        return default
    result = re.sub(r'[\\/?*\[\]:]', '_', name.strip())
    return result[:MAX_SHEET_NAME]


def serial_to_datetime(serial):
    """Convert a spreadsheet date serial number (days since 1899-12-30) to a datetime (or a
    time, for serials less than 1).  Returns None if it's outside of what Excel can show."""
    if not 0 <= serial < MAX_DATE_SERIAL:
        return None
    try:
        return from_excel(serial)
    except (OverflowError, ValueError):
        return None


def display_text(value, number_format=None):
    """Roughly what Excel will show for this value, good enough to size the column"""
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    nf = number_format or 'General'
    if isinstance(value, (datetime, date, tm)):
        if nf == 'General':
            return str(value)
        fmt = re.sub(r'\\(.)', r'\1', nf.split(';')[0]).replace('"', '')
        return RE_DATE_TOKEN.sub(lambda m: DATE_TOKEN_SAMPLES[m.group(0).lower()], fmt)
    if isinstance(value, (int, float, Decimal)):
        if '%' in nf:
            return f'{float(value)*100:.0f}%'
        if '$' in nf:
            return f'${float(value):,.2f}'
        if nf == 'General':
            return f'{float(value):.11g}'
        return f'{float(value):,.2f}'
    return str(value)


def text_width_px(s, font_size=11, bold=False, font_name='Calibri'):
    """Estimate how wide s is in pixels.  Multi-line text is as wide as its widest line."""
    if not s:
        return 0
    if '\n' in s:
        return max(text_width_px(line, font_size, bold, font_name) for line in s.split('\n'))
    width = 0
    for c in s:
        if c in SKINNY_CHARS:
            width += 0.6
        elif c in FAT_CHARS:
            if bold and font_name == 'Calibri':
                width += 2.1
            else:
                width += 1.9
        elif c in UPPER_CHARS:
            width += 1.4
        else:
            width += 1
    if bold and font_name != 'Calibri':
        width *= 1.1       # 10% wider for non-Calibri fonts in bold (like Arial)
    width += 1         # Give it some margin
    width *= (font_size/11)
    width *= 7      # Convert chars to px
    return width


def px_to_units(px):
    """Convert pixels to excel column width units (determined empirically)"""
    return px / 7


def fixup_excel_width(wid):
    # https://foss.heptapod.net/openpyxl/openpyxl/-/issues/293
    if wid >= 1.29:
        return wid + 0.71
    return wid * 1.8

"""Find the pieces of a report in its parsed html: title, description, logo and sections."""
import logging
import re
from collections import namedtuple

from .mime import normalize_content_id
from .styles import class_string

logger = logging.getLogger(__name__)

TITLE_CLASS = 'ReportTitle'
DESCRIPTION_CLASS = 'Description'
TABLE_CLASS = 'ReportTable'
SECTION_ATTR = 'report'
CHART_PREFIX = 'chart'

CidImageRef = namedtuple('CidImageRef', 'content_id width height')
ReportCell = namedtuple('ReportCell', 'text class_ div_classes align colspan')
ReportRow = namedtuple('ReportRow', 'class_ cells')
ReportStructure = namedtuple('ReportStructure', 'title description header_images sections')


class StructuralError(ValueError):
    """The document doesn't look like a report we can convert"""


class ReportSection:
    CHART = 'chart'
    DATA = 'data'

    def __init__(self, kind, name='', images=None, rows=None, index=0):
        self.kind = kind
        self.name = name
        self.index = index      # position among all the report sections, usable or not
        self.images = images or []
        self.rows = rows or []

    def __repr__(self):
        if self.kind == self.CHART:
            return f'ReportSection(chart {self.name!r}, images={self.images})'
        return f'ReportSection(data {self.name!r}, {len(self.rows)} rows)'

    @property
    def is_chart(self):
        return self.kind == self.CHART


def has_class(name):
    """Matcher for bs4's class_=, true if name appears anywhere in the class attribute"""
    return lambda c: bool(c) and name in c


def node_text(node):
    if node is None:
        return ''
    return node.get_text().strip()


def px_attr(value):
    """Integer value of a width/height attribute, 0 if there isn't a usable one"""
    if value is None:
        return 0
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def cid_images(node, skip_sections=False):
    """All <img src="cid:..."> under node, in document order.  If skip_sections is True, then
    images that belong to a report section are left out."""
    result = []
    for img in node.find_all('img', src=lambda s: s and 'cid:' in s.lower()):
        src = img.get('src', '').strip()
        if src[:4].lower() != 'cid:':
            continue
        if skip_sections and img.find_parent(attrs={SECTION_ATTR: True}) is not None:
            continue
        width = px_attr(img.get('width'))
        height = px_attr(img.get('height'))
        if not width or not height:
            # style="width: 1000px; height: 300px"
            style = img.get('style', '')
            m = re.search(r'width:\s*(\d+)px', style, re.I)
            if m:
                width = int(m.group(1))
            m = re.search(r'height:\s*(\d+)px', style, re.I)
            if m:
                height = int(m.group(1))
        result.append(CidImageRef(normalize_content_id(src), width or None, height or None))
    return result


def header_images(title_node):
    """The logo lives in the same table as the title, not in any report section"""
    if title_node is None:
        return []
    table = title_node.find_parent('table')
    if table is None:
        return []
    return cid_images(table, skip_sections=True)


def read_rows(table):
    rows = []
    for tr in table.find_all('tr'):
        cells = []
        for td in tr.find_all(['td', 'th'], recursive=False):
            colspan = px_attr(td.get('colspan', 1))
            div_classes = [class_string(div.get('class')) for div in td.find_all('div', class_=True)]
            cells.append(ReportCell(text=td.get_text().strip(), class_=class_string(td.get('class')),
                    div_classes=div_classes, align=td.get('align'), colspan=max(colspan, 1)))
        rows.append(ReportRow(class_string(tr.get('class')), cells))
    return rows


def locate(soup):
    """Return the ReportStructure of a parsed report"""
    title_node = soup.find(class_=has_class(TITLE_CLASS))
    title = node_text(title_node)
    description = node_text(soup.find(class_=has_class(DESCRIPTION_CLASS)))
    logos = header_images(title_node)

    sections = []
    section_nodes = soup.find_all(attrs={SECTION_ATTR: True})
    for index, node in enumerate(section_nodes):
        name = node.get(SECTION_ATTR, '')
        if name.lower().startswith(CHART_PREFIX):
            sections.append(ReportSection(ReportSection.CHART, name, images=cid_images(node), index=index))
            continue
        table = node.find('table', class_=has_class(TABLE_CLASS))
        if table is None:
            logger.debug(f'Section {name!r} has no {TABLE_CLASS}: skipped')
            continue
        rows = read_rows(table)
        if not rows:
            logger.debug(f'Section {name!r} has no rows: skipped')
            continue
        sections.append(ReportSection(ReportSection.DATA, name, rows=rows, index=index))

    if not section_nodes:
        # Plain report without sections: just the one table
        logos = cid_images(soup)     # every image in the document goes at the top
        table = soup.find('table', class_=has_class(TABLE_CLASS))
        if table is None:
            raise StructuralError(f"No <table class='{TABLE_CLASS}'> found in the input file.")
        rows = read_rows(table)
        if not rows:
            raise StructuralError('No rows found in the report table.')
        sections.append(ReportSection(ReportSection.DATA, rows=rows))
    elif not sections:
        raise StructuralError('No report section has any data.')

    logger.debug(f'Located title={title!r}, description={description!r}, {len(logos)} logo(s), sections={sections}')
    return ReportStructure(title, description, logos, sections)

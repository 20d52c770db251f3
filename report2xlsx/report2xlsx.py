from bs4 import BeautifulSoup, UnicodeDammit    # pip install beautifulsoup4
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.drawing.image import Image
from openpyxl.utils import get_column_letter
from PIL import UnidentifiedImageError
import requests
import io
import logging
import math
import warnings
from time import sleep

from .cells import CellValue, classify_cell
from .config import DEFAULT_CONFIG
from .locator import locate
from .mime import extract_images, HTML_END
from .styles import CSSOverlay, style_cell, excel_number_format, to_xlsx_color
from .utils import sanitize_sheet_name, display_text, text_width_px, px_to_units, fixup_excel_width

logger = logging.getLogger(__name__)

RETRIES = 6
REQUESTS_HEADER = {'User-Agent': 'report2xlsx/0.1.0 (https://pypi.org/project/report2xlsx/) report2xlsx.py/0.1.0'}


class REPORT2XLSX:
    """Convert an html report saved as .xls or .mht (html followed by MIME image parts)
    into a real xlsx file with one worksheet."""

    def __init__(self, f, config=None):
        """f is a url, filename, file object, bytes, or the report text itself"""
        self.config = config or DEFAULT_CONFIG
        if isinstance(f, str) and ('<html' in f.lower() or '<table' in f.lower()):
            self.text = f
        else:
            self.text = self.read(f)

        # Only the html goes to the parser: the MIME parts after it would just be junk text
        html = self.text
        ndx = html.lower().find(HTML_END)
        if ndx >= 0:
            html = html[:ndx+len(HTML_END)]
        warnings.filterwarnings("ignore", category=UserWarning, module='bs4')
        self.soup = BeautifulSoup(html, 'html.parser')

    @staticmethod
    def read(f, retries=RETRIES):
        """Read the report from either a URL or a filename or file-like object or bytes, and decode it"""
        def bytes_to_str(b):
            return UnicodeDammit(b, is_html=True).unicode_markup

        if isinstance(f, str):
            if '://' in f:  # URL
                for r in range(retries):
                    try:
                        resp = requests.get(f, headers=REQUESTS_HEADER)
                        resp.raise_for_status()
                        return bytes_to_str(resp.content)
                    except requests.RequestException:
                        if r == retries-1:
                            raise
                        logger.info(f'Retrying {f}')
                        sleep(2)
            with open(f, 'rb') as t:
                return bytes_to_str(t.read())
        elif isinstance(f, bytes):
            return bytes_to_str(f)
        contents = f.read()
        if isinstance(contents, bytes):
            return bytes_to_str(contents)
        return contents

    def to_xlsx(self, filename=None):
        """Convert to xlsx using openpyxl.  If filename is not None, then the result
        is written to that file, and the filename is returned, else the workbook is returned."""
        config = self.config
        images = extract_images(self.text)
        structure = locate(self.soup)
        overlay = CSSOverlay.from_soup(self.soup)

        wb = Workbook()     # Creates one worksheet
        ws = wb.active
        ws.title = sanitize_sheet_name(structure.title, config.default_sheet_name)

        row = 1
        image_count = 0
        row, placed = self.insert_images(ws, structure.header_images, images, row)
        image_count += placed

        if structure.title:
            cell = ws.cell(row, 1)
            cell.value = structure.title
            cell.font = Font(b=True, sz=config.title_font_size)
            row += 1

        if structure.description:
            cell = ws.cell(row, 1)
            cell.value = structure.description
            cell.font = Font(sz=config.description_font_size, color=to_xlsx_color(config.description_color))
            row += 1

        if row > 1:
            row += 1        # blank row between the header and the data

        for section in structure.sections:
            if section.is_chart:
                row, placed = self.insert_images(ws, section.images, images, row)
                image_count += placed
                continue
            if section.index > 0 and row > 1:
                row += 1        # skipped sections still count
            self.write_rows(ws, section.rows, row, overlay)
            row += len(section.rows) + 1     # gap after the table

        self.autosize_columns(ws)
        logger.info(f'Wrote sheet {ws.title!r}: {ws.max_row} rows, {image_count} image(s)')

        if filename:
            wb.save(filename=filename)
            return filename
        return wb

    def write_rows(self, ws, rows, start_row, overlay):
        """Write the rows of one data section, starting at start_row"""
        for r, report_row in enumerate(rows):
            rw = start_row + r
            cc = 1
            for report_cell in report_row.cells:
                cell_value = classify_cell(report_cell)
                cell = ws.cell(rw, cc)
                if not cell_value.is_blank:
                    cell.value = cell_value.value
                    if cell_value.kind == CellValue.TEXT and cell.data_type == 'f':
                        cell.data_type = 's'      # "=Total=" is text, not a formula
                if cell_value.number_format:
                    cell.number_format = excel_number_format(cell_value.number_format)
                effective_class = report_row.class_ or report_cell.class_
                style_cell(cell, effective_class, report_cell.align, overlay, self.config)
                if report_cell.colspan > 1:
                    end_column = cc + report_cell.colspan - 1
                    ws.merge_cells(start_row=rw, start_column=cc, end_row=rw, end_column=end_column)
                    for c in range(cc + 1, end_column + 1):   # These are MergedCells now
                        style_cell(ws.cell(rw, c), effective_class, report_cell.align, overlay, self.config)
                cc += report_cell.colspan

    def image_rows(self, ref):
        """How many rows (including a spacer) this image takes up on the sheet"""
        config = self.config
        height = ref.height or config.default_image_height_px
        if ref.width and ref.width > config.max_image_width_px:
            height = int(height * (config.max_image_width_px / ref.width))
        return max(1, math.ceil(height / config.row_height_px)) + 1

    def insert_images(self, ws, refs, images, row):
        """Place each referenced image in column A, one under the other.  Returns the row
        after the last one and how many we placed."""
        config = self.config
        placed = 0
        if not refs or not images:
            return row, placed
        for ref in refs:
            content = images.get(ref.content_id)
            if content is None:
                logger.debug(f'No MIME part for cid:{ref.content_id}: skipped')
                continue
            try:
                image = Image(io.BytesIO(content))
            except (UnidentifiedImageError, OSError, ValueError) as e:
                logger.warning(f'Image cid:{ref.content_id} could not be read ({e}): skipped')
                continue
            if ref.width and ref.height:
                if ref.width > config.max_image_width_px:
                    scale = config.max_image_width_px / ref.width
                    image.width = int(image.width * scale)
                    image.height = int(image.height * scale)
            else:
                image.width = int(image.width * config.default_image_scale)
                image.height = int(image.height * config.default_image_scale)
            image.anchor = f'A{row}'
            ws.add_image(image)
            placed += 1
            row += self.image_rows(ref)
        return row, placed

    def autosize_columns(self, ws):
        """Size each column to fit its widest (non-merged) cell, up to config.max_column_width"""
        merged = set()
        for mcr in ws.merged_cells.ranges:
            for rw, cc in mcr.cells:
                merged.add((rw, cc))
        col_widths = {}
        for row in ws.iter_rows():
            for cell in row:
                if cell.value is None or (cell.row, cell.column) in merged:
                    continue
                font = cell.font
                s = display_text(cell.value, cell.number_format)
                px = text_width_px(s, font.sz or 11, bool(font.b), font.name or 'Calibri')
                col_widths[cell.column] = max(col_widths.get(cell.column, 0), px_to_units(px))
        for col, wid in col_widths.items():
            ws.column_dimensions[get_column_letter(col)].width = min(self.config.max_column_width,
                                                                     fixup_excel_width(wid))

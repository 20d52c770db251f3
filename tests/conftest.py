import base64
import io

import pytest
from PIL import Image as PILImage


def make_png(width=40, height=20, color='red'):
    buf = io.BytesIO()
    PILImage.new('RGB', (width, height), color=color).save(buf, format='PNG')
    return buf.getvalue()


def mime_part(cid, data, boundary='----=_NextPart_000'):
    """A MIME part the way the report generator writes them"""
    if isinstance(data, bytes):
        data = base64.encodebytes(data).decode('ascii')
    return (f'--{boundary}\r\nContent-ID: <{cid}>\r\nContent-Type: image/png\r\n'
            f'Content-Transfer-Encoding: BASE64\r\n\r\n{data}\r\n')


def report_html(title='Sales Q1', description='Region: West', sections='', styles='', logo=''):
    header = ''
    if title is not None or logo:
        header = '<table><tr><td>' + logo + '</td><td>'
        if title is not None:
            header += f'<span class="ReportTitle">{title}</span>'
        if description is not None:
            header += f'<br><span class="Description">{description}</span>'
        header += '</td></tr></table>'
    style = f'<style type="text/css">{styles}</style>' if styles else ''
    return f'<html><head>{style}</head><body>{header}{sections}</body></html>'


def data_section(rows, name='Detail', table_class='ReportTable'):
    """rows is a list of (row_class, [cell html, ...])"""
    trs = ''
    for row_class, cells in rows:
        trs += f'<tr class="{row_class}">' + ''.join(cells) + '</tr>'
    return f'<div report="{name}"><table class="{table_class}">{trs}</table></div>'


def chart_section(*cids, name='Chart1', size=''):
    imgs = ''.join(f'<img src="cid:{cid}" {size}>' for cid in cids)
    return f'<div report="{name}">{imgs}</div>'


@pytest.fixture
def png():
    return make_png()


@pytest.fixture
def sales_report():
    """Title, description and one 2x3 data section, no images"""
    rows = [('ReportHeader', ['<td>Region</td>', '<td>Sales</td>', '<td>Share</td>']),
            ('ReportItem', ['<td>West</td>', '<td align="right">$1,234.56</td>',
                            '<td class="xls-percent">42.5%</td>'])]
    return report_html(sections=data_section(rows))


def no_border(side):
    """openpyxl leaves an unset border side as None, or as a Side without a style"""
    return side is None or side.style is None

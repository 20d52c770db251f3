"""Tests for pulling images out of the MIME parts after the html."""
import base64

import pytest

from report2xlsx.mime import extract_images, mime_section, normalize_content_id

from conftest import make_png, mime_part

HTML = '<html><body><p>hi</p></body></html>\r\n'
END = '------=_NextPart_000--\r\n'


@pytest.mark.parametrize('cid, expected', [
    ('<image001.png@01D2>', 'image001.png@01d2'),
    ('cid:Image001.PNG@01D2', 'image001.png@01d2'),
    ('  CID: <chart1>  ', 'chart1'),
    ('plain', 'plain'),
])
def test_normalize_content_id(cid, expected):
    assert normalize_content_id(cid) == expected


def test_mime_section():
    assert mime_section('<html></html>tail') == 'tail'
    assert mime_section(b'<HTML></HTML>tail') == 'tail'
    assert mime_section('<html><body>no end') is None


def test_no_closing_html_means_no_images():
    text = '<html><body>' + mime_part('img1', make_png())
    assert extract_images(text) == {}
    assert extract_images(HTML) == {}


def test_boundary_separated_parts():
    red = make_png(color='red')
    blue = make_png(10, 10, color='blue')
    text = HTML + mime_part('img1@report', red) + mime_part('img2@report', blue) + END
    images = extract_images(text)
    assert images == {'img1@report': red, 'img2@report': blue}


def test_content_id_is_normalized():
    png = make_png()
    images = extract_images(HTML + mime_part('Logo.PNG@01D2', png) + END)
    assert list(images) == ['logo.png@01d2']


def test_bytes_input():
    png = make_png()
    raw = (HTML + mime_part('img1', png) + END).encode('latin-1')
    assert extract_images(raw) == {'img1': png}


def test_malformed_part_is_skipped():
    png = make_png()
    text = HTML + mime_part('bad', '!!!not base64!!!') + mime_part('short', 'abc') + mime_part('good', png) + END
    assert extract_images(text) == {'good': png}


def test_parts_without_boundaries():
    png = make_png()
    b64 = base64.b64encode(png).decode('ascii')
    text = (HTML +
            f'Content-ID: <one>\r\nContent-Transfer-Encoding: base64\r\n\r\n{b64}\r\n'
            f'Content-ID: <two>\r\nContent-Type: image/png\r\nContent-Transfer-Encoding: Base64\r\n\r\n{b64}')
    assert extract_images(text) == {'one': png, 'two': png}


def test_non_base64_part_is_ignored():
    png = make_png()
    text = (HTML + '--b\r\nContent-ID: <q>\r\nContent-Transfer-Encoding: quoted-printable\r\n\r\n=3D=3D\r\n'
            + mime_part('good', png, boundary='b') + '--b--\r\n')
    assert extract_images(text) == {'good': png}

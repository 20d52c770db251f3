"""Pull the base64 images out of the MIME parts stuck on the end of a report."""
import base64
import binascii
import logging
import re

logger = logging.getLogger(__name__)

HTML_END = '</html>'

# Content-ID: <image001.png@01D2...>
# Content-Transfer-Encoding: BASE64
#
# iVBORw0KGgoAAAANSUhEUgAA...
MIME_PART_RE = re.compile(
        r'Content-ID:[ \t]*(?P<cid>\S+)'
        r'(?:(?!Content-ID:).)*?'           # other headers, but don't run into the next part
        r'Content-Transfer-Encoding:[ \t]*BASE64[ \t]*\r?\n[ \t]*\r?\n'
        r'(?P<data>.*?)'
        r'(?=\r?\n--|Content-ID:|\Z)', re.I | re.S)


def normalize_content_id(cid):
    """Normalize a Content-ID header value or a cid: url so they can be compared:
    "<Image001.PNG@01D2>" and "cid:image001.png@01d2" both become "image001.png@01d2" """
    cid = cid.strip()
    if cid[:4].lower() == 'cid:':
        cid = cid[4:].strip()
    if cid.startswith('<') and cid.endswith('>'):
        cid = cid[1:-1].strip()
    return cid.lower()


def mime_section(raw):
    """Everything after the closing </html>, or None if there is no closing tag"""
    if isinstance(raw, bytes):
        raw = raw.decode('latin-1')
    ndx = raw.lower().find(HTML_END)
    if ndx < 0:
        return None
    return raw[ndx+len(HTML_END):]


def extract_images(raw):
    """Return a dict of normalized content-id => image bytes for every base64 part following
    the html.  Parts that don't decode are skipped."""
    images = {}
    section = mime_section(raw)
    if not section:
        return images

    for m in MIME_PART_RE.finditer(section):
        cid = normalize_content_id(m.group('cid'))
        data = re.sub(r'\s+', '', m.group('data'))
        try:
            payload = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.debug(f'Skipping MIME part {cid}: {e}')
            continue
        if not payload:
            logger.debug(f'Skipping empty MIME part {cid}')
            continue
        images[cid] = payload
    logger.debug(f'Extracted {len(images)} MIME image(s)')
    return images

"""
Layout of the assembled HTML document.

The file is always ``HEADER``, then zero or more unit records, then
``END_HTML``. Writers keep ``END_HTML`` as the suffix of the file between
writes so an interrupted run leaves a complete document behind.
"""

import html
import re
from typing import Iterator

HEADER_TEMPLATE = '<html><head><meta charset="UTF-8"><title>{title}</title></head><body>'
UNIT_HEADING_TEMPLATE = '<h1><a class="chapter" href="{href}">{title}</a></h1>'
END_HTML = '</body></html>'
BODY_CLOSE = b'</body>'
ENCODING = 'utf-8'

END_HTML_BYTES = END_HTML.encode(ENCODING)

_HEADING_PATTERN = re.compile(rb'<h1><a class="chapter" href="([^"]*)">')


def render_header(title: str) -> bytes:
    return HEADER_TEMPLATE.format(title=title).encode(ENCODING)


def render_unit(url: str, title: str, content: str) -> bytes:
    """Heading linking back to ``url`` followed by the unit content"""
    heading = UNIT_HEADING_TEMPLATE.format(href=html.escape(url, quote=True), title=title)
    return (heading + content).encode(ENCODING)


def iter_unit_urls(data: bytes) -> Iterator[str]:
    """Unit URLs of every record heading in ``data``, in document order"""
    for match in _HEADING_PATTERN.finditer(data):
        yield html.unescape(match.group(1).decode(ENCODING, errors='replace'))

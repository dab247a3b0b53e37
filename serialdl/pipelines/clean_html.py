import logging
import re
from urllib.parse import urljoin

from bs4 import Tag

logger = logging.getLogger(__name__)

# Notices the site injects into chapters to flag copies hosted elsewhere
WARNING_PATTERN = re.compile(
    r'on Amazon|Royal Road|appropriated|content|illicitly|misappropriated'
    r'|narrative|novel|permission|pilfered|purloined|report|story|taken'
    r'|theft|unauthorized|stolen',
    re.IGNORECASE,
)
WARNING_MAX_LENGTH = 150
WARNING_MIN_MATCHES = 3


def is_warning(paragraph_html: str) -> bool:
    """Short paragraph mentioning at least three distinct theft keywords"""
    if len(paragraph_html) >= WARNING_MAX_LENGTH:
        return False
    words = {match.group(0).lower() for match in WARNING_PATTERN.finditer(paragraph_html)}
    return len(words) >= WARNING_MIN_MATCHES


class CleanHtmlPipeline:
    """Strip injected notices and make a unit's content self-contained"""

    def __init__(self):
        self.remove_selectors = ['script', 'style', 'noscript']

    def process(self, content: Tag, base_url: str, label: str = "") -> Tag:
        """Clean ``content`` in place and return it"""
        self._remove_warnings(content, label)
        self._remove_unwanted_elements(content)
        self._absolutify_urls(content, base_url)
        return content

    def _remove_warnings(self, content, label):
        for paragraph in content.find_all('p'):
            inner = paragraph.decode_contents()
            if is_warning(inner):
                logger.info("Removing %s: %s", label, inner)
                paragraph.decompose()

    def _remove_unwanted_elements(self, content):
        for selector in self.remove_selectors:
            for element in content.select(selector):
                element.decompose()

    def _absolutify_urls(self, content, base_url):
        """Convert relative URLs to absolute URLs"""

        # Process links
        for link in content.find_all('a', href=True):
            href = link.get('href')
            if href and not href.startswith(('http://', 'https://', 'mailto:', '#')):
                link['href'] = urljoin(base_url, href)

        # Process images
        for img in content.find_all('img', src=True):
            src = img.get('src')
            if src and not src.startswith(('http://', 'https://', 'data:')):
                img['src'] = urljoin(base_url, src)

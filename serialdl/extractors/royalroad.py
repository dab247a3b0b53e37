"""
Extractor for fiction hosted on Royal Road
"""

import logging
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .. import settings
from ..errors import StructureError
from ..items import SerialIndex, UnitContent, UnitLocator
from ..pipelines.clean_html import CleanHtmlPipeline

logger = logging.getLogger(__name__)


class RoyalRoadExtractor:

    def __init__(self, site_suffix: str = settings.SITE_TITLE_SUFFIX):
        self.site_suffix = site_suffix
        self.selectors = {
            "title": "title",
            "chapter_table": "#chapters",
            "chapter_link": '#chapters tr[data-url^="/fiction/"]',
            "content": "div.chapter-content",
        }
        self.cleaner = CleanHtmlPipeline()

    def parse_index(self, html: str, url: str) -> SerialIndex:
        soup = BeautifulSoup(html, 'lxml')
        title = self._title(soup, url)

        if soup.select_one(self.selectors["chapter_table"]) is None:
            raise StructureError("chapter table", url)

        units = tuple(
            UnitLocator(ordinal=i, url=urljoin(url, row['data-url']))
            for i, row in enumerate(soup.select(self.selectors["chapter_link"]))
        )
        logger.debug("Index %s lists %d chapter(s)", url, len(units))

        name = title[:-len(self.site_suffix)] if self.site_suffix and title.endswith(self.site_suffix) else title
        return SerialIndex(title=title, name=name, units=units)

    def parse_unit(self, html: str, locator: UnitLocator, index: SerialIndex) -> UnitContent:
        soup = BeautifulSoup(html, 'lxml')
        title = self._chapter_title(self._title(soup, locator.url), index.title)

        content = soup.select_one(self.selectors["content"])
        if content is None:
            raise StructureError("chapter content", locator.url)

        label = f"{locator.ordinal + 1}/{len(index.units)}"
        self.cleaner.process(content, locator.url, label)
        return UnitContent(title=title, content=str(content))

    def _title(self, soup, url):
        element = soup.select_one(self.selectors["title"])
        if element is None:
            raise StructureError("title", url)
        return element.decode_contents().strip()

    @staticmethod
    def _chapter_title(page_title, index_title):
        # "Chapter 1 - My Story | Royal Road" -> "Chapter 1"
        if index_title and page_title.endswith(index_title):
            stripped = page_title[:-len(index_title)]
            if stripped.endswith(" - "):
                return stripped[:-3]
        return page_title

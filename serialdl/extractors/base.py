from typing import Protocol

from ..items import SerialIndex, UnitContent, UnitLocator


class Extractor(Protocol):
    """Site specific parsing of the index page and of each unit page"""

    def parse_index(self, html: str, url: str) -> SerialIndex:
        """Title and ordered unit locators of the serial at ``url``"""
        ...

    def parse_unit(self, html: str, locator: UnitLocator, index: SerialIndex) -> UnitContent:
        """Title and cleaned content of one unit page"""
        ...

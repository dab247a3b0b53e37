from serialdl.extractors.base import Extractor
from serialdl.extractors.royalroad import RoyalRoadExtractor

__all__ = [
    'Extractor',
    'RoyalRoadExtractor',
]

"""
Identity of a downloaded unit, used to skip what a previous run already saved
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
from urllib.parse import urlparse

from . import settings


def path_segments(url: str) -> Tuple[str, ...]:
    """Non-empty segments of the URL path, in order"""
    return tuple(segment for segment in urlparse(url).path.split('/') if segment)


@dataclass(frozen=True)
class UnitIdentity:
    """
    Path of a unit URL with its label segment blanked out.

    Sites rewrite the human readable slug of a URL when a title is edited,
    e.g. ``/fiction/123/old-name/chapter/9/one`` becoming
    ``/fiction/123/new-name/chapter/9/one``. Both map to the same identity.
    Segments at any other position, or a different number of segments,
    always make two identities different.
    """

    segments: Tuple[Optional[str], ...]

    @classmethod
    def from_url(cls, url: str, label_index: int = settings.LABEL_SEGMENT) -> "UnitIdentity":
        return cls(tuple(
            None if position == label_index else segment
            for position, segment in enumerate(path_segments(url))
        ))


def same_unit(a: str, b: str, label_index: int = settings.LABEL_SEGMENT) -> bool:
    """Whether two unit URLs name the same unit"""
    return UnitIdentity.from_url(a, label_index) == UnitIdentity.from_url(b, label_index)


def unique_identities(urls: Iterable[str], label_index: int = settings.LABEL_SEGMENT) -> Tuple[UnitIdentity, ...]:
    """Identities of ``urls`` in first-seen order, without repeats"""
    seen = {}
    for url in urls:
        seen.setdefault(UnitIdentity.from_url(url, label_index), None)
    return tuple(seen)

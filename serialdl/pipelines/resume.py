"""
Recover where a previous run stopped writing
"""

import logging
from typing import BinaryIO, Iterable, List, Sequence

from .. import settings
from ..document import BODY_CLOSE, iter_unit_urls
from ..identity import UnitIdentity, unique_identities
from ..items import ResumeState, UnitLocator

logger = logging.getLogger(__name__)


def scan_resume_state(f: BinaryIO, label_index: int = settings.LABEL_SEGMENT) -> ResumeState:
    """
    Find the resume offset and the units already saved in ``f``.

    The offset is the position of the last ``</body>``, so new records
    overwrite the end marker. Without one there is no place to append at:
    the offset is 0 and the state is not usable, although the headings
    still present are reported so the caller can tell what a rewrite drops.
    """
    f.seek(0)
    data = f.read()
    f.seek(0)

    offset = data.rfind(BODY_CLOSE)
    if offset == -1:
        known = unique_identities(iter_unit_urls(data), label_index)
        logger.warning(
            "No end of document found after %d unit(s), %d bytes unusable for resuming",
            len(known), len(data),
        )
        return ResumeState(resume_offset=0, known_identities=known)

    known = unique_identities(iter_unit_urls(data[:offset]), label_index)
    logger.info("Found %d previously downloaded unit(s), resuming at byte %d", len(known), offset)
    return ResumeState(resume_offset=offset, known_identities=known)


def filter_pending(
    units: Iterable[UnitLocator],
    known_identities: Sequence[UnitIdentity],
    label_index: int = settings.LABEL_SEGMENT,
) -> List[UnitLocator]:
    """
    Units whose identity is not among ``known_identities``.

    Skipping is by presence, not position: a saved unit that disappeared
    from the source is simply not offered again, and new units posted in
    between old ones are still fetched.
    """
    known = set(known_identities)
    return [unit for unit in units if UnitIdentity.from_url(unit.url, label_index) not in known]

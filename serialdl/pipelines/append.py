"""
Crash-safe sequential writer for the assembled document
"""

import logging
import os
from typing import BinaryIO, Optional

from ..document import END_HTML_BYTES, render_header, render_unit
from ..items import ResumeState, UnitContent, UnitLocator

logger = logging.getLogger(__name__)


class AppendWriter:
    """
    Append unit records while keeping the file a complete document.

    Every write ends with the end marker and is followed by a seek back over
    it, so the next record overwrites the marker instead of following it.
    Killing the process between two writes leaves header, whole records and
    the marker on disk. ``f`` should be unbuffered so each record reaches the
    file in a single write.
    """

    def __init__(self, f: BinaryIO, title: str, resume_state: Optional[ResumeState] = None):
        self.f = f
        self.records_written = 0
        self._last_ordinal: Optional[int] = None

        if resume_state is not None and resume_state.usable:
            logger.debug("Appending from byte %d", resume_state.resume_offset)
            self.f.seek(resume_state.resume_offset)
            self.f.truncate()
            self._write_with_marker(b"")
        else:
            self.f.seek(0)
            self.f.truncate()
            self._write_with_marker(render_header(title))

    def append(self, locator: UnitLocator, unit: UnitContent) -> None:
        """Write one unit; units must arrive in increasing ordinal order"""
        if self._last_ordinal is not None and locator.ordinal <= self._last_ordinal:
            raise ValueError(
                f"unit {locator.ordinal} written after unit {self._last_ordinal}"
            )
        self._write_with_marker(render_unit(locator.url, unit.title, unit.content))
        self._last_ordinal = locator.ordinal
        self.records_written += 1

    def _write_with_marker(self, payload: bytes) -> None:
        self._write_all(payload + END_HTML_BYTES)
        self.f.seek(-len(END_HTML_BYTES), os.SEEK_CUR)

    def _write_all(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            view = view[self.f.write(view):]

    def close(self) -> None:
        """Flush everything to disk, leaving the marker as the end of file"""
        self.f.flush()
        os.fsync(self.f.fileno())
        logger.debug("Document closed after %d new unit(s)", self.records_written)

    def __enter__(self) -> "AppendWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

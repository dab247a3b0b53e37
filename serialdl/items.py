from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from .identity import UnitIdentity


@dataclass(frozen=True)
class UnitLocator:
    ordinal: int  # position in the index page's chapter table
    url: str      # absolute


@dataclass(frozen=True)
class SerialIndex:
    title: str         # raw <title> inner HTML, written to the document head
    name: str          # title without the site suffix, used for file names
    units: Tuple[UnitLocator, ...] = ()


@dataclass(frozen=True)
class UnitContent:
    title: str
    content: str  # sanitized HTML fragment


@dataclass(frozen=True)
class ResumeState:
    resume_offset: int = 0
    known_identities: Tuple[UnitIdentity, ...] = ()

    @property
    def usable(self) -> bool:
        """Whether appending can continue from ``resume_offset``"""
        return self.resume_offset > 0 and bool(self.known_identities)


class DownloadState(str, Enum):
    INIT = "init"
    BACKUP_AND_RESET = "backup_and_reset"
    HEADER_WRITTEN = "header_written"
    FETCHING = "fetching"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DownloadSummary:
    path: Path
    backup_path: Optional[Path] = None
    units_total: int = 0
    units_skipped: int = 0
    units_downloaded: int = 0
    state: DownloadState = DownloadState.INIT

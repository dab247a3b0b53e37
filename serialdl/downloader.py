"""
Incremental download of a whole serial into one HTML document.

``Downloader.run`` walks the states of ``DownloadState``: it reads the index
page, decides between a fresh and a resumed document, fetches the missing
units concurrently under the rate limit, and appends them in index order.
"""

import logging
import shutil
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from . import settings
from .buffered import BufferedPipeline
from .cli.utils import backup_path_for, default_output_path
from .errors import SerialDLError
from .extractors.base import Extractor
from .fetch import Fetcher
from .items import DownloadState, DownloadSummary, ResumeState, SerialIndex, UnitLocator
from .models import DownloadOptions
from .pipelines.append import AppendWriter
from .pipelines.resume import filter_pending, scan_resume_state
from .ratelimit import RateLimiter

logger = logging.getLogger(__name__)


def _failure_kind(exc: Exception) -> str:
    if isinstance(exc, SerialDLError):
        return exc.kind
    if isinstance(exc, OSError):
        return "io"
    return type(exc).__name__


class DownloadListener:
    """Hooks for progress reporting; every method is optional"""

    def on_start(self, path: Path, total: int, pending: int) -> None:
        pass

    def on_unit_saved(self, locator: UnitLocator, total: int, title: str) -> None:
        pass


class Downloader:

    def __init__(
        self,
        options: DownloadOptions,
        extractor: Extractor,
        fetcher: Optional[Fetcher] = None,
        limiter: Optional[RateLimiter] = None,
        listener: Optional[DownloadListener] = None,
        label_index: int = settings.LABEL_SEGMENT,
    ):
        self.options = options
        self.extractor = extractor
        self.fetcher = fetcher if fetcher is not None else Fetcher(timeout=options.timeout)
        self.limiter = limiter if limiter is not None else RateLimiter(
            options.time_limit_ms,
            capacity=settings.RATE_LIMIT_CAPACITY,
            initial=settings.RATE_LIMIT_INITIAL,
        )
        self.listener = listener if listener is not None else DownloadListener()
        self.label_index = label_index
        self.state = DownloadState.INIT

    def _enter(self, state: DownloadState) -> None:
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self) -> DownloadSummary:
        summary = DownloadSummary(path=Path("."))
        try:
            self._run(summary)
        except Exception as exc:
            self._enter(DownloadState.FAILED)
            summary.state = self.state
            logger.error("Download failed (%s): %s", _failure_kind(exc), exc)
            raise
        summary.state = self.state
        return summary

    def _run(self, summary: DownloadSummary) -> None:
        # INIT: the index decides the default file name, so it comes first
        self.limiter.acquire_one()
        index = self.extractor.parse_index(self.fetcher.get_text(self.options.url), self.options.url)

        path = self.options.path if self.options.path is not None else default_output_path(index.name)
        summary.path = path
        summary.units_total = len(index.units)
        logger.info("Saving to %s", path)

        incremental = self.options.incremental and path.exists()
        resume_state = ResumeState()

        # buffering=0 so every record lands in the file with a single write
        with open(path, "r+b" if incremental else "wb", buffering=0) as f:
            if incremental:
                resume_state = scan_resume_state(f, self.label_index)
                if not resume_state.usable:
                    self._enter(DownloadState.BACKUP_AND_RESET)
                    summary.backup_path = self._backup(path, resume_state)
                    # The rewrite truncates whatever the old file held
                    resume_state = ResumeState()

            writer = AppendWriter(f, index.title, resume_state)
            self._enter(DownloadState.HEADER_WRITTEN)

            pending = filter_pending(index.units, resume_state.known_identities, self.label_index)
            summary.units_skipped = len(index.units) - len(pending)
            self.listener.on_start(path, len(index.units), len(pending))

            self._enter(DownloadState.FETCHING)
            self._download(index, pending, writer, summary)

            writer.close()
        self._enter(DownloadState.DONE)

    def _backup(self, path: Path, resume_state: ResumeState) -> Path:
        backup = backup_path_for(path)
        logger.warning(
            "No usable resume point in %s (%d chapter(s) recognised), backup to %s",
            path, len(resume_state.known_identities), backup,
        )
        shutil.copyfile(path, backup)
        return backup

    def _download(self, index: SerialIndex, pending: List[UnitLocator], writer: AppendWriter, summary: DownloadSummary) -> None:
        total = len(index.units)
        workers = self.options.connections or None
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="serialdl-fetch")
        try:
            responses = BufferedPipeline(self._submit(executor, pending, total), self.options.connections)
            self._enter(DownloadState.DRAINING)
            for future in responses:
                locator, html = future.result()
                unit = self.extractor.parse_unit(html, locator, index)
                writer.append(locator, unit)
                summary.units_downloaded += 1
                self.listener.on_unit_saved(locator, total, unit.title)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _submit(self, executor: ThreadPoolExecutor, pending: List[UnitLocator], total: int) -> Iterator["Future[Tuple[UnitLocator, str]]"]:
        for locator in pending:
            yield executor.submit(self._fetch_unit, locator, total)

    def _fetch_unit(self, locator: UnitLocator, total: int) -> Tuple[UnitLocator, str]:
        self.limiter.acquire_one()
        logger.info("Downloading %d/%d: %s", locator.ordinal + 1, total, locator.url)
        return locator, self.fetcher.get_text(locator.url)


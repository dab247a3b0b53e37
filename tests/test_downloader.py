"""End-to-end tests of a download run against a stub site."""

from __future__ import annotations

import re

import pytest

from serialdl.document import END_HTML
from serialdl.downloader import DownloadListener, Downloader
from serialdl.errors import StructureError, TransportError
from serialdl.extractors.royalroad import RoyalRoadExtractor
from serialdl.items import DownloadState
from serialdl.models import DownloadOptions
from tests.fakes import INDEX_URL, StubFetcher, chapter_page, chapter_url, serial_pages

HEADING = re.compile(r'<h1><a class="chapter" href="([^"]*)">([^<]*)</a></h1>')


def headings(path) -> list[tuple[str, str]]:
    return HEADING.findall(path.read_text(encoding="utf-8"))


def run(path, fetcher, limiter, incremental=False, connections=2, listener=None):
    options = DownloadOptions(url=INDEX_URL, path=path, connections=connections, incremental=incremental)
    downloader = Downloader(options, RoyalRoadExtractor(), fetcher=fetcher, limiter=limiter, listener=listener)
    return downloader, downloader.run()


class RecordingListener(DownloadListener):
    def __init__(self):
        self.started = None
        self.saved: list[int] = []

    def on_start(self, path, total, pending):
        self.started = (path, total, pending)

    def on_unit_saved(self, locator, total, title):
        self.saved.append(locator.ordinal)


# ── Fresh downloads ──────────────────────────────────────────────────

class TestFreshDownload:
    def test_writes_all_units_in_order(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        fetcher = StubFetcher(serial_pages([1, 2, 3]))
        downloader, summary = run(path, fetcher, limiter)

        assert headings(path) == [(chapter_url(n), f"Chapter {n}") for n in [1, 2, 3]]
        assert path.read_text(encoding="utf-8").endswith(END_HTML)
        assert summary.units_downloaded == 3
        assert summary.units_skipped == 0
        assert summary.state == DownloadState.DONE
        assert downloader.state == DownloadState.DONE

    def test_every_fetch_takes_a_token(self, tmp_path, limiter):
        run(tmp_path / "out.html", StubFetcher(serial_pages([1, 2, 3])), limiter)
        assert limiter.acquired == 4  # index + 3 chapters

    @pytest.mark.parametrize("connections", [0, 1, 5])
    def test_any_connection_limit_keeps_order(self, tmp_path, limiter, connections):
        path = tmp_path / "out.html"
        numbers = list(range(1, 9))
        run(path, StubFetcher(serial_pages(numbers)), limiter, connections=connections)
        assert [url for url, _ in headings(path)] == [chapter_url(n) for n in numbers]

    def test_default_path_from_title(self, tmp_path, limiter, monkeypatch):
        monkeypatch.chdir(tmp_path)
        pages = serial_pages([1])
        pages[INDEX_URL] = pages[INDEX_URL].replace("My Story", "Who/What?")
        for url in list(pages):
            if url != INDEX_URL:
                pages[url] = chapter_page(1, title="Who/What? | Royal Road")
        options = DownloadOptions(url=INDEX_URL)
        summary = Downloader(options, RoyalRoadExtractor(), fetcher=StubFetcher(pages), limiter=limiter).run()
        assert summary.path.name == "Who_What_.html"
        assert (tmp_path / "Who_What_.html").exists()

    def test_listener_sees_progress(self, tmp_path, limiter):
        listener = RecordingListener()
        path = tmp_path / "out.html"
        run(path, StubFetcher(serial_pages([1, 2])), limiter, listener=listener)
        assert listener.started == (path, 2, 2)
        assert listener.saved == [0, 1]


# ── Interruption and resume ──────────────────────────────────────────

class TestResume:
    def test_resume_after_interruption(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        broken = StubFetcher(serial_pages([1, 2, 3]), fail={chapter_url(3)})
        downloader = Downloader(
            DownloadOptions(url=INDEX_URL, path=path, connections=2),
            RoyalRoadExtractor(), fetcher=broken, limiter=limiter,
        )
        with pytest.raises(TransportError):
            downloader.run()
        assert downloader.state == DownloadState.FAILED
        assert [url for url, _ in headings(path)] == [chapter_url(1), chapter_url(2)]
        assert path.read_text(encoding="utf-8").endswith(END_HTML)

        fetcher = StubFetcher(serial_pages([1, 2, 3]))
        _, summary = run(path, fetcher, limiter, incremental=True)

        assert fetcher.unit_calls() == [chapter_url(3)]
        assert [url for url, _ in headings(path)] == [chapter_url(n) for n in [1, 2, 3]]
        assert summary.units_skipped == 2
        assert summary.units_downloaded == 1
        assert summary.backup_path is None

        reference = tmp_path / "reference.html"
        run(reference, StubFetcher(serial_pages([1, 2, 3])), limiter)
        assert path.read_bytes() == reference.read_bytes()

    def test_resume_of_complete_file_is_a_no_op(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        run(path, StubFetcher(serial_pages([1, 2, 3])), limiter)
        before = path.read_bytes()

        fetcher = StubFetcher(serial_pages([1, 2, 3]))
        _, summary = run(path, fetcher, limiter, incremental=True)

        assert fetcher.unit_calls() == []
        assert path.read_bytes() == before
        assert summary.units_downloaded == 0

    def test_new_chapters_are_appended(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        run(path, StubFetcher(serial_pages([1, 2])), limiter)

        fetcher = StubFetcher(serial_pages([1, 2, 3, 4]))
        run(path, fetcher, limiter, incremental=True)

        assert fetcher.unit_calls() == [chapter_url(3), chapter_url(4)]
        assert [url for url, _ in headings(path)] == [chapter_url(n) for n in [1, 2, 3, 4]]

    def test_renamed_serial_is_not_downloaded_again(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        run(path, StubFetcher(serial_pages([1, 2], slug="old-name")), limiter)

        fetcher = StubFetcher(serial_pages([1, 2, 3], slug="new-name"))
        run(path, fetcher, limiter, incremental=True)

        assert fetcher.unit_calls() == [chapter_url(3, slug="new-name")]
        assert len(headings(path)) == 3

    def test_removed_chapters_do_not_block_progress(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        run(path, StubFetcher(serial_pages([1, 2, 3])), limiter)

        fetcher = StubFetcher(serial_pages([2, 3, 4]))
        run(path, fetcher, limiter, incremental=True)

        assert fetcher.unit_calls() == [chapter_url(4)]
        assert [url for url, _ in headings(path)] == [chapter_url(n) for n in [1, 2, 3, 4]]

    def test_incremental_without_existing_file_starts_fresh(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        _, summary = run(path, StubFetcher(serial_pages([1])), limiter, incremental=True)
        assert len(headings(path)) == 1
        assert summary.backup_path is None

    def test_unrecognised_file_is_backed_up(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        path.write_text("<html><body><p>my notes</p></body></html>", encoding="utf-8")

        fetcher = StubFetcher(serial_pages([1, 2, 3]))
        downloader, summary = run(path, fetcher, limiter, incremental=True)

        backup = tmp_path / "out.html.bk"
        assert summary.backup_path == backup
        assert backup.read_text(encoding="utf-8") == "<html><body><p>my notes</p></body></html>"
        assert fetcher.unit_calls() == [chapter_url(n) for n in [1, 2, 3]]
        assert [url for url, _ in headings(path)] == [chapter_url(n) for n in [1, 2, 3]]
        assert "my notes" not in path.read_text(encoding="utf-8")

    def test_truncated_file_is_backed_up(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        run(path, StubFetcher(serial_pages([1, 2])), limiter)
        data = path.read_bytes()
        path.write_bytes(data[: -len(END_HTML) - 5])

        fetcher = StubFetcher(serial_pages([1, 2]))
        _, summary = run(path, fetcher, limiter, incremental=True)

        assert summary.backup_path is not None
        assert fetcher.unit_calls() == [chapter_url(1), chapter_url(2)]
        assert path.read_bytes() == data

    def test_file_cut_inside_end_marker_is_rewritten(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        run(path, StubFetcher(serial_pages([1, 2])), limiter)
        data = path.read_bytes()
        path.write_bytes(data[: -len(END_HTML) + 4])

        fetcher = StubFetcher(serial_pages([1, 2, 3]))
        _, summary = run(path, fetcher, limiter, incremental=True)

        assert summary.backup_path is not None
        assert fetcher.unit_calls() == [chapter_url(n) for n in [1, 2, 3]]
        assert [url for url, _ in headings(path)] == [chapter_url(n) for n in [1, 2, 3]]


# ── Failures ─────────────────────────────────────────────────────────

class TestFailures:
    def test_structure_error_aborts_and_keeps_progress(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        pages = serial_pages([1, 2, 3])
        pages[chapter_url(2)] = "<html><head><title>Chapter 2</title></head><body></body></html>"

        downloader = Downloader(
            DownloadOptions(url=INDEX_URL, path=path, connections=1),
            RoyalRoadExtractor(), fetcher=StubFetcher(pages), limiter=limiter,
        )
        with pytest.raises(StructureError):
            downloader.run()
        assert downloader.state == DownloadState.FAILED
        assert [url for url, _ in headings(path)] == [chapter_url(1)]
        assert path.read_text(encoding="utf-8").endswith(END_HTML)

    def test_index_failure_creates_no_file(self, tmp_path, limiter):
        path = tmp_path / "out.html"
        fetcher = StubFetcher(serial_pages([1]), fail={INDEX_URL})
        with pytest.raises(TransportError):
            run(path, fetcher, limiter)
        assert not path.exists()

    def test_unexpected_error_marks_failed(self, tmp_path):
        class BrokenLimiter:
            def acquire_one(self):
                raise RuntimeError("bucket exhausted")

        downloader = Downloader(
            DownloadOptions(url=INDEX_URL, path=tmp_path / "out.html"),
            RoyalRoadExtractor(), fetcher=StubFetcher(serial_pages([1])), limiter=BrokenLimiter(),
        )
        with pytest.raises(RuntimeError):
            downloader.run()
        assert downloader.state == DownloadState.FAILED

    def test_write_error_marks_failed(self, tmp_path, limiter):
        downloader = Downloader(
            DownloadOptions(url=INDEX_URL, path=tmp_path),
            RoyalRoadExtractor(), fetcher=StubFetcher(serial_pages([1])), limiter=limiter,
        )
        with pytest.raises(OSError):
            downloader.run()
        assert downloader.state == DownloadState.FAILED

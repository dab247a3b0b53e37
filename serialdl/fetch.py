"""HTTP access to the source site."""

import logging
import time
from typing import Optional

import requests

from . import settings
from .errors import TransportError

log = logging.getLogger(__name__)


def build_session(user_agent: str = settings.USER_AGENT) -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": user_agent})
    return session


class Fetcher:
    """GET pages through one shared session; safe to call from worker threads"""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = settings.REQUEST_TIMEOUT):
        self.session = session if session is not None else build_session()
        self.timeout = timeout

    def get_text(self, url: str) -> str:
        t0 = time.monotonic()
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(url, str(exc)) from exc

        if resp.status_code >= 400:
            raise TransportError(url, f"HTTP {resp.status_code}", status=resp.status_code)

        elapsed = time.monotonic() - t0
        log.debug("Fetched %s: status=%d, %d bytes (%.1fs)", url, resp.status_code, len(resp.content), elapsed)
        return resp.text

    def close(self) -> None:
        self.session.close()

"""
Error taxonomy for a download run
"""

from typing import Optional


class SerialDLError(Exception):
    """Base class for every fatal condition of a run"""

    kind = "error"
    exit_code = 1


class StructureError(SerialDLError):
    """A fetched document lacks an element the extractor relies on.

    Never retried: it means the site layout changed and any placeholder
    output would be silently wrong.
    """

    kind = "structure"
    exit_code = 2

    def __init__(self, what: str, url: Optional[str] = None):
        self.what = what
        self.url = url
        message = f"{what} not found"
        if url:
            message += f" in {url}"
        super().__init__(message)


class TransportError(SerialDLError):
    """A request failed or returned a non-success status"""

    kind = "transport"
    exit_code = 3

    def __init__(self, url: str, reason: str, status: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"{url}: {reason}")


# OSError is propagated untouched; the CLI maps it to this code.
IO_EXIT_CODE = 4

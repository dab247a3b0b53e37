"""
CLI utilities and helpers
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from .. import settings


@lru_cache(maxsize=None)
def _unsafe_filename_pattern() -> "re.Pattern":
    # See https://en.wikipedia.org/wiki/Filename#Comparison_of_filename_limitations
    return re.compile(r'[\x00-\x1F\x7F"*/:<>?\\|]+')


def sanitize_path(path: str) -> str:
    """Replace characters that can't appear in a file name"""
    return _unsafe_filename_pattern().sub('_', path)


def default_output_path(name: str) -> Path:
    """File name derived from the serial's display name"""
    return Path(sanitize_path(name) + settings.DEFAULT_EXTENSION)


def backup_path_for(path: Path) -> Path:
    return path.with_name(path.name + settings.BACKUP_SUFFIX)


def is_valid_url(url: Optional[str]) -> bool:
    """Check if URL is valid"""
    if not url:
        return False
    try:
        result = urlparse(url)
        return result.scheme in ('http', 'https') and bool(result.netloc)
    except ValueError:
        return False

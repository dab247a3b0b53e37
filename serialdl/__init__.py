"""
serialdl - incremental downloader for online serials
"""

from .settings import VERSION as __version__

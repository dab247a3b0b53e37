from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from . import settings
from .cli.utils import is_valid_url


class DownloadOptions(BaseModel):
    """Validated inputs of a download run"""
    url: str = Field(..., description="Main page (table of contents) of the serial")
    path: Optional[Path] = Field(None, description="Output file; derived from the title when absent")
    time_limit_ms: int = Field(settings.DEFAULT_TIME_LIMIT_MS, gt=0, description="Minimum ms between fetch submissions")
    connections: int = Field(settings.DEFAULT_CONNECTIONS, ge=0, description="Concurrent fetches, 0 for no limit")
    incremental: bool = Field(False, description="Resume from a previous download of the same file")
    timeout: float = Field(settings.REQUEST_TIMEOUT, gt=0, description="HTTP timeout in seconds")
    user_agent: str = Field(settings.USER_AGENT, min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://www.royalroad.com/fiction/12345/some-story",
                "time_limit_ms": 1500,
                "connections": 4,
                "incremental": True,
            }
        }

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not is_valid_url(value):
            raise ValueError(f"not an absolute http(s) URL: {value!r}")
        return value

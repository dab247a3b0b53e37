from __future__ import annotations

import pytest

from tests.fakes import NoopLimiter


@pytest.fixture
def limiter():
    return NoopLimiter()

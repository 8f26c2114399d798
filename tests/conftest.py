import io

import pytest

from rcli.utils import StdinSource


@pytest.fixture
def source():
    """Build an in-memory byte source."""
    def make(data: bytes):
        return StdinSource(io.BytesIO(data))
    return make


@pytest.fixture
def zero_key():
    return bytes(32)

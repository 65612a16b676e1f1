"""Pytest configuration and fixtures.

Most tests start threads that block. Waits in tests always use a timeout so
that a regression makes a test fail instead of hanging the suite.
"""

import pytest

from tests.fixtures.threads import BackgroundCall


@pytest.fixture
def background():
    """Factory fixture running a callable in a background thread."""
    return BackgroundCall


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "liveness: test that checks something never happens (waits briefly)"
    )

"""
Shared test configuration and fixtures for discovery tests.
"""

import pytest

from social.graze.federation.app.config import Settings
from tests.test_helpers import FakeFetcher, default_responses


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment."""
    return Settings(
        debug=False,
        fetch_timeout=5,
        user_agent="test-agent/1.0",
        http_fallback=True,
        legacy_acct_prefix=False,
        sentry_dsn=None,
    )


@pytest.fixture
def responses():
    """Mutable map of URL to response for the fake fetcher."""
    return default_responses()


@pytest.fixture
def fetcher(responses):
    return FakeFetcher(responses)

"""
Configuration Module for handle discovery

This module defines the configuration of the discovery client, using Pydantic for
settings validation. Values are loaded from environment variables with defaults
suitable for development environments.

Key configuration areas include:
- Outbound HTTP behaviour (timeouts, user agent)
- Discovery protocol policy (HTTP downgrade, acct: prefixed WebFinger lookups)
- Monitoring and error reporting
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Settings for the federation discovery client.

    Environment variables are mapped to settings fields by name, for example
    FETCH_TIMEOUT sets fetch_timeout.
    """

    # Environment and debugging settings
    debug: bool = False
    """
    Enable debug logging.
    Set with DEBUG=true environment variable.
    """

    # Outbound HTTP settings
    fetch_timeout: float = Field(default=10.0, gt=0)
    """
    Total timeout in seconds for each discovery document request.
    Set with FETCH_TIMEOUT environment variable.
    """

    user_agent: str = "graze-federation-discovery/0.1"
    """
    User-Agent header sent with every discovery request.
    Set with USER_AGENT environment variable.
    """

    # Discovery protocol settings
    http_fallback: bool = True
    """
    Retry a failed host-meta request once over plain HTTP.
    Set with HTTP_FALLBACK environment variable.
    """

    legacy_acct_prefix: bool = False
    """
    Substitute acct:{handle} instead of the bare handle into the WebFinger template.
    Set with LEGACY_ACCT_PREFIX environment variable.
    """

    # Monitoring and error reporting
    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        """
        Reject blank user agents; some pods refuse requests without one.

        Raises:
            ValueError: If the value is empty after stripping whitespace
        """
        v = v.strip()
        if len(v) == 0:
            raise ValueError("user_agent must not be empty")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded from the environment on first use."""
    return Settings()

# automatic_trips/models/http_models.py
"""
Transport-level request and response models.

This module defines the contract between the HTTP client (which performs
requests) and the trips layer (which interprets responses). The trips layer
never touches httpx directly; it only sees RawResponse objects, so any
object returning them from `get()` can stand in for the real client.
"""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, SecretStr

__all__: list[str] = [
    'ApiCredentials',
    'HTTPGetter',
    'RawResponse',
]

logger: logging.Logger = logging.getLogger(__name__)


class RawResponse(BaseModel):
    """
    One HTTP response as received, before any interpretation.

    Attributes:
        status_code: HTTP status code.
        body: Undecoded response body text.
        headers: Response headers. Lookups through `header()` are
            case-insensitive regardless of how the keys are stored.
        url: The URL that produced this response.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    status_code: int
    body: str = ''
    headers: dict[str, str] = Field(default_factory=dict)
    url: str = ''

    def header(self, name: str) -> str | None:
        """Return a header value by case-insensitive name, None if absent."""
        wanted: str = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def is_ok(self) -> bool:
        """Whether the status is exactly 200."""
        return self.status_code == 200  # noqa: PLR2004


class HTTPGetter(Protocol):
    """Anything that can issue a GET and hand back a RawResponse."""

    def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
    ) -> RawResponse: ...


class ApiCredentials(BaseModel):
    """
    Credentials and connection settings for the Automatic API.

    Attributes:
        base_url: API base URL (no trailing slash).
        access_token: OAuth bearer token (SecretStr for security).
        timeout: Tuple of (connect_timeout, read_timeout) in seconds.
        max_retries: Maximum attempts on transport errors.
        retry_backoff_factor: Exponential backoff multiplier.
        verify_ssl: SSL verification (bool or path to CA bundle).
        use_truststore: Build the SSL context from the OS trust store.
    """

    model_config = ConfigDict(extra='forbid')

    base_url: str
    access_token: SecretStr
    timeout: tuple[int, int] = (10, 30)
    max_retries: int = Field(default=3, ge=1)
    retry_backoff_factor: float = Field(default=1.0, gt=0)
    verify_ssl: bool | str = True
    use_truststore: bool = False

    def auth_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            'Authorization': f'Bearer {self.access_token.get_secret_value()}',
            'Accept': 'application/json',
        }

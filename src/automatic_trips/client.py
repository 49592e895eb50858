# automatic_trips/client.py
"""
HTTP client for the Automatic API.

The client performs single GET requests and hands back RawResponse objects.
It knows nothing about trips, pagination, or what a status code means for
the caller: interpreting responses is the job of the trips layer.

Retry Behavior:
---------------
Only transport failures are retried:
- Timeouts: Exponential backoff
- Connection errors: Exponential backoff

Every HTTP response, successful or not, is returned as-is. A 403 or a 500
is a valid answer from the server and is never retried here.

SSL/TLS Handling:
-----------------
Supports the SSL verification modes of ApiCredentials:
- Standard verification (verify_ssl=True)
- Disabled verification (verify_ssl=False) for development
- Custom CA bundle (verify_ssl='/path/to/cert.pem') for proxy environments
- Truststore integration (use_truststore=True) for the OS CA store
"""

import logging
from collections.abc import Mapping
from datetime import date, datetime
from ssl import SSLContext
from types import TracebackType
from typing import Any, Final, Self

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from automatic_trips.common import build_truststore_ssl_context
from automatic_trips.models import ApiCredentials, RawResponse

__all__: list[str] = [
    'APIError',
    'AutomaticClient',
    'TransientAPIError',
]

logger: logging.Logger = logging.getLogger(__name__)

RETRY_BACKOFF_MAX_SECONDS: Final[float] = 60.0


# =============================================================================
# Exception Hierarchy
# =============================================================================


class APIError(Exception):
    """
    Base exception for API errors.

    Catch this to handle every API-related failure. For more specific
    handling, catch subclasses.

    Attributes:
        status_code: HTTP status code if available, None for connection errors.
        response_body: Raw response body for debugging, None if unavailable.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code: int | None = status_code
        self.response_body: str | None = response_body


class TransientAPIError(APIError):
    """
    Raised for transport failures that should be retried.

    Covers timeouts and connection errors. Raised to the caller only after
    the retry budget is exhausted.
    """


# =============================================================================
# HTTP Client
# =============================================================================


class AutomaticClient:
    """
    Synchronous HTTP client for the Automatic API.

    Handles:
    - HTTP transport with connection pooling
    - Bearer-token authentication
    - Query option serialization
    - Automatic retries with exponential backoff for transport errors
    - SSL verification (including truststore)

    Relative URLs are resolved against the configured base URL; absolute
    URLs (such as next-page links) are requested as given.

    Example:
        >>> credentials = ApiCredentials(...)
        >>> with AutomaticClient(credentials) as client:
        ...     response = client.get('/trip/', {'per_page': 50})
        ...     print(response.status_code)
    """

    def __init__(
        self,
        credentials: ApiCredentials,
        pool_connections: int = 5,
        pool_maxsize: int = 10,
    ) -> None:
        """
        Initialize the API client.

        Args:
            credentials: Base URL, access token, timeouts, retry and SSL
                settings.
            pool_connections: Maximum number of keepalive connections.
            pool_maxsize: Maximum total connections allowed in the pool.

        Raises:
            RuntimeError: If use_truststore=True and truststore is missing.
        """
        self._credentials: ApiCredentials = credentials

        ssl_verify: SSLContext | bool | str = self._build_ssl_context()

        connect_timeout: int
        read_timeout: int
        connect_timeout, read_timeout = credentials.timeout
        default_timeout = httpx.Timeout(
            connect=connect_timeout,
            read=read_timeout,
            write=connect_timeout,
            pool=connect_timeout,
        )

        self._http_client: httpx.Client = httpx.Client(
            base_url=credentials.base_url,
            headers=credentials.auth_headers(),
            timeout=default_timeout,
            verify=ssl_verify,
            limits=httpx.Limits(
                max_keepalive_connections=pool_connections,
                max_connections=pool_maxsize,
            ),
        )

        self._retrying: Retrying = Retrying(
            retry=retry_if_exception_type(TransientAPIError),
            wait=wait_exponential(
                multiplier=credentials.retry_backoff_factor,
                max=RETRY_BACKOFF_MAX_SECONDS,
            ),
            stop=stop_after_attempt(credentials.max_retries),
            reraise=True,
        )

        logger.info(
            'Initialized AutomaticClient: base_url=%r, pool_size=%d',
            credentials.base_url,
            pool_maxsize,
        )

    def _build_ssl_context(self) -> SSLContext | bool | str:
        """Pick the httpx `verify` value from the credentials."""
        if self._credentials.use_truststore:
            logger.debug('Building SSLContext from truststore (system CA)')
            return build_truststore_ssl_context()

        logger.debug('Using SSL verification setting: %r', self._credentials.verify_ssl)
        return self._credentials.verify_ssl

    @property
    def base_url(self) -> str:
        """API base URL the client resolves relative URLs against."""
        return self._credentials.base_url

    # -------------------------------------------------------------------------
    # Context Manager Protocol
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """
        Close the HTTP client and release connection pool resources.

        Safe to call multiple times.
        """
        self._http_client.close()
        logger.debug('AutomaticClient closed')

    def __enter__(self) -> Self:
        """Enter context manager, returning self."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager, closing the HTTP client."""
        self.close()

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
    ) -> RawResponse:
        """
        Issue one GET request.

        Args:
            url: Absolute URL, or a path relative to the base URL.
            params: Query options. Values are serialized to strings; None
                values are dropped.

        Returns:
            RawResponse with status code, body text, and headers. Non-2xx
            statuses are returned, not raised.

        Raises:
            TransientAPIError: When timeouts or connection errors persist
                through every retry attempt.
        """
        query_params: dict[str, str] = serialize_query_params(params or {})
        return self._retrying(self._send_http_request, url, query_params)

    def _send_http_request(
        self,
        url: str,
        query_params: dict[str, str],
    ) -> RawResponse:
        """
        Send the request, converting transport errors to TransientAPIError.

        Raises:
            TransientAPIError: On timeout or connection errors (retryable).
        """
        try:
            response: httpx.Response = self._http_client.get(url, params=query_params)
        except httpx.TimeoutException as error:
            logger.warning('Request timeout (will retry): %s', url)
            raise TransientAPIError(f'Request timeout: {error}') from error
        except httpx.RequestError as error:
            logger.warning('Connection error (will retry): %s - %s', url, error)
            raise TransientAPIError(f'Connection error: {error}') from error

        logger.debug('GET %s -> %d', url, response.status_code)

        return RawResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
            url=str(response.url),
        )


# =============================================================================
# Query Serialization
# =============================================================================


def serialize_query_params(params: Mapping[str, Any]) -> dict[str, str]:
    """
    Serialize query option values to strings for HTTP transmission.

    Booleans become 'true'/'false', dates and datetimes ISO-8601 strings,
    lists and tuples comma-joined values. None values are dropped.

    Example:
        >>> serialize_query_params({'started_at__gte': date(2016, 1, 1), 'x': None})
        {'started_at__gte': '2016-01-01'}
    """
    serialized: dict[str, str] = {}

    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            serialized[key] = 'true' if value else 'false'
        elif isinstance(value, (date, datetime)):
            serialized[key] = value.isoformat()
        elif isinstance(value, (list, tuple)):
            serialized[key] = ','.join(str(item) for item in value)  # pyright: ignore[reportUnknownVariableType]
        else:
            serialized[key] = str(value)

    return serialized

"""
Tests for automatic_trips.client module.

Tests AutomaticClient request handling, retries, and query serialization.
"""
# pyright: reportPrivateUsage=false

from datetime import UTC, date, datetime
from unittest.mock import Mock, patch

import httpx
import pytest

from automatic_trips.client import (
    APIError,
    AutomaticClient,
    TransientAPIError,
    serialize_query_params,
)
from automatic_trips.models import ApiCredentials, RawResponse

TRIPS_URL: str = 'https://api.example.com/trip/'


def build_httpx_response(
    status_code: int = 200,
    text: str = '{"results": []}',
    headers: dict[str, str] | None = None,
    url: str = TRIPS_URL,
) -> Mock:
    """Mock httpx.Response with the attributes the client reads."""
    mock_response = Mock(spec=httpx.Response)
    mock_response.status_code = status_code
    mock_response.text = text
    mock_response.headers = headers or {}
    mock_response.url = httpx.URL(url)
    return mock_response


class TestAutomaticClientInitialization:
    """Test AutomaticClient initialization."""

    def test_initialization_succeeds(self, api_credentials: ApiCredentials) -> None:
        """Should initialize client successfully."""
        client = AutomaticClient(api_credentials)

        assert client._credentials == api_credentials
        assert client.base_url == 'https://api.example.com'
        client.close()

    def test_initialization_with_custom_pool_settings(
        self,
        api_credentials: ApiCredentials,
    ) -> None:
        """Should accept custom connection pool settings."""
        with AutomaticClient(
            api_credentials,
            pool_connections=10,
            pool_maxsize=20,
        ) as client:
            assert client is not None

    def test_bearer_token_header(self, api_credentials: ApiCredentials) -> None:
        """Should send the access token as a bearer Authorization header."""
        with AutomaticClient(api_credentials) as client:
            assert client._http_client.headers['Authorization'] == (
                'Bearer test_access_token'
            )
            assert client._http_client.headers['Accept'] == 'application/json'

    def test_ssl_verification_can_be_disabled(
        self,
        api_credentials: ApiCredentials,
    ) -> None:
        """Should allow disabling SSL verification."""
        credentials = api_credentials.model_copy(update={'verify_ssl': False})

        with AutomaticClient(credentials) as client:
            assert client is not None

    def test_truststore_context_is_used_when_requested(
        self,
        api_credentials: ApiCredentials,
    ) -> None:
        """Should build the SSL context from truststore when enabled."""
        credentials = api_credentials.model_copy(update={'use_truststore': True})

        with patch(
            'automatic_trips.client.build_truststore_ssl_context',
            return_value=True,
        ) as mock_build:
            client = AutomaticClient(credentials)

        mock_build.assert_called_once()
        client.close()


class TestAutomaticClientContextManager:
    """Test AutomaticClient context manager."""

    def test_context_manager_closes_http_client(
        self,
        api_credentials: ApiCredentials,
    ) -> None:
        """Should close the underlying httpx client on exit."""
        with AutomaticClient(api_credentials) as client:
            http_client: httpx.Client = client._http_client
            assert http_client.is_closed is False

        assert http_client.is_closed is True

    def test_manual_close_is_repeatable(
        self,
        api_credentials: ApiCredentials,
    ) -> None:
        """Should allow closing more than once."""
        client = AutomaticClient(api_credentials)

        client.close()
        client.close()


class TestAutomaticClientGet:
    """Test AutomaticClient.get()."""

    def test_returns_raw_response(self, api_credentials: ApiCredentials) -> None:
        """Should wrap the httpx response in a RawResponse."""
        mock_response: Mock = build_httpx_response(
            text='{"results": [{"id": "T_1"}]}',
            headers={'link': '<https://api.example.com/trip/?page=2>; rel="next"'},
        )

        with (
            AutomaticClient(api_credentials) as client,
            patch.object(client._http_client, 'get', return_value=mock_response),
        ):
            response: RawResponse = client.get('/trip/')

        assert response.status_code == 200  # noqa: PLR2004
        assert response.body == '{"results": [{"id": "T_1"}]}'
        assert response.header('Link') is not None
        assert response.url == TRIPS_URL

    def test_serializes_query_params(self, api_credentials: ApiCredentials) -> None:
        """Should send serialized params and drop None values."""
        with (
            AutomaticClient(api_credentials) as client,
            patch.object(
                client._http_client,
                'get',
                return_value=build_httpx_response(),
            ) as mock_get,
        ):
            client.get(
                '/trip/',
                {'per_page': 50, 'started_at__gte': date(2016, 1, 1), 'vehicle': None},
            )

        mock_get.assert_called_once_with(
            '/trip/',
            params={'per_page': '50', 'started_at__gte': '2016-01-01'},
        )

    def test_absolute_url_is_passed_through(
        self,
        api_credentials: ApiCredentials,
    ) -> None:
        """Should request absolute next-page URLs as given, with no params."""
        next_url: str = 'https://api.example.com/trip/?page=2&per_page=50'

        with (
            AutomaticClient(api_credentials) as client,
            patch.object(
                client._http_client,
                'get',
                return_value=build_httpx_response(url=next_url),
            ) as mock_get,
        ):
            client.get(next_url)

        mock_get.assert_called_once_with(next_url, params={})

    @pytest.mark.parametrize('status_code', [403, 404, 500, 503])
    def test_error_statuses_are_returned_not_retried(
        self,
        status_code: int,
        api_credentials: ApiCredentials,
    ) -> None:
        """Should hand back non-200 responses after a single attempt."""
        with (
            AutomaticClient(api_credentials) as client,
            patch.object(
                client._http_client,
                'get',
                return_value=build_httpx_response(status_code, '{"error": "x"}'),
            ) as mock_get,
        ):
            response: RawResponse = client.get('/trip/')

        assert response.status_code == status_code
        assert response.is_ok is False
        assert mock_get.call_count == 1


class TestAutomaticClientRetries:
    """Test AutomaticClient retry behavior for transport errors."""

    def test_retries_on_timeout(self, api_credentials: ApiCredentials) -> None:
        """Should retry a timeout and return the next response."""
        with (
            AutomaticClient(api_credentials) as client,
            patch.object(
                client._http_client,
                'get',
                side_effect=[httpx.TimeoutException('timeout'), build_httpx_response()],
            ) as mock_get,
        ):
            response: RawResponse = client.get('/trip/')

        assert response.status_code == 200  # noqa: PLR2004
        assert mock_get.call_count == 2  # noqa: PLR2004

    def test_retries_on_connection_error(
        self,
        api_credentials: ApiCredentials,
    ) -> None:
        """Should retry a connection error."""
        with (
            AutomaticClient(api_credentials) as client,
            patch.object(
                client._http_client,
                'get',
                side_effect=[httpx.ConnectError('refused'), build_httpx_response()],
            ) as mock_get,
        ):
            client.get('/trip/')

        assert mock_get.call_count == 2  # noqa: PLR2004

    def test_raises_after_max_retries(self, api_credentials: ApiCredentials) -> None:
        """Should raise TransientAPIError once every attempt has failed."""
        with (
            AutomaticClient(api_credentials) as client,
            patch.object(
                client._http_client,
                'get',
                side_effect=httpx.ConnectError('refused'),
            ) as mock_get,
        ):
            with pytest.raises(TransientAPIError) as exc_info:
                client.get('/trip/')

            assert mock_get.call_count == api_credentials.max_retries

        assert isinstance(exc_info.value, APIError)
        assert exc_info.value.status_code is None


class TestSerializeQueryParams:
    """Test serialize_query_params()."""

    def test_booleans(self) -> None:
        """Should render booleans in lowercase."""
        assert serialize_query_params({'a': True, 'b': False}) == {
            'a': 'true',
            'b': 'false',
        }

    def test_dates_and_datetimes(self) -> None:
        """Should render dates and datetimes as ISO-8601."""
        serialized: dict[str, str] = serialize_query_params(
            {
                'started_at__gte': date(2016, 1, 1),
                'started_at__lte': datetime(2016, 2, 1, 12, 0, tzinfo=UTC),
            }
        )

        assert serialized == {
            'started_at__gte': '2016-01-01',
            'started_at__lte': '2016-02-01T12:00:00+00:00',
        }

    def test_sequences_are_comma_joined(self) -> None:
        """Should join list and tuple values with commas."""
        assert serialize_query_params({'tags': ['a', 'b'], 'ids': (1, 2)}) == {
            'tags': 'a,b',
            'ids': '1,2',
        }

    def test_none_values_are_dropped(self) -> None:
        """Should omit keys whose value is None."""
        assert serialize_query_params({'vehicle': None, 'per_page': 10}) == {
            'per_page': '10'
        }

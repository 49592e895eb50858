"""
Shared pytest fixtures for automatic_trips tests.

Provides configuration objects, credentials, sample trip records, and a
scripted in-memory HTTP client that replays canned responses in order.
"""

import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from automatic_trips.config import (
    ApiConfig,
    AutomaticConfig,
    LoggingConfig,
    TripsConfig,
)
from automatic_trips.models import ApiCredentials, RawResponse
from automatic_trips.routes import RouteTable

BASE_URL: str = 'https://api.example.com'

# =============================================================================
# Scripted HTTP Client
# =============================================================================


class ScriptedClient:
    """
    In-memory stand-in for AutomaticClient.

    Replays the given responses in order and records every (url, params)
    pair it was asked for. Asking for more responses than scripted fails
    the test.
    """

    def __init__(self, responses: Sequence[RawResponse]) -> None:
        self._responses: list[RawResponse] = list(responses)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
    ) -> RawResponse:
        self.calls.append((url, dict(params or {})))
        if not self._responses:
            raise AssertionError(f'Unexpected request to {url}')
        return self._responses.pop(0)

    @property
    def urls(self) -> list[str]:
        """Requested URLs in order."""
        return [url for url, _ in self.calls]


def build_response(
    status_code: int = 200,
    body: Any = None,
    link: str | None = None,
) -> RawResponse:
    """
    Build a RawResponse. Non-string bodies are JSON-encoded; None is empty.
    """
    if body is None:
        body_text: str = ''
    elif isinstance(body, str):
        body_text = body
    else:
        body_text = json.dumps(body)

    headers: dict[str, str] = {'Content-Type': 'application/json'}
    if link is not None:
        headers['Link'] = link

    return RawResponse(status_code=status_code, body=body_text, headers=headers)


@pytest.fixture
def make_response() -> Callable[..., RawResponse]:
    """Factory for RawResponse objects."""
    return build_response


@pytest.fixture
def scripted_client() -> Callable[..., ScriptedClient]:
    """Factory for ScriptedClient instances."""

    def factory(*responses: RawResponse) -> ScriptedClient:
        return ScriptedClient(responses)

    return factory


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def temp_log_file(tmp_path: Path) -> Path:
    """Path to a log file in a temp directory (file not created)."""
    return tmp_path / 'logs' / 'test.log'


@pytest.fixture
def api_config() -> ApiConfig:
    """ApiConfig with test values."""
    return ApiConfig(
        base_url=BASE_URL,
        access_token='test_access_token',  # pyright: ignore[reportArgumentType]
        request_timeout=(10, 30),
        max_retries=3,
        retry_backoff_factor=0.01,
        verify_ssl=True,
    )


@pytest.fixture
def trips_config() -> TripsConfig:
    """TripsConfig with a page size and no delay."""
    return TripsConfig(paginate=True, per_page=50, request_delay_seconds=0.0)


@pytest.fixture
def logging_config(temp_log_file: Path) -> LoggingConfig:
    """LoggingConfig writing DEBUG to a temp file and INFO to console."""
    return LoggingConfig(
        file_path=temp_log_file,
        console_level='INFO',
        file_level='DEBUG',
    )


@pytest.fixture
def automatic_config(
    api_config: ApiConfig,
    trips_config: TripsConfig,
    logging_config: LoggingConfig,
) -> AutomaticConfig:
    """Complete AutomaticConfig."""
    return AutomaticConfig(
        api=api_config,
        trips=trips_config,
        logging=logging_config,
    )


@pytest.fixture
def api_credentials() -> ApiCredentials:
    """ApiCredentials with fast retries for tests."""
    return ApiCredentials(
        base_url=BASE_URL,
        access_token='test_access_token',  # pyright: ignore[reportArgumentType]
        timeout=(10, 30),
        max_retries=3,
        retry_backoff_factor=0.001,
        verify_ssl=True,
        use_truststore=False,
    )


@pytest.fixture
def route_table() -> RouteTable:
    """Default trip routes under the test base URL."""
    return RouteTable(BASE_URL)


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_trip_record() -> dict[str, Any]:
    """One complete trip as returned by the API."""
    return {
        'id': 'T_3ccd6d1ac1b2c9a8',
        'url': f'{BASE_URL}/trip/T_3ccd6d1ac1b2c9a8/',
        'user': f'{BASE_URL}/user/U_1/',
        'vehicle': f'{BASE_URL}/vehicle/C_1/',
        'started_at': '2016-03-01T16:00:00Z',
        'ended_at': '2016-03-01T16:30:00Z',
        'start_timezone': 'America/Los_Angeles',
        'end_timezone': 'America/Los_Angeles',
        'distance_m': 15250.5,
        'duration_s': 1800,
        'start_location': {'lat': 37.7749, 'lon': -122.4194, 'accuracy_m': 10.0},
        'start_address': {'name': 'Market St, San Francisco, CA'},
        'end_location': {'lat': 37.8044, 'lon': -122.2712, 'accuracy_m': 8.0},
        'end_address': {'name': 'Broadway, Oakland, CA', 'city': 'Oakland'},
        'fuel_cost_usd': 2.35,
        'fuel_volume_l': 1.9,
        'average_kmpl': 8.02,
        'score_events': 48.5,
        'score_speeding': 50.0,
        'hard_brakes': 1,
        'hard_accels': 0,
        'vehicle_events': [
            {'type': 'hard_brake', 'created_at': '2016-03-01T16:10:00Z', 'g_force': 0.42},
        ],
        'tags': ['business'],
        'some_future_field': {'ignored': True},
    }


@pytest.fixture
def sample_trip_records() -> list[dict[str, Any]]:
    """Five minimal trips across two vehicles."""
    return [
        {
            'id': f'T_{index}',
            'vehicle': f'{BASE_URL}/vehicle/C_{index % 2}/',
            'distance_m': 1000.0 * (index + 1),
            'duration_s': 60 * (index + 1),
        }
        for index in range(5)
    ]

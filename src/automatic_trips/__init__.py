# automatic_trips/__init__.py
"""
Automatic Trips - client for the trips collection of the Automatic API.

Fetches the trips of an Automatic account page by page, following the
`next` relation of each response's Link header, and exposes them as a
lazily mapped, iterable collection of typed Trip records.

Quick Start:
    >>> from automatic_trips import AutomaticProvider, load_config, setup_logger
    >>>
    >>> config = load_config('config/automatic_config.yaml')
    >>> setup_logger(config=config.logging)
    >>> provider = AutomaticProvider.from_config(config)
    >>>
    >>> trips = provider.all_trips(started_at__gte='2016-01-01')
    >>> for trip in trips.sort_by(lambda trip: trip.started_at):
    ...     print(trip.trip_id, trip.distance_km)

Lower-level access with an explicit client:
    >>> from automatic_trips import AutomaticClient, RouteTable, TripsResource
    >>>
    >>> with AutomaticClient(credentials) as client:
    ...     resource = TripsResource(client, RouteTable(credentials.base_url))
    ...     trip = resource.find_by_id_or_raise('T_3ccd6d1ac1b2c9a8')

Errors:
    - AuthorizationError: the API answered 403
    - RequestFailedError: the API answered another non-200 status
    - InvalidResponseError: a response body could not be interpreted
    - NotFoundError: a trip that must exist was not returned
    - TransientAPIError: the transport kept failing after retries
"""

__version__ = '0.1.0'

from automatic_trips.client import (
    APIError,
    AutomaticClient,
    TransientAPIError,
)
from automatic_trips.common import setup_logger
from automatic_trips.config import load_config
from automatic_trips.models import (
    ApiCredentials,
    Link,
    LinkSet,
    Trip,
    parse_link_header,
)
from automatic_trips.provider import AutomaticProvider
from automatic_trips.routes import RouteNotFoundError, RouteTable
from automatic_trips.trips import (
    AuthorizationError,
    InvalidResponseError,
    NotFoundError,
    RecordCollection,
    RequestFailedError,
    Trips,
    TripsResource,
    fetch_all_records,
)

__all__: list[str] = [
    'APIError',
    'ApiCredentials',
    'AuthorizationError',
    'AutomaticClient',
    'AutomaticProvider',
    'InvalidResponseError',
    'Link',
    'LinkSet',
    'NotFoundError',
    'RecordCollection',
    'RequestFailedError',
    'RouteNotFoundError',
    'RouteTable',
    'TransientAPIError',
    'Trip',
    'Trips',
    'TripsResource',
    '__version__',
    'fetch_all_records',
    'load_config',
    'parse_link_header',
    'setup_logger',
]

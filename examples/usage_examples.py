#!/usr/bin/env python3
"""
Usage examples for automatic_trips.

Shows the ways to fetch trips, from the explicit client up to the
configuration-driven facade.
"""

import logging
from collections import Counter

from pydantic import SecretStr

from automatic_trips import (
    ApiCredentials,
    AuthorizationError,
    AutomaticClient,
    AutomaticProvider,
    NotFoundError,
    RequestFailedError,
    RouteTable,
    Trips,
    TripsResource,
    load_config,
    setup_logger,
)

# =============================================================================
# Level 1: Explicit Client and Resource (Most Control)
# =============================================================================


def example_1_explicit_resource() -> None:
    """
    Wire the client, route table, and resource by hand.

    Use this when you need full control over the collaborators or want to
    reuse one connection pool for many calls.
    """
    credentials = ApiCredentials(
        base_url='https://api.automatic.com',
        access_token=SecretStr('your-access-token-here'),
        timeout=(10, 30),
        max_retries=5,
        retry_backoff_factor=2.0,
    )

    with AutomaticClient(credentials) as client:
        resource = TripsResource(client, RouteTable(credentials.base_url))

        # First page only
        first_page: Trips = resource.all(paginate=False, per_page=25)
        print(f'{len(first_page)} trips on the first page')

        # Every page, filtered server-side
        trips: Trips = resource.all(started_at__gte='2016-01-01')
        for trip in trips:
            print(f'{trip.trip_id}: {trip.distance_km} km')


# =============================================================================
# Level 2: Configuration-Driven Facade
# =============================================================================


def example_2_provider_facade() -> None:
    """
    Build everything from the YAML configuration.

    The facade opens and closes a client per call.
    """
    config = load_config('config/automatic_config.yaml')
    setup_logger(config=config.logging)

    provider = AutomaticProvider.from_config(config)
    trips: Trips = provider.all_trips()

    longest = trips.sort_by(lambda trip: trip.distance_m or 0.0, reverse=True)[:5]
    for trip in longest:
        print(f'{trip.trip_id}: {trip.distance_km} km')

    per_vehicle: dict[str | None, int] = Counter(trip.vehicle for trip in trips)
    print(f'Trips per vehicle: {dict(per_vehicle)}')


# =============================================================================
# Level 3: Error Handling at the Call Boundary
# =============================================================================


def example_3_error_handling() -> None:
    """Catch the typed errors where the call is made."""
    setup_logger(logging_level=logging.DEBUG)
    provider = AutomaticProvider.from_config(load_config())

    try:
        trips: Trips = provider.all_trips()
    except AuthorizationError as error:
        print(f'Access token rejected: {error.description.full_message}')
        return
    except RequestFailedError as error:
        print(f'API error {error.status_code}: {error}')
        return

    print(f'Fetched {len(trips)} trips')

    try:
        trip = provider.find_trip_or_raise('T_does_not_exist')
    except NotFoundError as error:
        print(f'No trip {error.record_id}')
    else:
        print(trip.model_dump_json(indent=2))


# =============================================================================
# Level 4: DataFrame Export
# =============================================================================


def example_4_dataframe() -> None:
    """Export the collection to pandas."""
    provider = AutomaticProvider.from_config(load_config())
    dataframe = provider.trips_dataframe(started_at__gte='2016-01-01')
    print(dataframe[['trip_id', 'distance_m', 'duration_s']].describe())


if __name__ == '__main__':
    example_2_provider_facade()

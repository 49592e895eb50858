# automatic_trips/provider.py
"""
High-level facade for the Automatic trips API.

Combines credentials, the route table, pagination defaults, and client
lifecycle into one object so callers don't have to wire an
AutomaticClient, a RouteTable, and a TripsResource together by hand.

Design Decisions:
-----------------
- Convenience methods (all_trips, find_trip, trips_dataframe) create and
  close a client per call. Every result is fully materialized before the
  client closes, so nothing returned depends on an open connection.
- For several operations in a row, use client() with trips() to reuse one
  connection pool.

Usage:
------
    from automatic_trips.config import load_config
    from automatic_trips.provider import AutomaticProvider

    provider = AutomaticProvider.from_config(load_config('config.yaml'))

    for trip in provider.all_trips(started_at__gte='2016-01-01'):
        print(trip.trip_id)

    with provider.client() as client:
        trips = provider.trips(client)
        first = trips.find_by_id_or_raise('T_1')
        latest = trips.all(paginate=False)
"""

import logging
from typing import Any, Self

import pandas as pd

from automatic_trips.client import AutomaticClient
from automatic_trips.config import AutomaticConfig, TripsConfig
from automatic_trips.models import ApiCredentials, HTTPGetter, Trip
from automatic_trips.routes import RouteTable
from automatic_trips.trips import Trips, TripsResource

__all__: list[str] = ['AutomaticProvider']

logger: logging.Logger = logging.getLogger(__name__)


class AutomaticProvider:
    """
    Facade over the Automatic API trips resource.

    Attributes:
        credentials: Connection settings for the API.
        trips_config: Pagination defaults applied to every collection fetch.
        routes: Route table used to build trip URLs.

    Example:
        >>> provider = AutomaticProvider.from_config(load_config())
        >>> trips = provider.all_trips()
        >>> long_trips = trips.filter(lambda trip: (trip.distance_km or 0) > 100)
    """

    def __init__(
        self,
        credentials: ApiCredentials,
        trips_config: TripsConfig | None = None,
        routes: RouteTable | None = None,
    ) -> None:
        """
        Initialize the provider facade.

        Args:
            credentials: API credentials and connection settings.
            trips_config: Pagination defaults. Uses TripsConfig() if omitted.
            routes: Custom route table. Defaults to the standard trip routes
                under credentials.base_url.
        """
        self._credentials: ApiCredentials = credentials
        self._trips_config: TripsConfig = trips_config or TripsConfig()
        self._routes: RouteTable = routes or RouteTable(credentials.base_url)

        logger.info(
            'Initialized AutomaticProvider: base_url=%r, paginate=%s',
            credentials.base_url,
            self._trips_config.paginate,
        )

    @property
    def credentials(self) -> ApiCredentials:
        """API credentials and connection settings."""
        return self._credentials

    @property
    def trips_config(self) -> TripsConfig:
        """Pagination defaults."""
        return self._trips_config

    @property
    def routes(self) -> RouteTable:
        """Route table used to build trip URLs."""
        return self._routes

    @classmethod
    def from_config(
        cls,
        config: AutomaticConfig,
        routes: RouteTable | None = None,
    ) -> Self:
        """
        Create a provider from a loaded configuration.

        Args:
            config: Full AutomaticConfig from the config file.
            routes: Optional custom route table.

        Returns:
            Initialized AutomaticProvider.
        """
        api_config = config.api

        credentials = ApiCredentials(
            base_url=api_config.base_url,
            access_token=api_config.access_token,
            timeout=(api_config.request_timeout[0], api_config.request_timeout[1]),
            max_retries=api_config.max_retries,
            retry_backoff_factor=api_config.retry_backoff_factor,
            verify_ssl=api_config.verify_ssl,
            use_truststore=api_config.use_truststore,
        )

        return cls(credentials, config.trips, routes)

    # -------------------------------------------------------------------------
    # Client Management
    # -------------------------------------------------------------------------

    def client(self) -> AutomaticClient:
        """
        Create a new AutomaticClient for this provider.

        The client should be used as a context manager so its connection
        pool is released.
        """
        return AutomaticClient(self._credentials)

    def trips(self, client: HTTPGetter) -> TripsResource:
        """TripsResource bound to a client, with this provider's defaults."""
        return TripsResource(
            client,
            self._routes,
            request_delay_seconds=self._trips_config.request_delay_seconds,
            default_options=self._trips_config.default_options(),
        )

    # -------------------------------------------------------------------------
    # Convenience Methods (auto-managed client)
    # -------------------------------------------------------------------------

    def all_trips(self, /, paginate: bool | None = None, **options: Any) -> Trips:
        """
        Fetch the whole trips collection with a temporary client.

        Args:
            paginate: Follow next-page links. None uses trips_config.paginate.
            **options: Query options for the first request.

        Returns:
            Trips with every record received.
        """
        effective_paginate: bool = (
            self._trips_config.paginate if paginate is None else paginate
        )

        with self.client() as client:
            return self.trips(client).all(paginate=effective_paginate, **options)

    def find_trip(self, trip_id: str, /, **options: Any) -> Trip | None:
        """Fetch one trip by ID with a temporary client; None if not returned."""
        with self.client() as client:
            return self.trips(client).find_by_id(trip_id, **options)

    def find_trip_or_raise(self, trip_id: str, /, **options: Any) -> Trip:
        """
        Fetch one trip by ID with a temporary client.

        Raises:
            NotFoundError: If the trip is not returned.
        """
        with self.client() as client:
            return self.trips(client).find_by_id_or_raise(trip_id, **options)

    def trips_dataframe(
        self, /, paginate: bool | None = None, **options: Any
    ) -> pd.DataFrame:
        """
        Fetch the trips collection and return it as a DataFrame.

        Loads everything into memory; see Trips.to_dataframe().
        """
        trips: Trips = self.all_trips(paginate=paginate, **options)
        dataframe: pd.DataFrame = trips.to_dataframe()

        if dataframe.empty:
            logger.warning('No trips found with options %r', options)
        else:
            logger.info(
                'Created DataFrame: %d rows, %d columns',
                len(dataframe),
                len(dataframe.columns),
            )

        return dataframe

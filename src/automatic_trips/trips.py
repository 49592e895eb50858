# automatic_trips/trips.py
"""
Trips collection: pagination, response classification, and lookups.

This is where HTTP responses become trips. A "fetch all" call walks the
collection page by page, following the `next` relation of each response's
Link header, and either returns every record received or raises a typed
error. Nothing partial is ever returned.

Each page is first classified into a tagged outcome:

    PageSuccess           -> records (+ links) to accumulate
    AuthorizationFailure  -> HTTP 403
    RequestFailure        -> any other non-200 status

and the pagination loop turns the two failure variants into
AuthorizationError / RequestFailedError at a single point.

Usage:
------
    with AutomaticClient(credentials) as client:
        trips = TripsResource(client, RouteTable(credentials.base_url))

        for trip in trips.all(started_at__gte='2016-01-01'):
            print(trip.trip_id, trip.distance_km)

        trip = trips.find_by_id_or_raise('T_3ccd6d1ac1b2c9a8')
"""

import json
import logging
import time
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Generic, TypeVar, overload
from urllib.parse import urljoin

import pandas as pd
from pydantic import BaseModel, ConfigDict

from automatic_trips.client import APIError
from automatic_trips.models import (
    ErrorDescription,
    HTTPGetter,
    LinkSet,
    RawResponse,
    Trip,
    parse_link_header,
)
from automatic_trips.routes import RouteTable

__all__: list[str] = [
    'AuthorizationError',
    'AuthorizationFailure',
    'InvalidResponseError',
    'NotFoundError',
    'PageOutcome',
    'PageResult',
    'PageSuccess',
    'RawRecord',
    'RecordCollection',
    'RequestFailedError',
    'RequestFailure',
    'Trips',
    'TripsResource',
    'classify_page',
    'fetch_all_records',
]

logger: logging.Logger = logging.getLogger(__name__)

RawRecord = dict[str, Any]

HTTP_STATUS_OK: int = 200
HTTP_STATUS_FORBIDDEN: int = 403

NEXT_RELATION: str = 'next'
RESULTS_FIELD: str = 'results'


# =============================================================================
# Exceptions
# =============================================================================


class AuthorizationError(APIError):
    """
    Raised when the API answers a page request with HTTP 403.

    Attributes:
        description: Error body with the status merged in.
    """

    def __init__(self, description: ErrorDescription) -> None:
        super().__init__(
            description.full_message,
            status_code=description.status,
        )
        self.description: ErrorDescription = description


class RequestFailedError(APIError):
    """
    Raised for any non-200, non-403 status during pagination.

    Attributes:
        description: Error body with the actual status merged in.
    """

    def __init__(self, description: ErrorDescription) -> None:
        super().__init__(
            description.full_message,
            status_code=description.status,
        )
        self.description: ErrorDescription = description


class InvalidResponseError(APIError):
    """
    Raised when a response body can't be interpreted.

    Covers malformed JSON, a 200 body that is not a JSON object, and a
    `results` field that is not a list of objects.
    """


class NotFoundError(Exception):
    """
    Raised when a record that must exist could not be fetched.

    Attributes:
        record_id: The ID that was looked up.
    """

    def __init__(self, record_id: str, record_name: str = 'Trip') -> None:
        self.record_id: str = record_id
        super().__init__(f'Could not find {record_name} with ID {record_id}')


# =============================================================================
# Page Results and Outcomes
# =============================================================================


class PageResult(BaseModel):
    """
    One fetched page: status, decoded body, and parsed Link header.

    Attributes:
        status_code: HTTP status code.
        body: Decoded JSON body ({} for an empty body).
        links: Relations from the Link header.
        raw_body: Undecoded body text, kept for error reporting.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    status_code: int
    body: Any = None
    links: LinkSet = LinkSet()
    raw_body: str = ''

    @classmethod
    def from_response(cls, response: RawResponse) -> 'PageResult':
        """
        Decode a RawResponse.

        Raises:
            InvalidResponseError: If the body is not valid JSON.
        """
        return cls(
            status_code=response.status_code,
            body=_decode_json_body(response),
            links=parse_link_header(response.header('Link')),
            raw_body=response.body,
        )


class PageSuccess(BaseModel):
    """A 200 page: its records in received order, and its links."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    records: tuple[RawRecord, ...] = ()
    links: LinkSet = LinkSet()


class AuthorizationFailure(BaseModel):
    """A 403 page."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    description: ErrorDescription


class RequestFailure(BaseModel):
    """Any other non-200 page."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    description: ErrorDescription


PageOutcome = PageSuccess | AuthorizationFailure | RequestFailure


def classify_page(page: PageResult) -> PageOutcome:
    """
    Classify one page into success, authorization failure, or request failure.

    A 200 body without `results` (or with `results: null`) is an empty page,
    not an error.

    Raises:
        InvalidResponseError: If a 200 body is not an object or its
            `results` is not a list of objects.
    """
    if page.status_code == HTTP_STATUS_OK:
        return PageSuccess(records=_extract_results(page), links=page.links)

    description: ErrorDescription = ErrorDescription.from_body(
        page.body, status=page.status_code
    )

    if page.status_code == HTTP_STATUS_FORBIDDEN:
        return AuthorizationFailure(description=description)

    return RequestFailure(description=description)


def _decode_json_body(response: RawResponse) -> Any:
    """Decode a response body, treating an empty body as {}."""
    if not response.body.strip():
        return {}

    try:
        return json.loads(response.body)
    except ValueError as parse_error:
        logger.debug(
            'Invalid JSON in %d response from %s: %s',
            response.status_code,
            response.url,
            response.body[:200],
        )
        raise InvalidResponseError(
            f'Invalid JSON in response: {parse_error}',
            status_code=response.status_code,
            response_body=response.body[:500],
        ) from parse_error


def _extract_results(page: PageResult) -> tuple[RawRecord, ...]:
    """Pull the `results` list out of a 200 body."""
    if not isinstance(page.body, dict):
        raise InvalidResponseError(
            f'Expected JSON object in response, got {type(page.body).__name__}',
            status_code=page.status_code,
            response_body=page.raw_body[:500],
        )

    results: Any = page.body.get(RESULTS_FIELD)
    if results is None:
        return ()

    if not isinstance(results, list) or not all(
        isinstance(record, dict) for record in results
    ):
        raise InvalidResponseError(
            f"Expected '{RESULTS_FIELD}' to be a list of JSON objects",
            status_code=page.status_code,
            response_body=page.raw_body[:500],
        )

    return tuple(results)


# =============================================================================
# Pagination Loop
# =============================================================================


def fetch_all_records(
    client: HTTPGetter,
    url: str,
    /,
    options: Mapping[str, Any] | None = None,
    *,
    paginate: bool = True,
    request_delay_seconds: float = 0.0,
) -> list[RawRecord]:
    """
    Fetch every record of a paginated collection.

    The first request carries `options` as query parameters. Each following
    request goes to the previous page's `next` link with no options, since
    that URI already encodes the query. Pages are fetched strictly one at a
    time because each next URL is only known once the previous page arrives.

    Args:
        client: Object issuing GET requests.
        url: URL of the first page.
        options: Query options for the first request. Passed as one
            mapping, so any option name is allowed.
        paginate: Follow `next` links. When False exactly one request is
            made even if the first page advertises more.
        request_delay_seconds: Pause between page requests.

    Returns:
        All records in received order: page 1 records, then page 2, ...

    Raises:
        AuthorizationError: A page came back 403. No further pages are
            requested.
        RequestFailedError: A page came back with another non-200 status.
        InvalidResponseError: A body could not be interpreted.
        TransientAPIError: The transport kept failing.
    """
    records: list[RawRecord] = []
    page_url: str = url
    query_options: dict[str, Any] = dict(options or {})
    page_count: int = 0

    while True:
        response: RawResponse = client.get(page_url, query_options)
        page: PageResult = PageResult.from_response(response)
        page_count += 1
        next_uri: str | None = None

        match classify_page(page):
            case AuthorizationFailure(description=description):
                logger.debug(
                    'Authorization failed on page %d of %s: %s',
                    page_count,
                    url,
                    description.full_message,
                )
                raise AuthorizationError(description)
            case RequestFailure(description=description):
                logger.debug(
                    'Request failed on page %d of %s: %s',
                    page_count,
                    url,
                    description.full_message,
                )
                raise RequestFailedError(description)
            case PageSuccess(records=page_records, links=links):
                records.extend(page_records)
                next_uri = links.uri(NEXT_RELATION)
                logger.debug(
                    'Page %d: %d records (running total: %d)',
                    page_count,
                    len(page_records),
                    len(records),
                )

        if not paginate or next_uri is None:
            break

        page_url = urljoin(page_url, next_uri)
        query_options = {}

        if request_delay_seconds > 0:
            time.sleep(request_delay_seconds)

    logger.info(
        'Pagination complete for %r: %d records across %d pages',
        url,
        len(records),
        page_count,
    )

    return records


# =============================================================================
# Collection Wrapper
# =============================================================================


RecordT = TypeVar('RecordT')
KeyT = TypeVar('KeyT', bound=Hashable)


class RecordCollection(Sequence[RecordT], Generic[RecordT]):
    """
    Read-only, ordered collection of raw records mapped lazily on access.

    The raw records are fixed at construction. Every iteration pass maps
    them again through `mapper`, so records are never cached and two passes
    are fully independent.

    Besides the Sequence protocol (len, indexing, `in`, index, count,
    reversed) it offers finders, sorting, and grouping built on iteration.
    """

    def __init__(
        self,
        records: Iterable[Mapping[str, Any]] = (),
        mapper: Callable[[RawRecord], RecordT] | None = None,
    ) -> None:
        """
        Args:
            records: Raw records in collection order.
            mapper: Converts one raw record into a domain record. Defaults
                to the collection's own `default_mapper`.
        """
        self._records: tuple[Mapping[str, Any], ...] = tuple(
            MappingProxyType(dict(record)) for record in records
        )
        self._mapper: Callable[[RawRecord], RecordT] = (
            mapper if mapper is not None else self.default_mapper
        )

    def default_mapper(self, record: RawRecord) -> RecordT:
        """Mapping used when none is given. Subclasses override this."""
        raise TypeError(f'{type(self).__name__} requires a record mapper')

    @property
    def raw_records(self) -> tuple[Mapping[str, Any], ...]:
        """The unmapped records, read-only."""
        return self._records

    def _map(self, record: Mapping[str, Any]) -> RecordT:
        # Fresh dict per call so a mapper can never alter the stored record
        return self._mapper(dict(record))

    def __iter__(self) -> Iterator[RecordT]:
        for record in self._records:
            yield self._map(record)

    def __len__(self) -> int:
        return len(self._records)

    @overload
    def __getitem__(self, index: int) -> RecordT: ...

    @overload
    def __getitem__(self, index: slice) -> 'RecordCollection[RecordT]': ...

    def __getitem__(self, index: int | slice) -> 'RecordT | RecordCollection[RecordT]':
        if isinstance(index, slice):
            return type(self)(self._records[index], self._mapper)
        return self._map(self._records[index])

    def __repr__(self) -> str:
        return f'{type(self).__name__}({len(self)} records)'

    # -------------------------------------------------------------------------
    # Finders, Sorting, Grouping
    # -------------------------------------------------------------------------

    def find(self, predicate: Callable[[RecordT], bool]) -> RecordT | None:
        """First record matching the predicate, or None."""
        return next((record for record in self if predicate(record)), None)

    def filter(self, predicate: Callable[[RecordT], bool]) -> list[RecordT]:
        """All records matching the predicate, in collection order."""
        return [record for record in self if predicate(record)]

    def sort_by(
        self,
        key: Callable[[RecordT], Any],
        reverse: bool = False,
    ) -> list[RecordT]:
        """Records sorted by key. Stable, so equal keys keep collection order."""
        return sorted(self, key=key, reverse=reverse)

    def group_by(
        self,
        key: Callable[[RecordT], KeyT],
    ) -> dict[KeyT, list[RecordT]]:
        """Records grouped by key; groups appear in first-seen order."""
        groups: dict[KeyT, list[RecordT]] = {}
        for record in self:
            groups.setdefault(key(record), []).append(record)
        return groups

    def to_dataframe(self) -> pd.DataFrame:
        """
        Mapped records as a pandas DataFrame, one row per record.

        Pydantic records are dumped with their field names. Returns an empty
        DataFrame with no columns for an empty collection.
        """
        if not self._records:
            logger.debug('Empty %s, returning empty DataFrame', type(self).__name__)
            return pd.DataFrame()

        rows: list[dict[str, Any]] = [
            record.model_dump() if isinstance(record, BaseModel) else dict(record)  # pyright: ignore[reportUnknownArgumentType]
            for record in self
        ]
        return pd.DataFrame(rows)


class Trips(RecordCollection[Trip]):
    """
    Collection of Automatic trips.

    Example:
        >>> trips = Trips([{'id': 'T_1', 'distance_m': 1200.0}])
        >>> [trip.distance_km for trip in trips]
        [1.2]
    """

    def default_mapper(self, record: RawRecord) -> Trip:
        return Trip.model_validate(record)


# =============================================================================
# Resource Access
# =============================================================================


class TripsResource:
    """
    Entry point for fetching trips from the API.

    All collaborators are injected: the HTTP client, the route table that
    knows the trip URLs, and the mapper turning raw records into domain
    records.

    Example:
        >>> with AutomaticClient(credentials) as client:
        ...     resource = TripsResource(client, RouteTable(credentials.base_url))
        ...     recent = resource.all(paginate=False, per_page=25)
    """

    def __init__(
        self,
        client: HTTPGetter,
        routes: RouteTable,
        mapper: Callable[[RawRecord], Trip] = Trip.model_validate,
        request_delay_seconds: float = 0.0,
        default_options: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Args:
            client: Object issuing GET requests.
            routes: Route table providing the 'trips' and 'trip' routes.
            mapper: Converts one raw record into a Trip.
            request_delay_seconds: Pause between page requests.
            default_options: Query options sent with every first-page
                request; per-call options override them.
        """
        self._client: HTTPGetter = client
        self._routes: RouteTable = routes
        self._mapper: Callable[[RawRecord], Trip] = mapper
        self._request_delay_seconds: float = request_delay_seconds
        self._default_options: dict[str, Any] = dict(default_options or {})

    def all(self, /, paginate: bool = True, **options: Any) -> Trips:
        """
        Fetch the whole trips collection.

        Args:
            paginate: Follow next-page links. False fetches only the first page.
            **options: Query options (e.g. started_at__gte, vehicle). Any
                name other than paginate is sent to the API.

        Returns:
            Trips holding every record received, in order.

        Raises:
            AuthorizationError: On HTTP 403.
            RequestFailedError: On any other non-200 status.
            InvalidResponseError: On an uninterpretable body.
        """
        records: list[RawRecord] = fetch_all_records(
            self._client,
            self._routes.url_for('trips'),
            {**self._default_options, **options},
            paginate=paginate,
            request_delay_seconds=self._request_delay_seconds,
        )
        return Trips(records, self._mapper)

    def find_by_id(self, trip_id: str, /, **options: Any) -> Trip | None:
        """
        Fetch one trip by ID with a single request.

        Args:
            trip_id: Automatic trip ID.
            **options: Query options.

        Returns:
            The Trip, or None when the API answers with anything but 200.

        Raises:
            InvalidResponseError: If a 200 body is not a JSON object.
        """
        trip_url: str = self._routes.url_for('trip', id=trip_id)
        response: RawResponse = self._client.get(trip_url, options)

        if not response.is_ok:
            logger.debug(
                'Trip %r not returned: HTTP %d', trip_id, response.status_code
            )
            return None

        body: Any = _decode_json_body(response)
        if not isinstance(body, dict):
            raise InvalidResponseError(
                f'Expected JSON object in response, got {type(body).__name__}',
                status_code=response.status_code,
                response_body=response.body[:500],
            )

        return self._mapper(body)

    def find_by_id_or_raise(self, trip_id: str, /, **options: Any) -> Trip:
        """
        Fetch one trip by ID, raising if it can't be found.

        Shares the single request of find_by_id.

        Raises:
            NotFoundError: When the API answers with anything but 200.
        """
        trip: Trip | None = self.find_by_id(trip_id, **options)

        if trip is None:
            raise NotFoundError(trip_id)

        return trip

# automatic_trips/models/__init__.py

from automatic_trips.models.http_models import (
    ApiCredentials,
    HTTPGetter,
    RawResponse,
)
from automatic_trips.models.link_header import (
    Link,
    LinkSet,
    parse_link_header,
)
from automatic_trips.models.trip_models import (
    Address,
    ErrorDescription,
    Location,
    Trip,
    VehicleEvent,
)

__all__: list[str] = [
    'Address',
    'ApiCredentials',
    'ErrorDescription',
    'HTTPGetter',
    'Link',
    'LinkSet',
    'Location',
    'RawResponse',
    'Trip',
    'VehicleEvent',
    'parse_link_header',
]

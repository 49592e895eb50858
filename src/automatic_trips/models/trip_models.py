# automatic_trips/models/trip_models.py
"""
Pydantic models for Automatic API trip records and error bodies.

Models are organized from embedded objects up to the full Trip record.

Design Notes:
    - A trip references its user and vehicle by resource URL, not inline.
    - Most fields are nullable; trips still being processed by Automatic
      come back without end location, address, or scores.
    - Timestamps are ISO-8601 UTC; timezones are IANA names.
    - Response models use extra='ignore' so new API fields don't break parsing.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field

__all__: list[str] = [
    'Address',
    'ErrorDescription',
    'Location',
    'ResponseModelBase',
    'Trip',
    'VehicleEvent',
]

logger: logging.Logger = logging.getLogger(__name__)


# =============================================================================
# Base Configuration for Response Models
# =============================================================================


class ResponseModelBase(BaseModel):
    """
    Base class for all Automatic API response models.

    Configuration:
        - extra='ignore': Silently ignore unknown fields from API responses.
        - populate_by_name=True: Allow initialization by field name OR alias.
        - str_strip_whitespace=True: Trim whitespace from string fields.
    """

    model_config = ConfigDict(
        extra='ignore',
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# Embedded Models
# =============================================================================


class Location(ResponseModelBase):
    """
    A GPS fix at the start or end of a trip.

    Attributes:
        latitude: Decimal degrees.
        longitude: Decimal degrees.
        accuracy_m: Reported horizontal accuracy in meters.
        created_at: When the fix was recorded.
    """

    latitude: float = Field(alias='lat')
    longitude: float = Field(alias='lon')
    accuracy_m: float | None = None
    created_at: datetime | None = None


class Address(ResponseModelBase):
    """Reverse-geocoded address of a trip endpoint."""

    name: str | None = None
    display_name: str | None = None
    street_number: str | None = None
    street_name: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


class VehicleEvent(ResponseModelBase):
    """
    A driving event recorded during a trip (hard brake, speeding, ...).

    Attributes:
        event_type: Kind of event, e.g. 'hard_brake' or 'speeding'.
        created_at: When the event occurred.
        lat: Latitude of the event, if known.
        lon: Longitude of the event, if known.
        g_force: Peak acceleration for brake/accel events.
    """

    event_type: str = Field(alias='type')
    created_at: datetime | None = None
    lat: float | None = None
    lon: float | None = None
    g_force: float | None = None


# =============================================================================
# Trip Record
# =============================================================================


class Trip(ResponseModelBase):
    """
    One trip as returned by the /trip/ endpoints.

    Attributes:
        trip_id: Automatic trip identifier (e.g. 'T_3ccd6d1ac1b2c9a8').
        url: Canonical resource URL of the trip.
        user: Resource URL of the driver.
        vehicle: Resource URL of the vehicle.
        started_at: Ignition-on timestamp.
        ended_at: Ignition-off timestamp.
        distance_m: Distance driven in meters.
        duration_s: Trip duration in seconds.
        fuel_cost_usd: Estimated fuel cost.
        fuel_volume_l: Estimated fuel consumed in liters.
        average_kmpl: Observed fuel economy.
        average_from_epa_kmpl: EPA-rated fuel economy for the vehicle.
        score_events: Driving score for brake/accel events (0-50).
        score_speeding: Driving score for speeding (0-50).
        hard_brakes: Number of hard-brake events.
        hard_accels: Number of hard-acceleration events.
        idling_time_s: Seconds spent idling.
    """

    trip_id: str = Field(alias='id')
    url: str | None = None
    user: str | None = None
    vehicle: str | None = None

    started_at: datetime | None = None
    ended_at: datetime | None = None
    start_timezone: str | None = None
    end_timezone: str | None = None

    distance_m: float | None = None
    duration_s: float | None = None

    start_location: Location | None = None
    start_address: Address | None = None
    end_location: Location | None = None
    end_address: Address | None = None
    path: str | None = None

    fuel_cost_usd: float | None = None
    fuel_volume_l: float | None = None
    average_kmpl: float | None = None
    average_from_epa_kmpl: float | None = None

    score_events: float | None = None
    score_speeding: float | None = None
    hard_brakes: int | None = None
    hard_accels: int | None = None
    duration_over_70_s: int | None = None
    duration_over_75_s: int | None = None
    duration_over_80_s: int | None = None

    city_fraction: float | None = None
    highway_fraction: float | None = None
    night_driving_fraction: float | None = None
    idling_time_s: int | None = None

    vehicle_events: list[VehicleEvent] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @property
    def distance_km(self) -> float | None:
        """Distance in kilometers, None if not reported."""
        if self.distance_m is None:
            return None
        return self.distance_m / 1000.0

    @property
    def duration(self) -> timedelta | None:
        """Trip duration, preferring duration_s over the timestamp difference."""
        if self.duration_s is not None:
            return timedelta(seconds=self.duration_s)
        if self.started_at is not None and self.ended_at is not None:
            return self.ended_at - self.started_at
        return None

    @property
    def is_complete(self) -> bool:
        """Whether the trip has both endpoints recorded."""
        return self.ended_at is not None and self.end_location is not None


# =============================================================================
# Error Body
# =============================================================================


class ErrorDescription(BaseModel):
    """
    Error body returned by the Automatic API, with the HTTP status merged in.

    The API answers failures with `{"error": "err_...", "detail": "..."}`.
    Unknown keys are kept so nothing in the body is lost.

    Attributes:
        status: HTTP status code of the failed response.
        error: Machine-readable error code, e.g. 'err_unauthorized'.
        detail: Human-readable explanation.
        message: Alternate explanation key used by some endpoints.
    """

    model_config = ConfigDict(extra='allow')

    status: int
    error: str | None = None
    detail: str | None = None
    message: str | None = None

    @classmethod
    def from_body(cls, body: Any, status: int) -> Self:
        """
        Build a description from any decoded JSON body.

        Non-object bodies (strings, lists, null) are kept as the detail text
        so an oddly shaped error response still yields a readable message.
        """
        if isinstance(body, dict):
            error_fields: dict[str, Any] = {**body, 'status': status}
        elif body in (None, ''):
            error_fields = {'status': status}
        else:
            error_fields = {'status': status, 'detail': str(body)}

        # Non-string error/detail values would fail validation; render them
        for key in ('error', 'detail', 'message'):
            value: Any = error_fields.get(key)
            if value is not None and not isinstance(value, str):
                error_fields[key] = str(value)

        return cls.model_validate(error_fields)

    @property
    def full_message(self) -> str:
        """Human-readable summary, e.g. 'HTTP 403 - err_forbidden - bad token'."""
        parts: list[str] = [f'HTTP {self.status}']
        if self.error:
            parts.append(self.error)
        explanation: str | None = self.detail or self.message
        if explanation:
            parts.append(explanation)
        return ' - '.join(parts)

# automatic_trips/routes.py
"""
Named route table for Automatic API resources.

Resolves a route name such as 'trips' or 'trip' to a ready-to-fetch URL,
interpolating path parameters like `{id}`. Callers never hardcode resource
paths; they ask the table for a URL by name.

Design Decisions:
-----------------
- Case-insensitive lookups: route names are normalized to lowercase, so
  'TRIPS', 'Trips', and 'trips' all work.

- Immutable after initialization: the table cannot be modified after
  construction.

- Path parameter values are URL-quoted, so an ID can never inject extra
  path segments or a query string.

Usage:
------
    from automatic_trips.routes import RouteTable

    routes = RouteTable('https://api.automatic.com')
    routes.url_for('trips')            # 'https://api.automatic.com/trip/'
    routes.url_for('trip', id='T_1')   # 'https://api.automatic.com/trip/T_1/'
"""

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, field_validator

__all__: list[str] = [
    'DEFAULT_ROUTES',
    'Route',
    'RouteNotFoundError',
    'RouteTable',
]

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_ROUTES: Final[Mapping[str, str]] = MappingProxyType(
    {
        'trips': '/trip/',
        'trip': '/trip/{id}/',
    }
)

_PLACEHOLDER_PATTERN: Final[re.Pattern[str]] = re.compile(r'\{(\w+)\}')


# =============================================================================
# Exceptions
# =============================================================================


class RouteNotFoundError(Exception):
    """
    Raised when a requested route name doesn't exist in the table.

    Attributes:
        route_name: The route name that was not found.
        available_routes: List of valid route names.
    """

    def __init__(self, route_name: str, available_routes: list[str]) -> None:
        self.route_name: str = route_name
        self.available_routes: list[str] = available_routes
        super().__init__(
            f"Route '{route_name}' not found. "
            f'Available: {", ".join(sorted(available_routes))}'
        )


# =============================================================================
# Route
# =============================================================================


class Route(BaseModel):
    """
    One named resource path, possibly containing `{placeholders}`.

    Attributes:
        name: Lowercase route name.
        path_template: Path relative to the API base URL.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    name: str
    path_template: str

    @field_validator('path_template')
    @classmethod
    def validate_path_template_format(cls, path_template: str) -> str:
        """Ensure the path starts with a forward slash."""
        if not path_template:
            raise ValueError('path_template cannot be empty')
        if not path_template.startswith('/'):
            path_template = f'/{path_template}'
        return path_template

    @property
    def path_parameters(self) -> list[str]:
        """Placeholder names in template order."""
        return _PLACEHOLDER_PATTERN.findall(self.path_template)

    def build_path(self, **path_params: Any) -> str:
        """
        Substitute path parameters into the template.

        Args:
            **path_params: Values for every placeholder in the template.

        Returns:
            The resolved relative path.

        Raises:
            ValueError: If a placeholder has no value.
        """
        resolved_path: str = self.path_template

        for param_name in self.path_parameters:
            if path_params.get(param_name) is None:
                raise ValueError(
                    f'Missing required path parameter for route {self.name!r}: '
                    f'{param_name}'
                )

            serialized_value: str = quote(str(path_params[param_name]), safe='')
            resolved_path = resolved_path.replace(f'{{{param_name}}}', serialized_value)

        return resolved_path


# =============================================================================
# Route Table
# =============================================================================


class RouteTable:
    """
    Immutable mapping of route names to URLs under one API base URL.

    Example:
        >>> routes = RouteTable('https://api.automatic.com')
        >>> routes.route_for('trip').path_parameters
        ['id']
        >>> routes.url_for('trip', id='T_42')
        'https://api.automatic.com/trip/T_42/'
    """

    def __init__(
        self,
        base_url: str,
        routes: Mapping[str, str] | None = None,
    ) -> None:
        """
        Initialize the route table.

        Args:
            base_url: API base URL; a trailing slash is stripped.
            routes: Route name to path template mapping. Defaults to the
                Automatic trip routes.
        """
        self._base_url: str = base_url.rstrip('/')

        route_templates: Mapping[str, str] = (
            routes if routes is not None else DEFAULT_ROUTES
        )
        self._routes: MappingProxyType[str, Route] = MappingProxyType(
            {
                name.lower(): Route(name=name.lower(), path_template=template)
                for name, template in route_templates.items()
            }
        )

        logger.debug(
            'Initialized RouteTable: base_url=%r, routes=%s',
            self._base_url,
            sorted(self._routes),
        )

    @property
    def base_url(self) -> str:
        """API base URL without trailing slash."""
        return self._base_url

    def route_for(self, route_name: str) -> Route:
        """
        Look up a route by name (case-insensitive).

        Raises:
            RouteNotFoundError: If no route has that name.
        """
        route: Route | None = self._routes.get(route_name.lower())
        if route is None:
            raise RouteNotFoundError(route_name, list(self._routes))
        return route

    def url_for(self, route_name: str, **path_params: Any) -> str:
        """
        Build the absolute URL of a route.

        Args:
            route_name: Route name (case-insensitive).
            **path_params: Values for the route's placeholders.

        Returns:
            Absolute URL ready to fetch.

        Raises:
            RouteNotFoundError: If no route has that name.
            ValueError: If a path parameter is missing.
        """
        route: Route = self.route_for(route_name)
        return f'{self._base_url}{route.build_path(**path_params)}'

    def list_routes(self) -> list[str]:
        """Sorted route names."""
        return sorted(self._routes)

    def __contains__(self, route_name: object) -> bool:
        return isinstance(route_name, str) and route_name.lower() in self._routes

    def __repr__(self) -> str:
        return f'RouteTable(base_url={self._base_url!r}, routes={self.list_routes()!r})'

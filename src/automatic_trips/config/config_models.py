# automatic_trips/config/config_models.py
"""
Configuration management for the Automatic trips client.

This module provides Pydantic models for the configuration file that
controls how the Automatic API is reached, how the trips collection is
paginated, and where log output goes.

Design Decisions:
-----------------
- All models use `extra='forbid'` to catch typos and invalid fields in YAML
  configuration files early, preventing silent misconfiguration.

- No logging occurs within this module because the logging configuration itself
  is defined here. Logging must be configured by the caller after loading config.

- SSL verification supports three modes to handle corporate proxy environments:
  1. `True` - Standard verification using system CA bundle
  2. `False` - Disabled verification (use with caution)
  3. String path - Custom CA bundle (e.g., exported proxy root certificate)

- SecretStr is used for the access token to prevent accidental exposure in
  logs, repr(), or error messages. Read it via `.get_secret_value()`.

Usage:
------
    import yaml
    from automatic_trips.config.config_models import AutomaticConfig

    with open('automatic_config.yaml', 'r') as config_file:
        raw_config = yaml.safe_load(config_file)

    config = AutomaticConfig.model_validate(raw_config)
"""

from pathlib import Path
from typing import Literal, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

__all__: list[str] = [
    'ApiConfig',
    'AutomaticConfig',
    'LogLevelName',
    'LoggingConfig',
    'TripsConfig',
]

# =============================================================================
# Type Aliases
# =============================================================================

LogLevelName = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# Only the standard logging constants are accepted as numeric levels.
LOG_LEVEL_VALUES: frozenset[int] = frozenset({10, 20, 30, 40, 50})

LOG_LEVEL_NAME_TO_INT: dict[LogLevelName, int] = {
    'DEBUG': 10,
    'INFO': 20,
    'WARNING': 30,
    'ERROR': 40,
    'CRITICAL': 50,
}

DEFAULT_BASE_URL: str = 'https://api.automatic.com'


# =============================================================================
# API Connection Configuration
# =============================================================================


class ApiConfig(BaseModel):
    """Connection settings for the Automatic API.

    Network Resilience:
        Only transport failures (timeouts, dropped connections) are retried,
        using exponential backoff:
        `delay = retry_backoff_factor * (2 ** attempt_number)`

        HTTP error statuses are never retried by the client; they surface
        as typed errors from the trips layer.

    Attributes:
        base_url: Root API URL. Must include scheme and is stored without a
            trailing slash.
        access_token: OAuth bearer token. Stored as SecretStr.
        request_timeout: [connect, read] timeouts in seconds.
        max_retries: Maximum attempts for a request hitting transport errors.
        retry_backoff_factor: Multiplier for the exponential backoff.
        verify_ssl: False disables verification, True uses the default CA
            bundle, a string is a path to a custom CA bundle.
        use_truststore: Build the SSLContext from the OS trust store.
    """

    model_config = ConfigDict(extra='forbid')

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description='Root API URL with scheme, without trailing slash',
    )
    access_token: SecretStr = Field(
        description='OAuth bearer token (masked in logs and repr)',
    )
    request_timeout: tuple[int, int] = Field(
        default=(10, 30),
        description='[connect_timeout, read_timeout] in seconds; both must be positive',
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description='Maximum attempts on transport errors (1-10)',
    )
    retry_backoff_factor: float = Field(
        default=1.0,
        gt=0.0,
        le=60.0,
        description='Exponential backoff multiplier; delay = factor * (2 ** attempt)',
    )
    verify_ssl: bool | str = Field(
        default=True,
        description='False to disable SSL, True for system CA, or path to CA bundle',
    )
    use_truststore: bool = Field(
        default=False,
        description='Use truststore library for OS certificate store',
    )

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, base_url: str) -> str:
        """Require an http(s) scheme and strip any trailing slash.

        Raises:
            ValueError: If URL is empty or missing http/https scheme.
        """
        if not base_url:
            raise ValueError('base_url cannot be empty')

        if not base_url.startswith(('http://', 'https://')):
            raise ValueError(
                f"base_url must start with 'http://' or 'https://', got: {base_url!r}"
            )

        return base_url.rstrip('/')

    @field_validator('access_token')
    @classmethod
    def validate_access_token_not_empty(cls, access_token: SecretStr) -> SecretStr:
        """Ensure the access token is not empty or whitespace-only.

        Raises:
            ValueError: If the token is blank.
        """
        secret_value: str = access_token.get_secret_value()
        if not secret_value or not secret_value.strip():
            raise ValueError('access_token cannot be empty or whitespace-only')
        return access_token

    @field_validator('request_timeout')
    @classmethod
    def validate_timeout_values_positive(
        cls, timeout: tuple[int, int]
    ) -> tuple[int, int]:
        """Ensure both timeout values are positive integers.

        Args:
            timeout: Tuple of [connect_timeout, read_timeout] in seconds.

        Returns:
            The validated timeout tuple.

        Raises:
            ValueError: If either timeout value is non-positive.
        """
        connect_timeout, read_timeout = timeout

        if connect_timeout <= 0:
            raise ValueError(
                f'connect_timeout must be positive, got: {connect_timeout}'
            )
        if read_timeout <= 0:
            raise ValueError(f'read_timeout must be positive, got: {read_timeout}')

        return timeout

    @field_validator('verify_ssl')
    @classmethod
    def validate_ssl_configuration(cls, verify_ssl: bool | str) -> bool | str:
        """Validate that a custom CA bundle path points at an existing file.

        Raises:
            ValueError: If string path does not exist or is not a file.
        """
        if isinstance(verify_ssl, str):
            cert_path = Path(verify_ssl)

            if not cert_path.exists():
                raise ValueError(f'SSL certificate bundle file not found: {verify_ssl}')
            if not cert_path.is_file():
                raise ValueError(
                    f'SSL certificate path must be a file, not directory: {verify_ssl}'
                )

        return verify_ssl


# =============================================================================
# Trips Collection Configuration
# =============================================================================


class TripsConfig(BaseModel):
    """Defaults applied when fetching the trips collection.

    Attributes:
        paginate: Follow `next` links until the collection is exhausted.
            When False only the first page is fetched.
        per_page: Page size requested from the API. None leaves it to the
            API default.
        request_delay_seconds: Pause between sequential page requests.
    """

    model_config = ConfigDict(extra='forbid')

    paginate: bool = Field(
        default=True,
        description='Follow next-page links until exhausted',
    )
    per_page: int | None = Field(
        default=None,
        ge=1,
        le=1000,
        description='Requested page size (sent as the per_page query option)',
    )
    request_delay_seconds: float = Field(
        default=0.0,
        ge=0.0,
        le=30.0,
        description='Delay between page requests in seconds (0-30)',
    )

    def default_options(self) -> dict[str, int]:
        """Query options sent with the first page request."""
        if self.per_page is None:
            return {}
        return {'per_page': self.per_page}


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Configuration for application logging output.

    Console output is always enabled. File output is enabled by providing a
    file_path; its level defaults to DEBUG when not given.

    Attributes:
        file_path: Path to log file. None disables file logging.
            Extension .log is appended automatically if missing.
        console_level: Minimum log level for console output.
        file_level: Minimum log level for file output.
    """

    model_config = ConfigDict(extra='forbid')

    file_path: Path | None = Field(
        default=None,
        description='Log file path (.log extension auto-added). None disables file logging.',
    )
    console_level: LogLevelName | int = Field(
        default='INFO',
        description="Console log level: 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL', or int",
    )
    file_level: LogLevelName | int | None = Field(
        default=None,
        description='File log level. None disables file logging.',
    )

    @field_validator('file_path', mode='before')
    @classmethod
    def normalize_log_file_path(cls, path_value: str | Path | None) -> Path | None:
        """Normalize path and ensure .log extension."""
        if path_value is None:
            return None

        path_string: str = str(path_value)

        if not path_string.lower().endswith('.log'):
            path_string = f'{path_string}.log'

        return Path(path_string)

    @field_validator('console_level', 'file_level', mode='after')
    @classmethod
    def validate_numeric_log_level(
        cls, level_value: LogLevelName | int | None
    ) -> LogLevelName | int | None:
        """Validate numeric log levels are standard Python logging values.

        Raises:
            ValueError: If numeric level is not a standard logging value.
        """
        if level_value is None or isinstance(level_value, str):
            return level_value

        if level_value not in LOG_LEVEL_VALUES:
            raise ValueError(
                f'Numeric log level must be one of {sorted(LOG_LEVEL_VALUES)}, '
                f'got: {level_value}'
            )

        return level_value

    @model_validator(mode='after')
    def ensure_file_logging_configuration_consistency(self) -> Self:
        """Default file_level to DEBUG when only a path is given.

        Raises:
            ValueError: If file_level is set but file_path is missing.
        """
        has_file_path: bool = self.file_path is not None
        has_file_level: bool = self.file_level is not None

        if has_file_path and not has_file_level:
            self.file_level = 'DEBUG'

        if has_file_level and not has_file_path:
            raise ValueError(
                'file_level is specified but file_path is missing. '
                'Provide file_path to enable file logging, or remove file_level.'
            )

        return self

    def get_console_level_int(self) -> int:
        """Convert console_level to numeric value for logging module."""
        if isinstance(self.console_level, int):
            return self.console_level
        return LOG_LEVEL_NAME_TO_INT[self.console_level]

    def get_file_level_int(self) -> int | None:
        """Convert file_level to numeric value, None if file logging is off."""
        if self.file_level is None:
            return None
        if isinstance(self.file_level, int):
            return self.file_level
        return LOG_LEVEL_NAME_TO_INT[self.file_level]


# =============================================================================
# Root Configuration
# =============================================================================


class AutomaticConfig(BaseModel):
    """Root configuration model for the Automatic trips client.

    Aggregates the configuration sections. Every model in the hierarchy
    rejects unknown fields, so typos fail at load time.

    Attributes:
        api: Connection settings for the Automatic API.
        trips: Pagination defaults for the trips collection.
        logging: Console and file logging settings.
    """

    model_config = ConfigDict(extra='forbid')

    api: ApiConfig = Field(
        description='Automatic API connection settings',
    )
    trips: TripsConfig = Field(
        default_factory=TripsConfig,
        description='Trips collection pagination defaults',
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description='Application logging configuration',
    )

"""
Configuration Package for the Automatic trips client.

Exposes the configuration models and the loader function.
"""

from automatic_trips.config.config_models import (
    ApiConfig,
    AutomaticConfig,
    LoggingConfig,
    TripsConfig,
)
from automatic_trips.config.loader import load_config

__all__: list[str] = [
    'ApiConfig',
    'AutomaticConfig',
    'LoggingConfig',
    'TripsConfig',
    'load_config',
]

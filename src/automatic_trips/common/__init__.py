# automatic_trips/common/__init__.py

from automatic_trips.common.logger import setup_logger
from automatic_trips.common.truststore_context import build_truststore_ssl_context

__all__: list[str] = [
    'build_truststore_ssl_context',
    'setup_logger',
]

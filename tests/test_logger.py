"""
Tests for automatic_trips.common: logging setup and the truststore context.
"""

import logging
import ssl
import sys
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from automatic_trips.common import build_truststore_ssl_context, setup_logger
from automatic_trips.common.logger import PACKAGE_LOGGER_NAME
from automatic_trips.config import LoggingConfig


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Remove handlers added by a test."""
    yield
    package_logger: logging.Logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()


class TestSetupLogger:
    """Test setup_logger()."""

    def test_default_console_handler(self) -> None:
        """Should add a single INFO console handler."""
        package_logger: logging.Logger = setup_logger()

        assert package_logger.name == 'automatic_trips'
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.INFO

    def test_repeated_calls_do_not_duplicate_handlers(self) -> None:
        """Should reset handlers on every call."""
        setup_logger(logging_level=logging.DEBUG)
        package_logger: logging.Logger = setup_logger(logging_level=logging.WARNING)

        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.WARNING

    def test_file_handler_from_config(
        self,
        logging_config: LoggingConfig,
        temp_log_file: Path,
    ) -> None:
        """Should log DEBUG to file while the console stays at INFO."""
        package_logger: logging.Logger = setup_logger(config=logging_config)

        logging.getLogger('automatic_trips.trips').debug('page fetched')
        for handler in package_logger.handlers:
            handler.flush()

        assert len(package_logger.handlers) == 2  # noqa: PLR2004
        assert package_logger.level == logging.DEBUG
        assert temp_log_file.exists()
        assert 'page fetched' in temp_log_file.read_text(encoding='utf-8')

    def test_config_overrides_logging_level(self) -> None:
        """Should ignore logging_level when a config is given."""
        package_logger: logging.Logger = setup_logger(
            logging_level=logging.DEBUG,
            config=LoggingConfig(console_level='ERROR'),
        )

        assert package_logger.level == logging.ERROR


class TestBuildTruststoreSslContext:
    """Test build_truststore_ssl_context()."""

    def test_missing_truststore_raises_runtime_error(self) -> None:
        """Should point at the truststore extra when it isn't installed."""
        with (
            patch.dict(sys.modules, {'truststore': None}),
            pytest.raises(RuntimeError, match=r'automatic-trips\[truststore\]'),
        ):
            build_truststore_ssl_context()

    def test_returns_client_context(self) -> None:
        """Should build a client-side TLS context from truststore."""
        fake_truststore = MagicMock()

        with patch.dict(sys.modules, {'truststore': fake_truststore}):
            ssl_context = build_truststore_ssl_context()

        fake_truststore.SSLContext.assert_called_once_with(ssl.PROTOCOL_TLS_CLIENT)
        assert ssl_context is fake_truststore.SSLContext.return_value

# automatic_trips/config/loader.py
"""
Configuration Loading Logic.

Bridges raw YAML files on disk and the typed Pydantic models in
`config_models.py`: locates and reads the file, parses it, validates it
into an `AutomaticConfig`, and logs low-level failures with context before
re-raising them.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from automatic_trips.config.config_models import AutomaticConfig

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH: Path = Path('config/automatic_config.yaml')


def load_config(config_path: Path | str | None = None) -> AutomaticConfig:
    """Load and validate the client configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file. If None, defaults
                    to 'config/automatic_config.yaml' relative to the
                    current working directory.

    Returns:
        Validated AutomaticConfig instance.

    Raises:
        FileNotFoundError: If config file does not exist at the specified path.
        yaml.YAMLError: If YAML file is malformed or cannot be parsed.
        ValueError: If configuration fails Pydantic validation.

    Example:
        >>> config = load_config('config/automatic_config.yaml')
        >>> config.api.base_url
        'https://api.automatic.com'
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
        logger.debug('No config path provided, using default: %s', config_path)
    else:
        config_path = Path(config_path)

    logger.info('Loading Automatic configuration from: %s', config_path)

    if not config_path.exists():
        error_message: str = f'Configuration file not found: {config_path}'
        logger.error(error_message)
        raise FileNotFoundError(error_message)

    try:
        with Path.open(config_path, encoding='utf-8') as config_file:
            raw_config_data: Any = yaml.safe_load(config_file)
    except yaml.YAMLError as error:
        error_message = f'Failed to parse YAML configuration: {error}'
        logger.error(error_message)
        raise yaml.YAMLError(error_message) from error

    if not isinstance(raw_config_data, dict):
        error_message = (
            'Configuration validation failed: expected a mapping at the top level, '
            f'got {type(raw_config_data).__name__}'
        )
        logger.error(error_message)
        raise ValueError(error_message)

    # pydantic.ValidationError subclasses ValueError
    try:
        validated_config = AutomaticConfig(**raw_config_data)
    except ValueError as error:
        error_message = f'Configuration validation failed: {error}'
        logger.error(error_message)
        raise ValueError(error_message) from error

    logger.info('Configuration loaded and validated successfully')
    return validated_config

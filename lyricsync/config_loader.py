"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from typing import Mapping, Optional
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"

DEFAULT_CONFIG = {
    'model': 'gemini-2.5-flash',
    'mode': 'line',
    'api_key_env': DEFAULT_API_KEY_ENV,
    'rollover_correction': False,
    'output_formats': ['srt', 'lrc'],
    'temp_dir': 'temp',
    'log_dir': 'logs',
    'log_file': 'lyricsync.log',
}

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def load_config(self, config_path: str) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Keys missing from the file are filled from DEFAULT_CONFIG.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the loaded configuration settings.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML or
                              if there are other reading errors.
        """
        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except OSError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        config = dict(DEFAULT_CONFIG)
        config.update(loaded)
        formats = config['output_formats']
        config['output_formats'] = [formats] if isinstance(formats, str) else list(formats)
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config


def resolve_api_key(config: Mapping, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolves the Gemini API key once, at startup.

    An explicit 'api_key' in the config wins; otherwise the environment
    variable named by 'api_key_env' is read.

    Raises:
        ConfigurationError: If no key can be found.
    """
    explicit = config.get('api_key')
    if explicit:
        return str(explicit)
    environ = os.environ if environ is None else environ
    env_name = config.get('api_key_env') or DEFAULT_API_KEY_ENV
    value = environ.get(env_name)
    if not value:
        raise ConfigurationError(
            f"API Key is missing. Set '{env_name}' in the environment or 'api_key' in the config file."
        )
    logger.debug(f"Using API key from environment variable {env_name}.")
    return value

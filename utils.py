# utils.py
"""
Utility functions for the application framework.

This module provides helpers, such as logging setup and configuration
loading, that are used by the entry point but do not belong to the particle
engine or to rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" key holding "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates the log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Inputs:
#     - path: A JSON file whose top level is an object with any of the
#       sections in CONFIG_SECTIONS:
#       - "particles": ParticleConfig fields (max_particles, lifetime,
#         emission_speed, deceleration, sprite_size).
#       - "window": width, height, fullscreen, fps, title,
#         background_color, sprite_color.
#       - "run_control": seed, max_frames, log_throttle_frames, profile.
#       - "logging": level, format, log_file.
#   - Outputs: The parsed document. Every known section is present; a
#     missing one is filled in as an empty dict so callers read defaults.
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError when
#     the document or one of its sections is not a JSON object (all logged
#     first). Unknown sections are logged as warnings and kept.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/pinkboard.log'
CONFIG_SECTIONS = ("particles", "window", "run_control", "logging")


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}. Log file path: {log_file_path}")


def load_config(path: str) -> Dict[str, Any]:
    """
    Loads the JSON configuration file and checks its section layout.

    Values inside the sections are validated by the components that
    consume them, e.g. ParticleConfig for `particles`.
    """
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration error: {path} must contain a JSON object, not {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)

    unknown = sorted(set(config) - set(CONFIG_SECTIONS))
    if unknown:
        logging.warning(f"Ignoring unknown configuration sections: {', '.join(unknown)}.")

    for section in CONFIG_SECTIONS:
        value = config.setdefault(section, {})
        if not isinstance(value, dict):
            msg = f"Configuration error: section '{section}' must be a JSON object, not {type(value).__name__}."
            logging.error(msg)
            raise ValueError(msg)

    missing = [s for s in CONFIG_SECTIONS if not config[s]]
    if missing:
        logging.info(f"Using defaults for empty or missing sections: {', '.join(missing)}.")
    logging.info("Configuration loaded successfully.")
    return config

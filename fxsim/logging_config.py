"""
Centralized logging configuration for fxsim.
Loads logging settings from config/logging.json or falls back to defaults.
"""

import logging
import logging.config
import json
import os
import sys
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(config_path: Optional[str] = None, level: Optional[int] = None,
                  log_file: Optional[str] = None) -> None:
    """
    Configure logging from a JSON config file or use defaults.

    Args:
        config_path: Path to logging config JSON file.
                    Defaults to 'config/logging.json' relative to project root.
        level: Optional root level override (e.g. logging.DEBUG for --verbose).
        log_file: Also log to this file.
    """
    if config_path is None:
        # Find config relative to this file's location
        package_dir = os.path.dirname(os.path.abspath(__file__))
        project_root = os.path.dirname(package_dir)
        config_path = os.path.join(project_root, 'config', 'logging.json')

    loaded = False
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
            logging.config.dictConfig(config)
            loaded = True
            if log_file:
                _add_file_handler(log_file, config)
        except (json.JSONDecodeError, ValueError, KeyError) as e:
            print(f"Warning: Failed to load logging config from {config_path}: {e}")
            print("Falling back to default logging configuration.")

    if not loaded:
        _setup_default_logging(log_file)

    if level is not None:
        logging.getLogger().setLevel(level)
        if level <= logging.DEBUG:
            for logger_name in _PER_TICK_LOGGERS:
                logging.getLogger(logger_name).setLevel(level)


# Loggers that emit once per clock tick or per iteration
_PER_TICK_LOGGERS = [
    'fxsim.engine.evaluator',
    'fxsim.engine.controller',
]


def _setup_default_logging(log_file: Optional[str] = None) -> None:
    """Setup default logging configuration if config file is unavailable."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.INFO,
        format=DEFAULT_FORMAT,
        handlers=handlers,
    )

    # The evaluator logs every saturating lane
    logging.getLogger('fxsim.engine.evaluator').setLevel(logging.WARNING)


def _add_file_handler(log_file: str, config: dict) -> None:
    """Attach a file handler to the root logger using the config's standard format."""
    fmt = config.get('formatters', {}).get('standard', {}).get('format', DEFAULT_FORMAT)
    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter(fmt))
    logging.getLogger().addHandler(handler)

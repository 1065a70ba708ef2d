"""
Simple configuration management for fxsim.

Session constants (learning rates, convergence window, iteration cap) are
configuration-time values. They are read here as floats and quantized to
fixed point by SessionConfig before a session can start.
"""

import json
import os
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_FILE = os.path.join(PROJECT_ROOT, "config", "default_config.json")


class ConfigManager:
    """Simple configuration manager for fxsim settings."""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or DEFAULT_CONFIG_FILE
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r') as f:
                    self._config = json.load(f)
                logger.info(f"Configuration loaded from {self.config_file}")
            else:
                logger.warning(f"Configuration file {self.config_file} not found, using defaults")
                self._config = self._get_default_config()
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading configuration: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "session": {
                "initial_params": [0, 0, 0, 0],
                "learning_rates": [0.125, 0.25, 0.5, 1.0],
                "convergence_lower": -0.00390625,
                "convergence_upper": 0.00390625,
                "max_iterations": 50
            },
            "simulation": {
                "max_ticks": None
            },
            "diagnostics": {
                "escalate_overflow": False
            },
            "logging": {
                "level": "INFO",
                "log_to_file": False,
                "log_file": "fxsim.log"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Path to the configuration key (e.g., "session.max_iterations")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> bool:
        """
        Set configuration value using dot notation.

        Args:
            key_path: Path to the configuration key
            value: Value to set

        Returns:
            True if successful, False otherwise
        """
        keys = key_path.split('.')
        config_ref = self._config

        # Navigate to the parent of the target key
        for key in keys[:-1]:
            if key not in config_ref:
                config_ref[key] = {}
            config_ref = config_ref[key]
            if not isinstance(config_ref, dict):
                logger.error(f"Error setting config key {key_path}: '{key}' is not a section")
                return False

        # Set the final key
        config_ref[keys[-1]] = value
        return True

    def save(self) -> bool:
        """Save current configuration to file."""
        try:
            # Create directory if it doesn't exist
            directory = os.path.dirname(self.config_file)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(self.config_file, 'w') as f:
                json.dump(self._config, f, indent=2)

            logger.info(f"Configuration saved to {self.config_file}")
            return True

        except OSError as e:
            logger.error(f"Error saving configuration: {e}")
            return False

    def validate_config(self) -> tuple[bool, list[str]]:
        """Validate current configuration."""
        errors = []

        rates = self.get("session.learning_rates")
        if rates is not None:
            if not isinstance(rates, (list, tuple)) or len(rates) != 4:
                errors.append("session.learning_rates must list exactly 4 values")
            elif any(_as_number(r, float) is None for r in rates):
                errors.append("session.learning_rates must be numbers")

        lower = _as_number(self.get("session.convergence_lower", 0.0), float)
        upper = _as_number(self.get("session.convergence_upper", 0.0), float)
        if lower is None or upper is None:
            errors.append("Convergence bounds must be numbers")
        elif lower > upper:
            errors.append("Convergence lower bound cannot be larger than the upper bound")

        max_iterations = self.get("session.max_iterations")
        if max_iterations is not None:
            value = _as_number(max_iterations, int)
            if value is None:
                errors.append("session.max_iterations must be an integer")
            elif value < 1:
                errors.append("session.max_iterations must be at least 1")

        params = self.get("session.initial_params")
        if params is not None:
            if not isinstance(params, (list, tuple)) or len(params) != 4:
                errors.append("session.initial_params must list exactly 4 values")
            else:
                values = [_as_number(p, int) for p in params]
                if any(v is None or not -128 <= v <= 127 for v in values):
                    errors.append("session.initial_params must be int8 values in [-128, 127]")

        max_ticks = self.get("simulation.max_ticks")
        if max_ticks is not None:
            value = _as_number(max_ticks, int)
            if value is None or value < 1:
                errors.append("simulation.max_ticks must be a positive integer")

        return len(errors) == 0, errors

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self._config = self._get_default_config()
        logger.info("Configuration reset to defaults")


def _as_number(value: Any, kind: type) -> Optional[Any]:
    """Convert a config value with int() or float(); None if it is not numeric."""
    if isinstance(value, bool):
        return None
    try:
        return kind(value)
    except (TypeError, ValueError):
        return None

"""
Configuration validation and startup checks.

Environment-supplied settings are parsed and range-checked once, when the
configuration module is imported, so that a bad value fails fast instead of
surfacing in the middle of a spin.
"""

import os
import warnings
from typing import List, Optional


class ConfigValidationError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


TRUTHY_VALUES = ('true', '1', 't', 'yes')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidator:
    """Validates environment configuration for the slot simulator."""

    def __init__(self, environ=None):
        """
        Initialize the configuration validator.

        Args:
            environ: Mapping to read settings from. Defaults to os.environ.
        """
        self.environ = environ if environ is not None else os.environ
        self.is_testing = self.environ.get('TESTING', 'False').lower() in TRUTHY_VALUES
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def _get(self, var_name: str, default: Optional[str] = None) -> Optional[str]:
        value = self.environ.get(var_name)
        if value is None or not value.strip():
            return default
        return value.strip()

    def validate_int(self, var_name: str, default: int, minimum: int = 0) -> int:
        """Validate an integer setting with a lower bound."""
        raw = self._get(var_name)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            self.errors.append(f"{var_name} must be an integer (got '{raw}')")
            return default
        if value < minimum:
            self.errors.append(f"{var_name} must be >= {minimum} (got {value})")
            return default
        return value

    def validate_spin_latency(self) -> float:
        """Validate the artificial latency applied to every spin, in seconds."""
        raw = self._get('NEONSLOTS_SPIN_LATENCY')
        if raw is None:
            return 0.3
        try:
            latency = float(raw)
        except ValueError:
            self.errors.append(f"NEONSLOTS_SPIN_LATENCY must be a number of seconds (got '{raw}')")
            return 0.3
        if latency < 0:
            self.errors.append("NEONSLOTS_SPIN_LATENCY cannot be negative")
            return 0.3
        if latency > 5:
            self.warnings.append(f"NEONSLOTS_SPIN_LATENCY of {latency}s is unusually long")
        return latency

    def validate_paths(self) -> dict:
        """Resolve the wallet and settings file locations."""
        home_dir = os.path.join(os.path.expanduser('~'), '.neonslots')
        wallet_path = self._get('NEONSLOTS_WALLET_PATH', os.path.join(home_dir, 'wallet.json'))
        settings_path = self._get('NEONSLOTS_SETTINGS_PATH', os.path.join(home_dir, 'settings.json'))
        if os.path.abspath(wallet_path) == os.path.abspath(settings_path):
            self.errors.append("NEONSLOTS_WALLET_PATH and NEONSLOTS_SETTINGS_PATH must point to different files")
        return {'WALLET_PATH': wallet_path, 'SETTINGS_PATH': settings_path}

    def validate_logging_config(self) -> dict:
        level = (self._get('NEONSLOTS_LOG_LEVEL', 'INFO')).upper()
        if level not in LOG_LEVELS:
            self.warnings.append(f"Unknown NEONSLOTS_LOG_LEVEL '{level}', falling back to INFO")
            level = 'INFO'
        json_logs = self._get('NEONSLOTS_LOG_JSON', 'False').lower() in TRUTHY_VALUES
        return {'LOG_LEVEL': level, 'LOG_JSON': json_logs}

    def validate_all(self) -> dict:
        """
        Validate all configuration settings.

        Returns:
            Dictionary containing validated configuration values

        Raises:
            ConfigValidationError: If any setting is invalid
        """
        config = {}
        config['SPIN_LATENCY_SECONDS'] = self.validate_spin_latency()
        config.update(self.validate_paths())
        config['INITIAL_SOFT_COIN'] = self.validate_int('NEONSLOTS_INITIAL_SOFT_COIN', 5000)
        config['INITIAL_GEMS'] = self.validate_int('NEONSLOTS_INITIAL_GEMS', 10)
        config['TOP_UP_AMOUNT'] = self.validate_int('NEONSLOTS_TOP_UP_AMOUNT', 1000, minimum=1)
        config.update(self.validate_logging_config())

        if self.errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in self.errors)
            if self.warnings:
                error_msg += "\n\nWarnings:\n" + "\n".join(f"  - {warning}" for warning in self.warnings)
            raise ConfigValidationError(error_msg)

        if not self.is_testing:
            for warning in self.warnings:
                warnings.warn(warning, UserWarning)

        return config


def validate_app_config(environ=None) -> dict:
    """Validate configuration from the environment, raising ConfigValidationError on failure."""
    return ConfigValidator(environ).validate_all()

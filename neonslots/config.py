"""
Configuration module with fail-fast validation.

Values come from the environment (optionally a .env file) and are validated
once at import time.
"""
import os
from dotenv import load_dotenv
from neonslots.config_validator import validate_app_config

load_dotenv()


class Config:
    """Runtime configuration for the slot simulator."""

    _validated_config = validate_app_config()

    # Spin timing: emulates the round-trip of a server-side spin
    SPIN_LATENCY_SECONDS = _validated_config['SPIN_LATENCY_SECONDS']

    # Persistence locations
    WALLET_PATH = _validated_config['WALLET_PATH']
    SETTINGS_PATH = _validated_config['SETTINGS_PATH']

    # Wallet defaults
    INITIAL_SOFT_COIN = _validated_config['INITIAL_SOFT_COIN']
    INITIAL_GEMS = _validated_config['INITIAL_GEMS']
    TOP_UP_AMOUNT = _validated_config['TOP_UP_AMOUNT']

    # Sound
    DEFAULT_VOLUME = 0.3

    # Logging
    LOG_LEVEL = _validated_config['LOG_LEVEL']
    LOG_JSON = _validated_config['LOG_JSON']

    MACHINES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'machines')


class TestingConfig(Config):
    TESTING = True
    SPIN_LATENCY_SECONDS = 0
    WALLET_PATH = os.path.join('.', 'test_neonslots_wallet.json')
    SETTINGS_PATH = os.path.join('.', 'test_neonslots_settings.json')
    LOG_LEVEL = 'DEBUG'
    LOG_JSON = False

"""
Machine Catalog Manager
Loads, validates and caches the static machine configurations shown in the lobby
"""

import json
import logging
import os
from typing import Dict, List, Optional

from marshmallow import ValidationError

from neonslots.config import Config
from neonslots.exceptions import NotFoundException, ValidationException
from neonslots.models import MachineConfiguration
from neonslots.schemas import MachineConfigSchema

logger = logging.getLogger(__name__)

# Order in which the lobby presents the machines
LOBBY_ORDER = ['classic-reel', 'neon-pulse', 'zen-flow', 'jackpot-tower']


def load_machine_config(machine_id: str, base_path: Optional[str] = None) -> MachineConfiguration:
    """
    Loads and validates the configuration JSON for one machine.

    Args:
        machine_id (str): Catalog id of the machine, also its file name stem.
        base_path (str, optional): Directory holding ``<machine_id>.json`` files.
            Defaults to the catalog shipped with the package.

    Returns:
        MachineConfiguration: The validated, immutable configuration.

    Raises:
        NotFoundException: If no configuration file exists for the machine.
        ValidationException: If the JSON is malformed or fails schema validation.
    """
    base_dir = base_path or Config.MACHINES_DIR
    file_path = os.path.join(base_dir, f"{machine_id}.json")

    if not os.path.exists(file_path):
        logger.error(f"Machine configuration not found for '{machine_id}' at {file_path}")
        raise NotFoundException(f"Unknown machine '{machine_id}'", details={'path': file_path})

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            raw_config = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"JSON decode error for {file_path}: {e.msg} at line {e.lineno} col {e.colno}")
        raise ValidationException(
            f"Invalid JSON in {file_path}: {e.msg} (line {e.lineno}, col {e.colno})"
        ) from e

    try:
        machine = MachineConfigSchema().load(raw_config)
    except ValidationError as e:
        logger.error(f"Configuration validation error for machine '{machine_id}': {e.messages}")
        raise ValidationException(
            f"Invalid configuration for machine '{machine_id}'", details=e.messages
        ) from e

    if machine.id != machine_id:
        raise ValidationException(
            f"Configuration file for '{machine_id}' declares id '{machine.id}'"
        )
    logger.info(f"Loaded machine '{machine_id}' from {file_path}")
    return machine


class GameConfigManager:
    """Cache of loaded machine configurations keyed by machine id"""

    _config_cache: Dict[str, MachineConfiguration] = {}

    @classmethod
    def get_machine(cls, machine_id: str) -> MachineConfiguration:
        if machine_id not in cls._config_cache:
            cls._config_cache[machine_id] = load_machine_config(machine_id)
        return cls._config_cache[machine_id]

    @classmethod
    def list_machines(cls) -> List[MachineConfiguration]:
        return [cls.get_machine(machine_id) for machine_id in LOBBY_ORDER]

    @classmethod
    def clear_cache(cls):
        cls._config_cache.clear()

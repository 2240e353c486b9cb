import json
import os

import pytest

from neonslots.config import Config
from neonslots.exceptions import NotFoundException, ValidationException
from neonslots.utils.game_config_manager import GameConfigManager, LOBBY_ORDER, load_machine_config


@pytest.fixture(autouse=True)
def clear_machine_cache():
    GameConfigManager.clear_cache()
    yield
    GameConfigManager.clear_cache()


@pytest.mark.parametrize("machine_id", LOBBY_ORDER)
def test_catalog_machines_load(machine_id):
    machine = load_machine_config(machine_id)
    assert machine.id == machine_id
    assert machine.min_bet <= machine.max_bet
    assert machine.paylines


def test_classic_reel_details():
    machine = load_machine_config('classic-reel')
    assert (machine.reels, machine.rows) == (3, 3)
    assert len(machine.reel_strips) == 3
    assert machine.payout_table['SEVEN'][3] == 500
    assert len(machine.paylines) == 5


def test_jackpot_tower_limits():
    machine = load_machine_config('jackpot-tower')
    assert (machine.min_bet, machine.max_bet) == (100, 1000)
    assert machine.volatility == 'high'
    assert len(machine.paylines) == 1


def test_list_machines_follows_lobby_order():
    machines = GameConfigManager.list_machines()
    assert [m.id for m in machines] == ['classic-reel', 'neon-pulse', 'zen-flow', 'jackpot-tower']


def test_get_machine_is_cached():
    first = GameConfigManager.get_machine('zen-flow')
    assert GameConfigManager.get_machine('zen-flow') is first


def test_unknown_machine_raises_not_found():
    with pytest.raises(NotFoundException) as excinfo:
        GameConfigManager.get_machine('mega-reel')
    assert "mega-reel" in excinfo.value.status_message


def test_invalid_json_raises_validation(tmp_path):
    (tmp_path / "broken.json").write_text("{ not json", encoding="utf-8")
    with pytest.raises(ValidationException) as excinfo:
        load_machine_config("broken", base_path=str(tmp_path))
    assert "Invalid JSON" in excinfo.value.status_message


def test_schema_errors_are_reported_in_details(tmp_path):
    (tmp_path / "partial.json").write_text(json.dumps({"id": "partial", "name": "Partial"}), encoding="utf-8")
    with pytest.raises(ValidationException) as excinfo:
        load_machine_config("partial", base_path=str(tmp_path))
    assert "reels" in excinfo.value.details


def test_id_must_match_file_name(tmp_path):
    with open(os.path.join(Config.MACHINES_DIR, "zen-flow.json"), encoding="utf-8") as f:
        data = json.load(f)
    (tmp_path / "renamed.json").write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(ValidationException):
        load_machine_config("renamed", base_path=str(tmp_path))

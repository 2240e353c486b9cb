import json

import pytest

from neonslots.services.sound_settings import SoundSettings


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.json"


def test_default_volume(settings_path):
    settings = SoundSettings(str(settings_path))
    assert settings.load() == 0.3
    assert settings.volume == 0.3


@pytest.mark.parametrize("requested,expected", [(0.75, 0.75), (1.8, 1.0), (-0.2, 0.0)])
def test_set_volume_clamps(settings_path, requested, expected):
    settings = SoundSettings(str(settings_path))
    assert settings.set_volume(requested) == expected
    assert settings.volume == expected


def test_volume_persists_between_sessions(settings_path):
    SoundSettings(str(settings_path)).set_volume(0.6)
    reloaded = SoundSettings(str(settings_path))
    assert reloaded.load() == 0.6
    assert json.loads(settings_path.read_text(encoding="utf-8")) == {"volume": 0.6}


def test_unreadable_settings_keep_default(settings_path, caplog):
    settings_path.write_text(json.dumps({"volume": 7}), encoding="utf-8")
    settings = SoundSettings(str(settings_path), default_volume=0.5)
    assert settings.load() == 0.5
    assert "unreadable sound settings" in caplog.text


def test_undecodable_settings_keep_default(settings_path):
    settings_path.write_bytes(b'\xff\xfe{"volume": 0.9}')
    settings = SoundSettings(str(settings_path))
    assert settings.load() == 0.3

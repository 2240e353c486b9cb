import json
import logging
import os

from marshmallow import ValidationError

from neonslots.schemas import SoundSettingsSchema

logger = logging.getLogger(__name__)


class SoundSettings:
    """Master volume for the sound collaborator, persisted between sessions."""

    def __init__(self, path, default_volume=0.3):
        self.path = path
        self._volume = default_volume
        self._schema = SoundSettingsSchema()

    @property
    def volume(self):
        return self._volume

    def load(self):
        if os.path.exists(self.path):
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    self._volume = self._schema.load(json.load(f))['volume']
            except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
                logger.warning(f"Ignoring unreadable sound settings at {self.path}: {e}")
        return self._volume

    def set_volume(self, value):
        self._volume = max(0.0, min(1.0, float(value)))
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(self._schema.dump({'volume': self._volume}), f)
        return self._volume

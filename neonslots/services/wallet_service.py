import json
import logging
import os

from marshmallow import ValidationError

from neonslots.models import WalletState
from neonslots.schemas import WalletSchema

logger = logging.getLogger(__name__)


class WalletStore:
    """
    Persists the player's wallet as ``{"softCoin": int, "gems": int}``.

    A missing or unreadable file yields the initial wallet, so a first launch
    and a reset look the same to callers.
    """

    def __init__(self, path, initial_wallet):
        self.path = path
        self.initial_wallet = initial_wallet
        self._schema = WalletSchema()

    def load(self) -> WalletState:
        if not os.path.exists(self.path):
            return self.initial_wallet
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return self._schema.load(json.load(f))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable wallet at {self.path}: {e}")
            return self.initial_wallet

    def save(self, wallet: WalletState) -> WalletState:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(self._schema.dump(wallet), f)
        os.replace(tmp_path, self.path)
        return wallet

    def top_up(self, amount) -> WalletState:
        if amount <= 0:
            raise ValueError("Top-up amount must be positive.")
        wallet = self.load().credit(amount)
        logger.info(f"Wallet topped up by {amount}; balance now {wallet.soft_coin}")
        return self.save(wallet)

    def reset(self) -> WalletState:
        if os.path.exists(self.path):
            os.remove(self.path)
        logger.info("Wallet reset to initial state")
        return self.initial_wallet

"""
Spin session service.

Wraps the synchronous engine in the asynchronous request/response shape the
game screen expects: every spin awaits an artificial latency, and the wallet
is only touched once a spin has fully completed.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from marshmallow import ValidationError

from neonslots.exceptions import InsufficientFundsException, ValidationException
from neonslots.logging_setup import current_spin_id
from neonslots.models import MachineConfiguration, SpinResult, WalletState
from neonslots.schemas import SpinRequestSchema
from neonslots.utils import spin_engine
from neonslots.utils.rng import SystemRandomSource

logger = logging.getLogger(__name__)


def validate_bet(machine: MachineConfiguration, bet_amount: int) -> int:
    """
    Checks a bet against the machine's limits.
    Raises ValidationException if it is not a positive integer within [min_bet, max_bet].
    """
    try:
        bet_amount = SpinRequestSchema().load({'betAmount': bet_amount})['bet_amount']
    except ValidationError as e:
        raise ValidationException("Invalid bet amount", details=e.messages) from e
    if not (machine.min_bet <= bet_amount <= machine.max_bet):
        raise ValidationException(
            f"Bet must be between {machine.min_bet} and {machine.max_bet} on {machine.name}",
            details={'min_bet': machine.min_bet, 'max_bet': machine.max_bet, 'bet_amount': bet_amount}
        )
    return bet_amount


@dataclass(frozen=True)
class SpinOutcome:
    spin_id: str
    bet_amount: int
    result: SpinResult
    wallet: WalletState
    win_tier: Optional[str]


class SpinService:

    def __init__(self, wallet_store, rng=None, latency_seconds=0.3):
        self.wallet_store = wallet_store
        self.rng = rng or SystemRandomSource()
        self.latency_seconds = latency_seconds
        self._wallet_lock = asyncio.Lock()

    async def spin(self, machine: MachineConfiguration, bet_amount: int, spin_id: Optional[str] = None) -> SpinResult:
        """
        Produces one spin result after the configured latency.

        Has no side effects; cancelling the awaiting task simply discards the result.
        """
        token = current_spin_id.set(spin_id or uuid.uuid4().hex)
        try:
            result = spin_engine.spin(machine, bet_amount, self.rng)
            logger.debug(f"Machine '{machine.id}' bet {bet_amount}: total win {result.total_win}, "
                         f"{len(result.winning_lines)} winning lines")
            await asyncio.sleep(self.latency_seconds)
            return result
        finally:
            current_spin_id.reset(token)

    async def play(self, machine: MachineConfiguration, bet_amount: int) -> SpinOutcome:
        """
        Plays one paid spin against the persisted wallet.

        The bet is debited and the win credited together, after the spin completes.
        If the spin fails or is cancelled, the wallet is left unchanged.

        Raises:
            ValidationException: If the bet is outside the machine's limits.
            InsufficientFundsException: If the wallet cannot cover the bet.
        """
        bet_amount = validate_bet(machine, bet_amount)
        spin_id = uuid.uuid4().hex
        async with self._wallet_lock:
            wallet = self.wallet_store.load()
            if wallet.soft_coin < bet_amount:
                raise InsufficientFundsException(details={'balance': wallet.soft_coin, 'required': bet_amount})

            result = await self.spin(machine, bet_amount, spin_id=spin_id)

            wallet = self.wallet_store.save(wallet.debit(bet_amount).credit(result.total_win))

        win_tier = spin_engine.classify_win(result, bet_amount)
        if result.is_jackpot:
            logger.info(f"JACKPOT on '{machine.id}': won {result.total_win} on a bet of {bet_amount}")
        return SpinOutcome(spin_id=spin_id, bet_amount=bet_amount, result=result, wallet=wallet, win_tier=win_tier)

    async def autoplay(self, machine: MachineConfiguration, bet_amount: int, max_spins: int) -> List[SpinOutcome]:
        """Plays up to ``max_spins`` spins, stopping early when the wallet runs dry."""
        outcomes = []
        for _ in range(max_spins):
            try:
                outcomes.append(await self.play(machine, bet_amount))
            except InsufficientFundsException:
                logger.warning(f"Autoplay on '{machine.id}' stopped after {len(outcomes)} spins: not enough coins")
                break
        return outcomes

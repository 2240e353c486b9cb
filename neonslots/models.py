"""
Immutable data contract shared by the grid generator, the payline evaluator
and their callers.

Grids are indexed ``grid[column][row]`` and coordinates are ``(column, row)``
pairs throughout.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from neonslots.exceptions import InsufficientFundsException

WILD_SYMBOL_ID = "WILD"

Coordinate = Tuple[int, int]
Grid = Tuple[Tuple[str, ...], ...]


@dataclass(frozen=True)
class SymbolDefinition:
    id: str
    value: float
    name: str = ""
    icon: str = ""
    color: str = ""


@dataclass(frozen=True)
class MachineConfiguration:
    """A slot machine as loaded from the catalog. Read-only for the engine's lifetime."""
    id: str
    name: str
    reels: int
    rows: int
    symbols: Tuple[SymbolDefinition, ...]
    paylines: Tuple[Tuple[Coordinate, ...], ...]
    min_bet: int
    max_bet: int
    cost_per_spin: int
    rtp: float  # descriptive only
    volatility: str  # descriptive only
    reel_strips: Optional[Tuple[Tuple[str, ...], ...]] = None
    payout_table: Optional[Dict[str, Dict[int, float]]] = field(default=None, hash=False)
    description: str = ""
    theme: str = "classic"
    wild_symbol_id: str = WILD_SYMBOL_ID

    def symbol(self, symbol_id):
        for sym in self.symbols:
            if sym.id == symbol_id:
                return sym
        return None

    @property
    def has_reel_strips(self):
        return bool(self.reel_strips)

    def has_payout_table_for(self, symbol_id):
        return self.payout_table is not None and symbol_id in self.payout_table


@dataclass(frozen=True)
class WinningLine:
    line_index: int
    symbol_id: str
    match_count: int
    amount: int
    coordinates: Tuple[Coordinate, ...]


@dataclass(frozen=True)
class SpinResult:
    grid: Grid
    winning_lines: Tuple[WinningLine, ...]
    total_win: int
    is_jackpot: bool


@dataclass(frozen=True)
class WalletState:
    soft_coin: int
    gems: int

    def credit(self, amount):
        return replace(self, soft_coin=self.soft_coin + amount)

    def debit(self, amount):
        if amount > self.soft_coin:
            raise InsufficientFundsException(
                details={'balance': self.soft_coin, 'required': amount}
            )
        return replace(self, soft_coin=self.soft_coin - amount)

import logging
import math

from neonslots.exceptions import GameLogicException
from neonslots.models import SpinResult, WinningLine
from neonslots.utils.rng import SystemRandomSource

logger = logging.getLogger(__name__)

# A spin is a jackpot when it returns more than this multiple of the stake.
JACKPOT_BET_MULTIPLIER = 50

POOL_WEIGHT_NUMERATOR = 200
# Extra payout for longer runs under the generic formula; any other count pays 1x.
COUNT_MULTIPLIERS = {4: 5, 5: 20}


def symbol_weight(value):
    """
    Sampling weight of a symbol in the weighted pool. High value means rare.

    A non-positive value (the Wild) receives the cap weight, the same as a
    symbol of value 1.
    """
    if value <= 0:
        return POOL_WEIGHT_NUMERATOR
    return max(1, math.floor(POOL_WEIGHT_NUMERATOR / value))


def build_weighted_pool(symbols):
    """
    Builds the flat pool shared by every cell of a weighted-random spin.

    Args:
        symbols (Iterable[SymbolDefinition]): Symbols available on the machine.

    Returns:
        list[str]: Symbol ids, each repeated ``symbol_weight(value)`` times.
    """
    pool = []
    for sym in symbols:
        pool.extend([sym.id] * symbol_weight(sym.value))
    return pool


def _generate_from_reel_strips(machine, rng):
    grid = []
    for c_idx in range(machine.reels):
        if c_idx < len(machine.reel_strips):
            strip = machine.reel_strips[c_idx]
        else:
            logger.debug(f"Machine '{machine.id}' has no reel strip for column {c_idx}; reusing strip 0.")
            strip = machine.reel_strips[0]
        strip_len = len(strip)
        stop_index = rng.next_int(strip_len)
        grid.append(tuple(strip[(stop_index + r_idx) % strip_len] for r_idx in range(machine.rows)))
    return tuple(grid)


def _generate_from_weighted_pool(machine, rng):
    pool = build_weighted_pool(machine.symbols)
    pool_len = len(pool)
    return tuple(
        tuple(pool[rng.next_int(pool_len)] for _ in range(machine.rows))
        for _ in range(machine.reels)
    )


def generate_spin_grid(machine, rng=None):
    """
    Generates the symbol grid for one spin.

    Machines with reel strips stop each column's strip at a random offset and
    read ``rows`` consecutive symbols down the strip, wrapping around. Machines
    without strips draw every cell independently from the weighted pool.

    Args:
        machine (MachineConfiguration): The machine being played.
        rng (RandomSource, optional): Randomness source. Defaults to system entropy.

    Returns:
        tuple[tuple[str, ...], ...]: ``reels`` columns of ``rows`` symbol ids.
    """
    rng = rng or SystemRandomSource()
    if machine.has_reel_strips:
        return _generate_from_reel_strips(machine, rng)
    return _generate_from_weighted_pool(machine, rng)


def get_line_payout(machine, symbol_id, match_count, bet_amount):
    """
    Coin amount won by ``match_count`` contiguous ``symbol_id`` on one payline.

    A symbol listed in the machine's payout table is paid from the table,
    scaled by ``bet_amount / min_bet``. Every other symbol uses the generic
    multiplier formula, which needs at least 2 matches on 3-reel machines and
    3 matches otherwise.

    Args:
        machine (MachineConfiguration): The machine being played.
        symbol_id (str): Anchor symbol of the line.
        match_count (int): Length of the matched prefix.
        bet_amount (int): Stake for this spin.

    Returns:
        float: Raw (unfloored) win amount; 0 when the line does not pay.
    """
    symbol_def = machine.symbol(symbol_id)
    if symbol_def is None:
        return 0

    if machine.has_payout_table_for(symbol_id):
        base_payout = machine.payout_table[symbol_id].get(match_count, 0)
        if base_payout > 0:
            return base_payout * (bet_amount / machine.min_bet)
        return 0

    min_matches = 2 if machine.reels == 3 else 3
    if match_count < min_matches:
        return 0
    count_multiplier = COUNT_MULTIPLIERS.get(match_count, 1)
    return math.floor(
        symbol_def.value * (bet_amount / 10) * count_multiplier * (match_count / machine.reels)
    )


def _line_is_playable(machine, line):
    if not line or len(line) > machine.reels:
        return False
    return all(0 <= col < machine.reels and 0 <= row < machine.rows for col, row in line)


def calculate_win(grid, machine, bet_amount):
    """
    Evaluates every payline of the machine against a grid.

    Matching is anchored on the payline's first cell and extends while each
    following cell holds the anchor symbol or the Wild; the first other symbol
    ends the run. A Wild in the first cell anchors on the Wild itself.
    Paylines longer than the reel count, or pointing outside the grid, are
    skipped.

    Args:
        grid (Sequence[Sequence[str]]): ``grid[column][row]`` symbol ids.
        machine (MachineConfiguration): The machine being played.
        bet_amount (int): Stake for this spin. Bounds are the caller's concern.

    Returns:
        tuple: ``(winning_lines, total_win, is_jackpot)`` where winning_lines is
        a tuple of WinningLine in payline order.

    Raises:
        GameLogicException: If the grid's dimensions differ from the machine's.
    """
    if len(grid) != machine.reels or any(len(column) != machine.rows for column in grid):
        raise GameLogicException(
            f"Grid does not match the {machine.reels}x{machine.rows} layout of '{machine.id}'",
            details={'reels': machine.reels, 'rows': machine.rows}
        )

    winning_lines = []
    total_win = 0
    wild_id = machine.wild_symbol_id

    for line_index, line in enumerate(machine.paylines):
        if not _line_is_playable(machine, line):
            logger.debug(f"Skipping malformed payline {line_index} on machine '{machine.id}'.")
            continue

        first_col, first_row = line[0]
        anchor_symbol = grid[first_col][first_row]
        matched_coords = [(first_col, first_row)]

        for col, row in line[1:]:
            current_symbol = grid[col][row]
            if current_symbol == anchor_symbol or current_symbol == wild_id:
                matched_coords.append((col, row))
            else:
                break

        match_count = len(matched_coords)
        amount = math.floor(get_line_payout(machine, anchor_symbol, match_count, bet_amount))
        if amount > 0:
            total_win += amount
            winning_lines.append(WinningLine(
                line_index=line_index,
                symbol_id=anchor_symbol,
                match_count=match_count,
                amount=amount,
                coordinates=tuple(matched_coords),
            ))

    is_jackpot = total_win > bet_amount * JACKPOT_BET_MULTIPLIER
    return tuple(winning_lines), total_win, is_jackpot


def spin(machine, bet_amount, rng=None):
    """Generates a grid and evaluates it in one synchronous call."""
    grid = generate_spin_grid(machine, rng)
    winning_lines, total_win, is_jackpot = calculate_win(grid, machine, bet_amount)
    return SpinResult(grid=grid, winning_lines=winning_lines, total_win=total_win, is_jackpot=is_jackpot)


def step_bet(machine, bet_amount, direction):
    """
    Moves a bet one notch the way the lobby's bet control does.

    ``"up"`` and ``"down"`` step by ``min_bet``; ``"max"`` jumps to ``max_bet``.
    The result is always clamped to ``[min_bet, max_bet]``.
    """
    if direction == "up":
        new_bet = bet_amount + machine.min_bet
    elif direction == "down":
        new_bet = bet_amount - machine.min_bet
    elif direction == "max":
        new_bet = machine.max_bet
    else:
        raise ValueError(f"Unknown bet direction '{direction}'")
    return max(machine.min_bet, min(machine.max_bet, new_bet))


def classify_win(result, bet_amount):
    """Celebration tier for a result: 'big', 'medium', 'small' or None for a loss."""
    if result.total_win <= 0:
        return None
    if result.is_jackpot:
        return "big"
    if result.total_win > bet_amount * 5:
        return "medium"
    return "small"

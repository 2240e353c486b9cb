import logging

import numpy as np

from neonslots.utils.rng import SeededRandomSource
from neonslots.utils.spin_engine import spin

logger = logging.getLogger(__name__)


class SlotTester:
    """
    Monte Carlo measurement of a machine's payout behaviour.

    The machine's declared ``rtp`` is only reported next to the measured value;
    nothing here feeds back into symbol weighting or payouts.
    """

    def __init__(self, machine, num_spins, bet_amount, seed=None):
        self.machine = machine
        self.num_spins = num_spins
        self.bet_amount = bet_amount
        self.rng = SeededRandomSource(seed)

        # Statistics to be collected
        self.total_bet = 0
        self.total_win = 0
        self.hit_count = 0
        self.jackpot_count = 0
        self.wins_per_spin = []
        self.wins_by_multiplier = {}  # rounded win/bet -> number of spins
        self.wins_by_symbol = {}
        self.rtp_over_time = []

        # Derived statistics
        self.overall_rtp = 0
        self.hit_frequency = 0
        self.jackpot_frequency = 0
        self.volatility_index = 0

    def run_simulation(self):
        logger.info(f"Starting simulation for '{self.machine.id}' with {self.num_spins} spins at {self.bet_amount} coins per spin.")
        progress_interval = self.num_spins // 20 or 1
        for i in range(self.num_spins):
            result = spin(self.machine, self.bet_amount, self.rng)
            self._collect_spin_statistics(result)
            if (i + 1) % progress_interval == 0:
                current_rtp = (self.total_win / self.total_bet) * 100 if self.total_bet > 0 else 0
                self.rtp_over_time.append({'spin_count': i + 1, 'rtp': current_rtp})
                logger.debug(f"Completed {i + 1}/{self.num_spins} spins...")
        self.calculate_derived_statistics()
        logger.info(f"Simulation finished for '{self.machine.id}'.")
        return self

    def _collect_spin_statistics(self, result):
        self.total_bet += self.bet_amount
        self.total_win += result.total_win
        self.wins_per_spin.append(result.total_win)

        if result.total_win > 0:
            self.hit_count += 1
        if result.is_jackpot:
            self.jackpot_count += 1

        multiplier_category = round(result.total_win / self.bet_amount)
        self.wins_by_multiplier[multiplier_category] = self.wins_by_multiplier.get(multiplier_category, 0) + 1

        for line in result.winning_lines:
            self.wins_by_symbol[line.symbol_id] = self.wins_by_symbol.get(line.symbol_id, 0) + line.amount

    def calculate_derived_statistics(self):
        if self.num_spins == 0:
            logger.warning("No spins were simulated. Cannot calculate derived statistics.")
            return
        self.overall_rtp = (self.total_win / self.total_bet) * 100 if self.total_bet > 0 else 0
        self.hit_frequency = (self.hit_count / self.num_spins) * 100
        self.jackpot_frequency = (self.jackpot_count / self.num_spins) * 100
        # Volatility Index: standard deviation of per-spin wins in units of the bet
        self.volatility_index = float(np.std(np.asarray(self.wins_per_spin, dtype=float))) / self.bet_amount

    def summary(self):
        return {
            'machine_id': self.machine.id,
            'num_spins': self.num_spins,
            'bet_amount': self.bet_amount,
            'total_bet': self.total_bet,
            'total_win': self.total_win,
            'overall_rtp': self.overall_rtp,
            'declared_rtp': self.machine.rtp * 100,
            'hit_frequency': self.hit_frequency,
            'jackpot_frequency': self.jackpot_frequency,
            'volatility_index': self.volatility_index,
            'wins_by_multiplier': dict(sorted(self.wins_by_multiplier.items())),
            'wins_by_symbol': dict(self.wins_by_symbol),
        }

    def format_summary(self):
        lines = [
            "--- Simulation Summary ---",
            f"Machine: {self.machine.name}",
            f"Total Spins Simulated: {self.num_spins}",
            f"Bet Amount Per Spin: {self.bet_amount} coins",
            f"Total Wagered: {self.total_bet} coins",
            f"Total Won: {self.total_win} coins",
            "",
            "--- Detailed Metrics ---",
            f"Measured RTP: {self.overall_rtp:.2f}% (Declared: {self.machine.rtp * 100:.2f}%)",
            f"Hit Frequency: {self.hit_frequency:.2f}% ({self.hit_count} wins out of {self.num_spins} spins)",
            f"Jackpot Frequency: {self.jackpot_frequency:.4f}% ({self.jackpot_count} jackpots)",
            f"Volatility Index (Win StdDev / Bet): {self.volatility_index:.2f}",
            "",
            "Win Distribution (by Bet Multiplier):",
        ]
        for mult, count in sorted(self.wins_by_multiplier.items()):
            percentage_of_total_spins = (count / self.num_spins) * 100 if self.num_spins > 0 else 0
            lines.append(f"  {mult}x Bet: {count} times ({percentage_of_total_spins:.2f}%)")
        return "\n".join(lines)

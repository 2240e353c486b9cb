import unittest

from neonslots.models import MachineConfiguration, SymbolDefinition
from neonslots.utils.game_config_manager import load_machine_config
from neonslots.utils.slot_tester import SlotTester


class TestSlotTester(unittest.TestCase):

    def test_simulation_totals(self):
        machine = load_machine_config('classic-reel')
        tester = SlotTester(machine, num_spins=500, bet_amount=2, seed=5).run_simulation()

        self.assertEqual(tester.total_bet, 1000)
        self.assertEqual(len(tester.wins_per_spin), 500)
        self.assertEqual(tester.total_win, sum(tester.wins_per_spin))
        self.assertEqual(sum(tester.wins_by_multiplier.values()), 500)
        self.assertEqual(sum(tester.wins_by_symbol.values()), tester.total_win)
        self.assertLessEqual(tester.jackpot_count, tester.hit_count)
        self.assertEqual(len(tester.rtp_over_time), 20)
        self.assertAlmostEqual(tester.overall_rtp, tester.total_win / tester.total_bet * 100)

    def test_same_seed_same_statistics(self):
        machine = load_machine_config('neon-pulse')
        first = SlotTester(machine, 300, 20, seed=11).run_simulation().summary()
        second = SlotTester(machine, 300, 20, seed=11).run_simulation().summary()
        self.assertEqual(first, second)

    def test_guaranteed_win_machine(self):
        # A single-symbol strip lands the same symbol in every cell
        machine = MachineConfiguration(
            id="always", name="Always", reels=3, rows=1,
            symbols=(SymbolDefinition(id="CHERRY", value=2),),
            paylines=(((0, 0), (1, 0), (2, 0)),),
            min_bet=1, max_bet=10, cost_per_spin=1, rtp=1.0, volatility="low",
            reel_strips=(("CHERRY",),), payout_table={"CHERRY": {3: 4}},
        )
        tester = SlotTester(machine, num_spins=10, bet_amount=1).run_simulation()
        self.assertEqual(tester.total_win, 40)
        self.assertEqual(tester.hit_frequency, 100)
        self.assertEqual(tester.overall_rtp, 400)
        self.assertEqual(tester.volatility_index, 0)
        self.assertEqual(tester.wins_by_multiplier, {4: 10})
        self.assertEqual(tester.wins_by_symbol, {"CHERRY": 40})

    def test_summary_reports_declared_rtp(self):
        machine = load_machine_config('zen-flow')
        tester = SlotTester(machine, 50, 5, seed=1).run_simulation()
        summary = tester.summary()
        self.assertAlmostEqual(summary['declared_rtp'], 98.0)
        self.assertEqual(summary['machine_id'], 'zen-flow')
        text = tester.format_summary()
        self.assertIn("Machine: Zen Flow", text)
        self.assertIn("Declared: 98.00%", text)

    def test_zero_spins(self):
        machine = load_machine_config('jackpot-tower')
        with self.assertLogs('neonslots.utils.slot_tester', level='WARNING'):
            tester = SlotTester(machine, 0, 100).run_simulation()
        self.assertEqual(tester.overall_rtp, 0)


if __name__ == '__main__':
    unittest.main()

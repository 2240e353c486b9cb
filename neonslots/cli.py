"""
Neon Slots CLI

A command-line front end for the slot simulator:
- Lobby listing of the machine catalog
- Playing spins against the persisted wallet
- Monte Carlo simulation of a machine
- Wallet and sound settings management

Usage:
    neonslots --help
    neonslots machines
    neonslots spin classic-reel --bet 5
    neonslots spin neon-pulse --step max --autoplay 10
    neonslots simulate neon-pulse --spins 100000 --bet 20 --seed 7
    neonslots wallet top-up
"""

import asyncio
import json

import click

from neonslots.config import Config
from neonslots.exceptions import AppException, InsufficientFundsException
from neonslots.logging_setup import configure_logging
from neonslots.models import WalletState
from neonslots.schemas import MachineSummarySchema, SpinOutcomeSchema
from neonslots.services.sound_settings import SoundSettings
from neonslots.services.spin_service import SpinService, validate_bet
from neonslots.services.wallet_service import WalletStore
from neonslots.utils.game_config_manager import GameConfigManager
from neonslots.utils.slot_tester import SlotTester
from neonslots.utils.spin_engine import step_bet


def format_grid(machine, grid):
    """Render a grid row by row, columns left to right."""
    width = max(len(symbol_id) for column in grid for symbol_id in column)
    return "\n".join(
        " | ".join(grid[col][row].ljust(width) for col in range(machine.reels))
        for row in range(machine.rows)
    )


def _fail(error):
    raise click.ClickException(error.status_message)


def _echo_outcome(machine, outcome):
    result = outcome.result
    click.echo(format_grid(machine, result.grid))
    click.echo()
    for line in result.winning_lines:
        click.echo(f"Line {line.line_index + 1}: {line.match_count}x {line.symbol_id} pays {line.amount}")
    if result.is_jackpot:
        click.echo("*** JACKPOT ***")
    click.echo(f"Bet {outcome.bet_amount}, won {result.total_win}. Balance: {outcome.wallet.soft_coin}")


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """Neon Slots - slot machine simulator."""
    ctx.ensure_object(dict)
    config = ctx.obj.get('config', Config)
    configure_logging(config, level='DEBUG' if verbose else None)
    ctx.obj['config'] = config
    ctx.obj['wallet_store'] = WalletStore(
        config.WALLET_PATH,
        WalletState(soft_coin=config.INITIAL_SOFT_COIN, gems=config.INITIAL_GEMS)
    )


@cli.command()
@click.option('--json', 'as_json', is_flag=True, help='Print the lobby as JSON')
def machines(as_json):
    """List the machines in the lobby."""
    lobby = GameConfigManager.list_machines()
    if as_json:
        click.echo(json.dumps(MachineSummarySchema(many=True).dump(lobby), indent=2))
        return
    for machine in lobby:
        click.echo(f"{machine.id:<15} {machine.name:<15} {machine.reels}x{machine.rows}  "
                   f"bet {machine.min_bet}-{machine.max_bet}  {len(machine.paylines)} lines  "
                   f"RTP {machine.rtp * 100:.0f}%  {machine.volatility}")
        if machine.description:
            click.echo(f"{'':<15} {machine.description}")


@cli.command()
@click.argument('machine_id')
@click.option('--bet', type=int, default=None, help='Bet amount (defaults to the machine minimum)')
@click.option('--step', type=click.Choice(['up', 'down', 'max']), default=None,
              help='Move the bet one notch before spinning, like the lobby bet buttons')
@click.option('--autoplay', type=click.IntRange(min=1), default=1, show_default=True,
              help='Spins to play in a row; stops early when coins run out')
@click.option('--json', 'as_json', is_flag=True, help='Print the played spins as JSON')
@click.pass_context
def spin(ctx, machine_id, bet, step, autoplay, as_json):
    """Play spins on MACHINE_ID against your wallet."""
    config = ctx.obj['config']
    try:
        machine = GameConfigManager.get_machine(machine_id)
        bet = bet if bet is not None else machine.min_bet
        if step:
            bet = step_bet(machine, bet, step)
        service = SpinService(ctx.obj['wallet_store'], latency_seconds=config.SPIN_LATENCY_SECONDS)
        if autoplay == 1:
            outcomes = [asyncio.run(service.play(machine, bet))]
        else:
            outcomes = asyncio.run(service.autoplay(machine, bet, autoplay))
        if not outcomes:
            raise InsufficientFundsException()
    except AppException as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(SpinOutcomeSchema(many=True).dump(outcomes), indent=2))
        return
    for i, outcome in enumerate(outcomes, start=1):
        if autoplay > 1:
            click.echo(f"--- Spin {i}/{autoplay} ---")
        _echo_outcome(machine, outcome)
    if len(outcomes) < autoplay:
        click.echo(f"Autoplay stopped after {len(outcomes)} spins: not enough coins")


@cli.command()
@click.argument('machine_id')
@click.option('--spins', type=int, default=10000, show_default=True, help='Number of spins to simulate')
@click.option('--bet', type=int, default=None, help='Bet amount (defaults to the machine minimum)')
@click.option('--seed', type=int, default=None, help='Seed for a reproducible run')
def simulate(machine_id, spins, bet, seed):
    """Measure payout statistics for MACHINE_ID without touching the wallet."""
    try:
        machine = GameConfigManager.get_machine(machine_id)
        bet = validate_bet(machine, bet if bet is not None else machine.min_bet)
    except AppException as e:
        _fail(e)
    if spins <= 0:
        raise click.BadParameter('must be positive', param_hint='--spins')
    tester = SlotTester(machine, spins, bet, seed=seed)
    tester.run_simulation()
    click.echo(tester.format_summary())


@cli.group()
def wallet():
    """Wallet commands."""
    pass


@wallet.command('show')
@click.pass_context
def wallet_show(ctx):
    """Show the current balance."""
    state = ctx.obj['wallet_store'].load()
    click.echo(f"Coins: {state.soft_coin:,}  Gems: {state.gems:,}")


@wallet.command('top-up')
@click.option('--amount', type=int, default=None, help='Coins to add (defaults to the configured top-up)')
@click.pass_context
def wallet_top_up(ctx, amount):
    """Add coins to the wallet."""
    amount = amount if amount is not None else ctx.obj['config'].TOP_UP_AMOUNT
    if amount <= 0:
        raise click.BadParameter('must be positive', param_hint='--amount')
    state = ctx.obj['wallet_store'].top_up(amount)
    click.echo(f"Added {amount:,} coins. Coins: {state.soft_coin:,}")


@wallet.command('reset')
@click.confirmation_option(prompt='Reset the wallet to its starting balance?')
@click.pass_context
def wallet_reset(ctx):
    """Reset the wallet to its starting balance."""
    state = ctx.obj['wallet_store'].reset()
    click.echo(f"Wallet reset. Coins: {state.soft_coin:,}  Gems: {state.gems:,}")


@cli.command()
@click.argument('value', type=float, required=False)
@click.pass_context
def volume(ctx, value):
    """Show or set the master volume (0.0 - 1.0)."""
    config = ctx.obj['config']
    settings = SoundSettings(config.SETTINGS_PATH, default_volume=config.DEFAULT_VOLUME)
    settings.load()
    if value is not None:
        settings.set_volume(value)
    click.echo(f"Volume: {round(settings.volume * 100)}%")


if __name__ == '__main__':
    cli()

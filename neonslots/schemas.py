import logging

from marshmallow import Schema, fields, ValidationError, post_load, validates_schema
from marshmallow.validate import OneOf, Range, Length

from .models import SymbolDefinition, MachineConfiguration, WalletState, WILD_SYMBOL_ID

logger = logging.getLogger(__name__)

# --- Custom Fields ---
class CoordinateField(fields.Field):
    """A payline cell: ``[column, row]`` on load, ``{"col", "row"}`` on dump."""
    def _deserialize(self, value, attr, data, **kwargs):
        if not (isinstance(value, (list, tuple)) and len(value) == 2
                and all(isinstance(v, int) and not isinstance(v, bool) for v in value)):
            raise ValidationError('Coordinate must be a [column, row] pair of integers.')
        return (value[0], value[1])

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        col, row = value
        return {'col': col, 'row': row}

# --- Machine Configuration Schemas ---
class SymbolSchema(Schema):
    id = fields.Str(required=True, validate=Length(min=1))
    name = fields.Str(load_default="")
    icon = fields.Str(load_default="")
    color = fields.Str(load_default="")
    value = fields.Float(required=True, validate=Range(min=0))

    @post_load
    def make_symbol(self, data, **kwargs):
        return SymbolDefinition(**data)

class MachineConfigSchema(Schema):
    id = fields.Str(required=True, validate=Length(min=1))
    name = fields.Str(required=True, validate=Length(min=1))
    description = fields.Str(load_default="")
    theme = fields.Str(load_default="classic")
    reels = fields.Int(required=True, strict=True, validate=Range(min=1))
    rows = fields.Int(required=True, strict=True, validate=Range(min=1))
    symbols = fields.List(fields.Nested(SymbolSchema), required=True, validate=Length(min=1))
    paylines = fields.List(fields.List(CoordinateField()), required=True)
    reel_strips = fields.List(fields.List(fields.Str(), validate=Length(min=1)),
                              data_key="reelStrips", load_default=None, validate=Length(min=1))
    payout_table = fields.Dict(keys=fields.Str(), values=fields.Dict(keys=fields.Int(), values=fields.Float()),
                               data_key="payouts", load_default=None)
    cost_per_spin = fields.Int(required=True, data_key="costPerSpin", validate=Range(min=0))
    min_bet = fields.Int(required=True, data_key="minBet", validate=Range(min=1))
    max_bet = fields.Int(required=True, data_key="maxBet", validate=Range(min=1))
    rtp = fields.Float(required=True, validate=Range(min=0, max=1))
    volatility = fields.Str(required=True, validate=OneOf(['low', 'medium', 'high']))
    wild_symbol_id = fields.Str(data_key="wildSymbolId", load_default=WILD_SYMBOL_ID)

    @validates_schema
    def validate_machine(self, data, **kwargs):
        errors = {}
        symbol_ids = [s.id for s in data['symbols']]
        if len(set(symbol_ids)) != len(symbol_ids):
            errors['symbols'] = ['Symbol ids must be unique within a machine.']

        if data['min_bet'] > data['max_bet']:
            errors['minBet'] = ['minBet cannot exceed maxBet.']

        reels, rows = data['reels'], data['rows']
        for i, line in enumerate(data['paylines']):
            if not line:
                errors.setdefault('paylines', []).append(f'Payline {i} is empty.')
            for col, row in line:
                if not (0 <= col < reels and 0 <= row < rows):
                    errors.setdefault('paylines', []).append(
                        f'Payline {i} cell [{col},{row}] is outside the {reels}x{rows} grid.')

        known = set(symbol_ids)
        for i, strip in enumerate(data.get('reel_strips') or []):
            unknown = sorted(set(strip) - known)
            if unknown:
                errors.setdefault('reelStrips', []).append(f'Strip {i} uses undefined symbols: {unknown}.')
        unknown_payouts = sorted(set(data.get('payout_table') or {}) - known)
        if unknown_payouts:
            errors['payouts'] = [f'Payouts defined for undefined symbols: {unknown_payouts}.']

        if errors:
            raise ValidationError(errors)

    @post_load
    def make_machine(self, data, **kwargs):
        reels = data['reels']
        for i, line in enumerate(data['paylines']):
            if len(line) > reels:
                logger.warning(f"Machine '{data['id']}': payline {i} has {len(line)} cells for {reels} reels and will never pay.")
        strips = data.get('reel_strips')
        if strips is not None and len(strips) < reels:
            logger.warning(f"Machine '{data['id']}': {len(strips)} reel strips for {reels} reels; missing columns reuse strip 0.")

        data['symbols'] = tuple(data['symbols'])
        data['paylines'] = tuple(tuple(line) for line in data['paylines'])
        if strips is not None:
            data['reel_strips'] = tuple(tuple(strip) for strip in strips)
        return MachineConfiguration(**data)

class MachineSummarySchema(Schema):
    # Lobby card view of a machine
    id = fields.Str(dump_only=True)
    name = fields.Str(dump_only=True)
    description = fields.Str(dump_only=True)
    theme = fields.Str(dump_only=True)
    reels = fields.Int(dump_only=True)
    rows = fields.Int(dump_only=True)
    min_bet = fields.Int(dump_only=True, data_key="minBet")
    max_bet = fields.Int(dump_only=True, data_key="maxBet")
    rtp = fields.Float(dump_only=True)
    volatility = fields.Str(dump_only=True)
    paylines = fields.Method("get_payline_count", dump_only=True)

    def get_payline_count(self, obj):
        return len(obj.paylines)

# --- Spin Schemas ---
class SpinRequestSchema(Schema):
    bet_amount = fields.Int(
        required=True,
        strict=True,
        data_key="betAmount",
        validate=Range(min=1, error="Bet amount must be a positive number of coins.")
    )

class WinningLineSchema(Schema):
    line_index = fields.Int(data_key="lineIndex")
    symbol_id = fields.Str(data_key="symbolId")
    match_count = fields.Int(data_key="count")
    amount = fields.Int()
    coordinates = fields.List(CoordinateField())

class SpinResultSchema(Schema):
    grid = fields.List(fields.List(fields.Str()))
    winning_lines = fields.List(fields.Nested(WinningLineSchema), data_key="winningLines")
    total_win = fields.Int(data_key="totalWin")
    is_jackpot = fields.Bool(data_key="isJackpot")

class SpinOutcomeSchema(Schema):
    # A played spin: result plus the wallet after settlement
    spin_id = fields.Str(data_key="spinId")
    bet_amount = fields.Int(data_key="betAmount")
    result = fields.Nested(SpinResultSchema)
    wallet = fields.Nested(lambda: WalletSchema())
    win_tier = fields.Str(data_key="winTier", allow_none=True)

# --- Wallet / Settings Schemas ---
class WalletSchema(Schema):
    soft_coin = fields.Int(required=True, strict=True, data_key="softCoin", validate=Range(min=0))
    gems = fields.Int(required=True, strict=True, validate=Range(min=0))

    @post_load
    def make_wallet(self, data, **kwargs):
        return WalletState(**data)

class SoundSettingsSchema(Schema):
    volume = fields.Float(required=True, validate=Range(min=0.0, max=1.0))

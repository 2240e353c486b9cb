import pytest
from neonslots.exceptions import (
    AppException,
    ValidationException,
    NotFoundException,
    InsufficientFundsException,
    GameLogicException,
)
from neonslots.error_codes import ErrorCodes
from neonslots.models import WalletState

def test_app_exception_instantiation():
    error_code = "TEST_001"
    status_message = "Test message"
    details = {"field": "value"}

    exc = AppException(error_code=error_code, status_message=status_message, details=details)

    assert exc.error_code == error_code
    assert exc.status_message == status_message
    assert exc.details == details
    assert str(exc) == status_message

def test_app_exception_defaults():
    exc = AppException(error_code="TEST_002", status_message="Default test")
    assert exc.details == {}

def test_validation_exception():
    details = {"betAmount": ["Bet amount must be a positive number of coins."]}
    exc = ValidationException(status_message="Invalid bet amount", details=details)
    assert exc.error_code == ErrorCodes.VALIDATION_ERROR
    assert exc.status_message == "Invalid bet amount"
    assert exc.details == details
    with pytest.raises(ValidationException):
        raise exc

def test_not_found_exception():
    exc = NotFoundException(status_message="Unknown machine 'mega-reel'")
    assert exc.error_code == ErrorCodes.NOT_FOUND
    assert exc.status_message == "Unknown machine 'mega-reel'"
    with pytest.raises(NotFoundException):
        raise exc

def test_insufficient_funds_exception_default_message():
    exc = InsufficientFundsException()
    assert exc.error_code == ErrorCodes.INSUFFICIENT_FUNDS
    assert exc.status_message == "Not enough coins"
    assert isinstance(exc, AppException)

def test_game_logic_exception():
    exc = GameLogicException(status_message="Grid does not match machine", details={"reels": 3})
    assert exc.error_code == ErrorCodes.GAME_LOGIC_ERROR
    assert exc.details == {"reels": 3}
    with pytest.raises(AppException):
        raise exc

def test_wallet_debit_raises_insufficient_funds():
    wallet = WalletState(soft_coin=5, gems=0)
    with pytest.raises(InsufficientFundsException) as excinfo:
        wallet.debit(10)
    assert excinfo.value.details == {"balance": 5, "required": 10}

def test_wallet_credit_and_debit_return_new_state():
    wallet = WalletState(soft_coin=100, gems=3)
    assert wallet.debit(40).credit(15) == WalletState(soft_coin=75, gems=3)
    assert wallet.soft_coin == 100

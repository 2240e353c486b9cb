class ErrorCodes:
    VALIDATION_ERROR = "NS_VALIDATION_ERROR"
    NOT_FOUND = "NS_NOT_FOUND"
    INSUFFICIENT_FUNDS = "NS_INSUFFICIENT_FUNDS"
    GAME_LOGIC_ERROR = "NS_GAME_LOGIC_ERROR"

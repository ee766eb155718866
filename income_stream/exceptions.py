"""Domain-specific exceptions.

Services raise these; the API layer maps them to HTTP status codes
(see income_stream.api.errors).
"""


class DomainError(Exception):
    """Base exception for domain errors.

    Keyword arguments are kept in `details` and returned to API clients
    next to the error message.
    """

    def __init__(self, message: str, **details):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(DomainError):
    """Raised when input fails domain validation."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""

    pass


class StockNotFoundError(NotFoundError):
    """Raised when a stock is not found."""

    def __init__(self, stock_id=None):
        self.stock_id = stock_id
        super().__init__("Stock not found")


class HoldingNotFoundError(NotFoundError):
    """Raised when a holding is not found."""

    def __init__(self, holding_id=None):
        self.holding_id = holding_id
        super().__init__("Holding not found")


class DividendNotFoundError(NotFoundError):
    """Raised when a dividend record is not found."""

    def __init__(self, dividend_id=None):
        self.dividend_id = dividend_id
        super().__init__("Dividend not found")


class CurrencyConversionError(ValidationError):
    """Raised when a currency code is unsupported or a conversion is impossible."""

    def __init__(self, from_currency: str, to_currency: str = "", reason: str = ""):
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.reason = reason
        if to_currency:
            message = f"Cannot convert {from_currency} to {to_currency}"
        else:
            message = f"Unsupported currency: {from_currency}"
        if reason:
            message += f". {reason}"
        super().__init__(message)


class QuoteProviderError(DomainError):
    """Raised when the market data provider cannot return a usable quote."""

    def __init__(self, symbol: str, reason: str = ""):
        self.symbol = symbol
        self.reason = reason
        message = f"Failed to fetch quote for {symbol}"
        if reason:
            message += f": {reason}"
        super().__init__(message)

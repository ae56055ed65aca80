"""Exception types for MarketPulse.

Analysis errors are fatal for the current run: callers skip the report
instead of substituting defaults.
"""


class MarketPulseError(Exception):
    """Base class for all MarketPulse errors."""


class InsufficientDataError(MarketPulseError):
    """Raised when a series is shorter than an indicator's lookback."""

    def __init__(self, indicator: str, required: int, actual: int):
        self.indicator = indicator
        self.required = required
        self.actual = actual
        super().__init__(
            f"{indicator} requires at least {required} values, got {actual}"
        )


class InvalidCandleError(MarketPulseError):
    """Raised for a malformed bar or an out-of-order series."""


class UpstreamFetchError(MarketPulseError):
    """Raised when the market data provider cannot deliver data."""


class DeliveryError(MarketPulseError):
    """Raised when the delivery channel rejects a message."""


class ConfigError(MarketPulseError):
    """Raised when configuration is unreadable or incomplete."""

# Trading Dashboard - Error taxonomy
# Raised by services and surfaced unchanged through the App facade. No retries anywhere.


class TradingDashboardError(Exception):
    """Base for all errors surfaced to the GUI layer."""


class ValidationError(TradingDashboardError):
    """Input violates a documented invariant (rating range, required field, date order, status)."""


class NotFoundError(TradingDashboardError):
    """The targeted id does not exist."""


class StoreError(TradingDashboardError):
    """Connection, transaction or statement failure in the local store."""


class ServiceUnavailableError(StoreError):
    """The store failed to initialize at startup; the facade is running read-only with empty data."""

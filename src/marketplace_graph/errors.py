"""Exceptions raised by the interaction graph and its collaborators."""


class MarketplaceGraphError(Exception):
    """Base class for marketplace graph errors."""


class StoreUnavailable(MarketplaceGraphError):
    """Raised when the graph or product store cannot be reached in time.

    Recoverable: the caller may retry or drop the operation. Each graph write is
    a single atomic statement, so a failure never leaves a partial write behind.
    """

    def __init__(self, store: str, reason: str):
        self.store = store  # "graph", "products" or "cache"
        self.reason = reason
        super().__init__(f"{store} store unavailable: {reason}")


class InvalidOperation(MarketplaceGraphError):
    """Raised for semantic rule violations, before any write is attempted."""

"""Domain exceptions for the feed data stores.

Stores raise these for infrastructure problems. Fetchers and lookups in
the feed core catch them at their isolation boundary and degrade to empty
results.
"""


class StoreError(Exception):
    """Base exception for all feed store errors."""


class StoreUnavailableError(StoreError):
    """Raised when a backing store cannot serve a query."""

    def __init__(self, store_name: str, message: str = "Store unavailable") -> None:
        """Initialize the error.

        Args:
            store_name: Name of the collection or table queried.
            message: Human-readable error message.
        """
        self.store_name = store_name
        super().__init__(f"{message}: {store_name}")


class FixtureLoadError(StoreError):
    """Raised when a fixture file cannot be read or has the wrong shape."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize the error.

        Args:
            path: Path of the fixture file.
            reason: Why loading failed.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load fixture '{path}': {reason}")

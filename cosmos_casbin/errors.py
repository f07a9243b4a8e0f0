"""
Error types raised by the Cosmos DB policy adapter.

- ``ConfigurationError`` is fatal and raised while constructing an adapter
  (bad options, unreachable account, failed database/container bootstrap).
- ``StoreError`` wraps any Cosmos or serialization failure during a policy
  operation. The underlying exception is chained as ``__cause__``.
- ``FilteredStateError`` is raised when saving while only a filtered subset
  of the policy has been loaded.
"""

from typing import Optional


class CosmosAdapterError(Exception):
    """Base class for all adapter errors"""

    pass


class ConfigurationError(CosmosAdapterError):
    """Raised when the adapter cannot be constructed"""

    pass


class StoreError(CosmosAdapterError):
    """Raised when a store operation fails"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FilteredStateError(CosmosAdapterError):
    """Raised when saving a policy that was loaded through a filter"""

    def __init__(self, message: str = "cannot save a filtered policy"):
        super().__init__(message)

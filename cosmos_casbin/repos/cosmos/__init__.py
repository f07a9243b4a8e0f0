"""
Cosmos DB implementation of the policy adapter.
"""

from .adapter import CosmosAdapter

__all__ = [
    "CosmosAdapter",
]

"""
Azure Cosmos DB storage adapter for Casbin policies.

Example:
    >>> import casbin
    >>> from cosmos_casbin import AdapterOptions, CosmosAdapter
    >>> adapter = CosmosAdapter.from_connection_string(conn_str, AdapterOptions())
    >>> enforcer = casbin.Enforcer("rbac_model.conf", adapter)
"""

from .config import AdapterOptions
from .domain import CasbinRule, P, QueryParameter, SqlQuerySpec, q
from .errors import (
    ConfigurationError,
    CosmosAdapterError,
    FilteredStateError,
    StoreError,
)
from .repos.cosmos import CosmosAdapter
from .repositories import PolicyAdapter

__all__ = [
    "AdapterOptions",
    "CasbinRule",
    "ConfigurationError",
    "CosmosAdapter",
    "CosmosAdapterError",
    "FilteredStateError",
    "P",
    "PolicyAdapter",
    "QueryParameter",
    "SqlQuerySpec",
    "StoreError",
    "q",
]

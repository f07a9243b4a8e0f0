"""
Runtime validation utilities for adapter boundaries.

This module provides functions to validate:

- Store clients and adapters against their defined Protocols using
  @runtime_checkable.
- Raw Cosmos documents against the ``CasbinRule`` domain model.

The goal is to catch configuration and data errors early, at adapter
construction and when reading documents back from the store.
"""

import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import ValidationError

from cosmos_casbin.domain import CasbinRule
from cosmos_casbin.errors import ConfigurationError, StoreError

logger = logging.getLogger(__name__)

P = TypeVar("P")


def validate_protocol(implementation: object, protocol: Type[P]) -> None:
    """
    Validate that an object satisfies a protocol contract.

    Args:
        implementation: The object to validate
        protocol: The protocol class to validate against

    Raises:
        ConfigurationError: If validation fails

    Example:
        >>> from azure.cosmos import CosmosClient as SdkClient
        >>> from cosmos_casbin.repos.cosmos.client import CosmosClient
        >>> validate_protocol(SdkClient.from_connection_string(conn), CosmosClient)
    """
    logger.debug(
        "Validating protocol",
        extra={
            "implementation_type": type(implementation).__name__,
            "protocol_name": protocol.__name__,
        },
    )

    if not isinstance(implementation, protocol):
        error_message = (
            f"{type(implementation).__name__} does not implement "
            f"{protocol.__name__} protocol. Missing or incorrect methods."
        )
        logger.error(
            "Protocol validation failed",
            extra={
                "implementation_type": type(implementation).__name__,
                "protocol_name": protocol.__name__,
            },
        )
        raise ConfigurationError(error_message)


def ensure_protocol(implementation: object, protocol: Type[P]) -> P:
    """
    Validate and return an object with proper type annotation.

    Raises:
        ConfigurationError: If validation fails
    """
    validate_protocol(implementation, protocol)
    return implementation  # type: ignore[return-value]


def parse_rule_document(document: Dict[str, Any]) -> CasbinRule:
    """
    Validate a raw Cosmos document as a ``CasbinRule``.

    Cosmos system properties (``_rid``, ``_etag`` ...) are ignored.

    Raises:
        StoreError: If the document cannot be read as a rule
    """
    try:
        return CasbinRule.model_validate(document)
    except ValidationError as e:
        logger.error(
            "Stored document is not a valid policy rule",
            extra={
                "document_id": document.get("id") if isinstance(document, dict) else None,
                "error": str(e),
            },
        )
        raise StoreError(f"Invalid policy document: {e}") from e

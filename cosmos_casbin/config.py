"""
Adapter configuration.

Options can be passed explicitly or read from the environment with
``AdapterOptions.from_env()``. Unset values fall back to the defaults used
by the adapter (database ``casbin``, container ``casbin_rule``).
"""

import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from cosmos_casbin.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_NAME = "casbin"
DEFAULT_CONTAINER_NAME = "casbin_rule"

# Partition key path of the policy container
PARTITION_KEY_PATH = "/pType"


class AdapterOptions(BaseModel):
    database_name: str = DEFAULT_DATABASE_NAME
    container_name: str = DEFAULT_CONTAINER_NAME
    endpoint: Optional[str] = None
    key: Optional[str] = None
    connection_string: Optional[str] = None
    # Extra keyword arguments forwarded to azure.cosmos.CosmosClient
    client_kwargs: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("database_name", "container_name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Database and container names must not be empty")
        return v

    @classmethod
    def build(cls, **values: Any) -> "AdapterOptions":
        """Validate ``values``, raising ConfigurationError on bad input."""
        try:
            return cls(**values)
        except ValidationError as e:
            logger.error(
                "Invalid adapter options",
                extra={"error": str(e), "error_count": e.error_count()},
            )
            raise ConfigurationError(f"Invalid adapter options: {e}") from e

    @classmethod
    def from_env(cls, **overrides: Any) -> "AdapterOptions":
        """Read options from COSMOS_* environment variables.

        Explicit keyword overrides that are not None take precedence.
        """
        values: Dict[str, Any] = {
            "database_name": os.environ.get(
                "COSMOS_DATABASE_NAME", DEFAULT_DATABASE_NAME
            ),
            "container_name": os.environ.get(
                "COSMOS_CONTAINER_NAME", DEFAULT_CONTAINER_NAME
            ),
            "endpoint": os.environ.get("COSMOS_ENDPOINT"),
            "key": os.environ.get("COSMOS_KEY"),
            "connection_string": os.environ.get("COSMOS_CONNECTION_STRING"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        logger.debug(
            "Loaded adapter options from environment",
            extra={
                "database_name": values["database_name"],
                "container_name": values["container_name"],
                "endpoint": values["endpoint"],
                "has_connection_string": bool(values["connection_string"]),
            },
        )
        return cls.build(**values)

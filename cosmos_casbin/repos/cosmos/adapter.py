"""
Cosmos DB implementation of the Casbin storage adapter.

Every policy rule is stored as one ``CasbinRule`` document in a single
container partitioned by ``/pType``. Document ids are content-addressed
(see ``cosmos_casbin.codec.policy_id``), so adding and removing a rule
needs no lookup.

``save_policy`` drops and recreates the container before writing the
model's rules back. This is not atomic: if it fails part way the container
is left empty or partially written and the save has to be repeated.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient as SdkCosmosClient
from azure.cosmos import PartitionKey
from azure.cosmos.exceptions import CosmosResourceNotFoundError
from azure.identity import DefaultAzureCredential
from casbin.persist.adapter_filtered import FilteredAdapter
from casbin.persist.batch_adapter import BatchAdapter
from casbin.model import Model

from cosmos_casbin.codec import load_policy_record, rule_to_record
from cosmos_casbin.config import PARTITION_KEY_PATH, AdapterOptions
from cosmos_casbin.domain import CasbinRule, SqlQuerySpec
from cosmos_casbin.errors import (
    ConfigurationError,
    FilteredStateError,
    StoreError,
)
from cosmos_casbin.query import LOAD_ALL_QUERY, build_remove_filter
from cosmos_casbin.repos.cosmos.client import (
    CosmosClient,
    CosmosContainer,
    CosmosDatabase,
)
from cosmos_casbin.validation import ensure_protocol, parse_rule_document

logger = logging.getLogger(__name__)


class CosmosAdapter(FilteredAdapter, BatchAdapter):
    """
    Cosmos DB implementation of the Casbin adapter contract.

    The database and container are created if they do not exist. Any
    failure while doing so raises ConfigurationError, so a constructed
    adapter is always backed by a usable container.

    The adapter is not thread safe: the filtered flag is plain instance
    state.
    """

    def __init__(
        self, client: CosmosClient, options: Optional[AdapterOptions] = None
    ):
        self.options = options or AdapterOptions()
        self.client = ensure_protocol(client, CosmosClient)
        self.database_name = self.options.database_name
        self.container_name = self.options.container_name
        self._filtered = False

        logger.debug(
            "CosmosAdapter: Initializing",
            extra={
                "database_name": self.database_name,
                "container_name": self.container_name,
            },
        )
        self.database: CosmosDatabase
        self.container: CosmosContainer
        self._ensure_container_exists()

    @classmethod
    def from_connection_string(
        cls, connection_string: str, options: Optional[AdapterOptions] = None
    ) -> "CosmosAdapter":
        """Create an adapter from a Cosmos DB account connection string."""
        options = options or AdapterOptions()
        try:
            client = SdkCosmosClient.from_connection_string(
                connection_string, **options.client_kwargs
            )
        except (AzureError, ValueError) as e:
            logger.error(
                "CosmosAdapter: Failed to create Cosmos client from connection string",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise ConfigurationError(
                f"Creating Cosmos client failed: {e}"
            ) from e
        return cls(client, options)

    @classmethod
    def from_endpoint(
        cls,
        endpoint: str,
        credential: Optional[Union[str, TokenCredential]] = None,
        options: Optional[AdapterOptions] = None,
    ) -> "CosmosAdapter":
        """Create an adapter from an account endpoint.

        Without an explicit credential, DefaultAzureCredential is used.
        """
        options = options or AdapterOptions()
        if credential is None:
            credential = DefaultAzureCredential()
        try:
            client = SdkCosmosClient(
                endpoint, credential=credential, **options.client_kwargs
            )
        except (AzureError, ValueError) as e:
            logger.error(
                "CosmosAdapter: Failed to create Cosmos client for endpoint",
                extra={
                    "endpoint": endpoint,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise ConfigurationError(
                f"Creating Cosmos client failed: {e}"
            ) from e
        return cls(client, options)

    @classmethod
    def from_options(
        cls, options: Optional[AdapterOptions] = None
    ) -> "CosmosAdapter":
        """Create an adapter from options, reading the environment if none are given.

        A connection string takes precedence over an endpoint.
        """
        options = options or AdapterOptions.from_env()
        if options.connection_string:
            return cls.from_connection_string(options.connection_string, options)
        if options.endpoint:
            return cls.from_endpoint(options.endpoint, options.key, options)
        raise ConfigurationError(
            "Either a connection string or an endpoint must be configured"
        )

    def _ensure_container_exists(self) -> None:
        """Create the database and the policy container if missing."""
        try:
            self.database = self.client.create_database_if_not_exists(
                id=self.database_name
            )
            self.container = self.database.create_container_if_not_exists(
                id=self.container_name,
                partition_key=PartitionKey(path=PARTITION_KEY_PATH),
            )
        except AzureError as e:
            logger.error(
                "CosmosAdapter: Failed to create policy database or container",
                extra={
                    "database_name": self.database_name,
                    "container_name": self.container_name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise ConfigurationError(
                f"Creating database {self.database_name} or container "
                f"{self.container_name} failed: {e}"
            ) from e

        logger.debug(
            "CosmosAdapter: Policy container ready",
            extra={
                "database_name": self.database_name,
                "container_name": self.container_name,
            },
        )

    def _drop_container(self) -> None:
        """Delete the policy container and create it again, empty."""
        logger.info(
            "CosmosAdapter: Recreating policy container",
            extra={"container_name": self.container_name},
        )
        try:
            try:
                self.database.delete_container(self.container_name)
            except CosmosResourceNotFoundError:
                logger.warning(
                    "CosmosAdapter: Policy container already missing before drop",
                    extra={"container_name": self.container_name},
                )
            self.container = self.database.create_container(
                id=self.container_name,
                partition_key=PartitionKey(path=PARTITION_KEY_PATH),
            )
        except AzureError as e:
            raise self._store_error("recreate container", e) from e

    def _store_error(self, operation: str, error: Exception) -> StoreError:
        logger.error(
            f"CosmosAdapter: Failed to {operation}",
            extra={
                "container_name": self.container_name,
                "error": str(error),
                "error_type": type(error).__name__,
            },
            exc_info=True,
        )
        return StoreError(
            f"Unable to {operation}: {error}",
            status_code=getattr(error, "status_code", None),
        )

    def _query(
        self, spec: SqlQuerySpec, partition_key: Optional[str] = None
    ) -> List[CasbinRule]:
        """Run ``spec`` and return every matching rule.

        All pages are read before anything is returned. Without a partition
        key the query runs across partitions.
        """
        kwargs: Dict[str, Any] = {}
        if partition_key is None:
            kwargs["enable_cross_partition_query"] = True
        else:
            kwargs["partition_key"] = partition_key

        logger.debug(
            "CosmosAdapter: Querying policy container",
            extra={
                "query": spec.query,
                "parameter_count": len(spec.parameters),
                "partition_key": partition_key,
            },
        )
        try:
            items = list(
                self.container.query_items(
                    query=spec.query,
                    parameters=spec.to_cosmos_parameters(),
                    **kwargs,
                )
            )
        except AzureError as e:
            raise self._store_error("query policy", e) from e

        return [parse_rule_document(item) for item in items]

    def _save(self, record: CasbinRule) -> None:
        try:
            self.container.create_item(body=record.to_document())
        except AzureError as e:
            raise self._store_error("save policy", e) from e
        logger.debug(
            "CosmosAdapter: Rule stored",
            extra={"policy_id": record.id, "ptype": record.ptype},
        )

    def _delete(self, record: CasbinRule) -> None:
        try:
            self.container.delete_item(item=record.id, partition_key=record.ptype)
        except AzureError as e:
            raise self._store_error("remove policy", e) from e
        logger.debug(
            "CosmosAdapter: Rule removed",
            extra={"policy_id": record.id, "ptype": record.ptype},
        )

    def load_policy(self, model: Model) -> List[CasbinRule]:
        """Load all policy rules from the container.

        Returns the stored documents that were read.
        """
        self._filtered = False
        records = self._query(SqlQuerySpec(query=LOAD_ALL_QUERY))
        for record in records:
            load_policy_record(record, model)

        logger.info(
            "CosmosAdapter: Policy loaded",
            extra={"container_name": self.container_name, "rule_count": len(records)},
        )
        return records

    def load_filtered_policy(
        self, model: Model, filter: Union[SqlQuerySpec, Dict[str, Any]]
    ) -> List[CasbinRule]:
        """Load the rules matching ``filter``.

        ``filter`` is a SqlQuerySpec or a dict of the same shape, in the
        Cosmos SQL dialect, e.g.
        ``{"query": "SELECT * FROM c WHERE c.v0 = @v0",
        "parameters": [{"name": "@v0", "value": "alice"}]}``.
        """
        if isinstance(filter, SqlQuerySpec):
            spec = filter
        elif isinstance(filter, dict):
            spec = SqlQuerySpec.model_validate(filter)
        else:
            raise TypeError(
                f"Filter must be a SqlQuerySpec or dict, not {type(filter).__name__}"
            )

        records = self._query(spec)
        for record in records:
            load_policy_record(record, model)
        self._filtered = True

        logger.info(
            "CosmosAdapter: Filtered policy loaded",
            extra={"query": spec.query, "rule_count": len(records)},
        )
        return records

    def is_filtered(self) -> bool:
        return self._filtered

    def save_policy(self, model: Model) -> bool:
        """Replace the stored policy with the ``p`` and ``g`` rules of ``model``."""
        if self._filtered:
            logger.error(
                "CosmosAdapter: Refusing to save a filtered policy",
                extra={"container_name": self.container_name},
            )
            raise FilteredStateError()

        self._drop_container()

        records = [
            rule_to_record(ptype, rule)
            for sec in ("p", "g")
            for ptype, assertion in model.model.get(sec, {}).items()
            for rule in assertion.policy
        ]
        for record in records:
            self._save(record)

        logger.info(
            "CosmosAdapter: Policy saved",
            extra={"container_name": self.container_name, "rule_count": len(records)},
        )
        return True

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Add a policy rule to the storage."""
        self._save(rule_to_record(ptype, rule))
        return True

    def add_policies(
        self, sec: str, ptype: str, rules: Sequence[Sequence[str]]
    ) -> bool:
        for rule in rules:
            self._save(rule_to_record(ptype, rule))
        return True

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Remove a policy rule from the storage."""
        self._delete(rule_to_record(ptype, rule))
        return True

    def remove_policies(
        self, sec: str, ptype: str, rules: Sequence[Sequence[str]]
    ) -> bool:
        for rule in rules:
            self._delete(rule_to_record(ptype, rule))
        return True

    def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *field_values: str
    ) -> bool:
        """Remove policy rules that match the filter from the storage.

        Empty field values are wildcards.
        """
        spec = build_remove_filter(ptype, field_index, field_values)
        records = self._query(spec, partition_key=ptype)
        for record in records:
            self._delete(record)

        logger.info(
            "CosmosAdapter: Filtered policy removed",
            extra={
                "ptype": ptype,
                "field_index": field_index,
                "removed_count": len(records),
            },
        )
        return True

"""
Cosmos client protocol definitions.

This module defines the protocol interfaces that both the real
azure.cosmos proxies and our fake test client must implement. The adapter
depends on these abstractions rather than on the SDK classes directly.
"""

from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from azure.cosmos import PartitionKey


@runtime_checkable
class CosmosContainer(Protocol):
    """
    The subset of ``azure.cosmos.ContainerProxy`` used by the adapter.
    """

    def create_item(self, body: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        """Create an item in the container.

        Args:
            body: JSON document to store; must contain ``id``

        Returns:
            The stored document including system properties

        Raises:
            CosmosResourceExistsError: If an item with the same id exists
                in the partition
        """
        ...

    def delete_item(self, item: str, partition_key: Any, **kwargs: Any) -> None:
        """Delete an item by id within a partition.

        Raises:
            CosmosResourceNotFoundError: If the item does not exist
        """
        ...

    def query_items(
        self,
        query: str,
        parameters: Optional[List[Dict[str, Any]]] = None,
        partition_key: Optional[Any] = None,
        enable_cross_partition_query: Optional[bool] = None,
        **kwargs: Any,
    ) -> Iterable[Dict[str, Any]]:
        """Run a SQL query. Pages are fetched lazily while iterating."""
        ...


@runtime_checkable
class CosmosDatabase(Protocol):
    """
    The subset of ``azure.cosmos.DatabaseProxy`` used by the adapter.
    """

    def create_container(
        self, id: str, partition_key: PartitionKey, **kwargs: Any
    ) -> CosmosContainer:
        """Create a container.

        Raises:
            CosmosResourceExistsError: If the container already exists
        """
        ...

    def create_container_if_not_exists(
        self, id: str, partition_key: PartitionKey, **kwargs: Any
    ) -> CosmosContainer:
        """Return the container, creating it if it does not exist."""
        ...

    def delete_container(self, container: str, **kwargs: Any) -> None:
        """Delete a container and every item in it.

        Raises:
            CosmosResourceNotFoundError: If the container does not exist
        """
        ...


@runtime_checkable
class CosmosClient(Protocol):
    """
    The subset of ``azure.cosmos.CosmosClient`` used by the adapter.
    """

    def create_database_if_not_exists(self, id: str, **kwargs: Any) -> CosmosDatabase:
        """Return the database, creating it if it does not exist."""
        ...

import pytest

from cosmos_casbin.config import AdapterOptions
from cosmos_casbin.repos.cosmos import CosmosAdapter

from .fake_client import FakeContainer, FakeCosmosClient


@pytest.fixture
def fake_client() -> FakeCosmosClient:
    """Create a fresh fake Cosmos client for each test."""
    return FakeCosmosClient()


@pytest.fixture
def options() -> AdapterOptions:
    return AdapterOptions(database_name="casbin", container_name="casbin_rule")


@pytest.fixture
def adapter(fake_client: FakeCosmosClient, options: AdapterOptions) -> CosmosAdapter:
    """Create an adapter backed by the fake client."""
    return CosmosAdapter(fake_client, options)


@pytest.fixture
def container(fake_client: FakeCosmosClient, adapter: CosmosAdapter) -> FakeContainer:
    """The fake container currently backing ``adapter``."""
    return fake_client.container(adapter.database_name, adapter.container_name)

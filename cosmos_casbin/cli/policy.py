#!/usr/bin/env python3
"""
CLI for moving Casbin policy in and out of Cosmos DB.

``import-csv`` seeds the container from a model and a CSV policy file
(replacing whatever is stored). ``dump`` prints the stored policy in the
same CSV form, optionally restricted by a Cosmos SQL query.

Connection settings default to the COSMOS_* environment variables.
"""

import logging
import sys
from typing import Iterator, List, Optional, Tuple

import casbin
import click
from casbin.model import Model
from pydantic import ValidationError

from cosmos_casbin.config import AdapterOptions
from cosmos_casbin.domain import QueryParameter, SqlQuerySpec
from cosmos_casbin.errors import CosmosAdapterError
from cosmos_casbin.repos.cosmos import CosmosAdapter
from cosmos_casbin.repositories import PolicyAdapter
from cosmos_casbin.validation import validate_protocol

logger = logging.getLogger(__name__)


def _build_adapter(
    database: Optional[str],
    container: Optional[str],
    connection_string: Optional[str],
    endpoint: Optional[str],
    key: Optional[str],
) -> CosmosAdapter:
    options = AdapterOptions.from_env(
        database_name=database,
        container_name=container,
        connection_string=connection_string,
        endpoint=endpoint,
        key=key,
    )
    adapter = CosmosAdapter.from_options(options)
    validate_protocol(adapter, PolicyAdapter)
    return adapter


def _first_error(error: ValidationError) -> str:
    return error.errors()[0]["msg"]


def _parse_params(params: Tuple[str, ...]) -> List[QueryParameter]:
    parameters = []
    for param in params:
        name, sep, value = param.partition("=")
        if not sep:
            raise click.BadParameter(
                f"'{param}' is not of the form @name=value", param_hint="--param"
            )
        if not name.startswith("@"):
            name = f"@{name}"
        try:
            parameters.append(QueryParameter(name=name, value=value))
        except ValidationError as e:
            raise click.BadParameter(
                f"'{param}': {_first_error(e)}", param_hint="--param"
            ) from e
    return parameters


def _build_query(query: str, params: Tuple[str, ...]) -> SqlQuerySpec:
    parameters = _parse_params(params)
    try:
        return SqlQuerySpec(query=query, parameters=parameters)
    except ValidationError as e:
        raise click.BadParameter(_first_error(e), param_hint="--query") from e


def _policy_lines(model: Model) -> Iterator[str]:
    for sec in ("p", "g"):
        for ptype, assertion in model.model.get(sec, {}).items():
            for rule in assertion.policy:
                yield ", ".join([ptype, *rule])


@click.group()
@click.option("--database", default=None, help="Database name (COSMOS_DATABASE_NAME, default 'casbin')")
@click.option("--container", default=None, help="Container name (COSMOS_CONTAINER_NAME, default 'casbin_rule')")
@click.option("--connection-string", default=None, help="Account connection string (COSMOS_CONNECTION_STRING)")
@click.option("--endpoint", default=None, help="Account endpoint (COSMOS_ENDPOINT)")
@click.option("--key", default=None, help="Account key (COSMOS_KEY); Azure AD is used when unset")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(
    ctx: click.Context,
    database: Optional[str],
    container: Optional[str],
    connection_string: Optional[str],
    endpoint: Optional[str],
    key: Optional[str],
    verbose: bool,
) -> None:
    """Manage Casbin policy stored in Azure Cosmos DB."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = {
        "database": database,
        "container": container,
        "connection_string": connection_string,
        "endpoint": endpoint,
        "key": key,
    }


@main.command("import-csv")
@click.argument("model_conf", type=click.Path(exists=True, dir_okay=False))
@click.argument("policy_csv", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def import_csv(settings: dict, model_conf: str, policy_csv: str) -> None:
    """Replace the stored policy with the rules in POLICY_CSV."""
    enforcer = casbin.Enforcer(model_conf, policy_csv)
    model = enforcer.get_model()
    rule_count = sum(1 for _ in _policy_lines(model))

    try:
        adapter = _build_adapter(**settings)
        adapter.save_policy(model)
    except CosmosAdapterError as e:
        logger.error(f"Policy import failed: {e}", exc_info=True)
        click.echo(f"Policy import failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"Imported {rule_count} rules into {adapter.container_name}")


@main.command("dump")
@click.argument("model_conf", type=click.Path(exists=True, dir_okay=False))
@click.option("--query", default=None, help="Cosmos SQL query selecting the rules to print")
@click.option("--param", "params", multiple=True, help="Query parameter as @name=value (repeatable)")
@click.pass_obj
def dump(
    settings: dict,
    model_conf: str,
    query: Optional[str],
    params: Tuple[str, ...],
) -> None:
    """Print the stored policy as CSV lines."""
    if params and not query:
        raise click.UsageError("--param requires --query")
    spec = _build_query(query, params) if query else None

    model = Model()
    model.load_model(model_conf)

    try:
        adapter = _build_adapter(**settings)
        if spec is not None:
            adapter.load_filtered_policy(model, spec)
        else:
            adapter.load_policy(model)
    except CosmosAdapterError as e:
        logger.error(f"Policy dump failed: {e}", exc_info=True)
        click.echo(f"Policy dump failed: {e}", err=True)
        sys.exit(1)

    for line in _policy_lines(model):
        click.echo(line)


if __name__ == "__main__":
    main()

"""
Query construction for the policy container.
"""

from typing import Sequence

from cosmos_casbin.domain import RULE_FIELDS, QueryParameter, SqlQuerySpec

LOAD_ALL_QUERY = "SELECT * FROM c"


def build_remove_filter(
    ptype: str, field_index: int, field_values: Sequence[str]
) -> SqlQuerySpec:
    """Build the query selecting rules for ``remove_filtered_policy``.

    ``field_values[i]`` constrains slot ``v{field_index + i}``. Slots outside
    ``v0..v5`` and empty values are wildcards and are left out of the query.
    The policy type is always constrained.

    Example:
        >>> build_remove_filter("p", 0, ["", "data1"]).query
        'SELECT * FROM root WHERE root.pType = @pType AND root.v1 = @v1'
    """
    query = "SELECT * FROM root WHERE root.pType = @pType"
    parameters = [QueryParameter(name="@pType", value=ptype)]

    for slot, field in enumerate(RULE_FIELDS):
        offset = slot - field_index
        if offset < 0 or offset >= len(field_values):
            continue
        value = field_values[offset]
        if value == "":
            continue
        query += f" AND root.{field} = @{field}"
        parameters.append(QueryParameter(name=f"@{field}", value=value))

    return SqlQuerySpec(query=query, parameters=parameters)

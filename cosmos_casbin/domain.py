"""
Domain models defined as Pydantic models.

``CasbinRule`` is the document stored in Cosmos DB for every policy rule.
``SqlQuerySpec`` is the filter object callers hand to
``CosmosAdapter.load_filtered_policy``.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Number of value slots (v0..v5) in a stored rule
RULE_FIELD_COUNT = 6

RULE_FIELDS = tuple(f"v{i}" for i in range(RULE_FIELD_COUNT))


class CasbinRule(BaseModel):
    """A single policy rule as persisted in the container.

    Unused value slots hold the empty string, never ``None``, so every
    document carries all of ``id, pType, v0..v5``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    ptype: str = Field(default="", alias="pType")
    v0: str = ""
    v1: str = ""
    v2: str = ""
    v3: str = ""
    v4: str = ""
    v5: str = ""

    @field_validator("id", "ptype", *RULE_FIELDS, mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v

    def values(self) -> List[str]:
        """Return the six value slots in positional order."""
        return [getattr(self, name) for name in RULE_FIELDS]

    def to_document(self) -> Dict[str, str]:
        """Serialize using the stored key names (``pType`` not ``ptype``)."""
        return self.model_dump(by_alias=True)


class QueryParameter(BaseModel):
    """Named parameter bound into a Cosmos SQL query."""

    name: str
    value: Any = None

    @field_validator("name")
    @classmethod
    def name_must_be_placeholder(cls, v: str) -> str:
        if not v.startswith("@") or len(v) < 2:
            raise ValueError("Parameter name must have the form @name")
        return v


class SqlQuerySpec(BaseModel):
    """Query text plus parameter bindings in the Cosmos SQL dialect."""

    query: str
    parameters: List[QueryParameter] = Field(default_factory=list)

    @field_validator("query")
    @classmethod
    def query_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Query must not be empty")
        return v

    def to_cosmos_parameters(self) -> Optional[List[Dict[str, Any]]]:
        """Render parameters in the shape expected by ``query_items``."""
        if not self.parameters:
            return None
        return [{"name": p.name, "value": p.value} for p in self.parameters]


def q(query: str, *parameters: QueryParameter) -> SqlQuerySpec:
    """Shorthand for building a ``SqlQuerySpec``.

    Example:
        >>> spec = q("SELECT * FROM c WHERE c.v0 = @v0", P(name="@v0", value="alice"))
    """
    return SqlQuerySpec(query=query, parameters=list(parameters))


P = QueryParameter

"""
Policy adapter interface defined as a Protocol.

This is the storage contract the Casbin enforcer drives: full load and
save, filtered load, and incremental add/remove. It mirrors
``casbin.persist.Adapter``, ``casbin.persist.adapter_filtered.FilteredAdapter`` and
``casbin.persist.batch_adapter.BatchAdapter`` so implementations can be validated with
``isinstance`` at runtime.

Architectural Notes:

- Operations are synchronous and blocking; the enforcer calls them
  directly
- Storage failures surface as ``StoreError``, never as SDK exceptions
- A filtered load leaves the adapter in a state where ``save_policy``
  refuses to run until a full ``load_policy`` happens
"""

from typing import Any, List, Protocol, Sequence, runtime_checkable

from casbin.model import Model

from cosmos_casbin.domain import CasbinRule


@runtime_checkable
class PolicyAdapter(Protocol):
    """Handles policy storage for a Casbin enforcer."""

    def load_policy(self, model: Model) -> List[CasbinRule]:
        """Load every stored rule into ``model`` and return the stored records.

        Clears the filtered flag.

        Raises:
            StoreError: If the query or document parsing fails
        """
        ...

    def load_filtered_policy(self, model: Model, filter: Any) -> List[CasbinRule]:
        """Load the rules selected by ``filter`` into ``model``.

        Args:
            model: Casbin model receiving the rules
            filter: ``SqlQuerySpec`` or a dict with ``query`` and
                ``parameters``

        Raises:
            StoreError: If the query fails
        """
        ...

    def is_filtered(self) -> bool:
        """Return True if the last load was a filtered load."""
        ...

    def save_policy(self, model: Model) -> bool:
        """Replace the stored policy with the ``p`` and ``g`` rules of ``model``.

        Implementation Notes:
        - Not atomic: a failure part way leaves the store partially written,
          and the whole save must be retried

        Raises:
            FilteredStateError: If the current view is filtered
            StoreError: If any store call fails
        """
        ...

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Store a single rule."""
        ...

    def add_policies(
        self, sec: str, ptype: str, rules: Sequence[Sequence[str]]
    ) -> bool:
        """Store several rules, stopping at the first failure."""
        ...

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Delete a single rule by its content-addressed id."""
        ...

    def remove_policies(
        self, sec: str, ptype: str, rules: Sequence[Sequence[str]]
    ) -> bool:
        """Delete several rules, stopping at the first failure."""
        ...

    def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *field_values: str
    ) -> bool:
        """Delete every rule of ``ptype`` matching the non-empty field values.

        ``field_values[i]`` constrains field ``field_index + i``; empty
        values match anything.
        """
        ...


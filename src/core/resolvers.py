"""Entity resolution helpers for forecast items.

Pure functions that resolve user-friendly references (id, or partial
case-insensitive name) to items of the current snapshot. No I/O.
"""

from __future__ import annotations

from src.models.schemas import ExpenditureItem


class ResolverError(Exception):
    """Raised when an entity cannot be resolved by name."""

    def __init__(
        self,
        entity_type: str,
        query: str,
        available: list[str] | None = None,
    ):
        self.entity_type = entity_type
        self.query = query
        self.available = available or []
        detail = f"No {entity_type} found matching '{query}'."
        if self.available:
            detail += f" Available: {', '.join(self.available)}"
        super().__init__(detail)


def resolve_item(
    items: list[ExpenditureItem],
    query: str,
) -> ExpenditureItem:
    """Find an item by exact id, then by name (partial, case-insensitive).

    Names are matched in sequence order, so the first matching row wins.
    Raises :class:`ResolverError` if nothing matches.
    """
    q = query.strip()
    if q:
        for item in items:
            if item.id == q:
                return item
        for item in items:
            if q.lower() in item.name.lower():
                return item
    raise ResolverError(
        "item",
        query,
        available=[item.name for item in items[:20]],
    )

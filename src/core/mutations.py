"""Edits to a BudgetInputs snapshot.

Each function takes the current snapshot and returns a new one; inputs are
never mutated in place. No I/O.
"""

import uuid

from src.models.schemas import (
    BaseField,
    BudgetInputs,
    CostBucket,
    CostBuckets,
    ExpenditureItem,
    ItemizedForecast,
)


class BudgetEditError(Exception):
    """Raised when an edit does not apply to the current inputs."""


def new_item_id() -> str:
    """Fresh opaque item id. Ids are never reused, even after deletion."""
    return uuid.uuid4().hex


def _itemized(inputs: BudgetInputs) -> ItemizedForecast:
    if not isinstance(inputs.forecast, ItemizedForecast):
        raise BudgetEditError(
            "This budget uses the fixed cost breakdown. "
            "Use the cost bucket editor instead of individual items."
        )
    return inputs.forecast


def _buckets(inputs: BudgetInputs) -> CostBuckets:
    if not isinstance(inputs.forecast, CostBuckets):
        raise BudgetEditError(
            "This budget uses an itemized forecast. Add or remove items instead."
        )
    return inputs.forecast


def _with_items(inputs: BudgetInputs, items: list[ExpenditureItem]) -> BudgetInputs:
    forecast = _itemized(inputs).model_copy(update={"items": items})
    return inputs.model_copy(update={"forecast": forecast})


# --- Base Figures ---


def update_base_field(
    inputs: BudgetInputs,
    key: BaseField | str,
    value: float,
) -> BudgetInputs:
    """Set ``total_income`` or ``actual_expenditure``."""
    try:
        field = BaseField(key)
    except ValueError:
        raise BudgetEditError(
            f"Unknown field '{key}'. Expected one of: "
            + ", ".join(f.value for f in BaseField)
        ) from None
    return inputs.model_copy(update={field.value: value})


def set_target_percentage(inputs: BudgetInputs, value: float | None) -> BudgetInputs:
    """Set (or clear, with ``None``) the target spending ratio."""
    return inputs.model_copy(update={"target_percentage": value})


# --- Itemized Forecast ---


def append_item(
    inputs: BudgetInputs,
    name: str,
    amount: float,
    remark: str = "",
    item_id: str | None = None,
) -> BudgetInputs:
    """Append a forecast item at the end of the sequence.

    An empty name is a no-op: the same snapshot is returned.
    """
    items = _itemized(inputs).items
    if not name or not name.strip():
        return inputs
    item = ExpenditureItem(
        id=item_id or new_item_id(),
        name=name.strip(),
        amount=amount,
        remark=remark or "",
    )
    return _with_items(inputs, [*items, item])


def remove_item(inputs: BudgetInputs, item_id: str) -> BudgetInputs:
    """Remove the item with *item_id*. Unknown ids leave the items unchanged."""
    items = _itemized(inputs).items
    return _with_items(inputs, [item for item in items if item.id != item_id])


def reorder_item(inputs: BudgetInputs, from_index: int, to_index: int) -> BudgetInputs:
    """Move the item at *from_index* so it ends up at *to_index*.

    A splice on the sequence, not a sort: every other item keeps its relative
    order.
    """
    items = list(_itemized(inputs).items)
    n = len(items)
    if not 0 <= from_index < n or not 0 <= to_index < n:
        raise BudgetEditError(
            f"Position out of range: {from_index} -> {to_index} "
            f"(valid positions are 0 to {n - 1})."
            if n
            else "There are no items to reorder."
        )
    item = items.pop(from_index)
    items.insert(to_index, item)
    return _with_items(inputs, items)


# --- Fixed Cost Breakdown ---


def update_cost_bucket(
    inputs: BudgetInputs,
    bucket: CostBucket | str,
    amount: float | None = None,
    remark: str | None = None,
) -> BudgetInputs:
    """Change the amount and/or remark of one cost bucket."""
    buckets = _buckets(inputs)
    try:
        bucket = CostBucket(bucket)
    except ValueError:
        raise BudgetEditError(
            f"Unknown cost bucket '{bucket}'. Expected one of: "
            + ", ".join(b.value for b in CostBucket)
        ) from None

    updates: dict[str, object] = {}
    if amount is not None:
        updates[f"{bucket.value}_costs"] = amount
    if remark is not None:
        updates["remarks"] = buckets.remarks.model_copy(update={bucket.value: remark})
    if not updates:
        return inputs
    return inputs.model_copy(update={"forecast": buckets.model_copy(update=updates)})

"""In-memory budget session.

Holds the current BudgetInputs snapshot for the lifetime of the server.
Edits replace the snapshot; metrics are recomputed on every read and never
cached.
"""

from typing import Callable, Optional

from src.core.metrics import build_chart_series, build_report_rows, compute_budget_metrics
from src.core.mutations import new_item_id
from src.models.results import BudgetMetrics, ChartSeries, ReportRow
from src.models.schemas import (
    BudgetInputs,
    BudgetVariant,
    CostBuckets,
    ExpenditureItem,
    ItemizedForecast,
)

DEFAULT_TARGET_PERCENTAGE = 65.0


def default_inputs(
    variant: BudgetVariant | str = BudgetVariant.ITEMIZED,
    target_percentage: Optional[float] = None,
) -> BudgetInputs:
    """Seed scenario shown when the dashboard opens."""
    variant = BudgetVariant(variant)
    if variant == BudgetVariant.BUCKETS:
        return BudgetInputs(
            total_income=1_000_000,
            actual_expenditure=350_000,
            forecast=CostBuckets(),
            target_percentage=target_percentage,
        )

    return BudgetInputs(
        total_income=1_000_000,
        actual_expenditure=350_000,
        forecast=ItemizedForecast(items=[
            ExpenditureItem(
                id=new_item_id(), name="Personnel costs", amount=150_000,
                remark="Includes quarterly bonus reserve",
            ),
            ExpenditureItem(
                id=new_item_id(), name="Office equipment", amount=50_000,
                remark="Server upgrade and laptop replacement",
            ),
            ExpenditureItem(
                id=new_item_id(), name="Marketing", amount=80_000,
                remark="Google Ads and offline events",
            ),
        ]),
        target_percentage=(
            DEFAULT_TARGET_PERCENTAGE if target_percentage is None else target_percentage
        ),
    )


class BudgetSession:
    """Current inputs plus on-demand derived views."""

    def __init__(self, inputs: Optional[BudgetInputs] = None):
        self._inputs = inputs if inputs is not None else BudgetInputs()

    @classmethod
    def from_variant(
        cls,
        variant: BudgetVariant | str = BudgetVariant.ITEMIZED,
        target_percentage: Optional[float] = None,
    ) -> "BudgetSession":
        return cls(default_inputs(variant, target_percentage))

    @property
    def inputs(self) -> BudgetInputs:
        return self._inputs

    def apply(self, edit: Callable[..., BudgetInputs], *args, **kwargs) -> bool:
        """Replace the snapshot with ``edit(inputs, *args, **kwargs)``.

        Returns ``False`` when the edit was a no-op (same snapshot returned).
        """
        updated = edit(self._inputs, *args, **kwargs)
        changed = updated is not self._inputs
        self._inputs = updated
        return changed

    @property
    def metrics(self) -> BudgetMetrics:
        return compute_budget_metrics(self._inputs)

    def report_rows(self) -> list[ReportRow]:
        inputs = self._inputs
        return build_report_rows(inputs, compute_budget_metrics(inputs))

    def chart_series(self) -> ChartSeries:
        inputs = self._inputs
        return build_chart_series(inputs, compute_budget_metrics(inputs))

"""Pure budget calculations.

All functions take a BudgetInputs snapshot (and metrics derived from it) and
return result dataclasses. No I/O; recomputed on every read.
"""

import math

from src.models.results import BudgetMetrics, ChartPoint, ChartSeries, ReportRow
from src.models.schemas import BudgetInputs


# --- Derived Metrics ---


def _percent_of(amount: float, income: float) -> float:
    if not income:
        return 0.0
    return (amount / income) * 100


def compute_budget_metrics(
    inputs: BudgetInputs,
    target_percentage: float | None = None,
) -> BudgetMetrics:
    """Derive totals, percentages and the target gap from raw inputs.

    *target_percentage* overrides ``inputs.target_percentage`` when given.
    Percentages of a zero income are reported as 0% rather than dividing
    by zero.
    """
    income = inputs.total_income
    actual = inputs.actual_expenditure
    if target_percentage is None:
        target_percentage = inputs.target_percentage

    future_total = inputs.forecast.total_forecast()
    projected_total = actual + future_total

    target_budget = None
    amount_to_reach_target = None
    if target_percentage is not None:
        target_budget = (income * target_percentage) / 100
        gap = target_budget - projected_total
        # NaN must survive the clamp
        amount_to_reach_target = gap if gap > 0 or math.isnan(gap) else 0.0

    return BudgetMetrics(
        total_estimated_future=future_total,
        total_projected_expenditure=projected_total,
        current_spent_percentage=_percent_of(actual, income),
        projected_total_percentage=_percent_of(projected_total, income),
        remaining_budget=income - projected_total,
        is_over_budget=projected_total > income,
        target_budget=target_budget,
        amount_to_reach_target=amount_to_reach_target,
    )


# --- Report Rows ---


def build_report_rows(
    inputs: BudgetInputs,
    metrics: BudgetMetrics,
    target_percentage: float | None = None,
) -> list[ReportRow]:
    """Rows of the detailed breakdown table, in display and export order.

    Baseline rows first, then one row per forecast line in sequence order,
    then the target rows (only when a target is set) and the grand total.
    """
    if target_percentage is None:
        target_percentage = inputs.target_percentage

    rows = [
        ReportRow("Total income (baseline)", inputs.total_income, "Main wallet / annual budget"),
        ReportRow("Actual expenditure", inputs.actual_expenditure, "Reconciled receipts"),
    ]

    for line in inputs.forecast.line_items():
        rows.append(ReportRow(f"Forecast: {line.label}", line.amount, line.remark))

    if metrics.target_budget is not None and target_percentage is not None:
        pct = f"{target_percentage:g}"
        rows.append(ReportRow(
            f"Target expenditure ({pct}%)",
            metrics.target_budget,
            f"Calculated: total income x {pct}%",
            metrics.target_budget,
        ))
        rows.append(ReportRow(
            "Gap to target",
            None,
            "Remaining room before the target is reached",
            metrics.amount_to_reach_target,
        ))

    status = "Over budget" if metrics.is_over_budget else "Within budget"
    rows.append(ReportRow(
        "Projected total expenditure",
        metrics.total_projected_expenditure,
        f"{status} ({metrics.projected_total_percentage:.1f}% of income)",
    ))
    return rows


# --- Chart Series ---


def build_chart_series(inputs: BudgetInputs, metrics: BudgetMetrics) -> ChartSeries:
    """Spent / forecast / remaining comparison plus per-line breakdown."""
    comparison = [
        ChartPoint("Actual spent", inputs.actual_expenditure),
        ChartPoint("Forecast items", metrics.total_estimated_future),
        ChartPoint("Remaining room", max(0.0, metrics.remaining_budget)),
    ]
    breakdown = [ChartPoint(line.label, line.amount) for line in inputs.forecast.line_items()]
    return ChartSeries(comparison=comparison, breakdown=breakdown)

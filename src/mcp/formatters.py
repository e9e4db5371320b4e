"""Markdown formatters for MCP tool responses.

Pure functions that take budget objects and return human-readable Markdown strings.
"""

from __future__ import annotations

from src.models.results import BudgetMetrics, ChartSeries, ReportRow
from src.models.schemas import (
    BUCKET_LABELS,
    BudgetInputs,
    CostBucket,
    CostBuckets,
    ExpenditureItem,
    InsightReport,
    InsightStatus,
)

DASH = "—"


def _money(value: float | None) -> str:
    if value is None:
        return DASH
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_key_figures(metrics: BudgetMetrics) -> str:
    """The three headline cards: spent %, projected %, remaining budget."""
    status = "!!" if metrics.is_over_budget else "OK"
    lines = [
        f"## [{status}] Key Figures\n",
        f"- **Current spent:** {metrics.current_spent_percentage:.1f}% of income",
        f"- **Projected total:** {metrics.projected_total_percentage:.1f}% of income",
        f"- **Remaining budget:** {_money(metrics.remaining_budget)}",
        f"- **Forecast items total:** {_money(metrics.total_estimated_future)}",
        f"- **Projected expenditure:** {_money(metrics.total_projected_expenditure)}",
    ]
    if metrics.target_budget is not None:
        lines.append(f"- **Target budget:** {_money(metrics.target_budget)}")
        lines.append(f"- **Room to target:** {_money(metrics.amount_to_reach_target)}")
    verdict = "Over budget" if metrics.is_over_budget else "Within budget"
    lines.append(f"\n**Status:** {verdict}")
    return "\n".join(lines)


def format_budget_report(rows: list[ReportRow], metrics: BudgetMetrics) -> str:
    """Detailed breakdown table followed by the key figures."""
    lines = [
        "## Budget Report\n",
        "| Item | Amount | Remark | Gap to Target |",
        "|---|---:|---|---:|",
    ]
    for r in rows:
        lines.append(
            f"| {r.label} | {_money(r.amount)} | {r.remark or DASH} | {_money(r.target_gap)} |"
        )
    lines.append("")
    lines.append(format_key_figures(metrics))
    return "\n".join(lines)


def format_items(inputs: BudgetInputs) -> str:
    """Forecast lines with their position (itemized) or bucket key (fixed)."""
    forecast = inputs.forecast
    if isinstance(forecast, CostBuckets):
        lines = ["## Cost Breakdown\n"]
        for bucket, label in BUCKET_LABELS.items():
            remark = getattr(forecast.remarks, bucket.value)
            line = f"- **{label}** (`{bucket.value}`): {_money(forecast.amount_for(bucket))}"
            if remark:
                line += f" _{remark}_"
            lines.append(line)
        return "\n".join(lines)

    if not forecast.items:
        return "No forecast items."

    lines = [f"## Forecast Items ({len(forecast.items)})\n"]
    for i, item in enumerate(forecast.items):
        lines.append(f"{i}. **{item.name}**: {_money(item.amount)} (ID: `{item.id}`)")
        if item.remark:
            lines.append(f"   _{item.remark}_")
    return "\n".join(lines)


def format_chart_series(series: ChartSeries) -> str:
    lines = ["## Spending Comparison\n"]
    for p in series.comparison:
        lines.append(f"- {p.name}: {_money(p.value)}")

    lines.append("\n## Forecast Breakdown\n")
    total = sum(p.value for p in series.breakdown)
    if not series.breakdown:
        lines.append("No forecast expenditures.")
    for p in series.breakdown:
        share = (p.value / total * 100) if total else 0.0
        lines.append(f"- {p.name}: {_money(p.value)} ({share:.1f}%)")
    return "\n".join(lines)


def format_item_added(item: ExpenditureItem, metrics: BudgetMetrics) -> str:
    lines = [
        "Forecast item added!\n",
        f"- **Name:** {item.name}",
        f"- **Amount:** {_money(item.amount)}",
    ]
    if item.remark:
        lines.append(f"- **Remark:** {item.remark}")
    lines.append(f"\nProjected total is now {_money(metrics.total_projected_expenditure)} "
                 f"({metrics.projected_total_percentage:.1f}% of income).")
    return "\n".join(lines)


def format_item_removed(item: ExpenditureItem, metrics: BudgetMetrics) -> str:
    return (
        f"Removed **{item.name}** ({_money(item.amount)}).\n\n"
        f"Projected total is now {_money(metrics.total_projected_expenditure)} "
        f"({metrics.projected_total_percentage:.1f}% of income)."
    )


def format_bucket_updated(bucket: CostBucket, inputs: BudgetInputs) -> str:
    forecast = inputs.forecast
    label = BUCKET_LABELS[bucket]
    if not isinstance(forecast, CostBuckets):
        return f"Updated **{label}**."
    remark = getattr(forecast.remarks, bucket.value)
    line = f"Updated **{label}**: {_money(forecast.amount_for(bucket))}"
    if remark:
        line += f" _{remark}_"
    return line


def format_insight(report: InsightReport) -> str:
    """Advisory assessment with a status badge."""
    badge = {
        InsightStatus.HEALTHY: "OK",
        InsightStatus.WARNING: "!",
        InsightStatus.CRITICAL: "!!",
    }[report.status]
    lines = [
        f"## [{badge}] Financial Assessment: {report.status.value}\n",
        report.analysis,
    ]
    if report.recommendations:
        lines.append("\n### Recommendations")
        for rec in report.recommendations:
            lines.append(f"- {rec}")
    lines.append("\n_Advisory only. Figures above are not affected._")
    return "\n".join(lines)

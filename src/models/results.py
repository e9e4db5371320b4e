"""Result dataclasses for budget calculations.

These are internal types consumed by formatters and exporters: lightweight
dataclasses rather than Pydantic models since they are derived, never parsed.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ForecastLine:
    """One forecast expenditure as shown in reports and prompts."""
    label: str
    amount: float   # dollars
    remark: str = ""


@dataclass(frozen=True)
class BudgetMetrics:
    """Figures derived from a BudgetInputs snapshot."""
    total_estimated_future: float       # dollars, sum of forecast lines
    total_projected_expenditure: float  # dollars, actual + forecast
    current_spent_percentage: float     # e.g. 35.0 means 35% of income
    projected_total_percentage: float
    remaining_budget: float             # dollars (negative = over budget)
    is_over_budget: bool
    target_budget: float | None = None          # only with a target percentage
    amount_to_reach_target: float | None = None  # floored at 0


@dataclass
class ReportRow:
    """A row of the detailed report. ``None`` renders as a dash."""
    label: str
    amount: float | None
    remark: str = ""
    target_gap: float | None = None


@dataclass
class ChartPoint:
    name: str
    value: float


@dataclass
class ChartSeries:
    """Data for the comparison bar chart and the forecast breakdown pie."""
    comparison: list[ChartPoint] = field(default_factory=list)
    breakdown: list[ChartPoint] = field(default_factory=list)

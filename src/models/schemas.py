"""Pydantic models for budget inputs and advisory reports."""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.models.results import ForecastLine


# --- Enums ---

class BudgetVariant(str, Enum):
    ITEMIZED = "itemized"
    BUCKETS = "buckets"


class BaseField(str, Enum):
    TOTAL_INCOME = "total_income"
    ACTUAL_EXPENDITURE = "actual_expenditure"


class CostBucket(str, Enum):
    PERSONNEL = "personnel"
    OFFICE = "office"
    BUSINESS = "business"
    MAINTENANCE = "maintenance"
    PROCUREMENT = "procurement"
    OTHER = "other"


class InsightStatus(str, Enum):
    HEALTHY = "Healthy"
    WARNING = "Warning"
    CRITICAL = "Critical"


# Display order of the fixed cost breakdown
BUCKET_LABELS: dict[CostBucket, str] = {
    CostBucket.PERSONNEL: "Personnel costs",
    CostBucket.OFFICE: "Office costs",
    CostBucket.BUSINESS: "Business costs",
    CostBucket.MAINTENANCE: "Maintenance costs",
    CostBucket.PROCUREMENT: "Procurement costs",
    CostBucket.OTHER: "Other costs",
}


# --- Forecast Sources ---

class ExpenditureItem(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    name: str
    amount: float
    remark: str = ""


class ItemizedForecast(BaseModel):
    """Free-form, user-ordered list of forecast expenditures."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    kind: Literal["itemized"] = "itemized"
    items: list[ExpenditureItem] = []

    def total_forecast(self) -> float:
        return sum((item.amount for item in self.items), 0.0)

    def line_items(self) -> list[ForecastLine]:
        return [ForecastLine(item.name, item.amount, item.remark) for item in self.items]


class BucketRemarks(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    personnel: str = ""
    office: str = ""
    business: str = ""
    maintenance: str = ""
    procurement: str = ""
    other: str = ""


class CostBuckets(BaseModel):
    """Fixed six-category cost breakdown, each bucket with its own remark."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    kind: Literal["buckets"] = "buckets"
    personnel_costs: float = 0.0
    office_costs: float = 0.0
    business_costs: float = 0.0
    maintenance_costs: float = 0.0
    procurement_costs: float = 0.0
    other_costs: float = 0.0
    remarks: BucketRemarks = BucketRemarks()

    def amount_for(self, bucket: CostBucket) -> float:
        return getattr(self, f"{bucket.value}_costs")

    def total_forecast(self) -> float:
        return sum((self.amount_for(b) for b in BUCKET_LABELS), 0.0)

    def line_items(self) -> list[ForecastLine]:
        return [
            ForecastLine(label, self.amount_for(bucket), getattr(self.remarks, bucket.value))
            for bucket, label in BUCKET_LABELS.items()
        ]


ForecastSource = Union[ItemizedForecast, CostBuckets]


class BudgetInputs(BaseModel):
    """Raw user inputs. Edits produce a new snapshot via ``model_copy``."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    total_income: float = 0.0
    actual_expenditure: float = 0.0
    forecast: ForecastSource = Field(
        default_factory=ItemizedForecast, discriminator="kind"
    )
    target_percentage: Optional[float] = None

    @property
    def variant(self) -> BudgetVariant:
        return BudgetVariant(self.forecast.kind)

    @property
    def estimated_items(self) -> list[ExpenditureItem]:
        """Items of the itemized variant; empty for the bucket variant."""
        if isinstance(self.forecast, ItemizedForecast):
            return list(self.forecast.items)
        return []


# --- Advisory Insight ---

class InsightReport(BaseModel):
    """Structured reply expected from the generative insight service."""
    model_config = ConfigDict(extra="ignore")

    analysis: str
    recommendations: list[str]
    status: InsightStatus


# --- MCP Tool Input Models ---


class UpdateBaseInput(BaseModel):
    """Input for changing income or actual expenditure."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    field: BaseField = Field(
        ..., description="Which figure to change: 'total_income' or 'actual_expenditure'"
    )
    value: float = Field(..., description="New dollar amount")


class AddItemInput(BaseModel):
    """Input for appending a forecast expenditure item."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str = Field(default="", description="Item name (e.g. 'Office equipment')", max_length=200)
    amount: float = Field(default=0.0, description="Forecast dollar amount")
    remark: str = Field(default="", description="Optional note about the item", max_length=500)


class RemoveItemInput(BaseModel):
    """Input for removing a forecast item."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    item: str = Field(..., description="Item id, or name (partial match)")


class ReorderItemInput(BaseModel):
    """Input for moving a forecast item to a new position."""
    model_config = ConfigDict(extra="forbid")

    from_index: int = Field(..., description="Current position (0-based)", ge=0)
    to_index: int = Field(..., description="New position (0-based)", ge=0)


class SetTargetInput(BaseModel):
    """Input for setting the target spending ratio."""
    model_config = ConfigDict(extra="forbid")

    value: Optional[float] = Field(
        None, description="Target share of income in percent (e.g. 65). Omit to clear."
    )


class UpdateCostBucketInput(BaseModel):
    """Input for editing one bucket of the fixed cost breakdown."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    bucket: CostBucket = Field(
        ...,
        description="One of: personnel, office, business, maintenance, procurement, other",
    )
    amount: Optional[float] = Field(None, description="New dollar amount")
    remark: Optional[str] = Field(None, description="New remark", max_length=500)


class ExportReportInput(BaseModel):
    """Input for exporting the budget report as CSV."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    path: Optional[str] = Field(
        None, description="File path to write. If omitted, the CSV text is returned."
    )

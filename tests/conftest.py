"""Shared test fixtures for budget assessor tests."""

from src.models.schemas import (
    BucketRemarks,
    BudgetInputs,
    CostBuckets,
    ExpenditureItem,
    ItemizedForecast,
)


def make_item(
    name: str = "Office equipment",
    amount: float = 50_000,
    remark: str = "",
    id_: str | None = None,
) -> ExpenditureItem:
    return ExpenditureItem(
        id=id_ or f"item-{name.lower().replace(' ', '-')}",
        name=name,
        amount=amount,
        remark=remark,
    )


def make_inputs(
    total_income: float = 1_000_000,
    actual_expenditure: float = 350_000,
    items: list[ExpenditureItem] | None = None,
    target_percentage: float | None = 65,
) -> BudgetInputs:
    return BudgetInputs(
        total_income=total_income,
        actual_expenditure=actual_expenditure,
        forecast=ItemizedForecast(items=items or []),
        target_percentage=target_percentage,
    )


def make_scenario_items() -> list[ExpenditureItem]:
    """The three forecast items of the seeded dashboard."""
    return [
        make_item("Personnel costs", 150_000, "Includes quarterly bonus reserve"),
        make_item("Office equipment", 50_000, "Server upgrade and laptop replacement"),
        make_item("Marketing", 80_000, "Google Ads and offline events"),
    ]


def make_bucket_inputs(
    total_income: float = 1_000_000,
    actual_expenditure: float = 350_000,
    personnel: float = 0,
    office: float = 0,
    business: float = 0,
    maintenance: float = 0,
    procurement: float = 0,
    other: float = 0,
    remarks: dict[str, str] | None = None,
    target_percentage: float | None = None,
) -> BudgetInputs:
    return BudgetInputs(
        total_income=total_income,
        actual_expenditure=actual_expenditure,
        forecast=CostBuckets(
            personnel_costs=personnel,
            office_costs=office,
            business_costs=business,
            maintenance_costs=maintenance,
            procurement_costs=procurement,
            other_costs=other,
            remarks=BucketRemarks(**(remarks or {})),
        ),
        target_percentage=target_percentage,
    )

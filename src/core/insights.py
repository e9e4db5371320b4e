"""Advisory financial assessment from Gemini.

The reply is advisory text only: it is rendered next to the report and never
written back into inputs or metrics. Any failure degrades to a fixed
fallback report.
"""

from __future__ import annotations

import json
import logging

from src.core.gemini_client import GeminiClient
from src.models.results import BudgetMetrics
from src.models.schemas import BudgetInputs, InsightReport, InsightStatus

logger = logging.getLogger("budget_insights")

INSIGHT_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "analysis": {
            "type": "STRING",
            "description": "A professional and detailed analysis of the budget situation.",
        },
        "recommendations": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Specific, actionable steps to improve financial health.",
        },
        "status": {
            "type": "STRING",
            "enum": [s.value for s in InsightStatus],
            "description": "Overall health status: Healthy, Warning, or Critical.",
        },
    },
    "required": ["analysis", "recommendations", "status"],
}

FALLBACK_INSIGHT = InsightReport(
    analysis=(
        "A live financial analysis is not available right now. Please review "
        "the budget figures manually and make sure every expenditure is listed."
    ),
    recommendations=[
        "Review the share of each expenditure regularly so no single item overruns.",
        "Keep at least 10-15% of income as a contingency reserve.",
        "Check whether each forecast item is necessary and prioritise core business spending.",
    ],
    status=InsightStatus.WARNING,
)


def build_insight_prompt(inputs: BudgetInputs, metrics: BudgetMetrics) -> str:
    """Render the snapshot as a prompt for the auditor persona."""
    lines = inputs.forecast.line_items()
    if lines:
        summary = "\n".join(
            f"- {line.label}: ${line.amount:,.2f}"
            + (f" ({line.remark})" if line.remark else "")
            for line in lines
        )
    else:
        summary = "No estimated expenditure items"

    target = ""
    if metrics.target_budget is not None:
        target = (
            f"\nTarget Spending: ${metrics.target_budget:,.2f} "
            f"(room left before target: ${metrics.amount_to_reach_target:,.2f})"
        )

    return (
        "As a senior financial auditor, analyze the following budget data "
        "for a professional accounting system:\n\n"
        f"Income: ${inputs.total_income:,.2f}\n"
        f"Already Spent: ${inputs.actual_expenditure:,.2f} "
        f"({metrics.current_spent_percentage:.2f}%)\n\n"
        f"Future Estimated Expenditures:\n{summary}\n\n"
        f"Projected Total Spending: ${metrics.total_projected_expenditure:,.2f} "
        f"({metrics.projected_total_percentage:.2f}% of income)\n"
        f"Remaining Balance: ${metrics.remaining_budget:,.2f}"
        f"{target}\n\n"
        "Provide a professional assessment including:\n"
        "1. A detailed analysis of the spending patterns.\n"
        "2. Specific recommendations to optimize the budget.\n"
        "3. A risk status (Healthy, Warning, or Critical).\n"
    )


async def request_insight(
    client: GeminiClient,
    inputs: BudgetInputs,
    metrics: BudgetMetrics,
) -> InsightReport:
    """Ask Gemini for an assessment. Raises on any failure."""
    prompt = build_insight_prompt(inputs, metrics)
    text = await client.generate_json(prompt, INSIGHT_RESPONSE_SCHEMA)
    return InsightReport.model_validate(json.loads(text))


async def get_financial_insights(
    client: GeminiClient | None,
    inputs: BudgetInputs,
    metrics: BudgetMetrics,
) -> InsightReport:
    """Assessment for the snapshot, or :data:`FALLBACK_INSIGHT` on failure.

    Never raises: a missing client (no API key), network errors, API errors,
    and malformed replies all produce the fallback report.
    """
    if client is None:
        logger.info("GEMINI_API_KEY not configured; using fallback insight")
        return FALLBACK_INSIGHT.model_copy(deep=True)

    try:
        return await request_insight(client, inputs, metrics)
    except Exception as e:
        logger.warning("AI insight error: %s: %s", type(e).__name__, e)
        return FALLBACK_INSIGHT.model_copy(deep=True)

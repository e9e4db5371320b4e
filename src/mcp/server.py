"""Budget Assessor MCP Server.

Exposes the budget dashboard as MCP tools: edit income, spending and
forecast items, read the derived report and chart data, export CSV, and ask
Gemini for an advisory assessment.
"""

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

# Ensure project root is on sys.path so `src` is importable when loaded
# directly by tools like `mcp dev` (which use importlib, not `python -m`).
_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

load_dotenv()

from src.core.export import export_report_csv
from src.core.gemini_client import DEFAULT_MODEL, GeminiClient
from src.core.insights import get_financial_insights
from src.core.mutations import (
    append_item,
    new_item_id,
    remove_item,
    reorder_item,
    set_target_percentage,
    update_base_field,
    update_cost_bucket,
)
from src.core.resolvers import resolve_item
from src.core.session import BudgetSession
from src.mcp.error_handling import handle_tool_errors
from src.mcp.formatters import (
    format_bucket_updated,
    format_budget_report,
    format_chart_series,
    format_insight,
    format_item_added,
    format_item_removed,
    format_items,
    format_key_figures,
)
from src.models.schemas import (
    AddItemInput,
    ExportReportInput,
    RemoveItemInput,
    ReorderItemInput,
    SetTargetInput,
    UpdateBaseInput,
    UpdateCostBucketInput,
)


# --- Lifespan: initialize shared resources ---


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    variant = os.environ.get("BUDGET_VARIANT", "itemized").strip().lower()
    raw_target = os.environ.get("BUDGET_TARGET_PERCENTAGE", "").strip()
    target = float(raw_target) if raw_target else None
    session = BudgetSession.from_variant(variant, target_percentage=target)

    # The advisory tool degrades to a fallback report without a key.
    api_key = os.environ.get("GEMINI_API_KEY", "")
    model = os.environ.get("GEMINI_MODEL", DEFAULT_MODEL)
    gemini = GeminiClient(api_key=api_key, model=model) if api_key else None

    yield {"session": session, "gemini": gemini}

    if gemini is not None:
        await gemini.close()


mcp = FastMCP("budget_mcp", lifespan=app_lifespan)


# --- Helper to get state from context ---


def _get_deps(ctx) -> tuple[BudgetSession, GeminiClient | None]:
    state = ctx.request_context.lifespan_context
    return state["session"], state["gemini"]


# --- Read-Only Tools ---


@mcp.tool(
    name="budget_get_report",
    annotations={
        "title": "Budget Report",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_get_report(ctx: Context) -> str:
    """Show the detailed income / spending / forecast table with target rows and totals."""
    session, _ = _get_deps(ctx)
    return format_budget_report(session.report_rows(), session.metrics)


@mcp.tool(
    name="budget_get_metrics",
    annotations={
        "title": "Key Budget Figures",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_get_metrics(ctx: Context) -> str:
    """Show spent and projected percentages, remaining budget, and room to target."""
    session, _ = _get_deps(ctx)
    return format_key_figures(session.metrics)


@mcp.tool(
    name="budget_list_items",
    annotations={
        "title": "List Forecast Items",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_list_items(ctx: Context) -> str:
    """List forecast expenditure items in order, with ids and positions."""
    session, _ = _get_deps(ctx)
    return format_items(session.inputs)


@mcp.tool(
    name="budget_get_chart_data",
    annotations={
        "title": "Chart Data",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_get_chart_data(ctx: Context) -> str:
    """Show the spent / forecast / remaining comparison and the forecast breakdown."""
    session, _ = _get_deps(ctx)
    return format_chart_series(session.chart_series())


@mcp.tool(
    name="budget_export_csv",
    annotations={
        "title": "Export Report as CSV",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_export_csv(params: ExportReportInput, ctx: Context) -> str:
    """Export the report rows (label, amount, remark, gap to target) as CSV."""
    session, _ = _get_deps(ctx)
    rows = session.report_rows()
    if params.path:
        path = Path(params.path).expanduser()
        export_report_csv(rows, path)
        return f"Exported {len(rows)} rows to `{path}`."
    return f"```csv\n{export_report_csv(rows)}```"


@mcp.tool(
    name="budget_get_insights",
    annotations={
        "title": "AI Financial Assessment",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def budget_get_insights(ctx: Context) -> str:
    """Ask Gemini for an advisory assessment of the current budget."""
    session, gemini = _get_deps(ctx)
    # Snapshot before awaiting so later edits cannot mix into the prompt.
    inputs, metrics = session.inputs, session.metrics
    report = await get_financial_insights(gemini, inputs, metrics)
    return format_insight(report)


# --- Write Tools ---


@mcp.tool(
    name="budget_update_base",
    annotations={
        "title": "Update Income or Actual Spending",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_update_base(params: UpdateBaseInput, ctx: Context) -> str:
    """Set total income or actual expenditure."""
    session, _ = _get_deps(ctx)
    session.apply(update_base_field, params.field, params.value)
    label = params.field.value.replace("_", " ").capitalize()
    return f"{label} set to ${params.value:,.2f}.\n\n" + format_key_figures(session.metrics)


@mcp.tool(
    name="budget_set_target",
    annotations={
        "title": "Set Target Spending Ratio",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_set_target(params: SetTargetInput, ctx: Context) -> str:
    """Set the target share of income (percent) used for the gap-to-target figure."""
    session, _ = _get_deps(ctx)
    session.apply(set_target_percentage, params.value)
    if params.value is None:
        header = "Target cleared."
    else:
        header = f"Target set to {params.value:g}% of income."
    return header + "\n\n" + format_key_figures(session.metrics)


@mcp.tool(
    name="budget_add_item",
    annotations={
        "title": "Add Forecast Item",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_add_item(params: AddItemInput, ctx: Context) -> str:
    """Append a forecast expenditure item (name, amount, optional remark)."""
    session, _ = _get_deps(ctx)
    item_id = new_item_id()
    added = session.apply(
        append_item, params.name, params.amount, params.remark, item_id=item_id
    )
    if not added:
        return "Nothing added: an item needs a name."
    item = resolve_item(session.inputs.estimated_items, item_id)
    return format_item_added(item, session.metrics)


@mcp.tool(
    name="budget_remove_item",
    annotations={
        "title": "Remove Forecast Item",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_remove_item(params: RemoveItemInput, ctx: Context) -> str:
    """Remove a forecast item by id or name."""
    session, _ = _get_deps(ctx)
    item = resolve_item(session.inputs.estimated_items, params.item)
    session.apply(remove_item, item.id)
    return format_item_removed(item, session.metrics)


@mcp.tool(
    name="budget_reorder_item",
    annotations={
        "title": "Reorder Forecast Item",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_reorder_item(params: ReorderItemInput, ctx: Context) -> str:
    """Move a forecast item to a new position. Totals are unchanged."""
    session, _ = _get_deps(ctx)
    session.apply(reorder_item, params.from_index, params.to_index)
    return format_items(session.inputs)


@mcp.tool(
    name="budget_update_cost_bucket",
    annotations={
        "title": "Update Cost Bucket",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_update_cost_bucket(params: UpdateCostBucketInput, ctx: Context) -> str:
    """Set the amount and/or remark of one bucket in the fixed cost breakdown."""
    session, _ = _get_deps(ctx)
    session.apply(update_cost_bucket, params.bucket, params.amount, params.remark)
    return format_bucket_updated(params.bucket, session.inputs)


# --- Entry point ---

if __name__ == "__main__":
    mcp.run()

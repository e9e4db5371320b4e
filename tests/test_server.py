"""Tests for MCP tool handlers, driven with an in-memory session."""

from types import SimpleNamespace

import httpx
import pytest

from tests.conftest import make_bucket_inputs, make_inputs, make_scenario_items
from src.core.gemini_client import GeminiClient
from src.core.session import BudgetSession
from src.mcp import server
from src.models.schemas import (
    AddItemInput,
    ExportReportInput,
    RemoveItemInput,
    ReorderItemInput,
    SetTargetInput,
    UpdateBaseInput,
    UpdateCostBucketInput,
)


def _ctx(session: BudgetSession, gemini: GeminiClient | None = None):
    return SimpleNamespace(
        request_context=SimpleNamespace(
            lifespan_context={"session": session, "gemini": gemini},
        ),
    )


@pytest.fixture
def session():
    return BudgetSession(make_inputs(items=make_scenario_items(), target_percentage=65))


class TestReadTools:
    async def test_report(self, session):
        result = await server.budget_get_report(_ctx(session))
        assert "Budget Report" in result
        assert "Target expenditure (65%)" in result
        assert "$20,000.00" in result

    async def test_metrics(self, session):
        result = await server.budget_get_metrics(_ctx(session))
        assert "63.0%" in result

    async def test_list_items(self, session):
        result = await server.budget_list_items(_ctx(session))
        assert "Forecast Items (3)" in result

    async def test_chart_data(self, session):
        result = await server.budget_get_chart_data(_ctx(session))
        assert "Remaining room: $370,000.00" in result


class TestWriteTools:
    async def test_update_base(self, session):
        ctx = _ctx(session)
        result = await server.budget_update_base(
            UpdateBaseInput(field="actual_expenditure", value=800_000), ctx
        )
        assert "Actual expenditure set to $800,000.00" in result
        assert session.metrics.is_over_budget is True

    async def test_set_and_clear_target(self, session):
        ctx = _ctx(session)
        result = await server.budget_set_target(SetTargetInput(value=70), ctx)
        assert "70%" in result
        assert session.metrics.target_budget == 700_000

        result = await server.budget_set_target(SetTargetInput(), ctx)
        assert "Target cleared" in result
        assert session.metrics.amount_to_reach_target is None

    async def test_add_item(self, session):
        result = await server.budget_add_item(
            AddItemInput(name="Travel", amount=20_000, remark="Trip"), _ctx(session)
        )
        assert "Forecast item added!" in result
        assert session.inputs.estimated_items[-1].name == "Travel"
        assert session.metrics.total_estimated_future == 300_000

    async def test_add_item_without_name_is_noop(self, session):
        before = session.inputs
        result = await server.budget_add_item(AddItemInput(name="", amount=5), _ctx(session))
        assert "needs a name" in result
        assert session.inputs is before

    async def test_remove_item_by_name(self, session):
        result = await server.budget_remove_item(RemoveItemInput(item="office"), _ctx(session))
        assert "Removed **Office equipment**" in result
        assert session.metrics.total_estimated_future == 230_000

    async def test_remove_unknown_item(self, session):
        result = await server.budget_remove_item(RemoveItemInput(item="Yacht"), _ctx(session))
        assert "No item found matching 'Yacht'" in result
        assert len(session.inputs.estimated_items) == 3

    async def test_reorder(self, session):
        result = await server.budget_reorder_item(
            ReorderItemInput(from_index=2, to_index=0), _ctx(session)
        )
        assert result.index("Marketing") < result.index("Personnel costs")

    async def test_reorder_out_of_range(self, session):
        result = await server.budget_reorder_item(
            ReorderItemInput(from_index=0, to_index=5), _ctx(session)
        )
        assert "Cannot apply edit" in result

    async def test_cost_bucket_on_itemized_budget(self, session):
        result = await server.budget_update_cost_bucket(
            UpdateCostBucketInput(bucket="office", amount=1), _ctx(session)
        )
        assert "Cannot apply edit" in result

    async def test_cost_bucket(self):
        session = BudgetSession(make_bucket_inputs())
        result = await server.budget_update_cost_bucket(
            UpdateCostBucketInput(bucket="procurement", amount=4_000, remark="Laptops"),
            _ctx(session),
        )
        assert result == "Updated **Procurement costs**: $4,000.00 _Laptops_"
        assert session.metrics.total_estimated_future == 4_000


class TestExportTool:
    async def test_inline_csv(self, session):
        result = await server.budget_export_csv(ExportReportInput(), _ctx(session))
        assert result.startswith("```csv\nLabel,Amount,Remark,Gap to Target")

    async def test_writes_file(self, session, tmp_path):
        path = tmp_path / "report.csv"
        result = await server.budget_export_csv(ExportReportInput(path=str(path)), _ctx(session))
        assert "Exported 8 rows" in result
        assert path.read_text(encoding="utf-8").startswith("Label,Amount")


class TestInsightTool:
    async def test_fallback_without_key(self, session):
        result = await server.budget_get_insights(_ctx(session))
        assert "Financial Assessment: Warning" in result

    async def test_renders_reply(self, session):
        def handler(request):
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{
                "text": '{"analysis": "Solid.", "recommendations": ["Hold"], "status": "Healthy"}',
            }]}}]})

        gemini = GeminiClient(api_key="k")
        gemini._client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url="https://generativelanguage.googleapis.com/v1beta",
        )
        result = await server.budget_get_insights(_ctx(session, gemini))
        assert "Financial Assessment: Healthy" in result
        assert "- Hold" in result


class TestLifespan:
    async def test_builds_session_from_env(self, monkeypatch):
        monkeypatch.setenv("BUDGET_VARIANT", "buckets")
        monkeypatch.setenv("BUDGET_TARGET_PERCENTAGE", "50")
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        async with server.app_lifespan(server.mcp) as state:
            assert state["gemini"] is None
            assert state["session"].inputs.variant.value == "buckets"
            assert state["session"].inputs.target_percentage == 50

    async def test_creates_gemini_client_with_key(self, monkeypatch):
        monkeypatch.delenv("BUDGET_VARIANT", raising=False)
        monkeypatch.delenv("BUDGET_TARGET_PERCENTAGE", raising=False)
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-test")

        async with server.app_lifespan(server.mcp) as state:
            assert state["gemini"].model == "gemini-test"
            assert state["session"].inputs.target_percentage == 65

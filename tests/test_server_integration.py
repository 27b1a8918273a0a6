"""
Integration tests for the MCP server entry point.

Tests that server.py registers every reporting tool with proper metadata
and that the wrappers forward only the parameters that were provided.
"""

import inspect
import os
import subprocess
import sys
from pathlib import Path

import pytest

from server import (
    build_hiring_funnel_tool,
    build_pipeline_report_tool,
    build_recruiter_activity_report_tool,
    compute_financial_summary_tool,
    compute_invoice_summary_tool,
    mcp,
    resolve_scope_tool,
)

TOOL_NAMES = [
    "resolve_scope",
    "build_pipeline_report",
    "build_recruiter_activity_report",
    "build_hiring_funnel",
    "compute_invoice_summary",
    "compute_financial_summary",
]


class TestServerIntegration:
    """Integration tests for the MCP server."""

    def test_server_has_correct_name(self):
        """Test that the MCP server has the default name."""
        assert mcp.name == "recruit-metrics-mcp-server"

    def test_server_name_can_be_overridden_by_env(self):
        """Test that RECRUIT_METRICS_SERVER_NAME is applied in a fresh process."""
        server_dir = Path(__file__).resolve().parents[1]
        env = os.environ.copy()
        env["RECRUIT_METRICS_SERVER_NAME"] = "custom-server-name"
        env["PYTHONPATH"] = str(server_dir)

        proc = subprocess.run(
            [sys.executable, "-c", "import server; print(server.mcp.name)"],
            cwd=server_dir,
            env=env,
            capture_output=True,
            text=True,
            check=True,
        )

        assert proc.stdout.strip() == "custom-server-name"

    def test_server_has_instructions(self):
        """Test that the instructions mention every tool."""
        assert mcp.instructions is not None
        for name in TOOL_NAMES:
            assert name in mcp.instructions

    @pytest.mark.parametrize("name", TOOL_NAMES)
    def test_tool_is_registered(self, name):
        """Test that each tool is registered with a description."""
        tool = mcp._tool_manager._tools[name]

        assert tool.name == name
        assert tool.description

    def test_only_reporting_tools_registered(self):
        assert sorted(mcp._tool_manager._tools) == sorted(TOOL_NAMES)

    def test_pipeline_tool_signature(self):
        """Test that optional parameters default to None."""
        params = inspect.signature(build_pipeline_report_tool).parameters

        assert params["acting_user_id"].default is inspect.Parameter.empty
        for name in ("staff", "jobs", "candidates", "date_range", "temporal_mode", "column_filters"):
            assert params[name].default is None
        assert inspect.signature(build_pipeline_report_tool).return_annotation is dict

    def test_tool_docstrings(self):
        for tool in (
            resolve_scope_tool,
            build_pipeline_report_tool,
            build_recruiter_activity_report_tool,
            build_hiring_funnel_tool,
            compute_invoice_summary_tool,
            compute_financial_summary_tool,
        ):
            assert "Args:" in tool.__doc__
            assert "Returns:" in tool.__doc__

    def test_main_is_callable(self):
        from server import main

        assert callable(main)


class TestServerWrappers:
    """Tests calling the wrapper functions directly."""

    def test_resolve_scope_wrapper(self, raw_records):
        result = resolve_scope_tool(acting_user_id="t", staff=raw_records["staff"])
        assert result["staff_ids"] == ["r1", "r2", "t"]

    def test_pipeline_wrapper_defaults(self, raw_records):
        """None parameters fall back to the handler defaults."""
        result = build_pipeline_report_tool(
            acting_user_id="r1",
            staff=raw_records["staff"],
            jobs=raw_records["jobs"],
            candidates=raw_records["candidates"],
            clients=raw_records["clients"],
            today="2025-03-20",
        )

        assert result["temporal_mode"] == "creation"
        assert [row["job_id"] for row in result["rows"]] == ["j1"]

    def test_activity_wrapper(self, raw_records):
        result = build_recruiter_activity_report_tool(
            acting_user_id="r2",
            staff=raw_records["staff"],
            jobs=raw_records["jobs"],
            candidates=raw_records["candidates"],
            date_range={"start": "2025-03-06", "end": "2025-03-06"},
        )

        assert [(r["job_id"], r["total"]) for r in result["rows"]] == [("j2", 2)]
        assert result["rows"][0]["client_name"] == "Unknown"

    def test_funnel_wrapper_error(self):
        result = build_hiring_funnel_tool(acting_user_id="m")
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_invoice_wrapper(self):
        result = compute_invoice_summary_tool(lines=[{"ctc": 1000000}], agreement_percentage=10, billing_state="Goa")
        assert result["grand_total"] == 118000
        assert result["amount_in_words"] == "One Lakh Eighteen Thousand Only"

    def test_financial_wrapper(self):
        result = compute_financial_summary_tool(payments=[{"amount_received": 10}], expenses=[{"amount": 5}])
        assert result["net_profit"] == 5
        assert result["profit_margin"] == 50.0

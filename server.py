#!/usr/bin/env python3
"""
MCP Server entry point for the Recruit Metrics reporting engine.

This server exposes the scoped reporting and attribution engine as MCP
tools: visibility scope resolution, per-job pipeline reports, recruiter
activity, the hiring funnel summary, invoice amounts and the finance
summary. Every tool is a pure computation over records the caller has
already fetched; nothing is persisted.

Usage:
    python server.py

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from config import get_config
from tools.financial_summary import compute_financial_summary
from tools.hiring_funnel import build_hiring_funnel
from tools.invoice_summary import compute_invoice_summary
from tools.pipeline_report import build_pipeline_report
from tools.recruiter_activity_report import build_recruiter_activity_report
from tools.resolve_scope import resolve_scope

# Create FastMCP server instance
config = get_config()
mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server computes recruiting dashboard figures from records you pass in. "
        "It never reads or writes storage.\n\n"
        "SCOPE:\n"
        "Use resolve_scope to find whose records an acting user may see "
        "(Admin: everyone; Manager: two levels of reportees; others: direct reportees).\n\n"
        "REPORTS:\n"
        "Use build_pipeline_report for per-job bucket counts (New, Shortlisted, "
        "Rej (M), Rej (C), ...) over a date window in creation or status temporal mode. "
        "Use build_recruiter_activity_report for uploads per recruiter and job. "
        "Use build_hiring_funnel for the manager summary (applications, hires, "
        "rejection rate, funnel, top positions, six-month trend).\n\n"
        "FINANCE:\n"
        "Use compute_invoice_summary for line fees, CGST/SGST/IGST and the amount in words. "
        "Use compute_financial_summary for income, expenses and profit over a period."
    ),
)


def _provided(**kwargs: Any) -> dict:
    """Only include parameters that were explicitly provided."""
    return {key: value for key, value in kwargs.items() if value is not None}


@mcp.tool(
    name="resolve_scope",
    description=(
        "Resolve the visibility scope of an acting user over the staff hierarchy. "
        "Returns whether the scope is unbounded (Admin) and the visible staff ids."
    ),
)
def resolve_scope_tool(acting_user_id: str, staff: Optional[list[dict]] = None) -> dict:
    """
    Resolve the visibility scope of an acting user.

    Args:
        acting_user_id: Id of the user the scope is resolved for.
        staff: Every staff user as {id, name, designation, reporter_id}.

    Returns:
        {"acting_user_id", "designation", "unbounded", "staff_ids"} or an
        {"error": {...}} envelope.
    """
    return resolve_scope(_provided(acting_user_id=acting_user_id, staff=staff))


@mcp.tool(
    name="build_pipeline_report",
    description=(
        "Build the per-job pipeline report for an acting user: one row per in-scope job with "
        "a count per bucket, total uploads and positions remaining, plus totals over visible rows. "
        "Supports creation/status temporal modes, date shortcuts (T, Y, W, L), column filters, "
        "search and bucket presets or inline bucket definitions."
    ),
)
def build_pipeline_report_tool(
    acting_user_id: str,
    staff: Optional[list[dict]] = None,
    jobs: Optional[list[dict]] = None,
    candidates: Optional[list[dict]] = None,
    clients: Optional[list[dict]] = None,
    date_range: Optional[dict] = None,
    today: Optional[str] = None,
    temporal_mode: Optional[str] = None,
    preset: Optional[str] = None,
    status_groups: Optional[list[dict]] = None,
    column_filters: Optional[dict[str, list[str]]] = None,
    search: Optional[dict[str, str]] = None,
    restrict_to_creator: Optional[bool] = None,
    only_open_jobs: Optional[bool] = None,
    assigned_to: Optional[str] = None,
    include_unclassified: Optional[bool] = None,
) -> dict:
    """
    Build the per-job pipeline report.

    Args:
        acting_user_id: Id of the user the report is rendered for.
        staff: Staff users (hierarchy and recruiter names).
        jobs: Jobs; rows are emitted in this order.
        candidates: Candidates; grouped by job_id.
        clients: Clients, for client names.
        date_range: {start, end} as YYYY-MM-DD, or {shortcut: T|Y|W|L}.
        today: Reference day for shortcuts (default: today in the report timezone).
        temporal_mode: "creation" (default) or "status".
        preset: Bucket preset name (default from configuration, "performance").
        status_groups: Inline buckets: [{key, statuses}] or [{key, main_status, actor}].
        column_filters: {date|client|job|recruiter|total: [selected values]}.
        search: {client|job|recruiter: substring}.
        restrict_to_creator: Count only candidates created by in-scope staff.
        only_open_jobs: Keep only jobs with status Open.
        assigned_to: Keep only jobs assigned to this recruiter id.
        include_unclassified: Include unclassified candidate ids in diagnostics.

    Returns:
        {"rows", "totals", "bucket_keys", "temporal_mode", "date_range",
        "diagnostics"} or an {"error": {...}} envelope.
    """
    return build_pipeline_report(
        _provided(
            acting_user_id=acting_user_id,
            staff=staff,
            jobs=jobs,
            candidates=candidates,
            clients=clients,
            date_range=date_range,
            today=today,
            temporal_mode=temporal_mode,
            preset=preset,
            status_groups=status_groups,
            column_filters=column_filters,
            search=search,
            restrict_to_creator=restrict_to_creator,
            only_open_jobs=only_open_jobs,
            assigned_to=assigned_to,
            include_unclassified=include_unclassified,
        )
    )


@mcp.tool(
    name="build_recruiter_activity_report",
    description=(
        "Build the recruiter activity report: candidates each in-scope recruiter uploaded "
        "to each job inside the date window, with a current-status breakdown."
    ),
)
def build_recruiter_activity_report_tool(
    acting_user_id: str,
    staff: Optional[list[dict]] = None,
    jobs: Optional[list[dict]] = None,
    candidates: Optional[list[dict]] = None,
    clients: Optional[list[dict]] = None,
    date_range: Optional[dict] = None,
    today: Optional[str] = None,
    column_filters: Optional[dict[str, list[str]]] = None,
) -> dict:
    """
    Build the per-(recruiter, job) upload report.

    Args:
        acting_user_id: Id of the user the report is rendered for.
        staff: Staff users; in-scope Recruiters and Admins get rows.
        jobs: Jobs, for titles and clients.
        candidates: Candidates, attributed to their creator.
        clients: Clients, for names.
        date_range: {start, end} or {shortcut}.
        today: Reference day for shortcuts.
        column_filters: {date|recruiter|client|job|total: [selected values]}.

    Returns:
        {"rows", "totals"} or an {"error": {...}} envelope.
    """
    return build_recruiter_activity_report(
        _provided(
            acting_user_id=acting_user_id,
            staff=staff,
            jobs=jobs,
            candidates=candidates,
            clients=clients,
            date_range=date_range,
            today=today,
            column_filters=column_filters,
        )
    )


@mcp.tool(
    name="build_hiring_funnel",
    description=(
        "Compute the hiring funnel summary for an acting user: total applications, hires, "
        "active positions, rejection rate, funnel stage percentages, top positions and a "
        "six-month trend."
    ),
)
def build_hiring_funnel_tool(
    acting_user_id: str,
    staff: Optional[list[dict]] = None,
    jobs: Optional[list[dict]] = None,
    candidates: Optional[list[dict]] = None,
    today: Optional[str] = None,
) -> dict:
    """
    Compute the hiring funnel summary.

    Args:
        acting_user_id: Id of the user the summary is for.
        staff: Staff users (hierarchy source).
        jobs: Jobs.
        candidates: Candidates.
        today: Last month of the trend (default: today in the report timezone).

    Returns:
        Summary dictionary or an {"error": {...}} envelope.
    """
    return build_hiring_funnel(
        _provided(acting_user_id=acting_user_id, staff=staff, jobs=jobs, candidates=candidates, today=today)
    )


@mcp.tool(
    name="compute_invoice_summary",
    description=(
        "Compute invoice amounts: per-line fee from CTC (Percentage, Flat or Both), subtotal, "
        "CGST+SGST for the home state or IGST otherwise, grand total and the amount in words "
        "(Indian numbering)."
    ),
)
def compute_invoice_summary_tool(
    invoice: Optional[dict] = None,
    client: Optional[dict] = None,
    lines: Optional[list[dict]] = None,
    payout_option: Optional[str] = None,
    agreement_percentage: Optional[float] = None,
    flat_pay_amount: Optional[float] = None,
    billing_state: Optional[str] = None,
    home_state: Optional[str] = None,
) -> dict:
    """
    Compute the amounts of one invoice.

    Args:
        invoice: Stored invoice; its terms fall back to the client's.
        client: Client of the invoice.
        lines: Free-standing lines [{candidate_id, designation, ctc}] (instead of invoice).
        payout_option: Percentage, Flat or Both (for lines).
        agreement_percentage: Fee percentage of CTC (for lines).
        flat_pay_amount: Flat fee per candidate (for lines).
        billing_state: Billing state (for lines).
        home_state: Override of the configured home tax state.

    Returns:
        {"lines", "payout_option", "billing_state", "subtotal", "tax",
        "grand_total", "amount_in_words"} or an {"error": {...}} envelope.
    """
    return compute_invoice_summary(
        _provided(
            invoice=invoice,
            client=client,
            lines=lines,
            payout_option=payout_option,
            agreement_percentage=agreement_percentage,
            flat_pay_amount=flat_pay_amount,
            billing_state=billing_state,
            home_state=home_state,
        )
    )


@mcp.tool(
    name="compute_financial_summary",
    description=(
        "Summarize total income (payments), total expenses, net profit and profit margin "
        "over a weekly, monthly, yearly or all-time period."
    ),
)
def compute_financial_summary_tool(
    payments: Optional[list[dict]] = None,
    expenses: Optional[list[dict]] = None,
    period: Optional[str] = None,
    now: Optional[str] = None,
) -> dict:
    """
    Summarize income and expenses.

    Args:
        payments: Payments as {amount_received, received_date}.
        expenses: Expenses as {amount, date}.
        period: weekly, monthly, yearly or all (default).
        now: Reference instant (default: current time).

    Returns:
        Summary dictionary or an {"error": {...}} envelope.
    """
    return compute_financial_summary(
        _provided(payments=payments, expenses=expenses, period=period, now=now)
    )


def main():
    """
    Main entry point for the MCP server.

    Runs the server in stdio mode, which is the standard transport
    for MCP servers that are invoked by LLM agents.
    """
    # Load and setup configuration
    config.setup_logging()

    # Log startup information
    logger = logging.getLogger(__name__)
    logger.info("Starting Recruit Metrics MCP Server")
    logger.info(f"Server name: {config.server_name}")
    logger.info(f"Default status group preset: {config.default_preset}")
    if config.presets_file:
        logger.info(f"Presets file: {config.presets_file}")

    # Validate configuration and log warnings
    warnings = config.validate()
    for warning in warnings:
        logger.warning(warning)

    # Start the server
    logger.info("Server starting in stdio mode")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

"""
MCP tool handler for build_pipeline_report.

Integrates request validation, scope resolution, date window resolution,
bucket (status group) selection and aggregation into the per-job pipeline
report every funnel dashboard renders.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from config import get_config
from models.errors import ToolError, create_internal_error
from schemas.pipeline_report import BuildPipelineReportRequest, BuildPipelineReportResponse
from utils.org_scope import resolve_scope
from utils.pipeline_aggregator import aggregate
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.status_groups import load_presets, resolve_status_groups
from utils.validation import (
    resolve_today,
    validate_acting_user,
    validate_column_filters,
    validate_date_range,
    validate_search,
    validate_temporal_mode,
)

logger = logging.getLogger(__name__)


def build_pipeline_report(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the per-job, per-bucket pipeline report for an acting user.

    Orchestration:
    1. Validate the request and look up the acting user
    2. Resolve the acting user's scope
    3. Resolve the date window (shortcut or explicit bounds)
    4. Pick the buckets (inline definitions, named preset or default)
    5. Aggregate and shape the response

    Args:
        args: Dictionary containing:
            - acting_user_id (str): Required
            - staff, jobs, candidates, clients (list): Fetched records
            - date_range (dict): {start, end} as YYYY-MM-DD, or {shortcut: T|Y|W|L}
            - today (str): Reference day for shortcuts (default: today in the
              report timezone)
            - temporal_mode (str): "creation" (default) or "status"
            - preset (str): Named bucket preset ("performance", "funnel", ...)
            - status_groups (list): Inline bucket definitions, win over preset
            - column_filters (dict): {date|client|job|recruiter|total: [values]}
            - search (dict): {client|job|recruiter: substring}
            - restrict_to_creator (bool): Count only candidates created by
              in-scope staff (default: every candidate on an in-scope job)
            - only_open_jobs (bool): Keep only Open jobs
            - assigned_to (str): Keep only jobs assigned to this recruiter id
            - include_unclassified (bool): List unclassified candidate ids

    Returns:
        Dictionary with structure:
        {
            "rows": [...],           # One per in-scope job passing the filters
            "totals": {...},         # Sums over rows
            "bucket_keys": [...],    # Bucket order
            "temporal_mode": str,
            "date_range": {"start": str|None, "end": str|None},
            "diagnostics": {"unclassified": int, ...}
        }

        On error, returns {"error": {"code", "message", "retryable"}}.
    """
    try:
        config = get_config()
        tz = config.get_timezone()

        request = BuildPipelineReportRequest.model_validate(args)
        acting_user = validate_acting_user(request.acting_user_id, request.staff)
        temporal_mode = validate_temporal_mode(request.temporal_mode)
        today = resolve_today(request.today, tz)
        date_range = validate_date_range(request.date_range, today, tz)
        column_filters = validate_column_filters(request.column_filters)
        search = validate_search(request.search)

        presets = load_presets(config.presets_file)
        status_groups = resolve_status_groups(
            preset=request.preset,
            definitions=request.status_groups,
            presets=presets,
            default_preset=config.default_preset,
        )

        scope = resolve_scope(acting_user, request.staff)

        report = aggregate(
            request.jobs,
            request.candidates,
            scope,
            date_range,
            temporal_mode,
            status_groups,
            column_filters,
            clients=request.clients,
            staff=request.staff,
            restrict_to_creator=request.restrict_to_creator,
            only_open_jobs=request.only_open_jobs,
            assigned_to=request.assigned_to,
            search=search,
            tz=tz,
        )

        logger.debug(
            "Pipeline report for %s: %d rows, %d unclassified, mode=%s, range=%r",
            acting_user.id,
            len(report.rows),
            report.unclassified,
            temporal_mode.value,
            date_range,
        )

        include_unclassified = (
            request.include_unclassified
            if request.include_unclassified is not None
            else config.include_unclassified
        )
        payload = report.to_dict(include_unclassified=include_unclassified)
        return BuildPipelineReportResponse.model_validate(payload).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()

"""
MCP tool handler for build_recruiter_activity_report.

Daily activity view: what each in-scope recruiter uploaded to which job
inside the window.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from config import get_config
from models.errors import ToolError, create_internal_error
from schemas.recruiter_activity import BuildRecruiterActivityRequest, BuildRecruiterActivityResponse
from utils.org_scope import resolve_scope
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.recruiter_activity import recruiter_activity
from utils.validation import (
    resolve_today,
    validate_acting_user,
    validate_column_filters,
    validate_date_range,
)

logger = logging.getLogger(__name__)


def build_recruiter_activity_report(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the per-(recruiter, job) upload report.

    Args:
        args: Dictionary containing:
            - acting_user_id (str): Required
            - staff, jobs, candidates, clients (list): Fetched records
            - date_range (dict): {start, end} or {shortcut}
            - today (str): Reference day for shortcuts
            - column_filters (dict): {date|recruiter|client|job|total: [values]}

    Returns:
        Dictionary with structure:
        {
            "rows": [{recruiter_id, recruiter_name, job_id, job_title,
                      client_name, date, total, status_counts, candidate_ids}],
            "totals": {"total": int, "status_counts": {...}}
        }

        On error, returns {"error": {"code", "message", "retryable"}}.
    """
    try:
        config = get_config()
        tz = config.get_timezone()

        request = BuildRecruiterActivityRequest.model_validate(args)
        acting_user = validate_acting_user(request.acting_user_id, request.staff)
        today = resolve_today(request.today, tz)
        date_range = validate_date_range(request.date_range, today, tz)
        column_filters = validate_column_filters(request.column_filters)

        scope = resolve_scope(acting_user, request.staff)
        report = recruiter_activity(
            request.staff,
            request.jobs,
            request.candidates,
            request.clients,
            scope,
            date_range,
            column_filters,
            tz=tz,
        )
        logger.debug("Activity report for %s: %d rows, %d uploads", acting_user.id, len(report.rows), report.total)

        return BuildRecruiterActivityResponse.model_validate(report.to_dict()).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()

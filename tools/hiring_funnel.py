"""MCP tool handler for build_hiring_funnel (manager report summary)."""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from config import get_config
from models.errors import ToolError, create_internal_error
from schemas.hiring_funnel import BuildHiringFunnelRequest, BuildHiringFunnelResponse
from utils.funnel_summary import hiring_funnel
from utils.org_scope import resolve_scope
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.validation import resolve_today, validate_acting_user

logger = logging.getLogger(__name__)


def build_hiring_funnel(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute the hiring funnel summary for an acting user.

    Args:
        args: Dictionary containing:
            - acting_user_id (str): Required
            - staff, jobs, candidates (list): Fetched records
            - today (str): Last month of the six-month trend (default: today)

    Returns:
        Dictionary with total_applications, hired, active_positions,
        rejection_rate, stages, top_positions and monthly_trend, or
        {"error": {...}} on failure.
    """
    try:
        config = get_config()
        tz = config.get_timezone()

        request = BuildHiringFunnelRequest.model_validate(args)
        acting_user = validate_acting_user(request.acting_user_id, request.staff)
        today = resolve_today(request.today, tz)

        scope = resolve_scope(acting_user, request.staff)
        summary = hiring_funnel(request.jobs, request.candidates, scope, today, tz=tz)
        logger.debug(
            "Hiring funnel for %s: %d applications, %d hired",
            acting_user.id,
            summary["total_applications"],
            summary["hired"],
        )

        return BuildHiringFunnelResponse.model_validate(summary).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()

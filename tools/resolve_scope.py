"""
MCP tool handler for resolve_scope.

Tells a caller whose records the acting user may see. Enforcement is the
caller's job; this only computes the scope.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from models.errors import ToolError, create_internal_error
from schemas.resolve_scope import ResolveScopeRequest, ResolveScopeResponse
from utils.org_scope import resolve_scope as resolve_staff_scope
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.validation import validate_acting_user

logger = logging.getLogger(__name__)


def resolve_scope(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Resolve the visibility scope of an acting user.

    Args:
        args: Dictionary containing:
            - acting_user_id (str): Id of the user the scope is for
            - staff (list): Every staff user ({id, name, designation, reporter_id})

    Returns:
        Dictionary with structure:
        {
            "acting_user_id": str,
            "designation": str|None,
            "unbounded": bool,       # True for Admins: every record is visible
            "staff_ids": [str, ...]  # Sorted; empty when unbounded
        }

        On error, returns:
        {
            "error": {
                "code": str,         # VALIDATION_ERROR or INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        request = ResolveScopeRequest.model_validate(args)
        acting_user = validate_acting_user(request.acting_user_id, request.staff)

        scope = resolve_staff_scope(acting_user, request.staff)
        logger.debug("Resolved %r over %d staff users", scope, len(request.staff))

        return ResolveScopeResponse(
            acting_user_id=acting_user.id,
            designation=acting_user.designation.value if acting_user.designation else None,
            unbounded=scope.unbounded,
            staff_ids=sorted(scope.staff_ids),
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()

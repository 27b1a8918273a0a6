"""MCP tool handler for compute_financial_summary."""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from config import get_config
from models.errors import ToolError, create_internal_error
from schemas.financial_summary import ComputeFinancialSummaryRequest, ComputeFinancialSummaryResponse
from utils.financials import financial_summary
from utils.pydantic_error_mapper import map_pydantic_validation_error

logger = logging.getLogger(__name__)


def compute_financial_summary(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Summarize income, expenses and profit over a period.

    Args:
        args: Dictionary containing:
            - payments (list): [{amount_received, received_date}]
            - expenses (list): [{amount, date}]
            - period (str): weekly, monthly, yearly or all (default)
            - now (str): Reference instant (default: current time)

    Returns:
        Dictionary with period, since, total_income, total_expenses,
        net_profit and profit_margin, or {"error": {...}} on failure.
    """
    try:
        config = get_config()
        request = ComputeFinancialSummaryRequest.model_validate(args)

        summary = financial_summary(
            request.payments,
            request.expenses,
            period=request.period,
            now=request.now,
            tz=config.get_timezone(),
        )
        logger.debug("Financial summary (%s): net profit %s", summary.period, summary.net_profit)

        return ComputeFinancialSummaryResponse.model_validate(summary.to_dict()).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()

"""
MCP tool handler for compute_invoice_summary.

Recomputes line fees from CTC, the GST split and the amount in words that
an invoice PDF prints. Rendering and dispatch stay with the caller.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from config import get_config
from models.errors import ToolError, create_internal_error
from schemas.invoice_summary import ComputeInvoiceSummaryRequest, ComputeInvoiceSummaryResponse
from utils.financials import summarize_invoice, summarize_lines
from utils.pydantic_error_mapper import map_pydantic_validation_error

logger = logging.getLogger(__name__)


def compute_invoice_summary(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute the amounts of one invoice.

    Args:
        args: Dictionary containing either:
            - invoice (dict): Stored invoice with lines and terms
            - client (dict): Optional client, for default terms and state
        or:
            - lines (list): [{candidate_id, designation, ctc}]
            - payout_option, agreement_percentage, flat_pay_amount,
              billing_state: Terms for the lines
        and optionally:
            - home_state (str): Override of the configured home tax state

    Returns:
        Dictionary with structure:
        {
            "lines": [{candidate_id, designation, ctc, amount}],
            "payout_option": str,
            "billing_state": str|None,
            "subtotal": number,
            "tax": {subtotal, cgst, sgst, igst, total_tax, grand_total, intra_state},
            "grand_total": number,
            "amount_in_words": str
        }

        On error, returns {"error": {"code", "message", "retryable"}}.
    """
    try:
        config = get_config()
        request = ComputeInvoiceSummaryRequest.model_validate(args)
        home_state = request.home_state or config.home_state

        if request.invoice is not None:
            summary = summarize_invoice(request.invoice, request.client, home_state=home_state)
        else:
            summary = summarize_lines(
                request.lines,
                request.payout_option,
                request.agreement_percentage,
                request.flat_pay_amount,
                request.billing_state,
                home_state=home_state,
            )

        logger.debug(
            "Invoice summary: %d lines, grand total %s, intra_state=%s",
            len(summary.lines),
            summary.grand_total,
            summary.tax.intra_state,
        )
        return ComputeInvoiceSummaryResponse.model_validate(summary.to_dict()).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()

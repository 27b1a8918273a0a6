"""Pydantic schemas for compute_invoice_summary."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import Field, model_validator

from schemas.common import StrictIgnoreRequest, StrictResponse
from schemas.records import Client, Invoice, InvoiceLine

Number = Union[int, float]


class ComputeInvoiceSummaryRequest(StrictIgnoreRequest):
    """Request schema for compute_invoice_summary.

    Either a stored ``invoice`` (terms fall back to ``client``) or
    free-standing ``lines`` with explicit terms.
    """

    invoice: Optional[Invoice] = None
    client: Optional[Client] = None
    lines: Optional[list[InvoiceLine]] = None
    payout_option: Optional[str] = None
    agreement_percentage: Any = None
    flat_pay_amount: Any = None
    billing_state: Optional[str] = None
    home_state: Optional[str] = None

    @model_validator(mode="after")
    def check_source(self) -> "ComputeInvoiceSummaryRequest":
        if self.invoice is None and self.lines is None:
            raise ValueError("Either invoice or lines is required")
        if self.invoice is not None and self.lines is not None:
            raise ValueError("Provide invoice or lines, not both")
        return self


class InvoiceLineOutput(StrictResponse):
    candidate_id: Optional[str] = None
    designation: Optional[str] = None
    ctc: Number
    amount: int


class TaxOutput(StrictResponse):
    subtotal: Number
    cgst: int
    sgst: int
    igst: int
    total_tax: int
    grand_total: Number
    intra_state: bool


class ComputeInvoiceSummaryResponse(StrictResponse):
    """Response schema for compute_invoice_summary."""

    lines: list[InvoiceLineOutput] = Field(default_factory=list)
    payout_option: str
    billing_state: Optional[str] = None
    subtotal: Number
    tax: TaxOutput
    grand_total: Number
    amount_in_words: str

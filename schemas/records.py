"""Pydantic models for the records the engine reads.

Records arrive already fetched from the collaborating services, so every
model is lenient: unknown keys are dropped, populated references collapse
to ids, and camelCase keys used by those services are accepted alongside
snake_case. Money fields stay raw; ``utils.financials`` coerces them.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator

from models.status import Designation
from schemas.common import LenientRecord, text_or_none, unwrap_reference


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _to_int_or_zero(value: Any) -> int:
    """Coerce a count-like value to int; anything unusable is 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


class StaffUser(LenientRecord):
    """A member of staff and the user they report to."""

    id: str = Field(validation_alias=_alias("id", "_id"))
    name: Optional[str] = None
    designation: Optional[Designation] = None
    reporter_id: Optional[str] = Field(
        default=None, validation_alias=_alias("reporter_id", "reporterId", "reporter")
    )

    @model_validator(mode="before")
    @classmethod
    def admin_flag_to_designation(cls, data: Any) -> Any:
        """Treat ``isAdmin`` as the Admin designation."""
        if isinstance(data, dict) and (data.get("is_admin") or data.get("isAdmin")):
            return {**data, "designation": Designation.ADMIN.value}
        return data

    @field_validator("id", "reporter_id", mode="before")
    @classmethod
    def unwrap_ids(cls, value: Any) -> Any:
        return unwrap_reference(value)

    @field_validator("designation", mode="before")
    @classmethod
    def match_designation(cls, value: Any) -> Optional[Designation]:
        """Case-insensitive match; unknown designations have no role."""
        if value is None or isinstance(value, Designation):
            return value
        text = str(value).strip().lower()
        for member in Designation:
            if member.value.lower() == text:
                return member
        return None


class Job(LenientRecord):
    """A job requirement owned by a client."""

    id: str = Field(validation_alias=_alias("id", "_id"))
    title: str = ""
    client_id: Optional[str] = Field(
        default=None, validation_alias=_alias("client_id", "clientId", "client")
    )
    created_by_id: Optional[str] = Field(
        default=None, validation_alias=_alias("created_by_id", "createdById", "CreatedBy", "createdBy")
    )
    assigned_recruiter_ids: list[str] = Field(
        default_factory=list,
        validation_alias=_alias("assigned_recruiter_ids", "assignedRecruiterIds", "assignedRecruiters"),
    )
    status: Optional[str] = None
    no_of_positions: int = Field(
        default=0, validation_alias=_alias("no_of_positions", "noOfPositions")
    )
    created_at: Any = Field(default=None, validation_alias=_alias("created_at", "createdAt"))

    @field_validator("id", "client_id", "created_by_id", mode="before")
    @classmethod
    def unwrap_ids(cls, value: Any) -> Any:
        return unwrap_reference(value)

    @field_validator("title", mode="before")
    @classmethod
    def title_default(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("status", mode="before")
    @classmethod
    def status_to_text(cls, value: Any) -> Any:
        return text_or_none(value)

    @field_validator("assigned_recruiter_ids", mode="before")
    @classmethod
    def unwrap_recruiters(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple, set)):
            return []
        ids = [unwrap_reference(item) for item in value]
        return [i for i in ids if i]

    @field_validator("no_of_positions", mode="before")
    @classmethod
    def coerce_positions(cls, value: Any) -> int:
        return _to_int_or_zero(value)


class BillingSite(LenientRecord):
    """One billing address of a client."""

    address: Optional[str] = None
    state: Optional[str] = None
    gst_number: Optional[str] = Field(
        default=None, validation_alias=_alias("gst_number", "gstNumber", "tax_id")
    )


class Client(LenientRecord):
    """A client company and its default fee terms."""

    id: str = Field(validation_alias=_alias("id", "_id"))
    company_name: Optional[str] = Field(
        default=None, validation_alias=_alias("company_name", "companyName")
    )
    payout_option: Optional[str] = Field(
        default=None, validation_alias=_alias("payout_option", "payoutOption")
    )
    agreement_percentage: Any = Field(
        default=None, validation_alias=_alias("agreement_percentage", "agreementPercentage")
    )
    flat_pay_amount: Any = Field(
        default=None, validation_alias=_alias("flat_pay_amount", "flatPayAmount")
    )
    state: Optional[str] = None
    gst_number: Optional[str] = Field(
        default=None, validation_alias=_alias("gst_number", "gstNumber")
    )
    billing_details: list[BillingSite] = Field(
        default_factory=list, validation_alias=_alias("billing_details", "billingDetails")
    )

    @field_validator("id", mode="before")
    @classmethod
    def unwrap_id(cls, value: Any) -> Any:
        return unwrap_reference(value)

    @field_validator("billing_details", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class StatusHistoryEntry(LenientRecord):
    """One appended status transition of a candidate."""

    status: Optional[str] = None
    timestamp: Any = None
    comment: Optional[str] = None
    rejection_reason: Optional[str] = Field(
        default=None, validation_alias=_alias("rejection_reason", "rejectionReason")
    )

    @field_validator("status", "comment", "rejection_reason", mode="before")
    @classmethod
    def labels_to_text(cls, value: Any) -> Any:
        return text_or_none(value)


class Candidate(LenientRecord):
    """A candidate uploaded against a job."""

    id: str = Field(validation_alias=_alias("id", "_id"))
    job_id: Optional[str] = Field(default=None, validation_alias=_alias("job_id", "jobId"))
    created_by_id: Optional[str] = Field(
        default=None, validation_alias=_alias("created_by_id", "createdById", "createdBy")
    )
    status: Optional[str] = None
    status_history: list[StatusHistoryEntry] = Field(
        default_factory=list, validation_alias=_alias("status_history", "statusHistory")
    )
    rejected_by: Optional[str] = Field(
        default=None, validation_alias=_alias("rejected_by", "rejectedBy")
    )
    dropped_by: Optional[str] = Field(
        default=None, validation_alias=_alias("dropped_by", "droppedBy")
    )
    joining_date: Any = Field(default=None, validation_alias=_alias("joining_date", "joiningDate"))
    selection_date: Any = Field(
        default=None, validation_alias=_alias("selection_date", "selectionDate")
    )
    created_at: Any = Field(default=None, validation_alias=_alias("created_at", "createdAt"))
    dynamic_fields: dict[str, Any] = Field(
        default_factory=dict, validation_alias=_alias("dynamic_fields", "dynamicFields")
    )

    @field_validator("id", "job_id", "created_by_id", mode="before")
    @classmethod
    def unwrap_ids(cls, value: Any) -> Any:
        return unwrap_reference(value)

    @field_validator("status_history", mode="before")
    @classmethod
    def history_default(cls, value: Any) -> Any:
        """Keep usable entries; anything that is not a mapping is dropped."""
        if not isinstance(value, list):
            return []
        return [entry for entry in value if isinstance(entry, (dict, StatusHistoryEntry))]

    @field_validator("status", "rejected_by", "dropped_by", mode="before")
    @classmethod
    def labels_to_text(cls, value: Any) -> Any:
        return text_or_none(value)

    @field_validator("dynamic_fields", mode="before")
    @classmethod
    def fields_default(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class InvoiceLine(LenientRecord):
    """One billed candidate on an invoice."""

    candidate_id: Optional[str] = Field(
        default=None, validation_alias=_alias("candidate_id", "candidateId")
    )
    designation: Optional[str] = None
    doj: Any = None
    ctc: Any = None
    amount: Any = None

    @field_validator("candidate_id", mode="before")
    @classmethod
    def unwrap_candidate(cls, value: Any) -> Any:
        return unwrap_reference(value)


class Invoice(LenientRecord):
    """A placement invoice raised against a client."""

    id: Optional[str] = Field(default=None, validation_alias=_alias("id", "_id"))
    client_id: Optional[str] = Field(
        default=None, validation_alias=_alias("client_id", "clientId", "client")
    )
    lines: list[InvoiceLine] = Field(
        default_factory=list, validation_alias=_alias("lines", "candidates")
    )
    payout_option: Optional[str] = Field(
        default=None, validation_alias=_alias("payout_option", "payoutOption")
    )
    agreement_percentage: Any = Field(
        default=None, validation_alias=_alias("agreement_percentage", "agreementPercentage")
    )
    flat_pay_amount: Any = Field(
        default=None, validation_alias=_alias("flat_pay_amount", "flatPayAmount")
    )
    billing_state: Optional[str] = Field(
        default=None, validation_alias=_alias("billing_state", "billingState")
    )
    gst_number: Optional[str] = Field(
        default=None, validation_alias=_alias("gst_number", "gstNumber")
    )
    status: Optional[str] = None
    created_at: Any = Field(default=None, validation_alias=_alias("created_at", "createdAt"))

    @field_validator("id", "client_id", mode="before")
    @classmethod
    def unwrap_ids(cls, value: Any) -> Any:
        return unwrap_reference(value)

    @field_validator("lines", mode="before")
    @classmethod
    def lines_default(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [line for line in value if isinstance(line, (dict, InvoiceLine))]


class Payment(LenientRecord):
    """Money received against an invoice."""

    amount_received: Any = Field(
        default=None, validation_alias=_alias("amount_received", "amountReceived")
    )
    received_date: Any = Field(
        default=None, validation_alias=_alias("received_date", "receivedDate")
    )


class Expense(LenientRecord):
    """An operating expense."""

    amount: Any = None
    date: Any = None

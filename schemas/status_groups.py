"""Pydantic schema for report bucket (status group) definitions."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from models.status import NEGATIVE_STATUSES, AttributionActor, CandidateStatus
from utils.status_normalizer import normalize_actor, normalize_status


class StatusGroupDefinition(BaseModel):
    """One bucket of a report.

    Either ``statuses`` (direct match on the normalized candidate status)
    or ``main_status`` + ``actor`` (attributed Rejected/Dropped) is given.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    key: str
    statuses: Optional[list[CandidateStatus]] = None
    main_status: Optional[CandidateStatus] = None
    actor: Optional[AttributionActor] = None

    @field_validator("key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Invalid key: cannot be empty")
        return value.strip()

    @field_validator("statuses", mode="before")
    @classmethod
    def normalize_statuses(cls, value: Any) -> Any:
        """Accept alias spellings; reject anything unrecognized."""
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        normalized = []
        for raw in value:
            status = normalize_status(raw)
            if status is None:
                raise ValueError(f"Unknown status '{raw}'")
            if status not in normalized:
                normalized.append(status)
        return normalized

    @field_validator("main_status", mode="before")
    @classmethod
    def normalize_main_status(cls, value: Any) -> Any:
        if value is None:
            return None
        status = normalize_status(value)
        if status not in NEGATIVE_STATUSES:
            raise ValueError(f"main_status must be Rejected or Dropped, got '{value}'")
        return status

    @field_validator("actor", mode="before")
    @classmethod
    def normalize_actor_value(cls, value: Any) -> Any:
        if value is None:
            return None
        actor = normalize_actor(value)
        if actor is None:
            raise ValueError(f"actor must be Manager or Client, got '{value}'")
        return actor

    @model_validator(mode="after")
    def check_kind(self) -> "StatusGroupDefinition":
        """Exactly one of direct statuses or an attributed pair."""
        special = self.main_status is not None or self.actor is not None
        if special and self.statuses:
            raise ValueError(f"Bucket '{self.key}' cannot mix statuses with main_status/actor")
        if special and (self.main_status is None or self.actor is None):
            raise ValueError(f"Bucket '{self.key}' needs both main_status and actor")
        if not special and not self.statuses:
            raise ValueError(f"Bucket '{self.key}' needs statuses or main_status/actor")
        return self

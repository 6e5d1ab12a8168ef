"""Request and response schemas for the batch lifecycle operations."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from palletflow.enterprise.core import Outcome, Rejected


class InductRequestSchema(BaseModel):
    package_ids: List[str] = Field(..., min_length=1)
    client_id: str
    warehouse_id: str


class StowRequestSchema(BaseModel):
    package_ids: List[str] = Field(..., min_length=1)
    warehouse_id: str
    pallet_id: Optional[str] = None


class InductResultSchema(BaseModel):
    package_id: Optional[str]
    success: bool
    message: str
    error: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> "InductResultSchema":
        return cls(
            package_id=outcome.package_id,
            success=outcome.success,
            message=outcome.message,
            error=outcome.kind.value if isinstance(outcome, Rejected) else None,
        )


class StowResultSchema(InductResultSchema):
    pallet_id: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> "StowResultSchema":
        return cls(
            package_id=outcome.package_id,
            success=outcome.success,
            message=outcome.message,
            error=outcome.kind.value if isinstance(outcome, Rejected) else None,
            pallet_id=outcome.pallet_id,
        )


class InductPayloadSchema(BaseModel):
    results: List[InductResultSchema]

    @classmethod
    def from_outcomes(cls, outcomes: List[Outcome]) -> "InductPayloadSchema":
        return cls(results=[InductResultSchema.from_outcome(outcome) for outcome in outcomes])


class StowPayloadSchema(BaseModel):
    results: List[StowResultSchema]

    @classmethod
    def from_outcomes(cls, outcomes: List[Outcome]) -> "StowPayloadSchema":
        return cls(results=[StowResultSchema.from_outcome(outcome) for outcome in outcomes])

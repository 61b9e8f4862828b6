"""Washline — OrderRecord schemas."""
from datetime import datetime

from pydantic import Field, field_validator

from washline.models.order_record import ProcessType, WashType
from washline.schemas.common import CamelModel
from washline.schemas.machine_assignment import AssignmentResponse, RecordStats


def _dedupe(values: list[ProcessType]) -> list[ProcessType]:
    seen: list[ProcessType] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class OrderRecordCreate(CamelModel):
    item_id: str | None = Field(None, max_length=50)
    quantity: int = Field(..., gt=0)
    wash_type: WashType
    process_types: list[ProcessType] = Field(..., min_length=1)

    @field_validator("process_types")
    @classmethod
    def unique_process_types(cls, v: list[ProcessType]) -> list[ProcessType]:
        return _dedupe(v)


class OrderRecordUpdate(CamelModel):
    item_id: str | None = Field(None, max_length=50)
    quantity: int | None = Field(None, gt=0)
    wash_type: WashType | None = None
    process_types: list[ProcessType] | None = Field(None, min_length=1)

    @field_validator("process_types")
    @classmethod
    def unique_process_types(cls, v: list[ProcessType] | None) -> list[ProcessType] | None:
        return _dedupe(v) if v is not None else v


class OrderRecordResponse(CamelModel):
    id: int
    order_id: int
    item_id: str | None = None
    quantity: int
    wash_type: str
    process_types: list[str]
    tracking_number: str | None = None
    status: str
    damage_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderRecordWithRemaining(OrderRecordResponse):
    remaining_quantity: int


class OrderRecordDetail(OrderRecordResponse):
    """Record as shown inside an order's details view."""

    assignments: list[AssignmentResponse]
    stats: RecordStats
    return_quantity: int
    actual_output: int

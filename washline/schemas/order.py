"""Washline — Order schemas."""
import datetime as dt

from pydantic import Field, field_validator

from washline.models.order import OrderStatus
from washline.schemas.common import CamelModel
from washline.schemas.order_record import OrderRecordCreate, OrderRecordDetail


class OrderCreate(CamelModel):
    customer_id: str = Field(..., min_length=1, max_length=50)
    quantity: int = Field(..., gt=0)
    date: dt.date
    delivery_date: dt.date
    notes: str | None = None
    reference_no: str | None = Field(None, min_length=1, max_length=50)
    records: list[OrderRecordCreate] = Field(default_factory=list)


class OrderUpdate(CamelModel):
    customer_id: str | None = Field(None, min_length=1, max_length=50)
    quantity: int | None = Field(None, gt=0)
    date: dt.date | None = None
    delivery_date: dt.date | None = None
    notes: str | None = None
    reference_no: str | None = Field(None, min_length=1, max_length=50)
    status: OrderStatus | None = None
    # Added to the stored delivered count, never replaces it
    delivery_quantity: int | None = Field(None, ge=0)


class OrderResponse(CamelModel):
    id: int
    reference_no: str
    customer_id: str
    date: dt.date
    quantity: int
    delivery_date: dt.date
    status: str
    delivery_quantity: int
    notes: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class OrderSummary(CamelModel):
    total_quantity: int
    allocated_quantity: int
    unallocated_quantity: int
    assigned_quantity: int
    completed_quantity: int
    return_quantity: int
    damage_count: int
    actual_output: int
    completion_percentage: int
    total_records: int
    completed_records: int


class OrderDetails(CamelModel):
    order: OrderResponse
    records: list[OrderRecordDetail]
    summary: OrderSummary


class DamageEntry(CamelModel):
    record_id: int
    damage_count: int = Field(..., ge=0)


class DamageRequest(CamelModel):
    records: list[DamageEntry] = Field(..., min_length=1)

    @field_validator("records")
    @classmethod
    def unique_records(cls, v: list[DamageEntry]) -> list[DamageEntry]:
        ids = [entry.record_id for entry in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Each record may appear only once")
        return v


class TypeOption(CamelModel):
    code: str
    label: str

"""Washline — MachineAssignment schemas."""
from datetime import datetime

from pydantic import Field

from washline.models.machine_assignment import AssignmentStatus
from washline.schemas.common import CamelModel


class AssignmentCreate(CamelModel):
    assigned_by_id: int
    quantity: int = Field(..., gt=0)
    washing_machine: str | None = Field(None, max_length=50)
    drying_machine: str | None = Field(None, max_length=50)


class AssignmentUpdate(CamelModel):
    assigned_by_id: int | None = None
    quantity: int | None = Field(None, gt=0)
    washing_machine: str | None = Field(None, max_length=50)
    drying_machine: str | None = Field(None, max_length=50)
    return_quantity: int | None = Field(None, ge=0)
    status: AssignmentStatus | None = None


class AssignmentResponse(CamelModel):
    id: int
    record_id: int
    order_id: int
    assigned_by_id: int
    quantity: int
    return_quantity: int | None = None
    washing_machine: str | None = None
    drying_machine: str | None = None
    status: str
    tracking_number: str | None = None
    assigned_at: datetime | None = None
    completed_at: datetime | None = None


class RecordStats(CamelModel):
    total_quantity: int
    assigned_quantity: int
    remaining_quantity: int
    total_assignments: int
    completed_assignments: int
    in_progress_assignments: int
    completion_percentage: int

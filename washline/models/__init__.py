"""Washline — SQLAlchemy models."""
from washline.models.machine_assignment import AssignmentStatus, MachineAssignment
from washline.models.order import Order, OrderStatus
from washline.models.order_record import (
    PROCESS_TYPE_LABELS,
    WASH_TYPE_LABELS,
    OrderRecord,
    ProcessType,
    RecordStatus,
    WashType,
)

__all__ = [
    "Order", "OrderStatus",
    "OrderRecord", "RecordStatus", "WashType", "ProcessType",
    "WASH_TYPE_LABELS", "PROCESS_TYPE_LABELS",
    "MachineAssignment", "AssignmentStatus",
]

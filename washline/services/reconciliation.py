"""Washline — Quantity reconciliation rules.

Pure functions, no I/O. Every place that needs to know whether an order or record
is complete, how much capacity is left, or what the actual output was, asks this
module. Arguments are plain ints or objects exposing ``quantity`` and ``status``
(ORM rows work as-is).
"""
from collections.abc import Iterable
from typing import Any

from washline.core.errors import ConflictError, order_capacity_message, record_capacity_message
from washline.models.machine_assignment import AssignmentStatus
from washline.models.order import OrderStatus
from washline.models.order_record import RecordStatus

# Derivation never moves an order out of these; only an explicit update does.
HELD_ORDER_STATUSES = {OrderStatus.QC.value, OrderStatus.DELIVERED.value}


def _value(status: Any) -> str:
    return status.value if hasattr(status, "value") else status


# ── Conservation ─────────────────────────────────────────────────────────────

def remaining_quantity(total: int, used: int) -> int:
    return total - used


def active_assignments(assignments: Iterable[Any]) -> list[Any]:
    """Assignments that still hold capacity (everything except Cancelled)."""
    return [a for a in assignments if _value(a.status) != AssignmentStatus.CANCELLED.value]


def assigned_quantity(assignments: Iterable[Any]) -> int:
    return sum(a.quantity for a in active_assignments(assignments))


def check_order_capacity(order_quantity: int, other_records_quantity: int, requested: int) -> int:
    """
    Raise ConflictError when ``requested`` does not fit into what the order has
    left after its other records. Returns the remaining quantity on success.
    """
    remaining = remaining_quantity(order_quantity, other_records_quantity)
    if requested > remaining:
        raise ConflictError(order_capacity_message(max(remaining, 0)))
    return remaining


def check_record_capacity(record_quantity: int, other_assigned_quantity: int, requested: int) -> int:
    remaining = remaining_quantity(record_quantity, other_assigned_quantity)
    if requested > remaining:
        raise ConflictError(record_capacity_message(max(remaining, 0)))
    return remaining


# ── Status derivation ────────────────────────────────────────────────────────

def is_record_complete(record_quantity: int, assignments: Iterable[Any]) -> bool:
    """
    A record is complete when it has at least one live assignment, every live
    assignment is Completed and together they cover the full record quantity.
    """
    active = active_assignments(assignments)
    if not active:
        return False
    if any(_value(a.status) != AssignmentStatus.COMPLETED.value for a in active):
        return False
    return sum(a.quantity for a in active) == record_quantity


def derive_record_status(record_quantity: int, assignments: Iterable[Any]) -> str:
    if is_record_complete(record_quantity, assignments):
        return RecordStatus.COMPLETE.value
    return RecordStatus.PENDING.value


def derive_order_status(current_status: Any, order_quantity: int, records: Iterable[Any]) -> str:
    """
    Complete iff the order has records, all of them are Complete and their
    quantities add up to the order quantity. QC and Delivered are held.
    Otherwise In Progress is kept when already set, else Pending.
    """
    current = _value(current_status)
    if current in HELD_ORDER_STATUSES:
        return current
    records = list(records)
    if (
        records
        and all(_value(r.status) == RecordStatus.COMPLETE.value for r in records)
        and sum(r.quantity for r in records) == order_quantity
    ):
        return OrderStatus.COMPLETE.value
    if current == OrderStatus.IN_PROGRESS.value:
        return current
    return OrderStatus.PENDING.value


# ── Read models ──────────────────────────────────────────────────────────────

def completion_percentage(assigned: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(assigned / total * 100)


def record_stats(record_quantity: int, assignments: Iterable[Any]) -> dict:
    assignments = list(assignments)
    active = active_assignments(assignments)
    assigned = sum(a.quantity for a in active)
    return {
        "total_quantity": record_quantity,
        "assigned_quantity": assigned,
        "remaining_quantity": remaining_quantity(record_quantity, assigned),
        "total_assignments": len(active),
        "completed_assignments": sum(1 for a in active if _value(a.status) == AssignmentStatus.COMPLETED.value),
        "in_progress_assignments": sum(1 for a in active if _value(a.status) == AssignmentStatus.IN_PROGRESS.value),
        "completion_percentage": completion_percentage(assigned, record_quantity),
    }


def return_quantity(assignments: Iterable[Any]) -> int:
    return sum(a.return_quantity or 0 for a in active_assignments(assignments))


def actual_output(return_qty: int, damage_count: int) -> int:
    return max(return_qty - damage_count, 0)


def damage_forces_qc(current_status: Any, damage_counts: Iterable[int]) -> bool:
    """Reporting any damage on a Complete order sends it back to QC."""
    return _value(current_status) == OrderStatus.COMPLETE.value and any(c > 0 for c in damage_counts)

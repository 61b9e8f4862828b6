"""Washline — Tracking number generation.

Records are tagged ``<orderId><letters>`` (12A, 12B, ... 12Z, 12AA) and
assignments ``<recordTracking><n>`` (12A1, 12A2, ...). Each new number follows the
most recently created sibling that still exists.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from washline.models import MachineAssignment, OrderRecord


def next_letters(last: str | None) -> str:
    """A -> B, Z -> AA, AZ -> BA."""
    if not last:
        return "A"
    chars = list(last)
    i = len(chars) - 1
    while i >= 0:
        if chars[i] != "Z":
            chars[i] = chr(ord(chars[i]) + 1)
            return "".join(chars)
        chars[i] = "A"
        i -= 1
    return "A" + "".join(chars)


def record_tracking_number(order_id: int, last: str | None) -> str:
    prefix = str(order_id)
    suffix = last[len(prefix):] if last and last.startswith(prefix) else None
    if suffix and not (suffix.isalpha() and suffix.isupper()):
        suffix = None
    return f"{prefix}{next_letters(suffix)}"


def assignment_tracking_number(record_tracking: str, last: str | None) -> str:
    suffix = last[len(record_tracking):] if last and last.startswith(record_tracking) else ""
    n = int(suffix) + 1 if suffix.isdigit() else 1
    return f"{record_tracking}{n}"


async def next_record_tracking_number(db: AsyncSession, order_id: int) -> str:
    last = (
        await db.execute(
            select(OrderRecord.tracking_number)
            .where(OrderRecord.order_id == order_id, OrderRecord.tracking_number.is_not(None))
            .order_by(OrderRecord.id.desc())
            .limit(1)
        )
    ).scalar_one_or_none()
    return record_tracking_number(order_id, last)


async def next_assignment_tracking_number(db: AsyncSession, record: OrderRecord) -> str:
    prefix = record.tracking_number or str(record.id)
    last = (
        await db.execute(
            select(MachineAssignment.tracking_number)
            .where(MachineAssignment.record_id == record.id, MachineAssignment.tracking_number.is_not(None))
            .order_by(MachineAssignment.id.desc())
            .limit(1)
        )
    ).scalar_one_or_none()
    return assignment_tracking_number(prefix, last)

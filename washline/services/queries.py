"""Washline — Shared row loaders and quantity sums used by the services.

``lock=True`` issues SELECT ... FOR UPDATE so a conservation check and the write
it guards see the same parent row. Loaders always refresh from the database.
"""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from washline.core.errors import NotFoundError
from washline.models import AssignmentStatus, MachineAssignment, Order, OrderRecord


async def load_order(db: AsyncSession, order_id: int, *, lock: bool = False) -> Order:
    stmt = select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
    if lock:
        stmt = stmt.with_for_update()
    order = (await db.execute(stmt)).scalar_one_or_none()
    if order is None:
        raise NotFoundError("Order not found")
    return order


async def load_record(db: AsyncSession, record_id: int, *, lock: bool = False) -> OrderRecord:
    stmt = select(OrderRecord).where(OrderRecord.id == record_id).execution_options(populate_existing=True)
    if lock:
        stmt = stmt.with_for_update()
    record = (await db.execute(stmt)).scalar_one_or_none()
    if record is None:
        raise NotFoundError("Record not found")
    return record


async def load_assignment(db: AsyncSession, assignment_id: int) -> MachineAssignment:
    stmt = (
        select(MachineAssignment)
        .where(MachineAssignment.id == assignment_id)
        .execution_options(populate_existing=True)
    )
    assignment = (await db.execute(stmt)).scalar_one_or_none()
    if assignment is None:
        raise NotFoundError("Assignment not found")
    return assignment


async def records_for_order(db: AsyncSession, order_id: int) -> list[OrderRecord]:
    result = await db.execute(
        select(OrderRecord).where(OrderRecord.order_id == order_id).order_by(OrderRecord.id)
    )
    return list(result.scalars().all())


async def assignments_for_record(db: AsyncSession, record_id: int) -> list[MachineAssignment]:
    result = await db.execute(
        select(MachineAssignment).where(MachineAssignment.record_id == record_id).order_by(MachineAssignment.id)
    )
    return list(result.scalars().all())


async def assignments_for_order(db: AsyncSession, order_id: int) -> list[MachineAssignment]:
    result = await db.execute(
        select(MachineAssignment).where(MachineAssignment.order_id == order_id).order_by(MachineAssignment.id)
    )
    return list(result.scalars().all())


async def records_quantity(db: AsyncSession, order_id: int, exclude_record_id: int | None = None) -> int:
    """Sum of record quantities on an order, optionally leaving one record out."""
    stmt = select(func.coalesce(func.sum(OrderRecord.quantity), 0)).where(OrderRecord.order_id == order_id)
    if exclude_record_id is not None:
        stmt = stmt.where(OrderRecord.id != exclude_record_id)
    return int((await db.execute(stmt)).scalar_one())


async def assigned_quantity(db: AsyncSession, record_id: int, exclude_assignment_id: int | None = None) -> int:
    """Sum of non-cancelled assignment quantities on a record."""
    stmt = select(func.coalesce(func.sum(MachineAssignment.quantity), 0)).where(
        MachineAssignment.record_id == record_id,
        MachineAssignment.status != AssignmentStatus.CANCELLED.value,
    )
    if exclude_assignment_id is not None:
        stmt = stmt.where(MachineAssignment.id != exclude_assignment_id)
    return int((await db.execute(stmt)).scalar_one())

"""Washline — MachineAssignmentService: hand record quantity to worker/machine pairs."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from washline.core.errors import ConflictError, ValidationError
from washline.db.base import utcnow
from washline.db.transaction import run_in_transaction
from washline.models import AssignmentStatus, MachineAssignment, Order, OrderRecord, RecordStatus
from washline.schemas.machine_assignment import AssignmentCreate, AssignmentUpdate
from washline.services import reconciliation
from washline.services.queries import (
    assigned_quantity,
    assignments_for_record,
    load_assignment,
    load_order,
    load_record,
)
from washline.services.status_service import StatusService
from washline.services.tracking import next_assignment_tracking_number

logger = logging.getLogger(__name__)

_ACTIVE = {AssignmentStatus.IN_PROGRESS.value, AssignmentStatus.COMPLETED.value}


def _ensure_belongs(assignment: MachineAssignment, record_id: int) -> None:
    if assignment.record_id != record_id:
        raise ValidationError("Assignment does not belong to this record")


async def _lock_order_and_record(session: AsyncSession, record_id: int) -> tuple[Order, OrderRecord]:
    """Lock the order row, then the record row, matching the order record writes use."""
    record = await load_record(session, record_id)
    order = await load_order(session, record.order_id, lock=True)
    record = await load_record(session, record_id, lock=True)
    return order, record


class MachineAssignmentService:
    """
    Every write locks the owning order row and then the parent record row before
    re-reading the assigned total, so two concurrent assignments can never
    oversubscribe a record. Record writes take the same two locks in the same order.
    """

    @staticmethod
    async def create(db: AsyncSession, record_id: int, data: AssignmentCreate) -> MachineAssignment:
        async def _create(session: AsyncSession) -> MachineAssignment:
            order, record = await _lock_order_and_record(session, record_id)
            other = await assigned_quantity(session, record.id)
            try:
                reconciliation.check_record_capacity(record.quantity, other, data.quantity)
            except ConflictError as exc:
                logger.warning("Assignment rejected on record %s: %s", record_id, exc.message)
                raise

            assignment = MachineAssignment(
                record_id=record.id,
                order_id=record.order_id,
                assigned_by_id=data.assigned_by_id,
                quantity=data.quantity,
                washing_machine=data.washing_machine,
                drying_machine=data.drying_machine,
                status=AssignmentStatus.IN_PROGRESS.value,
                assigned_at=utcnow(),
                tracking_number=await next_assignment_tracking_number(session, record),
            )
            session.add(assignment)
            await session.flush()
            # A record left Complete by an earlier cancellation has open work again
            if record.status == RecordStatus.COMPLETE.value:
                await StatusService.refresh_record(session, record)
                await StatusService.refresh_order(session, order)
            logger.info(
                "Assignment %s (%s) created on record %s, qty=%s",
                assignment.id, assignment.tracking_number, record_id, assignment.quantity,
            )
            return assignment

        return await run_in_transaction(db, _create)

    @staticmethod
    async def list_for_record(
        db: AsyncSession, record_id: int, page: int = 1, limit: int = 20
    ) -> tuple[list[MachineAssignment], int]:
        await load_record(db, record_id)
        total = (
            await db.execute(select(func.count(MachineAssignment.id)).where(MachineAssignment.record_id == record_id))
        ).scalar_one()
        result = await db.execute(
            select(MachineAssignment)
            .where(MachineAssignment.record_id == record_id)
            .order_by(MachineAssignment.assigned_at.desc(), MachineAssignment.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def get(db: AsyncSession, record_id: int, assignment_id: int) -> MachineAssignment:
        assignment = await load_assignment(db, assignment_id)
        _ensure_belongs(assignment, record_id)
        return assignment

    @staticmethod
    async def update(
        db: AsyncSession, record_id: int, assignment_id: int, data: AssignmentUpdate
    ) -> MachineAssignment:
        """
        Patch an assignment. Status changes cascade upward:
          Completed -> In Progress  record forced back to Pending, order re-derived
          -> Completed              record re-derived, then order
        A quantity change on a Completed assignment re-derives the record and
        order too, as does any live assignment on a record still marked Complete.
        Anything else is stored without touching parent statuses.
        """
        changes = data.model_dump(exclude_unset=True)
        new_status = changes.pop("status", None)
        if new_status is not None:
            new_status = new_status.value
        for field in ("assigned_by_id", "quantity"):
            if changes.get(field, 0) is None:
                changes.pop(field)

        async def _update(session: AsyncSession) -> MachineAssignment:
            order, record = await _lock_order_and_record(session, record_id)
            assignment = await load_assignment(session, assignment_id)
            _ensure_belongs(assignment, record_id)
            previous_status = assignment.status

            quantity = changes.get("quantity", assignment.quantity)
            reactivated = previous_status == AssignmentStatus.CANCELLED.value and new_status in _ACTIVE
            stays_active = previous_status in _ACTIVE and new_status != AssignmentStatus.CANCELLED.value
            if reactivated or (stays_active and "quantity" in changes):
                other = await assigned_quantity(session, record.id, exclude_assignment_id=assignment.id)
                try:
                    reconciliation.check_record_capacity(record.quantity, other, quantity)
                except ConflictError as exc:
                    logger.warning("Assignment %s update rejected: %s", assignment_id, exc.message)
                    raise

            for field, value in changes.items():
                setattr(assignment, field, value)

            if new_status is not None:
                assignment.status = new_status
                if new_status == AssignmentStatus.COMPLETED.value:
                    if previous_status != AssignmentStatus.COMPLETED.value or assignment.completed_at is None:
                        assignment.completed_at = utcnow()
                elif previous_status == AssignmentStatus.COMPLETED.value:
                    assignment.completed_at = None
            await session.flush()

            now_completed = assignment.status == AssignmentStatus.COMPLETED.value
            if previous_status == AssignmentStatus.COMPLETED.value and new_status == AssignmentStatus.IN_PROGRESS.value:
                await StatusService.refresh_record(session, record, force=RecordStatus.PENDING)
                await StatusService.refresh_order(session, order)
            elif (
                new_status == AssignmentStatus.COMPLETED.value
                or (now_completed and "quantity" in changes)
                or (assignment.status in _ACTIVE and record.status == RecordStatus.COMPLETE.value)
            ):
                await StatusService.refresh_record(session, record)
                await StatusService.refresh_order(session, order)
            return assignment

        return await run_in_transaction(db, _update)

    @staticmethod
    async def complete(db: AsyncSession, record_id: int, assignment_id: int) -> MachineAssignment:
        return await MachineAssignmentService.update(
            db, record_id, assignment_id, AssignmentUpdate(status=AssignmentStatus.COMPLETED)
        )

    @staticmethod
    async def delete(db: AsyncSession, record_id: int, assignment_id: int) -> None:
        """Remove the assignment only. Record and order statuses are left as they are."""

        async def _delete(session: AsyncSession) -> None:
            await _lock_order_and_record(session, record_id)
            assignment = await load_assignment(session, assignment_id)
            _ensure_belongs(assignment, record_id)
            await session.delete(assignment)
            await session.flush()
            logger.info("Assignment %s deleted from record %s", assignment_id, record_id)

        await run_in_transaction(db, _delete)

    @staticmethod
    async def get_record_stats(db: AsyncSession, record_id: int) -> dict:
        record: OrderRecord = await load_record(db, record_id)
        assignments = await assignments_for_record(db, record_id)
        return reconciliation.record_stats(record.quantity, assignments)

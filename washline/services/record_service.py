"""Washline — OrderRecordService: split an order's quantity into wash/process batches."""
import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from washline.core.errors import ConflictError, ValidationError
from washline.db.transaction import run_in_transaction
from washline.models import MachineAssignment, Order, OrderRecord, RecordStatus
from washline.schemas.order_record import OrderRecordCreate, OrderRecordUpdate
from washline.services import reconciliation
from washline.services.queries import (
    assigned_quantity,
    assignments_for_record,
    load_order,
    load_record,
    records_for_order,
    records_quantity,
)
from washline.services.status_service import StatusService
from washline.services.tracking import next_record_tracking_number

logger = logging.getLogger(__name__)

# Columns a patch may not null out
_REQUIRED_FIELDS = {"quantity", "wash_type", "process_types"}


def _ensure_belongs(record: OrderRecord, order_id: int) -> None:
    if record.order_id != order_id:
        raise ValidationError("Record does not belong to this order")


class OrderRecordService:
    """Record writes lock the parent order row, so concurrent records cannot overfill an order."""

    @staticmethod
    async def bulk_create(db: AsyncSession, order: Order, records: list[OrderRecordCreate]) -> list[OrderRecord]:
        """
        Insert several records for an already-locked order inside the caller's
        transaction. The combined quantity must fit into what the order has left.
        """
        requested = sum(r.quantity for r in records)
        other = await records_quantity(db, order.id)
        reconciliation.check_order_capacity(order.quantity, other, requested)

        created = []
        for data in records:
            record = OrderRecord(
                order_id=order.id,
                item_id=data.item_id,
                quantity=data.quantity,
                wash_type=data.wash_type.value,
                process_types=[p.value for p in data.process_types],
                status=RecordStatus.PENDING.value,
                damage_count=0,
                tracking_number=await next_record_tracking_number(db, order.id),
            )
            db.add(record)
            # Flush per record so the next tracking number sees this one
            await db.flush()
            created.append(record)
        return created

    @staticmethod
    async def create(db: AsyncSession, order_id: int, data: OrderRecordCreate) -> OrderRecord:
        async def _create(session: AsyncSession) -> OrderRecord:
            order = await load_order(session, order_id, lock=True)
            try:
                [record] = await OrderRecordService.bulk_create(session, order, [data])
            except ConflictError as exc:
                logger.warning("Record rejected on order %s: %s", order_id, exc.message)
                raise
            await StatusService.refresh_order(session, order)
            logger.info("Record %s (%s) created on order %s, qty=%s", record.id, record.tracking_number, order_id, record.quantity)
            return record

        return await run_in_transaction(db, _create)

    @staticmethod
    async def get(db: AsyncSession, record_id: int) -> OrderRecord:
        return await load_record(db, record_id)

    @staticmethod
    async def list_for_order(db: AsyncSession, order_id: int) -> list[OrderRecord]:
        await load_order(db, order_id)
        return await records_for_order(db, order_id)

    @staticmethod
    async def update(db: AsyncSession, order_id: int, record_id: int, data: OrderRecordUpdate) -> OrderRecord:
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True, mode="json").items()
            if value is not None or field not in _REQUIRED_FIELDS
        }

        async def _update(session: AsyncSession) -> OrderRecord:
            order = await load_order(session, order_id, lock=True)
            record = await load_record(session, record_id, lock=True)
            _ensure_belongs(record, order_id)

            if "quantity" in changes:
                new_quantity = changes["quantity"]
                other = await records_quantity(session, order_id, exclude_record_id=record.id)
                assigned = await assigned_quantity(session, record.id)
                try:
                    reconciliation.check_order_capacity(order.quantity, other, new_quantity)
                    if new_quantity < assigned:
                        raise ConflictError(f"Quantity cannot be less than assigned quantity ({assigned})")
                except ConflictError as exc:
                    logger.warning("Record %s update rejected: %s", record_id, exc.message)
                    raise

            for field, value in changes.items():
                setattr(record, field, value)
            await session.flush()

            await StatusService.refresh_record(session, record)
            await StatusService.refresh_order(session, order)
            return record

        return await run_in_transaction(db, _update)

    @staticmethod
    async def delete(db: AsyncSession, order_id: int, record_id: int) -> None:
        async def _delete(session: AsyncSession) -> None:
            order = await load_order(session, order_id, lock=True)
            record = await load_record(session, record_id, lock=True)
            _ensure_belongs(record, order_id)
            await session.execute(delete(MachineAssignment).where(MachineAssignment.record_id == record.id))
            await session.delete(record)
            await session.flush()
            await StatusService.refresh_order(session, order)
            logger.info("Record %s deleted from order %s", record_id, order_id)

        await run_in_transaction(db, _delete)

    @staticmethod
    async def is_complete(db: AsyncSession, record_id: int) -> bool:
        record = await load_record(db, record_id)
        assignments = await assignments_for_record(db, record_id)
        return reconciliation.is_record_complete(record.quantity, assignments)

    @staticmethod
    async def get_remaining_quantity(db: AsyncSession, record_id: int) -> int:
        record = await load_record(db, record_id)
        return reconciliation.remaining_quantity(record.quantity, await assigned_quantity(db, record_id))

    @staticmethod
    async def refresh_status(db: AsyncSession, record_id: int, force: RecordStatus | None = None) -> OrderRecord:
        """Write the derived (or forced) record status and re-derive its order."""

        async def _refresh(session: AsyncSession) -> OrderRecord:
            record = await load_record(session, record_id)
            order = await load_order(session, record.order_id, lock=True)
            record = await load_record(session, record_id, lock=True)
            await StatusService.refresh_record(session, record, force=force)
            await StatusService.refresh_order(session, order)
            return record

        return await run_in_transaction(db, _refresh)

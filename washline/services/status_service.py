"""Washline — StatusService: writes derived record/order statuses back to the database."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from washline.models import Order, OrderRecord, RecordStatus
from washline.services import reconciliation
from washline.services.queries import assignments_for_record, records_for_order

logger = logging.getLogger(__name__)


class StatusService:
    """Runs inside the caller's transaction; never commits."""

    @staticmethod
    async def refresh_record(db: AsyncSession, record: OrderRecord, force: RecordStatus | None = None) -> str:
        if force is not None:
            new_status = force.value
        else:
            assignments = await assignments_for_record(db, record.id)
            new_status = reconciliation.derive_record_status(record.quantity, assignments)
        if new_status != record.status:
            logger.info("Record %s status %s -> %s", record.id, record.status, new_status)
            record.status = new_status
            await db.flush()
        return new_status

    @staticmethod
    async def refresh_order(db: AsyncSession, order: Order) -> str:
        records = await records_for_order(db, order.id)
        new_status = reconciliation.derive_order_status(order.status, order.quantity, records)
        if new_status != order.status:
            logger.info("Order %s status %s -> %s", order.id, order.status, new_status)
            order.status = new_status
            await db.flush()
        return new_status

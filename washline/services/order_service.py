"""Washline — OrderService: order lifecycle, details read model, damage reporting."""
import logging
import math

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from washline.core.errors import ConflictError, ValidationError
from washline.db.transaction import run_in_transaction
from washline.models import AssignmentStatus, MachineAssignment, Order, OrderRecord, OrderStatus, RecordStatus
from washline.schemas.order import DamageEntry, OrderCreate, OrderUpdate
from washline.services import reconciliation
from washline.services.queries import (
    assignments_for_order,
    load_order,
    records_for_order,
    records_quantity,
)
from washline.services.record_service import OrderRecordService
from washline.services.status_service import StatusService

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "ORD"


class OrderService:
    """Order writes take a row lock on the order so record writes queue behind them."""

    @staticmethod
    async def generate_reference_number(db: AsyncSession) -> str:
        """Next ORDnnn after the most recently created generated reference."""
        last = (
            await db.execute(
                select(Order.reference_no)
                .where(Order.reference_no.like(f"{REFERENCE_PREFIX}%"))
                .order_by(Order.id.desc())
                .limit(1)
            )
        ).scalar_one_or_none()
        digits = last[len(REFERENCE_PREFIX):] if last else ""
        n = int(digits) + 1 if digits.isdigit() else 1
        return f"{REFERENCE_PREFIX}{n:03d}"

    @staticmethod
    async def _ensure_reference_free(db: AsyncSession, reference_no: str, exclude_id: int | None = None) -> None:
        stmt = select(Order.id).where(Order.reference_no == reference_no)
        if exclude_id is not None:
            stmt = stmt.where(Order.id != exclude_id)
        if (await db.execute(stmt)).first() is not None:
            raise ConflictError(f"Reference number {reference_no} already exists")

    @staticmethod
    async def create(db: AsyncSession, data: OrderCreate) -> Order:
        """Create an order, optionally with its initial records, in one transaction."""
        requested = sum(r.quantity for r in data.records)
        if requested > data.quantity:
            raise ValidationError(
                "Total record quantity exceeds order quantity",
                errors={"records": f"Total record quantity ({requested}) exceeds order quantity ({data.quantity})"},
            )

        async def _create(session: AsyncSession) -> Order:
            if data.reference_no:
                reference_no = data.reference_no
                await OrderService._ensure_reference_free(session, reference_no)
            else:
                reference_no = await OrderService.generate_reference_number(session)

            order = Order(
                reference_no=reference_no,
                customer_id=data.customer_id,
                date=data.date,
                quantity=data.quantity,
                delivery_date=data.delivery_date,
                notes=data.notes,
                status=OrderStatus.PENDING.value,
                delivery_quantity=0,
            )
            session.add(order)
            await session.flush()

            if data.records:
                await OrderRecordService.bulk_create(session, order, data.records)
            await StatusService.refresh_order(session, order)
            logger.info("Order %s (%s) created, qty=%s, records=%s", order.id, reference_no, order.quantity, len(data.records))
            return order

        return await run_in_transaction(db, _create)

    @staticmethod
    async def get(db: AsyncSession, order_id: int) -> Order:
        return await load_order(db, order_id)

    @staticmethod
    async def list_orders(
        db: AsyncSession,
        status: OrderStatus | None = None,
        customer_id: str | None = None,
        search: str | None = None,
        exclude_delivered: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Order], int]:
        """Paginated order list, newest first. Returns (orders, total_count)."""
        filters = []
        if status is not None:
            filters.append(Order.status == status.value)
        if customer_id:
            filters.append(Order.customer_id == customer_id)
        if search:
            pattern = f"%{search}%"
            filters.append(or_(Order.reference_no.ilike(pattern), Order.customer_id.ilike(pattern)))
        if exclude_delivered:
            filters.append(Order.status != OrderStatus.DELIVERED.value)

        total = (await db.execute(select(func.count(Order.id)).where(*filters))).scalar_one()
        result = await db.execute(
            select(Order)
            .where(*filters)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    def page_count(total: int, limit: int) -> int:
        return math.ceil(total / limit) if limit else 0

    @staticmethod
    async def get_details(db: AsyncSession, order_id: int) -> dict:
        """Order with its records, their assignments and per-record stats, plus an order summary."""
        order = await load_order(db, order_id)
        records = await records_for_order(db, order_id)
        assignments = await assignments_for_order(db, order_id)
        by_record: dict[int, list[MachineAssignment]] = {r.id: [] for r in records}
        for a in assignments:
            by_record.setdefault(a.record_id, []).append(a)

        record_views = []
        totals = {"assigned": 0, "completed": 0, "returned": 0, "damage": 0, "output": 0}
        for record in records:
            record_assignments = by_record[record.id]
            stats = reconciliation.record_stats(record.quantity, record_assignments)
            returned = reconciliation.return_quantity(record_assignments)
            output = reconciliation.actual_output(returned, record.damage_count)
            completed = sum(
                a.quantity for a in record_assignments if a.status == AssignmentStatus.COMPLETED.value
            )
            totals["assigned"] += stats["assigned_quantity"]
            totals["completed"] += completed
            totals["returned"] += returned
            totals["damage"] += record.damage_count
            totals["output"] += output
            record_views.append({
                "record": record,
                "assignments": record_assignments,
                "stats": stats,
                "return_quantity": returned,
                "actual_output": output,
            })

        allocated = sum(r.quantity for r in records)
        summary = {
            "total_quantity": order.quantity,
            "allocated_quantity": allocated,
            "unallocated_quantity": reconciliation.remaining_quantity(order.quantity, allocated),
            "assigned_quantity": totals["assigned"],
            "completed_quantity": totals["completed"],
            "return_quantity": totals["returned"],
            "damage_count": totals["damage"],
            "actual_output": totals["output"],
            "completion_percentage": reconciliation.completion_percentage(totals["completed"], order.quantity),
            "total_records": len(records),
            "completed_records": sum(1 for r in records if r.status == RecordStatus.COMPLETE.value),
        }
        return {"order": order, "records": record_views, "summary": summary}

    @staticmethod
    async def update(db: AsyncSession, order_id: int, data: OrderUpdate) -> Order:
        """
        Patch an order. ``delivery_quantity`` is added to the stored value.
        Quantity may only shrink down to what the records already use, and an
        explicit Complete is refused unless the records actually complete it.
        """
        changes = data.model_dump(exclude_unset=True)
        delivery_delta = changes.pop("delivery_quantity", None)
        requested_status = changes.pop("status", None)

        async def _update(session: AsyncSession) -> Order:
            order = await load_order(session, order_id, lock=True)

            if changes.get("reference_no"):
                await OrderService._ensure_reference_free(session, changes["reference_no"], exclude_id=order.id)

            if changes.get("quantity") is not None:
                used = await records_quantity(session, order.id)
                if changes["quantity"] < used:
                    logger.warning("Order %s quantity reduction to %s rejected, records use %s", order.id, changes["quantity"], used)
                    raise ConflictError(f"Quantity cannot be less than total record quantity (minimum {used})")

            for field, value in changes.items():
                if value is None and field != "notes":
                    continue
                setattr(order, field, value)

            if delivery_delta:
                order.delivery_quantity = (order.delivery_quantity or 0) + delivery_delta

            if requested_status is not None:
                target = requested_status.value
                if target == OrderStatus.COMPLETE.value:
                    records = await records_for_order(session, order.id)
                    derived = reconciliation.derive_order_status(OrderStatus.PENDING.value, order.quantity, records)
                    if derived != OrderStatus.COMPLETE.value:
                        raise ConflictError("Order cannot be marked Complete until all records are complete")
                if target != order.status:
                    logger.info("Order %s status %s -> %s (explicit)", order.id, order.status, target)
                order.status = target
                await session.flush()
            else:
                await session.flush()
                # Quantity changes can complete or un-complete an order
                await StatusService.refresh_order(session, order)
            return order

        return await run_in_transaction(db, _update)

    @staticmethod
    async def delete(db: AsyncSession, order_id: int) -> None:
        """Remove the order with all its records and assignments, all or nothing."""

        async def _delete(session: AsyncSession) -> None:
            order = await load_order(session, order_id, lock=True)
            await session.execute(delete(MachineAssignment).where(MachineAssignment.order_id == order.id))
            await session.execute(delete(OrderRecord).where(OrderRecord.order_id == order.id))
            await session.delete(order)
            await session.flush()
            logger.info("Order %s (%s) deleted", order_id, order.reference_no)

        await run_in_transaction(db, _delete)

    @staticmethod
    async def derive_status(db: AsyncSession, order_id: int) -> Order:
        async def _derive(session: AsyncSession) -> Order:
            order = await load_order(session, order_id, lock=True)
            await StatusService.refresh_order(session, order)
            return order

        return await run_in_transaction(db, _derive)

    @staticmethod
    async def record_damage(db: AsyncSession, order_id: int, entries: list[DamageEntry]) -> Order:
        """
        Store per-record damage counts (absolute values). Quantities are never
        touched; a Complete order with any damage goes back to QC.
        """

        async def _record(session: AsyncSession) -> Order:
            order = await load_order(session, order_id, lock=True)
            records = {r.id: r for r in await records_for_order(session, order.id)}
            missing = [e.record_id for e in entries if e.record_id not in records]
            if missing:
                raise ValidationError(
                    "Records do not belong to this order",
                    errors={"records": f"Unknown record ids for order {order.id}: {missing}"},
                )
            for entry in entries:
                records[entry.record_id].damage_count = entry.damage_count
            if reconciliation.damage_forces_qc(order.status, [e.damage_count for e in entries]):
                logger.info("Order %s moved to QC after damage report", order.id)
                order.status = OrderStatus.QC.value
            await session.flush()
            return order

        return await run_in_transaction(db, _record)

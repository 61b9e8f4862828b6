"""Washline — DashboardService: plant-wide counters, Redis cache-aside."""
import json
import logging

import redis.asyncio as redis
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from washline.config import get_settings
from washline.core.redis import DASHBOARD_CACHE_KEY
from washline.models import AssignmentStatus, MachineAssignment, Order, OrderRecord, OrderStatus

logger = logging.getLogger(__name__)


class DashboardService:
    """Summary is served from Redis for DASHBOARD_CACHE_TTL seconds, then recomputed."""

    @staticmethod
    async def get_summary(db: AsyncSession, r: redis.Redis) -> dict:
        cached = await r.get(DASHBOARD_CACHE_KEY)
        if cached is not None:
            return json.loads(cached)

        summary = await DashboardService.compute_summary(db)
        await r.setex(DASHBOARD_CACHE_KEY, get_settings().DASHBOARD_CACHE_TTL, json.dumps(summary))
        return summary

    @staticmethod
    async def compute_summary(db: AsyncSession) -> dict:
        rows = (await db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status))).all()
        by_status = {s.value: 0 for s in OrderStatus}
        by_status.update({status: count for status, count in rows})

        order_totals = (
            await db.execute(
                select(
                    func.coalesce(func.sum(Order.quantity), 0),
                    func.coalesce(func.sum(Order.delivery_quantity), 0),
                )
            )
        ).one()
        assignment_rows = (
            await db.execute(
                select(MachineAssignment.status, func.count(MachineAssignment.id)).group_by(MachineAssignment.status)
            )
        ).all()
        assignment_counts = dict(assignment_rows)
        damage = (await db.execute(select(func.coalesce(func.sum(OrderRecord.damage_count), 0)))).scalar_one()

        logger.debug("Dashboard summary recomputed")
        return {
            "total_orders": sum(by_status.values()),
            "orders_by_status": by_status,
            "total_order_quantity": int(order_totals[0]),
            "delivered_quantity": int(order_totals[1]),
            "active_assignments": assignment_counts.get(AssignmentStatus.IN_PROGRESS.value, 0),
            "completed_assignments": assignment_counts.get(AssignmentStatus.COMPLETED.value, 0),
            "total_damage": int(damage),
        }

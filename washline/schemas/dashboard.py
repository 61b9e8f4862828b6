"""Washline — Dashboard schemas."""
from washline.schemas.common import CamelModel


class DashboardSummary(CamelModel):
    total_orders: int
    orders_by_status: dict[str, int]
    total_order_quantity: int
    delivered_quantity: int
    active_assignments: int
    completed_assignments: int
    total_damage: int

"""Washline — API v1 router aggregation."""
from fastapi import APIRouter

from washline.api.v1.endpoints import assignments, dashboard, orders, records

api_router = APIRouter()

api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(records.router, prefix="/orders/{order_id}", tags=["records"])
api_router.include_router(records.record_router, prefix="/records/{record_id}", tags=["records"])
api_router.include_router(assignments.router, prefix="/records/{record_id}", tags=["assignments"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])

"""Washline — OrderRecord endpoints, nested under /orders/{order_id}, plus GET /records/{record_id}."""
from fastapi import APIRouter, status

from washline.api.deps import DbSession
from washline.schemas.common import ApiResponse
from washline.schemas.order import DamageRequest, OrderResponse
from washline.schemas.order_record import (
    OrderRecordCreate,
    OrderRecordResponse,
    OrderRecordUpdate,
    OrderRecordWithRemaining,
)
from washline.services.order_service import OrderService
from washline.services.record_service import OrderRecordService

router = APIRouter()
record_router = APIRouter()


@router.get("/records", response_model=ApiResponse[list[OrderRecordResponse]])
async def list_records(order_id: int, db: DbSession):
    records = await OrderRecordService.list_for_order(db, order_id)
    return ApiResponse(data=[OrderRecordResponse.model_validate(r) for r in records])


@router.post("/records", response_model=ApiResponse[OrderRecordResponse], status_code=status.HTTP_201_CREATED)
async def create_record(order_id: int, body: OrderRecordCreate, db: DbSession):
    """Split part of the order quantity into a new record."""
    record = await OrderRecordService.create(db, order_id, body)
    return ApiResponse(data=OrderRecordResponse.model_validate(record), message="Record created successfully")


@router.put("/records/{record_id}", response_model=ApiResponse[OrderRecordResponse])
async def update_record(order_id: int, record_id: int, body: OrderRecordUpdate, db: DbSession):
    record = await OrderRecordService.update(db, order_id, record_id, body)
    return ApiResponse(data=OrderRecordResponse.model_validate(record), message="Record updated successfully")


@router.delete("/records/{record_id}", response_model=ApiResponse[None])
async def delete_record(order_id: int, record_id: int, db: DbSession):
    """Delete a record and its assignments."""
    await OrderRecordService.delete(db, order_id, record_id)
    return ApiResponse(message="Record deleted successfully")


@router.post("/damage-records", response_model=ApiResponse[OrderResponse])
async def record_damage(order_id: int, body: DamageRequest, db: DbSession):
    """Set damage counts on the order's records. Complete orders with damage move to QC."""
    order = await OrderService.record_damage(db, order_id, body.records)
    return ApiResponse(data=OrderResponse.model_validate(order), message="Damage records saved")


@record_router.get("", response_model=ApiResponse[OrderRecordWithRemaining])
async def get_record(record_id: int, db: DbSession):
    record = await OrderRecordService.get(db, record_id)
    remaining = await OrderRecordService.get_remaining_quantity(db, record_id)
    return ApiResponse(
        data=OrderRecordWithRemaining(
            **OrderRecordResponse.model_validate(record).model_dump(),
            remaining_quantity=remaining,
        )
    )

"""Washline — Order endpoints. GET /orders, POST, GET/{id}, GET/{id}/details, PUT, DELETE."""
from fastapi import APIRouter, Query, status

from washline.api.deps import DbSession, Limit, Page
from washline.models import PROCESS_TYPE_LABELS, WASH_TYPE_LABELS, OrderStatus
from washline.schemas.common import ApiResponse, Pagination
from washline.schemas.order import (
    OrderCreate,
    OrderDetails,
    OrderResponse,
    OrderSummary,
    OrderUpdate,
    TypeOption,
)
from washline.schemas.machine_assignment import AssignmentResponse, RecordStats
from washline.schemas.order_record import OrderRecordDetail, OrderRecordResponse
from washline.services.order_service import OrderService

router = APIRouter()


def _record_detail(view: dict) -> OrderRecordDetail:
    return OrderRecordDetail(
        **OrderRecordResponse.model_validate(view["record"]).model_dump(),
        assignments=[AssignmentResponse.model_validate(a) for a in view["assignments"]],
        stats=RecordStats(**view["stats"]),
        return_quantity=view["return_quantity"],
        actual_output=view["actual_output"],
    )


@router.get("", response_model=ApiResponse[list[OrderResponse]])
async def list_orders(
    db: DbSession,
    status_filter: OrderStatus | None = Query(None, alias="status"),
    customer_id: str | None = Query(None, alias="customerId"),
    search: str | None = None,
    exclude_delivered: bool = Query(False, alias="excludeDelivered"),
    page: Page = 1,
    limit: Limit = 20,
):
    """List orders, newest first."""
    orders, total = await OrderService.list_orders(
        db,
        status=status_filter,
        customer_id=customer_id,
        search=search,
        exclude_delivered=exclude_delivered,
        page=page,
        limit=limit,
    )
    return ApiResponse(
        data=[OrderResponse.model_validate(o) for o in orders],
        pagination=Pagination(page=page, limit=limit, total=total, pages=OrderService.page_count(total, limit)),
    )


@router.get("/wash-types", response_model=ApiResponse[list[TypeOption]])
async def list_wash_types():
    return ApiResponse(data=[TypeOption(code=t.value, label=label) for t, label in WASH_TYPE_LABELS.items()])


@router.get("/process-types", response_model=ApiResponse[list[TypeOption]])
async def list_process_types():
    return ApiResponse(data=[TypeOption(code=t.value, label=label) for t, label in PROCESS_TYPE_LABELS.items()])


@router.post("", response_model=ApiResponse[OrderResponse], status_code=status.HTTP_201_CREATED)
async def create_order(body: OrderCreate, db: DbSession):
    """Create an order, with optional initial records."""
    order = await OrderService.create(db, body)
    return ApiResponse(data=OrderResponse.model_validate(order), message="Order created successfully")


@router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
async def get_order(order_id: int, db: DbSession):
    order = await OrderService.get(db, order_id)
    return ApiResponse(data=OrderResponse.model_validate(order))


@router.get("/{order_id}/details", response_model=ApiResponse[OrderDetails])
async def get_order_details(order_id: int, db: DbSession):
    """Order with records, assignments, per-record stats and an order summary."""
    details = await OrderService.get_details(db, order_id)
    records = [_record_detail(view) for view in details["records"]]
    return ApiResponse(
        data=OrderDetails(
            order=OrderResponse.model_validate(details["order"]),
            records=records,
            summary=OrderSummary(**details["summary"]),
        )
    )


@router.put("/{order_id}", response_model=ApiResponse[OrderResponse])
async def update_order(order_id: int, body: OrderUpdate, db: DbSession):
    """Update an order. deliveryQuantity is added to the delivered count."""
    order = await OrderService.update(db, order_id, body)
    return ApiResponse(data=OrderResponse.model_validate(order), message="Order updated successfully")


@router.delete("/{order_id}", response_model=ApiResponse[None])
async def delete_order(order_id: int, db: DbSession):
    await OrderService.delete(db, order_id)
    return ApiResponse(message="Order deleted successfully")

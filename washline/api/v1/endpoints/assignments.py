"""Washline — MachineAssignment endpoints, nested under /records/{record_id}."""
from fastapi import APIRouter, status

from washline.api.deps import DbSession, Limit, Page
from washline.schemas.common import ApiResponse, Pagination
from washline.schemas.machine_assignment import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    RecordStats,
)
from washline.services.assignment_service import MachineAssignmentService
from washline.services.order_service import OrderService

router = APIRouter()


@router.get("/assignments", response_model=ApiResponse[list[AssignmentResponse]])
async def list_assignments(record_id: int, db: DbSession, page: Page = 1, limit: Limit = 20):
    assignments, total = await MachineAssignmentService.list_for_record(db, record_id, page=page, limit=limit)
    return ApiResponse(
        data=[AssignmentResponse.model_validate(a) for a in assignments],
        pagination=Pagination(page=page, limit=limit, total=total, pages=OrderService.page_count(total, limit)),
    )


@router.post("/assignments", response_model=ApiResponse[AssignmentResponse], status_code=status.HTTP_201_CREATED)
async def create_assignment(record_id: int, body: AssignmentCreate, db: DbSession):
    """Assign part of the record's remaining quantity to a machine."""
    assignment = await MachineAssignmentService.create(db, record_id, body)
    return ApiResponse(data=AssignmentResponse.model_validate(assignment), message="Assignment created successfully")


@router.get("/assignments/stats", response_model=ApiResponse[RecordStats])
async def get_record_stats(record_id: int, db: DbSession):
    stats = await MachineAssignmentService.get_record_stats(db, record_id)
    return ApiResponse(data=RecordStats(**stats))


@router.get("/assignments/{assignment_id}", response_model=ApiResponse[AssignmentResponse])
async def get_assignment(record_id: int, assignment_id: int, db: DbSession):
    assignment = await MachineAssignmentService.get(db, record_id, assignment_id)
    return ApiResponse(data=AssignmentResponse.model_validate(assignment))


@router.put("/assignments/{assignment_id}", response_model=ApiResponse[AssignmentResponse])
async def update_assignment(record_id: int, assignment_id: int, body: AssignmentUpdate, db: DbSession):
    """Update an assignment. Completing or reopening it cascades to record and order status."""
    assignment = await MachineAssignmentService.update(db, record_id, assignment_id, body)
    return ApiResponse(data=AssignmentResponse.model_validate(assignment), message="Assignment updated successfully")


@router.put("/assignments/{assignment_id}/complete", response_model=ApiResponse[AssignmentResponse])
@router.put("/assignments/{assignment_id}/completion", response_model=ApiResponse[AssignmentResponse])
async def complete_assignment(record_id: int, assignment_id: int, db: DbSession):
    assignment = await MachineAssignmentService.complete(db, record_id, assignment_id)
    return ApiResponse(data=AssignmentResponse.model_validate(assignment), message="Assignment completed")


@router.delete("/assignments/{assignment_id}", response_model=ApiResponse[None])
async def delete_assignment(record_id: int, assignment_id: int, db: DbSession):
    await MachineAssignmentService.delete(db, record_id, assignment_id)
    return ApiResponse(message="Assignment deleted successfully")

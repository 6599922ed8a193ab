from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import get_async_session
from hrms.models.shared.enums import LeaveStatus
from hrms.schemas.common.pagination import PaginatedResponse
from hrms.schemas.hr.leave_schema import (
    LeaveBalance,
    LeaveRequestCreate,
    LeaveRequestResponse,
    LeaveReview,
    LeaveTypeCreate,
    LeaveTypeResponse,
)
from hrms.services.hr.leave_service import LeaveService

router = APIRouter()

@router.get("/types", response_model=List[LeaveTypeResponse])
async def get_leave_types(session: AsyncSession = Depends(get_async_session)):
    service = LeaveService(session)
    return await service.get_leave_types()

@router.post("/types", response_model=LeaveTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_type(
    leave_type: LeaveTypeCreate,
    session: AsyncSession = Depends(get_async_session)
):
    service = LeaveService(session)
    return await service.create_leave_type(leave_type)

@router.post("/", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_leave_request(
    leave_request: LeaveRequestCreate,
    session: AsyncSession = Depends(get_async_session)
):
    """Submit a leave request; the employee's manager is notified"""
    service = LeaveService(session)
    return await service.submit_leave_request(leave_request)

@router.get("/", response_model=PaginatedResponse[LeaveRequestResponse])
async def get_leave_requests(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    employee_id: Optional[int] = Query(None),
    status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
    session: AsyncSession = Depends(get_async_session)
):
    service = LeaveService(session)
    return await service.get_leave_requests(
        page_index=page_index,
        page_size=page_size,
        employee_id=employee_id,
        status_filter=status_filter
    )

@router.get("/balance/{employee_id}", response_model=List[LeaveBalance])
async def get_leave_balances(
    employee_id: int,
    year: Optional[int] = Query(None, ge=2000, le=9999),
    session: AsyncSession = Depends(get_async_session)
):
    service = LeaveService(session)
    return await service.get_leave_balances(employee_id, year)

@router.put("/{request_id}/review", response_model=LeaveRequestResponse)
async def review_leave_request(
    request_id: int,
    review: LeaveReview,
    session: AsyncSession = Depends(get_async_session)
):
    """Approve or reject a pending request"""
    service = LeaveService(session)
    return await service.review_leave_request(request_id, review)

@router.put("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_leave_request(
    request_id: int,
    employee_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    service = LeaveService(session)
    return await service.cancel_leave_request(request_id, employee_id)

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.api.dependencies import get_current_user_id
from hrms.core.database import get_async_session
from hrms.models.shared.enums import EmployeeStatus
from hrms.schemas.common.pagination import PaginatedResponse
from hrms.schemas.hr.employee_code_schema import (
    EmployeeCodePattern,
    EmployeeCodePreview,
    EmployeeCodeValidationRequest,
    EmployeeCodeValidationResponse,
)
from hrms.schemas.hr.employee_schema import EmployeeCreate, EmployeeUpdate, EmployeeResponse, EmployeeStats
from hrms.services.hr.employee_code_service import EmployeeCodeService
from hrms.services.hr.employee_service import EmployeeService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee: EmployeeCreate,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Create an employee; the code is allocated from the pattern when omitted"""
    service = EmployeeService(session)
    return await service.create_employee(employee, current_user_id)

@router.get("/", response_model=PaginatedResponse[EmployeeResponse])
async def get_employees(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    department_id: Optional[int] = Query(None),
    status_filter: Optional[EmployeeStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    """Get all employees with filtering and pagination"""
    service = EmployeeService(session)
    return await service.get_employees(
        page_index=page_index,
        page_size=page_size,
        department_id=department_id,
        status_filter=status_filter,
        search=search
    )

@router.get("/stats", response_model=EmployeeStats)
async def get_employee_stats(session: AsyncSession = Depends(get_async_session)):
    service = EmployeeService(session)
    return await service.get_stats()

@router.get("/next-code", response_model=EmployeeCodePreview)
async def get_next_employee_code(session: AsyncSession = Depends(get_async_session)):
    """Preview the code the next employee would get"""
    service = EmployeeCodeService(session)
    pattern = await service.get_pattern()
    return EmployeeCodePreview(next_code=await service.get_next_code(pattern), pattern=pattern)

@router.get("/code-pattern", response_model=EmployeeCodePattern)
async def get_employee_code_pattern(session: AsyncSession = Depends(get_async_session)):
    service = EmployeeCodeService(session)
    return await service.get_pattern()

@router.put("/code-pattern", response_model=EmployeeCodePattern)
async def update_employee_code_pattern(
    pattern: EmployeeCodePattern,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = EmployeeCodeService(session)
    try:
        return await service.update_pattern(pattern, current_user_id)
    except Exception as e:
        await session.rollback()
        logger.error(f"Update code pattern error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update employee code pattern"
        )

@router.post("/validate-code", response_model=EmployeeCodeValidationResponse)
async def validate_employee_code(
    payload: EmployeeCodeValidationRequest,
    session: AsyncSession = Depends(get_async_session)
):
    """Check a manually entered code against the pattern and existing employees"""
    service = EmployeeCodeService(session)
    return await service.check_code(payload.code)

@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    """Get employee by ID"""
    service = EmployeeService(session)
    employee = await service.get_employee(employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee

@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    employee: EmployeeUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = EmployeeService(session)
    return await service.update_employee(employee_id, employee, current_user_id)

@router.delete("/{employee_id}")
async def delete_employee(
    employee_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Offboard an employee"""
    service = EmployeeService(session)
    deleted = await service.delete_employee(employee_id, current_user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Employee not found")
    return {"message": "Employee offboarded successfully"}

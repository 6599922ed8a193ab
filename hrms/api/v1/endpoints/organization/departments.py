from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.api.dependencies import get_current_user_id
from hrms.core.database import get_async_session
from hrms.schemas.organization.department_schema import DepartmentCreate, DepartmentResponse
from hrms.services.organization.department_service import DepartmentService

router = APIRouter()

@router.post("/", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_department(
    department: DepartmentCreate,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = DepartmentService(session)
    return await service.create_department(department, current_user_id)

@router.get("/", response_model=List[DepartmentResponse])
async def get_departments(
    is_active: Optional[bool] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    service = DepartmentService(session)
    return await service.get_departments(is_active)

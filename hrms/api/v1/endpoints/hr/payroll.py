from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import get_async_session
from hrms.models.shared.enums import PayrollStatus
from hrms.schemas.hr.payroll_schema import (
    PayrollBulkStatusUpdate,
    PayrollGenerateRequest,
    PayrollGenerateResponse,
    PayrollRecordResponse,
    PayrollStats,
    PayrollStatusUpdate,
    SalaryStructureCreate,
    SalaryStructureResponse,
)
from hrms.services.hr.payroll_service import PayrollService

router = APIRouter()

@router.get("/salary-structures", response_model=List[SalaryStructureResponse])
async def get_salary_structures(session: AsyncSession = Depends(get_async_session)):
    service = PayrollService(session)
    return await service.get_salary_structures()

@router.put("/salary-structures", response_model=SalaryStructureResponse)
async def upsert_salary_structure(
    structure: SalaryStructureCreate,
    session: AsyncSession = Depends(get_async_session)
):
    """Create or replace an employee's salary structure"""
    service = PayrollService(session)
    return await service.upsert_salary_structure(structure)

@router.post("/generate", response_model=PayrollGenerateResponse, status_code=status.HTTP_201_CREATED)
async def generate_payroll(
    payload: PayrollGenerateRequest,
    session: AsyncSession = Depends(get_async_session)
):
    """Draft one payroll record per salary structure"""
    service = PayrollService(session)
    count = await service.generate_payroll(payload.month, payload.year)
    return PayrollGenerateResponse(month=payload.month, year=payload.year, count=count)

@router.get("/stats", response_model=PayrollStats)
async def get_payroll_stats(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=9999),
    session: AsyncSession = Depends(get_async_session)
):
    service = PayrollService(session)
    return await service.get_stats(month, year)

@router.put("/bulk-status")
async def bulk_update_payroll_status(
    payload: PayrollBulkStatusUpdate,
    session: AsyncSession = Depends(get_async_session)
):
    service = PayrollService(session)
    updated = await service.bulk_update_status(payload.ids, payload.status)
    return {"updated": updated, "status": payload.status}

@router.get("/", response_model=List[PayrollRecordResponse])
async def get_payroll_records(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=9999),
    status_filter: Optional[PayrollStatus] = Query(None, alias="status"),
    session: AsyncSession = Depends(get_async_session)
):
    service = PayrollService(session)
    return await service.get_payroll_records(month, year, status_filter)

@router.put("/{record_id}/status", response_model=PayrollRecordResponse)
async def update_payroll_status(
    record_id: int,
    payload: PayrollStatusUpdate,
    session: AsyncSession = Depends(get_async_session)
):
    service = PayrollService(session)
    return await service.update_status(record_id, payload.status)

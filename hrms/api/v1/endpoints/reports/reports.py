from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import get_async_session
from hrms.schemas.report.attendance_report_schema import AttendanceReportSummary
from hrms.schemas.report.report_schema import AssetInventoryReport, LeaveBalanceReport, PayrollSummaryReport
from hrms.services.reports.report_service import ReportService

router = APIRouter()

@router.get("/attendance", response_model=AttendanceReportSummary)
async def get_attendance_report(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=9999),
    department_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    """Late arrivals and overtime per employee for a month"""
    service = ReportService(session)
    return await service.get_attendance_report(month, year, department_id)

@router.get("/leave-balance", response_model=LeaveBalanceReport)
async def get_leave_balance_report(
    year: Optional[int] = Query(None, ge=2000, le=9999),
    session: AsyncSession = Depends(get_async_session)
):
    service = ReportService(session)
    return await service.get_leave_balance_report(year)

@router.get("/payroll-summary", response_model=PayrollSummaryReport)
async def get_payroll_summary(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=9999),
    session: AsyncSession = Depends(get_async_session)
):
    service = ReportService(session)
    return await service.get_payroll_summary(month, year)

@router.get("/asset-inventory", response_model=AssetInventoryReport)
async def get_asset_inventory_report(session: AsyncSession = Depends(get_async_session)):
    """Every asset with its value, status and current holder"""
    service = ReportService(session)
    return await service.get_asset_inventory_report()

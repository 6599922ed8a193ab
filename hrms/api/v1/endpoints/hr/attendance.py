from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import get_async_session
from hrms.schemas.hr.attendance_schema import (
    AttendanceWithBreaksResponse,
    BreakRequest,
    ClockInRequest,
    ClockOutRequest,
)
from hrms.services.hr.attendance_service import AttendanceService

router = APIRouter()

@router.post("/clock-in", response_model=AttendanceWithBreaksResponse)
async def clock_in(
    payload: ClockInRequest,
    session: AsyncSession = Depends(get_async_session)
):
    """Start today's attendance record"""
    service = AttendanceService(session)
    return await service.clock_in(payload)

@router.post("/{record_id}/clock-out", response_model=AttendanceWithBreaksResponse)
async def clock_out(
    record_id: int,
    payload: ClockOutRequest,
    session: AsyncSession = Depends(get_async_session)
):
    """Close the record, ending any open break"""
    service = AttendanceService(session)
    return await service.clock_out(record_id, payload)

@router.post("/{record_id}/pause", response_model=AttendanceWithBreaksResponse)
async def pause_attendance(
    record_id: int,
    payload: BreakRequest,
    session: AsyncSession = Depends(get_async_session)
):
    service = AttendanceService(session)
    return await service.pause(record_id, payload)

@router.post("/{record_id}/resume", response_model=AttendanceWithBreaksResponse)
async def resume_attendance(
    record_id: int,
    payload: BreakRequest,
    session: AsyncSession = Depends(get_async_session)
):
    service = AttendanceService(session)
    return await service.resume(record_id, payload)

@router.get("/today/{employee_id}", response_model=Optional[AttendanceWithBreaksResponse])
async def get_today_attendance(
    employee_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    """Today's record, or an unclosed one from yesterday"""
    service = AttendanceService(session)
    return await service.get_today_attendance(employee_id)

@router.get("/", response_model=List[AttendanceWithBreaksResponse])
async def get_attendance(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=9999),
    employee_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    """Attendance records for a month"""
    service = AttendanceService(session)
    return await service.list_attendance(month, year, employee_id)

@router.get("/{record_id}", response_model=AttendanceWithBreaksResponse)
async def get_attendance_record(
    record_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = AttendanceService(session)
    record = await service.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Attendance record not found")
    return record

from fastapi import APIRouter, Depends, Query
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import get_async_session
from hrms.schemas.notification.notification_schema import NotificationResponse
from hrms.services.notification.notification_service import NotificationService

router = APIRouter()

@router.get("/employee/{employee_id}", response_model=List[NotificationResponse])
async def get_employee_notifications(
    employee_id: int,
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    session: AsyncSession = Depends(get_async_session)
):
    service = NotificationService(session)
    return await service.get_employee_notifications(employee_id, unread_only, limit)

@router.put("/employee/{employee_id}/read-all")
async def mark_all_notifications_read(
    employee_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = NotificationService(session)
    updated = await service.mark_all_read(employee_id)
    return {"updated": updated}

@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = NotificationService(session)
    return await service.mark_notification_read(notification_id)

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import get_async_session
from hrms.models.shared.enums import GoalStatus
from hrms.schemas.performance.goal_schema import GoalCreate, GoalResponse, GoalUpdate
from hrms.services.performance.goal_service import GoalService

router = APIRouter()

@router.post("/", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal: GoalCreate,
    session: AsyncSession = Depends(get_async_session)
):
    service = GoalService(session)
    return await service.create_goal(goal)

@router.get("/", response_model=List[GoalResponse])
async def get_goals(
    employee_id: int = Query(...),
    status_filter: Optional[GoalStatus] = Query(None, alias="status"),
    session: AsyncSession = Depends(get_async_session)
):
    """An employee's goals, newest first"""
    service = GoalService(session)
    return await service.get_goals(employee_id, status_filter)

@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(
    goal_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = GoalService(session)
    goal = await service.get_goal(goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal

@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: int,
    goal_update: GoalUpdate,
    session: AsyncSession = Depends(get_async_session)
):
    """Update a goal; its status follows the progress"""
    service = GoalService(session)
    return await service.update_goal(goal_id, goal_update)

@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = GoalService(session)
    await service.delete_goal(goal_id)
    return {"message": "Goal deleted successfully"}

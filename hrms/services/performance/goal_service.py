import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.core.config import settings
from hrms.core.exceptions import NotFoundError
from hrms.models.hr.employee import Employee
from hrms.models.performance.goal import Goal
from hrms.models.shared.enums import EmployeeStatus, GoalStatus
from hrms.schemas.performance.goal_schema import GoalCreate, GoalUpdate
from hrms.utils.date_time import now_local, to_local

logger = logging.getLogger(__name__)

URGENT_GOAL_REMINDER = "urgent"
UPCOMING_GOAL_REMINDER = "upcoming"


def status_for_progress(progress: int) -> GoalStatus:
    if progress >= 100:
        return GoalStatus.COMPLETED
    if progress > 0:
        return GoalStatus.IN_PROGRESS
    return GoalStatus.NOT_STARTED


def goal_reminder_kind(goal: Goal, today: date) -> Optional[str]:
    """
    Reminder due for ``goal`` on ``today``, if any.

    Goals due within the urgent window are reminded at most once a day;
    goals due later in the reminder window at most once every four days.
    """
    if goal.status == GoalStatus.COMPLETED or goal.due_date is None:
        return None

    days_until_due = (goal.due_date - today).days
    if days_until_due < 0 or days_until_due > settings.GOAL_REMINDER_DAYS:
        return None

    days_since_reminder = None
    if goal.last_reminder_sent is not None:
        days_since_reminder = (today - to_local(goal.last_reminder_sent).date()).days

    if days_until_due <= settings.GOAL_URGENT_REMINDER_DAYS:
        if days_since_reminder is None or days_since_reminder >= 1:
            return URGENT_GOAL_REMINDER
        return None

    if days_since_reminder is None or days_since_reminder >= 4:
        return UPCOMING_GOAL_REMINDER
    return None


class GoalService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _ensure_employee(self, employee_id: int) -> Employee:
        employee = await self.session.get(Employee, employee_id)
        if employee is None or employee.is_deleted:
            raise NotFoundError(f"Employee with ID {employee_id} not found")
        return employee

    async def get_goal(self, goal_id: int) -> Optional[Goal]:
        result = await self.session.execute(
            select(Goal)
            .options(selectinload(Goal.employee))
            .where(Goal.id == goal_id, Goal.is_deleted == False)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_goals(self, employee_id: int, status_filter: Optional[GoalStatus] = None) -> List[Goal]:
        query = (
            select(Goal)
            .options(selectinload(Goal.employee))
            .where(Goal.employee_id == employee_id, Goal.is_deleted == False)
        )
        if status_filter is not None:
            query = query.where(Goal.status == status_filter)
        result = await self.session.execute(query.order_by(Goal.created_at.desc(), Goal.id.desc()))
        return list(result.scalars().all())

    async def create_goal(self, data: GoalCreate) -> Goal:
        try:
            employee = await self._ensure_employee(data.employee_id)
            goal = Goal(
                employee_id=employee.id,
                title=data.title,
                description=data.description,
                category=data.category,
                priority=data.priority,
                due_date=data.due_date,
                status=GoalStatus.NOT_STARTED,
                progress=0,
            )
            self.session.add(goal)
            await self.session.commit()
            logger.info(f"Goal {goal.id} created for {employee.employee_code}: {goal.title}")
            return await self.get_goal(goal.id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating goal: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating goal")

    async def update_goal(self, goal_id: int, data: GoalUpdate, now: Optional[datetime] = None) -> Goal:
        try:
            goal = await self.get_goal(goal_id)
            if goal is None:
                raise NotFoundError("Goal not found")

            update_data = data.model_dump(exclude_unset=True)
            for required in ("title", "category", "priority", "progress"):
                if required in update_data and update_data[required] is None:
                    del update_data[required]
            if "title" in update_data:
                update_data["title"] = update_data["title"].strip()
            for field, value in update_data.items():
                setattr(goal, field, value)

            # Status follows progress
            if "progress" in update_data:
                goal.status = status_for_progress(goal.progress)
                if goal.status == GoalStatus.COMPLETED:
                    goal.completed_at = goal.completed_at or (to_local(now) if now else now_local())
                else:
                    goal.completed_at = None

            await self.session.commit()
            logger.info(f"Goal {goal_id} updated: {goal.progress}% ({goal.status.value})")
            return await self.get_goal(goal_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating goal {goal_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating goal")

    async def delete_goal(self, goal_id: int) -> bool:
        goal = await self.get_goal(goal_id)
        if goal is None:
            raise NotFoundError("Goal not found")

        goal.is_deleted = True
        await self.session.commit()
        logger.info(f"Goal {goal_id} deleted")
        return True

    async def get_due_reminders(self, today: date) -> List[Tuple[Goal, str]]:
        result = await self.session.execute(
            select(Goal)
            .join(Employee, Goal.employee_id == Employee.id)
            .options(selectinload(Goal.employee))
            .where(
                Goal.status != GoalStatus.COMPLETED,
                Goal.due_date >= today,
                Goal.due_date <= today + timedelta(days=settings.GOAL_REMINDER_DAYS),
                Goal.is_deleted == False,
                Employee.is_deleted == False,
                Employee.status != EmployeeStatus.OFFBOARDED
            )
            .order_by(Goal.due_date, Goal.id)
        )
        due = []
        for goal in result.scalars().all():
            kind = goal_reminder_kind(goal, today)
            if kind:
                due.append((goal, kind))
        return due

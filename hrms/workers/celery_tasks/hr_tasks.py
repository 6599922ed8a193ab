"""
HR background tasks: attendance reminders, goal deadline reminders and monthly payroll generation.
"""
import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from hrms.core.celery_app import celery_app
from hrms.core.config import settings
import hrms.models  # noqa: F401  registers every mapper before the first query
from hrms.utils.date_time import now_local

logger = logging.getLogger(__name__)

# Workers get their own engine; the API's pool is bound to another event loop
async_engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def run_async_task(coro):
    """Helper function to run async coroutines in Celery tasks"""
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        return loop.run_until_complete(coro)
    except Exception as e:
        logger.error(f"Error in async task: {e}")
        raise
    finally:
        loop.close()


async def _send_attendance_reminders(session_maker=async_session_maker) -> int:
    # Import inside function to avoid circular imports
    from hrms.services.hr.attendance_service import AttendanceService
    from hrms.services.notification.notification_service import NotificationService

    async with session_maker() as db:
        due = await AttendanceService(db).get_due_reminders(now_local())
        notifications = NotificationService(db)
        sent = 0
        for employee, reminder in due:
            employee_id = employee.id
            try:
                await notifications.notify_attendance_reminder(employee, reminder)
                sent += 1
            except Exception as e:
                await db.rollback()
                logger.error(f"Failed to send {reminder} reminder to employee {employee_id}: {e}")
        return sent


async def _send_goal_reminders(session_maker=async_session_maker) -> int:
    from hrms.services.notification.notification_service import NotificationService
    from hrms.services.performance.goal_service import GoalService

    async with session_maker() as db:
        now = now_local()
        due = await GoalService(db).get_due_reminders(now.date())
        notifications = NotificationService(db)
        sent = 0
        for goal, reminder in due:
            goal_id = goal.id
            try:
                # Committed together with the in-app notification
                goal.last_reminder_sent = now
                await notifications.notify_goal_deadline(goal, reminder, now.date())
                sent += 1
            except Exception as e:
                await db.rollback()
                logger.error(f"Failed to send {reminder} reminder for goal {goal_id}: {e}")
        return sent


async def _generate_monthly_payroll(month: int, year: int, session_maker=async_session_maker) -> int:
    from hrms.services.hr.payroll_service import PayrollService

    async with session_maker() as db:
        return await PayrollService(db).generate_payroll(month, year)


@celery_app.task
def send_attendance_reminders():
    """Clock-in and clock-out reminders for employees near the edges of their shift."""
    sent = run_async_task(_send_attendance_reminders())
    logger.info(f"Attendance reminders sent: {sent}")
    return sent


@celery_app.task
def send_goal_reminders():
    """Reminders for unfinished goals whose deadline is close."""
    sent = run_async_task(_send_goal_reminders())
    logger.info(f"Goal reminders sent: {sent}")
    return sent


@celery_app.task
def generate_monthly_payroll(month: Optional[int] = None, year: Optional[int] = None):
    """Draft payroll for the given month, defaulting to the previous one."""
    if month is None or year is None:
        today = now_local().date()
        month = today.month - 1 or 12
        year = today.year if today.month > 1 else today.year - 1

    count = run_async_task(_generate_monthly_payroll(month, year))
    logger.info(f"Monthly payroll generated for {month}/{year}: {count} record(s)")
    return count

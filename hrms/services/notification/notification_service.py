import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.config import settings
from hrms.core.exceptions import NotFoundError
from hrms.models.hr.employee import Employee
from hrms.models.hr.leave import LeaveRequest
from hrms.models.notification.notification import Notification
from hrms.models.performance.goal import Goal
from hrms.models.performance.review import PerformanceReview
from hrms.models.shared.enums import LeaveStatus, NotificationType, ReviewStatus
from hrms.services.communication.email_service import EmailService
from hrms.utils.date_time import format_time_12h, parse_time

logger = logging.getLogger(__name__)

REVIEW_STATUS_TEXT = {
    ReviewStatus.COMPLETED: "has been completed",
    ReviewStatus.DRAFT: "has been saved as a draft",
}


class NotificationService:
    """In-app notifications, with a best-effort email copy."""

    def __init__(self, session: AsyncSession, email_service: Optional[EmailService] = None):
        self.session = session
        self.email_service = email_service or EmailService()

    async def create_notification(
        self,
        employee_id: int,
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
        link: Optional[str] = None,
        commit: bool = True
    ) -> Notification:
        notification = Notification(
            employee_id=employee_id,
            title=title,
            message=message,
            type=notification_type,
            link=link,
            is_read=False,
        )
        self.session.add(notification)
        if commit:
            await self.session.commit()
            await self.session.refresh(notification)
        else:
            await self.session.flush()
        return notification

    async def get_employee_notifications(self, employee_id: int, unread_only: bool = False,
                                         limit: int = 50) -> List[Notification]:
        query = select(Notification).where(
            Notification.employee_id == employee_id,
            Notification.is_deleted == False
        )
        if unread_only:
            query = query.where(Notification.is_read == False)
        result = await self.session.execute(
            query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def mark_notification_read(self, notification_id: int) -> Notification:
        result = await self.session.execute(
            select(Notification).where(Notification.id == notification_id, Notification.is_deleted == False)
        )
        notification = result.scalar_one_or_none()
        if notification is None:
            raise NotFoundError("Notification not found")

        notification.is_read = True
        await self.session.commit()
        await self.session.refresh(notification)
        return notification

    async def mark_all_read(self, employee_id: int) -> int:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.employee_id == employee_id, Notification.is_read == False)
            .values(is_read=True)
        )
        await self.session.commit()
        return result.rowcount or 0

    # ---------- Triggers ----------
    async def notify_leave_submitted(self, manager: Employee, employee: Employee,
                                     leave_request: LeaveRequest, leave_type_name: str) -> None:
        await self.create_notification(
            employee_id=manager.id,
            title="New leave request",
            message=(
                f"{employee.full_name} requested {leave_request.days_count} day(s) of {leave_type_name} "
                f"from {leave_request.start_date} to {leave_request.end_date}"
            ),
            notification_type=NotificationType.INFO,
            link="/leaves",
        )
        try:
            await self.email_service.send_leave_submitted_email(
                to_email=manager.email,
                manager_name=manager.first_name,
                employee_name=employee.full_name,
                leave_type=leave_type_name,
                start_date=leave_request.start_date,
                end_date=leave_request.end_date,
                days_count=leave_request.days_count,
                reason=leave_request.reason,
            )
        except Exception as e:
            logger.error(f"Failed to email manager {manager.id} about leave request {leave_request.id}: {e}")

    async def notify_leave_reviewed(self, employee: Employee, leave_request: LeaveRequest,
                                    leave_type_name: str) -> None:
        approved = leave_request.status == LeaveStatus.APPROVED
        status_label = leave_request.status.value
        await self.create_notification(
            employee_id=employee.id,
            title=f"Leave request {status_label}",
            message=(
                f"Your {leave_type_name} request from {leave_request.start_date} to "
                f"{leave_request.end_date} was {status_label}"
                + (f": {leave_request.review_notes}" if leave_request.review_notes else "")
            ),
            notification_type=NotificationType.SUCCESS if approved else NotificationType.WARNING,
            link="/leaves",
        )
        try:
            await self.email_service.send_leave_status_email(
                to_email=employee.email,
                employee_name=employee.first_name,
                leave_type=leave_type_name,
                start_date=leave_request.start_date,
                end_date=leave_request.end_date,
                status=status_label,
                review_notes=leave_request.review_notes,
            )
        except Exception as e:
            logger.error(f"Failed to email employee {employee.id} about leave request {leave_request.id}: {e}")

    async def notify_attendance_reminder(self, employee: Employee, reminder: str) -> None:
        if reminder == "clock_in":
            scheduled = employee.working_hours_start or parse_time(settings.DEFAULT_WORKING_HOURS_START)
            title = "Time to clock in"
            message = f"Your shift starts at {format_time_12h(scheduled)}. Don't forget to clock in."
        else:
            scheduled = employee.working_hours_end or parse_time(settings.DEFAULT_WORKING_HOURS_END)
            title = "Time to clock out"
            message = f"Your shift ends at {format_time_12h(scheduled)}. Don't forget to clock out."

        await self.create_notification(
            employee_id=employee.id,
            title=title,
            message=message,
            notification_type=NotificationType.INFO,
            link="/attendance",
        )
        try:
            await self.email_service.send_attendance_reminder_email(
                to_email=employee.email,
                employee_name=employee.first_name,
                reminder=reminder,
                scheduled_time=format_time_12h(scheduled),
            )
        except Exception as e:
            logger.error(f"Failed to email attendance reminder to employee {employee.id}: {e}")

    async def notify_goal_deadline(self, goal: Goal, reminder: str, today: date) -> None:
        days_left = (goal.due_date - today).days
        if reminder == "urgent":
            title = f"Urgent: Goal deadline in {days_left} day{'' if days_left == 1 else 's'}"
        else:
            title = f"Goal deadline approaching in {days_left} days"
        message = f'Your goal "{goal.title}" is due on {goal.due_date}. Current progress: {goal.progress}%'

        await self.create_notification(
            employee_id=goal.employee_id,
            title=title,
            message=message,
            notification_type=NotificationType.WARNING if reminder == "urgent" else NotificationType.INFO,
            link="/performance",
        )
        try:
            await self.email_service.send_goal_reminder_email(
                to_email=goal.employee.email,
                employee_name=goal.employee.first_name,
                subject=title,
                goal_title=goal.title,
                due_date=goal.due_date,
                progress=goal.progress,
            )
        except Exception as e:
            logger.error(f"Failed to email goal reminder for goal {goal.id}: {e}")

    async def notify_review_submitted(self, employee: Employee, review: PerformanceReview,
                                      reviewer_name: str) -> None:
        rating = f"{review.overall_rating}/5" if review.overall_rating else "Pending"
        status_text = REVIEW_STATUS_TEXT.get(review.status, "is pending your review")
        await self.create_notification(
            employee_id=employee.id,
            title="Performance Review Submitted",
            message=f"Your {review.review_period} performance review {status_text}. Rating: {rating}",
            notification_type=NotificationType.INFO,
            link="/performance",
        )
        try:
            await self.email_service.send_review_email(
                to_email=employee.email,
                employee_name=employee.first_name,
                reviewer_name=reviewer_name,
                review_period=review.review_period,
                rating=rating,
                status=review.status.value,
                status_text=status_text,
            )
        except Exception as e:
            logger.error(f"Failed to email employee {employee.id} about review {review.id}: {e}")

    async def notify_review_acknowledged(self, reviewer: Employee, employee: Employee,
                                         review: PerformanceReview) -> None:
        await self.create_notification(
            employee_id=reviewer.id,
            title="Performance Review Acknowledged",
            message=f"{employee.full_name} acknowledged their {review.review_period} performance review",
            notification_type=NotificationType.SUCCESS,
            link="/performance",
        )
        try:
            await self.email_service.send_review_acknowledged_email(
                to_email=reviewer.email,
                reviewer_name=reviewer.first_name,
                employee_name=employee.full_name,
                review_period=review.review_period,
            )
        except Exception as e:
            logger.error(f"Failed to email reviewer {reviewer.id} about review {review.id}: {e}")

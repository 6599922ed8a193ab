import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from hrms.core.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parents[2] / "templates" / "email"


class EmailService:
    """Email service for sending notifications"""

    def __init__(self):
        self.smtp_server = settings.MAIL_SERVER
        self.smtp_port = settings.MAIL_PORT or 587
        self.username = settings.MAIL_USERNAME
        self.password = settings.MAIL_PASSWORD
        self.from_email = settings.MAIL_FROM
        self.from_name = settings.MAIL_FROM_NAME

        self.template_env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_server and self.from_email)

    def render(self, template_name: str, **context: Any) -> str:
        template = self.template_env.get_template(template_name)
        return template.render(app_name=settings.APP_NAME, app_url=settings.APP_BASE_URL, **context)

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """Send email"""
        if not self.is_configured:
            logger.debug(f"Mail server not configured, skipping email to {to_email}")
            return False

        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = f"{self.from_name} <{self.from_email}>"
            msg['To'] = to_email

            if text_content:
                msg.attach(MIMEText(text_content, 'plain'))
            msg.attach(MIMEText(html_content, 'html'))

            if settings.MAIL_SSL:
                server = smtplib.SMTP_SSL(self.smtp_server, self.smtp_port)
            else:
                server = smtplib.SMTP(self.smtp_server, self.smtp_port)
            with server:
                if settings.MAIL_TLS and not settings.MAIL_SSL:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg)

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {str(e)}")
            return False

    async def send_template_email(self, to_email: str, subject: str, template_name: str,
                                  context: Dict[str, Any]) -> bool:
        try:
            html_content = self.render(template_name, **context)
        except Exception as e:
            logger.error(f"Failed to render email template {template_name}: {str(e)}")
            return False
        return await self.send_email(to_email=to_email, subject=subject, html_content=html_content)

    async def send_leave_submitted_email(self, to_email: str, manager_name: str, employee_name: str,
                                         leave_type: str, start_date, end_date, days_count: int,
                                         reason: Optional[str] = None) -> bool:
        return await self.send_template_email(
            to_email,
            subject=f"Leave request from {employee_name}",
            template_name="leave_submitted.html",
            context={
                "manager_name": manager_name,
                "employee_name": employee_name,
                "leave_type": leave_type,
                "start_date": start_date,
                "end_date": end_date,
                "days_count": days_count,
                "reason": reason,
            },
        )

    async def send_leave_status_email(self, to_email: str, employee_name: str, leave_type: str,
                                      start_date, end_date, status: str,
                                      review_notes: Optional[str] = None) -> bool:
        return await self.send_template_email(
            to_email,
            subject=f"Your leave request has been {status}",
            template_name="leave_status.html",
            context={
                "employee_name": employee_name,
                "leave_type": leave_type,
                "start_date": start_date,
                "end_date": end_date,
                "status": status,
                "review_notes": review_notes,
            },
        )

    async def send_attendance_reminder_email(self, to_email: str, employee_name: str,
                                             reminder: str, scheduled_time: str) -> bool:
        action = "clock in" if reminder == "clock_in" else "clock out"
        return await self.send_template_email(
            to_email,
            subject=f"Reminder: time to {action}",
            template_name="attendance_reminder.html",
            context={
                "employee_name": employee_name,
                "action": action,
                "scheduled_time": scheduled_time,
            },
        )

    async def send_goal_reminder_email(self, to_email: str, employee_name: str, subject: str,
                                       goal_title: str, due_date, progress: int) -> bool:
        return await self.send_template_email(
            to_email,
            subject=subject,
            template_name="goal_reminder.html",
            context={
                "employee_name": employee_name,
                "title": subject,
                "goal_title": goal_title,
                "due_date": due_date,
                "progress": progress,
            },
        )

    async def send_review_email(self, to_email: str, employee_name: str, reviewer_name: str,
                                review_period: str, rating: str, status: str, status_text: str) -> bool:
        heading = "Completed" if status == "completed" else "Update"
        return await self.send_template_email(
            to_email,
            subject=f"Performance Review {heading} - {review_period}",
            template_name="review_submitted.html",
            context={
                "heading": heading,
                "employee_name": employee_name,
                "reviewer_name": reviewer_name,
                "review_period": review_period,
                "rating": rating,
                "status": status,
                "status_text": status_text,
            },
        )

    async def send_review_acknowledged_email(self, to_email: str, reviewer_name: str,
                                             employee_name: str, review_period: str) -> bool:
        return await self.send_template_email(
            to_email,
            subject=f"{employee_name} acknowledged their {review_period} review",
            template_name="review_acknowledged.html",
            context={
                "reviewer_name": reviewer_name,
                "employee_name": employee_name,
                "review_period": review_period,
            },
        )

from celery import Celery
from celery import signals
from celery.schedules import crontab
from hrms.core.config import settings
from hrms.core.logging_config import setup_logging

# Create Celery app
celery_app = Celery(
    "hrms",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "hrms.workers.celery_tasks.hr_tasks",
    ]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.TIMEZONE,
    enable_utc=True,
    result_expires=3600,
)

celery_app.conf.beat_schedule = {
    "send-attendance-reminders": {
        "task": "hrms.workers.celery_tasks.hr_tasks.send_attendance_reminders",
        "schedule": 600.0,  # Every 10 minutes
    },
    "send-goal-reminders": {
        "task": "hrms.workers.celery_tasks.hr_tasks.send_goal_reminders",
        "schedule": crontab(minute=0, hour=8),  # Daily
    },
    "generate-monthly-payroll": {
        "task": "hrms.workers.celery_tasks.hr_tasks.generate_monthly_payroll",
        "schedule": crontab(minute=0, hour=2, day_of_month=1),
    },
}


@signals.setup_logging.connect
def configure_worker_logging(**kwargs):
    # Workers log through the same handlers as the API
    setup_logging()

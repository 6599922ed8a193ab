import pytest
from datetime import date, datetime, timezone
from httpx import AsyncClient
from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.models import Goal, Notification
from hrms.models.shared.enums import EmployeeStatus, GoalStatus, NotificationType
from hrms.workers.celery_tasks import hr_tasks

GOALS_URL = "/api/v1/performance/goal/"
REVIEWS_URL = "/api/v1/performance/review/"

# 2025-03-10 is a Monday
MONDAY_0800 = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)


async def titles_for(session: AsyncSession, employee_id: int):
    result = await session.execute(
        select(Notification).where(Notification.employee_id == employee_id).order_by(Notification.id)
    )
    return [n.title for n in result.scalars().all()]


def review_payload(employee_id: int, reviewer_id: int = None, **fields):
    payload = {
        "employee_id": employee_id,
        "reviewer_id": reviewer_id,
        "review_period": "Q1 2025",
        "review_date": "2025-03-31",
    }
    payload.update(fields)
    return payload


@pytest.mark.asyncio
class TestGoals:
    async def test_create_goal(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        response = await client.post(GOALS_URL, json={
            "employee_id": employee.id,
            "title": "  Ship the payroll export  ",
            "priority": "high",
            "due_date": "2025-06-30",
        })
        assert response.status_code == status.HTTP_201_CREATED
        goal = response.json()
        assert goal["title"] == "Ship the payroll export"
        assert goal["status"] == "not_started"
        assert goal["progress"] == 0
        assert goal["category"] == "performance"
        assert goal["employee"]["employee_code"] == "ACQ001"

    async def test_create_goal_unknown_employee(self, client: AsyncClient):
        response = await client.post(GOALS_URL, json={"employee_id": 999, "title": "Nothing"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_progress_drives_status(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        goal_id = (await client.post(GOALS_URL, json={"employee_id": employee.id, "title": "Learn Rust"})).json()["id"]

        response = await client.put(f"{GOALS_URL}{goal_id}", json={"progress": 50})
        assert response.json()["status"] == "in_progress"
        assert response.json()["completed_at"] is None

        response = await client.put(f"{GOALS_URL}{goal_id}", json={"progress": 100, "manager_rating": 4})
        goal = response.json()
        assert goal["status"] == "completed"
        assert goal["completed_at"] is not None
        assert goal["manager_rating"] == 4

        response = await client.put(f"{GOALS_URL}{goal_id}", json={"progress": 80})
        assert response.json()["status"] == "in_progress"
        assert response.json()["completed_at"] is None

    async def test_invalid_progress(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        goal_id = (await client.post(GOALS_URL, json={"employee_id": employee.id, "title": "Read"})).json()["id"]

        response = await client.put(f"{GOALS_URL}{goal_id}", json={"progress": 101})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_list_and_delete(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        other = await make_employee("ACQ002", "alan@acme.io")
        first = (await client.post(GOALS_URL, json={"employee_id": employee.id, "title": "First"})).json()
        await client.post(GOALS_URL, json={"employee_id": employee.id, "title": "Second"})
        await client.post(GOALS_URL, json={"employee_id": other.id, "title": "Not mine"})
        await client.put(f"{GOALS_URL}{first['id']}", json={"progress": 100})

        response = await client.get(GOALS_URL, params={"employee_id": employee.id})
        assert sorted(g["title"] for g in response.json()) == ["First", "Second"]

        response = await client.get(GOALS_URL, params={"employee_id": employee.id, "status": "completed"})
        assert [g["title"] for g in response.json()] == ["First"]

        response = await client.delete(f"{GOALS_URL}{first['id']}")
        assert response.json() == {"message": "Goal deleted successfully"}

        response = await client.get(f"{GOALS_URL}{first['id']}")
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
class TestGoalReminders:
    async def test_goal_reminder_task(self, session_maker, db_session: AsyncSession, make_employee, monkeypatch):
        employee = await make_employee("ACQ001", "ada@acme.io")
        leaver = await make_employee("ACQ002", "gone@acme.io", status=EmployeeStatus.OFFBOARDED)
        db_session.add_all([
            Goal(employee_id=employee.id, title="Urgent", due_date=date(2025, 3, 12),
                 status=GoalStatus.IN_PROGRESS, progress=40),
            Goal(employee_id=employee.id, title="Later", due_date=date(2025, 3, 16),
                 status=GoalStatus.NOT_STARTED, progress=0),
            Goal(employee_id=employee.id, title="Far away", due_date=date(2025, 4, 30),
                 status=GoalStatus.NOT_STARTED, progress=0),
            Goal(employee_id=employee.id, title="Done", due_date=date(2025, 3, 11),
                 status=GoalStatus.COMPLETED, progress=100),
            Goal(employee_id=leaver.id, title="Left behind", due_date=date(2025, 3, 11),
                 status=GoalStatus.NOT_STARTED, progress=0),
        ])
        await db_session.commit()
        monkeypatch.setattr(hr_tasks, "now_local", lambda: MONDAY_0800)

        assert await hr_tasks._send_goal_reminders(session_maker) == 2
        result = await db_session.execute(
            select(Notification).where(Notification.employee_id == employee.id).order_by(Notification.id)
        )
        notifications = result.scalars().all()
        assert [n.title for n in notifications] == [
            "Urgent: Goal deadline in 2 days",
            "Goal deadline approaching in 6 days",
        ]
        assert notifications[0].type == NotificationType.WARNING
        assert "Current progress: 40%" in notifications[0].message
        assert await titles_for(db_session, leaver.id) == []

        # already reminded today
        assert await hr_tasks._send_goal_reminders(session_maker) == 0


@pytest.mark.asyncio
class TestReviews:
    async def test_create_review_notifies_employee(self, client: AsyncClient, db_session: AsyncSession,
                                                   make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        manager = await make_employee("ACQ002", "grace@acme.io", first_name="Grace")

        response = await client.post(
            REVIEWS_URL, json=review_payload(employee.id, manager.id, overall_rating=4, status="submitted")
        )
        assert response.status_code == status.HTTP_201_CREATED
        review = response.json()
        assert review["status"] == "submitted"
        assert review["reviewer"]["first_name"] == "Grace"

        result = await db_session.execute(select(Notification).where(Notification.employee_id == employee.id))
        notification = result.scalar_one()
        assert notification.title == "Performance Review Submitted"
        assert notification.message == "Your Q1 2025 performance review is pending your review. Rating: 4/5"

    async def test_draft_review_without_rating(self, client: AsyncClient, db_session: AsyncSession, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        response = await client.post(REVIEWS_URL, json=review_payload(employee.id))
        assert response.json()["status"] == "draft"

        result = await db_session.execute(select(Notification).where(Notification.employee_id == employee.id))
        assert result.scalar_one().message.endswith("has been saved as a draft. Rating: Pending")

    async def test_self_review_rejected(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        response = await client.post(REVIEWS_URL, json=review_payload(employee.id, employee.id))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_unknown_reviewer(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        response = await client.post(REVIEWS_URL, json=review_payload(employee.id, 999))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_cannot_create_acknowledged(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        response = await client.post(REVIEWS_URL, json=review_payload(employee.id, status="acknowledged"))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_acknowledge_flow(self, client: AsyncClient, db_session: AsyncSession, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io", first_name="Ada", last_name="Lovelace")
        manager = await make_employee("ACQ002", "grace@acme.io")
        review_id = (await client.post(REVIEWS_URL, json=review_payload(employee.id, manager.id))).json()["id"]

        response = await client.put(f"{REVIEWS_URL}{review_id}/acknowledge")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        await client.put(f"{REVIEWS_URL}{review_id}", json={"status": "submitted", "overall_rating": 5})
        response = await client.put(f"{REVIEWS_URL}{review_id}/acknowledge", headers={"X-User-Id": "42"})
        assert response.status_code == status.HTTP_200_OK
        review = response.json()
        assert review["status"] == "acknowledged"
        assert review["acknowledged_by"] == 42
        assert review["acknowledged_at"] is not None

        assert await titles_for(db_session, manager.id) == ["Performance Review Acknowledged"]

        response = await client.put(f"{REVIEWS_URL}{review_id}/acknowledge")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await client.put(f"{REVIEWS_URL}{review_id}", json={"comments": "Too late"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_list_filters(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        other = await make_employee("ACQ002", "alan@acme.io")
        await client.post(REVIEWS_URL, json=review_payload(employee.id, status="submitted"))
        await client.post(REVIEWS_URL, json=review_payload(employee.id, review_period="Q2 2025"))
        await client.post(REVIEWS_URL, json=review_payload(other.id))

        response = await client.get(REVIEWS_URL, params={"employee_id": employee.id})
        assert response.json()["count"] == 2

        response = await client.get(REVIEWS_URL, params={"status": "submitted"})
        assert [r["review_period"] for r in response.json()["data"]] == ["Q1 2025"]

    async def test_delete_review(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        review_id = (await client.post(REVIEWS_URL, json=review_payload(employee.id))).json()["id"]

        response = await client.delete(f"{REVIEWS_URL}{review_id}")
        assert response.json() == {"message": "Performance review deleted successfully"}
        response = await client.get(f"{REVIEWS_URL}{review_id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

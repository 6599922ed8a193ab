import pytest
from httpx import AsyncClient
from fastapi import status
from hrms.core.config import settings
from hrms.services.hr.employee_code_service import EmployeeCodeService

EMPLOYEES_URL = "/api/v1/hr/employee/"


def employee_payload(email: str, **extra) -> dict:
    payload = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": email,
        "hire_date": "2024-01-15",
        "working_hours_start": "09:00:00",
        "working_hours_end": "18:00:00",
    }
    payload.update(extra)
    return payload


@pytest.mark.asyncio
class TestEmployeeCodes:
    """Code allocation on employee creation"""

    async def test_first_employee_gets_first_code(self, client: AsyncClient, seeded):
        response = await client.post(EMPLOYEES_URL, json=employee_payload("ada@acme.io"))
        assert response.status_code == status.HTTP_201_CREATED

        data = response.json()
        assert data["employee_code"] == "ACQ001"
        assert data["working_days"] == [1, 2, 3, 4, 5]
        assert data["status"] == "active"

    async def test_codes_increase(self, client: AsyncClient, seeded):
        await client.post(EMPLOYEES_URL, json=employee_payload("one@acme.io"))
        response = await client.post(EMPLOYEES_URL, json=employee_payload("two@acme.io"))
        assert response.json()["employee_code"] == "ACQ002"

    async def test_next_code_preview(self, client: AsyncClient, make_employee):
        await make_employee("ACQ007", "seven@acme.io")
        await make_employee("XYZ900", "other@acme.io")

        response = await client.get(f"{EMPLOYEES_URL}next-code")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["next_code"] == "ACQ008"
        assert data["pattern"] == {"prefix": "ACQ", "separator": "", "min_digits": 3}

    async def test_update_pattern(self, client: AsyncClient):
        response = await client.put(
            f"{EMPLOYEES_URL}code-pattern",
            json={"prefix": "emp", "separator": "-", "min_digits": 4},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["prefix"] == "EMP"

        response = await client.get(f"{EMPLOYEES_URL}code-pattern")
        assert response.json() == {"prefix": "EMP", "separator": "-", "min_digits": 4}

        response = await client.post(EMPLOYEES_URL, json=employee_payload("dash@acme.io"))
        assert response.json()["employee_code"] == "EMP-0001"

    async def test_invalid_pattern_rejected(self, client: AsyncClient):
        response = await client.put(
            f"{EMPLOYEES_URL}code-pattern",
            json={"prefix": "", "separator": "-", "min_digits": 0},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_manual_code(self, client: AsyncClient, seeded):
        response = await client.post(
            EMPLOYEES_URL, json=employee_payload("manual@acme.io", employee_code="acq050")
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["employee_code"] == "ACQ050"

        response = await client.get(f"{EMPLOYEES_URL}next-code")
        assert response.json()["next_code"] == "ACQ051"

    async def test_manual_code_must_match_pattern(self, client: AsyncClient, seeded):
        response = await client.post(
            EMPLOYEES_URL, json=employee_payload("bad@acme.io", employee_code="ACQ-1")
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_manual_code_already_used(self, client: AsyncClient, make_employee):
        await make_employee("ACQ001", "first@acme.io")

        response = await client.post(
            EMPLOYEES_URL, json=employee_payload("second@acme.io", employee_code="ACQ001")
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Employee code 'ACQ001' is already in use"

    async def test_allocation_retries_after_collision(self, client: AsyncClient, make_employee, monkeypatch):
        """A code taken between computing and inserting is recomputed"""
        await make_employee("ACQ001", "first@acme.io")

        original = EmployeeCodeService.get_next_code
        calls = []

        async def stale_next_code(self, pattern=None):
            calls.append(1)
            if len(calls) == 1:
                return "ACQ001"
            return await original(self, pattern)

        monkeypatch.setattr(EmployeeCodeService, "get_next_code", stale_next_code)

        response = await client.post(EMPLOYEES_URL, json=employee_payload("racer@acme.io"))
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["employee_code"] == "ACQ002"
        assert len(calls) == 2

    async def test_allocation_gives_up_after_max_retries(self, client: AsyncClient, make_employee, monkeypatch):
        await make_employee("ACQ001", "first@acme.io")

        attempts = []

        async def always_taken(self, pattern=None):
            attempts.append(1)
            return "ACQ001"

        monkeypatch.setattr(EmployeeCodeService, "get_next_code", always_taken)

        response = await client.post(EMPLOYEES_URL, json=employee_payload("unlucky@acme.io"))
        assert response.status_code == status.HTTP_409_CONFLICT
        assert len(attempts) == settings.EMPLOYEE_CODE_MAX_RETRIES

        # nothing half-written is left behind
        response = await client.get(EMPLOYEES_URL, params={"search": "unlucky"})
        assert response.json()["count"] == 0

    async def test_validate_code(self, client: AsyncClient, make_employee):
        await make_employee("ACQ001", "first@acme.io")

        response = await client.post(f"{EMPLOYEES_URL}validate-code", json={"code": "ACQ001"})
        assert response.json() == {"code": "ACQ001", "is_valid": True, "is_available": False}

        response = await client.post(f"{EMPLOYEES_URL}validate-code", json={"code": "ACQ002"})
        assert response.json()["is_available"] is True

        response = await client.post(f"{EMPLOYEES_URL}validate-code", json={"code": "AC2"})
        assert response.json()["is_valid"] is False

    async def test_validate_code_rejects_trailing_newline(self, client: AsyncClient, make_employee):
        await make_employee("ACQ001", "first@acme.io")

        response = await client.post(f"{EMPLOYEES_URL}validate-code", json={"code": "ACQ001\n"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_valid"] is False


@pytest.mark.asyncio
class TestEmployeeCrud:
    """Employee endpoints"""

    async def test_duplicate_email(self, client: AsyncClient, make_employee):
        await make_employee("ACQ001", "taken@acme.io")
        response = await client.post(EMPLOYEES_URL, json=employee_payload("TAKEN@acme.io"))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_unknown_department(self, client: AsyncClient):
        response = await client.post(EMPLOYEES_URL, json=employee_payload("x@acme.io", department_id=999))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_half_a_working_window_rejected(self, client: AsyncClient):
        payload = employee_payload("x@acme.io")
        payload.pop("working_hours_end")
        response = await client.post(EMPLOYEES_URL, json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_create_with_department(self, client: AsyncClient, department):
        response = await client.post(
            EMPLOYEES_URL, json=employee_payload("dept@acme.io", department_id=department.id)
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["department"]["name"] == "Engineering"

    async def test_list_and_search(self, client: AsyncClient, make_employee):
        await make_employee("ACQ001", "grace@acme.io", first_name="Grace", last_name="Hopper")
        await make_employee("ACQ002", "alan@acme.io", first_name="Alan", last_name="Turing")

        response = await client.get(EMPLOYEES_URL)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["count"] == 2
        assert [e["employee_code"] for e in data["data"]] == ["ACQ001", "ACQ002"]

        response = await client.get(EMPLOYEES_URL, params={"search": "hopp"})
        assert [e["first_name"] for e in response.json()["data"]] == ["Grace"]

    async def test_get_update_delete(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "grace@acme.io")

        response = await client.get(f"{EMPLOYEES_URL}{employee.id}")
        assert response.status_code == status.HTTP_200_OK

        response = await client.put(
            f"{EMPLOYEES_URL}{employee.id}",
            json={"designation": "Engineer", "working_days": [5, 1, 1, 3]},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["designation"] == "Engineer"
        assert response.json()["working_days"] == [1, 3, 5]

        response = await client.delete(f"{EMPLOYEES_URL}{employee.id}")
        assert response.status_code == status.HTTP_200_OK

        response = await client.get(f"{EMPLOYEES_URL}{employee.id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

        response = await client.delete(f"{EMPLOYEES_URL}{employee.id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_missing_employee(self, client: AsyncClient):
        response = await client.get(f"{EMPLOYEES_URL}424242")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_stats(self, client: AsyncClient, make_employee):
        from hrms.models.shared.enums import EmployeeStatus

        await make_employee("ACQ001", "a@acme.io")
        await make_employee("ACQ002", "b@acme.io", status=EmployeeStatus.ONBOARDING)

        response = await client.get(f"{EMPLOYEES_URL}stats")
        data = response.json()
        assert data["total"] == 2
        assert data["by_status"]["active"] == 1
        assert data["by_status"]["onboarding"] == 1
        assert data["by_status"]["offboarded"] == 0


@pytest.mark.asyncio
class TestDepartments:
    async def test_create_and_list(self, client: AsyncClient):
        response = await client.post("/api/v1/organization/department/", json={"name": "People"})
        assert response.status_code == status.HTTP_201_CREATED

        response = await client.post("/api/v1/organization/department/", json={"name": "People"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await client.get("/api/v1/organization/department/")
        assert [d["name"] for d in response.json()] == ["People"]

import pytest
from decimal import Decimal
from httpx import AsyncClient
from fastapi import status

PAYROLL_URL = "/api/v1/hr/payroll"


def structure(employee_id: int, basic="5000", **extra) -> dict:
    payload = {
        "employee_id": employee_id,
        "basic_salary": basic,
        "hra": "1000",
        "transport_allowance": "200",
        "tax_deduction": "500",
        "effective_from": "2025-01-01",
    }
    payload.update(extra)
    return payload


@pytest.mark.asyncio
class TestPayroll:
    """Salary structures and monthly payroll"""

    async def test_upsert_salary_structure(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")

        response = await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(employee.id))
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert Decimal(data["total_allowances"]) == Decimal("1200")
        assert Decimal(data["total_deductions"]) == Decimal("500")
        assert Decimal(data["net_salary"]) == Decimal("5700")

        response = await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(employee.id, basic="6000"))
        assert Decimal(response.json()["net_salary"]) == Decimal("6700")

        response = await client.get(f"{PAYROLL_URL}/salary-structures")
        assert len(response.json()) == 1

    async def test_structure_for_unknown_employee(self, client: AsyncClient):
        response = await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(999))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_negative_salary_rejected(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        response = await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(employee.id, basic="-1"))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_generate_requires_structures(self, client: AsyncClient):
        response = await client.post(f"{PAYROLL_URL}/generate", json={"month": 3, "year": 2025})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_generate_once_per_month(self, client: AsyncClient, make_employee):
        first = await make_employee("ACQ001", "ada@acme.io")
        second = await make_employee("ACQ002", "alan@acme.io")
        await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(first.id))
        await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(second.id, basic="3000"))

        response = await client.post(f"{PAYROLL_URL}/generate", json={"month": 3, "year": 2025})
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json() == {"month": 3, "year": 2025, "count": 2}

        response = await client.post(f"{PAYROLL_URL}/generate", json={"month": 3, "year": 2025})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await client.get(f"{PAYROLL_URL}/", params={"month": 3, "year": 2025})
        records = response.json()
        assert [r["status"] for r in records] == ["draft", "draft"]
        assert sorted(Decimal(r["net_salary"]) for r in records) == [Decimal("3700"), Decimal("5700")]

    async def test_status_updates(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(employee.id))
        await client.post(f"{PAYROLL_URL}/generate", json={"month": 3, "year": 2025})
        record_id = (await client.get(f"{PAYROLL_URL}/", params={"month": 3, "year": 2025})).json()[0]["id"]

        response = await client.put(f"{PAYROLL_URL}/{record_id}/status", json={"status": "paid"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["paid_at"] is not None

        response = await client.put(f"{PAYROLL_URL}/{record_id}/status", json={"status": "processed"})
        assert response.json()["status"] == "processed"
        assert response.json()["paid_at"] is None

        response = await client.put(f"{PAYROLL_URL}/999/status", json={"status": "paid"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_bulk_status_and_stats(self, client: AsyncClient, make_employee):
        first = await make_employee("ACQ001", "ada@acme.io")
        second = await make_employee("ACQ002", "alan@acme.io")
        await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(first.id))
        await client.put(f"{PAYROLL_URL}/salary-structures", json=structure(second.id, basic="3000"))
        await client.post(f"{PAYROLL_URL}/generate", json={"month": 3, "year": 2025})
        records = (await client.get(f"{PAYROLL_URL}/", params={"month": 3, "year": 2025})).json()

        response = await client.put(f"{PAYROLL_URL}/bulk-status", json={"ids": [records[0]["id"]], "status": "paid"})
        assert response.json()["updated"] == 1

        response = await client.get(f"{PAYROLL_URL}/stats", params={"month": 3, "year": 2025})
        stats = response.json()
        assert Decimal(stats["total_payroll"]) == Decimal("9400")
        assert stats["employee_count"] == 2
        assert Decimal(stats["avg_salary"]) == Decimal("4700")
        assert stats["pending"] == 1

        response = await client.put(f"{PAYROLL_URL}/bulk-status", json={"ids": [], "status": "paid"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

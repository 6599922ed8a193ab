import pytest
from decimal import Decimal
from httpx import AsyncClient
from fastapi import status
from hrms.models.shared.enums import EmployeeStatus

ASSETS_URL = "/api/v1/asset/"
REPORTS_URL = "/api/v1/reports"


def asset_payload(name="ThinkPad X1", category="Laptop", **fields):
    payload = {"name": name, "category": category}
    payload.update(fields)
    return payload


@pytest.mark.asyncio
class TestAssets:
    async def test_codes_numbered_per_category(self, client: AsyncClient):
        response = await client.post(ASSETS_URL, json=asset_payload(serial_number="SN-1"))
        assert response.status_code == status.HTTP_201_CREATED
        first = response.json()
        assert first["asset_code"] == "LAP-0001"
        assert first["status"] == "available"
        assert first["current_assignment"] is None

        second = (await client.post(ASSETS_URL, json=asset_payload(name="MacBook Air"))).json()
        assert second["asset_code"] == "LAP-0002"

        monitor = (await client.post(ASSETS_URL, json=asset_payload(name="Dell U27", category="Monitor"))).json()
        assert monitor["asset_code"] == "MON-0001"

    async def test_blank_name_rejected(self, client: AsyncClient):
        response = await client.post(ASSETS_URL, json=asset_payload(name="   "))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_assign_and_return(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        other = await make_employee("ACQ002", "alan@acme.io")
        asset_id = (await client.post(ASSETS_URL, json=asset_payload())).json()["id"]

        response = await client.post(
            f"{ASSETS_URL}{asset_id}/assign",
            json={"employee_id": employee.id, "assigned_date": "2025-03-03", "notes": "With charger"}
        )
        assert response.status_code == status.HTTP_200_OK
        asset = response.json()
        assert asset["status"] == "assigned"
        assert asset["current_assignment"]["employee"]["employee_code"] == "ACQ001"

        response = await client.post(f"{ASSETS_URL}{asset_id}/assign", json={"employee_id": other.id})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await client.get(f"{ASSETS_URL}employee/{employee.id}")
        held = response.json()
        assert [a["asset"]["asset_code"] for a in held] == ["LAP-0001"]
        assert held[0]["notes"] == "With charger"

        response = await client.put(f"{ASSETS_URL}{asset_id}/return", json={"returned_date": "2025-03-01"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await client.put(f"{ASSETS_URL}{asset_id}/return", json={"returned_date": "2025-04-01"})
        assert response.json()["status"] == "available"
        assert response.json()["current_assignment"] is None

        response = await client.get(f"{ASSETS_URL}employee/{employee.id}")
        assert response.json() == []

        response = await client.put(f"{ASSETS_URL}{asset_id}/return", json={})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_assign_rules(self, client: AsyncClient, make_employee):
        leaver = await make_employee("ACQ001", "gone@acme.io", status=EmployeeStatus.OFFBOARDED)
        asset_id = (await client.post(ASSETS_URL, json=asset_payload())).json()["id"]

        response = await client.post(f"{ASSETS_URL}{asset_id}/assign", json={"employee_id": 999})
        assert response.status_code == status.HTTP_404_NOT_FOUND

        response = await client.post(f"{ASSETS_URL}{asset_id}/assign", json={"employee_id": leaver.id})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        await client.put(f"{ASSETS_URL}{asset_id}", json={"status": "maintenance"})
        employee = await make_employee("ACQ002", "ada@acme.io")
        response = await client.post(f"{ASSETS_URL}{asset_id}/assign", json={"employee_id": employee.id})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_status_cannot_be_set_to_assigned(self, client: AsyncClient):
        asset_id = (await client.post(ASSETS_URL, json=asset_payload())).json()["id"]
        response = await client.put(f"{ASSETS_URL}{asset_id}", json={"status": "assigned"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_delete(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io")
        asset_id = (await client.post(ASSETS_URL, json=asset_payload())).json()["id"]
        await client.post(f"{ASSETS_URL}{asset_id}/assign", json={"employee_id": employee.id})

        response = await client.delete(f"{ASSETS_URL}{asset_id}")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        await client.put(f"{ASSETS_URL}{asset_id}/return", json={})
        response = await client.delete(f"{ASSETS_URL}{asset_id}")
        assert response.json() == {"message": "Asset deleted successfully"}

        response = await client.get(f"{ASSETS_URL}{asset_id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_list_filters_and_stats(self, client: AsyncClient):
        await client.post(ASSETS_URL, json=asset_payload(serial_number="ABC-123"))
        await client.post(ASSETS_URL, json=asset_payload(name="Dell U27", category="Monitor"))
        phone_id = (await client.post(ASSETS_URL, json=asset_payload(name="Pixel 8", category="Phone"))).json()["id"]
        await client.put(f"{ASSETS_URL}{phone_id}", json={"status": "retired"})

        response = await client.get(ASSETS_URL, params={"category": "monitor"})
        assert [a["name"] for a in response.json()["data"]] == ["Dell U27"]

        response = await client.get(ASSETS_URL, params={"search": "abc"})
        assert [a["asset_code"] for a in response.json()["data"]] == ["LAP-0001"]

        response = await client.get(ASSETS_URL, params={"status": "retired"})
        assert response.json()["count"] == 1

        response = await client.get(f"{ASSETS_URL}stats")
        assert response.json() == {
            "total": 3,
            "laptops": 1,
            "monitors": 1,
            "phones": 1,
            "by_status": {"available": 2, "assigned": 0, "maintenance": 0, "retired": 1},
        }


@pytest.mark.asyncio
class TestAssetInventoryReport:
    async def test_inventory_report(self, client: AsyncClient, make_employee):
        employee = await make_employee("ACQ001", "ada@acme.io", first_name="Ada", last_name="Lovelace")
        laptop_id = (await client.post(
            ASSETS_URL, json=asset_payload(purchase_cost="1500.00", vendor="Lenovo")
        )).json()["id"]
        await client.post(ASSETS_URL, json=asset_payload(name="Dell U27", category="Monitor", purchase_cost="320.50"))
        await client.post(ASSETS_URL, json=asset_payload(name="Spare cable", category="Monitor"))
        await client.post(f"{ASSETS_URL}{laptop_id}/assign", json={"employee_id": employee.id})

        response = await client.get(f"{REPORTS_URL}/asset-inventory")
        assert response.status_code == status.HTTP_200_OK
        report = response.json()
        assert report["total_assets"] == 3
        assert Decimal(report["total_value"]) == Decimal("1820.50")
        assert {s["status"]: s["count"] for s in report["by_status"]} == {"assigned": 1, "available": 2}
        assert {c["category"]: c["count"] for c in report["by_category"]} == {"Laptop": 1, "Monitor": 2}

        records = {r["asset_code"]: r for r in report["records"]}
        assert records["LAP-0001"]["assigned_to"] == "Ada Lovelace"
        assert records["LAP-0001"]["vendor"] == "Lenovo"
        assert records["MON-0002"]["assigned_to"] == "-"
        assert records["MON-0002"]["serial_number"] == "-"

import logging
from collections import Counter
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.models.hr.attendance import AttendanceRecord
from hrms.models.hr.employee import Employee
from hrms.models.shared.enums import EmployeeStatus, PayrollStatus
from hrms.schemas.report.attendance_report_schema import AttendanceReportSummary, AttendanceRow
from hrms.schemas.report.report_schema import (
    AssetInventoryReport,
    AssetReportRecord,
    CategoryCount,
    LeaveBalanceRecord,
    LeaveBalanceReport,
    LeaveTypeBalance,
    PayrollSummaryReport,
    StatusCount,
)
from hrms.services.asset.asset_service import AssetService
from hrms.services.hr.leave_service import LeaveService, build_balances
from hrms.services.hr.payroll_service import PayrollService
from hrms.services.reports.attendance_aggregator import AttendancePolicy, aggregate_attendance
from hrms.utils.date_time import month_name, month_range, now_local

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # =================== ATTENDANCE ===================

    async def get_attendance_report(self, month: int, year: int, department_id: Optional[int] = None,
                                    policy: Optional[AttendancePolicy] = None) -> AttendanceReportSummary:
        """Per-employee lateness and overtime for one month."""
        start, end = month_range(month, year)
        query = (
            select(AttendanceRecord)
            .join(Employee, AttendanceRecord.employee_id == Employee.id)
            .options(selectinload(AttendanceRecord.employee).selectinload(Employee.department))
            .where(
                AttendanceRecord.date >= start,
                AttendanceRecord.date <= end,
                AttendanceRecord.is_deleted == False,
                Employee.is_deleted == False
            )
            .order_by(AttendanceRecord.date, AttendanceRecord.id)
        )
        if department_id:
            query = query.where(Employee.department_id == department_id)

        result = await self.session.execute(query)
        rows = [AttendanceRow.model_validate(record) for record in result.scalars().all()]

        summary = aggregate_attendance(
            rows,
            policy=policy or AttendancePolicy.from_settings(),
            month_name=month_name(month, year),
        )
        logger.info(
            f"Attendance report for {summary.month_name}: {len(rows)} row(s), "
            f"{summary.total_employees} employee(s), {summary.total_late_arrivals} late arrival(s)"
        )
        return summary

    # =================== LEAVE ===================

    async def get_leave_balance_report(self, year: Optional[int] = None) -> LeaveBalanceReport:
        year = year or now_local().year
        leave_service = LeaveService(self.session)

        employees = (await self.session.execute(
            select(Employee)
            .options(selectinload(Employee.department))
            .where(
                Employee.status.in_([EmployeeStatus.ACTIVE, EmployeeStatus.ONBOARDING]),
                Employee.is_deleted == False
            )
            .order_by(Employee.employee_code)
        )).scalars().all()
        leave_types = await leave_service.get_leave_types()
        used = await leave_service.get_used_days(year)

        records = []
        for employee in employees:
            balances = build_balances(leave_types, used.get(employee.id, {}), year)
            records.append(LeaveBalanceRecord(
                employee_id=employee.id,
                employee_code=employee.employee_code,
                employee_name=employee.full_name,
                department=employee.department.name if employee.department else "-",
                balances=[
                    LeaveTypeBalance(
                        leave_type=b.leave_type,
                        total=b.total_days,
                        used=b.used_days,
                        remaining=b.remaining_days,
                    )
                    for b in balances
                ],
            ))

        return LeaveBalanceReport(
            year=year,
            leave_types=[lt.name for lt in leave_types],
            records=records,
        )

    # =================== PAYROLL ===================

    async def get_payroll_summary(self, month: int, year: int) -> PayrollSummaryReport:
        records = await PayrollService(self.session).get_payroll_records(month, year)

        by_status = {s.value: 0 for s in PayrollStatus}
        for record in records:
            by_status[record.status.value] += 1

        def total(attr: str) -> Decimal:
            return sum((Decimal(str(getattr(r, attr) or 0)) for r in records), Decimal("0"))

        return PayrollSummaryReport(
            month_name=month_name(month, year),
            record_count=len(records),
            total_basic=total("basic_salary"),
            total_allowances=total("total_allowances"),
            total_deductions=total("total_deductions"),
            total_net=total("net_salary"),
            by_status=by_status,
        )

    # =================== ASSETS ===================

    async def get_asset_inventory_report(self) -> AssetInventoryReport:
        assets = await AssetService(self.session).get_all_assets()

        status_counts = Counter(asset.status.value for asset in assets)
        category_counts = Counter(asset.category for asset in assets)
        records = []
        for asset in assets:
            assignment = asset.current_assignment
            records.append(AssetReportRecord(
                id=asset.id,
                asset_code=asset.asset_code,
                name=asset.name,
                category=asset.category,
                serial_number=asset.serial_number or "-",
                status=asset.status.value,
                purchase_date=asset.purchase_date,
                purchase_cost=Decimal(str(asset.purchase_cost or 0)),
                warranty_end_date=asset.warranty_end_date,
                vendor=asset.vendor or "-",
                assigned_to=assignment.employee.full_name if assignment and assignment.employee else "-",
            ))

        return AssetInventoryReport(
            total_assets=len(assets),
            total_value=sum((r.purchase_cost for r in records), Decimal("0")),
            by_status=[StatusCount(status=s, count=c) for s, c in status_counts.items()],
            by_category=[CategoryCount(category=c, count=n) for c, n in category_counts.items()],
            records=records,
        )

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.core.exceptions import BadRequestError, NotFoundError
from hrms.models.hr.employee import Employee
from hrms.models.hr.payroll import PayrollRecord, SalaryStructure
from hrms.models.shared.enums import PayrollStatus
from hrms.schemas.hr.payroll_schema import SalaryStructureCreate
from hrms.utils.date_time import month_name, now_local

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class PayrollService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Salary structures ----------
    async def get_salary_structures(self) -> List[SalaryStructure]:
        result = await self.session.execute(
            select(SalaryStructure)
            .join(Employee, SalaryStructure.employee_id == Employee.id)
            .options(selectinload(SalaryStructure.employee))
            .where(SalaryStructure.is_deleted == False, Employee.is_deleted == False)
            .order_by(Employee.employee_code)
        )
        return list(result.scalars().all())

    async def upsert_salary_structure(self, data: SalaryStructureCreate) -> SalaryStructure:
        try:
            employee = await self.session.get(Employee, data.employee_id)
            if employee is None or employee.is_deleted:
                raise NotFoundError(f"Employee with ID {data.employee_id} not found")

            result = await self.session.execute(
                select(SalaryStructure).where(SalaryStructure.employee_id == data.employee_id)
            )
            structure = result.scalar_one_or_none()
            created = structure is None
            if created:
                structure = SalaryStructure(employee_id=data.employee_id)
                self.session.add(structure)

            for field, value in data.model_dump(exclude={"employee_id"}).items():
                setattr(structure, field, value)
            structure.is_deleted = False

            await self.session.commit()
            logger.info(
                f"Salary structure {'created' if created else 'updated'} for {employee.employee_code}: "
                f"net {_money(structure.net_salary)}"
            )

            result = await self.session.execute(
                select(SalaryStructure)
                .options(selectinload(SalaryStructure.employee))
                .where(SalaryStructure.id == structure.id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one()

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error saving salary structure for employee {data.employee_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error saving salary structure")

    # ---------- Payroll ----------
    async def generate_payroll(self, month: int, year: int) -> int:
        """Create one draft record per salary structure; returns how many were created."""
        try:
            existing = await self.session.scalar(
                select(func.count(PayrollRecord.id)).where(
                    PayrollRecord.month == month,
                    PayrollRecord.year == year,
                    PayrollRecord.is_deleted == False
                )
            )
            if existing:
                raise BadRequestError(f"Payroll for {month_name(month, year)} has already been generated")

            structures = await self.get_salary_structures()
            if not structures:
                raise BadRequestError("No salary structures found. Add salary details for employees first.")

            for structure in structures:
                self.session.add(PayrollRecord(
                    employee_id=structure.employee_id,
                    month=month,
                    year=year,
                    basic_salary=_money(structure.basic_salary),
                    total_allowances=_money(structure.total_allowances),
                    total_deductions=_money(structure.total_deductions),
                    net_salary=_money(structure.net_salary),
                    status=PayrollStatus.DRAFT,
                ))

            await self.session.commit()
            logger.info(f"Generated payroll for {month_name(month, year)}: {len(structures)} record(s)")
            return len(structures)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error generating payroll for {month}/{year}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error generating payroll")

    async def get_payroll_records(self, month: int, year: int, status_filter: Optional[PayrollStatus] = None) -> List[PayrollRecord]:
        query = (
            select(PayrollRecord)
            .options(selectinload(PayrollRecord.employee))
            .where(
                PayrollRecord.month == month,
                PayrollRecord.year == year,
                PayrollRecord.is_deleted == False
            )
        )
        if status_filter is not None:
            query = query.where(PayrollRecord.status == status_filter)
        result = await self.session.execute(
            query.order_by(PayrollRecord.id).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    def _apply_status(self, record: PayrollRecord, new_status: PayrollStatus) -> None:
        record.status = new_status
        record.paid_at = now_local() if new_status == PayrollStatus.PAID else None

    async def update_status(self, record_id: int, new_status: PayrollStatus) -> PayrollRecord:
        try:
            result = await self.session.execute(
                select(PayrollRecord).where(PayrollRecord.id == record_id, PayrollRecord.is_deleted == False)
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise NotFoundError("Payroll record not found")

            self._apply_status(record, new_status)
            await self.session.commit()
            logger.info(f"Payroll record {record_id} marked {new_status.value}")

            result = await self.session.execute(
                select(PayrollRecord)
                .options(selectinload(PayrollRecord.employee))
                .where(PayrollRecord.id == record_id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one()

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating payroll record {record_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating payroll status")

    async def bulk_update_status(self, record_ids: List[int], new_status: PayrollStatus) -> int:
        try:
            result = await self.session.execute(
                select(PayrollRecord).where(PayrollRecord.id.in_(record_ids), PayrollRecord.is_deleted == False)
            )
            records = result.scalars().all()
            if not records:
                raise NotFoundError("No payroll records found")

            for record in records:
                self._apply_status(record, new_status)
            await self.session.commit()
            logger.info(f"{len(records)} payroll record(s) marked {new_status.value}")
            return len(records)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error bulk updating payroll records: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating payroll status")

    async def get_stats(self, month: Optional[int] = None, year: Optional[int] = None) -> Dict[str, Any]:
        today = now_local()
        month = month or today.month
        year = year or today.year

        records = await self.get_payroll_records(month, year)
        total = sum((_money(r.net_salary) for r in records), Decimal("0"))
        count = len(records)
        return {
            "total_payroll": total,
            "employee_count": count,
            "avg_salary": _money(total / count) if count else Decimal("0.00"),
            "pending": sum(1 for r in records if r.status != PayrollStatus.PAID),
        }

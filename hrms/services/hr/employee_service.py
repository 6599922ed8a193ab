import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.core.config import settings
from hrms.core.exceptions import BadRequestError, DuplicateCodeError, NotFoundError, ValidationError
from hrms.models.hr.employee import DEFAULT_WORKING_DAYS, Employee
from hrms.models.organization.department import Department
from hrms.models.shared.enums import EmployeeStatus
from hrms.schemas.hr.employee_schema import EmployeeCreate, EmployeeUpdate
from hrms.services.hr.employee_code_service import EmployeeCodeService
from hrms.utils.employee_code import validate_code

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.codes = EmployeeCodeService(session)

    # ---------- Helpers ----------
    async def _ensure_department(self, department_id: Optional[int]) -> None:
        if not department_id:
            return
        dep_res = await self.session.execute(
            select(Department.id).where(
                Department.id == department_id,
                Department.is_active == True,
                Department.is_deleted == False
            )
        )
        if dep_res.scalar_one_or_none() is None:
            raise BadRequestError(f"Department with ID {department_id} not found")

    async def _ensure_manager(self, manager_id: Optional[int], employee_id: Optional[int] = None) -> None:
        if not manager_id:
            return
        if employee_id is not None and manager_id == employee_id:
            raise BadRequestError("An employee cannot be their own manager")
        mgr_res = await self.session.execute(
            select(Employee.id).where(Employee.id == manager_id, Employee.is_deleted == False)
        )
        if mgr_res.scalar_one_or_none() is None:
            raise BadRequestError(f"Manager with ID {manager_id} not found")

    async def _ensure_unique_email(self, email: str, employee_id: Optional[int] = None) -> None:
        query = select(Employee.id).where(func.lower(Employee.email) == email.lower())
        if employee_id is not None:
            query = query.where(Employee.id != employee_id)
        email_res = await self.session.execute(query.limit(1))
        if email_res.scalar_one_or_none() is not None:
            raise BadRequestError(f"Employee with email '{email}' already exists")

    async def _insert_employee(self, code: str, values: Dict[str, Any], current_user_id: Optional[int]) -> Employee:
        employee = Employee(employee_code=code, created_by=current_user_id, **values)
        self.session.add(employee)
        await self.session.commit()
        return employee

    async def _insert_with_code_conflict_check(self, code: str, values: Dict[str, Any],
                                               current_user_id: Optional[int]) -> Optional[Employee]:
        """Insert with ``code``; return None when the code lost an allocation race."""
        try:
            return await self._insert_employee(code, values, current_user_id)
        except IntegrityError:
            await self.session.rollback()
            if not await self.codes.is_code_taken(code):
                # the conflict was on another unique column, most likely the email
                raise BadRequestError(f"Employee with email '{values['email']}' already exists")
            return None

    # ---------- Create / Update / Delete ----------
    async def create_employee(self, data: EmployeeCreate, current_user_id: Optional[int] = None) -> Employee:
        try:
            await self._ensure_department(data.department_id)
            await self._ensure_manager(data.manager_id)
            await self._ensure_unique_email(data.email)

            values = data.model_dump(exclude={"employee_code"})
            if values.get("working_days") is None:
                values["working_days"] = list(DEFAULT_WORKING_DAYS)

            pattern = await self.codes.get_pattern()

            if data.employee_code:
                code = data.employee_code.strip().upper()
                if not validate_code(code, pattern):
                    raise ValidationError(
                        f"Employee code '{code}' does not match the pattern "
                        f"{pattern.prefix}{pattern.separator}{'0' * pattern.min_digits}"
                    )
                if await self.codes.is_code_taken(code):
                    raise DuplicateCodeError(code)
                employee = await self._insert_with_code_conflict_check(code, values, current_user_id)
                if employee is None:
                    raise DuplicateCodeError(code)
            else:
                employee = None
                attempts = 0
                code = ""
                while employee is None and attempts < settings.EMPLOYEE_CODE_MAX_RETRIES:
                    attempts += 1
                    code = await self.codes.get_next_code(pattern)
                    employee = await self._insert_with_code_conflict_check(code, values, current_user_id)
                    if employee is None:
                        logger.warning(f"Employee code {code} was taken concurrently, retrying (attempt {attempts})")
                if employee is None:
                    logger.error(f"Could not allocate an employee code after {attempts} attempts")
                    raise DuplicateCodeError(code, attempts=attempts)

            logger.info(f"Employee created: {employee.employee_code} - {employee.full_name} by user {current_user_id}")
            return await self.get_employee(employee.id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating employee: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating employee")

    async def update_employee(self, employee_id: int, data: EmployeeUpdate, current_user_id: Optional[int] = None) -> Employee:
        try:
            employee = await self.get_employee(employee_id)
            if not employee:
                raise NotFoundError("Employee not found")

            if data.email and data.email.lower() != employee.email.lower():
                await self._ensure_unique_email(data.email, employee_id)
            await self._ensure_department(data.department_id)
            await self._ensure_manager(data.manager_id, employee_id)

            changes = data.model_dump(exclude_unset=True)
            start = changes.get("working_hours_start", employee.working_hours_start)
            end = changes.get("working_hours_end", employee.working_hours_end)
            if (start is None) != (end is None):
                raise ValidationError("Working hours need both a start and an end")

            for field, value in changes.items():
                setattr(employee, field, value)
            employee.updated_by = current_user_id

            await self.session.commit()
            logger.info(f"Employee updated: {employee.employee_code} by user {current_user_id}")
            return await self.get_employee(employee_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating employee {employee_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating employee")

    async def delete_employee(self, employee_id: int, current_user_id: Optional[int] = None) -> bool:
        try:
            employee = await self.get_employee(employee_id)
            if not employee:
                return False

            employee.status = EmployeeStatus.OFFBOARDED
            employee.is_deleted = True
            employee.updated_by = current_user_id

            await self.session.commit()
            logger.info(f"Employee offboarded: {employee.employee_code} by user {current_user_id}")
            return True

        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error deleting employee {employee_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting employee")

    # ---------- Getters ----------
    async def get_employee(self, employee_id: int) -> Optional[Employee]:
        result = await self.session.execute(
            select(Employee)
            .options(selectinload(Employee.department))
            .where(
                Employee.id == employee_id,
                Employee.is_deleted == False
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    # ---------- Listing ----------
    async def get_employees(
        self,
        page_index: int = 1,
        page_size: int = 100,
        department_id: Optional[int] = None,
        status_filter: Optional[EmployeeStatus] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get paginated list of employees with filtering"""
        conditions = [Employee.is_deleted == False]

        if department_id:
            conditions.append(Employee.department_id == department_id)
        if status_filter is not None:
            conditions.append(Employee.status == status_filter)
        if search:
            like = f"%{search}%"
            conditions.append(
                or_(
                    Employee.first_name.ilike(like),
                    Employee.last_name.ilike(like),
                    Employee.employee_code.ilike(like),
                    Employee.email.ilike(like),
                    Employee.phone.ilike(like),
                )
            )

        total_count = await self.session.scalar(
            select(func.count(Employee.id)).where(*conditions)
        )

        skip = (page_index - 1) * page_size

        employees = await self.session.scalars(
            select(Employee)
            .options(selectinload(Employee.department))
            .where(*conditions)
            .order_by(Employee.employee_code)
            .offset(skip)
            .limit(page_size)
        )

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": employees.all()
        }

    async def get_stats(self) -> Dict[str, Any]:
        result = await self.session.execute(
            select(Employee.status, func.count(Employee.id))
            .where(Employee.is_deleted == False)
            .group_by(Employee.status)
        )
        by_status = {s.value: 0 for s in EmployeeStatus}
        for emp_status, count in result.all():
            key = emp_status.value if isinstance(emp_status, EmployeeStatus) else str(emp_status)
            by_status[key] = count
        return {"total": sum(by_status.values()), "by_status": by_status}

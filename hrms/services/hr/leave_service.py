import logging
from collections import defaultdict
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fastapi import HTTPException, status
from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.core.exceptions import BadRequestError, NotFoundError
from hrms.models.hr.employee import Employee
from hrms.models.hr.leave import LeaveRequest, LeaveType
from hrms.models.shared.enums import LeaveStatus
from hrms.schemas.hr.leave_schema import LeaveBalance, LeaveRequestCreate, LeaveReview, LeaveTypeCreate
from hrms.services.notification.notification_service import NotificationService
from hrms.utils.date_time import now_local

logger = logging.getLogger(__name__)

BLOCKING_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


def count_leave_days(start_date: date, end_date: date) -> int:
    """Calendar days, both ends included."""
    return (end_date - start_date).days + 1


def build_balances(leave_types: Iterable[LeaveType], used_by_type: Mapping[int, int], year: int) -> List[LeaveBalance]:
    balances = []
    for leave_type in leave_types:
        total = leave_type.days_per_year or 0
        used = int(used_by_type.get(leave_type.id, 0))
        balances.append(LeaveBalance(
            leave_type_id=leave_type.id,
            leave_type=leave_type.name,
            is_paid=bool(leave_type.is_paid),
            total_days=total,
            used_days=used,
            remaining_days=max(0, total - used),
            year=year,
        ))
    return balances


class LeaveService:
    def __init__(self, session: AsyncSession, notification_service: Optional[NotificationService] = None):
        self.session = session
        self.notifications = notification_service or NotificationService(session)

    # ---------- Leave types ----------
    async def get_leave_types(self) -> List[LeaveType]:
        result = await self.session.execute(
            select(LeaveType).where(LeaveType.is_deleted == False).order_by(LeaveType.name)
        )
        return list(result.scalars().all())

    async def create_leave_type(self, data: LeaveTypeCreate) -> LeaveType:
        try:
            name = data.name.strip()
            exists = await self.session.execute(select(LeaveType.id).where(LeaveType.name == name))
            if exists.scalar_one_or_none() is not None:
                raise BadRequestError(f"Leave type '{name}' already exists")

            leave_type = LeaveType(
                name=name,
                description=data.description,
                days_per_year=data.days_per_year,
                is_paid=data.is_paid,
            )
            self.session.add(leave_type)
            await self.session.commit()
            await self.session.refresh(leave_type)
            logger.info(f"Leave type created: {leave_type.name} ({leave_type.days_per_year} days/year)")
            return leave_type

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating leave type: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating leave type")

    # ---------- Requests ----------
    async def get_leave_request(self, request_id: int) -> Optional[LeaveRequest]:
        result = await self.session.execute(
            select(LeaveRequest)
            .options(selectinload(LeaveRequest.leave_type), selectinload(LeaveRequest.employee))
            .where(LeaveRequest.id == request_id, LeaveRequest.is_deleted == False)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _has_overlap(self, employee_id: int, start_date: date, end_date: date) -> bool:
        result = await self.session.execute(
            select(LeaveRequest.id).where(
                LeaveRequest.employee_id == employee_id,
                LeaveRequest.status.in_(BLOCKING_STATUSES),
                LeaveRequest.start_date <= end_date,
                LeaveRequest.end_date >= start_date,
                LeaveRequest.is_deleted == False
            ).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def submit_leave_request(self, data: LeaveRequestCreate) -> LeaveRequest:
        try:
            emp_res = await self.session.execute(
                select(Employee).where(Employee.id == data.employee_id, Employee.is_deleted == False)
            )
            employee = emp_res.scalar_one_or_none()
            if employee is None:
                raise NotFoundError(f"Employee with ID {data.employee_id} not found")

            type_res = await self.session.execute(
                select(LeaveType).where(LeaveType.id == data.leave_type_id, LeaveType.is_deleted == False)
            )
            leave_type = type_res.scalar_one_or_none()
            if leave_type is None:
                raise BadRequestError(f"Leave type with ID {data.leave_type_id} not found")

            if await self._has_overlap(employee.id, data.start_date, data.end_date):
                raise BadRequestError("Leave request overlaps an existing pending or approved request")

            leave_request = LeaveRequest(
                employee_id=employee.id,
                leave_type_id=leave_type.id,
                start_date=data.start_date,
                end_date=data.end_date,
                days_count=count_leave_days(data.start_date, data.end_date),
                reason=data.reason,
                status=LeaveStatus.PENDING,
            )
            self.session.add(leave_request)
            await self.session.commit()
            logger.info(
                f"Leave request {leave_request.id} submitted by {employee.employee_code}: "
                f"{leave_request.days_count} day(s) of {leave_type.name}"
            )

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error submitting leave request: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error submitting leave request")

        if employee.manager_id:
            await self._notify_manager(employee, leave_request, leave_type.name)
        return await self.get_leave_request(leave_request.id)

    async def _notify_manager(self, employee: Employee, leave_request: LeaveRequest, leave_type_name: str) -> None:
        try:
            manager = await self.session.get(Employee, employee.manager_id)
            if manager is not None and not manager.is_deleted:
                await self.notifications.notify_leave_submitted(manager, employee, leave_request, leave_type_name)
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to notify manager about leave request {leave_request.id}: {e}")

    async def review_leave_request(self, request_id: int, review: LeaveReview) -> LeaveRequest:
        try:
            leave_request = await self.get_leave_request(request_id)
            if leave_request is None:
                raise NotFoundError("Leave request not found")
            if leave_request.status != LeaveStatus.PENDING:
                raise BadRequestError(f"Leave request is already {leave_request.status.value}")

            leave_request.status = review.status
            leave_request.reviewer_name = review.reviewer_name
            leave_request.review_notes = review.review_notes
            leave_request.reviewed_at = now_local()
            await self.session.commit()
            logger.info(f"Leave request {request_id} {review.status.value} by {review.reviewer_name}")

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error reviewing leave request {request_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error reviewing leave request")

        try:
            await self.notifications.notify_leave_reviewed(
                leave_request.employee, leave_request, leave_request.leave_type.name
            )
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to notify employee about leave request {request_id}: {e}")
        return await self.get_leave_request(request_id)

    async def cancel_leave_request(self, request_id: int, employee_id: Optional[int] = None) -> LeaveRequest:
        try:
            leave_request = await self.get_leave_request(request_id)
            if leave_request is None:
                raise NotFoundError("Leave request not found")
            if employee_id is not None and leave_request.employee_id != employee_id:
                raise BadRequestError("Only the requesting employee can cancel a leave request")
            if leave_request.status != LeaveStatus.PENDING:
                raise BadRequestError("Only pending leave requests can be cancelled")

            leave_request.status = LeaveStatus.CANCELLED
            await self.session.commit()
            logger.info(f"Leave request {request_id} cancelled")
            return await self.get_leave_request(request_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error cancelling leave request {request_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error cancelling leave request")

    async def get_leave_requests(
        self,
        page_index: int = 1,
        page_size: int = 100,
        employee_id: Optional[int] = None,
        status_filter: Optional[LeaveStatus] = None
    ) -> Dict[str, Any]:
        conditions = [LeaveRequest.is_deleted == False]
        if employee_id:
            conditions.append(LeaveRequest.employee_id == employee_id)
        if status_filter is not None:
            conditions.append(LeaveRequest.status == status_filter)

        total_count = await self.session.scalar(select(func.count(LeaveRequest.id)).where(*conditions))
        requests = await self.session.scalars(
            select(LeaveRequest)
            .options(selectinload(LeaveRequest.leave_type), selectinload(LeaveRequest.employee))
            .where(*conditions)
            .order_by(LeaveRequest.start_date.desc(), LeaveRequest.id.desc())
            .offset((page_index - 1) * page_size)
            .limit(page_size)
        )
        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": requests.all()
        }

    # ---------- Balances ----------
    async def get_used_days(self, year: int, employee_id: Optional[int] = None) -> Dict[int, Dict[int, int]]:
        """Approved leave days starting in ``year``, keyed by employee then leave type."""
        query = (
            select(LeaveRequest.employee_id, LeaveRequest.leave_type_id, func.sum(LeaveRequest.days_count))
            .where(
                LeaveRequest.status == LeaveStatus.APPROVED,
                extract("year", LeaveRequest.start_date) == year,
                LeaveRequest.is_deleted == False
            )
            .group_by(LeaveRequest.employee_id, LeaveRequest.leave_type_id)
        )
        if employee_id:
            query = query.where(LeaveRequest.employee_id == employee_id)

        used: Dict[int, Dict[int, int]] = defaultdict(dict)
        for emp_id, type_id, days in (await self.session.execute(query)).all():
            used[emp_id][type_id] = int(days or 0)
        return used

    async def get_leave_balances(self, employee_id: int, year: Optional[int] = None) -> List[LeaveBalance]:
        year = year or now_local().year
        employee = await self.session.get(Employee, employee_id)
        if employee is None or employee.is_deleted:
            raise NotFoundError(f"Employee with ID {employee_id} not found")

        leave_types = await self.get_leave_types()
        used = await self.get_used_days(year, employee_id)
        return build_balances(leave_types, used.get(employee_id, {}), year)

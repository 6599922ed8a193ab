import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.core.exceptions import BadRequestError, NotFoundError
from hrms.models.hr.employee import Employee
from hrms.models.performance.review import PerformanceReview
from hrms.models.shared.enums import ReviewStatus
from hrms.schemas.performance.review_schema import ReviewCreate, ReviewUpdate
from hrms.services.notification.notification_service import NotificationService
from hrms.utils.date_time import now_local, to_local

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, session: AsyncSession, notification_service: Optional[NotificationService] = None):
        self.session = session
        self.notifications = notification_service or NotificationService(session)

    async def _ensure_employee(self, employee_id: int, role: str = "Employee") -> Employee:
        employee = await self.session.get(Employee, employee_id)
        if employee is None or employee.is_deleted:
            raise NotFoundError(f"{role} with ID {employee_id} not found")
        return employee

    async def get_review(self, review_id: int) -> Optional[PerformanceReview]:
        result = await self.session.execute(
            select(PerformanceReview)
            .options(selectinload(PerformanceReview.employee), selectinload(PerformanceReview.reviewer))
            .where(PerformanceReview.id == review_id, PerformanceReview.is_deleted == False)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_reviews(
        self,
        page_index: int = 1,
        page_size: int = 100,
        employee_id: Optional[int] = None,
        reviewer_id: Optional[int] = None,
        status_filter: Optional[ReviewStatus] = None
    ) -> Dict[str, Any]:
        conditions = [PerformanceReview.is_deleted == False]
        if employee_id:
            conditions.append(PerformanceReview.employee_id == employee_id)
        if reviewer_id:
            conditions.append(PerformanceReview.reviewer_id == reviewer_id)
        if status_filter is not None:
            conditions.append(PerformanceReview.status == status_filter)

        total_count = await self.session.scalar(select(func.count(PerformanceReview.id)).where(*conditions))
        reviews = await self.session.scalars(
            select(PerformanceReview)
            .options(selectinload(PerformanceReview.employee), selectinload(PerformanceReview.reviewer))
            .where(*conditions)
            .order_by(PerformanceReview.review_date.desc(), PerformanceReview.id.desc())
            .offset((page_index - 1) * page_size)
            .limit(page_size)
        )
        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": reviews.all()
        }

    async def create_review(self, data: ReviewCreate) -> PerformanceReview:
        try:
            employee = await self._ensure_employee(data.employee_id)
            reviewer = None
            if data.reviewer_id is not None:
                if data.reviewer_id == employee.id:
                    raise BadRequestError("Employees cannot review themselves")
                reviewer = await self._ensure_employee(data.reviewer_id, role="Reviewer")

            review = PerformanceReview(**data.model_dump())
            self.session.add(review)
            await self.session.commit()
            logger.info(
                f"Review {review.id} ({review.review_period}) created for {employee.employee_code} "
                f"as {review.status.value}"
            )

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating performance review: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating review")

        try:
            reviewer_name = reviewer.full_name if reviewer else "HR Team"
            await self.notifications.notify_review_submitted(employee, review, reviewer_name)
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to notify employee about review {review.id}: {e}")
        return await self.get_review(review.id)

    async def update_review(self, review_id: int, data: ReviewUpdate) -> PerformanceReview:
        try:
            review = await self.get_review(review_id)
            if review is None:
                raise NotFoundError("Performance review not found")
            if review.status == ReviewStatus.ACKNOWLEDGED:
                raise BadRequestError("Acknowledged reviews cannot be changed")

            update_data = data.model_dump(exclude_unset=True)
            for required in ("review_period", "review_date", "status"):
                if required in update_data and update_data[required] is None:
                    del update_data[required]
            for field, value in update_data.items():
                setattr(review, field, value)

            await self.session.commit()
            logger.info(f"Review {review_id} updated ({review.status.value})")
            return await self.get_review(review_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating review {review_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating review")

    async def acknowledge_review(self, review_id: int, current_user_id: Optional[int] = None,
                                 now: Optional[datetime] = None) -> PerformanceReview:
        try:
            review = await self.get_review(review_id)
            if review is None:
                raise NotFoundError("Performance review not found")
            if review.status == ReviewStatus.ACKNOWLEDGED:
                raise BadRequestError("Review is already acknowledged")
            if review.status == ReviewStatus.DRAFT:
                raise BadRequestError("Draft reviews cannot be acknowledged")

            review.status = ReviewStatus.ACKNOWLEDGED
            review.acknowledged_at = to_local(now) if now else now_local()
            review.acknowledged_by = current_user_id
            await self.session.commit()
            logger.info(f"Review {review_id} acknowledged by user {current_user_id}")

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error acknowledging review {review_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error acknowledging review")

        if review.reviewer is not None and not review.reviewer.is_deleted:
            try:
                await self.notifications.notify_review_acknowledged(review.reviewer, review.employee, review)
            except Exception as e:
                await self.session.rollback()
                logger.error(f"Failed to notify reviewer about review {review_id}: {e}")
        return await self.get_review(review_id)

    async def delete_review(self, review_id: int) -> bool:
        review = await self.get_review(review_id)
        if review is None:
            raise NotFoundError("Performance review not found")

        review.is_deleted = True
        await self.session.commit()
        logger.info(f"Review {review_id} deleted")
        return True

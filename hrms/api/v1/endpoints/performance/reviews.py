from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.api.dependencies import get_current_user_id
from hrms.core.database import get_async_session
from hrms.models.shared.enums import ReviewStatus
from hrms.schemas.common.pagination import PaginatedResponse
from hrms.schemas.performance.review_schema import ReviewCreate, ReviewResponse, ReviewUpdate
from hrms.services.performance.review_service import ReviewService

router = APIRouter()

@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    review: ReviewCreate,
    session: AsyncSession = Depends(get_async_session)
):
    """Create a review; the employee is notified"""
    service = ReviewService(session)
    return await service.create_review(review)

@router.get("/", response_model=PaginatedResponse[ReviewResponse])
async def get_reviews(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    employee_id: Optional[int] = Query(None),
    reviewer_id: Optional[int] = Query(None),
    status_filter: Optional[ReviewStatus] = Query(None, alias="status"),
    session: AsyncSession = Depends(get_async_session)
):
    service = ReviewService(session)
    return await service.get_reviews(
        page_index=page_index,
        page_size=page_size,
        employee_id=employee_id,
        reviewer_id=reviewer_id,
        status_filter=status_filter
    )

@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = ReviewService(session)
    review = await service.get_review(review_id)
    if review is None:
        raise HTTPException(status_code=404, detail="Performance review not found")
    return review

@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: int,
    review_update: ReviewUpdate,
    session: AsyncSession = Depends(get_async_session)
):
    service = ReviewService(session)
    return await service.update_review(review_id, review_update)

@router.put("/{review_id}/acknowledge", response_model=ReviewResponse)
async def acknowledge_review(
    review_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Employee confirms they have read the review; the reviewer is notified"""
    service = ReviewService(session)
    return await service.acknowledge_review(review_id, current_user_id)

@router.delete("/{review_id}")
async def delete_review(
    review_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = ReviewService(session)
    await service.delete_review(review_id)
    return {"message": "Performance review deleted successfully"}

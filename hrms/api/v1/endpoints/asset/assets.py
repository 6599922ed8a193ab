from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import get_async_session
from hrms.models.shared.enums import AssetStatus
from hrms.schemas.asset.asset_schema import (
    AssetAssignRequest,
    AssetCreate,
    AssetResponse,
    AssetReturnRequest,
    AssetStats,
    AssetUpdate,
    EmployeeAssetResponse,
)
from hrms.schemas.common.pagination import PaginatedResponse
from hrms.services.asset.asset_service import AssetService

router = APIRouter()

@router.post("/", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    asset: AssetCreate,
    session: AsyncSession = Depends(get_async_session)
):
    """Register an asset; its code is numbered within the category"""
    service = AssetService(session)
    return await service.create_asset(asset)

@router.get("/", response_model=PaginatedResponse[AssetResponse])
async def get_assets(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    status_filter: Optional[AssetStatus] = Query(None, alias="status"),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    service = AssetService(session)
    return await service.get_assets(
        page_index=page_index,
        page_size=page_size,
        status_filter=status_filter,
        category=category,
        search=search
    )

@router.get("/stats", response_model=AssetStats)
async def get_asset_stats(session: AsyncSession = Depends(get_async_session)):
    service = AssetService(session)
    return await service.get_stats()

@router.get("/employee/{employee_id}", response_model=List[EmployeeAssetResponse])
async def get_employee_assets(
    employee_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    """Assets currently held by an employee"""
    service = AssetService(session)
    return await service.get_employee_assets(employee_id)

@router.get("/{asset_id}", response_model=AssetResponse)
async def get_asset(
    asset_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = AssetService(session)
    asset = await service.get_asset(asset_id)
    if asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    return asset

@router.put("/{asset_id}", response_model=AssetResponse)
async def update_asset(
    asset_id: int,
    asset_update: AssetUpdate,
    session: AsyncSession = Depends(get_async_session)
):
    service = AssetService(session)
    return await service.update_asset(asset_id, asset_update)

@router.delete("/{asset_id}")
async def delete_asset(
    asset_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = AssetService(session)
    await service.delete_asset(asset_id)
    return {"message": "Asset deleted successfully"}

@router.post("/{asset_id}/assign", response_model=AssetResponse)
async def assign_asset(
    asset_id: int,
    payload: AssetAssignRequest,
    session: AsyncSession = Depends(get_async_session)
):
    service = AssetService(session)
    return await service.assign_asset(asset_id, payload)

@router.put("/{asset_id}/return", response_model=AssetResponse)
async def return_asset(
    asset_id: int,
    payload: AssetReturnRequest,
    session: AsyncSession = Depends(get_async_session)
):
    service = AssetService(session)
    return await service.return_asset(asset_id, payload)

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.core.config import settings
from hrms.core.exceptions import BadRequestError, DuplicateCodeError, NotFoundError
from hrms.models.asset.asset import Asset, AssetAssignment
from hrms.models.hr.employee import Employee
from hrms.models.shared.enums import AssetStatus, EmployeeStatus
from hrms.schemas.asset.asset_schema import (
    AssetAssignRequest,
    AssetCreate,
    AssetReturnRequest,
    AssetStats,
    AssetUpdate,
)
from hrms.schemas.hr.employee_code_schema import EmployeeCodePattern
from hrms.utils.date_time import now_local
from hrms.utils.employee_code import like_prefix, next_code

logger = logging.getLogger(__name__)


def asset_code_pattern(category: str) -> EmployeeCodePattern:
    """Asset codes are numbered per category, e.g. ``LAP-0007``."""
    return EmployeeCodePattern(prefix=category[:3], separator="-", min_digits=settings.ASSET_CODE_DIGITS)


class AssetService:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _with_assignments(self, query):
        return query.options(selectinload(Asset.assignments).selectinload(AssetAssignment.employee))

    async def get_asset(self, asset_id: int) -> Optional[Asset]:
        result = await self.session.execute(
            self._with_assignments(select(Asset))
            .where(Asset.id == asset_id, Asset.is_deleted == False)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_assets(
        self,
        page_index: int = 1,
        page_size: int = 100,
        status_filter: Optional[AssetStatus] = None,
        category: Optional[str] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        conditions = [Asset.is_deleted == False]
        if status_filter is not None:
            conditions.append(Asset.status == status_filter)
        if category:
            conditions.append(func.lower(Asset.category) == category.lower())
        if search:
            term = f"%{search.strip()}%"
            conditions.append(or_(
                Asset.name.ilike(term),
                Asset.asset_code.ilike(term),
                Asset.serial_number.ilike(term)
            ))

        total_count = await self.session.scalar(select(func.count(Asset.id)).where(*conditions))
        assets = await self.session.scalars(
            self._with_assignments(select(Asset))
            .where(*conditions)
            .order_by(Asset.created_at.desc(), Asset.id.desc())
            .offset((page_index - 1) * page_size)
            .limit(page_size)
        )
        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": assets.all()
        }

    async def get_all_assets(self) -> List[Asset]:
        result = await self.session.execute(
            self._with_assignments(select(Asset))
            .where(Asset.is_deleted == False)
            .order_by(Asset.created_at.desc(), Asset.id.desc())
        )
        return list(result.scalars().all())

    async def get_next_code(self, category: str) -> str:
        pattern = asset_code_pattern(category)
        result = await self.session.execute(
            select(Asset.asset_code).where(Asset.asset_code.ilike(like_prefix(pattern), escape="\\"))
        )
        return next_code(result.scalars().all(), pattern)

    async def create_asset(self, data: AssetCreate) -> Asset:
        try:
            for attempt in range(1, settings.EMPLOYEE_CODE_MAX_RETRIES + 1):
                code = await self.get_next_code(data.category)
                asset = Asset(asset_code=code, status=AssetStatus.AVAILABLE, **data.model_dump())
                self.session.add(asset)
                try:
                    await self.session.commit()
                except IntegrityError:
                    await self.session.rollback()
                    logger.warning(f"Asset code {code} was taken concurrently (attempt {attempt})")
                    continue
                logger.info(f"Asset {asset.asset_code} created: {asset.name}")
                return await self.get_asset(asset.id)

            raise DuplicateCodeError("Could not allocate a unique asset code, please retry")

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating asset: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating asset")

    async def update_asset(self, asset_id: int, data: AssetUpdate) -> Asset:
        try:
            asset = await self.get_asset(asset_id)
            if asset is None:
                raise NotFoundError("Asset not found")

            update_data = data.model_dump(exclude_unset=True)
            for required in ("name", "category", "status"):
                if required in update_data and update_data[required] is None:
                    del update_data[required]
            if "status" in update_data and asset.current_assignment is not None:
                raise BadRequestError("Return the asset before changing its status")

            for field, value in update_data.items():
                setattr(asset, field, value)
            await self.session.commit()
            logger.info(f"Asset {asset.asset_code} updated")
            return await self.get_asset(asset_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating asset {asset_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating asset")

    async def delete_asset(self, asset_id: int) -> bool:
        asset = await self.get_asset(asset_id)
        if asset is None:
            raise NotFoundError("Asset not found")
        if asset.current_assignment is not None:
            raise BadRequestError("Assigned assets must be returned before they are deleted")

        asset.is_deleted = True
        await self.session.commit()
        logger.info(f"Asset {asset.asset_code} deleted")
        return True

    # ---------- Assignments ----------
    async def assign_asset(self, asset_id: int, data: AssetAssignRequest) -> Asset:
        try:
            asset = await self.get_asset(asset_id)
            if asset is None:
                raise NotFoundError("Asset not found")
            if asset.status != AssetStatus.AVAILABLE:
                raise BadRequestError(f"Asset is {asset.status.value} and cannot be assigned")

            employee = await self.session.get(Employee, data.employee_id)
            if employee is None or employee.is_deleted:
                raise NotFoundError(f"Employee with ID {data.employee_id} not found")
            if employee.status == EmployeeStatus.OFFBOARDED:
                raise BadRequestError("Assets cannot be assigned to offboarded employees")

            asset.assignments.append(AssetAssignment(
                employee_id=employee.id,
                assigned_date=data.assigned_date or now_local().date(),
                notes=data.notes,
            ))
            asset.status = AssetStatus.ASSIGNED
            await self.session.commit()
            logger.info(f"Asset {asset.asset_code} assigned to {employee.employee_code}")
            return await self.get_asset(asset_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error assigning asset {asset_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error assigning asset")

    async def return_asset(self, asset_id: int, data: AssetReturnRequest) -> Asset:
        try:
            asset = await self.get_asset(asset_id)
            if asset is None:
                raise NotFoundError("Asset not found")
            assignment = asset.current_assignment
            if assignment is None:
                raise BadRequestError("Asset is not assigned to anyone")

            returned_date = data.returned_date or now_local().date()
            if returned_date < assignment.assigned_date:
                raise BadRequestError("Return date cannot be before the assignment date")

            assignment.returned_date = returned_date
            if data.notes:
                assignment.notes = data.notes
            asset.status = AssetStatus.AVAILABLE
            await self.session.commit()
            logger.info(f"Asset {asset.asset_code} returned on {returned_date}")
            return await self.get_asset(asset_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error returning asset {asset_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error returning asset")

    async def get_employee_assets(self, employee_id: int) -> List[AssetAssignment]:
        """Assets the employee currently holds"""
        result = await self.session.execute(
            select(AssetAssignment)
            .join(Asset, AssetAssignment.asset_id == Asset.id)
            .options(selectinload(AssetAssignment.asset))
            .where(
                AssetAssignment.employee_id == employee_id,
                AssetAssignment.returned_date.is_(None),
                AssetAssignment.is_deleted == False,
                Asset.is_deleted == False
            )
            .order_by(AssetAssignment.assigned_date.desc(), AssetAssignment.id.desc())
        )
        return list(result.scalars().all())

    async def get_stats(self) -> AssetStats:
        rows = (await self.session.execute(
            select(Asset.category, Asset.status).where(Asset.is_deleted == False)
        )).all()
        categories = Counter(category.lower() for category, _ in rows)
        by_status = {s.value: 0 for s in AssetStatus}
        for _, asset_status in rows:
            by_status[asset_status.value] += 1

        return AssetStats(
            total=len(rows),
            laptops=categories.get("laptop", 0),
            monitors=categories.get("monitor", 0),
            phones=categories.get("phone", 0),
            by_status=by_status,
        )

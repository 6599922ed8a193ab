import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.models.organization.department import Department
from hrms.schemas.organization.department_schema import DepartmentCreate

logger = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_department(self, department_id: int) -> Optional[Department]:
        result = await self.session.execute(
            select(Department).where(
                Department.id == department_id,
                Department.is_deleted == False
            )
        )
        return result.scalar_one_or_none()

    async def get_departments(self, is_active: Optional[bool] = None) -> List[Department]:
        query = select(Department).where(Department.is_deleted == False)
        if is_active is not None:
            query = query.where(Department.is_active == is_active)
        result = await self.session.execute(query.order_by(Department.name))
        return list(result.scalars().all())

    async def create_department(self, data: DepartmentCreate, created_by: Optional[int] = None) -> Department:
        try:
            name = data.name.strip()
            exists = await self.session.execute(
                select(Department.id).where(Department.name == name).limit(1)
            )
            if exists.scalar_one_or_none() is not None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Department '{name}' already exists"
                )

            dept = Department(
                name=name,
                description=data.description,
                is_active=True,
                created_by=created_by,
            )
            self.session.add(dept)
            await self.session.commit()
            await self.session.refresh(dept)
            logger.info(f"Department created: {dept.name}")
            return dept

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating department: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating department")

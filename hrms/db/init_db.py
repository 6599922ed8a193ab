import asyncio
import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.core.database import engine, async_session_maker
from hrms.models import *  # Import all models
from hrms.models.shared.enums import Base
from hrms.schemas.hr.employee_code_schema import DEFAULT_EMPLOYEE_CODE_PATTERN
from hrms.services.hr.employee_code_service import EMPLOYEE_CODE_PATTERN_KEY

logger = logging.getLogger(__name__)

DEFAULT_LEAVE_TYPES = [
    {"name": "Annual", "description": "Paid annual leave", "days_per_year": 20, "is_paid": True},
    {"name": "Sick", "description": "Sick leave", "days_per_year": 10, "is_paid": True},
    {"name": "Casual", "description": "Short personal leave", "days_per_year": 7, "is_paid": True},
    {"name": "Unpaid", "description": "Leave without pay", "days_per_year": 0, "is_paid": False},
]

async def create_tables():
    """Create all database tables"""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables created successfully")

    except Exception as e:
        logger.error(f"Error creating tables: {str(e)}")
        raise

async def seed_defaults(session: AsyncSession):
    """Insert default leave types and the employee code pattern when missing"""
    existing = set((await session.execute(select(LeaveType.name))).scalars().all())
    for data in DEFAULT_LEAVE_TYPES:
        if data["name"] not in existing:
            session.add(LeaveType(**data))

    pattern_res = await session.execute(
        select(SystemSetting.id).where(SystemSetting.setting_key == EMPLOYEE_CODE_PATTERN_KEY)
    )
    if pattern_res.scalar_one_or_none() is None:
        session.add(SystemSetting(
            setting_key=EMPLOYEE_CODE_PATTERN_KEY,
            setting_value=DEFAULT_EMPLOYEE_CODE_PATTERN.model_dump(),
            description="Prefix, separator and minimum digit width of generated employee codes",
        ))

    await session.commit()

async def init_db():
    """Initialize the database"""
    try:
        logger.info("Initializing database...")

        await create_tables()

        async with async_session_maker() as session:
            await seed_defaults(session)

        logger.info("Database initialized successfully")

    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise

if __name__ == "__main__":
    asyncio.run(init_db())

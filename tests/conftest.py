import pytest
from datetime import date, time
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from hrms.main import app
from hrms.core.database import get_async_session
from hrms.db.init_db import seed_defaults
from hrms.models import Department, Employee
from hrms.models.shared.enums import Base

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def seeded(db_session: AsyncSession):
    """Default leave types and employee code pattern"""
    await seed_defaults(db_session)


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def department(db_session: AsyncSession) -> Department:
    dept = Department(name="Engineering", description="Builds things", is_active=True)
    db_session.add(dept)
    await db_session.commit()
    return dept


@pytest.fixture
def make_employee(db_session: AsyncSession):
    """Insert an employee directly, bypassing code allocation"""
    async def _make(code: str, email: str, **fields) -> Employee:
        fields.setdefault("first_name", "Test")
        fields.setdefault("last_name", "Person")
        fields.setdefault("hire_date", date(2024, 1, 15))
        fields.setdefault("working_hours_start", time(9, 0))
        fields.setdefault("working_hours_end", time(18, 0))
        employee = Employee(employee_code=code, email=email, **fields)
        db_session.add(employee)
        await db_session.commit()
        return employee

    return _make

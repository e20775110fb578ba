"""
Shared test fixtures and configuration for the Employee Directory tests.
"""
import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DB_CREATE_TABLES"] = "false"

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def mock_repository():
    """Create a mock employee repository."""
    from app.repositories.employee_repository import EmployeeRepository

    repository = AsyncMock(spec=EmployeeRepository)
    repository.save = AsyncMock(side_effect=lambda employee: employee)
    repository.find_by_id = AsyncMock(return_value=None)
    repository.find_by_email = AsyncMock(return_value=None)
    repository.find_all = AsyncMock(return_value=[])
    repository.delete_by_id = AsyncMock(return_value=None)
    repository.rollback = AsyncMock()
    return repository


@pytest.fixture
def sample_employee():
    """A persisted employee as the store would return it."""
    from app.models.employee import Employee

    return Employee(
        id=1,
        first_name="William",
        last_name="Feliciano",
        email="wfeliciano@gmail.com",
    )


@pytest.fixture
def employee_payload():
    """Request body for creating an employee."""
    return {
        "firstName": "William",
        "lastName": "Feliciano",
        "email": "wf@gmail.com",
    }


@pytest.fixture
def mock_request():
    """Create a mock FastAPI request object."""
    request = MagicMock()
    request.cookies = {}
    request.client = MagicMock()
    request.client.host = "127.0.0.1"
    request.headers = {}
    request.url = MagicMock()
    request.url.path = "/api/employees"
    request.method = "GET"
    return request


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with the schema created."""
    from app.db.base import Base

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, with each request getting its own SQLite session."""
    from app.api.deps import get_db
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_db, None)

"""
Pytest configuration and fixtures
"""

import os

# Must be set before core.config / core.database are imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from typing import AsyncGenerator
from models import Base, Site
from imports.liveness import LockLivenessProbe
from imports.locks import SqlLockBackend
from imports.log_files import ImportLogFiles
from imports.option_store import OptionStore
from imports.sites import SqlSiteRegistry
from imports.status_manager import ImportStatusManager
from imports.status_store import ImportStatusStore
from schemas.import_status import SourceInfo

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when a test moves it"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables after test
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest_asyncio.fixture
async def site(db_session):
    """A registered import target created at the start of 2023"""
    site = Site(id=1, name="Example Shop", main_url="https://shop.example.com", created_at=datetime(2023, 1, 1))
    db_session.add(site)
    await db_session.commit()
    return site


@pytest.fixture
def option_store(db_session):
    return OptionStore(db_session)


@pytest.fixture
def status_store(option_store):
    return ImportStatusStore(option_store)


@pytest.fixture
def lock_backend(db_session, clock):
    return SqlLockBackend(db_session, clock=clock)


@pytest.fixture
def worker_lock_backend(db_session, clock):
    """Lock backend standing in for a separate worker process"""
    return SqlLockBackend(db_session, clock=clock)


@pytest.fixture
def log_files(tmp_path):
    return ImportLogFiles(str(tmp_path), hostname="testhost")


@pytest.fixture
def manager(db_session, status_store, lock_backend, log_files, clock):
    return ImportStatusManager(
        store=status_store,
        liveness=LockLivenessProbe(lock_backend),
        sites=SqlSiteRegistry(db_session),
        log_files=log_files,
        clock=clock,
    )


@pytest.fixture
def source_info():
    return SourceInfo(account="1234", property="UA-1234-1", view="5678")

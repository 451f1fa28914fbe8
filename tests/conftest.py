"""Test fixtures and configuration."""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("SUBMISSION_API_BASE_URL", "")

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.models import Base
from src.onboarding.session import WizardSessionManager
from src.onboarding.store import OnboardingStore


class FakeRedis:
    """Dict-backed stand-in for the few Redis commands the app uses."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key):
        self.data.pop(key, None)
        self.ttls.pop(key, None)


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    return redis


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def wizard_sessions(mock_redis):
    """Create WizardSessionManager with mock Redis."""
    return WizardSessionManager(mock_redis)


@pytest.fixture
def store():
    return OnboardingStore()


@pytest_asyncio.fixture
async def db_session():
    """In-memory SQLite session with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def basic_info():
    """Valid basic info step data."""
    return {
        "projectName": "Bakery Relaunch",
        "companyName": "Sunrise Bakery",
        "industry": "Food & Beverage",
        "projectDescription": "New site for our three bakery branches",
        "contactEmail": "owner@sunrise.example",
        "contactPhone": "+63 917 555 0101",
    }


@pytest.fixture
def landing_requirements():
    return {
        "pageType": "product launch",
        "designStyle": "minimal",
        "sections": ["hero", "menu", "contact"],
        "ctaGoal": "book a table",
    }


@pytest.fixture
def web_app_requirements():
    return {
        "websiteType": "SaaS",
        "pageCount": "10-15",
        "features": ["auth", "billing"],
        "contentSource": "client",
    }


@pytest.fixture
def mobile_requirements():
    return {
        "appCategory": "fitness",
        "platforms": ["ios", "android"],
        "coreFeatures": ["workouts", "tracking"],
        "backend": ["api", "push notifications"],
    }

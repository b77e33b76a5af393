"""
Pytest configuration and shared fixtures for the Study Planner test suite.
"""

import os
from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from uuid import UUID

import jwt
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment before importing app
os.environ["SP_ENVIRONMENT"] = "test"
os.environ["SP_DB_URL"] = "sqlite+aiosqlite:///:memory:"
# Set test JWT secret for testing
os.environ["SP_JWT_SECRET"] = "test-secret"
os.environ["SP_JWT_ALGORITHM"] = "HS256"
# Cheap hashing for tests
os.environ["SP_BCRYPT_ROUNDS"] = "4"
# Disable rate limiting for tests and keep it off Redis
os.environ["SP_RATE_LIMIT_BACKEND"] = "memory"
os.environ["SP_RATE_LIMIT_REQUESTS"] = "999999"
# No LLM: plan generation uses the template path unless a test injects a client
os.environ.pop("SP_OPENAI_API_KEY", None)

from sp.config import get_settings  # noqa: E402
from sp.db.base import Base, create_tables  # noqa: E402
from sp.models import User  # noqa: E402

settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        settings.db_url,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    await create_tables(engine)

    yield engine

    # Clean up
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_user_id():
    """Test user ID for authentication."""
    return "550e8400-e29b-41d4-a716-446655440000"


@pytest_asyncio.fixture
async def test_user(db_session, test_user_id):
    """Persisted user matching ``test_user_id``."""
    user = User(
        id=UUID(test_user_id),
        name="Test User",
        email="test@example.com",
        password_hash="not-a-real-hash",
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def test_jwt_token(test_user_id):
    """Create a test JWT token."""
    payload = {
        "sub": test_user_id,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": datetime.utcnow() + timedelta(hours=1),
        "iat": datetime.utcnow(),
    }

    # Use test secret for signing
    token = jwt.encode(
        payload,
        "test-secret",  # Must match SP_JWT_SECRET
        algorithm="HS256",  # Must match SP_JWT_ALGORITHM
    )

    return token


@pytest.fixture
def app():
    """Create test app instance."""
    from contextlib import asynccontextmanager

    from fastapi import FastAPI

    from sp.db.base import close_db, init_db
    from sp.server import register_routes

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Fresh in-memory database per app instance
        await init_db()
        yield
        await close_db()

    # Create a simpler app for testing without middleware
    test_app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    register_routes(test_app)

    return test_app


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(client, test_jwt_token):
    """Create an authenticated test client."""
    client.headers = {"Authorization": f"Bearer {test_jwt_token}"}
    return client


@pytest.fixture
def sample_plan_request():
    """Sample plan generation payload."""
    return {
        "topic": "Rust",
        "daily_hours": 3,
        "difficulty": "advanced",
        "duration": 12,
    }


@pytest.fixture
def mock_llm_client():
    """Mock generative-text client to avoid external API calls."""
    mock_client = AsyncMock()
    mock_client.complete_json.return_value = (
        '{"title": "Rust in 12 Weeks", "duration": "12 Weeks", '
        '"description": "Systems programming with Rust.", '
        '"estimatedHours": 252, '
        '"steps": ["Week 1-3: Ownership", "Week 4-6: Traits", '
        '"Week 7-9: Async", "Week 10-12: Capstone"]}'
    )
    return mock_client

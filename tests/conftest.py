"""
Global test fixtures for Service Vault.

This module provides shared fixtures for all tests including:
- Test settings (environment and cache reset)
- In-memory record store seeded with sample rows
- Mock MongoDB (mongomock-motor) for the audit trail
- Mock Redis (fakeredis) for rate limiting
- Session tokens for members and administrators
"""

import os
import sys
from pathlib import Path
from typing import Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

# Settings are read from the environment; pin them before any import
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ALLOWED_DOMAIN", "example.com")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("USE_MOCK", "true")
os.environ.setdefault("SKIP_AUTH", "false")


ADMIN_EMAIL = "admin@example.com"
DEV_EMAIL = "dev@example.com"
MARKETING_EMAIL = "marketer@example.com"
OUTSIDER_EMAIL = "nobody@example.com"


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings for every test so env patches take effect."""
    from vault.config import get_settings

    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


# =============================================================================
# Record Store Fixtures
# =============================================================================

@pytest.fixture
def service_rows() -> list[dict]:
    """Raw sheet rows, using the mixed headers seen upstream."""
    return [
        {
            "id": "s1",
            "사이트명": "AWS Console",
            "url": "https://console.aws.amazon.com",
            "계정": "ops@example.com",
            "비밀번호": "aws-pass",
            "용도": "Cloud infrastructure",
        },
        {
            "id": "s2",
            "serviceName": "AWS Billing",
            "URL": "https://billing.aws.amazon.com",
            "accountId": "finance@example.com",
            "password": "billing-pass",
        },
        {
            "id": "s3",
            "serviceName": "GitHub",
            "url": "https://github.com",
            "accountId": "devops@example.com",
            "password": "gh-pass",
        },
        {
            "id": "s4",
            "serviceName": "Google Analytics",
            "url": "https://analytics.google.com",
            "accountId": "marketing@example.com",
            "password": "ga-pass",
        },
    ]


@pytest.fixture
def member_rows() -> list[dict]:
    return [
        {"email": DEV_EMAIL, "group": "DevTeam"},
        {"email": MARKETING_EMAIL, "group": "Marketing"},
    ]


@pytest.fixture
def record_store(service_rows, member_rows):
    """In-memory record store seeded with sample rows."""
    from vault.services.record_store import InMemoryRecordStore

    return InMemoryRecordStore(services=service_rows, members=member_rows)


# =============================================================================
# MongoDB Fixtures (mongomock)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    from mongomock_motor import AsyncMongoMockClient

    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_audit_db(mock_async_mongo_client):
    """Provide mock audit_db database with the real indexes."""
    from vault.database.databases import audit_db

    db = mock_async_mongo_client[audit_db.DB_NAME]
    await audit_db.create_audit_indexes(db)
    yield db


@pytest.fixture
def sync_audit_db():
    """Mock audit_db for synchronous (TestClient) tests."""
    from mongomock_motor import AsyncMongoMockClient
    from vault.database.databases import audit_db

    return AsyncMongoMockClient()[audit_db.DB_NAME]


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """
    Create an async mock Redis client using fakeredis.
    """
    import fakeredis.aioredis

    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def directory(record_store, mock_audit_db, fresh_settings):
    """DirectoryService over the in-memory store and mock audit sink."""
    from vault.services.audit_service import AuditService
    from vault.services.directory import DirectoryService

    return DirectoryService(record_store, AuditService(mock_audit_db), settings=fresh_settings)


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app(record_store, sync_audit_db, fresh_settings):
    """
    Create FastAPI app for testing around an injected DirectoryService.
    """
    from vault.main import create_app
    from vault.services.audit_service import AuditService
    from vault.services.directory import DirectoryService

    directory = DirectoryService(record_store, AuditService(sync_audit_db), settings=fresh_settings)
    return create_app(directory=directory)


@pytest.fixture
def client(app) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Use this for synchronous endpoint testing.
    """
    with TestClient(app) as c:
        yield c


# =============================================================================
# Token Fixtures
# =============================================================================

def make_token(email: str) -> str:
    from vault.core.security import create_access_token

    return create_access_token(email)


@pytest.fixture
def admin_token() -> str:
    return make_token(ADMIN_EMAIL)


@pytest.fixture
def dev_token() -> str:
    return make_token(DEV_EMAIL)


@pytest.fixture
def marketing_token() -> str:
    return make_token(MARKETING_EMAIL)


@pytest.fixture
def outsider_token() -> str:
    return make_token(OUTSIDER_EMAIL)

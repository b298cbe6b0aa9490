"""Pytest configuration and shared fixtures.

This configuration provides:
1. Marker registration (unit, integration, smoke)
2. Mock logger/audit fixtures for unit tests
3. In-memory stores and fully wired services for smoke tests
4. A PostgreSQL Database fixture, skipped unless TEST_DATABASE_URL is set
"""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock
from uuid import UUID

import pytest
import pytest_asyncio
from uuid_extensions import uuid7

from authcycle.core.config import AuthConfig
from authcycle.core.container import AuthServices, build_auth_services
from authcycle.domain.entities import User
from authcycle.domain.enums import SecurityAction, UserRole
from authcycle.domain.events import SecurityEvent
from authcycle.infrastructure.email import StubNotifier
from authcycle.infrastructure.persistence import (
    InMemoryTokenStore,
    InMemoryUserRepository,
)
from authcycle.infrastructure.security import (
    BcryptPasswordService,
    JWTCredentialCodec,
    SingleUseTokenService,
)

ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
SESSION_SECRET = "session-secret-for-tests-0123456789abcdef"


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real libraries and stores"
    )
    config.addinivalue_line("markers", "smoke: End-to-end credential lifecycle tests")


# =============================================================================
# Test helpers
# =============================================================================


def create_test_user(
    user_id: UUID | None = None,
    email: str = "test@example.com",
    name: str = "Test User",
    password_hash: str = "hashed_password",
    role: UserRole = UserRole.USER,
    is_active: bool = True,
    is_verified: bool = False,
) -> User:
    """Create a User entity for testing."""
    now = datetime.now(UTC)
    return User(
        id=user_id or uuid7(),
        email=email,
        name=name,
        password_hash=password_hash,
        role=role,
        is_active=is_active,
        is_verified=is_verified,
        created_at=now,
        updated_at=now,
    )


def recorded_events(audit: AsyncMock) -> list[SecurityEvent]:
    """Security events passed to a mocked audit sink, oldest first."""
    return [call.args[0] for call in audit.record.await_args_list]


def recorded_actions(audit: AsyncMock) -> list[SecurityAction]:
    return [event.action for event in recorded_events(audit)]


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def auth_config() -> AuthConfig:
    """Distinct 32+ character secrets, default lifetimes, no reset delay."""
    return AuthConfig(
        access_token_secret=ACCESS_SECRET,
        refresh_token_secret=SESSION_SECRET,
        password_reset_noop_delay=timedelta(0),
        app_base_url="https://auth.example.com",
    )


# =============================================================================
# Reusable Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger():
    """Provide a mock logger for testing.

    bind() returns the same mock so bound loggers share call records.

    Usage:
        def test_something(mock_logger):
            service = MyService(logger=mock_logger)
            service.do_something()
            mock_logger.info.assert_called_once()
    """
    logger = Mock()
    logger.bind.return_value = logger
    return logger


@pytest_asyncio.fixture
async def mock_audit():
    """Provide a mock audit sink for testing.

    Usage:
        async def test_something(mock_audit):
            service = MyService(audit=mock_audit)
            await service.do_something()
            assert recorded_actions(mock_audit) == [SecurityAction.LOGOUT]
    """
    audit = AsyncMock()
    audit.record = AsyncMock(return_value=None)
    return audit


# =============================================================================
# In-memory stores and wired services
# =============================================================================


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def token_store(user_repository) -> InMemoryTokenStore:
    return InMemoryTokenStore(user_repository)


@pytest.fixture
def password_service() -> BcryptPasswordService:
    return BcryptPasswordService(cost_factor=10)


@pytest.fixture
def credential_codec(auth_config) -> JWTCredentialCodec:
    return JWTCredentialCodec(config=auth_config)


@pytest.fixture
def notifier(mock_logger) -> StubNotifier:
    return StubNotifier(logger=mock_logger)


@pytest.fixture
def services(
    user_repository,
    token_store,
    credential_codec,
    password_service,
    notifier,
    mock_audit,
    mock_logger,
    auth_config,
) -> AuthServices:
    """Gate and managers wired to in-memory stores and real crypto."""
    return build_auth_services(
        users=user_repository,
        tokens=token_store,
        codec=credential_codec,
        hasher=password_service,
        generator=SingleUseTokenService(),
        notifier=notifier,
        audit=mock_audit,
        logger=mock_logger,
        config=auth_config,
    )


# =============================================================================
# PostgreSQL (integration only)
# =============================================================================


@pytest_asyncio.fixture
async def test_database():
    """Provide a Database with freshly created tables.

    Skips unless TEST_DATABASE_URL points at a PostgreSQL database
    (postgresql+asyncpg://...). Tables are dropped afterwards.
    """
    from authcycle.infrastructure.persistence import Database

    database_url = os.environ.get("TEST_DATABASE_URL")
    if not database_url:
        pytest.skip("TEST_DATABASE_URL not set")

    db = Database(database_url=database_url)
    if not await db.check_connection():
        await db.close()
        pytest.skip("TEST_DATABASE_URL is not reachable")
    await db.drop_all()
    await db.create_all()
    yield db
    await db.drop_all()
    await db.close()

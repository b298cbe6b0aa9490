"""Centralized dependency container (composition root).

Adapter selection lives here and nowhere else:
- Application-scoped singletons via @lru_cache (logger, database, adapters)
- build_auth_services() wires the three services from explicit ports, so
  tests and the in-memory development setup use the same wiring as
  production

Usage:
    from authcycle.core.container import get_authentication_gate

    gate = get_authentication_gate()
    result = await gate.login(email, password)
"""

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import TYPE_CHECKING

from authcycle.core.config import AuthConfig, get_settings
from authcycle.core.enums import Environment

if TYPE_CHECKING:
    from authcycle.application.services import (
        AuthenticationGate,
        SessionManager,
        SingleUseTokenManager,
    )
    from authcycle.domain.protocols import (
        AuditSinkProtocol,
        CredentialCodecProtocol,
        LoggerProtocol,
        NotifierProtocol,
        PasswordHashingProtocol,
        TokenGeneratorProtocol,
        TokenStore,
        UserRepository,
    )
    from authcycle.infrastructure.jobs import TokenCleanupJob
    from authcycle.infrastructure.persistence import Database


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_auth_config() -> AuthConfig:
    """Injectable secrets and lifetimes built from the loaded settings."""
    return AuthConfig.from_settings(get_settings())


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: ConsoleAdapter (human-readable)
    - testing/ci/production, or LOG_JSON=true: ConsoleAdapter (JSON)
    """
    from authcycle.infrastructure.logging import ConsoleAdapter

    settings = get_settings()
    use_json = settings.log_json or settings.environment != Environment.DEVELOPMENT
    return ConsoleAdapter(use_json=use_json, level=settings.log_level)


@lru_cache()
def get_database() -> "Database":
    """Get database manager singleton (connection pool shared app-wide)."""
    from authcycle.infrastructure.persistence import Database

    settings = get_settings()
    return Database(database_url=settings.database_url, echo=settings.db_echo)


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Bcrypt with the configured cost factor (default 10)."""
    from authcycle.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=get_settings().bcrypt_rounds)


@lru_cache()
def get_credential_codec() -> "CredentialCodecProtocol":
    """PyJWT HS256 codec with per-purpose secrets."""
    from authcycle.infrastructure.security import JWTCredentialCodec

    return JWTCredentialCodec(config=get_auth_config())


@lru_cache()
def get_token_generator() -> "TokenGeneratorProtocol":
    from authcycle.infrastructure.security import SingleUseTokenService

    return SingleUseTokenService()


@lru_cache()
def get_notifier() -> "NotifierProtocol":
    """Notifier adapter.

    Only the logging stub exists; a real delivery adapter plugs in here.
    """
    from authcycle.infrastructure.email import StubNotifier

    return StubNotifier(logger=get_logger())


@lru_cache()
def get_audit_sink() -> "AuditSinkProtocol":
    """Structured log line plus append-only audit_logs row per event."""
    from authcycle.infrastructure.audit import (
        CompositeAuditSink,
        DatabaseAuditSink,
        LoggingAuditSink,
    )

    logger = get_logger()
    return CompositeAuditSink(
        [
            LoggingAuditSink(logger=logger),
            DatabaseAuditSink(database=get_database(), logger=logger),
        ],
        logger=logger,
    )


@lru_cache()
def get_user_repository() -> "UserRepository":
    from authcycle.infrastructure.persistence import SqlAlchemyUserRepository

    return SqlAlchemyUserRepository(database=get_database())


@lru_cache()
def get_token_store() -> "TokenStore":
    from authcycle.infrastructure.persistence import SqlAlchemyTokenStore

    return SqlAlchemyTokenStore(database=get_database())


# ============================================================================
# Service Wiring
# ============================================================================


@dataclass(frozen=True, kw_only=True)
class AuthServices:
    """The three wired services."""

    gate: "AuthenticationGate"
    sessions: "SessionManager"
    single_use: "SingleUseTokenManager"


def build_auth_services(
    *,
    users: "UserRepository",
    tokens: "TokenStore",
    codec: "CredentialCodecProtocol",
    hasher: "PasswordHashingProtocol",
    generator: "TokenGeneratorProtocol",
    notifier: "NotifierProtocol",
    audit: "AuditSinkProtocol",
    logger: "LoggerProtocol",
    config: AuthConfig,
) -> AuthServices:
    """Wire SessionManager, SingleUseTokenManager and AuthenticationGate.

    Args:
        users: User persistence port.
        tokens: Token persistence port.
        codec: Credential signer/verifier.
        hasher: Password hashing.
        generator: Single-use token source.
        notifier: Best-effort message delivery.
        audit: Security event sink.
        logger: Structured logger.
        config: Secrets and lifetimes.

    Returns:
        AuthServices: Wired services sharing the given ports.
    """
    from authcycle.application.services import (
        AuthenticationGate,
        SessionManager,
        SingleUseTokenManager,
    )

    sessions = SessionManager(
        users=users,
        tokens=tokens,
        codec=codec,
        hasher=hasher,
        audit=audit,
        logger=logger.bind(service="session_manager"),
        config=config,
    )
    single_use = SingleUseTokenManager(
        users=users,
        tokens=tokens,
        generator=generator,
        hasher=hasher,
        sessions=sessions,
        notifier=notifier,
        audit=audit,
        logger=logger.bind(service="single_use_token_manager"),
        config=config,
    )
    gate = AuthenticationGate(
        users=users,
        hasher=hasher,
        codec=codec,
        sessions=sessions,
        single_use=single_use,
        audit=audit,
        logger=logger.bind(service="authentication_gate"),
    )
    return AuthServices(gate=gate, sessions=sessions, single_use=single_use)


@lru_cache()
def get_auth_services() -> AuthServices:
    """Services wired to the PostgreSQL store and configured adapters."""
    return build_auth_services(
        users=get_user_repository(),
        tokens=get_token_store(),
        codec=get_credential_codec(),
        hasher=get_password_service(),
        generator=get_token_generator(),
        notifier=get_notifier(),
        audit=get_audit_sink(),
        logger=get_logger(),
        config=get_auth_config(),
    )


def get_authentication_gate() -> "AuthenticationGate":
    return get_auth_services().gate


def get_session_manager() -> "SessionManager":
    return get_auth_services().sessions


def get_single_use_token_manager() -> "SingleUseTokenManager":
    return get_auth_services().single_use


@lru_cache()
def get_token_cleanup_job() -> "TokenCleanupJob":
    """Cleanup job sweeping at TOKEN_CLEANUP_INTERVAL_MINUTES."""
    from authcycle.infrastructure.jobs import TokenCleanupJob

    return TokenCleanupJob(
        sweep=get_session_manager().sweep_expired,
        logger=get_logger(),
        interval=timedelta(minutes=get_settings().token_cleanup_interval_minutes),
    )

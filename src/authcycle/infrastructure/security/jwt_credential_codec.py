"""JWT credential codec (adapter).

Implements CredentialCodecProtocol using PyJWT with HMAC-SHA256.

Architecture:
    - Implements CredentialCodecProtocol (no inheritance required)
    - Structural typing via Protocol
    - Configuration injected as AuthConfig (no ambient settings)

Security:
    - Independent secret per credential purpose (access vs session)
    - `type` claim checked as a second gate after the signature
    - Unique JWT ID (jti, UUIDv7) on every issued credential, so two
      credentials issued in the same second never collide
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from uuid_extensions import uuid7

from authcycle.core.config import AuthConfig
from authcycle.core.result import Failure, Result, Success
from authcycle.domain.errors import CredentialError

ACCESS_TOKEN_TYPE = "access"
SESSION_TOKEN_TYPE = "refresh"

# Claims the codec adds on top of caller claims.
RESERVED_CLAIMS = frozenset({"type", "jti", "iat", "exp"})


class JWTCredentialCodec:
    """Signs and verifies access and session credentials.

    Usage:
        codec = JWTCredentialCodec(config=auth_config)

        access = codec.issue_access(user.token_claims())
        session = codec.issue_session(user.token_claims())

        match codec.verify_session(session):
            case Success(value=claims):
                user_id = claims["sub"]
            case Failure(error=CredentialError.EXPIRED):
                ...
    """

    def __init__(self, config: AuthConfig) -> None:
        """Initialize codec.

        Args:
            config: Secrets, algorithm and lifetimes.

        Raises:
            ValueError: If a secret is shorter than 32 bytes or both
                purposes share one secret.
        """
        for secret in (config.access_token_secret, config.refresh_token_secret):
            if len(secret) < 32:
                msg = "JWT secret key must be at least 32 bytes (256 bits)"
                raise ValueError(msg)
        if config.access_token_secret == config.refresh_token_secret:
            msg = "Access and session credentials require distinct secrets"
            raise ValueError(msg)

        self._config = config
        self._algorithm = config.algorithm

    def issue_access(self, claims: dict[str, Any]) -> str:
        """Sign a short-lived access credential.

        Args:
            claims: Caller claims (sub, email, role).

        Returns:
            JWT string (header.payload.signature).
        """
        return self._sign(
            claims,
            secret=self._config.access_token_secret,
            ttl=self._config.access_token_ttl,
            token_type=ACCESS_TOKEN_TYPE,
        )

    def issue_session(self, claims: dict[str, Any]) -> str:
        """Sign a long-lived session credential.

        Args:
            claims: Caller claims (sub, email, role).

        Returns:
            JWT string (header.payload.signature).
        """
        return self._sign(
            claims,
            secret=self._config.refresh_token_secret,
            ttl=self._config.session_token_ttl,
            token_type=SESSION_TOKEN_TYPE,
        )

    def verify_access(self, token: str) -> Result[dict[str, Any], str]:
        """Verify an access credential (signature, expiry, type)."""
        return self._verify(
            token,
            secret=self._config.access_token_secret,
            token_type=ACCESS_TOKEN_TYPE,
        )

    def verify_session(self, token: str) -> Result[dict[str, Any], str]:
        """Verify a session credential (signature, expiry, type)."""
        return self._verify(
            token,
            secret=self._config.refresh_token_secret,
            token_type=SESSION_TOKEN_TYPE,
        )

    def _sign(
        self,
        claims: dict[str, Any],
        *,
        secret: str,
        ttl: timedelta,
        token_type: str,
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            key: value for key, value in claims.items() if key not in RESERVED_CLAIMS
        }
        payload.update(
            {
                "type": token_type,
                "jti": str(uuid7()),
                "iat": int(now.timestamp()),
                "exp": int((now + ttl).timestamp()),
            }
        )
        token: str = jwt.encode(payload, secret, algorithm=self._algorithm)
        return token

    def _verify(
        self,
        token: str,
        *,
        secret: str,
        token_type: str,
    ) -> Result[dict[str, Any], str]:
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "jti", "sub"]},
            )
        except ExpiredSignatureError:
            return Failure(error=CredentialError.EXPIRED)
        except InvalidTokenError:
            # Tampered, malformed, or signed with the other purpose's secret
            return Failure(error=CredentialError.INVALID_SIGNATURE)

        if payload.get("type") != token_type:
            return Failure(error=CredentialError.INVALID_SIGNATURE)

        return Success(value=payload)

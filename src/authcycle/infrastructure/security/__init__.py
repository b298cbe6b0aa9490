"""Security adapters (hashing, credential signing, token generation)."""

from authcycle.infrastructure.security.bcrypt_password_service import (
    BcryptPasswordService,
)
from authcycle.infrastructure.security.jwt_credential_codec import (
    JWTCredentialCodec,
)
from authcycle.infrastructure.security.single_use_token_service import (
    SingleUseTokenService,
)

__all__ = [
    "BcryptPasswordService",
    "JWTCredentialCodec",
    "SingleUseTokenService",
]

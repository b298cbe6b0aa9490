"""Bcrypt password hashing service (adapter).

Implements PasswordHashingProtocol using bcrypt with cost factor 10.

Security:
    - Cost factor 10 (~60ms per hash) balances login latency against
      offline brute force
    - Random salt per hash
    - bcrypt.checkpw comparison time does not depend on matching prefix

Performance:
    - CPU-bound and synchronous; managers call it through
      loop.run_in_executor so the event loop keeps serving other tasks
"""

import bcrypt


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        from authcycle.core.container import get_password_service

        password_service = get_password_service()
        password_hash = password_service.hash_password("SecurePass123!")
        is_valid = password_service.verify_password("SecurePass123!", password_hash)
    """

    def __init__(self, cost_factor: int = 10) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: Bcrypt cost factor (default: 10).
                Cost is logarithmic: each +1 doubles computation time.

        Raises:
            ValueError: If cost_factor is outside 10..20.
        """
        if cost_factor < 10:
            msg = "Cost factor must be at least 10 for security"
            raise ValueError(msg)
        if cost_factor > 20:
            msg = "Cost factor above 20 is impractically slow"
            raise ValueError(msg)

        self._cost_factor = cost_factor

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password using bcrypt.

        Args:
            password: Plaintext password to hash.

        Returns:
            Hashed password string (bcrypt format: $2b$10$...), 60 characters.

        Example:
            >>> service = BcryptPasswordService()
            >>> service.hash_password("pw") != service.hash_password("pw")
            True
        """
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        password_hash = bcrypt.hashpw(password.encode("utf-8"), salt)
        return password_hash.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a bcrypt hash.

        Args:
            password: Plaintext password to verify.
            password_hash: Hashed password from the store.

        Returns:
            True if password matches hash, False otherwise (including a
            malformed hash).
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except (ValueError, AttributeError):
            return False

"""Single-use token types.

A single-use token's type is implied by the store it lives in; this enum
names those stores. A user holds at most one live token per type.
"""

from enum import Enum


class SingleUseTokenType(str, Enum):
    """Kinds of single-use, database-validated tokens."""

    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"

"""User roles carried in access credential claims.

Role Hierarchy:
    admin > user

The core only embeds the role in issued credentials; enforcement belongs
to the downstream authorization layer.
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles.

    String Enum:
        Inherits from str so the value serializes directly into JWT claims.
    """

    ADMIN = "admin"
    USER = "user"

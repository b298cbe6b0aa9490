"""authcycle - credential issuance and session lifecycle service.

Issues short-lived access credentials and long-lived, rotating session
credentials, detects session-credential replay, and manages single-use
tokens for email verification and password recovery.
"""

__version__ = "0.1.0"

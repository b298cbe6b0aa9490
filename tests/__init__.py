"""Test suite for authcycle.

Test structure follows the test pyramid:
- unit/: Unit tests - managers and domain rules with mocked ports
- integration/: Integration tests - real bcrypt, PyJWT, structlog and stores
- smoke/: Smoke tests - complete credential lifecycles through wired services

SQL store tests run only when TEST_DATABASE_URL points at a PostgreSQL
database; everything else runs without external services.
"""

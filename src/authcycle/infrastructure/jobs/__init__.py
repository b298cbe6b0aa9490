"""Background jobs."""

from authcycle.infrastructure.jobs.token_cleanup_job import TokenCleanupJob

__all__ = ["TokenCleanupJob"]

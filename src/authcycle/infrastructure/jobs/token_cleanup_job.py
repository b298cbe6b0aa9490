"""Periodic expired-token sweep.

Runs SessionManager.sweep_expired on a fixed interval inside the event
loop. A failed run is logged and the loop keeps going; only stop() or
task cancellation ends it.

Usage:
    job = TokenCleanupJob(
        sweep=session_manager.sweep_expired,
        logger=get_logger(),
        interval=timedelta(minutes=60),
    )
    job.start()
    ...
    await job.stop()
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import timedelta

from authcycle.application.dtos import SweepResult
from authcycle.core.result import Failure, Result, Success
from authcycle.domain.protocols import LoggerProtocol


class TokenCleanupJob:
    """Background task deleting expired session and single-use tokens."""

    def __init__(
        self,
        *,
        sweep: Callable[[], Awaitable[Result[SweepResult, str]]],
        logger: LoggerProtocol,
        interval: timedelta = timedelta(minutes=60),
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError("cleanup interval must be positive")
        self._sweep = sweep
        self._logger = logger.bind(job="token_cleanup")
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> SweepResult | None:
        """Run a single sweep.

        Returns:
            The per-kind counts, or None if the sweep failed.
        """
        try:
            result = await self._sweep()
        except Exception as e:
            self._logger.error("token_cleanup_failed", error=e)
            return None

        match result:
            case Success(value=counts):
                self._logger.info(
                    "token_cleanup_completed",
                    sessions=counts.sessions,
                    verification=counts.verification,
                    password_reset=counts.password_reset,
                    total=counts.total,
                )
                return counts
            case Failure(error=error):
                self._logger.error("token_cleanup_failed", reason=error)
                return None

    async def run_forever(self) -> None:
        """Sweep, sleep for the interval, repeat."""
        self._logger.info(
            "token_cleanup_started", interval_seconds=self._interval.total_seconds()
        )
        while True:
            await self.run_once()
            await asyncio.sleep(self._interval.total_seconds())

    def start(self) -> asyncio.Task[None]:
        """Schedule run_forever on the running loop (no-op if already running)."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(
                self.run_forever(), name="token-cleanup-job"
            )
        return self._task

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._logger.info("token_cleanup_stopped")

"""Periodic purge of expired refresh sessions, single-use tokens and codes.

Expired rows are already rejected at lookup time; the sweep only keeps the
tables from growing without bound.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bookbuddy_auth.persistence.sqlalchemy import (
    RefreshSessionRepositorySQLAlchemy,
    SingleUseTokenRepositorySQLAlchemy,
    VerificationCodeRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Background task deleting expired auth records at a fixed interval."""

    MIN_INTERVAL_SECONDS = 60

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        interval_seconds: int,
    ):
        self._session_maker = session_maker
        self._interval = max(interval_seconds, self.MIN_INTERVAL_SECONDS)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> dict[str, int]:
        """Run a single purge in its own transaction and return the counts."""
        async with self._session_maker() as session:
            counts = {
                "refresh_sessions": await RefreshSessionRepositorySQLAlchemy(
                    session,
                ).purge_expired(),
                "single_use_tokens": await SingleUseTokenRepositorySQLAlchemy(
                    session,
                ).purge_expired(),
                "verification_codes": await VerificationCodeRepositorySQLAlchemy(
                    session,
                ).purge_expired(),
            }
            await session.commit()

        if any(counts.values()):
            logger.info("Purged expired auth records: %s", counts)
        return counts

    async def start(self) -> None:
        if self.running:
            logger.warning("Expiry sweeper already running")
            return
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Expiry sweeper started (interval %ss)", self._interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Expiry sweeper stopped")

    async def _run_loop(self) -> None:
        while True:
            try:
                await self.sweep_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Expiry sweep failed")
            await asyncio.sleep(self._interval)

"""Tests for the background purge of expired auth records."""

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from bookbuddy.infrastructure.persistence.sqlalchemy.expiry_sweeper import ExpirySweeper
from bookbuddy_auth import CodePurpose, TokenPurpose
from bookbuddy_auth.persistence.sqlalchemy import (
    RefreshSessionRepositorySQLAlchemy,
    SingleUseTokenRepositorySQLAlchemy,
    VerificationCodeRepositorySQLAlchemy,
)


async def _seed(session_maker):
    now = datetime.now(tz=timezone.utc)
    user_id = uuid4()
    async with session_maker() as session:
        sessions = RefreshSessionRepositorySQLAlchemy(session)
        live = await sessions.create_session(user_id, timedelta(days=7))
        await sessions.create_session(user_id, timedelta(seconds=-1))

        tokens = SingleUseTokenRepositorySQLAlchemy(session)
        await tokens.create(TokenPurpose.PASSWORD_RESET, user_id, "a" * 64, now - timedelta(seconds=1))
        await tokens.create(TokenPurpose.PASSWORD_RESET, user_id, "b" * 64, now + timedelta(hours=1))

        codes = VerificationCodeRepositorySQLAlchemy(session)
        await codes.create("a@x.com", CodePurpose.LOGIN, "h1", now - timedelta(seconds=1))
        await session.commit()
    return live


class TestExpirySweeper:
    @pytest.mark.asyncio
    async def test_sweep_once_deletes_only_expired_rows(self, session_maker):
        live = await _seed(session_maker)
        sweeper = ExpirySweeper(session_maker, interval_seconds=3600)

        counts = await sweeper.sweep_once()

        assert counts == {
            "refresh_sessions": 1,
            "single_use_tokens": 1,
            "verification_codes": 1,
        }
        async with session_maker() as session:
            assert await RefreshSessionRepositorySQLAlchemy(session).find_active(live.jti)
            assert await SingleUseTokenRepositorySQLAlchemy(session).exists_hash("b" * 64)

    @pytest.mark.asyncio
    async def test_second_sweep_finds_nothing(self, session_maker):
        await _seed(session_maker)
        sweeper = ExpirySweeper(session_maker, interval_seconds=3600)

        await sweeper.sweep_once()

        assert set((await sweeper.sweep_once()).values()) == {0}

    def test_interval_has_a_floor(self, session_maker):
        sweeper = ExpirySweeper(session_maker, interval_seconds=1)

        assert sweeper._interval == ExpirySweeper.MIN_INTERVAL_SECONDS

    @pytest.mark.asyncio
    async def test_start_runs_first_sweep_and_stop_cancels(self, session_maker):
        await _seed(session_maker)
        sweeper = ExpirySweeper(session_maker, interval_seconds=3600)

        await sweeper.start()
        assert sweeper.running
        # Let the loop run its first sweep before it sleeps
        for _ in range(20):
            await asyncio.sleep(0.01)
        await sweeper.stop()

        assert not sweeper.running
        assert set((await sweeper.sweep_once()).values()) == {0}

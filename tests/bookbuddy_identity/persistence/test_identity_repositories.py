"""Tests for the bookbuddy_identity SQLAlchemy repositories on SQLite."""

from uuid import uuid4

import pytest

from bookbuddy_identity.domain.user import (
    EmailAlreadyExistsError,
    User,
    UsernameAlreadyExistsError,
)
from bookbuddy_identity.infrastructure.persistence.sqlalchemy import (
    AccountDeletionRequestRepositorySQLAlchemy,
    AuthEventRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)
from bookbuddy_identity.repositories import AuthEventAction, DeletionRequestStatus


@pytest.fixture
def user_repo(db_session):
    return UserRepositorySQLAlchemy(db_session)


class TestUserRepositorySQLAlchemy:
    @pytest.mark.asyncio
    async def test_save_and_find_by_id(self, user_repo):
        user = User.create("alice", "alice@x.com")

        await user_repo.save(user)
        found = await user_repo.find_by_id(user.id)

        assert found == user
        assert found.username == "alice"
        assert found.email == "alice@x.com"
        assert found.is_email_verified is False

    @pytest.mark.asyncio
    async def test_lookups_are_case_insensitive(self, user_repo):
        await user_repo.save(User.create("alice", "alice@x.com"))

        assert await user_repo.find_by_email("ALICE@X.com") is not None
        assert await user_repo.find_by_username(" Alice ") is not None

    @pytest.mark.asyncio
    async def test_find_by_identifier_uses_at_sign(self, user_repo):
        user = User.create("alice", "alice@x.com")
        await user_repo.save(user)

        assert await user_repo.find_by_identifier("alice@x.com") == user
        assert await user_repo.find_by_identifier("ALICE") == user
        assert await user_repo.find_by_identifier("nobody") is None

    @pytest.mark.asyncio
    async def test_update_persists_verification(self, user_repo):
        user = User.create("alice", "alice@x.com")
        await user_repo.save(user)

        user.mark_email_verified()
        await user_repo.save(user)
        found = await user_repo.find_by_email("alice@x.com")

        assert found.is_email_verified is True

    @pytest.mark.asyncio
    async def test_duplicate_email_raises_conflict(self, user_repo):
        await user_repo.save(User.create("alice", "alice@x.com"))

        with pytest.raises(EmailAlreadyExistsError):
            await user_repo.save(User.create("alice2", "alice@x.com"))

    @pytest.mark.asyncio
    async def test_duplicate_username_raises_conflict(self, user_repo):
        await user_repo.save(User.create("alice", "alice@x.com"))

        with pytest.raises(UsernameAlreadyExistsError):
            await user_repo.save(User.create("alice", "other@x.com"))

    @pytest.mark.asyncio
    async def test_delete(self, user_repo):
        user = User.create("alice", "alice@x.com")
        await user_repo.save(user)

        assert await user_repo.delete(user.id) is True
        assert await user_repo.delete(user.id) is False
        assert await user_repo.find_by_id(user.id) is None


class TestAuthEventRepositorySQLAlchemy:
    @pytest.mark.asyncio
    async def test_record_and_list_newest_first(self, db_session):
        repo = AuthEventRepositorySQLAlchemy(db_session)
        user_id = uuid4()

        await repo.record(user_id, AuthEventAction.REGISTER)
        await repo.record(user_id, AuthEventAction.LOGIN, {"method": "code"})
        events = await repo.list_for_user(user_id)

        assert [e.action for e in events] == [AuthEventAction.LOGIN, AuthEventAction.REGISTER]
        assert events[0].metadata == {"method": "code"}

    @pytest.mark.asyncio
    async def test_delete_all_for_user(self, db_session):
        repo = AuthEventRepositorySQLAlchemy(db_session)
        user_id, other = uuid4(), uuid4()
        await repo.record(user_id, AuthEventAction.LOGIN)
        await repo.record(other, AuthEventAction.LOGIN)

        assert await repo.delete_all_for_user(user_id) == 1
        assert len(await repo.list_for_user(other)) == 1


class TestAccountDeletionRequestRepositorySQLAlchemy:
    @pytest.mark.asyncio
    async def test_pending_then_processed(self, db_session):
        repo = AccountDeletionRequestRepositorySQLAlchemy(db_session)
        user_id = uuid4()

        request = await repo.create(user_id, "alice@x.com", "moving on")
        assert (await repo.find_pending_for_user(user_id)).id == request.id

        assert await repo.mark_processed(request.id) is True
        assert await repo.mark_processed(request.id) is False
        assert await repo.find_pending_for_user(user_id) is None

        history = await repo.list_for_user(user_id)
        assert len(history) == 1
        assert history[0].status == DeletionRequestStatus.PROCESSED
        assert history[0].processed_at is not None

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.services.access_token_codec import AccessTokenCodec
from src.app.services.passwords import hash_password
from src.domain.entities import RoleName, User

TEST_SECRET = "unit-test-secret-key-with-at-least-32-chars"
TEST_PASSWORD = "SecurePass123!"


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_username = AsyncMock(return_value=None)
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.exists_by_username = AsyncMock(return_value=False)
    uow.users.exists_by_email = AsyncMock(return_value=False)
    uow.users.list = AsyncMock(return_value=[])
    uow.users.count = AsyncMock(return_value=0)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.refresh_tokens = MagicMock()
    uow.refresh_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.refresh_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.refresh_tokens.get_active_by_user_id = AsyncMock(return_value=[])
    uow.refresh_tokens.revoke_if_active = AsyncMock(return_value=True)
    uow.refresh_tokens.revoke_all_by_user_id = AsyncMock(return_value=0)

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.delete_unused_by_user_id = AsyncMock(return_value=0)
    uow.password_reset_tokens.mark_used_if_unused = AsyncMock(return_value=True)

    return uow


@pytest.fixture
def codec():
    return AccessTokenCodec(TEST_SECRET, timedelta(hours=24))


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt at cost 12 is slow; hash once per test session
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def make_user(password_hash):
    def _make_user(**overrides) -> User:
        fields = dict(
            id=uuid4(),
            username="alice",
            email="alice@x.com",
            password_hash=password_hash,
            enabled=True,
            roles=[RoleName.ROLE_USER.value],
        )
        fields.update(overrides)
        return User(**fields)

    return _make_user


class ScheduledCalls(list):
    """Stands in for BackgroundTasks.add_task; runs the calls on demand"""

    def __call__(self, func, *args):
        self.append((func, args))

    async def run(self):
        for func, args in self:
            await func(*args)


@pytest.fixture
def scheduled():
    return ScheduledCalls()

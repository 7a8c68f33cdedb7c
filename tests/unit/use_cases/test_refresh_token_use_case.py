"""
Unit tests for RefreshTokenUseCase
"""
import hashlib
from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.use_cases.auth import RefreshTokenUseCase
from src.domain.base import utcnow
from src.domain.entities import RefreshToken


def _stored_token(plain: str, user_id) -> RefreshToken:
    now = utcnow()
    return RefreshToken(
        id=uuid4(),
        user_id=user_id,
        token_hash=hashlib.sha256(plain.encode()).hexdigest(),
        issued_at=now,
        expires_at=now + timedelta(days=7),
    )


@pytest.mark.asyncio
async def test_refresh_rotates_token(mock_uow, codec, make_user):
    # Arrange
    user = make_user(roles=["ROLE_USER", "ROLE_ADMIN"])
    mock_uow.refresh_tokens.get_by_token_hash.return_value = _stored_token("old", user.id)
    mock_uow.users.get_by_id.return_value = user

    # Act
    result = await RefreshTokenUseCase(mock_uow, codec).execute("old")

    # Assert
    assert result.is_ok()
    response = result.value
    assert response.refresh_token != "old"
    assert codec.validate(response.access_token).value.roles == ["ROLE_USER", "ROLE_ADMIN"]
    mock_uow.refresh_tokens.revoke_if_active.assert_called_once()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_refresh_unknown_token(mock_uow, codec):
    result = await RefreshTokenUseCase(mock_uow, codec).execute("unknown")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_disabled_user_is_not_committed(mock_uow, codec, make_user):
    """Rotation of a disabled user's token is rolled back"""
    user = make_user(enabled=False)
    mock_uow.refresh_tokens.get_by_token_hash.return_value = _stored_token("old", user.id)
    mock_uow.users.get_by_id.return_value = user

    result = await RefreshTokenUseCase(mock_uow, codec).execute("old")

    assert result.is_err()
    assert result.error.code == "USER_DISABLED"
    mock_uow.commit.assert_not_called()

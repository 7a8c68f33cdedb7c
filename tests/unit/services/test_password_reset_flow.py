"""
Unit tests for PasswordResetFlow

Tests token issuance, email delivery and single-use consumption.
"""
import asyncio
import hashlib
import re
import time
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.services.password_reset_flow import EMAIL_SUBJECT, PasswordResetFlow
from src.app.services.passwords import verify_password
from src.app.services.refresh_token_store import RefreshTokenStore
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken

RESET_URL = "http://localhost:3000/reset-password"


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.send_email = AsyncMock()
    return notifier


@pytest.fixture
def flow(mock_uow, notifier):
    return PasswordResetFlow(mock_uow, notifier, RefreshTokenStore(mock_uow), RESET_URL)


def _reset_token(plain: str, user_id, **overrides) -> PasswordResetToken:
    now = utcnow()
    fields = dict(
        id=uuid4(),
        user_id=user_id,
        token_hash=hashlib.sha256(plain.encode()).hexdigest(),
        created_at=now,
        expires_at=now + timedelta(minutes=60),
    )
    fields.update(overrides)
    return PasswordResetToken(**fields)


@pytest.mark.asyncio
async def test_request_reset_unknown_email_is_silent(flow, mock_uow, notifier, scheduled):
    """No token, no email, still a success"""
    mock_uow.users.get_by_email.return_value = None

    result = await flow.request_reset("nobody@x.com", scheduled)

    assert result.is_ok()
    assert scheduled == []
    mock_uow.password_reset_tokens.create.assert_not_called()
    notifier.send_email.assert_not_called()


@pytest.mark.asyncio
async def test_request_reset_issues_token_and_sends_link(
    flow, mock_uow, notifier, make_user, scheduled
):
    # Arrange
    user = make_user(first_name="Alice", last_name="Liddell")
    mock_uow.users.get_by_email.return_value = user

    # Act
    result = await flow.request_reset("alice@x.com", scheduled)
    await scheduled.run()

    # Assert
    assert result.is_ok()
    mock_uow.password_reset_tokens.delete_unused_by_user_id.assert_called_once_with(user.id)
    created = mock_uow.password_reset_tokens.create.call_args[0][0]
    assert created.user_id == user.id
    assert created.used_at is None
    assert created.expires_at - created.created_at == timedelta(minutes=60)
    mock_uow.commit.assert_called_once()

    to, subject, body = notifier.send_email.call_args[0]
    assert to == "alice@x.com"
    assert subject == EMAIL_SUBJECT
    assert body.startswith("Dear Alice,")
    assert "60 minutes" in body
    token = re.search(r"\?token=(\S+)", body).group(1)
    assert created.token_hash == hashlib.sha256(token.encode()).hexdigest()


@pytest.mark.asyncio
async def test_request_reset_discards_earlier_tokens_before_issuing(
    flow, mock_uow, make_user, scheduled
):
    """Only one unused token may exist per user"""
    mock_uow.users.get_by_email.return_value = make_user()
    calls = []
    mock_uow.password_reset_tokens.delete_unused_by_user_id.side_effect = (
        lambda user_id: calls.append("delete") or 1
    )
    mock_uow.password_reset_tokens.create.side_effect = (
        lambda token: calls.append("create") or token
    )

    await flow.request_reset("alice@x.com", scheduled)

    assert calls == ["delete", "create"]


@pytest.mark.asyncio
async def test_request_reset_email_failure_is_not_raised(
    flow, mock_uow, notifier, make_user, scheduled
):
    """Token stays committed when delivery fails"""
    mock_uow.users.get_by_email.return_value = make_user()
    notifier.send_email.side_effect = ConnectionError("smtp down")

    result = await flow.request_reset("alice@x.com", scheduled)
    await scheduled.run()

    assert result.is_ok()
    notifier.send_email.assert_called_once()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_request_reset_does_not_wait_for_delivery(
    flow, mock_uow, notifier, make_user, scheduled
):
    """The email is only scheduled; a slow mail server never delays the answer"""
    mock_uow.users.get_by_email.return_value = make_user()

    async def slow_send(*args):
        await asyncio.sleep(1)

    notifier.send_email.side_effect = slow_send

    started = time.monotonic()
    result = await flow.request_reset("alice@x.com", scheduled)
    elapsed = time.monotonic() - started

    assert result.is_ok()
    assert elapsed < 0.5
    notifier.send_email.assert_not_called()
    assert len(scheduled) == 1
    func, args = scheduled[0]
    assert func == flow.deliver_reset_email
    assert args[1] == "alice@x.com"


@pytest.mark.asyncio
async def test_consume_reset_success(flow, mock_uow, make_user):
    # Arrange
    user = make_user()
    stored = _reset_token("reset-token", user.id)
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = stored
    mock_uow.users.get_by_id.return_value = user
    old_hash = user.password_hash

    # Act
    result = await flow.consume_reset("reset-token", "NewPassw0rd!")

    # Assert
    assert result.is_ok()
    assert user.password_hash != old_hash
    assert verify_password("NewPassw0rd!", user.password_hash)
    assert mock_uow.password_reset_tokens.mark_used_if_unused.call_args[0][0] == stored.id
    mock_uow.users.update.assert_called_once_with(user)
    assert mock_uow.refresh_tokens.revoke_all_by_user_id.call_args[0][0] == user.id
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_consume_reset_unknown_token(flow, mock_uow):
    result = await flow.consume_reset("nope", "NewPassw0rd!")

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_consume_reset_used_token(flow, mock_uow, make_user):
    user = make_user()
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = _reset_token(
        "reset-token", user.id, used_at=utcnow()
    )

    result = await flow.consume_reset("reset-token", "NewPassw0rd!")

    assert result.is_err()
    assert result.error.code == "TOKEN_REVOKED_OR_REUSED"
    mock_uow.users.update.assert_not_called()


@pytest.mark.asyncio
async def test_consume_reset_expired_token(flow, mock_uow, make_user):
    user = make_user()
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = _reset_token(
        "reset-token", user.id, expires_at=utcnow() - timedelta(seconds=1)
    )

    result = await flow.consume_reset("reset-token", "NewPassw0rd!")

    assert result.is_err()
    assert result.error.code == "TOKEN_EXPIRED"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_consume_reset_concurrent_use(flow, mock_uow, make_user):
    """Losing the compare-and-swap leaves the password untouched"""
    user = make_user()
    old_hash = user.password_hash
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = _reset_token(
        "reset-token", user.id
    )
    mock_uow.users.get_by_id.return_value = user
    mock_uow.password_reset_tokens.mark_used_if_unused.return_value = False

    result = await flow.consume_reset("reset-token", "NewPassw0rd!")

    assert result.is_err()
    assert result.error.code == "TOKEN_REVOKED_OR_REUSED"
    assert user.password_hash == old_hash
    mock_uow.commit.assert_not_called()

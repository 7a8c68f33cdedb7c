"""
Unit tests for AccessTokenCodec

Covers issuance, validation and the distinct token error codes.
"""
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from jose import jwt

from src.app.errors import ConfigurationError
from src.app.services.access_token_codec import AccessTokenCodec

TEST_SECRET = "unit-test-secret-key-with-at-least-32-chars"


def test_issue_then_validate_returns_claims(codec):
    """A freshly issued token validates with the same subject and roles"""
    # Arrange
    user_id = str(uuid4())

    # Act
    token = codec.issue(user_id, ["ROLE_USER", "ROLE_ADMIN"])
    result = codec.validate(token)

    # Assert
    assert result.is_ok()
    claims = result.value
    assert claims.subject == user_id
    assert claims.roles == ["ROLE_USER", "ROLE_ADMIN"]
    assert claims.expires_at - claims.issued_at == timedelta(hours=24)


def test_issued_token_uses_hs512_and_comma_joined_roles(codec):
    token = codec.issue("subject-1", ["ROLE_USER", "ROLE_STUDENT"])

    header = jwt.get_unverified_header(token)
    claims = jwt.get_unverified_claims(token)

    assert header["alg"] == "HS512"
    assert claims["sub"] == "subject-1"
    assert claims["roles"] == "ROLE_USER,ROLE_STUDENT"
    assert claims["exp"] - claims["iat"] == 24 * 3600


def test_expires_in_seconds(codec):
    assert codec.expires_in_seconds == 86400


def test_validate_garbage_is_malformed(codec):
    result = codec.validate("not-a-jwt")

    assert result.is_err()
    assert result.error.code == "TOKEN_MALFORMED"


def test_validate_missing_subject_is_malformed(codec):
    """Token signed with the right key but without sub claim"""
    exp = datetime.now(UTC) + timedelta(minutes=5)
    token = jwt.encode({"exp": exp, "roles": "ROLE_USER"}, TEST_SECRET, algorithm="HS512")

    result = codec.validate(token)

    assert result.is_err()
    assert result.error.code == "TOKEN_MALFORMED"


def test_validate_wrong_key_is_invalid_signature(codec):
    """Token signed by another key is rejected as a signature failure"""
    other = AccessTokenCodec("another-secret-key-that-is-long-enough!!", timedelta(hours=1))
    token = other.issue(str(uuid4()), ["ROLE_USER"])

    result = codec.validate(token)

    assert result.is_err()
    assert result.error.code == "TOKEN_INVALID_SIGNATURE"


def test_validate_tampered_payload_is_invalid_signature(codec):
    token = codec.issue(str(uuid4()), ["ROLE_USER"])
    header, payload, signature = token.split(".")
    forged_payload = jwt.encode(
        {"sub": "attacker", "roles": "ROLE_ADMIN", "exp": 9999999999},
        TEST_SECRET,
        algorithm="HS512",
    ).split(".")[1]

    result = codec.validate(".".join([header, forged_payload, signature]))

    assert result.is_err()
    assert result.error.code == "TOKEN_INVALID_SIGNATURE"


def test_validate_expired_token(codec):
    """Correctly signed token whose exp is in the past"""
    now = datetime.now(UTC)
    token = jwt.encode(
        {
            "sub": str(uuid4()),
            "roles": "ROLE_USER",
            "iat": now - timedelta(hours=2),
            "exp": now - timedelta(hours=1),
        },
        TEST_SECRET,
        algorithm="HS512",
    )

    result = codec.validate(token)

    assert result.is_err()
    assert result.error.code == "TOKEN_EXPIRED"


def test_validate_empty_roles_claim(codec):
    token = codec.issue(str(uuid4()), [])

    result = codec.validate(token)

    assert result.is_ok()
    assert result.value.roles == []


@pytest.mark.parametrize("secret", ["", "too-short"])
def test_weak_secret_is_configuration_error(secret):
    with pytest.raises(ConfigurationError):
        AccessTokenCodec(secret, timedelta(hours=1))


def test_unsupported_algorithm_is_configuration_error():
    with pytest.raises(ConfigurationError):
        AccessTokenCodec(TEST_SECRET, timedelta(hours=1), algorithm="none")


def test_nonpositive_lifetime_is_configuration_error():
    with pytest.raises(ConfigurationError):
        AccessTokenCodec(TEST_SECRET, timedelta(0))


@pytest.mark.parametrize("secret", [None, ""])
def test_from_config_without_secret_is_configuration_error(secret):
    """An unset JWT_SECRET is fatal, never replaced by a built-in key"""
    config = SimpleNamespace(
        JWT_SECRET=secret, JWT_ALGORITHM="HS512", ACCESS_TOKEN_EXPIRES_MINUTES=1440
    )

    with pytest.raises(ConfigurationError):
        AccessTokenCodec.from_config(config)

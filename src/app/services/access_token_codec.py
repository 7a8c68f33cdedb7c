"""
Access Token Codec

Issues and validates short-lived HS512 JWT access tokens.
Validation is pure: signature and expiry only, no store lookup.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import List

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.errors import ConfigurationError

logger = logging.getLogger(__name__)

MIN_SECRET_LENGTH = 32
SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


class AccessTokenClaims(BaseModel):
    """Claims carried by a validated access token"""

    subject: str
    roles: List[str]
    issued_at: datetime
    expires_at: datetime


class AccessTokenCodec:
    """
    Business Rules:
    - Claims: sub, roles (comma-joined), iat, exp
    - Expiry window is fixed by configuration (default 24 hours), UTC clock
    - Malformed structure, bad signature and expiry are distinct errors
    - A missing or weak secret is a startup failure
    """

    def __init__(self, secret: str, expires_in: timedelta, algorithm: str = "HS512"):
        if not secret or len(secret) < MIN_SECRET_LENGTH:
            raise ConfigurationError(
                f"JWT secret must be at least {MIN_SECRET_LENGTH} characters"
            )
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(f"Unsupported JWT algorithm: {algorithm}")
        if expires_in <= timedelta(0):
            raise ConfigurationError("Access token lifetime must be positive")

        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    @classmethod
    def from_config(cls, config) -> "AccessTokenCodec":
        return cls(
            secret=config.JWT_SECRET,
            expires_in=timedelta(minutes=config.ACCESS_TOKEN_EXPIRES_MINUTES),
            algorithm=config.JWT_ALGORITHM,
        )

    @property
    def expires_in_seconds(self) -> int:
        return int(self._expires_in.total_seconds())

    def issue(self, subject: str, roles: List[str]) -> str:
        """
        Issue a signed access token.

        Args:
            subject: User ID as string
            roles: Role names (e.g. ROLE_USER)

        Returns:
            JWT token string
        """
        now = datetime.now(UTC)
        payload = {
            "sub": subject,
            "roles": ",".join(roles),
            "iat": now,
            "exp": now + self._expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> Result[AccessTokenClaims]:
        """
        Validate signature and expiry of an access token.

        Errors:
            - TOKEN_MALFORMED: not a JWT, or required claims missing
            - TOKEN_INVALID_SIGNATURE: signature or algorithm mismatch
            - TOKEN_EXPIRED: signature valid but exp has passed
        """
        # Structural checks first so a garbled token never reads as a bad signature
        try:
            jwt.get_unverified_header(token)
            unverified = jwt.get_unverified_claims(token)
        except (JWTError, AttributeError, TypeError):
            return Return.err(Error("TOKEN_MALFORMED", "Access token is malformed"))

        if not isinstance(unverified.get("sub"), str) or "exp" not in unverified:
            return Return.err(
                Error("TOKEN_MALFORMED", "Access token is missing required claims")
            )

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            return Return.err(Error("TOKEN_EXPIRED", "Access token has expired"))
        except JWTError as exc:
            logger.warning(f"Access token rejected: {exc}")
            return Return.err(
                Error("TOKEN_INVALID_SIGNATURE", "Access token signature is invalid")
            )

        roles = [r for r in str(claims.get("roles") or "").split(",") if r]
        try:
            issued_at = datetime.fromtimestamp(int(claims.get("iat", 0)), UTC)
            expires_at = datetime.fromtimestamp(int(claims["exp"]), UTC)
        except (TypeError, ValueError):
            return Return.err(Error("TOKEN_MALFORMED", "Access token timestamps are invalid"))

        return Return.ok(
            AccessTokenClaims(
                subject=claims["sub"],
                roles=roles,
                issued_at=issued_at,
                expires_at=expires_at,
            )
        )

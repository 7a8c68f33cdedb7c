import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.notifier import build_notifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.internal_auth import InternalApiKey
from src.app.services.access_token_codec import AccessTokenCodec
from src.app.services.notifier import INotifier
from src.app.services.refresh_token_store import DeviceContext
from src.domain.entities import EndUser, InternalService, Principal, RoleName

logger = logging.getLogger(__name__)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Built at import: a missing signing key or API key stops the service from starting
access_token_codec = AccessTokenCodec.from_config(ApplicationConfig)
internal_api_key = InternalApiKey.from_config(ApplicationConfig)
notifier = build_notifier(ApplicationConfig)

REFRESH_TOKEN_VALIDITY = timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRES_DAYS)
PASSWORD_RESET_VALIDITY = timedelta(minutes=ApplicationConfig.PASSWORD_RESET_EXPIRES_MINUTES)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_access_token_codec() -> AccessTokenCodec:
    return access_token_codec


def get_internal_api_key() -> InternalApiKey:
    return internal_api_key


def get_notifier() -> INotifier:
    return notifier


def get_device_context(
    request: Request, user_agent: Optional[str] = Header(default=None)
) -> DeviceContext:
    """Client metadata stored with refresh tokens"""
    return DeviceContext(
        user_agent=user_agent[:255] if user_agent else None,
        ip_address=request.client.host if request.client else None,
    )


def _check_api_key(x_api_key: str, api_key: InternalApiKey) -> InternalService:
    if not api_key.matches(x_api_key):
        logger.warning("API key authentication failed: invalid key provided")
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return InternalService()


async def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_api_key: Optional[str] = Header(default=None),
    codec: AccessTokenCodec = Depends(get_access_token_codec),
    api_key: InternalApiKey = Depends(get_internal_api_key),
) -> Principal:
    """
    Resolve the caller from either the X-API-KEY header or a bearer token.

    Raises:
        ClientError: 401 with the token error code if the credential is invalid
    """
    if x_api_key:
        return _check_api_key(x_api_key, api_key)

    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = codec.validate(credentials.credentials)
    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)

    claims = result.value
    try:
        user_id = UUID(claims.subject)
    except ValueError:
        raise ClientError(
            Error("TOKEN_MALFORMED", "Access token subject is invalid"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return EndUser(id=user_id, roles=claims.roles)


async def get_current_user(principal: Principal = Depends(get_principal)) -> EndUser:
    """
    Dependency for endpoints acting on behalf of a user.

    Raises:
        ClientError: 403 if the caller is an internal service
    """
    if not isinstance(principal, EndUser):
        logger.warning(f"Principal of type {principal.kind.value} used on an end-user endpoint")
        raise ClientError(
            Error(
                "UNAUTHORIZED_PRINCIPAL_TYPE",
                "This endpoint requires an authenticated user",
            ),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return principal


async def get_admin_user(current_user: EndUser = Depends(get_current_user)) -> EndUser:
    if not current_user.has_role(RoleName.ROLE_ADMIN):
        raise ClientError(
            Error("FORBIDDEN", "Administrator role required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return current_user


async def get_internal_service(
    x_api_key: Optional[str] = Header(default=None),
    api_key: InternalApiKey = Depends(get_internal_api_key),
) -> InternalService:
    """
    Dependency for service-to-service endpoints (X-API-KEY header).

    Raises:
        ClientError: 401 if key is missing or invalid
    """
    if not x_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Missing or empty X-API-KEY header"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return _check_api_key(x_api_key, api_key)

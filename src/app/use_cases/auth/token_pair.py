from typing import Optional

from src.app.services.access_token_codec import AccessTokenCodec
from src.app.services.refresh_token_store import DeviceContext, RefreshTokenStore
from src.domain.entities import User
from .dtos import AuthResponse


class TokenPairIssuer:
    """Issues an access token and a refresh token for the same user"""

    def __init__(self, codec: AccessTokenCodec, refresh_tokens: RefreshTokenStore):
        self.codec = codec
        self.refresh_tokens = refresh_tokens

    async def issue(self, user: User, device: Optional[DeviceContext] = None) -> AuthResponse:
        refresh_token = await self.refresh_tokens.issue(user, device)
        return self.build_response(user, refresh_token)

    def build_response(self, user: User, refresh_token: str) -> AuthResponse:
        access_token = self.codec.issue(str(user.id), list(user.roles))
        return AuthResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.codec.expires_in_seconds,
            user_id=str(user.id),
            username=user.username,
            email=user.email,
        )

"""
Internal API Key

Service-to-service credential checked against the X-API-KEY header.
"""

import secrets

from src.app.errors import ConfigurationError


class InternalApiKey:
    """
    Capability holding the shared secret for internal callers.

    Built once at startup and injected where internal endpoints are
    declared; the secret never leaves this object.
    """

    def __init__(self, secret: str):
        if not secret:
            raise ConfigurationError("INTERNAL_API_KEY must be configured")
        self._secret = secret.encode()

    @classmethod
    def from_config(cls, config) -> "InternalApiKey":
        return cls(config.INTERNAL_API_KEY)

    def matches(self, candidate: str) -> bool:
        """Constant-time comparison against the configured key"""
        return secrets.compare_digest(candidate.encode(), self._secret)

    def __repr__(self) -> str:
        return "InternalApiKey(***)"

from typing import Dict, NoReturn

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Failures of any bearer/refresh token check
TOKEN_ERROR_STATUS: Dict[str, int] = {
    "INVALID_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_MALFORMED": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_INVALID_SIGNATURE": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_REVOKED_OR_REUSED": status.HTTP_401_UNAUTHORIZED,
}


def raise_for_error(error: Error, status_by_code: Dict[str, int]) -> NoReturn:
    """
    Translate a use case error into an HTTP error.

    Codes missing from status_by_code are unexpected and become a 500.
    """
    status_code = status_by_code.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)

from typing import Dict, Optional

from fastapi import status

from lotus_auth.domain.entities import AuthErrorCode
from lotus_auth.libs.result import Error


class ClientError(Exception):
    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.headers = headers
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


AUTH_ERROR_STATUS = {
    AuthErrorCode.INVALID_CREDENTIALS.value: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.INVALID_TOKEN.value: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.EXPIRED_TOKEN.value: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.SESSION_REVOKED.value: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.REPLAY_DETECTED.value: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.ACCOUNT_DISABLED.value: status.HTTP_403_FORBIDDEN,
    AuthErrorCode.RATE_LIMITED.value: status.HTTP_429_TOO_MANY_REQUESTS,
    AuthErrorCode.INVALID_PASSWORD.value: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.EMAIL_ALREADY_EXISTS.value: status.HTTP_409_CONFLICT,
    AuthErrorCode.SESSION_NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
}


def to_http_error(error: Error) -> Exception:
    """Map a use case error onto the exception the handlers render"""
    status_code = AUTH_ERROR_STATUS.get(error.code)
    if status_code is None:
        return ServerError(error)

    headers = None
    if status_code == status.HTTP_429_TOO_MANY_REQUESTS:
        headers = {"Retry-After": str(error.details.get("retry_after", 1))}
    elif status_code == status.HTTP_401_UNAUTHORIZED and error.code != (
        AuthErrorCode.INVALID_CREDENTIALS.value
    ):
        headers = {"WWW-Authenticate": "Bearer"}

    return ClientError(error, status_code=status_code, headers=headers)

"""Exception hierarchy for the Robinhood client.

Login, refresh and dispatch each raise from their own branch so callers can
tell a dead refresh token (full MFA login needed) apart from a flaky network.
"""

from __future__ import annotations


class ApiError(RuntimeError):
    pass


class UnauthorizedError(ApiError):
    def __init__(self, message: str = "Unauthorized request 401") -> None:
        super().__init__(message)


class NotFoundError(ApiError):
    def __init__(self, url: str) -> None:
        super().__init__(f"404 NOT FOUND URL: {url}")
        self.url = url


class NetworkError(ApiError):
    pass


class RequestError(NetworkError):
    """Transport-level failure; ``original`` holds the requests exception."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class InvalidCredentialsError(ApiError):
    def __init__(self, message: str = "Invalid username/password") -> None:
        super().__init__(message)


class LoginError(ApiError):
    pass


class BadLoginBodyError(LoginError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to serialize login payload ({reason})")


class EmptyLoginBodyError(LoginError):
    def __init__(self) -> None:
        super().__init__("Log in payload is empty")


class MissingMfaCodeError(LoginError):
    def __init__(self) -> None:
        super().__init__("Mfa code was not added to the request body correctly")


class BadResponseBodyError(LoginError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to deserialize successful login response body: ({reason})")


class LoginStateError(LoginError):
    pass


class RefreshError(ApiError):
    pass


class BadRefreshTokenError(RefreshError):
    """The refresh token was rejected; a full MFA login is required."""

    def __init__(self, old_token: str) -> None:
        super().__init__("Refresh token rejected by the server (invalid_grant)")
        self.old_token = old_token


class WrongResponseBodyError(RefreshError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Unexpected response body ({reason})")


class InvalidDeviceTokenError(ValueError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Device token is not a valid UUID: {value!r}")
        self.value = value

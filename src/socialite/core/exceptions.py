# core/exceptions.py

from typing import Any

from fastapi import HTTPException, status


class SocialiteException(Exception):
    def __init__(
        self, message: str, error_code: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidConfigurationError(SocialiteException):
    def __init__(self, message: str = "client_id/redirect/client_secret is required"):
        super().__init__(message, error_code="INVALID_CONFIGURATION")


class UnsupportedDriverError(SocialiteException):
    def __init__(self, driver: str, message: str | None = None):
        self.driver = driver
        super().__init__(
            message or f"Driver [{driver}] not supported.",
            error_code="UNSUPPORTED_DRIVER",
            details={"driver": driver},
        )


class AuthenticationError(SocialiteException):
    def __init__(
        self,
        message: str = "Authentication with the provider failed",
        error_code: str = "AUTHENTICATION_FAILED",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code=error_code, details=details)


class InvalidStateError(AuthenticationError):
    def __init__(self, message: str = "Invalid or missing OAuth state"):
        super().__init__(message, error_code="INVALID_STATE")


# HTTP Exception converters
def convert_to_http_exception(exc: SocialiteException) -> HTTPException:
    status_map = {
        "INVALID_CONFIGURATION": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "UNSUPPORTED_DRIVER": status.HTTP_404_NOT_FOUND,
        "AUTHENTICATION_FAILED": status.HTTP_401_UNAUTHORIZED,
        "INVALID_STATE": status.HTTP_400_BAD_REQUEST,
    }

    status_code = status_map.get(exc.error_code or "", status.HTTP_500_INTERNAL_SERVER_ERROR)

    return HTTPException(
        status_code=status_code,
        detail={"message": exc.message, "error_code": exc.error_code, "details": exc.details},
    )

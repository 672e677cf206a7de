"""Application-level exceptions."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidResponseError(AppError):
    """Raised when a backend response does not match the {success, data} envelope."""

    def __init__(self, message: str = "Invalid response structure"):
        super().__init__(message, code="INVALID_RESPONSE")


class ApiError(AppError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, payload: Optional[dict] = None):
        super().__init__(message, code="API_ERROR")
        self.status_code = status_code
        self.payload = payload or {}


class ApiConnectionError(AppError):
    """Raised when the backend cannot be reached (timeout, DNS, refused)."""

    def __init__(self, message: str):
        super().__init__(message, code="NETWORK_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")

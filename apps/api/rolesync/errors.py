"""Application exception types."""

from rolesync.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class PermissionDeniedError(ApiError):
    """Caller is authenticated but lacks the admin role claim."""

    def __init__(self, message: str) -> None:
        super().__init__(status_code=403, code="PERMISSION_DENIED", message=message)


class InvalidArgumentError(ApiError):
    """Payload is missing required fields or carries an out-of-range value."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(status_code=400, code="INVALID_ARGUMENT", message=message, details=details)


class InternalError(ApiError):
    """Generic failure; the underlying cause stays in the server log."""

    def __init__(self, message: str) -> None:
        super().__init__(status_code=500, code="INTERNAL", message=message)


__all__ = ["ApiError", "InternalError", "InvalidArgumentError", "PermissionDeniedError"]

from typing import Optional, Any, List


class UserDeskError(Exception):
    """
    Base exception for UserDesk application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class MissingFieldError(UserDeskError):
    """
    Raised when required user fields are absent or blank.
    """
    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(
            f"Missing required fields: {', '.join(self.fields)}",
            code="MISSING_FIELDS",
            status_code=400,
            details={"fields": self.fields}
        )


class InvalidEmailFormatError(UserDeskError):
    def __init__(self, message: str = "Please provide a valid email address", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_EMAIL", status_code=400, details=details)


class InvalidImageUrlError(UserDeskError):
    def __init__(self, message: str = "Please provide a valid image URL", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_IMAGE_URL", status_code=400, details=details)


class InvalidUserIdError(UserDeskError):
    """
    Raised by the routing layer for identifiers the active store cannot hold.
    """
    def __init__(self, user_id: str):
        super().__init__(
            f"Invalid user id: {user_id}",
            code="INVALID_USER_ID",
            status_code=400,
            details={"id": user_id}
        )


class SchemaValidationError(UserDeskError):
    """
    Raised when the backend rejects a document the validator let through.
    """
    def __init__(self, message: str = "Document failed schema validation", details: Optional[Any] = None):
        super().__init__(message, code="SCHEMA_VALIDATION_FAILED", status_code=400, details=details)


class NotFoundError(UserDeskError):
    """
    Raised when a requested user does not exist.
    """
    def __init__(self, message: str = "User not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class DuplicateEmailError(UserDeskError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(
            "A user with this email address already exists",
            code="DUPLICATE_EMAIL",
            status_code=409,
            details={"email": email}
        )


class StoreConnectionError(UserDeskError, ConnectionError):
    """
    Raised when the storage backend is unreachable or an operation timed out.
    """
    def __init__(self, message: str = "User store unavailable", details: Optional[Any] = None):
        super().__init__(message, code="STORE_UNAVAILABLE", status_code=500, details=details)

"""
Error taxonomy shared by the storage, auth and HTTP layers.

Every failure is classified where it happens. Expected kinds (validation,
not found, conflicts, auth) are plain control flow; only the unexpected kinds
(storage, hashing, timeouts) are logged as server faults by the HTTP layer.
"""


class AppError(Exception):
    """Base class for all application errors."""

    message = "application error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(AppError):
    """One or more fields failed validation. Carries a field -> message map."""

    message = "validation failed"

    def __init__(self, errors: dict[str, str]):
        super().__init__(self.message)
        self.errors = dict(errors)


class DuplicateKeyError(AppError):
    """A unique constraint rejected the write (e.g. a duplicate email)."""

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"a record with this {field} already exists")
        self.field = field


class RecordNotFoundError(AppError):
    message = "record not found"


class EditConflictError(AppError):
    message = "edit conflict"


class InvalidCredentialsError(AppError):
    message = "invalid authentication credentials"


class InvalidAuthTokenError(AppError):
    message = "invalid or missing authentication token"


class AuthenticationRequiredError(AppError):
    message = "you must be authenticated to access this resource"


class InactiveAccountError(AppError):
    message = "your user account must be activated to access this resource"


class ForbiddenError(AppError):
    message = "your user account doesn't have the necessary permissions to access this resource"


class StorageError(AppError):
    message = "storage operation failed"


class StorageTimeoutError(StorageError):
    message = "storage operation timed out"


class HashingError(AppError):
    message = "password hashing failed"

"""
Map the application error taxonomy onto HTTP responses.

Every error body has the shape {"error": <message or field map>}. Only
unexpected failures are logged; validation, not-found, conflict and auth
failures are ordinary control flow.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import (
    AuthenticationRequiredError,
    DuplicateKeyError,
    EditConflictError,
    ForbiddenError,
    HashingError,
    InactiveAccountError,
    InvalidAuthTokenError,
    InvalidCredentialsError,
    RecordNotFoundError,
    StorageError,
    ValidationError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

SERVER_ERROR_MESSAGE = "the server encountered a problem and could not process your request"
NOT_FOUND_MESSAGE = "the requested resource could not be found"
EDIT_CONFLICT_MESSAGE = "unable to update the record due to an edit conflict, please try again"


def error_response(status_code: int, message, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def log_error(request: Request, exc: Exception) -> None:
    logger.error(
        f"[API] {request.method} {request.url.path} failed: {exc!r}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )


async def validation_error_handler(request: Request, exc: ValidationError):
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, exc.errors)


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, {exc.field: exc.message})


async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)


async def edit_conflict_handler(request: Request, exc: EditConflictError):
    return error_response(status.HTTP_409_CONFLICT, EDIT_CONFLICT_MESSAGE)


async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
    return error_response(status.HTTP_401_UNAUTHORIZED, exc.message)


async def invalid_auth_token_handler(request: Request, exc: InvalidAuthTokenError):
    return error_response(
        status.HTTP_401_UNAUTHORIZED,
        exc.message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def authentication_required_handler(request: Request, exc: AuthenticationRequiredError):
    return error_response(status.HTTP_401_UNAUTHORIZED, exc.message)


async def forbidden_handler(request: Request, exc: ForbiddenError | InactiveAccountError):
    return error_response(status.HTTP_403_FORBIDDEN, exc.message)


async def server_error_handler(request: Request, exc: Exception):
    log_error(request, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, str] = {}
    for error in exc.errors():
        location = error.get("loc", ())
        if error.get("type") == "json_invalid":
            return error_response(status.HTTP_400_BAD_REQUEST, "body contains badly-formed JSON")
        # A non-numeric id in the path is just a resource that doesn't exist
        if location and location[0] == "path":
            return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)

        field = ".".join(str(part) for part in location[1:]) or "body"
        errors.setdefault(field, error.get("msg", "is invalid"))

    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, NOT_FOUND_MESSAGE)
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return error_response(
            exc.status_code,
            f"the {request.method} method is not supported for this resource",
            headers=exc.headers,
        )
    return error_response(exc.status_code, exc.detail, headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(RecordNotFoundError, not_found_handler)
    app.add_exception_handler(EditConflictError, edit_conflict_handler)
    app.add_exception_handler(InvalidCredentialsError, invalid_credentials_handler)
    app.add_exception_handler(InvalidAuthTokenError, invalid_auth_token_handler)
    app.add_exception_handler(AuthenticationRequiredError, authentication_required_handler)
    app.add_exception_handler(ForbiddenError, forbidden_handler)
    app.add_exception_handler(InactiveAccountError, forbidden_handler)
    app.add_exception_handler(StorageError, server_error_handler)
    app.add_exception_handler(HashingError, server_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    # Anything unclassified still gets the opaque 500 body
    app.add_exception_handler(Exception, server_error_handler)

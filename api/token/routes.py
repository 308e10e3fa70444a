from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from api.token.schemas import (
    ActivationRequest,
    AuthenticationTokenResponse,
    TokenCredentials,
    TokenResponse,
)
from api.user.crud import UserStore
from auth.dependencies import AuthenticatedContext, require_authenticated_user
from auth.passwords import PasswordHash
from auth.tokens import TokenStore
from core.container import Container, get_container
from core.errors import InvalidCredentialsError, RecordNotFoundError
from core.validator import Validator, validate_email, validate_password_plaintext
from database.connection import get_session
from database.models import TokenScope
from services.mailer import format_duration
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/authentication",
    response_model=AuthenticationTokenResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_authentication_token(
    data: TokenCredentials,
    session: Session = Depends(get_session),
    container: Container = Depends(get_container),
):
    """Exchange email and password for a bearer token. Unknown email and wrong password look the same."""
    v = Validator()
    validate_email(v, data.email)
    validate_password_plaintext(v, data.password)
    v.raise_if_invalid()

    try:
        user = UserStore(session).get_by_email(data.email)
    except RecordNotFoundError:
        raise InvalidCredentialsError()

    if not PasswordHash(user.password_hash).matches(data.password):
        raise InvalidCredentialsError()

    plaintext, token = TokenStore(session).new(
        user.id, container.settings.authentication_token_ttl, TokenScope.AUTHENTICATION
    )
    logger.info(f"[Tokens] Issued authentication token for user {user.id}")
    return AuthenticationTokenResponse(
        authentication_token=TokenResponse(token=plaintext, expiry=token.expiry)
    )


@router.delete("/authentication")
def delete_authentication_tokens(
    context: AuthenticatedContext = Depends(require_authenticated_user),
    session: Session = Depends(get_session),
):
    """Log out everywhere: revoke every authentication token the caller holds."""
    user_id = context.require_user().id
    TokenStore(session).delete_all_for_user(TokenScope.AUTHENTICATION, user_id)
    logger.info(f"[Tokens] Revoked authentication tokens for user {user_id}")
    return {"message": "authentication tokens successfully revoked"}


@router.post("/activation", status_code=status.HTTP_202_ACCEPTED)
def create_activation_token(
    data: ActivationRequest,
    session: Session = Depends(get_session),
    container: Container = Depends(get_container),
):
    v = Validator()
    validate_email(v, data.email)
    v.raise_if_invalid()

    try:
        user = UserStore(session).get_by_email(data.email)
    except RecordNotFoundError:
        v.add_error("email", "no matching email address found")
        v.raise_if_invalid()

    if user.activated:
        v.add_error("email", "user has already been activated")
        v.raise_if_invalid()

    ttl = container.settings.activation_token_ttl
    plaintext, _ = TokenStore(session).new(user.id, ttl, TokenScope.ACTIVATION)

    container.background.submit(
        container.mailer.send,
        user.email,
        "token_activation.html",
        {
            "name": user.name,
            "activation_token": plaintext,
            "activation_ttl": format_duration(ttl),
        },
    )
    return {"message": "an email will be sent to you containing activation instructions"}

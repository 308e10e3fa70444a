from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from auth.service import get_all_permissions_for_user
from auth.tokens import TOKEN_PLAINTEXT_LENGTH, TokenStore
from core.errors import (
    AuthenticationRequiredError,
    ForbiddenError,
    InactiveAccountError,
    InvalidAuthTokenError,
    RecordNotFoundError,
)
from core.permissions import Permissions, Roles
from database.connection import get_session
from database.models import TokenScope, User


@dataclass(frozen=True)
class AuthenticatedContext:
    """Who is making the request. Built once per request by ``authenticate``."""

    user: Optional[User] = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_anonymous(self) -> bool:
        return self.user is None

    def require_user(self) -> User:
        # Handlers only call this behind an auth gate; reaching here anonymous
        # means the gate is missing from the route.
        if self.user is None:
            raise RuntimeError("missing user in authenticated context")
        return self.user


ANONYMOUS = AuthenticatedContext()


security = HTTPBearer(auto_error=False)


def get_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Extract a bearer token from the Authorization header, if there is one."""
    if credentials is None:
        # A header that is not "Bearer <token>" is a bad token, not an anonymous request
        if "Authorization" in request.headers:
            raise InvalidAuthTokenError()
        return None

    token = credentials.credentials
    if len(token) != TOKEN_PLAINTEXT_LENGTH:
        raise InvalidAuthTokenError()
    return token


def authenticate(
    response: Response,
    token: Optional[str] = Depends(get_token_from_request),
    session: Session = Depends(get_session),
) -> AuthenticatedContext:
    """Resolve the request's bearer token to a user, or an anonymous context."""
    response.headers["Vary"] = "Authorization"

    if token is None:
        return ANONYMOUS

    try:
        user = TokenStore(session).get_user_for_token(TokenScope.AUTHENTICATION, token)
    except RecordNotFoundError:
        raise InvalidAuthTokenError()

    return AuthenticatedContext(user=user)


def require_authenticated_user(
    context: AuthenticatedContext = Depends(authenticate),
) -> AuthenticatedContext:
    if context.is_anonymous:
        raise AuthenticationRequiredError()
    return context


def require_activated_user(
    context: AuthenticatedContext = Depends(require_authenticated_user),
) -> AuthenticatedContext:
    if not context.require_user().activated:
        raise InactiveAccountError()
    return context


class PermissionChecker:
    """Dependency class for checking user permissions."""

    def __init__(self, required_permission: Permissions | str):
        # Support both Permissions enum and string
        self.required_permission = (
            required_permission.value
            if isinstance(required_permission, Permissions)
            else required_permission
        )

    def __call__(
        self,
        context: AuthenticatedContext = Depends(require_activated_user),
        session: Session = Depends(get_session),
    ) -> AuthenticatedContext:
        permissions = get_all_permissions_for_user(session, context.require_user().id)

        if self.required_permission not in permissions:
            raise ForbiddenError()

        return AuthenticatedContext(user=context.user, permissions=frozenset(permissions))


class RoleChecker:
    """Dependency class for checking a user's role label."""

    def __init__(self, required_role: Roles | str):
        self.required_role = (
            required_role.value if isinstance(required_role, Roles) else required_role
        )

    def __call__(
        self,
        context: AuthenticatedContext = Depends(require_activated_user),
    ) -> AuthenticatedContext:
        if context.require_user().role != self.required_role:
            raise ForbiddenError()
        return context


def require_permission(permission: Permissions | str):
    """Factory function to create permission dependency."""
    return PermissionChecker(permission)


def require_role(role: Roles | str):
    """Factory function to create role dependency."""
    return RoleChecker(role)

from typing import Optional

from fastapi import APIRouter, Depends, Path, status
from sqlmodel import Session

from api.params import check_expected_version, expected_version, list_filters
from api.user.crud import SORT_COLUMNS, UserStore, normalize_email, user_conditions, validate_user
from api.user.schemas import (
    PermissionGrant,
    PermissionListResponse,
    UserActivate,
    UserListResponse,
    UserRegister,
    UserResponse,
    UserRoleUpdate,
    UserUpdate,
    UserWithPermissions,
)
from auth.dependencies import AuthenticatedContext, require_authenticated_user, require_role
from auth.passwords import PasswordHash
from auth.service import add_permission_for_user, change_role_for_user, get_all_permissions_for_user
from auth.tokens import TokenStore, validate_token_plaintext
from core.container import Container, get_container
from core.errors import RecordNotFoundError
from core.pagination import Filters
from core.permissions import DEFAULT_PERMISSIONS, DEFAULT_ROLE, Roles, is_known_permission, is_known_role
from core.validator import Validator, unique
from database.connection import get_session
from database.models import TokenScope, User
from services.mailer import format_duration
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_202_ACCEPTED)
def register_user(
    data: UserRegister,
    session: Session = Depends(get_session),
    container: Container = Depends(get_container),
):
    """
    Register a new, not yet activated user.

    The user gets the default role and read permissions. The welcome mail with
    the activation token is sent in the background, so a mail failure never
    fails the registration.
    """
    user = User(name=data.name, email=normalize_email(data.email), activated=False, role=DEFAULT_ROLE)

    v = Validator()
    validate_user(v, user, data.password)
    v.raise_if_invalid()

    user.password_hash = PasswordHash(cost=container.settings.bcrypt_cost).set(data.password)

    ttl = container.settings.activation_token_ttl
    user, plaintext = UserStore(session).register(user, DEFAULT_PERMISSIONS, ttl)

    container.background.submit(
        container.mailer.send,
        user.email,
        "user_welcome.html",
        {
            "name": user.name,
            "user_id": user.id,
            "activation_token": plaintext,
            "activation_ttl": format_duration(ttl),
        },
    )
    logger.info(f"[Users] Registered user {user.id}")
    return user


@router.put("/activated", response_model=UserResponse)
def activate_user(
    data: UserActivate,
    session: Session = Depends(get_session),
):
    v = Validator()
    validate_token_plaintext(v, data.token)
    v.raise_if_invalid()

    tokens = TokenStore(session)
    try:
        user = tokens.get_user_for_token(TokenScope.ACTIVATION, data.token)
    except RecordNotFoundError:
        v.add_error("token", "invalid or expired activation token")
        v.raise_if_invalid()

    user.activated = True
    user = UserStore(session).update(user)

    # Activation tokens are single use
    tokens.delete_all_for_user(TokenScope.ACTIVATION, user.id)
    logger.info(f"[Users] Activated user {user.id}")
    return user


@router.get("/me", response_model=UserWithPermissions)
def get_current_user(
    context: AuthenticatedContext = Depends(require_authenticated_user),
    session: Session = Depends(get_session),
):
    user = context.require_user()
    permissions = get_all_permissions_for_user(session, user.id)
    return UserWithPermissions(**user.model_dump(), permissions=sorted(permissions))


@router.patch("/me", response_model=UserResponse)
def update_current_user(
    data: UserUpdate,
    expected: Optional[str] = Depends(expected_version),
    context: AuthenticatedContext = Depends(require_authenticated_user),
    session: Session = Depends(get_session),
    container: Container = Depends(get_container),
):
    """Update the caller's name, email or password. A new password logs out every session."""
    store = UserStore(session)
    user = store.get(context.require_user().id)
    check_expected_version(expected, user)

    if data.name is not None:
        user.name = data.name
    if data.email is not None:
        user.email = normalize_email(data.email)

    v = Validator()
    validate_user(v, user, data.password)
    v.raise_if_invalid()

    if data.password is not None:
        user.password_hash = PasswordHash(cost=container.settings.bcrypt_cost).set(data.password)

    user = store.update(user)

    if data.password is not None:
        TokenStore(session).delete_all_for_user(TokenScope.AUTHENTICATION, user.id)
        logger.info(f"[Users] Password changed for user {user.id}, authentication tokens revoked")

    return user


@router.delete("/me")
def delete_current_user(
    context: AuthenticatedContext = Depends(require_authenticated_user),
    session: Session = Depends(get_session),
):
    user_id = context.require_user().id
    UserStore(session).delete(user_id)
    logger.info(f"[Users] Deleted user {user_id}")
    return {"message": "user successfully deleted"}


@router.get("", response_model=UserListResponse)
def list_users(
    name: str = "",
    email: str = "",
    context: AuthenticatedContext = Depends(require_role(Roles.ADMIN)),
    filters: Filters = Depends(list_filters(*SORT_COLUMNS)),
    session: Session = Depends(get_session),
):
    users, metadata = UserStore(session).get_all(filters, *user_conditions(name, email))
    return {"users": users, "metadata": metadata}


@router.put("/{user_id}/role", response_model=UserResponse)
def update_user_role(
    data: UserRoleUpdate,
    user_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_role(Roles.ADMIN)),
    session: Session = Depends(get_session),
):
    v = Validator()
    v.check(data.role != "", "role", "must be provided")
    v.check(data.role == "" or is_known_role(data.role), "role", "is not a known role")
    v.raise_if_invalid()

    change_role_for_user(session, user_id, data.role)
    logger.info(f"[Users] Role of user {user_id} set to {data.role}")
    return UserStore(session).get(user_id)


@router.get("/{user_id}/permissions", response_model=PermissionListResponse)
def list_user_permissions(
    user_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_role(Roles.ADMIN)),
    session: Session = Depends(get_session),
):
    user = UserStore(session).get(user_id)
    permissions = get_all_permissions_for_user(session, user.id)
    return PermissionListResponse(user_id=user.id, permissions=sorted(permissions))


@router.post("/{user_id}/permissions", response_model=PermissionListResponse)
def grant_user_permissions(
    data: PermissionGrant,
    user_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_role(Roles.ADMIN)),
    session: Session = Depends(get_session),
):
    """Grant permission codes. Codes the user already holds are left alone."""
    v = Validator()
    v.check(len(data.codes) > 0, "codes", "must contain at least 1 permission code")
    v.check(unique(data.codes), "codes", "must not contain duplicate values")
    unknown = [code for code in data.codes if not is_known_permission(code)]
    v.check(not unknown, "codes", f"unknown permission codes: {', '.join(unknown)}")
    v.raise_if_invalid()

    user = UserStore(session).get(user_id)
    add_permission_for_user(session, user.id, *data.codes)
    logger.info(f"[Users] Granted {', '.join(data.codes)} to user {user.id}")

    permissions = get_all_permissions_for_user(session, user.id)
    return PermissionListResponse(user_id=user.id, permissions=sorted(permissions))

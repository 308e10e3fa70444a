from auth.dependencies import (
    AuthenticatedContext,
    authenticate,
    require_authenticated_user,
    require_activated_user,
    require_permission,
    require_role,
)
from auth.passwords import PasswordHash
from auth.service import (
    add_permission_for_user,
    change_role_for_user,
    get_all_permissions_for_user,
)
from auth.tokens import TokenStore, generate_token, hash_token

__all__ = [
    "AuthenticatedContext",
    "authenticate",
    "require_authenticated_user",
    "require_activated_user",
    "require_permission",
    "require_role",
    "PasswordHash",
    "add_permission_for_user",
    "change_role_for_user",
    "get_all_permissions_for_user",
    "TokenStore",
    "generate_token",
    "hash_token",
]

"""
Centralized permission and role definitions.
All permission codes and role labels should be referenced from here.
"""
from enum import Enum


class Permissions(str, Enum):
    # Movies
    MOVIES_READ = "movies:read"
    MOVIES_WRITE = "movies:write"

    # Course modules
    MODULES_READ = "modules:read"
    MODULES_WRITE = "modules:write"

    # Departments
    DEPARTMENTS_READ = "departments:read"
    DEPARTMENTS_WRITE = "departments:write"


class Roles(str, Enum):
    USER = "user"
    ADMIN = "admin"


# Granted to every newly registered user
DEFAULT_PERMISSIONS = [
    Permissions.MOVIES_READ.value,
    Permissions.MODULES_READ.value,
    Permissions.DEPARTMENTS_READ.value,
]

DEFAULT_ROLE = Roles.USER.value


# Permission definitions for database seeding
PERMISSION_DEFINITIONS = [
    # Movies
    {"code": Permissions.MOVIES_READ.value, "description": "View movies"},
    {"code": Permissions.MOVIES_WRITE.value, "description": "Create, edit and delete movies"},

    # Course modules
    {"code": Permissions.MODULES_READ.value, "description": "View course modules"},
    {"code": Permissions.MODULES_WRITE.value, "description": "Create, edit and delete course modules"},

    # Departments
    {"code": Permissions.DEPARTMENTS_READ.value, "description": "View departments"},
    {"code": Permissions.DEPARTMENTS_WRITE.value, "description": "Create, edit and delete departments"},
]


def is_known_permission(code: str) -> bool:
    return code in {p.value for p in Permissions}


def is_known_role(role: str) -> bool:
    return role in {r.value for r in Roles}

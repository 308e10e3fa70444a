from database.models.user import User
from database.models.token import Token, TokenScope
from database.models.permission import Permission, UserPermission
from database.models.movie import Movie
from database.models.module_info import ModuleInfo
from database.models.department import DepartmentInfo

__all__ = [
    "User",
    "Token",
    "TokenScope",
    "Permission",
    "UserPermission",
    "Movie",
    "ModuleInfo",
    "DepartmentInfo",
]

from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from core.pagination import Metadata


class UserRegister(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""

    class Config:
        extra = "forbid"


class UserActivate(BaseModel):
    token: str = ""


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    class Config:
        extra = "forbid"


class UserResponse(BaseModel):
    id: int
    created_at: datetime
    name: str
    email: str
    activated: bool
    role: str
    version: int

    class Config:
        from_attributes = True


class UserWithPermissions(UserResponse):
    permissions: list[str] = []


class UserListResponse(BaseModel):
    users: list[UserResponse]
    metadata: Metadata


class UserRoleUpdate(BaseModel):
    role: str = ""


class PermissionGrant(BaseModel):
    codes: list[str] = []


class PermissionListResponse(BaseModel):
    user_id: int
    permissions: list[str]

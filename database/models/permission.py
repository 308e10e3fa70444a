from sqlmodel import SQLModel, Field
from typing import Optional


class Permission(SQLModel, table=True):
    __tablename__ = "permissions"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(unique=True, index=True, max_length=100)  # e.g., "movies:read", "modules:write"
    description: Optional[str] = Field(default=None, max_length=500)


class UserPermission(SQLModel, table=True):
    __tablename__ = "users_permissions"

    user_id: int = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    permission_id: int = Field(foreign_key="permissions.id", primary_key=True, ondelete="CASCADE")

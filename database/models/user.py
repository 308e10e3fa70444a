from datetime import datetime
from sqlmodel import SQLModel, Field
from typing import Optional

from database.models.timestamps import timestamp_field


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = timestamp_field()
    name: str = Field(max_length=500)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # bcrypt output, never the plaintext
    activated: bool = Field(default=False)
    role: str = Field(default="user", max_length=50)
    version: int = Field(default=1)

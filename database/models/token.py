from datetime import datetime
from enum import Enum
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class TokenScope(str, Enum):
    ACTIVATION = "activation"
    AUTHENTICATION = "authentication"


class Token(SQLModel, table=True):
    """A hashed capability token. The plaintext is never stored."""
    __tablename__ = "tokens"

    hash: str = Field(primary_key=True, max_length=64)  # hex SHA-256 of the plaintext
    user_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    expiry: datetime = Field(index=True, sa_type=DateTime(timezone=True))
    scope: str = Field(index=True, max_length=32)

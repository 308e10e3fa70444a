from datetime import datetime
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON
from typing import Optional

from database.models.timestamps import timestamp_field


class Movie(SQLModel, table=True):
    __tablename__ = "movies"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = timestamp_field()
    title: str = Field(max_length=500)
    year: int
    runtime: int  # minutes
    genres: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    version: int = Field(default=1)

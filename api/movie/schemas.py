from pydantic import BaseModel
from typing import Optional

from api.fields import Runtime
from core.pagination import Metadata


class MovieCreate(BaseModel):
    title: str = ""
    year: int = 0
    runtime: Runtime = 0
    genres: list[str] = []

    class Config:
        extra = "forbid"


class MovieUpdate(BaseModel):
    """Partial update. Fields left out (or null) keep their current value."""
    title: Optional[str] = None
    year: Optional[int] = None
    runtime: Optional[Runtime] = None
    genres: Optional[list[str]] = None

    class Config:
        extra = "forbid"


class MovieResponse(BaseModel):
    id: int
    title: str
    year: int
    runtime: Runtime
    genres: list[str]
    version: int

    class Config:
        from_attributes = True


class MovieListResponse(BaseModel):
    movies: list[MovieResponse]
    metadata: Metadata

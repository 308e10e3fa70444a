from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_field(**kwargs):
    """A timezone-aware column, defaulting to the current UTC time unless a default is given."""
    if "default" not in kwargs:
        kwargs["default_factory"] = utc_now
    return Field(sa_type=DateTime(timezone=True), **kwargs)

from datetime import datetime
from sqlmodel import SQLModel, Field
from typing import Optional

from database.models.timestamps import timestamp_field


class ModuleInfo(SQLModel, table=True):
    """A course module."""
    __tablename__ = "module_info"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()
    module_name: str = Field(index=True, max_length=500)
    module_duration: int  # minutes
    exam_type: str = Field(max_length=255)
    version: int = Field(default=1)

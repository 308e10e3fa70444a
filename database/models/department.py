from datetime import datetime
from sqlmodel import SQLModel, Field
from typing import Optional

from database.models.timestamps import timestamp_field


class DepartmentInfo(SQLModel, table=True):
    __tablename__ = "department_info"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = timestamp_field()
    department_name: str = Field(index=True, max_length=500)
    staff_quantity: int
    department_director: str = Field(max_length=255)
    module_info_id: int = Field(foreign_key="module_info.id", index=True)
    version: int = Field(default=1)

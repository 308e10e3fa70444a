from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from core.pagination import Metadata


class DepartmentCreate(BaseModel):
    department_name: str = ""
    staff_quantity: int = 0
    department_director: str = ""
    module_info_id: int = 0

    class Config:
        extra = "forbid"


class DepartmentUpdate(BaseModel):
    department_name: Optional[str] = None
    staff_quantity: Optional[int] = None
    department_director: Optional[str] = None
    module_info_id: Optional[int] = None

    class Config:
        extra = "forbid"


class DepartmentResponse(BaseModel):
    id: int
    created_at: datetime
    department_name: str
    staff_quantity: int
    department_director: str
    module_info_id: int
    version: int

    class Config:
        from_attributes = True


class DepartmentListResponse(BaseModel):
    departments: list[DepartmentResponse]
    metadata: Metadata

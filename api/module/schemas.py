from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from api.fields import Runtime
from core.pagination import Metadata


class ModuleCreate(BaseModel):
    module_name: str = ""
    module_duration: Runtime = 0
    exam_type: str = ""

    class Config:
        extra = "forbid"


class ModuleUpdate(BaseModel):
    module_name: Optional[str] = None
    module_duration: Optional[Runtime] = None
    exam_type: Optional[str] = None

    class Config:
        extra = "forbid"


class ModuleResponse(BaseModel):
    id: int
    created_at: datetime
    updated_at: datetime
    module_name: str
    module_duration: Runtime
    exam_type: str
    version: int

    class Config:
        from_attributes = True


class ModuleListResponse(BaseModel):
    modules: list[ModuleResponse]
    metadata: Metadata

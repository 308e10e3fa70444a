from typing import Optional

from fastapi import APIRouter, Depends, Path, Response, status
from sqlmodel import Session

from api.module.crud import SORT_COLUMNS, ModuleStore, module_conditions, validate_module
from api.module.schemas import ModuleCreate, ModuleListResponse, ModuleResponse, ModuleUpdate
from api.params import check_expected_version, expected_version, list_filters
from auth.dependencies import AuthenticatedContext, require_permission
from core.pagination import Filters
from core.permissions import Permissions
from core.validator import Validator
from database.connection import get_session
from database.models import ModuleInfo
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=ModuleListResponse)
def list_modules(
    module_name: str = "",
    exam_type: str = "",
    context: AuthenticatedContext = Depends(require_permission(Permissions.MODULES_READ)),
    filters: Filters = Depends(list_filters(*SORT_COLUMNS)),
    session: Session = Depends(get_session),
):
    modules, metadata = ModuleStore(session).get_all(filters, *module_conditions(module_name, exam_type))
    return {"modules": modules, "metadata": metadata}


@router.post("", response_model=ModuleResponse, status_code=status.HTTP_201_CREATED)
def create_module(
    data: ModuleCreate,
    response: Response,
    context: AuthenticatedContext = Depends(require_permission(Permissions.MODULES_WRITE)),
    session: Session = Depends(get_session),
):
    module = ModuleInfo(
        module_name=data.module_name,
        module_duration=data.module_duration,
        exam_type=data.exam_type,
    )

    v = Validator()
    validate_module(v, module)
    v.raise_if_invalid()

    module = ModuleStore(session).insert(module)
    logger.info(f"[Modules] Created module {module.id}")

    response.headers["Location"] = f"/v1/modules/{module.id}"
    return module


@router.get("/{module_id}", response_model=ModuleResponse)
def get_module(
    module_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_permission(Permissions.MODULES_READ)),
    session: Session = Depends(get_session),
):
    return ModuleStore(session).get(module_id)


@router.patch("/{module_id}", response_model=ModuleResponse)
def update_module(
    data: ModuleUpdate,
    module_id: int = Path(...),
    expected: Optional[str] = Depends(expected_version),
    context: AuthenticatedContext = Depends(require_permission(Permissions.MODULES_WRITE)),
    session: Session = Depends(get_session),
):
    store = ModuleStore(session)
    module = store.get(module_id)
    check_expected_version(expected, module)

    for field, value in data.model_dump(exclude_none=True).items():
        setattr(module, field, value)

    v = Validator()
    validate_module(v, module)
    v.raise_if_invalid()

    return store.update(module)


@router.delete("/{module_id}")
def delete_module(
    module_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_permission(Permissions.MODULES_WRITE)),
    session: Session = Depends(get_session),
):
    ModuleStore(session).delete(module_id)
    logger.info(f"[Modules] Deleted module {module_id}")
    return {"message": "module successfully deleted"}

from typing import Optional

from fastapi import APIRouter, Depends, Path, Response, status
from sqlmodel import Session

from api.department.crud import (
    SORT_COLUMNS,
    DepartmentStore,
    department_conditions,
    validate_department,
    validate_module_reference,
)
from api.department.schemas import (
    DepartmentCreate,
    DepartmentListResponse,
    DepartmentResponse,
    DepartmentUpdate,
)
from api.params import check_expected_version, expected_version, list_filters
from auth.dependencies import AuthenticatedContext, require_permission
from core.pagination import Filters
from core.permissions import Permissions
from core.validator import Validator
from database.connection import get_session
from database.models import DepartmentInfo
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=DepartmentListResponse)
def list_departments(
    department_name: str = "",
    context: AuthenticatedContext = Depends(require_permission(Permissions.DEPARTMENTS_READ)),
    filters: Filters = Depends(list_filters(*SORT_COLUMNS)),
    session: Session = Depends(get_session),
):
    departments, metadata = DepartmentStore(session).get_all(filters, *department_conditions(department_name))
    return {"departments": departments, "metadata": metadata}


@router.post("", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
def create_department(
    data: DepartmentCreate,
    response: Response,
    context: AuthenticatedContext = Depends(require_permission(Permissions.DEPARTMENTS_WRITE)),
    session: Session = Depends(get_session),
):
    department = DepartmentInfo(**data.model_dump())

    v = Validator()
    validate_department(v, department)
    validate_module_reference(v, session, department)
    v.raise_if_invalid()

    department = DepartmentStore(session).insert(department)
    logger.info(f"[Departments] Created department {department.id}")

    response.headers["Location"] = f"/v1/departments/{department.id}"
    return department


@router.get("/{department_id}", response_model=DepartmentResponse)
def get_department(
    department_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_permission(Permissions.DEPARTMENTS_READ)),
    session: Session = Depends(get_session),
):
    return DepartmentStore(session).get(department_id)


@router.patch("/{department_id}", response_model=DepartmentResponse)
def update_department(
    data: DepartmentUpdate,
    department_id: int = Path(...),
    expected: Optional[str] = Depends(expected_version),
    context: AuthenticatedContext = Depends(require_permission(Permissions.DEPARTMENTS_WRITE)),
    session: Session = Depends(get_session),
):
    store = DepartmentStore(session)
    department = store.get(department_id)
    check_expected_version(expected, department)

    changes = data.model_dump(exclude_none=True)
    for field, value in changes.items():
        setattr(department, field, value)

    v = Validator()
    validate_department(v, department)
    if "module_info_id" in changes:
        validate_module_reference(v, session, department)
    v.raise_if_invalid()

    return store.update(department)


@router.delete("/{department_id}")
def delete_department(
    department_id: int = Path(...),
    context: AuthenticatedContext = Depends(require_permission(Permissions.DEPARTMENTS_WRITE)),
    session: Session = Depends(get_session),
):
    DepartmentStore(session).delete(department_id)
    logger.info(f"[Departments] Deleted department {department_id}")
    return {"message": "department successfully deleted"}

from sqlmodel import Session

from api.module.crud import ModuleStore
from core.errors import RecordNotFoundError
from core.validator import Validator, byte_length
from database.models import DepartmentInfo
from database.store import VersionedStore

SORT_COLUMNS = ("id", "department_name", "staff_quantity")


class DepartmentStore(VersionedStore[DepartmentInfo]):
    model = DepartmentInfo
    updatable_fields = ("department_name", "staff_quantity", "department_director", "module_info_id")


def validate_department(v: Validator, department: DepartmentInfo) -> None:
    v.check(department.department_name != "", "department_name", "must be provided")
    v.check(
        byte_length(department.department_name) <= 500,
        "department_name",
        "must not be more than 500 bytes long",
    )

    v.check(department.staff_quantity != 0, "staff_quantity", "must be provided")
    v.check(department.staff_quantity > 0, "staff_quantity", "must be a positive integer")

    v.check(department.department_director != "", "department_director", "must be provided")

    v.check(department.module_info_id != 0, "module_info_id", "must be provided")
    v.check(department.module_info_id > 0, "module_info_id", "must be a positive integer")


def validate_module_reference(v: Validator, session: Session, department: DepartmentInfo) -> None:
    """Only look the module up once the reference itself is well-formed."""
    if "module_info_id" in v.errors:
        return
    try:
        ModuleStore(session).get(department.module_info_id)
    except RecordNotFoundError:
        v.add_error("module_info_id", "must reference an existing module")


def department_conditions(department_name: str = "") -> list:
    if not department_name:
        return []
    return [DepartmentInfo.department_name.icontains(department_name, autoescape=True)]

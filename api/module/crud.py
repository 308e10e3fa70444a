from sqlalchemy import func
from sqlmodel import select

from core.errors import ValidationError
from core.validator import Validator, byte_length
from database.models import DepartmentInfo, ModuleInfo
from database.store import VersionedStore

SORT_COLUMNS = ("id", "module_name", "module_duration", "exam_type")


class ModuleStore(VersionedStore[ModuleInfo]):
    model = ModuleInfo
    updatable_fields = ("module_name", "module_duration", "exam_type")
    reference_errors = {"module": "is still referenced by one or more departments"}

    def _delete_dependents(self, id: int) -> None:
        # Departments point at modules; refuse rather than leave them dangling.
        # A department inserted after this check trips the foreign key instead.
        referenced = self.session.exec(
            select(DepartmentInfo.id).where(DepartmentInfo.module_info_id == id).limit(1)
        ).first()
        if referenced is not None:
            self.session.rollback()
            raise ValidationError(self.reference_errors)


def validate_module(v: Validator, module: ModuleInfo) -> None:
    v.check(module.module_name != "", "module_name", "must be provided")
    v.check(byte_length(module.module_name) <= 500, "module_name", "must not be more than 500 bytes long")

    v.check(module.module_duration != 0, "module_duration", "must be provided")
    v.check(module.module_duration > 0, "module_duration", "must be a positive integer")

    v.check(module.exam_type != "", "exam_type", "must be provided")


def module_conditions(module_name: str = "", exam_type: str = "") -> list:
    conditions = []
    if module_name:
        conditions.append(ModuleInfo.module_name.icontains(module_name, autoescape=True))
    if exam_type:
        conditions.append(func.lower(ModuleInfo.exam_type) == exam_type.lower())
    return conditions

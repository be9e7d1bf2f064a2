from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_CLASSES, DEFAULT_DIVISIONS
from ..core.exceptions import ValidationError
from .model import Department
from .repository import DepartmentRepository


class DepartmentService:
    """Use case: maintain each department's classes and divisions.

    Lists only grow; there is no removal operation.
    """

    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def get(self, name: str) -> Optional[Department]:
        if not name:
            return None
        return self._departments.get_by_name(name)

    def list_all(self) -> Sequence[Department]:
        return self._departments.list_all()

    def ensure_department(self, name: str, *, created_by: Optional[str] = None) -> tuple[Department, bool]:
        return self._departments.get_or_create(
            name,
            classes=DEFAULT_CLASSES,
            divisions=DEFAULT_DIVISIONS,
            created_by=created_by,
        )

    def add_department(self, name: str, *, created_by: Optional[str] = None) -> Department:
        name = require_non_empty(name, "Department name")
        if any(d.name.lower() == name.lower() for d in self._departments.list_all()):
            raise ValidationError("This department already exists!")

        dept, created = self.ensure_department(name, created_by=created_by)
        if not created:
            raise ValidationError("This department already exists!")
        return dept

    def add_class(self, department: str, class_name: str) -> Department:
        department = require_non_empty(department, "Department")
        class_name = require_non_empty(class_name, "Class name")

        dept = self._departments.get_by_name(department)
        if dept is None:
            dept, created = self._departments.get_or_create(department, classes=[class_name], divisions=[])
            if created:
                return dept

        if not self._departments.add_class(dept.dept_id, class_name):
            raise ValidationError("This class already exists!")
        return self._departments.get_by_name(department) or dept

    def add_division(self, department: str, division: str) -> Department:
        department = require_non_empty(department, "Department")
        division = require_non_empty(division, "Division")

        dept = self._departments.get_by_name(department)
        if dept is None:
            dept, created = self._departments.get_or_create(department, classes=[], divisions=[division])
            if created:
                return dept

        if not self._departments.add_division(dept.dept_id, division):
            raise ValidationError("This division already exists!")
        return self._departments.get_by_name(department) or dept

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Hod, Lecture, Student, Teacher


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def find_by_credentials(self, name: str, phone: str) -> Optional[Student]:
        raise NotImplementedError

    def find_by_prn(self, prn: str) -> Optional[Student]:
        raise NotImplementedError

    def find_by_phone(self, phone: str) -> Optional[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        phone: str,
        email: str,
        prn: str,
        department: str,
        class_name: str,
        division: str,
    ) -> str:
        raise NotImplementedError

    def list_by_department(self, department: str) -> Sequence[Student]:
        raise NotImplementedError

    def delete_by_id(self, student_id: str) -> bool:
        raise NotImplementedError


class TeacherRepository(Protocol):
    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def find_by_credentials(self, name: str, phone: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        phone: str,
        email: str,
        subject: str,
        department: str,
        assigned_classes: Sequence[str],
        assigned_divisions: Sequence[str],
        added_by: Optional[str],
    ) -> str:
        raise NotImplementedError

    def list_by_department(self, department: str) -> Sequence[Teacher]:
        raise NotImplementedError

    def delete_by_id(self, teacher_id: str) -> bool:
        raise NotImplementedError

    def set_attendance_state(self, teacher_id: str, *, enabled: bool, lecture: Optional[Lecture]) -> None:
        """Write attendance_enabled and current_lecture together."""

        raise NotImplementedError


class HodRepository(Protocol):
    def get_by_id(self, hod_id: str) -> Optional[Hod]:
        raise NotImplementedError

    def find_by_credentials(self, name: str, phone: str) -> Optional[Hod]:
        raise NotImplementedError

    def find_by_phone(self, phone: str) -> Optional[Hod]:
        raise NotImplementedError

    def find_by_employee_id(self, employee_id: str) -> Optional[Hod]:
        raise NotImplementedError

    def find_by_department(self, department: str) -> Optional[Hod]:
        raise NotImplementedError

    def create(self, *, name: str, phone: str, email: str, employee_id: str, department: str) -> str:
        raise NotImplementedError

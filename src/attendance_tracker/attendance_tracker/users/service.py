from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.validators import require_email, require_non_empty, require_phone, require_selection
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..departments.service import DepartmentService
from .model import Student, Teacher
from .repository import HodRepository, StudentRepository, TeacherRepository
from .session import to_session_user

LOGIN_FAILED = "Login failed. Please check your name and phone number."
TEACHER_REGISTRATION_DISABLED = "Teacher self-registration is disabled. Please contact your HOD."


class AuthService:
    """Use case: resolve (role, name, phone) to a session user.

    The phone number is the password. A failed lookup never says which field was wrong.
    """

    def __init__(self, students: StudentRepository, teachers: TeacherRepository, hods: HodRepository):
        self._repos = {
            Role.STUDENT: students,
            Role.TEACHER: teachers,
            Role.HOD: hods,
        }

    def login(self, role: str, name: str, phone: str) -> dict:
        if not role or not (name or "").strip() or not (phone or "").strip():
            raise ValidationError("Please fill in all fields.")
        try:
            role_e = Role(role)
        except ValueError:
            raise ValidationError("Please select a valid role.")

        record = self._repos[role_e].find_by_credentials(name.strip(), phone.strip())
        if record is None:
            raise AuthenticationError(LOGIN_FAILED)
        return to_session_user(record, role_e)


class RegistrationService:
    """Use case: self-registration for students and HODs.

    Uniqueness is checked by queries before the insert, in order; nothing is rolled back
    if a later step fails.
    """

    def __init__(
        self,
        students: StudentRepository,
        hods: HodRepository,
        departments: DepartmentService,
    ):
        self._students = students
        self._hods = hods
        self._departments = departments

    def register(self, role: str, form: Mapping[str, str]) -> str:
        if role == Role.TEACHER.value:
            raise AuthorizationError(TEACHER_REGISTRATION_DISABLED)
        if role == Role.HOD.value:
            return self.register_hod(
                name=form.get("name", ""),
                phone=form.get("phone", ""),
                email=form.get("email", ""),
                employee_id=form.get("employee_id", ""),
                department=form.get("department", ""),
            )
        if role == Role.STUDENT.value:
            return self.register_student(
                name=form.get("name", ""),
                phone=form.get("phone", ""),
                email=form.get("email", ""),
                prn=form.get("prn", ""),
                department=form.get("department", ""),
                class_name=form.get("class_name", ""),
                division=form.get("division", ""),
            )
        raise ValidationError("Please select a valid role.")

    def register_student(
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
        name = require_non_empty(name, "Full name")
        phone = require_phone(phone)
        email = require_email(email)
        prn = require_non_empty(prn, "PRN").upper()
        department = require_non_empty(department, "Department")
        class_name = require_non_empty(class_name, "Class")
        division = require_non_empty(division, "Division")

        if self._students.find_by_prn(prn):
            raise ValidationError("A student with this PRN is already registered.")
        if self._students.find_by_phone(phone):
            raise ValidationError("This phone number is already registered.")

        return self._students.create(
            name=name,
            phone=phone,
            email=email.lower(),
            prn=prn,
            department=department,
            class_name=class_name,
            division=division,
        )

    def register_hod(self, *, name: str, phone: str, email: str, employee_id: str, department: str) -> str:
        name = require_non_empty(name, "Full name")
        phone = require_phone(phone)
        email = require_email(email)
        employee_id = require_non_empty(employee_id, "Employee ID")
        department = require_non_empty(department, "Department")

        if self._hods.find_by_phone(phone):
            raise ValidationError("This phone number is already registered.")
        if self._hods.find_by_employee_id(employee_id):
            raise ValidationError("This employee ID is already registered.")
        if self._hods.find_by_department(department):
            raise ValidationError("An HOD is already registered for this department.")

        hod_id = self._hods.create(
            name=name,
            phone=phone,
            email=email.lower(),
            employee_id=employee_id,
            department=department,
        )
        self._departments.ensure_department(department, created_by=hod_id)
        return hod_id


class StaffService:
    """Use case: an HOD manages the teachers and students of their department."""

    def __init__(self, students: StudentRepository, teachers: TeacherRepository):
        self._students = students
        self._teachers = teachers

    def list_teachers(self, department: str) -> Sequence[Teacher]:
        return self._teachers.list_by_department(department)

    def list_students(self, department: str) -> Sequence[Student]:
        return self._students.list_by_department(department)

    @staticmethod
    def search_students(students: Sequence[Student], term: str) -> list[Student]:
        term = (term or "").strip().lower()
        if not term:
            return list(students)
        return [
            s
            for s in students
            if term in s.name.lower() or term in s.prn.lower() or term in (s.email or "").lower()
        ]

    def add_teacher(
        self,
        *,
        hod: Mapping,
        name: str,
        phone: str,
        email: str,
        subject: str,
        assigned_classes: Sequence[str],
        assigned_divisions: Sequence[str],
    ) -> str:
        name = (name or "").strip()
        phone = (phone or "").strip()
        subject = (subject or "").strip()
        if not name or not phone or not subject:
            raise ValidationError("Please fill in all required fields.")

        classes = require_selection(assigned_classes)
        divisions = require_selection(assigned_divisions)
        if not classes or not divisions:
            raise ValidationError("Please assign at least one class and one division.")

        return self._teachers.create(
            name=name,
            phone=phone,
            email=(email or "").strip(),
            subject=subject,
            department=hod["department"],
            assigned_classes=classes,
            assigned_divisions=divisions,
            added_by=hod.get("id"),
        )

    def delete_teacher(self, *, department: str, teacher_id: str) -> None:
        teacher = self._teachers.get_by_id(teacher_id)
        if not teacher:
            raise NotFoundError("Teacher not found.")
        if teacher.department != department:
            raise AuthorizationError("You can only remove teachers of your department.")
        self._teachers.delete_by_id(teacher_id)

    def delete_student(self, *, department: str, student_id: str) -> Optional[Student]:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found.")
        if student.department != department:
            raise AuthorizationError("You can only remove students of your department.")
        self._students.delete_by_id(student_id)
        return student

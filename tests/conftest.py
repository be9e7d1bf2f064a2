from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from itertools import count
from typing import Optional, Sequence

import pytest

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceRecord, Location
from src.attendance_tracker.attendance_tracker.container import assemble
from src.attendance_tracker.attendance_tracker.departments.model import Department
from src.attendance_tracker.attendance_tracker.users.model import Hod, Lecture, Student, Teacher

_ids = count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}{next(_ids)}"


class InMemoryStudents:
    def __init__(self):
        self.items: dict[str, Student] = {}

    def add(self, student: Student) -> Student:
        self.items[student.student_id] = student
        return student

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self.items.get(student_id)

    def find_by_credentials(self, name: str, phone: str) -> Optional[Student]:
        return next((s for s in self.items.values() if s.name == name and s.phone == phone), None)

    def find_by_prn(self, prn: str) -> Optional[Student]:
        return next((s for s in self.items.values() if s.prn == prn), None)

    def find_by_phone(self, phone: str) -> Optional[Student]:
        return next((s for s in self.items.values() if s.phone == phone), None)

    def create(self, *, name, phone, email, prn, department, class_name, division) -> str:
        student_id = _next_id("S")
        self.items[student_id] = Student(
            student_id=student_id,
            name=name,
            phone=phone,
            email=email,
            prn=prn,
            department=department,
            class_name=class_name,
            division=division,
        )
        return student_id

    def list_by_department(self, department: str) -> Sequence[Student]:
        return [s for s in self.items.values() if s.department == department]

    def delete_by_id(self, student_id: str) -> bool:
        return self.items.pop(student_id, None) is not None


class InMemoryTeachers:
    def __init__(self):
        self.items: dict[str, Teacher] = {}
        self.state_writes: list[tuple[str, bool, Optional[Lecture]]] = []

    def add(self, teacher: Teacher) -> Teacher:
        self.items[teacher.teacher_id] = teacher
        return teacher

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return self.items.get(teacher_id)

    def find_by_credentials(self, name: str, phone: str) -> Optional[Teacher]:
        return next((t for t in self.items.values() if t.name == name and t.phone == phone), None)

    def create(self, *, name, phone, email, subject, department, assigned_classes, assigned_divisions, added_by) -> str:
        teacher_id = _next_id("T")
        self.items[teacher_id] = Teacher(
            teacher_id=teacher_id,
            name=name,
            phone=phone,
            email=email,
            subject=subject,
            department=department,
            assigned_classes=tuple(assigned_classes),
            assigned_divisions=tuple(assigned_divisions),
            added_by=added_by,
        )
        return teacher_id

    def list_by_department(self, department: str) -> Sequence[Teacher]:
        return [t for t in self.items.values() if t.department == department]

    def delete_by_id(self, teacher_id: str) -> bool:
        return self.items.pop(teacher_id, None) is not None

    def set_attendance_state(self, teacher_id: str, *, enabled: bool, lecture: Optional[Lecture]) -> None:
        self.state_writes.append((teacher_id, enabled, lecture))
        if teacher_id in self.items:
            self.items[teacher_id] = replace(self.items[teacher_id], attendance_enabled=enabled, current_lecture=lecture)


class InMemoryHods:
    def __init__(self):
        self.items: dict[str, Hod] = {}

    def add(self, hod: Hod) -> Hod:
        self.items[hod.hod_id] = hod
        return hod

    def _find(self, **kw) -> Optional[Hod]:
        return next((h for h in self.items.values() if all(getattr(h, k) == v for k, v in kw.items())), None)

    def get_by_id(self, hod_id: str) -> Optional[Hod]:
        return self.items.get(hod_id)

    def find_by_credentials(self, name: str, phone: str) -> Optional[Hod]:
        return self._find(name=name, phone=phone)

    def find_by_phone(self, phone: str) -> Optional[Hod]:
        return self._find(phone=phone)

    def find_by_employee_id(self, employee_id: str) -> Optional[Hod]:
        return self._find(employee_id=employee_id)

    def find_by_department(self, department: str) -> Optional[Hod]:
        return self._find(department=department)

    def create(self, *, name, phone, email, employee_id, department) -> str:
        hod_id = _next_id("H")
        self.items[hod_id] = Hod(
            hod_id=hod_id,
            name=name,
            phone=phone,
            email=email,
            employee_id=employee_id,
            department=department,
        )
        return hod_id


class InMemoryDepartments:
    def __init__(self):
        self.items: dict[str, Department] = {}

    def get_by_name(self, name: str) -> Optional[Department]:
        return self.items.get(name)

    def list_all(self) -> Sequence[Department]:
        return sorted(self.items.values(), key=lambda d: d.name)

    def get_or_create(self, name, *, classes, divisions, created_by=None):
        if name in self.items:
            return self.items[name], False
        dept = Department(
            dept_id=_next_id("D"),
            name=name,
            classes=tuple(dict.fromkeys(classes)),
            divisions=tuple(dict.fromkeys(divisions)),
            created_by=created_by,
        )
        self.items[name] = dept
        return dept, True

    def _by_id(self, dept_id: str) -> Department:
        return next(d for d in self.items.values() if d.dept_id == dept_id)

    def add_class(self, dept_id: str, class_name: str) -> bool:
        dept = self._by_id(dept_id)
        if class_name in dept.classes:
            return False
        self.items[dept.name] = replace(dept, classes=dept.classes + (class_name,))
        return True

    def add_division(self, dept_id: str, division: str) -> bool:
        dept = self._by_id(dept_id)
        if division in dept.divisions:
            return False
        self.items[dept.name] = replace(dept, divisions=dept.divisions + (division,))
        return True


class InMemoryAttendance:
    def __init__(self):
        self.items: dict[str, AttendanceRecord] = {}

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self.items[record.record_id] = record
        return record

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        return self.items.get(record_id)

    def create(self, **fields) -> str:
        record_id = _next_id("R")
        self.items[record_id] = AttendanceRecord(record_id=record_id, **fields)
        return record_id

    def list_for_teacher(self, teacher_id: str) -> Sequence[AttendanceRecord]:
        return [r for r in self.items.values() if r.teacher_id == teacher_id]

    def list_for_student(self, student_prn: str) -> Sequence[AttendanceRecord]:
        return [r for r in self.items.values() if r.student_prn == student_prn]

    def exists_for_lecture(self, *, student_prn, teacher_id, lecture_number, lecture_date) -> bool:
        return any(
            r.student_prn == student_prn
            and r.teacher_id == teacher_id
            and r.lecture_number == lecture_number
            and r.lecture_date == lecture_date
            for r in self.items.values()
        )

    def delete_by_id(self, record_id: str) -> bool:
        return self.items.pop(record_id, None) is not None


def make_record(
    *,
    record_id: str,
    prn: str = "2021COMP001",
    name: str = "Priya Patil",
    division: str = "A",
    class_name: str = "SE",
    timestamp: datetime = datetime(2024, 1, 10, 9, 0),
    teacher_id: str = "T123",
    lecture_number: str = "5",
    lecture_date: str = "2024-01-10",
    location: Optional[Location] = None,
) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=record_id,
        student_id=f"id-{prn}",
        student_name=name,
        student_prn=prn,
        department="Computer",
        division=division,
        class_name=class_name,
        timestamp=timestamp,
        location=location,
        teacher_id=teacher_id,
        teacher_name="Rahul Deshmukh",
        subject="Data Structures",
        lecture_number=lecture_number,
        lecture_date=lecture_date,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 15, 0)


@pytest.fixture
def students() -> InMemoryStudents:
    return InMemoryStudents()


@pytest.fixture
def teachers() -> InMemoryTeachers:
    return InMemoryTeachers()


@pytest.fixture
def hods() -> InMemoryHods:
    return InMemoryHods()


@pytest.fixture
def departments() -> InMemoryDepartments:
    return InMemoryDepartments()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def student() -> Student:
    return Student(
        student_id="S-priya",
        name="Priya Patil",
        phone="9000000003",
        email="priya@college.edu",
        prn="2021COMP001",
        department="Computer",
        class_name="SE",
        division="A",
    )


@pytest.fixture
def teacher() -> Teacher:
    return Teacher(
        teacher_id="T123",
        name="Rahul Deshmukh",
        phone="9000000002",
        email="rahul@college.edu",
        subject="Data Structures",
        department="Computer",
        assigned_classes=("SE", "TE"),
        assigned_divisions=("A", "B"),
        attendance_enabled=True,
        current_lecture=Lecture(number="5", date="2024-01-10"),
    )


@pytest.fixture
def hod() -> Hod:
    return Hod(
        hod_id="H-asha",
        name="Asha Kulkarni",
        phone="9000000001",
        email="asha@college.edu",
        employee_id="EMP001",
        department="Computer",
    )


@pytest.fixture
def container(students, teachers, hods, departments, attendance):
    return assemble(
        students_repo=students,
        teachers_repo=teachers,
        hods_repo=hods,
        departments_repo=departments,
        attendance_repo=attendance,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.attendance_tracker.attendance_tracker import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()

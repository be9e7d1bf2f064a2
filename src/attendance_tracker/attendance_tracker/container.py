from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.review import ReviewService
from .attendance.service import CaptureService, SessionControlService
from .core.constants import DEFAULT_EXPECTED_TOTAL_LECTURES
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.repository import DepartmentRepository
from .departments.service import DepartmentService
from .users.mysql_hod_repository import MySQLHodRepository
from .users.mysql_student_repository import MySQLStudentRepository
from .users.mysql_teacher_repository import MySQLTeacherRepository
from .users.repository import HodRepository, StudentRepository, TeacherRepository
from .users.service import AuthService, RegistrationService, StaffService


@dataclass(frozen=True)
class Container:
    students_repo: StudentRepository
    teachers_repo: TeacherRepository
    hods_repo: HodRepository
    departments_repo: DepartmentRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    registration_service: RegistrationService
    staff_service: StaffService
    department_service: DepartmentService
    capture_service: CaptureService
    session_control_service: SessionControlService
    review_service: ReviewService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    students_repo: StudentRepository,
    teachers_repo: TeacherRepository,
    hods_repo: HodRepository,
    departments_repo: DepartmentRepository,
    attendance_repo: AttendanceRepository,
    expected_total: int = DEFAULT_EXPECTED_TOTAL_LECTURES,
    allow_duplicates: bool = True,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    department_service = DepartmentService(departments_repo)

    return Container(
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        hods_repo=hods_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(students_repo, teachers_repo, hods_repo),
        registration_service=RegistrationService(students_repo, hods_repo, department_service),
        staff_service=StaffService(students_repo, teachers_repo),
        department_service=department_service,
        capture_service=CaptureService(
            attendance_repo,
            teachers_repo,
            allow_duplicates=allow_duplicates,
            expected_total=expected_total,
        ),
        session_control_service=SessionControlService(teachers_repo),
        review_service=ReviewService(attendance_repo, expected_total=expected_total),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    expected_total: int = DEFAULT_EXPECTED_TOTAL_LECTURES,
    allow_duplicates: bool = True,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble(
        students_repo=MySQLStudentRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        hods_repo=MySQLHodRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        expected_total=expected_total,
        allow_duplicates=allow_duplicates,
        conn=conn,
    )

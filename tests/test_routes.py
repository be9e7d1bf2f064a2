import html
import json
import re
from dataclasses import replace

import pytest

from src.attendance_tracker.attendance_tracker.core.constants import DEFAULT_REGISTER_REDIRECT_SECONDS, SESSION_KEY
from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.users.session import to_session_user

from conftest import make_record


def _login_as(client, record, role):
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = json.dumps(to_session_user(record, role))


def _session_user(client):
    with client.session_transaction() as sess:
        raw = sess.get(SESSION_KEY)
    return json.loads(raw) if raw else None


def test_index_lists_roles(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert b"Head of Department" in resp.data


def test_login_success_redirects_to_dashboard(client, students, student):
    students.add(student)

    resp = client.post("/login", data={"role": "student", "name": "Priya Patil", "phone": "9000000003"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/student-dashboard")
    assert _session_user(client)["prn"] == "2021COMP001"


def test_login_failure_keeps_user_logged_out(client, students, student):
    students.add(student)

    resp = client.post("/login", data={"role": "student", "name": "Priya Patil", "phone": "0000000000"})

    assert resp.status_code == 200
    assert b"Login failed. Please check your name and phone number." in resp.data
    assert _session_user(client) is None


def test_logout_clears_session(client, student):
    _login_as(client, student, Role.STUDENT)

    resp = client.get("/logout")

    assert resp.headers["Location"].endswith("/")
    assert _session_user(client) is None


def test_dashboard_requires_session(client):
    resp = client.get("/teacher-dashboard")

    assert resp.status_code == 302
    assert "/login" in resp.headers["Location"]


def test_dashboard_rejects_other_role(client, student):
    _login_as(client, student, Role.STUDENT)

    resp = client.get("/hod-dashboard")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")


def test_register_student_renders_done_page(client, students):
    resp = client.post(
        "/register?role=student",
        data={
            "name": "Rohan Kale",
            "phone": "9111111111",
            "email": "rohan@college.edu",
            "prn": "2021comp002",
            "department": "Computer",
            "class_name": "SE",
            "division": "B",
        },
    )

    assert resp.status_code == 200
    assert b"Registration successful" in resp.data
    assert b'content="0;url=' in resp.data
    assert students.find_by_prn("2021COMP002") is not None


def test_register_teacher_is_refused(client, teachers):
    resp = client.post("/register", data={"role": "teacher", "name": "X", "phone": "9111111111"})

    assert b"Teacher self-registration is disabled" in resp.data
    assert teachers.items == {}


def test_attendance_link_without_session_goes_to_student_login(client):
    resp = client.get("/attendance/T123/A")

    assert resp.status_code == 302
    assert "/login?role=student" in resp.headers["Location"]


def test_attendance_link_for_teacher_session_goes_home(client, teacher, teachers):
    teachers.add(teacher)
    _login_as(client, teacher, Role.TEACHER)

    resp = client.get("/attendance/T123/A")

    assert resp.headers["Location"].endswith("/")


def test_mark_attendance_through_link(client, student, teacher, teachers, attendance):
    teachers.add(teacher)
    _login_as(client, student, Role.STUDENT)

    page = client.get("/attendance/T123/A")
    assert b"Lecture 5" in page.data

    resp = client.post("/attendance/T123/A", data={"latitude": "18.52", "longitude": "73.85"})

    assert resp.status_code == 200
    assert b"Attendance Marked" in resp.data
    (record,) = attendance.items.values()
    assert record.lecture_number == "5"
    assert record.location.latitude == pytest.approx(18.52)


def test_mark_attendance_when_disabled(client, student, teacher, teachers, attendance):
    teachers.add(teacher)
    _login_as(client, student, Role.STUDENT)
    teachers.set_attendance_state("T123", enabled=False, lecture=None)

    resp = client.post("/attendance/T123/A", data={})

    assert b"Attendance is currently disabled by the teacher." in resp.data
    assert attendance.items == {}


def test_teacher_enable_requires_lecture_fields(client, teacher, teachers):
    teachers.add(teacher)
    teachers.set_attendance_state("T123", enabled=False, lecture=None)
    _login_as(client, teachers.get_by_id("T123"), Role.TEACHER)

    resp = client.post("/teacher/attendance/enable", data={"lecture_number": "", "lecture_date": "2024-01-11"})

    assert "lecture_form=1" in resp.headers["Location"]
    assert teachers.get_by_id("T123").attendance_enabled is False


def test_teacher_enable_and_disable(client, teacher, teachers):
    teachers.add(teacher)
    _login_as(client, teacher, Role.TEACHER)

    client.post("/teacher/attendance/enable", data={"lecture_number": "7", "lecture_date": "2024-01-12"})
    assert teachers.get_by_id("T123").current_lecture.number == "7"

    client.post("/teacher/attendance/disable")
    assert teachers.get_by_id("T123").current_lecture is None


def test_teacher_dashboard_filters_by_division(client, teacher, teachers, attendance):
    teachers.add(teacher)
    attendance.add(make_record(record_id="r1", name="Priya Patil", division="A"))
    attendance.add(make_record(record_id="r2", prn="2021COMP002", name="Rohan Kale", division="B"))
    _login_as(client, teacher, Role.TEACHER)

    resp = client.get("/teacher-dashboard?division=A")

    assert resp.status_code == 200
    assert b"Priya Patil" in resp.data
    assert b"Rohan Kale" not in resp.data
    assert b"/attendance/T123/A" in resp.data


def test_teacher_csv_export(client, teacher, teachers, attendance):
    teachers.add(teacher)
    attendance.add(make_record(record_id="r1"))
    _login_as(client, teacher, Role.TEACHER)

    resp = client.get("/teacher/attendance.csv")

    assert resp.mimetype == "text/csv"
    assert "attachment" in resp.headers["Content-Disposition"]
    assert "2021COMP001" in resp.data.decode("utf-8-sig")


def test_teacher_link_qr_png(client, teacher, teachers):
    teachers.add(teacher)
    _login_as(client, teacher, Role.TEACHER)

    resp = client.get("/teacher/links/A/qr.png")

    assert resp.mimetype == "image/png"
    assert resp.data[:8] == b"\x89PNG\r\n\x1a\n"


def test_hod_adds_class(client, hod, hods, departments, container):
    hods.add(hod)
    container.department_service.ensure_department("Computer")
    _login_as(client, hod, Role.HOD)

    resp = client.post("/hod/classes", data={"class_name": "FE"})

    assert resp.headers["Location"].split("?")[0].endswith("/hod-dashboard")
    assert departments.get_by_name("Computer").classes[-1] == "FE"

    page = client.get("/hod-dashboard")
    assert b"Class FE added successfully!" in page.data


def test_hod_duplicate_class_flashes_error(client, hod, container):
    container.department_service.ensure_department("Computer")
    _login_as(client, hod, Role.HOD)

    client.post("/hod/classes", data={"class_name": "SE"})
    page = client.get("/hod-dashboard")

    assert b"This class already exists!" in page.data


def test_hod_adds_teacher(client, hod, teachers, container):
    container.department_service.ensure_department("Computer")
    _login_as(client, hod, Role.HOD)

    client.post(
        "/hod/teachers",
        data={
            "name": "Neha Shah",
            "phone": "9000000010",
            "subject": "Networks",
            "assigned_classes": ["TE"],
            "assigned_divisions": ["A", "B"],
        },
    )

    (saved,) = teachers.items.values()
    assert saved.department == "Computer"
    assert saved.assigned_divisions == ("A", "B")


def test_hod_dashboard_keeps_student_name_out_of_inline_script(client, hod, students, student, container):
    container.department_service.ensure_department("Computer")
    students.add(replace(student, name="x');alert(document.domain);('"))
    _login_as(client, hod, Role.HOD)

    page = client.get("/hod-dashboard").data.decode()

    handlers = [html.unescape(h) for h in re.findall(r'onsubmit="([^"]*)"', page)]
    assert handlers
    assert not any("alert(document.domain)" in h for h in handlers)
    assert 'data-name="x&#39;);alert(document.domain);(&#39;"' in page


def test_location_warning_only_after_successful_mark(client, student, teacher, teachers):
    teachers.add(teacher)
    _login_as(client, student, Role.STUDENT)

    marked = client.post("/attendance/T123/A", data={})
    assert b"Attendance was marked without location" in marked.data

    teachers.set_attendance_state("T123", enabled=False, lecture=None)
    rejected = client.post("/attendance/T123/A", data={})
    assert b"Attendance is currently disabled by the teacher." in rejected.data
    assert b"without location" not in rejected.data


def test_register_redirect_delay_falls_back_to_default(container, monkeypatch):
    import config.testing
    from src.attendance_tracker.attendance_tracker import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.delattr(config.testing, "REGISTER_REDIRECT_SECONDS")

    app = create_app(container=container)

    assert app.config["REGISTER_REDIRECT_SECONDS"] == DEFAULT_REGISTER_REDIRECT_SECONDS

from __future__ import annotations

import traceback

from flask import Flask, flash, redirect, render_template, request, url_for

from ..core.constants import DEFAULT_REGISTER_REDIRECT_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, DomainError, ValidationError
from ..container import Container
from .session import current_context

DASHBOARD_ENDPOINTS = {
    Role.STUDENT: "student_dashboard",
    Role.TEACHER: "teacher_dashboard",
    Role.HOD: "hod_dashboard",
}


def _selected_role(value: str | None, default: str = "") -> str:
    try:
        return Role(value).value
    except ValueError:
        return default


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    def index():
        return render_template("role_select.html", roles=list(Role), current_user=current_context().current())

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        role = _selected_role(request.values.get("role"))

        if request.method == "POST":
            name = request.form.get("name", "")
            phone = request.form.get("phone", "")
            try:
                user = container.auth_service.login(role, name, phone)
                current_context().set_user(user)
                return redirect(url_for(DASHBOARD_ENDPOINTS[Role(user["role"])]))
            except (ValidationError, AuthenticationError) as e:
                flash(str(e), "danger")
            except Exception:
                traceback.print_exc()
                flash("Login failed. Please try again later.", "danger")

            return render_template("login.html", role=role, name=name, phone=phone, roles=list(Role))

        return render_template("login.html", role=role, name="", phone="", roles=list(Role))

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_view():
        role = _selected_role(request.values.get("role"), default=Role.STUDENT.value)

        try:
            departments = container.department_service.list_all()
        except Exception as e:
            traceback.print_exc()
            flash(f"Failed to load departments: {e}", "danger")
            departments = []

        if request.method == "POST":
            try:
                container.registration_service.register(role, request.form)
                return render_template(
                    "register_done.html",
                    role=role,
                    delay=int(app.config.get("REGISTER_REDIRECT_SECONDS", DEFAULT_REGISTER_REDIRECT_SECONDS)),
                )
            except DomainError as e:
                flash(str(e), "danger")
            except Exception as e:
                traceback.print_exc()
                flash(str(e), "danger")

        return render_template("register.html", role=role, form=request.form, departments=departments)

    @app.route("/logout", endpoint="logout")
    def logout():
        current_context().clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("index"))

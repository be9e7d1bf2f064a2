"""Session handling.

The logged-in user is one serialized object kept under a fixed key in the
durable client store (Flask's signed cookie session) with an in-memory copy for
the current request. SessionContext.set_user is the only writer of both.
"""
from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date, datetime
from functools import wraps
from typing import Any, MutableMapping, Optional

from flask import g, redirect, session, url_for

from ..core.constants import SESSION_KEY
from ..core.enums import Role

_ID_FIELDS = ("student_id", "teacher_id", "hod_id")


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Unsupported session value: {type(value)!r}")


def to_session_user(record: Any, role: Role) -> dict:
    """Stored fields of a user record plus its id and the role used to log in."""
    data = asdict(record)
    for field in _ID_FIELDS:
        if field in data:
            data["id"] = data.pop(field)
    data["role"] = role.value
    # Round-trip so the in-memory copy matches what the durable copy decodes to.
    return json.loads(json.dumps(data, default=_json_default))


class SessionContext:
    def __init__(self, store: MutableMapping[str, Any]):
        self._store = store
        self._user: Optional[dict] = None
        self._loaded = False

    def _read(self) -> Optional[dict]:
        raw = self._store.get(SESSION_KEY)
        if raw is None:
            return None
        try:
            user = json.loads(raw)
        except (TypeError, ValueError):
            user = None
        if not isinstance(user, dict) or not user.get("id") or not user.get("role"):
            self._store.pop(SESSION_KEY, None)
            return None
        return user

    def current(self) -> Optional[dict]:
        if not self._loaded:
            self._user = self._read()
            self._loaded = True
        return self._user

    @property
    def role(self) -> Optional[Role]:
        user = self.current()
        if not user:
            return None
        try:
            return Role(user["role"])
        except ValueError:
            return None

    def set_user(self, user: Optional[dict]) -> None:
        if user is None:
            self._store.pop(SESSION_KEY, None)
        else:
            self._store[SESSION_KEY] = json.dumps(user, default=_json_default)
        self._user = user
        self._loaded = True

    def clear(self) -> None:
        self.set_user(None)


def current_context() -> SessionContext:
    if "session_ctx" not in g:
        g.session_ctx = SessionContext(session)
    return g.session_ctx


def role_required(role: Role):
    """Missing session -> login page, other role -> role selection."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            ctx = current_context()
            if ctx.current() is None:
                return redirect(url_for("login"))
            if ctx.role != role:
                return redirect(url_for("index"))
            return view(*args, **kwargs)

        return wrapper

    return decorator

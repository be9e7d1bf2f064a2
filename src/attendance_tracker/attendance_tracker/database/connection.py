from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector

DEFAULT_DATABASE = "department_attendance"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str = DEFAULT_DATABASE

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings DB_CONFIG dict; missing keys fall back to a local root login."""
        return cls(
            host=str(values.get("host", "localhost")),
            port=int(values.get("port", 3306)),
            user=str(values.get("user", "root")),
            password=str(values.get("password", "")),
            database=str(values.get("database", DEFAULT_DATABASE)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict:
        kwargs = dict(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            # Schema tables are utf8mb4.
            charset="utf8mb4",
            collation="utf8mb4_unicode_ci",
        )
        if with_database:
            kwargs["database"] = self.database
        return kwargs

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Process-wide connection factory.

    Each repository call opens a short-lived connection; there is no pool.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(**self.config.connect_kwargs())

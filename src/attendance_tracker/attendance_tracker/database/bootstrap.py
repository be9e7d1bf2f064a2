"""Schema and demo-data bootstrap for the MySQL store.

Used by create_app (AUTO_INIT_DB / AUTO_SEED_DB) and by scripts/init_db.py and scripts/seed_db.py.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Mapping

import mysql.connector

from .connection import DBConfig


def _connect(config: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(use_pure=True, **config.connect_kwargs(with_database=with_database))


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_sql_file(db_config: Mapping, path: str | Path) -> int:
    config = DBConfig.from_mapping(db_config)
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))

    executed = 0
    conn = _connect(config)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            executed += 1
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
    return executed


def ensure_database_exists(db_config: Mapping) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> int:
    ensure_database_exists(db_config)
    return _run_sql_file(db_config, schema_path)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> int:
    return _run_sql_file(db_config, seed_path)


def list_tables(db_config: Mapping) -> list[str]:
    conn = _connect(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

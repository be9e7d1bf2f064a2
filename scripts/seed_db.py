from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.database.bootstrap import apply_seed_sql
from src.attendance_tracker.attendance_tracker.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    print(
        "OK: Seeded demo department, HOD, teacher and student -> "
        f"{DBConfig.from_mapping(db_config).describe()}"
    )


if __name__ == "__main__":
    main()

"""Apply database/schema.sql to the configured MySQL server and check the tables."""
from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.class_attendance.class_attendance.database.bootstrap import apply_schema, list_tables

REQUIRED_TABLES = ("classes", "students", "attendance")


def main() -> int:
    settings = load_settings()
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    missing = sorted(set(REQUIRED_TABLES) - set(list_tables(db_config)))
    if missing:
        print(f"ERROR: {target} is missing tables: {', '.join(missing)}")
        return 1

    print(f"OK: {target} has {', '.join(REQUIRED_TABLES)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

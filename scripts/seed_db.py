"""Load a demo class roster into the configured backend (json or mysql)."""
from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.class_attendance.class_attendance.container import build_container
from src.class_attendance.class_attendance.core.exceptions import DuplicateError

DEMO_CLASSES = {
    "Quran Recitation": [
        ("101", "Ali Hussain", "40010001", "A"),
        ("102", "Fatema Zahra", "40010002", "A"),
        ("103", "Hasan Mohammed", "40010003", "B"),
    ],
    "Arabic Language": [
        ("201", "Zainab Qasim", "40020001", None),
        ("202", "Murtaza Yusuf", "40020002", None),
    ],
}


def main() -> None:
    settings = load_settings()
    json_path = Path(settings.JSON_STORE_PATH)
    if not json_path.is_absolute():
        json_path = REPO_ROOT / json_path

    container = build_container(
        backend=settings.STORAGE_BACKEND,
        json_path=json_path,
        db_config=dict(settings.DB_CONFIG),
        max_classes=settings.MAX_CLASSES,
    )

    existing = {c.name: c for c in container.class_service.list_classes()}
    added = 0
    for class_name, roster in DEMO_CLASSES.items():
        school_class = existing.get(class_name) or container.class_service.add(class_name)
        for tr_no, name, its_no, division in roster:
            try:
                container.student_service.add(
                    tr_no=tr_no,
                    name=name,
                    its_no=its_no,
                    class_id=school_class.class_id,
                    division=division,
                )
                added += 1
            except DuplicateError:
                continue

    print(f"OK: Seeded {settings.STORAGE_BACKEND} backend ({added} new students)")


if __name__ == "__main__":
    main()

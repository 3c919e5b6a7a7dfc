"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

from pathlib import Path

from config import load_settings

from src.class_attendance.class_attendance.container import build_container


def main():
    settings = load_settings()
    container = build_container(
        backend=settings.STORAGE_BACKEND,
        json_path=Path(settings.JSON_STORE_PATH),
        db_config=settings.DB_CONFIG,
    )

    for school_class in container.class_service.list_classes():
        dates = container.attendance_service.get_dates_by_class(school_class.class_id)
        print(school_class.name, "->", list(dates)[:5])


if __name__ == "__main__":
    main()

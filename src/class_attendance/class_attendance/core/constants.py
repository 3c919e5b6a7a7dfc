"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MAX_CLASSES = 2

CLASSES_KEY = "nadi_classes"
STUDENTS_KEY = "nadi_students"
ATTENDANCE_KEY = "nadi_attendance"

CSV_HEADER = ["Date", "Class", "Division", "Subject", "Student Name", "Tr. No.", "ITS No.", "Status"]
DATE_CSV_HEADER = ["Tr. No.", "Name", "Division", "Subject", "Status"]

STUDENT_SORT_FIELDS = ("trNo", "name", "itsNo", "division", "subject")

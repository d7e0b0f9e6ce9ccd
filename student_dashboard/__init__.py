"""Student dashboard: import, validate, and browse student spreadsheets."""
from student_dashboard.core import (
    AddPolicy,
    StudentRecord,
    ValidationResult,
    configure_logging,
    load_settings,
    validate_student,
)
from student_dashboard.export import build_mailto_link, write_excel
from student_dashboard.ingestion import normalize_row, read_student_rows
from student_dashboard.review import DashboardSession, StudentStore, ViewQuery

__all__ = [
    "AddPolicy",
    "DashboardSession",
    "StudentRecord",
    "StudentStore",
    "ValidationResult",
    "ViewQuery",
    "build_mailto_link",
    "configure_logging",
    "load_settings",
    "normalize_row",
    "read_student_rows",
    "validate_student",
    "write_excel",
]

"""Core building blocks for the student dashboard package."""
from student_dashboard.core.config import AddPolicy, DashboardSettings, load_settings
from student_dashboard.core.logging import configure_logging
from student_dashboard.core.models import StudentRecord, ValidationResult
from student_dashboard.core.quality import POPULAR_SKILLS, validate_student
from student_dashboard.core.storage import LocalKeyValueStore, load_collections, save_collections

__all__ = [
    "AddPolicy",
    "DashboardSettings",
    "load_settings",
    "configure_logging",
    "StudentRecord",
    "ValidationResult",
    "POPULAR_SKILLS",
    "validate_student",
    "LocalKeyValueStore",
    "load_collections",
    "save_collections",
]

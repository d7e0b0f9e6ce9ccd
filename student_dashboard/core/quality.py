"""Field rules that decide whether a student record is valid."""
from __future__ import annotations

import math
import re
from typing import Any, Dict

from student_dashboard.core.models import StudentRecord, ValidationResult

POPULAR_SKILLS = (
    "web dev",
    "cybersecurity",
    "dsa",
    "cloud",
    "ai/ml",
    "blockchain",
    "robotics",
    "app dev",
)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
NON_ENGLISH_PATTERN = re.compile(r"[^\x00-\x7F]")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def _check_text(value: Any, empty_message: str, english_message: str) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return empty_message
    if NON_ENGLISH_PATTERN.search(value):
        return english_message
    return None


def has_popular_skill(interest: str) -> bool:
    lowered = interest.lower()
    return any(skill in lowered for skill in POPULAR_SKILLS)


def validate_student(record: StudentRecord) -> ValidationResult:
    """Run every field rule and collect all failures.

    The function is pure: it neither mutates ``record`` nor depends on
    anything but its fields, so import, manual add, and edits share it.
    """

    errors: Dict[str, str] = {}

    name_error = _check_text(record.name, "Name cannot be empty.", "Name must be in English.")
    if name_error:
        errors["name"] = name_error

    branch_error = _check_text(
        record.branch, "Branch cannot be empty.", "Branch name must be in English."
    )
    if branch_error:
        errors["branch"] = branch_error

    if not isinstance(record.email, str) or not EMAIL_PATTERN.fullmatch(record.email):
        errors["email"] = "Invalid email format."

    if not _is_number(record.gpa) or not 0 <= record.gpa <= 4:
        errors["gpa"] = "GPA must be a number between 0 and 4."

    if not _is_number(record.year) or not 1 <= record.year <= 5:
        errors["year"] = "Year must be a number between 1 and 5."

    # An empty interests list passes; only a list with no recognised skill fails.
    if record.interests and not any(has_popular_skill(item) for item in record.interests):
        errors["interests"] = (
            "Interests must include at least one popular skill (e.g., Web Dev, AI/ML)."
        )

    return ValidationResult(is_valid=not errors, errors=errors)

"""Spreadsheet ingestion and row normalization."""
from student_dashboard.ingestion.loader import read_student_file, read_student_rows
from student_dashboard.ingestion.normalizer import FIELD_ALIASES, normalize_form, normalize_row

__all__ = [
    "FIELD_ALIASES",
    "normalize_form",
    "normalize_row",
    "read_student_file",
    "read_student_rows",
]

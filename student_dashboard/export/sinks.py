"""Spreadsheet export of the selected or filtered students."""
from __future__ import annotations

from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Iterable, List, Set

from openpyxl import Workbook

from student_dashboard.core.errors import NothingToExportError
from student_dashboard.core.models import StudentRecord
from student_dashboard.core.utils import format_number

EXPORT_HEADERS = [
    "Name",
    "Branch",
    "Year",
    "Email",
    "Phone",
    "GPA",
    "Projects",
    "Skills",
    "Status",
    "Interests",
]
SHEET_TITLE = "Students"


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def export_filename(today: date | None = None) -> str:
    return f"students_export_{(today or date.today()).isoformat()}.xlsx"


def select_export_records(
    valid: Iterable[StudentRecord],
    filtered: Iterable[StudentRecord],
    selected_ids: Set[int],
) -> List[StudentRecord]:
    """Pick the selected students if any are selected, else the filtered ones."""

    if selected_ids:
        chosen = [record for record in valid if record.id in selected_ids]
    else:
        chosen = list(filtered)
    if not chosen:
        raise NothingToExportError("No data to export")
    return chosen


def record_to_export_row(record: StudentRecord) -> Dict[str, Any]:
    return {
        "Name": record.name,
        "Branch": record.branch,
        "Year": record.year,
        "Email": record.email,
        "Phone": record.phone,
        "GPA": record.gpa,
        "Projects": record.projects,
        "Skills": record.skills,
        "Status": record.status,
        "Interests": ", ".join(format_number(item) for item in record.interests),
    }


def records_to_export_rows(records: Iterable[StudentRecord]) -> List[Dict[str, Any]]:
    return [record_to_export_row(record) for record in records]


def _build_workbook(rows: List[Dict[str, Any]]) -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    sheet.append(EXPORT_HEADERS)
    for row in rows:
        sheet.append([row.get(header, "") for header in EXPORT_HEADERS])
    return workbook


def write_excel(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write rows to an Excel workbook using openpyxl."""

    rows = list(rows)
    if not rows:
        raise NothingToExportError("No data to export")

    ensure_output_dir(output_path)
    _build_workbook(rows).save(output_path)


def workbook_bytes(rows: Iterable[Dict[str, Any]]) -> bytes:
    """Serialize rows to ``.xlsx`` bytes for download buttons."""

    rows = list(rows)
    if not rows:
        raise NothingToExportError("No data to export")

    buffer = BytesIO()
    _build_workbook(rows).save(buffer)
    return buffer.getvalue()

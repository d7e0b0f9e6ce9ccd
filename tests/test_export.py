"""Spreadsheet export and bulk email composition."""
from datetime import date
from io import BytesIO

import pytest
from openpyxl import load_workbook

from student_dashboard.core.errors import NoRecipientsError, NothingToExportError
from student_dashboard.core.models import StudentRecord
from student_dashboard.export.messaging import build_mailto_link
from student_dashboard.export.sinks import (
    EXPORT_HEADERS,
    export_filename,
    records_to_export_rows,
    select_export_records,
    workbook_bytes,
    write_excel,
)


@pytest.fixture
def students() -> list[StudentRecord]:
    return [
        StudentRecord(id=1, name="Ann", branch="CS", year=1, email="ann@uni.edu", gpa=3.6, interests=["AI/ML", "Hiking"]),
        StudentRecord(id=2, name="Bob", branch="ECE", year=3, email="", gpa=2.9),
    ]


def test_export_filename_uses_iso_date():
    assert export_filename(date(2024, 3, 9)) == "students_export_2024-03-09.xlsx"


def test_selection_wins_over_filtered(students):
    chosen = select_export_records(students, students[:1], {2})
    assert [record.id for record in chosen] == [2]


def test_filtered_used_without_selection(students):
    chosen = select_export_records(students, students[:1], set())
    assert [record.id for record in chosen] == [1]


def test_nothing_to_export_is_refused(students):
    with pytest.raises(NothingToExportError, match="No data to export"):
        select_export_records(students, [], set())


def test_export_rows_follow_headers(students):
    rows = records_to_export_rows(students)
    assert list(rows[0]) == EXPORT_HEADERS
    assert rows[0]["Interests"] == "AI/ML, Hiking"


def test_write_excel_creates_students_sheet(tmp_path, students):
    target = tmp_path / "out" / "students.xlsx"
    write_excel(records_to_export_rows(students), target)

    sheet = load_workbook(target).active
    assert sheet.title == "Students"
    assert [cell.value for cell in sheet[1]] == EXPORT_HEADERS
    assert sheet.max_row == 3


def test_write_excel_refuses_empty(tmp_path):
    target = tmp_path / "students.xlsx"
    with pytest.raises(NothingToExportError):
        write_excel([], target)
    assert not target.exists()


def test_workbook_bytes_round_trips_names(students):
    sheet = load_workbook(BytesIO(workbook_bytes(records_to_export_rows(students)))).active
    assert sheet["A2"].value == "Ann"


def test_mailto_link_skips_unusable_addresses(students):
    link = build_mailto_link(students, "Hello all", "Meet at 5 & bring notes")
    assert link == "mailto:ann@uni.edu?subject=Hello%20all&body=Meet%20at%205%20%26%20bring%20notes"


def test_mailto_link_requires_subject_and_body(students):
    with pytest.raises(ValueError, match="subject and message"):
        build_mailto_link(students, "", "body")


def test_mailto_link_without_recipients(students):
    with pytest.raises(NoRecipientsError):
        build_mailto_link(students[1:], "Hi", "There")

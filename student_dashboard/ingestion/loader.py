"""Read the first sheet of an uploaded spreadsheet into raw row mappings."""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

import xlrd
from openpyxl import load_workbook

from student_dashboard.core.errors import SpreadsheetReadError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS = (".xlsx", ".xls")


def check_extension(filename: str) -> None:
    if Path(filename).suffix.lower() not in ACCEPTED_EXTENSIONS:
        raise UnsupportedFileTypeError("Please select a valid Excel file (.xlsx or .xls)")


def _rows_from_values(rows: Iterable[Sequence[Any]]) -> List[Dict[str, Any]]:
    rows = iter(rows)
    header = next(rows, None)
    if header is None:
        return []
    keys = [str(cell).strip() if cell not in (None, "") else None for cell in header]

    records: List[Dict[str, Any]] = []
    for values in rows:
        row = {
            key: value
            for key, value in zip(keys, values)
            if key and value is not None and value != ""
        }
        if row:
            records.append(row)
    return records


def _read_xlsx(data: bytes) -> List[Dict[str, Any]]:
    workbook = load_workbook(BytesIO(data), read_only=True, data_only=True)
    try:
        return _rows_from_values(workbook.worksheets[0].iter_rows(values_only=True))
    finally:
        workbook.close()


def _read_xls(data: bytes) -> List[Dict[str, Any]]:
    sheet = xlrd.open_workbook(file_contents=data).sheet_by_index(0)
    return _rows_from_values(sheet.row_values(index) for index in range(sheet.nrows))


def read_student_rows(data: bytes, filename: str) -> List[Dict[str, Any]]:
    """Parse spreadsheet bytes into one mapping per non-blank data row.

    ``.xlsx`` goes through openpyxl and legacy ``.xls`` through xlrd. Empty
    cells are left out of each mapping so the normalizer treats them as
    missing fields.
    """

    check_extension(filename)
    reader = _read_xls if Path(filename).suffix.lower() == ".xls" else _read_xlsx
    try:
        rows = reader(data)
    except Exception as exc:
        logger.exception("Failed to read spreadsheet %s", filename)
        raise SpreadsheetReadError(
            "Error reading file. Please make sure it's a valid Excel file."
        ) from exc

    logger.info("Read %d rows from %s", len(rows), filename)
    return rows


def read_student_file(path: Path) -> List[Dict[str, Any]]:
    """Convenience wrapper for spreadsheets on disk (used by the CLI)."""

    check_extension(path.name)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SpreadsheetReadError(f"Could not read {path}: {exc}") from exc
    return read_student_rows(data, path.name)

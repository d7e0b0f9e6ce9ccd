"""Export destinations for student records."""
from student_dashboard.export.messaging import build_mailto_link
from student_dashboard.export.sinks import EXPORT_HEADERS, export_filename, workbook_bytes, write_excel

__all__ = ["EXPORT_HEADERS", "build_mailto_link", "export_filename", "workbook_bytes", "write_excel"]

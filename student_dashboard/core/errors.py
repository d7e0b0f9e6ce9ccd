"""Exceptions raised when an operation cannot be carried out at all.

Field-level validation problems are never raised; they travel as error maps
on :class:`~student_dashboard.core.models.ValidationResult`.
"""


class DashboardError(Exception):
    """Base class for dashboard failures."""


class ImportRejectedError(DashboardError):
    """The uploaded file could not be processed; no state was changed."""


class UnsupportedFileTypeError(ImportRejectedError):
    """The file name does not carry a spreadsheet extension."""


class SpreadsheetReadError(ImportRejectedError):
    """The spreadsheet bytes could not be parsed."""


class NothingToExportError(DashboardError):
    """Neither a selection nor any filtered rows are available for export."""


class NoRecipientsError(DashboardError):
    """None of the selected students has a usable email address."""


class StudentNotFoundError(DashboardError, KeyError):
    """No record with the requested id exists in either collection."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class DuplicateStudentIdError(DashboardError):
    """Two records in the union of both collections would share an id."""

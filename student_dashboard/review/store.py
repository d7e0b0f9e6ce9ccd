"""Dual-collection store that keeps valid and quarantined students disjoint."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from student_dashboard.core.config import AddPolicy
from student_dashboard.core.errors import DuplicateStudentIdError, StudentNotFoundError
from student_dashboard.core.models import StudentRecord, ValidationResult
from student_dashboard.core.quality import validate_student
from student_dashboard.ingestion.normalizer import normalize_form, normalize_row

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"name", "branch", "year", "email", "phone", "gpa", "projects", "skills", "status", "interests"}
)


class Reconciliation(str, Enum):
    """Where a record ended up after an add, edit, or promotion."""

    ADDED = "added"
    REJECTED = "rejected"
    QUARANTINED = "quarantined"
    UPDATED = "updated"
    DEMOTED = "demoted"
    PROMOTED = "promoted"
    STILL_INVALID = "still_invalid"
    ALREADY_VALID = "already_valid"


@dataclass(frozen=True)
class ImportSummary:
    valid_count: int
    invalid_count: int

    @property
    def total(self) -> int:
        return self.valid_count + self.invalid_count


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a single-record operation."""

    record: StudentRecord
    validation: ValidationResult
    outcome: Reconciliation

    @property
    def errors(self) -> Dict[str, str]:
        return self.validation.errors


class StudentStore:
    """Owns the valid and invalid collections, keyed by student id.

    Every mutation goes through the methods below so ids stay unique across
    both collections and only invalid records carry ``validation_errors``.
    """

    def __init__(
        self,
        valid: Iterable[StudentRecord] = (),
        invalid: Iterable[StudentRecord] = (),
        add_policy: AddPolicy = AddPolicy.REJECT,
    ) -> None:
        self.add_policy = add_policy
        self._valid: Dict[int, StudentRecord] = {}
        self._invalid: Dict[int, StudentRecord] = {}
        for record in valid:
            self._insert(replace(record, validation_errors=None), self._valid)
        for record in invalid:
            self._insert(record, self._invalid)

    @property
    def valid(self) -> List[StudentRecord]:
        return list(self._valid.values())

    @property
    def invalid(self) -> List[StudentRecord]:
        return list(self._invalid.values())

    def all_records(self) -> List[StudentRecord]:
        return self.valid + self.invalid

    def get(self, student_id: int) -> StudentRecord:
        record = self._valid.get(student_id) or self._invalid.get(student_id)
        if record is None:
            raise StudentNotFoundError(f"No student with id {student_id}")
        return record

    def __contains__(self, student_id: object) -> bool:
        return student_id in self._valid or student_id in self._invalid

    def __len__(self) -> int:
        return len(self._valid) + len(self._invalid)

    def _insert(self, record: StudentRecord, target: Dict[int, StudentRecord]) -> None:
        if record.id in self:
            raise DuplicateStudentIdError(f"Student id {record.id} is already in use")
        target[record.id] = record

    def _place(self, record: StudentRecord, result: ValidationResult) -> None:
        if result.is_valid:
            self._insert(replace(record, validation_errors=None), self._valid)
        else:
            self._insert(replace(record, validation_errors=dict(result.errors)), self._invalid)

    def insert_from_import(
        self, rows: Iterable[Mapping[str, Any]], rng: Optional[random.Random] = None
    ) -> ImportSummary:
        """Replace both collections with the normalized, validated rows."""

        rng = rng or random.Random()
        self._valid.clear()
        self._invalid.clear()

        for index, row in enumerate(rows):
            record = normalize_row(row, index, rng=rng)
            result = validate_student(record)
            if not result.is_valid:
                logger.warning(
                    "Student %s (%s) failed validation: %s",
                    record.id,
                    record.name,
                    "; ".join(f"{key}: {message}" for key, message in result.errors.items()),
                )
            self._place(record, result)

        summary = ImportSummary(len(self._valid), len(self._invalid))
        logger.info(
            "Imported %d students (%d valid, %d invalid)",
            summary.total,
            summary.valid_count,
            summary.invalid_count,
        )
        return summary

    def next_id(self) -> int:
        return len(self._valid) + len(self._invalid) + 1

    def add_new(self, candidate_fields: Mapping[str, Any]) -> StoreResult:
        """Validate a manually entered student and insert it per ``add_policy``.

        Under :attr:`AddPolicy.REJECT` an invalid candidate is not stored and
        the caller gets the error map back. Under :attr:`AddPolicy.QUARANTINE`
        it lands in the invalid collection like an imported row would.
        """

        values = {
            "name": "",
            "branch": "",
            "year": None,
            "email": "",
            "gpa": None,
            "interests": "",
            "phone": "",
            "projects": 0,
            "skills": "",
            "status": "Active",
        }
        values.update(candidate_fields)
        _reject_unknown_fields(values)
        record = StudentRecord(id=self.next_id(), **normalize_form(values))
        result = validate_student(record)

        if result.is_valid:
            self._place(record, result)
            logger.info("Added student %s (%s)", record.id, record.name)
            return StoreResult(self._valid[record.id], result, Reconciliation.ADDED)

        if self.add_policy is AddPolicy.QUARANTINE:
            self._place(record, result)
            logger.warning("Quarantined new student %s: %s", record.id, sorted(result.errors))
            return StoreResult(self._invalid[record.id], result, Reconciliation.QUARANTINED)

        logger.info("Rejected new student %r: %s", record.name, sorted(result.errors))
        return StoreResult(record, result, Reconciliation.REJECTED)

    def update_by_id(self, student_id: int, new_fields: Mapping[str, Any]) -> StoreResult:
        """Merge ``new_fields`` into a record and move it to match its verdict."""

        _reject_unknown_fields(new_fields)
        was_invalid = student_id in self._invalid
        existing = self.get(student_id)
        updated = replace(existing, **normalize_form(new_fields))
        result = validate_student(updated)

        if was_invalid and result.is_valid:
            del self._invalid[student_id]
            self._place(updated, result)
            outcome = Reconciliation.PROMOTED
        elif was_invalid:
            self._invalid[student_id] = replace(updated, validation_errors=dict(result.errors))
            outcome = Reconciliation.STILL_INVALID
        elif result.is_valid:
            self._valid[student_id] = replace(updated, validation_errors=None)
            outcome = Reconciliation.UPDATED
        else:
            del self._valid[student_id]
            self._place(updated, result)
            outcome = Reconciliation.DEMOTED

        logger.info("Updated student %s: %s", student_id, outcome.value)
        return StoreResult(self.get(student_id), result, outcome)

    def promote_if_valid(self, student_id: int) -> StoreResult:
        """Move an invalid record to the valid collection if it now passes."""

        record = self.get(student_id)
        result = validate_student(record)

        if student_id in self._valid:
            return StoreResult(record, result, Reconciliation.ALREADY_VALID)
        if not result.is_valid:
            return StoreResult(record, result, Reconciliation.STILL_INVALID)

        del self._invalid[student_id]
        self._place(record, result)
        logger.info("Promoted student %s to the valid collection", student_id)
        return StoreResult(self._valid[student_id], result, Reconciliation.PROMOTED)


def _reject_unknown_fields(fields: Iterable[str]) -> None:
    unknown = sorted(set(fields) - EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Fields cannot be edited: {', '.join(unknown)}")

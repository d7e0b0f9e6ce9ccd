"""Dashboard session: the single owner of store, view state, and selection.

UI handlers (Streamlit callbacks, CLI commands) call these methods and render
whatever comes back. Every mutation is followed by a best-effort save.
"""
from __future__ import annotations

import logging
import random
from dataclasses import replace
from datetime import date
from typing import Any, List, Mapping, Optional, Set, Tuple

from student_dashboard.core.config import DashboardSettings
from student_dashboard.core.errors import DuplicateStudentIdError
from student_dashboard.core.models import StudentRecord
from student_dashboard.core.storage import LocalKeyValueStore, load_collections, save_collections
from student_dashboard.export.messaging import build_mailto_link
from student_dashboard.export.sinks import (
    export_filename,
    records_to_export_rows,
    select_export_records,
    workbook_bytes,
)
from student_dashboard.ingestion.loader import read_student_rows
from student_dashboard.review.query import (
    DashboardStats,
    ViewQuery,
    apply_filters,
    compute_stats,
    toggle_select_all,
    toggle_selection,
    toggle_sort,
)
from student_dashboard.review.store import ImportSummary, Reconciliation, StoreResult, StudentStore

logger = logging.getLogger(__name__)


class DashboardSession:
    def __init__(
        self,
        store: StudentStore,
        kv: Optional[LocalKeyValueStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.kv = kv
        self.rng = rng or random.Random()
        self.query = ViewQuery()
        self.selected: Set[int] = set()

    @classmethod
    def from_settings(cls, settings: DashboardSettings) -> "DashboardSession":
        """Restore the persisted collections named by ``settings``."""

        kv = LocalKeyValueStore(settings.store_path)
        valid, invalid = load_collections(kv)
        try:
            store = StudentStore(valid, invalid, add_policy=settings.add_policy)
        except DuplicateStudentIdError:
            logger.exception("Saved students in %s reuse an id; starting empty", kv.path)
            store = StudentStore(add_policy=settings.add_policy)
        return cls(store, kv=kv, rng=random.Random(settings.seed))

    def persist(self) -> bool:
        if self.kv is None:
            return True
        return save_collections(self.kv, self.store.valid, self.store.invalid)

    def import_file(self, data: bytes, filename: str) -> ImportSummary:
        """Replace all students with the rows of an uploaded spreadsheet.

        Unsupported or unreadable files raise before any state changes.
        """

        rows = read_student_rows(data, filename)
        summary = self.store.insert_from_import(rows, rng=self.rng)
        self.selected.clear()
        self.persist()
        return summary

    def add_student(self, fields: Mapping[str, Any]) -> StoreResult:
        result = self.store.add_new(fields)
        if result.outcome is not Reconciliation.REJECTED:
            self.persist()
        return result

    def update_student(self, student_id: int, fields: Mapping[str, Any]) -> StoreResult:
        result = self.store.update_by_id(student_id, fields)
        if result.outcome is Reconciliation.DEMOTED:
            self.selected.discard(student_id)
        self.persist()
        return result

    def promote(self, student_id: int) -> StoreResult:
        result = self.store.promote_if_valid(student_id)
        if result.outcome is Reconciliation.PROMOTED:
            self.persist()
        return result

    def set_query(self, **changes: Any) -> ViewQuery:
        self.query = replace(self.query, **changes)
        return self.query

    def sort_by(self, key: str) -> ViewQuery:
        self.query = toggle_sort(self.query, key)
        return self.query

    def clear_filters(self) -> ViewQuery:
        self.query = ViewQuery()
        return self.query

    def filtered(self) -> List[StudentRecord]:
        return apply_filters(self.store.valid, self.query)

    def stats(self) -> DashboardStats:
        return compute_stats(self.store.valid)

    def toggle_selection(self, student_id: int) -> Set[int]:
        self.selected = toggle_selection(self.selected, student_id)
        return self.selected

    def toggle_select_all(self) -> Set[int]:
        self.selected = toggle_select_all(self.selected, self.filtered())
        return self.selected

    def selected_records(self) -> List[StudentRecord]:
        return [record for record in self.store.valid if record.id in self.selected]

    def export(self, today: date | None = None) -> Tuple[str, bytes]:
        """Return the export file name and workbook bytes."""

        records = select_export_records(self.store.valid, self.filtered(), self.selected)
        logger.info("Exporting %d students", len(records))
        return export_filename(today), workbook_bytes(records_to_export_rows(records))

    def compose_email(self, subject: str, body: str) -> str:
        link = build_mailto_link(self.selected_records(), subject, body)
        self.selected.clear()
        return link

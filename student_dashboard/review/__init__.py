"""Record store, view projections, and the dashboard session."""
from student_dashboard.review.query import ViewQuery, apply_filters, compute_stats, toggle_sort
from student_dashboard.review.store import (
    ImportSummary,
    Reconciliation,
    StoreResult,
    StudentStore,
)
from student_dashboard.review.workflow import DashboardSession

__all__ = [
    "DashboardSession",
    "ImportSummary",
    "Reconciliation",
    "StoreResult",
    "StudentStore",
    "ViewQuery",
    "apply_filters",
    "compute_stats",
    "toggle_sort",
]

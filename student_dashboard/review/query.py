"""Read-only projections of the valid collection for table, card, and chart views."""
from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Set

from student_dashboard.core.models import StudentRecord
from student_dashboard.core.quality import has_popular_skill
from student_dashboard.core.utils import format_number

SORTABLE_FIELDS = ("id", "name", "branch", "year", "email", "gpa", "projects", "status")
GPA_BUCKETS = ("0-2", "2-3", "3-3.5", "3.5-4")
NO_POPULAR_SKILLS = "No popular IT skills listed"


@dataclass(frozen=True)
class ViewQuery:
    """Search, filter, and sort state; the default instance means "no filters"."""

    search: str = ""
    branch: str = ""
    year: str = ""
    sort_key: Optional[str] = None
    direction: str = "asc"


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    average_gpa: float
    total_branches: int
    active_students: int


def toggle_sort(query: ViewQuery, key: str) -> ViewQuery:
    """Sort by ``key``, flipping direction when it is already the sort key."""

    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by {key!r}")
    direction = "desc" if query.sort_key == key and query.direction == "asc" else "asc"
    return replace(query, sort_key=key, direction=direction)


def _searchable_text(record: StudentRecord) -> List[str]:
    values: List[Any] = [
        record.id,
        record.name,
        record.branch,
        record.year,
        record.email,
        ",".join(record.interests),
        record.phone,
        record.gpa,
        record.projects,
        record.skills,
        record.status,
    ]
    return [format_number(value).lower() for value in values]


def matches(record: StudentRecord, query: ViewQuery) -> bool:
    term = query.search.strip().lower()
    if term and not any(term in value for value in _searchable_text(record)):
        return False
    if query.branch and record.branch != query.branch:
        return False
    if query.year and format_number(record.year) != query.year:
        return False
    return True


def apply_filters(records: Iterable[StudentRecord], query: ViewQuery) -> List[StudentRecord]:
    """Return the records matching ``query``, sorted when a sort key is set."""

    filtered = [record for record in records if matches(record, query)]
    if query.sort_key:
        filtered.sort(
            key=lambda record: getattr(record, query.sort_key),
            reverse=query.direction == "desc",
        )
    return filtered


def filter_options(records: Iterable[StudentRecord]) -> Dict[str, List[str]]:
    """Distinct branches and years available for the filter dropdowns."""

    records = list(records)
    branches = sorted({record.branch for record in records})
    years = sorted({record.year for record in records})
    return {"branches": branches, "years": [format_number(year) for year in years]}


def compute_stats(records: Iterable[StudentRecord]) -> DashboardStats:
    records = list(records)
    if not records:
        return DashboardStats(0, 0.0, 0, 0)
    return DashboardStats(
        total_students=len(records),
        average_gpa=round(sum(record.gpa for record in records) / len(records), 2),
        total_branches=len({record.branch for record in records}),
        active_students=sum(1 for record in records if record.status == "Active"),
    )


def branch_distribution(records: Iterable[StudentRecord]) -> Dict[str, int]:
    return dict(Counter(record.branch for record in records))


def gpa_distribution(records: Iterable[StudentRecord]) -> Dict[str, int]:
    buckets = dict.fromkeys(GPA_BUCKETS, 0)
    for record in records:
        if record.gpa < 2:
            buckets["0-2"] += 1
        elif record.gpa < 3:
            buckets["2-3"] += 1
        elif record.gpa < 3.5:
            buckets["3-3.5"] += 1
        else:
            buckets["3.5-4"] += 1
    return buckets


def year_distribution(records: Iterable[StudentRecord]) -> Dict[str, int]:
    return dict(Counter(f"Year {format_number(record.year)}" for record in records))


def gpa_class(gpa: float) -> str:
    if gpa >= 3.5:
        return "excellent"
    if gpa >= 3.0:
        return "good"
    return "needs-improvement"


def popular_interests(record: StudentRecord) -> str:
    """Interests naming a recognised skill, joined for the card view."""

    found = [interest for interest in record.interests if has_popular_skill(interest)]
    return ", ".join(found) if found else NO_POPULAR_SKILLS


def highlight_text(text: str, term: str) -> str:
    """Bold every case-insensitive occurrence of ``term`` in ``text`` as markdown."""

    term = term.strip()
    if not term:
        return text
    pattern = re.compile(re.escape(term), re.IGNORECASE)
    return pattern.sub(lambda match: f"**{match.group(0)}**", text)


def all_selected(selected: Set[int], filtered: Iterable[StudentRecord]) -> bool:
    filtered = list(filtered)
    return bool(filtered) and all(record.id in selected for record in filtered)


def toggle_selection(selected: Set[int], student_id: int) -> Set[int]:
    return selected - {student_id} if student_id in selected else selected | {student_id}


def toggle_select_all(selected: Set[int], filtered: Iterable[StudentRecord]) -> Set[int]:
    """Deselect the filtered rows if all are selected, otherwise select them all."""

    filtered = list(filtered)
    ids = {record.id for record in filtered}
    if all_selected(selected, filtered):
        return selected - ids
    return selected | ids

"""Turn loosely typed spreadsheet rows into canonical student records."""
from __future__ import annotations

import math
import random
import re
from typing import Any, Dict, List, Mapping, Optional

from student_dashboard.core.models import StudentRecord
from student_dashboard.core.utils import format_number

# Accepted header variants per canonical field, tried in order.
FIELD_ALIASES: Dict[str, tuple[str, ...]] = {
    "name": ("Name", "name"),
    "branch": ("Branch", "branch"),
    "year": ("Year", "year"),
    "email": ("Email", "email"),
    "phone": ("Phone", "phone"),
    "gpa": ("GPA", "gpa"),
    "projects": ("Projects", "projects"),
    "skills": ("Skills", "skills"),
    "status": ("Status", "status"),
    "interests": ("Interests", "interests"),
}

YEAR_WORDS = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
}

TEXT_FIELDS = ("name", "branch", "email", "phone", "skills", "status")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def resolve_field(row: Mapping[str, Any], field: str) -> Any:
    """Return the raw value for ``field`` or ``None`` when the row lacks it."""

    for alias in FIELD_ALIASES[field]:
        if row.get(alias) is not None:
            return row[alias]

    wanted = {alias.casefold() for alias in FIELD_ALIASES[field]}
    for key, value in row.items():
        if isinstance(key, str) and key.strip().casefold() in wanted and value is not None:
            return value
    return None


def parse_interests(raw: Any) -> List[str]:
    """Split comma separated interests, trimming and dropping empty tokens."""

    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        tokens = [str(token) for token in raw]
    else:
        tokens = format_number(raw).split(",")
    return [token.strip() for token in tokens if token.strip()]


def normalize_year(raw: Any) -> float:
    """Map year words or numbers to an int; unparseable text becomes NaN."""

    if isinstance(raw, bool):
        return math.nan
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        return raw

    text = str(raw).lower()
    if text.strip() in YEAR_WORDS:
        return YEAR_WORDS[text.strip()]
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else math.nan


def normalize_gpa(raw: Any) -> float:
    """Read the leading number of a GPA ("3.5 GPA", "3.6/4"); otherwise NaN."""

    if isinstance(raw, bool):
        return math.nan
    if isinstance(raw, (int, float)):
        return float(raw)
    match = _LEADING_FLOAT.match(str(raw))
    return float(match.group(1)) if match else math.nan


def normalize_projects(raw: Any) -> int:
    try:
        return max(int(float(format_number(raw).strip())), 0)
    except (ValueError, OverflowError):
        return 0


def _text(raw: Any) -> str:
    return raw if isinstance(raw, str) else format_number(raw)


def normalize_row(
    row: Mapping[str, Any], index: int, rng: Optional[random.Random] = None
) -> StudentRecord:
    """Build a canonical record from one spreadsheet row.

    Missing fields are defaulted instead of rejected. ``gpa`` and ``projects``
    defaults are synthetic values drawn from ``rng`` (a fresh
    :class:`random.Random` when omitted), not measured data.
    """

    rng = rng or random.Random()

    name = resolve_field(row, "name")
    branch = resolve_field(row, "branch")
    year = resolve_field(row, "year")
    gpa = resolve_field(row, "gpa")
    projects = resolve_field(row, "projects")
    status = resolve_field(row, "status")

    return StudentRecord(
        id=index + 1,
        name=_text(name) if name is not None else f"Student {index + 1}",
        branch=_text(branch) if branch is not None else "Unknown",
        year=normalize_year(year) if year is not None else 1,
        email=_text(resolve_field(row, "email") or ""),
        phone=_text(resolve_field(row, "phone") or ""),
        gpa=normalize_gpa(gpa) if gpa is not None else round(rng.uniform(2.0, 4.0), 2),
        projects=normalize_projects(projects) if projects is not None else rng.randint(0, 4),
        skills=_text(resolve_field(row, "skills") or ""),
        status=_text(status) if status is not None else "Active",
        interests=parse_interests(resolve_field(row, "interests")),
    )


def normalize_form(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Coerce form input (add or edit) into typed record fields.

    Only keys present in ``fields`` are returned, so the result can be merged
    over an existing record. Unknown keys are passed through untouched for
    the caller to reject.
    """

    coerced: Dict[str, Any] = {}
    for key, value in fields.items():
        if key == "year":
            coerced[key] = normalize_year(value) if value not in (None, "") else math.nan
        elif key == "gpa":
            coerced[key] = normalize_gpa(value) if value not in (None, "") else math.nan
        elif key == "interests":
            coerced[key] = parse_interests(value)
        elif key == "projects":
            coerced[key] = normalize_projects(value) if value not in (None, "") else 0
        elif key in TEXT_FIELDS:
            coerced[key] = "" if value is None else _text(value)
        else:
            coerced[key] = value
    return coerced

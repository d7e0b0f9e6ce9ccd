"""Data models for student records flowing through the dashboard."""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional


@dataclass
class StudentRecord:
    """A canonical student record, valid or quarantined.

    ``year`` and ``gpa`` hold ``float("nan")`` when the source value could not
    be parsed; the validator reports those instead of the normalizer.
    """

    id: int
    name: str = ""
    branch: str = ""
    year: int = 1
    email: str = ""
    phone: str = ""
    gpa: float = math.nan
    projects: int = 0
    skills: str = ""
    status: str = "Active"
    interests: List[str] = field(default_factory=list)
    validation_errors: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary suitable for JSON persistence."""

        payload = asdict(self)
        if not self.validation_errors:
            payload.pop("validation_errors")
        return payload

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "StudentRecord":
        """Rebuild a record from :meth:`to_dict` output, ignoring unknown keys."""

        known = {item.name for item in fields(cls)}
        values = {key: value for key, value in payload.items() if key in known}
        if "interests" in values:
            values["interests"] = list(values["interests"] or [])
        if values.get("gpa") is None:
            values["gpa"] = math.nan
        if values.get("year") is None:
            values["year"] = math.nan
        return cls(**values)


@dataclass(frozen=True)
class ValidationResult:
    """Verdict for one record plus the message for each failing field."""

    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)

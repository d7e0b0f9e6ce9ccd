"""Compose a mailto link addressed to a group of selected students."""
from __future__ import annotations

from typing import Iterable, List
from urllib.parse import quote

from student_dashboard.core.errors import NoRecipientsError
from student_dashboard.core.models import StudentRecord

# Characters encodeURIComponent leaves as-is.
_URI_SAFE = "-_.!~*'()"


def recipient_emails(records: Iterable[StudentRecord]) -> List[str]:
    return [record.email for record in records if record.email and "@" in record.email]


def build_mailto_link(records: Iterable[StudentRecord], subject: str, body: str) -> str:
    """Return a ``mailto:`` URL for the host mail handler; delivery is not tracked."""

    if not subject or not body:
        raise ValueError("Please fill in both subject and message fields.")

    emails = recipient_emails(records)
    if not emails:
        raise NoRecipientsError("No valid email addresses found for selected students.")

    return (
        f"mailto:{','.join(emails)}"
        f"?subject={quote(subject, safe=_URI_SAFE)}&body={quote(body, safe=_URI_SAFE)}"
    )

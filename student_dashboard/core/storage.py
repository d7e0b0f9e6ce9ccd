"""Local key-value persistence for the valid and invalid collections."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from student_dashboard.core.models import StudentRecord

logger = logging.getLogger(__name__)

VALID_KEY = "students"
INVALID_KEY = "incorrectStudents"


class LocalKeyValueStore:
    """A single JSON file holding string values under string keys."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"{self.path} does not hold a key-value mapping")
        return payload

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        payload = self._read_all()
        payload[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


def save_collections(
    kv: LocalKeyValueStore, valid: List[StudentRecord], invalid: List[StudentRecord]
) -> bool:
    """Persist both collections; failures are logged and reported as ``False``."""

    try:
        kv.set(VALID_KEY, json.dumps([record.to_dict() for record in valid]))
        kv.set(INVALID_KEY, json.dumps([record.to_dict() for record in invalid]))
    except (OSError, TypeError, ValueError):
        logger.exception("Could not save students to %s", kv.path)
        return False
    return True


def load_collections(kv: LocalKeyValueStore) -> Tuple[List[StudentRecord], List[StudentRecord]]:
    """Load both collections, falling back to empty ones when unreadable."""

    try:
        valid_raw = kv.get(VALID_KEY)
        invalid_raw = kv.get(INVALID_KEY)
        valid = [StudentRecord.from_dict(item) for item in json.loads(valid_raw or "[]")]
        invalid = [StudentRecord.from_dict(item) for item in json.loads(invalid_raw or "[]")]
    except (OSError, TypeError, ValueError):
        logger.exception("Could not load students from %s", kv.path)
        return [], []
    logger.info("Loaded %d valid and %d invalid students from %s", len(valid), len(invalid), kv.path)
    return valid, invalid

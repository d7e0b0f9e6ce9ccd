"""Pytest configuration to make the local package importable without installation."""
import random
import sys
from io import BytesIO
from pathlib import Path

import pytest
from openpyxl import Workbook

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from student_dashboard.core.storage import LocalKeyValueStore
from student_dashboard.review.store import StudentStore


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from real env files and saved students."""

    monkeypatch.setenv("STUDENT_DASHBOARD_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.setenv("STUDENT_DASHBOARD_STORE", str(tmp_path / "store.json"))
    monkeypatch.delenv("STUDENT_ADD_POLICY", raising=False)
    monkeypatch.delenv("STUDENT_DASHBOARD_SEED", raising=False)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def sample_rows() -> list[dict]:
    """Three spreadsheet rows: two valid students and one broken entry."""

    return [
        {
            "Name": "Ann",
            "Branch": "CS",
            "Year": "first",
            "Email": "ann@uni.edu",
            "GPA": "3.6",
            "Interests": "AI/ML, Hiking",
        },
        {
            "name": "Bob",
            "branch": "ECE",
            "year": 3,
            "email": "bob@uni.edu",
            "gpa": 2.9,
            "interests": "Robotics",
            "status": "Inactive",
        },
        {"Name": "", "Branch": "CS", "Year": "9", "Email": "bad", "GPA": "5"},
    ]


@pytest.fixture
def populated_store(sample_rows: list[dict], rng: random.Random) -> StudentStore:
    store = StudentStore()
    store.insert_from_import(sample_rows, rng=rng)
    return store


@pytest.fixture
def kv_store(tmp_path: Path) -> LocalKeyValueStore:
    return LocalKeyValueStore(tmp_path / "kv" / "store.json")


def build_workbook_bytes(header: list, rows: list[list]) -> bytes:
    """Build an in-memory .xlsx with one header row followed by ``rows``."""

    workbook = Workbook()
    sheet = workbook.active
    sheet.append(header)
    for row in rows:
        sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def student_workbook() -> bytes:
    return build_workbook_bytes(
        ["Name", "Branch", "Year", "Email", "GPA", "Interests", "Phone"],
        [
            ["Ann", "CS", "first", "ann@uni.edu", 3.6, "AI/ML, Hiking", 5551234],
            [None, None, None, None, None, None, None],
            ["Zoë", "CS", 2, "zoe@uni.edu", 3.1, "Cloud", None],
        ],
    )

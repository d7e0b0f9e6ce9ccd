"""Runtime settings resolved from Streamlit secrets, env files, and env vars."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from student_dashboard.core.utils import get_config_value, load_env_file

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("secrets/dashboard.env")
DEFAULT_STORE_PATH = Path(".student_dashboard/store.json")


class AddPolicy(str, Enum):
    """What happens to a manually added student that fails validation."""

    REJECT = "reject"
    QUARANTINE = "quarantine"


@dataclass(frozen=True)
class DashboardSettings:
    store_path: Path = DEFAULT_STORE_PATH
    add_policy: AddPolicy = AddPolicy.REJECT
    seed: Optional[int] = None
    log_level: str = "INFO"


def _parse_policy(raw: str) -> AddPolicy:
    try:
        return AddPolicy(raw.strip().lower())
    except ValueError:
        logger.warning("Unknown STUDENT_ADD_POLICY %r; falling back to 'reject'", raw)
        return AddPolicy.REJECT


def _parse_seed(raw: str) -> Optional[int]:
    if not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer STUDENT_DASHBOARD_SEED %r", raw)
        return None


def load_settings() -> DashboardSettings:
    """Resolve dashboard settings, loading the optional env file first."""

    env_path = Path(os.getenv("STUDENT_DASHBOARD_ENV_FILE", DEFAULT_ENV_FILE))
    load_env_file(env_path)

    return DashboardSettings(
        store_path=Path(get_config_value("STUDENT_DASHBOARD_STORE", str(DEFAULT_STORE_PATH))),
        add_policy=_parse_policy(get_config_value("STUDENT_ADD_POLICY", AddPolicy.REJECT.value)),
        seed=_parse_seed(get_config_value("STUDENT_DASHBOARD_SEED", "")),
        log_level=get_config_value("LOG_LEVEL", "INFO").upper(),
    )

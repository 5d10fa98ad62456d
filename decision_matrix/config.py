import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_DATA_DIR = "data"
DEFAULT_REPORTS_DIR = "reports"
DEFAULT_COLLECTION = "decisions"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    data_dir: str = DEFAULT_DATA_DIR
    reports_dir: str = DEFAULT_REPORTS_DIR
    collection: str = DEFAULT_COLLECTION
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Reads DECISION_MATRIX_* variables; blank values fall back to the defaults.
    """
    env = os.environ if environ is None else environ

    def get(key: str, default: str) -> str:
        value = (env.get(key) or "").strip()
        return value or default

    return Settings(
        data_dir=get("DECISION_MATRIX_DATA_DIR", DEFAULT_DATA_DIR),
        reports_dir=get("DECISION_MATRIX_REPORTS_DIR", DEFAULT_REPORTS_DIR),
        collection=get("DECISION_MATRIX_COLLECTION", DEFAULT_COLLECTION),
        log_level=get("DECISION_MATRIX_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )

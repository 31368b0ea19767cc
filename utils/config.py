"""Configuration loader.

Loads settings from environment variables and optional local `.env`.
Every value has a default, so a bare environment yields a file-only run.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

from dotenv import load_dotenv

DEFAULT_JOBS_API_URL = "https://remotive.com/api/remote-jobs"
DEFAULT_JOBS_CATEGORY = "software-dev"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


@dataclass(frozen=True, slots=True)
class Settings:
    """Project settings passed explicitly into the pipeline and its sinks."""

    gcp_project_id: Optional[str] = None  # None -> ambient credential discovery
    bigquery_dataset_id: str = "remote_jobs_dataset"
    bigquery_table_id: str = "jobs"
    bigquery_location: str = "US"
    warehouse_load_enabled: bool = False
    jobs_api_url: str = DEFAULT_JOBS_API_URL
    jobs_category: str = DEFAULT_JOBS_CATEGORY
    snapshot_path: str = "remote_jobs.json"
    temp_jobs_path: str = "temp_jobs.json"

    @staticmethod
    def load(*, env_file: str = ".env") -> "Settings":
        """Load settings from environment; raises ValueError on malformed values."""
        load_dotenv(env_file, override=False)

        gcp_project_id = os.getenv("GCP_PROJECT_ID", "").strip()
        temp_jobs_path = os.getenv("TEMP_JOBS_PATH", "").strip() or "temp_jobs.json"

        if not temp_jobs_path.endswith(".json"):
            raise ValueError(f"TEMP_JOBS_PATH must end with .json: {temp_jobs_path!r}")

        return Settings(
            gcp_project_id=gcp_project_id or None,
            bigquery_dataset_id=os.getenv("BIGQUERY_DATASET_ID", "").strip() or "remote_jobs_dataset",
            bigquery_table_id=os.getenv("BIGQUERY_TABLE_ID", "").strip() or "jobs",
            bigquery_location=os.getenv("BIGQUERY_LOCATION", "").strip() or "US",
            warehouse_load_enabled=_parse_bool(
                "WAREHOUSE_LOAD_ENABLED", os.getenv("WAREHOUSE_LOAD_ENABLED", "false")
            ),
            jobs_api_url=os.getenv("JOBS_API_URL", "").strip() or DEFAULT_JOBS_API_URL,
            jobs_category=os.getenv("JOBS_CATEGORY", "").strip() or DEFAULT_JOBS_CATEGORY,
            snapshot_path=os.getenv("SNAPSHOT_PATH", "").strip() or "remote_jobs.json",
            temp_jobs_path=temp_jobs_path,
        )

"""Shared fixtures: sample records and in-memory stand-ins for aiohttp and BigQuery."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import pytest
from google.cloud.exceptions import Conflict, NotFound
from google.cloud import bigquery


SAMPLE_JOB: Dict[str, Any] = {
    "id": 1,
    "url": "u",
    "title": "t",
    "company_name": "c",
    "category": "software-dev",
    "tags": ["remote"],
    "job_type": "full_time",
    "publication_date": "2024-01-01T00:00:00Z",
    "candidate_required_location": "Worldwide",
    "salary": "",
    "description": "d",
}


@pytest.fixture
def sample_job() -> Dict[str, Any]:
    return dict(SAMPLE_JOB)


@pytest.fixture
def api_job(sample_job) -> Dict[str, Any]:
    """A record as the API returns it, with extra fields the table does not keep."""
    return {**sample_job, "company_logo": "https://remotive.com/logo.png", "company_logo_url": None}


# =============================================================================
# aiohttp stand-ins
# =============================================================================

class FakeResponse:
    def __init__(self, status: int = 200, payload: Any = None) -> None:
        self.status = status
        self._payload = payload

    async def json(self, content_type: Optional[str] = "application/json") -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


class FakeSession:
    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[BaseException] = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> FakeResponse:
        self.calls.append({"url": url, "params": params})
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def fake_response_factory():
    return FakeResponse


# =============================================================================
# BigQuery stand-in
# =============================================================================

class FakeLoadJob:
    def __init__(self, output_rows: int, errors: Optional[List[Dict[str, Any]]] = None,
                 result_error: Optional[Exception] = None) -> None:
        self.job_id = "job_fake_001"
        self.output_rows = output_rows
        self.errors = errors
        self._result_error = result_error

    def result(self) -> "FakeLoadJob":
        if self._result_error is not None:
            raise self._result_error
        return self


class FakeBigQueryClient:
    """Just enough of `bigquery.Client` for bootstrapping and NDJSON loads."""

    def __init__(self, project: str = "test-project") -> None:
        self.project = project
        self.datasets: Dict[str, bigquery.Dataset] = {}
        self.tables: Dict[str, bigquery.Table] = {}
        self.rows: Dict[str, List[Dict[str, Any]]] = {}
        self.create_dataset_calls = 0
        self.create_table_calls = 0
        self.load_configs: List[bigquery.LoadJobConfig] = []
        self.load_locations: List[Optional[str]] = []
        self.job_errors: Optional[List[Dict[str, Any]]] = None
        self.result_error: Optional[Exception] = None
        self.get_dataset_error: Optional[Exception] = None
        # Simulates another run creating resources between our lookup and create
        self.lookups_miss = False

    def get_dataset(self, ref: str) -> bigquery.Dataset:
        if self.get_dataset_error is not None:
            raise self.get_dataset_error
        if self.lookups_miss or ref not in self.datasets:
            raise NotFound(f"Dataset {ref} not found")
        return self.datasets[ref]

    def create_dataset(self, dataset: bigquery.Dataset, exists_ok: bool = False) -> bigquery.Dataset:
        self.create_dataset_calls += 1
        ref = f"{dataset.project}.{dataset.dataset_id}"
        if ref in self.datasets and not exists_ok:
            raise Conflict(f"Already Exists: Dataset {ref}")
        return self.datasets.setdefault(ref, dataset)

    def get_table(self, ref: str) -> bigquery.Table:
        if self.lookups_miss or ref not in self.tables:
            raise NotFound(f"Table {ref} not found")
        return self.tables[ref]

    def create_table(self, table: bigquery.Table, exists_ok: bool = False) -> bigquery.Table:
        self.create_table_calls += 1
        ref = f"{table.project}.{table.dataset_id}.{table.table_id}"
        if ref in self.tables and not exists_ok:
            raise Conflict(f"Already Exists: Table {ref}")
        self.rows.setdefault(ref, [])
        return self.tables.setdefault(ref, table)

    def load_table_from_file(self, file_obj, destination: str, job_config=None, location=None) -> FakeLoadJob:
        self.load_configs.append(job_config)
        self.load_locations.append(location)
        loaded = [json.loads(line) for line in file_obj.read().decode("utf-8").splitlines() if line.strip()]

        if self.result_error is None and not self.job_errors:
            if job_config.write_disposition == bigquery.WriteDisposition.WRITE_TRUNCATE:
                self.rows[destination] = loaded
            else:
                self.rows.setdefault(destination, []).extend(loaded)

        return FakeLoadJob(len(loaded), errors=self.job_errors, result_error=self.result_error)


@pytest.fixture
def fake_bq() -> FakeBigQueryClient:
    return FakeBigQueryClient()


@pytest.fixture
def restore_root_logging():
    """Put the root logger back after tests that call configure_logging()."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)

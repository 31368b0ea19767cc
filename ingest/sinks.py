"""Pipeline sinks: where projected rows end up.

- `FileSink`: pretty JSON snapshot that stays on disk
- `WarehouseSink`: transient JSON + NDJSON files, bulk-loaded into BigQuery
  and removed afterwards

A sink raises on write or bootstrap errors and returns False when the load
itself fails; the pipeline turns both into a failed run.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, List, Sequence

from google.cloud import bigquery

from ingest.projector import Row, identity, project_jobs
from ingest.writer import ndjson_path_for, remove_file, write_json, write_ndjson
from utils.bq import bq_client, ensure_dataset, ensure_table, load_ndjson_to_bq
from utils.config import Settings
from utils.schemas import remote_jobs_schema

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    """Run states, in the order a run passes through them."""

    IDLE = "idle"
    FETCHING = "fetching"
    PROJECTING = "projecting"
    WRITING = "writing"
    LOADING_DATASET = "loading_dataset"
    LOADING_TABLE = "loading_table"
    LOADING_DATA = "loading_data"
    DONE = "done"
    FAILED = "failed"


StageCallback = Callable[[PipelineStage], None]


class Sink:
    """Final stage of a run."""

    name = "sink"

    def project(self, records: Sequence[Row]) -> List[Row]:
        return identity(records)

    def deliver(self, rows: Sequence[Row], on_stage: StageCallback) -> bool:
        raise NotImplementedError


class FileSink(Sink):
    """Writes the full API payload to a JSON snapshot that persists."""

    name = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def deliver(self, rows: Sequence[Row], on_stage: StageCallback) -> bool:
        on_stage(PipelineStage.WRITING)
        write_json(rows, self.path)
        return True


class WarehouseSink(Sink):
    """Loads projected rows into BigQuery with full-table overwrite.

    The same schema object is used to create the table and to run the load.
    Both intermediate files are removed once the load has been attempted,
    whatever its outcome.
    """

    name = "warehouse"

    def __init__(
        self,
        settings: Settings,
        client_factory: Callable[[Settings], bigquery.Client] = bq_client,
    ) -> None:
        self.settings = settings
        self.client_factory = client_factory
        self.json_path = Path(settings.temp_jobs_path)
        self.ndjson_path = ndjson_path_for(self.json_path)
        self.schema = remote_jobs_schema()

    def project(self, records: Sequence[Row]) -> List[Row]:
        return project_jobs(records)

    def deliver(self, rows: Sequence[Row], on_stage: StageCallback) -> bool:
        settings = self.settings
        try:
            on_stage(PipelineStage.WRITING)
            write_json(rows, self.json_path)
            write_ndjson(rows, self.ndjson_path)

            on_stage(PipelineStage.LOADING_DATASET)
            client = self.client_factory(settings)
            ensure_dataset(client, settings.bigquery_dataset_id, location=settings.bigquery_location)

            on_stage(PipelineStage.LOADING_TABLE)
            ensure_table(client, settings.bigquery_dataset_id, settings.bigquery_table_id, self.schema)

            on_stage(PipelineStage.LOADING_DATA)
            return load_ndjson_to_bq(
                client,
                self.ndjson_path,
                settings.bigquery_dataset_id,
                settings.bigquery_table_id,
                self.schema,
                location=settings.bigquery_location,
            )
        finally:
            remove_file(self.ndjson_path)
            remove_file(self.json_path)


def build_sink(settings: Settings) -> Sink:
    if settings.warehouse_load_enabled:
        return WarehouseSink(settings)
    return FileSink(settings.snapshot_path)

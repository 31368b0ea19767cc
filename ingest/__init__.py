"""Remote jobs ingest package.

Fetches the Remotive remote software-dev jobs listing and either keeps a
JSON snapshot or loads it into BigQuery.

Modules:
- fetcher: single GET against the Remotive API
- projector: raw record -> warehouse row
- writer: JSON / NDJSON files
- sinks: file-only and BigQuery final stages
- pipeline: one-shot run orchestration

Usage:
    python -m ingest
"""

from ingest.fetcher import FetchError, RemotiveFetcher
from ingest.pipeline import JobsPipeline, PipelineResult, build_pipeline
from ingest.sinks import FileSink, PipelineStage, WarehouseSink

__all__ = [
    "FetchError",
    "RemotiveFetcher",
    "JobsPipeline",
    "PipelineResult",
    "build_pipeline",
    "FileSink",
    "PipelineStage",
    "WarehouseSink",
]

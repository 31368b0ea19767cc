"""Ingest entry point.

Runs the whole pipeline once and exits; status is the exit code plus logs.
Configuration comes from the environment / `.env` (see `utils.config`).

Usage:
    python -m ingest
"""

import asyncio
import sys

from ingest.pipeline import build_pipeline
from utils.config import Settings
from utils.logging import configure_logging


def main() -> int:
    logger = configure_logging(service_name="remote_jobs_ingest")

    try:
        settings = Settings.load()
    except ValueError as e:
        logger.error(f"[IngestMain] Configuration error: {e}")
        return 1

    mode = "file + BigQuery" if settings.warehouse_load_enabled else "file only"
    logger.info(f"[IngestMain] Starting remote jobs ingest ({mode})")

    result = asyncio.run(build_pipeline(settings).run())

    if result.success:
        logger.info(f"[IngestMain] ✓ Done: {result.row_count} jobs")
        return 0

    logger.error(f"[IngestMain] Run failed during {result.failed_stage.value}")
    return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("[IngestMain] Interrupted by user.", file=sys.stderr)
        sys.exit(1)

"""Logging setup for ingest runs.

`python -m ingest` calls `configure_logging(service_name="remote_jobs_ingest")`
once before loading settings, so configuration errors land in the run log too.
Each run gets its own `remote_jobs_ingest_<timestamp>.log`; the fetcher, sinks
and BigQuery helpers log through `logging.getLogger(__name__)` with a
bracketed component tag (`[Fetcher]`, `[BQ]`, `[Pipeline]`).
"""

from __future__ import annotations

import glob
import logging
import os
from datetime import datetime
from pathlib import Path

MAX_LOG_FILES_DEFAULT = 10
LOG_FORMAT = "%(asctime)s (%(levelname)s) | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _cleanup_old_logs(log_dir: Path, max_logs: int) -> None:
    """Delete all but the `max_logs` newest run logs in `log_dir`."""
    log_files = sorted(
        glob.glob(str(log_dir / "*.log")),
        key=os.path.getmtime,
        reverse=True,
    )
    for old_log in log_files[max_logs:]:
        try:
            os.remove(old_log)
        except OSError:
            pass


def configure_logging(
    *,
    service_name: str,
    level: str | None = None,
    log_dir: str | None = None,
    max_log_files: int = MAX_LOG_FILES_DEFAULT,
) -> logging.Logger:
    """Send every component's log records to the console and a per-run file.

    Calling it again (e.g. from tests) replaces the handlers of the previous call.

    Args:
        service_name: Name of the service, used as log file prefix and logger name.
        level: Log level (defaults to LOG_LEVEL env var or INFO).
        log_dir: Directory for log files (defaults to LOG_DIR env var or 'logs').
        max_log_files: Maximum number of log files to retain.

    Returns:
        Logger named after the service.
    """
    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, resolved_level, logging.INFO)

    log_path = Path(log_dir or os.getenv("LOG_DIR", "logs"))
    log_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_path / f"{service_name}_{timestamp}.log"

    # Prune before the new file exists so it is never counted
    _cleanup_old_logs(log_path, max(max_log_files - 1, 0))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return logging.getLogger(service_name)

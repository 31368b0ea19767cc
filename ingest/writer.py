"""Local file output: pretty JSON snapshots and NDJSON load files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Sequence

logger = logging.getLogger(__name__)


def _prepare(path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    return target


def write_json(rows: Sequence[Dict[str, Any]], path: str | Path) -> Path:
    """Write rows as one pretty-printed JSON array, replacing any existing file."""
    target = _prepare(path)
    target.write_text(json.dumps(list(rows), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"[Writer] Saved {len(rows)} jobs to {target}")
    return target


def write_ndjson(rows: Sequence[Dict[str, Any]], path: str | Path) -> Path:
    """Write rows as newline-delimited JSON: one document per line, no trailing newline."""
    target = _prepare(path)
    target.write_text(
        "\n".join(json.dumps(row, ensure_ascii=False) for row in rows),
        encoding="utf-8",
    )
    logger.info(f"[Writer] Wrote {len(rows)} NDJSON rows to {target}")
    return target


def ndjson_path_for(path: str | Path) -> Path:
    """`temp_jobs.json` -> `temp_jobs.ndjson`."""
    return Path(path).with_suffix(".ndjson")


def remove_file(path: str | Path) -> None:
    """Delete a transient file; a file that is already gone is fine."""
    target = Path(path)
    target.unlink(missing_ok=True)
    logger.debug(f"[Writer] Removed {target}")

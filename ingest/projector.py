"""Projection of raw API records onto the warehouse row shape."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from utils.schemas import REMOTE_JOB_FIELDS

Row = Dict[str, Any]


def project_job(record: Row) -> Row:
    """Keep the warehouse columns of one record, in column order.

    Fields the record lacks are left out of the row, so they load as NULL.
    No type or presence validation is done.
    """
    return {name: record[name] for name in REMOTE_JOB_FIELDS if name in record}


def project_jobs(records: Iterable[Row]) -> List[Row]:
    """Project every record; output length always equals input length."""
    return [project_job(record) for record in records]


def identity(records: Iterable[Row]) -> List[Row]:
    """Pass records through unchanged (snapshot-only runs keep the full payload)."""
    return list(records)

"""Schema contract for warehouse rows.

**SINGLE SOURCE OF TRUTH**: the `RemoteJob` dataclass below declares the
warehouse columns. The BigQuery schema used at table creation and at load
time, and the field order of projected rows, are both derived from it.

To add/remove/modify a column:
1. Update the dataclass below
2. Table schema, load schema and projection update automatically
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import List, Optional, Tuple, get_args, get_origin, get_type_hints

from google.cloud import bigquery


def _python_type_to_bq_type(python_type: type) -> str:
    """Convert a Python type annotation to a BigQuery column type."""
    origin = get_origin(python_type)

    # Unwrap Optional[X]
    if origin is not None:
        args = [arg for arg in get_args(python_type) if arg is not type(None)]
        if origin is not list and len(args) == 1:
            python_type = args[0]
            origin = get_origin(python_type)

    # List[X] maps to the element type; the caller marks the column REPEATED
    if origin is list:
        args = get_args(python_type)
        return _python_type_to_bq_type(args[0]) if args else "STRING"

    type_map = {
        str: "STRING",
        int: "INTEGER",
        float: "FLOAT",
        bool: "BOOLEAN",
        datetime: "TIMESTAMP",
    }

    return type_map.get(python_type, "STRING")


def _is_list_type(python_type: type) -> bool:
    origin = get_origin(python_type)
    if origin is list:
        return True
    if origin is not None:
        return any(get_origin(arg) is list for arg in get_args(python_type))
    return False


def _dataclass_to_bq_schema(dataclass_type: type) -> List[bigquery.SchemaField]:
    """Auto-generate a BigQuery schema from a dataclass, preserving field order."""
    hints = get_type_hints(dataclass_type)
    schema_fields = []

    for field in fields(dataclass_type):
        field_type = hints[field.name]
        mode = "REPEATED" if _is_list_type(field_type) else "NULLABLE"
        schema_fields.append(
            bigquery.SchemaField(field.name, _python_type_to_bq_type(field_type), mode=mode)
        )

    return schema_fields


@dataclass(frozen=True, slots=True)
class RemoteJob:
    """One remote job posting as stored in the warehouse.

    Column order here is the column order of the table and of every
    projected row. Upstream records are trusted as-is, so every column
    is nullable.
    """

    id: Optional[int]
    url: Optional[str]
    title: Optional[str]
    company_name: Optional[str]
    category: Optional[str]
    tags: List[str]
    job_type: Optional[str]
    publication_date: Optional[datetime]  # e.g. "2024-01-01T00:00:00"
    candidate_required_location: Optional[str]
    salary: Optional[str]  # free text, often empty
    description: Optional[str]  # HTML


REMOTE_JOB_FIELDS: Tuple[str, ...] = tuple(field.name for field in fields(RemoteJob))


def remote_jobs_schema() -> List[bigquery.SchemaField]:
    """Schema for the remote jobs table.

    Auto-generated from `utils.schemas.RemoteJob`.
    """
    return _dataclass_to_bq_schema(RemoteJob)

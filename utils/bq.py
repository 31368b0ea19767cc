"""BigQuery helpers for dataset/table bootstrapping and bulk loading.

This module provides:
- Client creation (explicit project or ambient credential discovery)
- Idempotent dataset and table creation
- NDJSON file loading with full-table overwrite

Bootstrapping relies on BigQuery's own create-if-not-exists (`exists_ok=True`),
so two runs racing on an empty project both end up with the same dataset.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from google.cloud import bigquery
from google.cloud.exceptions import NotFound

from utils.config import Settings


logger = logging.getLogger(__name__)


# =============================================================================
# Client Management
# =============================================================================

def bq_client(settings: Settings) -> bigquery.Client:
    """Create a BigQuery client; project None means ambient discovery."""
    return bigquery.Client(project=settings.gcp_project_id)


# =============================================================================
# Bootstrapping
# =============================================================================

def ensure_dataset(
    client: bigquery.Client,
    dataset_id: str,
    location: str = "US",
    description: Optional[str] = None,
) -> bigquery.Dataset:
    """Ensure dataset exists, create if missing (idempotent).

    Args:
        client: BigQuery client instance
        dataset_id: Dataset ID (not full path, just the ID)
        location: Dataset location, only applied on creation
        description: Optional dataset description

    Returns:
        Dataset reference

    Raises:
        google.api_core.exceptions.GoogleAPIError: If lookup or creation fails
    """
    dataset_ref = f"{client.project}.{dataset_id}"

    try:
        dataset = client.get_dataset(dataset_ref)
        logger.info(f"[BQ] Dataset already exists: {dataset_ref}")
        return dataset
    except NotFound:
        logger.info(f"[BQ] Dataset {dataset_ref} does not exist. Creating it in {location}...")

    dataset = bigquery.Dataset(dataset_ref)
    dataset.location = location
    if description:
        dataset.description = description

    dataset = client.create_dataset(dataset, exists_ok=True)
    logger.info(f"[BQ] ✓ Dataset created: {dataset_ref}")
    return dataset


def ensure_table(
    client: bigquery.Client,
    dataset_id: str,
    table_id: str,
    schema: List[bigquery.SchemaField],
    description: Optional[str] = None,
) -> bigquery.Table:
    """Ensure table exists with schema, create if missing (idempotent).

    An existing table is returned as-is; its schema is not compared or migrated.

    Args:
        client: BigQuery client instance
        dataset_id: Dataset ID
        table_id: Table ID
        schema: List of BigQuery SchemaField objects
        description: Optional table description

    Returns:
        Table reference

    Raises:
        google.api_core.exceptions.GoogleAPIError: If lookup or creation fails
    """
    table_ref = f"{client.project}.{dataset_id}.{table_id}"

    try:
        table = client.get_table(table_ref)
        logger.info(f"[BQ] Table already exists: {table_ref}")
        return table
    except NotFound:
        logger.info(f"[BQ] Table {table_ref} does not exist. Creating it now...")

    table = bigquery.Table(table_ref, schema=schema)
    if description:
        table.description = description

    table = client.create_table(table, exists_ok=True)
    logger.info(f"[BQ] ✓ Table created: {table_ref} ({len(schema)} fields)")
    return table


# =============================================================================
# Loading
# =============================================================================

def ndjson_load_config(schema: List[bigquery.SchemaField]) -> bigquery.LoadJobConfig:
    """Load job configuration: NDJSON source, explicit schema, overwrite."""
    return bigquery.LoadJobConfig(
        source_format=bigquery.SourceFormat.NEWLINE_DELIMITED_JSON,
        schema=schema,
        write_disposition=bigquery.WriteDisposition.WRITE_TRUNCATE,
    )


def load_ndjson_to_bq(
    client: bigquery.Client,
    ndjson_path: str | Path,
    dataset_id: str,
    table_id: str,
    schema: List[bigquery.SchemaField],
    location: Optional[str] = None,
) -> bool:
    """Bulk-load a local NDJSON file, replacing the table's contents.

    The call waits for the load job. A job that raises while running and a
    job that finishes with a non-empty `errors` list are both failures.

    Args:
        client: BigQuery client instance
        ndjson_path: Path to the newline-delimited JSON file
        dataset_id: Target dataset ID
        table_id: Target table ID
        schema: Schema sent with the load job
        location: Job location (should match the dataset's)

    Returns:
        True if the table now holds exactly the file's rows, False otherwise.
    """
    table_ref = f"{client.project}.{dataset_id}.{table_id}"
    logger.info(f"[BQ] Loading {ndjson_path} into {table_ref} (WRITE_TRUNCATE)...")

    try:
        with open(ndjson_path, "rb") as source_file:
            job = client.load_table_from_file(
                source_file,
                table_ref,
                job_config=ndjson_load_config(schema),
                location=location,
            )
        job.result()
    except Exception as e:
        logger.error(f"[BQ] Load job failed for {table_ref}: {e}", exc_info=True)
        return False

    if job.errors:
        logger.error(f"[BQ] Load job {job.job_id} finished with {len(job.errors)} errors")
        for error in job.errors[:3]:  # first 3 only
            logger.error(f"[BQ]   Error: {error}")
        return False

    logger.info(f"[BQ] ✓ Load job {job.job_id} completed: {job.output_rows} rows in {table_ref}")
    return True

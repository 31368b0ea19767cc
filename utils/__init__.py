"""Shared configuration, logging, schema and BigQuery helpers."""

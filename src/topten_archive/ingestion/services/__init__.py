"""Workflows built on top of the ingestion components."""

"""Ingestion of daily top lists and article details."""

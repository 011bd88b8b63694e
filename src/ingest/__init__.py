"""Placement ingestion pipeline.

This package reads CSV placement rows, normalizes both dataset
generations into canonical records, and batches them for the store.
"""

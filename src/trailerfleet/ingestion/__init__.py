"""Ingestion layer.

This package contains the helpers that turn raw backend JSON into
normalized domain objects.
"""

__all__: list[str] = []

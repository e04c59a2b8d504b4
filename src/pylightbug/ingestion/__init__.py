"""Ingestion layer.

This package fetches data from the Lightbug API and turns it into
normalized records (see :mod:`pylightbug.ingestion.normalize` and
:mod:`pylightbug.ingestion.live`).
"""

__all__: list[str] = []

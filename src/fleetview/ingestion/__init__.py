"""Ingestion layer.

This package turns raw backend payloads into typed signals: value
normalization, IO element decoding and movement classification.
"""

__all__: list[str] = []

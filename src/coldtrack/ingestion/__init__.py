"""Ingestion layer.

Adapters that decode transport messages into normalized events, and the
ingestor that applies those events to the store.
"""

__all__: list[str] = []

"""State layer.

The store is the single source of truth for stations, tracked items and
the bounded logs; only the ingestion and staleness paths mutate it.
"""

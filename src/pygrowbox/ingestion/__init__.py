"""Ingestion layer.

This package contains the adapters that bring snapshots in from the
controller (bootstrap GETs and the push channel) and hand them to the
view reconciler.
"""

__all__: list[str] = []

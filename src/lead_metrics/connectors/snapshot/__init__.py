"""Connector over a local JSON snapshot of tables."""

from lead_metrics.connectors.snapshot.connector import SnapshotConnector

__all__ = ["SnapshotConnector"]

"""Table connectors for the remote source."""

from lead_metrics.connectors.base import BaseConnector
from lead_metrics.connectors.registry import ConnectorRegistry

__all__ = ["BaseConnector", "ConnectorRegistry"]

"""Registry for discovering and instantiating connectors."""

from typing import Type

from lead_metrics.connectors.airtable import AirtableConnector
from lead_metrics.connectors.base import BaseConnector
from lead_metrics.connectors.snapshot import SnapshotConnector


class ConnectorRegistry:
    """Discovers and provides table connectors."""

    _connectors: dict[str, Type[BaseConnector]] = {
        "airtable": AirtableConnector,
        "snapshot": SnapshotConnector,
    }

    @classmethod
    def get(cls, source_id: str, *args, **kwargs) -> BaseConnector:
        """Get a connector instance for the given source. args/kwargs passed to connector __init__."""
        connector_cls = cls._connectors.get(source_id.lower())
        if not connector_cls:
            raise ValueError(f"Unknown source: {source_id}. Available: {list(cls._connectors.keys())}")
        return connector_cls(*args, **kwargs)

    @classmethod
    def available_sources(cls) -> list[str]:
        """Return list of available source identifiers."""
        return list(cls._connectors.keys())

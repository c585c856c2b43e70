"""Airtable REST connector."""

from lead_metrics.connectors.airtable.connector import AirtableConnector

__all__ = ["AirtableConnector"]

"""Data models for records, summaries and product details."""

from lead_metrics.models.product import ImageRef, ProductDetail, ProductView
from lead_metrics.models.record import Collection, Record
from lead_metrics.models.state import DashboardState
from lead_metrics.models.summary import AssignmentSplit, EntitySummary, WorkloadReport

__all__ = [
    "AssignmentSplit",
    "Collection",
    "DashboardState",
    "EntitySummary",
    "ImageRef",
    "ProductDetail",
    "ProductView",
    "Record",
    "WorkloadReport",
]

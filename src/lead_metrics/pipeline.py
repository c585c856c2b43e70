"""Pipeline orchestration: resolve department → filter employees → tally leads."""

import logging
from typing import Optional

from lead_metrics.aggregation import aggregate, count_assignments
from lead_metrics.config import Settings
from lead_metrics.connectors.airtable import AirtableConnector
from lead_metrics.connectors.base import BaseConnector
from lead_metrics.detail import fetch_product
from lead_metrics.joining import filter_linked, resolve_identity
from lead_metrics.models.product import ProductDetail
from lead_metrics.models.summary import AssignmentSplit, WorkloadReport

logger = logging.getLogger(__name__)


def _validated(settings: Settings, connector: Optional[BaseConnector]) -> Settings:
    """Credentials are only required when we build the Airtable connector ourselves."""
    return settings.validate_required(require_credentials=connector is None)


def run_workload(
    settings: Settings,
    connector: Optional[BaseConnector] = None,
    *,
    department: Optional[str] = None,
) -> WorkloadReport:
    """
    Run the workload pipeline for one department.
    Order is fixed: department lookup, employee fetch/filter, lead fetch, aggregation.
    Any failure aborts the run; no partial report is returned.
    """
    _validated(settings, connector)
    department = department or settings.target_department
    tables = settings.tables
    fields = settings.fields

    owned = connector is None
    connector = connector or AirtableConnector(settings)
    try:
        department_id = resolve_identity(
            connector,
            tables.departments,
            fields.department_name,
            department,
        )
        logger.info("Resolved department %r to %s", department, department_id)

        employees = connector.fetch_all(
            tables.employees,
            [fields.name, fields.photo, fields.department_link],
        )
        members = filter_linked(employees, fields.department_link, department_id)
        logger.info("%d of %d employees belong to %r", len(members), len(employees), department)

        leads = connector.fetch_all(tables.leads, [fields.assigned, fields.stage])
    finally:
        if owned:
            connector.close()

    return aggregate(
        members,
        leads,
        settings,
        department=department,
        department_id=department_id,
    )


def run_assignment_split(
    settings: Settings,
    connector: Optional[BaseConnector] = None,
) -> AssignmentSplit:
    """Count assigned vs unassigned leads."""
    _validated(settings, connector)
    owned = connector is None
    connector = connector or AirtableConnector(settings)
    try:
        leads = connector.fetch_all(settings.tables.leads, [settings.fields.assigned])
    finally:
        if owned:
            connector.close()
    return count_assignments(leads, settings.fields.assigned)


def run_product_detail(
    settings: Settings,
    record_id: str,
    connector: Optional[BaseConnector] = None,
) -> ProductDetail:
    """Fetch and project one product record from the products base."""
    _validated(settings, connector)
    owned = connector is None
    connector = connector or AirtableConnector(settings, base_id=settings.effective_products_base_id)
    try:
        return fetch_product(connector, settings, record_id)
    finally:
        if owned:
            connector.close()

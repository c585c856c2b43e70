"""Resolve a grouping entity and select the records linked to it."""

import logging

from lead_metrics.connectors.base import BaseConnector
from lead_metrics.errors import NotFoundError
from lead_metrics.models.record import Record

logger = logging.getLogger(__name__)


def escape_formula_string(value: str) -> str:
    """Escape a value for use inside a single-quoted formula string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def formula_equals(field: str, value: str) -> str:
    """Formula matching records whose field equals value, e.g. ({Name} = 'Sales')."""
    return f"({{{field}}} = '{escape_formula_string(value)}')"


def resolve_identity(
    connector: BaseConnector,
    table: str,
    match_field: str,
    match_value: str,
) -> str:
    """
    Return the id of the record whose match_field equals match_value.
    The source filters server-side; matches are confirmed here with an exact
    comparison. When several records match, the first in fetch order wins.
    """
    records = connector.fetch_all(
        table,
        [match_field],
        filter_formula=formula_equals(match_field, match_value),
    )
    matches = [r for r in records if r.get_text(match_field) == match_value]
    if not matches:
        raise NotFoundError(f"No record in '{table}' with {match_field} = '{match_value}'")
    if len(matches) > 1:
        logger.warning(
            "%d records in %s match %s = %r; using first (%s)",
            len(matches),
            table,
            match_field,
            match_value,
            matches[0].id,
        )
    return matches[0].id


def filter_linked(
    collection: list[Record],
    link_field: str,
    target_identity: str,
) -> list[Record]:
    """Keep records whose link_field lists target_identity. Records without the field are dropped."""
    return [r for r in collection if target_identity in r.get_links(link_field)]

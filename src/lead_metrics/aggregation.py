"""Workload aggregation: tally leads per entity and per stage."""

import logging
from typing import Mapping, Optional

from lead_metrics.config import Settings
from lead_metrics.models.record import Record
from lead_metrics.models.summary import AssignmentSplit, EntitySummary, WorkloadReport

logger = logging.getLogger(__name__)


def avatar_url(record: Record, photo_field: str) -> str:
    """Small thumbnail of the first attached photo, or empty string."""
    photos = record.get_attachments(photo_field)
    if not photos:
        return ""
    thumbnails = photos[0].get("thumbnails")
    if not isinstance(thumbnails, dict):
        return ""
    small = thumbnails.get("small")
    if not isinstance(small, dict):
        return ""
    url = small.get("url")
    return url if isinstance(url, str) else ""


def _first_link(record: Record, label: str) -> Optional[str]:
    """First entry of a link field, or None when it is missing or not an id."""
    value = record.fields.get(label)
    if not isinstance(value, list) or not value:
        return None
    first = value[0]
    return first if isinstance(first, str) else None


def stage_key(stage: Optional[str], stages: Mapping[str, str]) -> Optional[str]:
    """Category key whose label equals stage exactly; first configured key wins."""
    if stage is None:
        return None
    for key, label in stages.items():
        if stage == label:
            return key
    return None


def seed_summaries(entities: list[Record], settings: Settings) -> dict[str, EntitySummary]:
    """One zeroed summary per entity, in entity order."""
    summaries: dict[str, EntitySummary] = {}
    for entity in entities:
        if entity.id in summaries:
            continue
        summaries[entity.id] = EntitySummary(
            identity=entity.id,
            display_name=entity.get_text(settings.fields.name, "Unknown"),
            avatar_ref=avatar_url(entity, settings.fields.photo),
            counts={key: 0 for key in settings.stages},
        )
    return summaries


def aggregate(
    entities: list[Record],
    leads: list[Record],
    settings: Settings,
    *,
    department: str = "",
    department_id: str = "",
) -> WorkloadReport:
    """
    Tally leads against entities. Pure over its inputs.
    1. Seed a zeroed summary per entity
    2. Attribute each lead to the first identity in its assignment field only
    3. Known identity: total += 1, and the matching stage bucket if the label matches exactly
    4. Unknown or missing identity: counted as unattributed, in no summary
    5. Sort by total descending; ties keep entity order
    """
    summaries = seed_summaries(entities, settings)
    unattributed = 0

    for lead in leads:
        identity = _first_link(lead, settings.fields.assigned)
        summary = summaries.get(identity) if identity else None
        if summary is None:
            unattributed += 1
            continue
        summary.total += 1
        key = stage_key(lead.get_text(settings.fields.stage), settings.stages)
        if key is not None:
            summary.counts[key] += 1

    if unattributed:
        logger.info("%d of %d leads not attributed to any entity", unattributed, len(leads))

    ordered = sorted(summaries.values(), key=lambda s: s.total, reverse=True)
    return WorkloadReport(
        department=department,
        department_id=department_id,
        summaries=ordered,
        unattributed=unattributed,
        lead_count=len(leads),
    )


def count_assignments(leads: list[Record], assigned_field: str) -> AssignmentSplit:
    """Split leads into those with at least one assignee and those with none."""
    assigned = sum(1 for lead in leads if lead.get_links(assigned_field))
    return AssignmentSplit(assigned=assigned, unassigned=len(leads) - assigned)

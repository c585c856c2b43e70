"""Aggregation outputs: per-entity workload and assignment split."""

from pydantic import BaseModel, Field


class EntitySummary(BaseModel):
    """Workload tally for one entity (employee)."""

    identity: str
    display_name: str = "Unknown"
    avatar_ref: str = ""
    total: int = Field(default=0, ge=0)
    counts: dict[str, int] = Field(default_factory=dict)

    @property
    def uncategorized(self) -> int:
        """Attributed leads whose stage matched no configured label."""
        return self.total - sum(self.counts.values())

    def share(self, key: str) -> float:
        """Percentage of total held by one category (0 when total is 0)."""
        if not self.total:
            return 0.0
        return self.counts.get(key, 0) / self.total * 100


class WorkloadReport(BaseModel):
    """Ordered summaries for one department plus leads nobody was credited with."""

    department: str
    department_id: str = ""
    summaries: list[EntitySummary] = Field(default_factory=list)
    unattributed: int = Field(default=0, ge=0)
    lead_count: int = Field(default=0, ge=0)


class AssignmentSplit(BaseModel):
    """Count of leads with and without an assignee."""

    assigned: int = Field(default=0, ge=0)
    unassigned: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.assigned + self.unassigned

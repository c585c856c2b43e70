"""Tests for workload aggregation."""

from lead_metrics.aggregation import aggregate, avatar_url, count_assignments, stage_key
from lead_metrics.config import Settings
from lead_metrics.models.record import Record


def make_record(record_id: str, **fields) -> Record:
    return Record(id=record_id, fields=fields)


def _employee(record_id: str, name: str):
    return make_record(record_id, **{"Full Name": name})


def _lead(record_id: str, assigned, stage=None):
    fields = {}
    if assigned is not None:
        fields["Assigned To"] = assigned
    if stage is not None:
        fields["Stage"] = stage
    return make_record(record_id, **fields)


class TestAggregate:
    """Tests for aggregate."""

    def test_scenario(self, settings: Settings) -> None:
        """Alice/Bob scenario: unknown e3 excluded, ordered by total."""
        entities = [_employee("e1", "Alice"), _employee("e2", "Bob")]
        leads = [
            _lead("l1", ["e1"], "Fresh"),
            _lead("l2", ["e1"], "Follow Up Required"),
            _lead("l3", ["e2"], "Fresh"),
            _lead("l4", ["e3"], "Fresh"),
        ]
        report = aggregate(entities, leads, settings)

        assert [(s.identity, s.display_name, s.total) for s in report.summaries] == [
            ("e1", "Alice", 2),
            ("e2", "Bob", 1),
        ]
        assert report.summaries[0].counts == {"fresh": 1, "follow": 1, "not_conn": 0}
        assert report.summaries[1].counts == {"fresh": 1, "follow": 0, "not_conn": 0}
        assert report.unattributed == 1
        assert report.lead_count == 4

    def test_sorted_descending_stable(self, settings: Settings) -> None:
        """Ties keep entity order."""
        entities = [_employee(f"e{i}", f"E{i}") for i in range(1, 5)]
        leads = [
            _lead("l1", ["e3"]),
            _lead("l2", ["e3"]),
            _lead("l3", ["e2"]),
            _lead("l4", ["e4"]),
        ]
        report = aggregate(entities, leads, settings)
        assert [s.identity for s in report.summaries] == ["e3", "e2", "e4", "e1"]

    def test_idempotent(self, settings: Settings) -> None:
        """Same inputs, same ordered output."""
        entities = [_employee("e1", "A"), _employee("e2", "B"), _employee("e3", "C")]
        leads = [_lead("l1", ["e2"], "Fresh"), _lead("l2", ["e3"], "Not Connected")]
        first = aggregate(entities, leads, settings)
        second = aggregate(entities, leads, settings)
        assert first.model_dump() == second.model_dump()

    def test_first_assignee_only(self, settings: Settings) -> None:
        """A lead linked to two entities credits only the first."""
        entities = [_employee("e1", "A"), _employee("e2", "B")]
        report = aggregate(entities, [_lead("l1", ["e2", "e1"], "Fresh")], settings)
        totals = {s.identity: s.total for s in report.summaries}
        assert totals == {"e2": 1, "e1": 0}

    def test_first_assignee_unknown_not_reassigned(self, settings: Settings) -> None:
        """If the first assignee is outside the set, later ones are not tried."""
        entities = [_employee("e1", "A")]
        report = aggregate(entities, [_lead("l1", ["eX", "e1"], "Fresh")], settings)
        assert report.summaries[0].total == 0
        assert report.unattributed == 1

    def test_first_link_not_an_id(self, settings: Settings) -> None:
        """A non-id first entry leaves the lead unattributed; later ids are not tried."""
        entities = [_employee("e1", "A")]
        report = aggregate(entities, [_lead("l1", [None, "e1"], "Fresh")], settings)
        assert report.summaries[0].total == 0
        assert report.unattributed == 1

    def test_unknown_category(self, settings: Settings) -> None:
        """Unrecognized or missing stage counts toward total only."""
        entities = [_employee("e1", "A")]
        leads = [
            _lead("l1", ["e1"], "Closed Won"),
            _lead("l2", ["e1"], "fresh"),
            _lead("l3", ["e1"]),
            _lead("l4", ["e1"], "Fresh"),
        ]
        summary = aggregate(entities, leads, settings).summaries[0]
        assert summary.total == 4
        assert summary.counts == {"fresh": 1, "follow": 0, "not_conn": 0}
        assert sum(summary.counts.values()) < summary.total
        assert summary.uncategorized == 3

    def test_unassigned_leads_unattributed(self, settings: Settings) -> None:
        entities = [_employee("e1", "A")]
        leads = [_lead("l1", None), _lead("l2", []), _lead("l3", "e1")]
        report = aggregate(entities, leads, settings)
        assert report.summaries[0].total == 0
        assert report.unattributed == 3

    def test_no_entities(self, settings: Settings) -> None:
        report = aggregate([], [_lead("l1", ["e1"])], settings)
        assert report.summaries == []
        assert report.unattributed == 1

    def test_name_and_avatar_defaults(self, settings: Settings) -> None:
        summary = aggregate([make_record("e1")], [], settings).summaries[0]
        assert summary.display_name == "Unknown"
        assert summary.avatar_ref == ""

    def test_department_passthrough(self, settings: Settings) -> None:
        report = aggregate([], [], settings, department="Sales", department_id="d1")
        assert report.department == "Sales"
        assert report.department_id == "d1"


class TestHelpers:
    """Tests for avatar_url, stage_key and count_assignments."""

    def test_avatar_url(self) -> None:
        record = make_record(
            "e1",
            Photo=[
                {"url": "big", "thumbnails": {"small": {"url": "small-1"}}},
                {"url": "big2", "thumbnails": {"small": {"url": "small-2"}}},
            ],
        )
        assert avatar_url(record, "Photo") == "small-1"
        assert avatar_url(make_record("e2", Photo=[{"url": "big"}]), "Photo") == ""

    def test_stage_key_first_wins(self) -> None:
        stages = {"a": "Fresh", "b": "Fresh"}
        assert stage_key("Fresh", stages) == "a"
        assert stage_key(None, stages) is None
        assert stage_key("Other", stages) is None

    def test_count_assignments(self) -> None:
        leads = [
            _lead("l1", ["e1"]),
            _lead("l2", []),
            _lead("l3", None),
            _lead("l4", ["e9", "e1"]),
        ]
        split = count_assignments(leads, "Assigned To")
        assert split.assigned == 2
        assert split.unassigned == 2

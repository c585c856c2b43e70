"""Pytest fixtures for lead-metrics tests."""

import json
from typing import Callable
from urllib.parse import unquote

import httpx
import pytest

from lead_metrics.config import Settings

API_URL = "https://api.test/v0"


class FakeAirtable:
    """
    Synthetic paginated backend.
    Serves tables in pages of page_size with numeric offset tokens, records
    every request, and can be told to fail on a given request number.
    """

    def __init__(self, tables: dict[str, list[dict]], page_size: int = 2):
        self.tables = tables
        self.page_size = page_size
        self.requests: list[httpx.Request] = []
        self.fail_on: dict[int, httpx.Response] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.requests) in self.fail_on:
            return self.fail_on[len(self.requests)]

        parts = [unquote(p) for p in request.url.path.split("/") if p]
        # ["v0", base_id, table, (record_id)]
        table = parts[2]
        if table not in self.tables:
            return httpx.Response(404, json={"error": {"type": "TABLE_NOT_FOUND", "message": table}})
        rows = self.tables[table]

        if len(parts) == 4:
            for row in rows:
                if row["id"] == parts[3]:
                    return httpx.Response(200, json=row)
            return httpx.Response(
                404,
                json={"error": {"type": "NOT_FOUND", "message": "Could not find record"}},
            )

        start = int(request.url.params.get("offset", "0"))
        page = rows[start:start + self.page_size]
        wanted = request.url.params.get_list("fields[]")
        if wanted:
            page = [
                {"id": r["id"], "fields": {k: v for k, v in r["fields"].items() if k in wanted}}
                for r in page
            ]
        body: dict = {"records": page}
        if start + self.page_size < len(rows):
            body["offset"] = str(start + self.page_size)
        return httpx.Response(200, json=body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def settings() -> Settings:
    """Valid settings pointing at the fake API with throttling disabled."""
    return Settings(
        api_key="patTEST",
        base_id="appTEST",
        api_url=API_URL,
        request_interval=0,
    )


@pytest.fixture
def workload_tables() -> dict[str, list[dict]]:
    """Departments, employees and leads for the Alice/Bob scenario."""
    return {
        "Departments": [
            {"id": "d1", "fields": {"Department Name": "Sales & Customer Success"}},
            {"id": "d2", "fields": {"Department Name": "Engineering"}},
        ],
        "Employee Directory": [
            {
                "id": "e1",
                "fields": {
                    "Full Name": "Alice",
                    "Department": ["d1"],
                    "Profile Photo": [
                        {"url": "https://img/alice.png", "thumbnails": {"small": {"url": "https://img/alice-s.png"}}}
                    ],
                },
            },
            {"id": "e2", "fields": {"Full Name": "Bob", "Department": ["d1"]}},
            {"id": "e9", "fields": {"Full Name": "Carol", "Department": ["d2"]}},
        ],
        "Leads": [
            {"id": "l1", "fields": {"Assigned To": ["e1"], "Stage": "Fresh"}},
            {"id": "l2", "fields": {"Assigned To": ["e1"], "Stage": "Follow Up Required"}},
            {"id": "l3", "fields": {"Assigned To": ["e2"], "Stage": "Fresh"}},
            {"id": "l4", "fields": {"Assigned To": ["e3"], "Stage": "Fresh"}},
        ],
    }


@pytest.fixture
def make_backend() -> Callable[..., FakeAirtable]:
    """Factory for FakeAirtable backends over the given tables."""
    return FakeAirtable


@pytest.fixture
def fake_backend(workload_tables: dict[str, list[dict]]) -> FakeAirtable:
    return FakeAirtable(workload_tables)


@pytest.fixture
def snapshot_file(tmp_path, workload_tables: dict[str, list[dict]]):
    """JSON snapshot with the workload tables plus one product."""
    tables = dict(workload_tables)
    tables["Products"] = [
        {
            "id": "recP1",
            "fields": {
                "product_name": "Desk Lamp",
                "description": "LED lamp",
                "cost_price": 10,
                "selling_price": 25.5,
                "product_images": [{"url": "https://img/1.png"}, {"url": "https://img/2.png"}],
            },
        }
    ]
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"tables": tables}), encoding="utf-8")
    return path

"""Shared test fixtures for the climatesync test suite."""

import json
import re

import httpx
import pytest
import structlog
from structlog.testing import LogCapture

from climatesync.workitems.application.client import WorkItemClient
from climatesync.workitems.domain.models import AnalysisIssue
from climatesync.workitems.infrastructure.transport import create_http_client

COLLECTION_URL = "https://dev.azure.com/org"
PROJECT = "Proj"

_WIQL_CONDITION = re.compile(r"\[([^\]]+)\] = '((?:[^']|'')*)'")
_WIQL_CURRENT_PROJECT = re.compile(r"\[System\.TeamProject\] = @project\b")


def _not_found(message: str) -> httpx.Response:
    return httpx.Response(
        404,
        json={
            "message": message,
            "typeKey": "WorkItemTrackingFieldDefinitionNotFoundException",
        },
    )


class FakeWorkTracking:
    """
    In-memory work-tracking REST service behind httpx.MockTransport.

    Records every request. `overrides[(method, scope, resource)]` replaces the
    built-in behaviour with a fixed response, a callable producing one, or an
    exception to raise. Scope is "project" or "collection".
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.work_items: dict[int, dict] = {}
        self.project_fields: dict[str, dict] = {}
        self.collection_fields: dict[str, dict] = {}
        self.overrides: dict[tuple[str, str, str], object] = {}
        self._next_id = 1

    # -- helpers ---------------------------------------------------------

    def requests_to(self, resource_prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if self._split(r)[1].startswith(resource_prefix)]

    @staticmethod
    def _split(request: httpx.Request) -> tuple[str, str]:
        prefix, _, resource = request.url.path.partition("/_apis/wit/")
        scope = "project" if prefix.endswith(f"/{PROJECT}") else "collection"
        return scope, resource

    # -- routing ---------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        scope, resource = self._split(request)

        override = self.overrides.get((request.method, scope, resource))
        if isinstance(override, Exception):
            raise override
        if callable(override):
            return override(request)
        if override is not None:
            return override

        body = json.loads(request.content) if request.content else None

        if resource.startswith("fields/") and request.method == "GET":
            return self._get_field(scope, resource.split("/", 1)[1])
        if resource == "fields" and request.method == "POST":
            return self._create_field(scope, body)
        if resource.startswith("workitems/$") and request.method == "PATCH":
            return self._create_work_item(body)
        if resource.startswith("workitems/") and request.method == "PATCH":
            return self._update_work_item(int(resource.split("/", 1)[1]), body)
        if resource == "workitemsbatch" and request.method == "POST":
            return self._batch(body)
        if resource == "wiql" and request.method == "POST":
            return self._wiql(body["query"])
        return httpx.Response(405, json={"message": "unsupported"})

    def _get_field(self, scope: str, name: str) -> httpx.Response:
        fields = self.project_fields if scope == "project" else self.collection_fields
        if name not in fields:
            return _not_found(f"TF51535: Cannot find field {name}.")
        return httpx.Response(200, json=fields[name])

    def _create_field(self, scope: str, body: dict) -> httpx.Response:
        fields = self.project_fields if scope == "project" else self.collection_fields
        created = {**body, "url": f"{COLLECTION_URL}/_apis/wit/fields/{body['referenceName']}"}
        fields[body["referenceName"]] = created
        return httpx.Response(200, json=created)

    def _create_work_item(self, ops: list) -> httpx.Response:
        work_item_id = self._next_id
        self._next_id += 1
        fields = {op["path"].removeprefix("/fields/"): op.get("value") for op in ops if op["op"] == "add"}
        fields.setdefault("System.TeamProject", PROJECT)
        self.work_items[work_item_id] = {
            "id": work_item_id,
            "rev": 1,
            "fields": fields,
            "url": f"{COLLECTION_URL}/_apis/wit/workItems/{work_item_id}",
        }
        return httpx.Response(200, json=self.work_items[work_item_id])

    def _update_work_item(self, work_item_id: int, ops: list) -> httpx.Response:
        item = self.work_items.get(work_item_id)
        if item is None:
            return httpx.Response(404, json={"message": f"TF401232: Work item {work_item_id} does not exist"})
        for op in ops:
            name = op["path"].removeprefix("/fields/")
            if op["op"] == "remove":
                item["fields"].pop(name, None)
            else:
                item["fields"][name] = op.get("value")
        item["rev"] += 1
        return httpx.Response(200, json=item)

    def _batch(self, body: dict) -> httpx.Response:
        items = []
        for work_item_id in body["ids"]:
            item = self.work_items.get(work_item_id)
            if item is None:
                continue
            fields = {k: v for k, v in item["fields"].items() if k in body["fields"]}
            items.append({**item, "fields": fields})
        return httpx.Response(200, json={"count": len(items), "value": items})

    def _wiql(self, query: str) -> httpx.Response:
        conditions = [(name, value.replace("''", "'")) for name, value in _WIQL_CONDITION.findall(query)]
        if _WIQL_CURRENT_PROJECT.search(query):
            conditions.append(("System.TeamProject", PROJECT))
        matches = [
            {"id": item["id"], "url": item["url"]}
            for item in self.work_items.values()
            if all(item["fields"].get(name) == value for name, value in conditions)
        ]
        return httpx.Response(
            200,
            json={
                "queryType": "flat",
                "queryResultType": "workItem",
                "asOf": "2026-10-17T00:00:00Z",
                "columns": [],
                "workItems": matches,
            },
        )


@pytest.fixture
def issue_data():
    """A Code Climate issue as emitted by `codeclimate analyze -f json`."""
    return {
        "type": "issue",
        "check_name": "similar-code",
        "description": "Similar blocks of code found in 2 locations. Consider refactoring.",
        "categories": ["Duplication"],
        "location": {
            "path": "src/app/models.py",
            "lines": {"begin": 12, "end": 40},
        },
        "remediation_points": 25000,
        "severity": "minor",
        "engine_name": "duplication",
        "fingerprint": "5c8a9a3bd4b5c5f1e6a07e7de1a1b2c3",
        "content": {
            "body": "## Duplicated code\n\nSee https://docs.codeclimate.com for details.\n\n```python\ndef f():\n    return 1\n```\n",
        },
    }


@pytest.fixture
def sample_issue(issue_data):
    return AnalysisIssue.from_dict(issue_data)


@pytest.fixture
def fake_server():
    return FakeWorkTracking()


@pytest.fixture
def client(fake_server):
    """WorkItemClient talking to the in-memory fake service."""
    http_client = create_http_client(
        "test-token",
        api_version="6.0",
        transport=httpx.MockTransport(fake_server.handle),
    )
    return WorkItemClient(COLLECTION_URL, PROJECT, "test-token", http_client=http_client)


@pytest.fixture
def log_output():
    """Capture structlog events, including contextvars such as correlation_id."""
    capture = LogCapture()
    structlog.configure(processors=[structlog.contextvars.merge_contextvars, capture])
    yield capture
    structlog.reset_defaults()

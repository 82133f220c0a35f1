"""Shared fixtures: sample stages and an in-memory configuration API."""
import itertools
import json

import httpx
import pytest

from src.config.settings import APIConfig
from src.core.entities import PipelineConfiguration, Stage
from src.core.templates import load_template
from src.persistence import PipelineConfigAPI, WorkflowRuleAPI


class FakeConfigService:
    """
    Minimal stand-in for the configuration API, served through
    httpx.MockTransport. Records are stored as the JSON they were sent as.
    """

    def __init__(self):
        self.records = {"pipeline-configurations": {}, "workflow-automations": {}}
        self.requests = []
        self.fail_with = None  # (status, body) returned for every request
        self.transport_error = False
        self._ids = itertools.count(1)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.transport_error:
            raise httpx.ConnectError("connection refused", request=request)
        if self.fail_with:
            status, body = self.fail_with
            return httpx.Response(status, json=body)

        parts = request.url.path.strip("/").split("/")[1:]  # drop the "api" prefix
        resource, rest = parts[0], parts[1:]
        store = self.records[resource]

        if request.method == "GET" and not rest:
            org = request.url.params.get("organizationId")
            items = [r for r in store.values() if r.get("organizationId") == org]
            if request.url.params.get("isActive") == "true":
                items = [r for r in items if r.get("isActive")]
            return httpx.Response(200, json=items)

        if request.method == "GET" and rest == ["default"]:
            org = request.url.params.get("organizationId")
            for record in store.values():
                if record.get("organizationId") == org and record.get("isDefault"):
                    return httpx.Response(200, json=record)
            return httpx.Response(404, json={"message": "Not found"})

        if request.method == "POST" and not rest:
            record = json.loads(request.content)
            record["id"] = f"id-{next(self._ids)}"
            record["createdAt"] = "2024-05-01T10:00:00Z"
            record["updatedAt"] = "2024-05-01T10:00:00Z"
            store[record["id"]] = record
            return httpx.Response(201, json=record)

        if request.method == "POST" and len(rest) == 2 and rest[1] == "default":
            org = json.loads(request.content)["organizationId"]
            for record in store.values():
                if record.get("organizationId") == org:
                    record["isDefault"] = record["id"] == rest[0]
            return httpx.Response(204)

        record_id = rest[0]
        if record_id not in store:
            return httpx.Response(404, json={"message": "Not found"})

        if request.method == "GET":
            return httpx.Response(200, json=store[record_id])
        if request.method in ("PUT", "PATCH"):
            store[record_id].update(json.loads(request.content))
            store[record_id]["id"] = record_id
            store[record_id]["updatedAt"] = "2024-05-02T10:00:00Z"
            return httpx.Response(200, json=store[record_id])
        if request.method == "DELETE":
            del store[record_id]
            return httpx.Response(204)

        return httpx.Response(405)


@pytest.fixture
def service():
    return FakeConfigService()


@pytest.fixture
def api_config():
    return APIConfig(base_url="http://config.test/api")


@pytest.fixture
def http_client(service, api_config):
    client = httpx.Client(
        base_url=api_config.base_url,
        transport=httpx.MockTransport(service.handler)
    )
    yield client
    client.close()


@pytest.fixture
def pipeline_api(http_client, api_config):
    return PipelineConfigAPI(http_client=http_client, config=api_config)


@pytest.fixture
def workflow_api(http_client, api_config):
    return WorkflowRuleAPI(http_client=http_client, config=api_config)


@pytest.fixture
def stages():
    return [
        Stage(id="s1", name="Lead", order=1, probability=10),
        Stage(id="s2", name="Qualified", order=2, probability=30),
        Stage(id="s3", name="Proposal", order=3, probability=60),
        Stage(id="s4", name="Negotiation", order=4, probability=80, is_active=False),
    ]


@pytest.fixture
def config(stages):
    return PipelineConfiguration(
        name="Enterprise Pipeline",
        stages=stages,
        organization_id="org-1",
        created_by="user-1"
    )


@pytest.fixture
def peak_config():
    base = PipelineConfiguration(name="PEAK", organization_id="org-1", created_by="user-1")
    return load_template(base, "peak")

"""
API tests: analysis is always returned, insights and persistence are best effort.
"""

import json

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.main import app
from app.api.routes import get_insights_client
from app.db.session import get_db
from app.inference.base import LLMClient
from app.inference.chat_completions_client import ChatCompletionsClient


INSIGHTS_REPLY = json.dumps({
    "health_assessment": "Healthy apart from one cycle.",
    "risks": ["Circular dependency between Auth, Billing and Catalog"],
    "recommendations": [{"issue": "Cycle", "recommendation": "Break it", "priority": "high"}],
})


class StubClient(LLMClient):
    def __init__(self, reply=INSIGHTS_REPLY, error=None):
        self.reply = reply
        self.error = error

    def generate(self, messages):
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def llm():
    return StubClient()


@pytest.fixture
def client(db_session_factory, llm):
    def override_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_insights_client] = lambda: llm
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_analyze_worked_example(client, triangle_services):
    response = client.post("/analyze", json={"services": triangle_services})
    body = response.json()

    assert response.status_code == 200
    assert body["status"] == "success"
    assert body["analysis"]["metrics"]["complexity_score"] == 18
    assert body["analysis"]["cycles"] == [["A", "B", "C", "A"]]
    assert body["graph"]["nodes"][3]["degree"] == 0
    assert len(body["layout"]["positions"]) == 4
    assert "insights" not in body["analysis"]


def test_analyze_empty_project(client):
    body = client.post("/analyze", json={"services": []}).json()

    assert body["analysis"]["metrics"]["total_nodes"] == 0
    assert body["analysis"]["metrics"]["avg_degree"] == 0


def test_analyze_reports_dangling_references(client):
    body = client.post(
        "/analyze",
        json={"services": [{"id": "api", "dependsOn": ["db"]}]},
    ).json()

    assert body["status"] == "warning"
    assert body["warnings"] == ["api depends on unknown service db"]
    assert body["analysis"]["metrics"]["total_edges"] == 1


def test_analyze_rejects_empty_ids(client):
    assert client.post("/analyze", json={"services": [{"id": ""}]}).status_code == 422
    assert client.post("/analyze", json={"services": [{"id": "  "}]}).status_code == 422


def test_analyze_threshold_overrides_and_search(client, star_services):
    body = client.post(
        "/analyze",
        json={
            "services": star_services(3),
            "hotspot_multiplier": 1,
            "high_risk_multiplier": 2,
            "search": "leaf",
        },
    ).json()

    assert body["analysis"]["hotspots"] == [{"node_id": "H", "degree": 3, "risk_level": "medium"}]
    assert body["matches"] == ["L0", "L1", "L2"]


def test_latest_analysis_is_persisted_and_overwritten(client, triangle_services):
    client.post("/analyze", json={"project_id": "p1", "services": triangle_services})
    first = client.get("/projects/p1/dependency-graph").json()
    assert first["metrics"]["total_nodes"] == 4
    assert first["analysis"]["orphaned_nodes"] == ["D"]

    client.post("/analyze", json={"project_id": "p1", "services": triangle_services[:1]})
    second = client.get("/projects/p1/dependency-graph").json()
    assert second["metrics"]["total_nodes"] == 1
    assert second["graph_data"]["edges"] == [{"from": "A", "to": "B"}]


def test_unknown_project_is_404(client):
    assert client.get("/projects/nope/dependency-graph").status_code == 404


def test_persistence_failure_keeps_analysis(client, triangle_services, monkeypatch):
    def broken_save(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr("app.api.routes.save_latest_analysis", broken_save)

    body = client.post("/analyze", json={"project_id": "p1", "services": triangle_services}).json()

    assert body["status"] == "warning"
    assert "analysis was not persisted" in body["warnings"]
    assert body["analysis"]["metrics"]["complexity_score"] == 18


def test_insights_are_merged_and_stored(client, triangle_services):
    body = client.post(
        "/insights",
        json={"project_id": "p2", "services": triangle_services},
    ).json()

    assert body["status"] == "success"
    assert body["insights"]["health_assessment"].startswith("Healthy")
    assert body["analysis"]["insights"]["recommendations"][0]["priority"] == "high"

    stored = client.get("/projects/p2/dependency-graph").json()
    assert stored["insights"]["risks"]


@pytest.mark.parametrize(
    "llm",
    [StubClient(error=requests.Timeout("slow")), StubClient(reply="I cannot help with that")],
)
def test_insights_failure_keeps_analysis(client, triangle_services):
    body = client.post("/insights", json={"services": triangle_services}).json()

    assert body["status"] == "warning"
    assert body["insights"] is None
    assert body["insights_error"]
    assert body["analysis"]["metrics"]["complexity_score"] == 18


def test_stream_sends_analysis_then_insights(client, triangle_services):
    response = client.post("/analyze/stream", json={"services": triangle_services})
    events = [
        json.loads(line[len("data: "):])
        for line in response.text.splitlines()
        if line.startswith("data: ")
    ]

    assert [e["stage"] for e in events] == ["analysis", "insights"]
    assert events[0]["result"]["analysis"]["metrics"]["complexity_score"] == 18
    assert events[1]["status"] == "complete"


@pytest.mark.parametrize("llm", [StubClient(error=requests.ConnectionError("down"))])
def test_stream_reports_insights_failure(client, triangle_services):
    response = client.post("/analyze/stream", json={"services": triangle_services})
    events = [json.loads(l[6:]) for l in response.text.splitlines() if l.startswith("data: ")]

    assert events[0]["stage"] == "analysis"
    assert events[1]["stage"] == "insights"
    assert events[1]["status"] == "failed"
    assert "down" in events[1]["message"]


def test_export_svg(client, triangle_services):
    response = client.post("/export/svg", json={"project_name": "Shop", "services": triangle_services})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert "Shop-dependency-graph.svg" in response.headers["content-disposition"]
    assert response.text.count("<circle") == 4


def test_export_json(client, triangle_services):
    response = client.post("/export/json", json={"project_name": "Shop", "services": triangle_services})
    document = response.json()

    assert "Shop-dependency-graph.json" in response.headers["content-disposition"]
    assert document["project"] == "Shop"
    assert document["analysis"]["orphaned_nodes"] == ["D"]


def test_export_mermaid(client, triangle_services):
    body = client.post("/export/mermaid", json={"services": triangle_services}).json()

    assert body["diagram"]["type"] == "mermaid"
    assert body["diagram"]["source"].startswith("flowchart LR")


class ErrorBodyResponse:
    status_code = 200

    def raise_for_status(self):
        pass

    def json(self):
        return {"error": {"message": "model overloaded"}}


@pytest.mark.parametrize("llm", [ChatCompletionsClient(base_url="http://llm.test/v1", model="m")])
def test_provider_error_body_keeps_analysis(client, triangle_services, monkeypatch):
    monkeypatch.setattr(
        "app.inference.chat_completions_client.requests.post",
        lambda *args, **kwargs: ErrorBodyResponse(),
    )

    response = client.post("/insights", json={"services": triangle_services})
    body = response.json()

    assert response.status_code == 200
    assert body["status"] == "warning"
    assert body["insights"] is None
    assert body["insights_error"]
    assert body["analysis"]["metrics"]["complexity_score"] == 18

    streamed = client.post("/analyze/stream", json={"services": triangle_services})
    events = [json.loads(l[6:]) for l in streamed.text.splitlines() if l.startswith("data: ")]

    assert events[0]["result"]["analysis"]["metrics"]["complexity_score"] == 18
    assert events[1]["status"] == "failed"


def test_analyze_accepts_null_name_and_category(client):
    response = client.post(
        "/analyze",
        json={"services": [
            {"id": "api", "name": None, "category": None, "depends_on": ["db"]},
            {"id": "db", "name": "Database"},
        ]},
    )
    body = response.json()

    assert response.status_code == 200
    assert body["analysis"]["metrics"]["total_edges"] == 1
    assert body["graph"]["nodes"][0]["name"] == "api"

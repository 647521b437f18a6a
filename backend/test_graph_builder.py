"""
Tests for service ingestion and graph construction.
"""

from app.ir.service_ir import Service
from app.ir.graph_ir import Edge
from app.pipeline.context import AnalysisContext
from app.pipeline.graph_builder import GraphBuilder, build_graph
from app.schemas import ServiceRecord


def test_service_from_loose_record_defaults():
    svc = Service.from_record({"id": "orders"})

    assert svc.id == "orders"
    assert svc.name == ""
    assert svc.display_name == "orders"
    assert svc.category == ""
    assert svc.depends_on == ()


def test_service_malformed_depends_on_is_empty():
    assert Service.from_record({"id": "a", "depends_on": None}).depends_on == ()
    assert Service.from_record({"id": "a", "depends_on": "b"}).depends_on == ()
    assert Service.from_record({"id": "a", "depends_on": ["b", 3, None]}).depends_on == ("b",)


def test_service_accepts_camel_case_alias():
    svc = Service.from_record({"id": "a", "dependsOn": ["b", "c"]})
    assert svc.depends_on == ("b", "c")


def test_service_from_pydantic_record():
    record = ServiceRecord.model_validate({"id": "a", "name": "Api", "dependsOn": ["b"]})
    svc = Service.from_record(record)

    assert svc.name == "Api"
    assert svc.depends_on == ("b",)


def test_service_without_id_is_rejected():
    assert Service.from_record({"name": "nameless"}) is None
    assert Service.from_record({"id": "   "}) is None
    assert Service.from_record({"id": 42}) is None


def test_build_graph_keeps_order_duplicates_and_dangling_edges():
    services = [
        Service(id="a", name="A", depends_on=("b", "b", "ghost")),
        Service(id="b", name="B"),
    ]
    snapshot = build_graph(services)

    assert snapshot.node_ids() == ["a", "b"]
    assert snapshot.edges == (
        Edge("a", "b"),
        Edge("a", "b"),
        Edge("a", "ghost"),
    )
    assert snapshot.dangling_edges() == [Edge("a", "ghost")]


def test_snapshot_search_is_case_insensitive():
    snapshot = build_graph([
        Service(id="1", name="Order Service"),
        Service(id="2", name="Payment Gateway"),
        Service(id="3", name="order history"),
    ])

    assert [n.id for n in snapshot.search("ORDER")] == ["1", "3"]
    assert len(snapshot.search("")) == 3


def test_graph_builder_stage_reports_warnings():
    context = AnalysisContext(service_records=[
        {"id": "a", "depends_on": ["missing"]},
        {"id": "a", "depends_on": []},
    ])
    result = GraphBuilder().run(context)

    assert result.is_valid
    assert len(context.snapshot.nodes) == 2
    assert result.warnings == [
        "duplicate service id a",
        "a depends on unknown service missing",
    ]


def test_graph_builder_stage_fails_on_missing_id():
    context = AnalysisContext(service_records=[{"id": "ok"}, {"name": "broken"}])
    result = GraphBuilder().run(context)

    assert not result.is_valid
    assert result.errors[0].object_id == "#1"
    assert context.snapshot is None

# backend/app/pipeline/graph_builder.py

from typing import Iterable, List

from app.pipeline.stage import PipelineStage
from app.pipeline.context import AnalysisContext
from app.ir.errors import ValidationError
from app.ir.validation import ValidationResult
from app.ir.service_ir import Service
from app.ir.graph_ir import GraphSnapshot, Node, Edge


def build_graph(services: Iterable[Service]) -> GraphSnapshot:
    """
    One node per service, one edge per declared dependency.

    Edges are emitted even when the target id is unknown (dangling),
    and duplicates are preserved.
    """
    nodes: List[Node] = []
    edges: List[Edge] = []

    for svc in services:
        nodes.append(Node(id=svc.id, name=svc.display_name, category=svc.category))
        for dep_id in svc.depends_on:
            edges.append(Edge(source=svc.id, target=dep_id))

    return GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges))


class GraphBuilder(PipelineStage):
    """
    Ingests loose service records into typed Services and builds the
    immutable GraphSnapshot for this run.
    """

    name = "graph_builder"

    def run(self, context: AnalysisContext) -> ValidationResult:
        services: List[Service] = []
        errors: List[ValidationError] = []

        for position, record in enumerate(context.service_records):
            svc = Service.from_record(record)
            if svc is None:
                errors.append(
                    ValidationError(
                        level="ingestion",
                        message="service record has no usable id",
                        object_id=f"#{position}",
                    )
                )
                continue
            services.append(svc)

        if errors:
            return ValidationResult.failure(errors)

        warnings: List[str] = []

        seen: set[str] = set()
        for svc in services:
            if svc.id in seen:
                warnings.append(f"duplicate service id {svc.id}")
            seen.add(svc.id)

        context.services = services
        context.snapshot = build_graph(services)

        # Dangling references are data quality issues, not failures
        for edge in context.snapshot.dangling_edges():
            warnings.append(f"{edge.source} depends on unknown service {edge.target}")

        return ValidationResult.success(warnings)

# backend/app/pipeline/metrics_calculator.py

from collections import defaultdict
from typing import Dict

from app.pipeline.stage import PipelineStage
from app.pipeline.context import AnalysisContext
from app.ir.validation import ValidationResult
from app.ir.graph_ir import GraphSnapshot


def compute_degrees(snapshot: GraphSnapshot) -> Dict[str, int]:
    """
    Total degree (in + out) of every node, in node input order.
    Dangling edges still count for the endpoint that exists.
    """
    counts: Dict[str, int] = defaultdict(int)
    for edge in snapshot.edges:
        counts[edge.source] += 1
        counts[edge.target] += 1

    return {node.id: counts.get(node.id, 0) for node in snapshot.nodes}


class MetricsCalculator(PipelineStage):
    name = "metrics"

    def run(self, context: AnalysisContext) -> ValidationResult:
        snapshot = context.snapshot or GraphSnapshot()
        degrees = compute_degrees(snapshot)

        # Per-node values (duplicate ids are counted once per node)
        per_node = [degrees[node.id] for node in snapshot.nodes]

        context.degrees = degrees
        context.total_nodes = len(snapshot.nodes)
        context.total_edges = len(snapshot.edges)
        context.max_degree = max(per_node, default=0)
        context.avg_degree = (
            sum(per_node) / context.total_nodes if context.total_nodes else 0.0
        )

        return ValidationResult.success()

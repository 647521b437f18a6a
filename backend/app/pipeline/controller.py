from typing import Any, List, Sequence

from app.pipeline.context import AnalysisContext
from app.pipeline.graph_builder import GraphBuilder
from app.pipeline.metrics_calculator import MetricsCalculator
from app.pipeline.topology_analyzer import TopologyAnalyzer
from app.pipeline.cycle_detector import CycleDetector
from app.pipeline.complexity_scorer import ComplexityScorer
from app.pipeline.layout_engine import LayoutEngine
from app.ir.analysis_ir import AnalysisResult
from app.ir.errors import ValidationError


class AnalysisError(Exception):
    """Raised by analyze() when the input cannot be ingested."""

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        super().__init__("; ".join(f"{e.object_id}: {e.message}" for e in errors))


class AnalysisController:
    """
    Runs the deterministic analysis stages in order on a fresh context.

    Topology and cycle detection only read metrics and the snapshot, so
    their relative order does not matter.
    """

    def __init__(
        self,
        hotspot_multiplier: float | None = None,
        high_risk_multiplier: float | None = None,
        max_cycles: int | None = None,
    ):
        self.stages = [
            GraphBuilder(),
            MetricsCalculator(),
            TopologyAnalyzer(
                hotspot_multiplier=hotspot_multiplier,
                high_risk_multiplier=high_risk_multiplier,
            ),
            CycleDetector(max_cycles=max_cycles),
            ComplexityScorer(),
            LayoutEngine(),
        ]

    def run(self, service_records: Sequence[Any]) -> AnalysisContext:
        context = AnalysisContext(service_records=list(service_records or []))

        for stage in self.stages:
            result = stage.run(context)

            context.warnings.extend(result.warnings)

            # Hard stop on failure
            if not result.is_valid:
                print(f"[Analyze] Stage '{stage.name}' failed: {len(result.errors)} error(s)")
                context.errors.extend(result.errors)
                break

        return context


def analyze(service_records: Sequence[Any], **options) -> AnalysisResult:
    """
    Pure, synchronous analysis of one service list snapshot.
    Insights are never fetched here.
    """
    context = AnalysisController(**options).run(service_records)
    if context.errors:
        raise AnalysisError(context.errors)
    return context.to_result()

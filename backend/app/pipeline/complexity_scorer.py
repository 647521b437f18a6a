# backend/app/pipeline/complexity_scorer.py

import math

from app.pipeline.stage import PipelineStage
from app.pipeline.context import AnalysisContext
from app.ir.validation import ValidationResult

EDGE_DENSITY_WEIGHT = 10
HOTSPOT_WEIGHT = 5
CYCLE_WEIGHT = 10


def score_complexity(
    total_nodes: int,
    total_edges: int,
    hotspot_count: int,
    cycle_count: int,
) -> int:
    if total_nodes == 0:
        return 0

    raw = (
        (total_edges / total_nodes) * EDGE_DENSITY_WEIGHT
        + hotspot_count * HOTSPOT_WEIGHT
        + cycle_count * CYCLE_WEIGHT
    )
    # Half-up, not banker's rounding: 17.5 -> 18
    return math.floor(raw + 0.5)


class ComplexityScorer(PipelineStage):
    name = "complexity"

    def run(self, context: AnalysisContext) -> ValidationResult:
        context.complexity_score = score_complexity(
            context.total_nodes,
            context.total_edges,
            len(context.hotspots),
            len(context.cycles),
        )
        return ValidationResult.success()

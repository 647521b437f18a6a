# backend/app/pipeline/layout_engine.py

import math
from typing import Sequence

from app import config
from app.pipeline.stage import PipelineStage
from app.pipeline.context import AnalysisContext
from app.ir.validation import ValidationResult
from app.ir.graph_ir import GraphLayout, NodePosition


def circular_layout(
    node_ids: Sequence[str],
    radius: float = 150,
    center_x: float = 300,
    center_y: float = 200,
) -> GraphLayout:
    """
    Places node i of n at angle i/n * 2pi on a fixed circle.
    Same node order in, same coordinates out.
    """
    count = len(node_ids)
    positions = []

    for index, node_id in enumerate(node_ids):
        angle = (index / count) * 2 * math.pi
        positions.append(
            NodePosition(
                node_id=node_id,
                x=center_x + radius * math.cos(angle),
                y=center_y + radius * math.sin(angle),
            )
        )

    return GraphLayout(
        radius=radius,
        center_x=center_x,
        center_y=center_y,
        positions=tuple(positions),
    )


class LayoutEngine(PipelineStage):
    name = "layout"

    def __init__(
        self,
        radius: float | None = None,
        center_x: float | None = None,
        center_y: float | None = None,
    ):
        self.radius = config.LAYOUT_RADIUS if radius is None else radius
        self.center_x = config.LAYOUT_CENTER_X if center_x is None else center_x
        self.center_y = config.LAYOUT_CENTER_Y if center_y is None else center_y

    def run(self, context: AnalysisContext) -> ValidationResult:
        node_ids = context.snapshot.node_ids() if context.snapshot else []
        context.layout = circular_layout(
            node_ids,
            radius=self.radius,
            center_x=self.center_x,
            center_y=self.center_y,
        )
        return ValidationResult.success()

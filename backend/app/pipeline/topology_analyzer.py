# backend/app/pipeline/topology_analyzer.py

from typing import Dict, List

from app import config
from app.pipeline.stage import PipelineStage
from app.pipeline.context import AnalysisContext
from app.ir.validation import ValidationResult
from app.ir.graph_ir import GraphSnapshot
from app.ir.analysis_ir import Hotspot


def find_orphans(snapshot: GraphSnapshot) -> List[str]:
    connected: set[str] = set()
    for edge in snapshot.edges:
        connected.add(edge.source)
        connected.add(edge.target)

    return [node.id for node in snapshot.nodes if node.id not in connected]


def find_hotspots(
    snapshot: GraphSnapshot,
    degrees: Dict[str, int],
    avg_degree: float,
    hotspot_multiplier: float = 2.0,
    high_risk_multiplier: float = 3.0,
) -> List[Hotspot]:
    """
    Nodes whose degree strictly exceeds hotspot_multiplier x average.
    Anything strictly above high_risk_multiplier x average is "high".
    """
    hotspots: List[Hotspot] = []

    for node in snapshot.nodes:
        degree = degrees.get(node.id, 0)
        if not degree > avg_degree * hotspot_multiplier:
            continue

        risk = "high" if degree > avg_degree * high_risk_multiplier else "medium"
        hotspots.append(Hotspot(node_id=node.id, degree=degree, risk_level=risk))

    return hotspots


class TopologyAnalyzer(PipelineStage):
    """
    Flags orphaned services (no edges at all) and coupling hotspots.
    """

    name = "topology"

    def __init__(
        self,
        hotspot_multiplier: float | None = None,
        high_risk_multiplier: float | None = None,
    ):
        self.hotspot_multiplier = (
            config.HOTSPOT_MULTIPLIER if hotspot_multiplier is None else hotspot_multiplier
        )
        self.high_risk_multiplier = (
            config.HIGH_RISK_MULTIPLIER if high_risk_multiplier is None else high_risk_multiplier
        )

    def run(self, context: AnalysisContext) -> ValidationResult:
        snapshot = context.snapshot or GraphSnapshot()

        context.orphaned_nodes = find_orphans(snapshot)
        context.hotspots = find_hotspots(
            snapshot,
            context.degrees,
            context.avg_degree,
            hotspot_multiplier=self.hotspot_multiplier,
            high_risk_multiplier=self.high_risk_multiplier,
        )

        return ValidationResult.success()

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from app.ir.service_ir import Service
from app.ir.graph_ir import GraphSnapshot, GraphLayout
from app.ir.analysis_ir import AnalysisResult, GraphMetrics, Hotspot


@dataclass
class AnalysisContext:
    # Raw input (authoritative, never mutated)
    service_records: Sequence[Any]

    # Ingestion
    services: List[Service] = field(default_factory=list)
    snapshot: Optional[GraphSnapshot] = None

    # Metrics
    degrees: Dict[str, int] = field(default_factory=dict)
    total_nodes: int = 0
    total_edges: int = 0
    max_degree: int = 0
    avg_degree: float = 0.0

    # Diagnostics
    orphaned_nodes: List[str] = field(default_factory=list)
    hotspots: List[Hotspot] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)
    complexity_score: int = 0

    # Presentation
    layout: Optional[GraphLayout] = None

    warnings: list[str] = field(default_factory=list)
    errors: list = field(default_factory=list)

    def to_result(self) -> AnalysisResult:
        return AnalysisResult(
            metrics=GraphMetrics(
                total_nodes=self.total_nodes,
                total_edges=self.total_edges,
                max_degree=self.max_degree,
                avg_degree=self.avg_degree,
                complexity_score=self.complexity_score,
            ),
            orphaned_nodes=list(self.orphaned_nodes),
            hotspots=list(self.hotspots),
            cycles=[list(c) for c in self.cycles],
            degrees=dict(self.degrees),
        )

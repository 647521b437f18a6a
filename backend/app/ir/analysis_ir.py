from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional


@dataclass(frozen=True)
class GraphMetrics:
    total_nodes: int = 0
    total_edges: int = 0
    max_degree: int = 0
    avg_degree: float = 0.0
    complexity_score: int = 0

    def to_dict(self) -> dict:
        return {
            "total_nodes": self.total_nodes,
            "total_edges": self.total_edges,
            "max_degree": self.max_degree,
            "avg_degree": self.avg_degree,
            "complexity_score": self.complexity_score,
        }


@dataclass(frozen=True)
class Hotspot:
    node_id: str
    degree: int
    risk_level: Literal["high", "medium"]

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "degree": self.degree,
            "risk_level": self.risk_level,
        }


@dataclass
class Recommendation:
    issue: str
    recommendation: str
    priority: str = "medium"

    def to_dict(self) -> dict:
        return {
            "issue": self.issue,
            "recommendation": self.recommendation,
            "priority": self.priority,
        }


@dataclass
class Insights:
    health_assessment: str = ""
    risks: List[str] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "health_assessment": self.health_assessment,
            "risks": list(self.risks),
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass
class AnalysisResult:
    metrics: GraphMetrics = field(default_factory=GraphMetrics)
    orphaned_nodes: List[str] = field(default_factory=list)
    hotspots: List[Hotspot] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)

    # Per-node degree in input order, kept for renderers and summaries
    degrees: Dict[str, int] = field(default_factory=dict)

    # Filled in later by the insights gateway, never by the analysis itself
    insights: Optional[Insights] = None

    def nodes_in_cycles(self) -> set:
        return {node_id for cycle in self.cycles for node_id in cycle}

    def hotspot_ids(self) -> set:
        return {h.node_id for h in self.hotspots}

    def to_dict(self) -> dict:
        payload = {
            "metrics": self.metrics.to_dict(),
            "orphaned_nodes": list(self.orphaned_nodes),
            "hotspots": [h.to_dict() for h in self.hotspots],
            "cycles": [list(c) for c in self.cycles],
        }
        if self.insights is not None:
            payload["insights"] = self.insights.to_dict()
        return payload

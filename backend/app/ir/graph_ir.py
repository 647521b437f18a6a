from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class Node:
    id: str
    name: str
    category: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "category": self.category}


@dataclass(frozen=True)
class Edge:
    source: str  # the dependent service
    target: str  # the service it depends on

    def to_dict(self) -> dict:
        return {"from": self.source, "to": self.target}


@dataclass(frozen=True)
class GraphSnapshot:
    nodes: Tuple[Node, ...] = field(default_factory=tuple)
    edges: Tuple[Edge, ...] = field(default_factory=tuple)

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def dangling_edges(self) -> List[Edge]:
        known = set(self.node_ids())
        return [e for e in self.edges if e.target not in known]

    def search(self, query: str) -> List[Node]:
        needle = (query or "").lower()
        return [n for n in self.nodes if needle in n.name.lower()]

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


@dataclass(frozen=True)
class NodePosition:
    node_id: str
    x: float
    y: float


@dataclass(frozen=True)
class GraphLayout:
    radius: float
    center_x: float
    center_y: float
    positions: Tuple[NodePosition, ...] = field(default_factory=tuple)

    def by_id(self) -> Dict[str, NodePosition]:
        # Duplicate ids keep the first position
        index: Dict[str, NodePosition] = {}
        for pos in self.positions:
            index.setdefault(pos.node_id, pos)
        return index

    def to_dict(self) -> dict:
        return {
            "radius": self.radius,
            "center": {"x": self.center_x, "y": self.center_y},
            "positions": [
                {"node_id": p.node_id, "x": p.x, "y": p.y}
                for p in self.positions
            ],
        }

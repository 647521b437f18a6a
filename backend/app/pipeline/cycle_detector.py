# backend/app/pipeline/cycle_detector.py

from dataclasses import dataclass, field
from typing import Dict, List

from app import config
from app.pipeline.stage import PipelineStage
from app.pipeline.context import AnalysisContext
from app.ir.validation import ValidationResult
from app.ir.graph_ir import GraphSnapshot


@dataclass
class TraversalState:
    """
    Bookkeeping for one cycle search.

    visited  - nodes fully entered at least once, kept for the whole run
    on_stack - nodes on the current DFS path
    path     - same nodes as on_stack, in path order
    """
    visited: set[str] = field(default_factory=set)
    on_stack: set[str] = field(default_factory=set)
    path: List[str] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)


class CycleDetector(PipelineStage):
    """
    Bounded depth-first search for circular dependencies.

    Reports at most `max_cycles` cycles in discovery order. Results depend
    on node and edge input order; cycles are neither deduplicated nor
    guaranteed to be minimal.
    """

    name = "cycles"

    def __init__(self, max_cycles: int | None = None):
        self.max_cycles = config.MAX_REPORTED_CYCLES if max_cycles is None else max_cycles

    def detect(self, snapshot: GraphSnapshot) -> List[List[str]]:
        adjacency: Dict[str, List[str]] = {}
        for edge in snapshot.edges:
            adjacency.setdefault(edge.source, []).append(edge.target)

        state = TraversalState()

        for node in snapshot.nodes:
            if self._is_full(state):
                break
            if node.id not in state.visited:
                self._visit(node.id, adjacency, state)

        return state.cycles

    def _is_full(self, state: TraversalState) -> bool:
        return len(state.cycles) >= self.max_cycles

    def _enter(self, node_id: str, state: TraversalState):
        state.visited.add(node_id)
        state.on_stack.add(node_id)
        state.path.append(node_id)

    def _visit(self, root: str, adjacency: Dict[str, List[str]], state: TraversalState):
        # Explicit frame stack so long dependency chains do not hit the recursion limit
        self._enter(root, state)
        frames = [(root, iter(adjacency.get(root, [])))]

        while frames:
            node_id, targets = frames[-1]
            target = None if self._is_full(state) else next(targets, None)

            if target is None:
                # Only leave the stack once every outgoing edge has been explored
                frames.pop()
                state.path.pop()
                state.on_stack.discard(node_id)
                continue

            if target not in state.visited:
                self._enter(target, state)
                frames.append((target, iter(adjacency.get(target, []))))
            elif target in state.on_stack:
                start = state.path.index(target)
                state.cycles.append(state.path[start:] + [target])

    def run(self, context: AnalysisContext) -> ValidationResult:
        context.cycles = self.detect(context.snapshot or GraphSnapshot())
        return ValidationResult.success()


def detect_cycles(snapshot: GraphSnapshot, max_cycles: int = 5) -> List[List[str]]:
    return CycleDetector(max_cycles=max_cycles).detect(snapshot)

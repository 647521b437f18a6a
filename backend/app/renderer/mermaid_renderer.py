# backend/app/renderer/mermaid_renderer.py

import re

from app.ir.graph_ir import GraphSnapshot
from app.ir.analysis_ir import AnalysisResult
from app.renderer.node_style import NODE_STYLE, node_status


def _mermaid_ids(snapshot: GraphSnapshot) -> dict:
    """Map each service id to a Mermaid identifier, unique across the graph.

    Sanitising can fold distinct ids together ("a-b" and "a_b"), so later
    ids that land on a taken identifier get a numeric suffix.
    """
    ids = {}
    taken = set()
    for node in snapshot.nodes:
        if node.id in ids:
            continue
        base = "n_" + re.sub(r"[^A-Za-z0-9_]", "_", node.id)
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}_{suffix}"
            suffix += 1
        taken.add(candidate)
        ids[node.id] = candidate
    return ids


def render_mermaid(snapshot: GraphSnapshot, result: AnalysisResult) -> str:
    lines = ["flowchart LR"]

    # -------------------------
    # Status classes
    # -------------------------
    for status, style in NODE_STYLE.items():
        lines.append(f"  classDef {status} fill:{style['color']},color:#fff")

    # -------------------------
    # Nodes
    # -------------------------
    ids = _mermaid_ids(snapshot)
    drawn = set()
    for node in snapshot.nodes:
        if node.id in drawn:
            continue
        drawn.add(node.id)

        label = node.name.replace('"', "'")
        lines.append(
            f'  {ids[node.id]}["{label}"]:::{node_status(node.id, result)}'
        )

    # -------------------------
    # Edges (dangling references are not drawn)
    # -------------------------
    for edge in snapshot.edges:
        if edge.source not in ids or edge.target not in ids:
            continue
        lines.append(f"  {ids[edge.source]} --> {ids[edge.target]}")

    return "\n".join(lines)

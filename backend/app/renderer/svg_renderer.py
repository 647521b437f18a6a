from xml.sax.saxutils import escape, quoteattr

from app.ir.graph_ir import GraphSnapshot, GraphLayout
from app.ir.analysis_ir import AnalysisResult
from app.renderer.node_style import NODE_STYLE, EDGE_COLOR, node_status, short_label

NODE_RADIUS = 20


def render_svg(
    snapshot: GraphSnapshot,
    layout: GraphLayout,
    result: AnalysisResult,
) -> str:
    width = layout.center_x * 2
    height = layout.center_y * 2

    svg = [
        f'<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">',
        "<defs>",
        '<marker id="arrowhead-dep" markerWidth="10" markerHeight="10" '
        'refX="9" refY="3" orient="auto">',
        f'<polygon points="0 0, 10 3, 0 6" fill="{EDGE_COLOR}"/>',
        "</marker>",
        "</defs>",
    ]

    positions = layout.by_id()

    # Draw edges first; dangling references have nothing to point at
    for e in snapshot.edges:
        src = positions.get(e.source)
        dst = positions.get(e.target)
        if src is None or dst is None:
            continue

        svg.append(
            f'<line x1="{src.x}" y1="{src.y}" x2="{dst.x}" y2="{dst.y}" '
            f'stroke="{EDGE_COLOR}" stroke-width="2" opacity="0.6" '
            f'marker-end="url(#arrowhead-dep)"/>'
        )

    # Draw nodes
    for node, pos in zip(snapshot.nodes, layout.positions):
        color = NODE_STYLE[node_status(node.id, result)]["color"]
        degree = result.degrees.get(node.id, 0)

        svg.append(f'<g data-node-id={quoteattr(node.id)}>')
        svg.append(
            f'<circle cx="{pos.x}" cy="{pos.y}" r="{NODE_RADIUS}" '
            f'fill="{color}" stroke="white" stroke-width="3"/>'
        )
        svg.append(
            f'<text x="{pos.x}" y="{pos.y + 35}" '
            f'text-anchor="middle" font-family="Arial" font-size="12">'
            f'{escape(short_label(node.name))}</text>'
        )
        if degree > 0:
            svg.append(
                f'<text x="{pos.x}" y="{pos.y + 5}" '
                f'text-anchor="middle" font-family="Arial" font-size="12" '
                f'font-weight="bold" fill="white">{degree}</text>'
            )
        svg.append("</g>")

    svg.append("</svg>")
    return "\n".join(svg)

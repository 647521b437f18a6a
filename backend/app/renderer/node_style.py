from app.ir.analysis_ir import AnalysisResult

NODE_STYLE = {
    "normal": {
        "color": "#3b82f6",
        "label": "Normal",
    },
    "orphaned": {
        "color": "#eab308",
        "label": "Orphaned",
    },
    "hotspot": {
        "color": "#f97316",
        "label": "Hotspot",
    },
    "in_cycle": {
        "color": "#ef4444",
        "label": "In Cycle",
    },
}

EDGE_COLOR = "#94a3b8"
LABEL_MAX_CHARS = 12


def node_status(node_id: str, result: AnalysisResult) -> str:
    # Precedence: cycle > hotspot > orphan
    if node_id in result.nodes_in_cycles():
        return "in_cycle"
    if node_id in result.hotspot_ids():
        return "hotspot"
    if node_id in result.orphaned_nodes:
        return "orphaned"
    return "normal"


def short_label(name: str) -> str:
    return name[:LABEL_MAX_CHARS]

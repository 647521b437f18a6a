from datetime import datetime, timezone
from enum import Enum
from typing import Any

from app.ir.graph_ir import GraphSnapshot
from app.ir.analysis_ir import AnalysisResult


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize_ir(obj: Any):
    """
    Serialize IR objects into JSON-compatible structures.
    Prefers an object's own to_dict(); deterministic key order.
    """

    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, Enum):
        return obj.value

    if hasattr(obj, "to_dict"):
        return serialize_ir(obj.to_dict())

    if isinstance(obj, (list, tuple)):
        return [serialize_ir(item) for item in obj]

    if isinstance(obj, (set, frozenset)):
        return sorted(serialize_ir(item) for item in obj)

    if isinstance(obj, dict):
        return {str(k): serialize_ir(v) for k, v in obj.items()}

    if hasattr(obj, "__dict__"):
        return {
            key: serialize_ir(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    return str(obj)


def build_json_export(
    project_name: str,
    snapshot: GraphSnapshot,
    result: AnalysisResult,
    timestamp: datetime | None = None,
) -> dict:
    """Downloadable {project, timestamp, graph, analysis} document."""
    moment = timestamp or datetime.now(timezone.utc)
    graph = serialize_ir(snapshot)
    for node in graph["nodes"]:
        node["degree"] = result.degrees.get(node["id"], 0)

    return {
        "project": project_name,
        "timestamp": moment.isoformat(),
        "graph": graph,
        "analysis": serialize_ir(result),
    }


def export_filename(project_name: str, extension: str) -> str:
    slug = "".join(c if c.isalnum() or c in "-_" else "-" for c in project_name.strip())
    return f"{slug or 'project'}-dependency-graph.{extension}"

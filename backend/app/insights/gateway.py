"""
Insights gateway - LLM advisory narrative for a finished analysis.

Kept apart from the analysis pipeline: callers run `analyze()` first,
hand the result out, and only then ask for insights. Any failure here
leaves the analysis untouched.
"""

import asyncio
from dataclasses import replace
from typing import Any, Dict, List, Sequence

import requests

from app.inference.base import LLMClient
from app.inference.prompt import INSIGHTS_SYSTEM_PROMPT, INSIGHTS_USER_TEMPLATE
from app.ir.analysis_ir import AnalysisResult, Insights, Recommendation
from app.ir.service_ir import Service
from app.utils.json_extract import extract_json


class InsightsError(Exception):
    """The advisory call failed or returned nothing usable."""


class InsightsTimeout(InsightsError):
    """The advisory call did not finish within the allotted time."""


# ============================================================
# PAYLOAD
# ============================================================

def _as_services(services: Sequence[Any]) -> List[Service]:
    typed = []
    for record in services or []:
        svc = record if isinstance(record, Service) else Service.from_record(record)
        if svc is not None:
            typed.append(svc)
    return typed


def build_insights_payload(result: AnalysisResult, services: Sequence[Any]) -> Dict[str, Any]:
    analysis = result.to_dict()
    return {
        "metrics": analysis["metrics"],
        "orphanedNodes": analysis["orphaned_nodes"],
        "hotspots": analysis["hotspots"],
        "cycles": analysis["cycles"],
        "serviceSummaries": [
            {
                "name": svc.display_name,
                "category": svc.category,
                "dependencyCount": len(svc.depends_on),
            }
            for svc in _as_services(services)
        ],
    }


def build_messages(payload: Dict[str, Any], names: Dict[str, str] | None = None) -> List[Dict]:
    names = names or {}
    metrics = payload["metrics"]

    cycle_lines = "".join(
        "  - " + " -> ".join(names.get(node_id, node_id) for node_id in cycle) + "\n"
        for cycle in payload["cycles"]
    )
    service_lines = "\n".join(
        f"- {s['name']} ({s['category'] or 'uncategorized'}): {s['dependencyCount']} dependencies"
        for s in payload["serviceSummaries"]
    )

    user_prompt = INSIGHTS_USER_TEMPLATE.format(
        total_nodes=metrics["total_nodes"],
        total_edges=metrics["total_edges"],
        max_degree=metrics["max_degree"],
        avg_degree=metrics["avg_degree"],
        complexity_score=metrics["complexity_score"],
        orphan_count=len(payload["orphanedNodes"]),
        hotspot_count=len(payload["hotspots"]),
        cycle_count=len(payload["cycles"]),
        cycle_lines=cycle_lines,
        service_lines=service_lines or "- (none)",
    )

    return [
        {"role": "system", "content": INSIGHTS_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


# ============================================================
# RESPONSE (LLM TRUST BOUNDARY)
# ============================================================

def parse_insights(text: str) -> Insights:
    """
    Shape check only: wrong-typed fields fall back to empty values.
    Raises InsightsError when no JSON object can be found at all.
    """
    data = extract_json(text)
    if not data:
        raise InsightsError("advisory response contained no JSON object")

    assessment = data.get("health_assessment")
    risks = data.get("risks")
    recommendations = data.get("recommendations")

    parsed_recommendations = []
    for item in recommendations if isinstance(recommendations, list) else []:
        if not isinstance(item, dict):
            continue
        parsed_recommendations.append(
            Recommendation(
                issue=str(item.get("issue", "")),
                recommendation=str(item.get("recommendation", "")),
                priority=str(item.get("priority") or "medium").lower(),
            )
        )

    return Insights(
        health_assessment=assessment if isinstance(assessment, str) else "",
        risks=[r for r in risks if isinstance(r, str)] if isinstance(risks, list) else [],
        recommendations=parsed_recommendations,
    )


# ============================================================
# CALLS
# ============================================================

def fetch_insights(
    result: AnalysisResult,
    services: Sequence[Any],
    client: LLMClient,
) -> Insights:
    typed = _as_services(services)
    payload = build_insights_payload(result, typed)
    messages = build_messages(payload, {svc.id: svc.display_name for svc in typed})

    try:
        raw = client.generate(messages)
    except requests.RequestException as e:
        raise InsightsError(f"advisory call failed: {e}") from e
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        # Provider answered, but not with a chat completion body
        raise InsightsError(f"advisory response was malformed: {e!r}") from e

    return parse_insights(raw)


async def fetch_insights_async(
    result: AnalysisResult,
    services: Sequence[Any],
    client: LLMClient,
    timeout: float,
) -> Insights:
    """
    Runs the blocking advisory call in a worker thread.

    Cancelling the awaiting task or hitting `timeout` abandons the wait
    immediately; the worker itself is bounded by the client's own HTTP
    timeout.
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(fetch_insights, result, services, client),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise InsightsTimeout(f"advisory call exceeded {timeout}s") from e


def merge_insights(result: AnalysisResult, insights: Insights | None) -> AnalysisResult:
    """Attach insights without touching any computed field."""
    return replace(result, insights=insights)

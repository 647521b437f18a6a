import json
import traceback
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import config
from app.schemas import AnalyzeRequest, InsightsRequest
from app.api.serializers import serialize_ir, build_json_export, export_filename
from app.pipeline.controller import AnalysisController
from app.pipeline.context import AnalysisContext
from app.insights import InsightsError, fetch_insights_async, merge_insights
from app.inference.base import LLMClient
from app.inference.config import get_llm_client
from app.renderer.svg_renderer import render_svg
from app.renderer.mermaid_renderer import render_mermaid
from app.db.session import get_db
from app.db.repository import get_latest_analysis, save_latest_analysis, attach_insights

router = APIRouter()


def get_insights_client() -> LLMClient:
    return get_llm_client()


# ============================================================
# HELPERS
# ============================================================

def _run_analysis(request: AnalyzeRequest) -> AnalysisContext:
    controller = AnalysisController(
        hotspot_multiplier=request.hotspot_multiplier,
        high_risk_multiplier=request.high_risk_multiplier,
        max_cycles=request.max_cycles,
    )
    context = controller.run(request.services)

    if context.errors:
        raise HTTPException(
            status_code=422,
            detail=[e.to_dict() for e in context.errors],
        )

    return context


def _analysis_payload(context: AnalysisContext, request: AnalyzeRequest) -> dict:
    result = context.to_result()

    graph = serialize_ir(context.snapshot)
    for node in graph["nodes"]:
        node["degree"] = context.degrees.get(node["id"], 0)

    payload = {
        "status": "success" if not context.warnings else "warning",
        "graph": graph,
        "analysis": serialize_ir(result),
        "layout": serialize_ir(context.layout),
        "warnings": list(context.warnings),
    }

    if request.search is not None:
        payload["matches"] = [n.id for n in context.snapshot.search(request.search)]

    return payload


def _persist(db: Session, request: AnalyzeRequest, context: AnalysisContext, payload: dict):
    if not request.project_id:
        return

    try:
        save_latest_analysis(db, request.project_id, context.snapshot, context.to_result())
    except SQLAlchemyError as e:
        db.rollback()
        print(f"[DB] Warning: could not persist analysis for {request.project_id}: {e}")
        payload["warnings"].append("analysis was not persisted")
        payload["status"] = "warning"


# ============================================================
# ANALYSIS
# ============================================================

@router.post("/analyze")
def analyze_dependencies(request: AnalyzeRequest, db: Session = Depends(get_db)):
    """
    Deterministic dependency analysis. Never calls the LLM.
    """
    context = _run_analysis(request)

    try:
        payload = _analysis_payload(context, request)
        _persist(db, request, context, payload)

        metrics = payload["analysis"]["metrics"]
        print(
            f"[Analyze] {metrics['total_nodes']} services, {metrics['total_edges']} dependencies, "
            f"complexity {metrics['complexity_score']}"
        )
        return payload

    except Exception as e:
        traceback.print_exc()
        return {
            "status": "error",
            "message": str(e),
        }


@router.post("/insights")
async def analyze_with_insights(
    request: InsightsRequest,
    db: Session = Depends(get_db),
    client: LLMClient = Depends(get_insights_client),
):
    """
    Analysis plus LLM advisory text. The analysis is returned even when
    the advisory call fails or times out.
    """
    context = _run_analysis(request)
    payload = _analysis_payload(context, request)
    _persist(db, request, context, payload)

    timeout = request.timeout_seconds or config.INSIGHTS_TIMEOUT_SECONDS

    try:
        insights = await fetch_insights_async(
            context.to_result(), context.services, client, timeout=timeout
        )
    except InsightsError as e:
        print(f"[Insights] Warning: {e}")
        payload["insights"] = None
        payload["insights_error"] = str(e)
        payload["status"] = "warning"
        return payload

    payload["analysis"] = serialize_ir(merge_insights(context.to_result(), insights))
    payload["insights"] = insights.to_dict()

    if request.project_id:
        try:
            attach_insights(db, request.project_id, insights)
        except SQLAlchemyError as e:
            db.rollback()
            print(f"[DB] Warning: could not store insights for {request.project_id}: {e}")

    return payload


@router.post("/analyze/stream")
async def analyze_stream(
    request: InsightsRequest,
    client: LLMClient = Depends(get_insights_client),
):
    """
    Server-Sent Events: the analysis first, then the insights (or the
    reason they are missing). Nothing is persisted here.
    """
    context = _run_analysis(request)
    payload = _analysis_payload(context, request)
    timeout = request.timeout_seconds or config.INSIGHTS_TIMEOUT_SECONDS

    async def event_generator() -> AsyncGenerator[str, None]:
        yield f"data: {json.dumps({'stage': 'analysis', 'status': 'complete', 'result': payload})}\n\n"

        try:
            insights = await fetch_insights_async(
                context.to_result(), context.services, client, timeout=timeout
            )
        except InsightsError as e:
            print(f"[Insights] Warning: {e}")
            error_event = {"stage": "insights", "status": "failed", "message": str(e)}
            yield f"data: {json.dumps(error_event)}\n\n"
            return

        yield f"data: {json.dumps({'stage': 'insights', 'status': 'complete', 'insights': insights.to_dict()})}\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        }
    )


@router.get("/projects/{project_id}/dependency-graph")
def latest_dependency_graph(project_id: str, db: Session = Depends(get_db)):
    record = get_latest_analysis(db, project_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No analysis stored for project '{project_id}'")
    return record.to_dict()


# ============================================================
# EXPORTS
# ============================================================

@router.post("/export/json")
def export_json(request: AnalyzeRequest):
    context = _run_analysis(request)
    project_name = request.project_name or request.project_id or "project"

    document = build_json_export(project_name, context.snapshot, context.to_result())
    return JSONResponse(
        document,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(project_name, "json")}"'
        },
    )


@router.post("/export/svg")
def export_svg(request: AnalyzeRequest):
    context = _run_analysis(request)
    project_name = request.project_name or request.project_id or "project"

    svg = render_svg(context.snapshot, context.layout, context.to_result())
    return Response(
        svg,
        media_type="image/svg+xml",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(project_name, "svg")}"'
        },
    )


@router.post("/export/mermaid")
def export_mermaid(request: AnalyzeRequest):
    context = _run_analysis(request)
    return {
        "diagram": {
            "type": "mermaid",
            "source": render_mermaid(context.snapshot, context.to_result()),
        }
    }


@router.get("/health")
def health():
    return {"status": "ok"}

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import DependencyGraphRecord
from app.ir.graph_ir import GraphSnapshot
from app.ir.analysis_ir import AnalysisResult, Insights


def get_latest_analysis(db: Session, project_id: str) -> Optional[DependencyGraphRecord]:
    return db.execute(
        select(DependencyGraphRecord).where(DependencyGraphRecord.project_id == project_id)
    ).scalar_one_or_none()


def save_latest_analysis(
    db: Session,
    project_id: str,
    snapshot: GraphSnapshot,
    result: AnalysisResult,
) -> DependencyGraphRecord:
    """
    Upsert the project's single "latest analysis" row.
    Previous insights are cleared: they described the old graph.
    """
    analysis = result.to_dict()

    record = get_latest_analysis(db, project_id)
    if record is None:
        record = DependencyGraphRecord(project_id=project_id)
        db.add(record)

    record.graph_data = snapshot.to_dict()
    record.metrics = analysis.pop("metrics")
    analysis.pop("insights", None)
    record.analysis = analysis
    record.insights = None

    db.commit()
    db.refresh(record)
    return record


def attach_insights(db: Session, project_id: str, insights: Insights) -> Optional[DependencyGraphRecord]:
    record = get_latest_analysis(db, project_id)
    if record is None:
        return None

    record.insights = insights.to_dict()
    db.commit()
    db.refresh(record)
    return record

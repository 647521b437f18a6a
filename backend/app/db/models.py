from sqlalchemy import Column, Integer, String, JSON, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class DependencyGraphRecord(Base):
    """Latest analysis per project; overwritten on every run."""

    __tablename__ = "dependency_graphs"

    id = Column(Integer, primary_key=True)
    project_id = Column(String(255), nullable=False, unique=True, index=True)
    graph_data = Column(JSON, nullable=False)
    analysis = Column(JSON, nullable=False)
    metrics = Column(JSON, nullable=False)
    insights = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_dict(self) -> dict:
        return {
            "project_id": self.project_id,
            "graph_data": self.graph_data,
            "analysis": self.analysis,
            "metrics": self.metrics,
            "insights": self.insights,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

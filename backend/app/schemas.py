from pydantic import BaseModel, Field, AliasChoices, ConfigDict
from typing import Optional, List, Any


class ServiceRecord(BaseModel):
    """One service as sent by the service-management screens"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    name: Optional[str] = None
    category: Optional[str] = None
    # Left loose on purpose: anything that is not a list of ids counts as no dependencies
    depends_on: Any = Field(
        default=None,
        validation_alias=AliasChoices("depends_on", "dependsOn"),
    )


class AnalyzeRequest(BaseModel):
    project_id: Optional[str] = None  # Persist as the project's latest analysis when set
    project_name: Optional[str] = None
    services: List[ServiceRecord] = []

    # Per-request overrides of the configured thresholds
    hotspot_multiplier: Optional[float] = Field(default=None, gt=0)
    high_risk_multiplier: Optional[float] = Field(default=None, gt=0)
    max_cycles: Optional[int] = Field(default=None, ge=0)

    search: Optional[str] = None  # Filter returned nodes by name


class InsightsRequest(AnalyzeRequest):
    timeout_seconds: Optional[float] = Field(default=None, gt=0)

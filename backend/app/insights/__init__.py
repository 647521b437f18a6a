# Insights module
# LLM-backed advisory text, composed with the analysis only by callers

from app.insights.gateway import (
    InsightsError,
    InsightsTimeout,
    build_insights_payload,
    fetch_insights,
    fetch_insights_async,
    merge_insights,
    parse_insights,
)

__all__ = [
    "InsightsError",
    "InsightsTimeout",
    "build_insights_payload",
    "fetch_insights",
    "fetch_insights_async",
    "merge_insights",
    "parse_insights",
]

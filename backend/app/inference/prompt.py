INSIGHTS_SYSTEM_PROMPT = """
You review MICROSERVICE DEPENDENCY GRAPHS and return advice as strict JSON.

Rules:
- Output ONLY valid JSON
- No markdown, no explanations outside the JSON
- Base every statement on the metrics and services given
- Do NOT invent services that are not listed

JSON schema:
{
  "health_assessment": "string",
  "risks": ["string"],
  "recommendations": [
    { "issue": "string", "recommendation": "string", "priority": "high|medium|low" }
  ]
}
"""


INSIGHTS_USER_TEMPLATE = """Analyze this microservices dependency graph and provide insights:

METRICS:
- Total Services: {total_nodes}
- Total Dependencies: {total_edges}
- Max Degree: {max_degree}
- Avg Degree: {avg_degree:.2f}
- Complexity Score: {complexity_score}

ISSUES:
- Orphaned Services: {orphan_count}
- Hotspot Services: {hotspot_count}
- Circular Dependencies: {cycle_count}
{cycle_lines}
SERVICES:
{service_lines}

Provide:
1. Overall architecture health assessment
2. Specific risks from hotspots and cycles
3. Recommendations to reduce coupling
4. Suggestions for breaking cycles
5. Best practices for dependency management
"""

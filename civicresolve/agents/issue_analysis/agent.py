"""
Issue Analysis Agent
Suggests severity, responsible department and next steps for a civic complaint
"""
from typing import Dict, Any, Optional

from civicresolve.agents.base_agent import BaseAgent
from civicresolve.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_DEPARTMENT = "Municipal Corporation - General"

CATEGORY_DEPARTMENTS = {
    "Roads": "Public Works Department (PWD)",
    "Water": "Water Supply & Sewerage Board",
    "Electricity": "Electricity Distribution Company",
    "Sanitation": "Municipal Sanitation Department",
    "Safety": "Public Safety & Police Department",
    "Drainage": "Drainage & Storm Water Department",
    "Streetlights": "Electrical Maintenance Division",
    "Parks": "Horticulture & Parks Department",
    "Other": DEFAULT_DEPARTMENT,
}

# priority -> (severity, severityScore, estimatedResolution)
PRIORITY_SEVERITY = {
    "high": ("Critical", 9, "24-48 hours"),
    "medium": ("Moderate", 6, "3-5 days"),
    "low": ("Low", 3, "7-14 days"),
}

RESPONSE_FORMAT = {
    "severity": "Critical|Moderate|Low",
    "severityScore": "integer 1-10",
    "department": "Responsible government department",
    "estimatedResolution": "e.g. '3-5 days'",
    "analysis": "Two or three sentences assessing the issue",
    "suggestedResponses": ["three short messages the citizen can send to the authority"],
    "recommendations": ["four practical next steps for the citizen"],
}


def get_department(category: Optional[str]) -> str:
    return CATEGORY_DEPARTMENTS.get(category or "", DEFAULT_DEPARTMENT)


def build_fallback_analysis(
    title: str,
    category: str,
    priority: str,
    location: Optional[str] = None,
) -> Dict[str, Any]:
    """Deterministic, rule-based analysis used whenever the AI is unavailable"""
    severity, score, resolution = PRIORITY_SEVERITY.get(priority, PRIORITY_SEVERITY["low"])
    department = get_department(category)
    return {
        "severity": severity,
        "severityScore": score,
        "department": department,
        "estimatedResolution": resolution,
        "analysis": (
            f'This {category.lower()} issue titled "{title}" in {location or "the reported area"} '
            f"has been classified as {priority} priority and routed to {department}."
        ),
        "suggestedResponses": [
            f"I am writing to follow up regarding {title}. Kindly take necessary action.",
            f"Dear Authority, this issue needs attention at {location or 'my locality'}.",
            "Please escalate if unresolved within timeline.",
        ],
        "recommendations": [
            "Document issue with photos",
            "Note exact location",
            "Follow up regularly",
            "Share tracking ID with neighbours",
        ],
    }


class IssueAnalysisAgent(BaseAgent):
    """Analyzes a reported civic issue; never fails, falls back to fixed rules"""

    def __init__(self):
        super().__init__(name="IssueAnalysisAgent")

    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"analysis": await self.analyze(context)}

    async def analyze(self, issue: Dict[str, Any]) -> Dict[str, Any]:
        title = issue.get("title") or ""
        category = issue.get("category") or "Other"
        priority = issue.get("priority") or "medium"
        location = issue.get("location") or None
        fallback = build_fallback_analysis(title, category, priority, location)

        if not self.is_available:
            return fallback

        prompt = f"""
        Analyze this civic complaint filed by a citizen.

        Complaint Details:
        Title: {title}
        Description: {issue.get("description") or ""}
        Category: {category}
        Priority: {priority}
        Location: {location or "Not specified"}

        Pick the government department that should handle it, rate its severity,
        and suggest what the citizen can say and do next.
        """

        try:
            analysis = await self.generate_structured_response(
                prompt=prompt,
                system_prompt=self._get_system_prompt(),
                response_format=RESPONSE_FORMAT,
            )
        except Exception as e:
            logger.warning(f"AI analysis unavailable, using rule-based fallback: {e}")
            return fallback

        return self._normalize(analysis, fallback)

    @staticmethod
    def _normalize(analysis: Dict[str, Any], fallback: Dict[str, Any]) -> Dict[str, Any]:
        """Coerce the model's answer to the response shape, filling gaps from fallback"""
        result = {}
        for key, default in fallback.items():
            value = analysis.get(key)
            if isinstance(default, list):
                result[key] = [str(v) for v in value] if isinstance(value, list) and value else default
            elif key == "severityScore":
                try:
                    result[key] = min(10, max(1, int(round(float(value)))))
                except (TypeError, ValueError):
                    result[key] = default
            else:
                result[key] = str(value) if value else default
        return result

    def _get_system_prompt(self) -> str:
        return """You are an expert civic issue analyst for an Indian municipal grievance portal.
You route citizen complaints to the right department and estimate how urgent they are.
Return structured JSON only."""

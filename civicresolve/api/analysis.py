"""
Issue analysis endpoint - AI suggestion with rule-based fallback
"""
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from civicresolve.agents.issue_analysis.agent import IssueAnalysisAgent

router = APIRouter()


class AnalysisRequest(BaseModel):
    title: str = ""
    description: str = ""
    category: str = "Other"
    priority: str = "medium"
    location: Optional[str] = None


class AnalysisResult(BaseModel):
    severity: str
    severityScore: int
    department: str
    estimatedResolution: str
    analysis: str
    suggestedResponses: List[str]
    recommendations: List[str]


class AnalysisResponse(BaseModel):
    analysis: AnalysisResult


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_issue(body: AnalysisRequest):
    """Suggest severity and department; falls back to fixed rules if the AI is down"""
    agent = IssueAnalysisAgent()
    return await agent.process(body.model_dump())

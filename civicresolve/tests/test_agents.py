"""
Issue analysis agent tests - mocked Claude responses and rule-based fallback.
"""
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from civicresolve.agents.issue_analysis.agent import (
    IssueAnalysisAgent, build_fallback_analysis, get_department,
)
from civicresolve.services.claude_service import ClaudeService, extract_json_object


ISSUE = {
    "title": "Streetlight not working",
    "description": "Dark lane for a week",
    "category": "Streetlights",
    "priority": "high",
    "location": "Sector 21, Dwarka",
}


# ===================== FALLBACK RULES =====================


class TestFallback:

    @pytest.mark.parametrize("priority,severity,score,resolution", [
        ("high", "Critical", 9, "24-48 hours"),
        ("medium", "Moderate", 6, "3-5 days"),
        ("low", "Low", 3, "7-14 days"),
    ])
    def test_priority_mapping(self, priority, severity, score, resolution):
        result = build_fallback_analysis("Title", "Roads", priority)
        assert result["severity"] == severity
        assert result["severityScore"] == score
        assert result["estimatedResolution"] == resolution

    def test_department_lookup(self):
        assert get_department("Roads") == "Public Works Department (PWD)"
        assert get_department("Water") == "Water Supply & Sewerage Board"
        assert get_department("Parks") == "Horticulture & Parks Department"
        assert get_department("Potholes?") == "Municipal Corporation - General"
        assert get_department(None) == "Municipal Corporation - General"

    def test_template_text(self):
        result = build_fallback_analysis("Dark lane", "Streetlights", "low", "Sector 21")

        assert result["analysis"] == (
            'This streetlights issue titled "Dark lane" in Sector 21 has been classified '
            "as low priority and routed to Electrical Maintenance Division."
        )
        assert len(result["suggestedResponses"]) == 3
        assert len(result["recommendations"]) == 4
        assert "Sector 21" in result["suggestedResponses"][1]

    def test_missing_location(self):
        result = build_fallback_analysis("Leak", "Water", "medium")
        assert "the reported area" in result["analysis"]
        assert "my locality" in result["suggestedResponses"][1]


# ===================== AGENT =====================


class TestIssueAnalysisAgent:

    @pytest.mark.asyncio
    async def test_unconfigured_uses_fallback(self):
        agent = IssueAnalysisAgent()

        with patch.object(type(agent.claude), "is_available", new=False), \
                patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            result = await agent.analyze(ISSUE)

        mock.assert_not_called()
        assert result == build_fallback_analysis(
            ISSUE["title"], ISSUE["category"], ISSUE["priority"], ISSUE["location"]
        )

    @pytest.mark.asyncio
    async def test_ai_response(self):
        agent = IssueAnalysisAgent()
        mock_response = {
            "severity": "Moderate",
            "severityScore": 7,
            "department": "Electrical Maintenance Division",
            "estimatedResolution": "2-3 days",
            "analysis": "Unlit lane poses safety risk at night.",
            "suggestedResponses": ["a", "b", "c"],
            "recommendations": ["w", "x", "y", "z"],
        }

        with patch.object(type(agent.claude), "is_available", new=True), \
                patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            mock.return_value = mock_response
            result = await agent.analyze(ISSUE)

        assert result == mock_response

    @pytest.mark.asyncio
    async def test_partial_ai_response_completed(self):
        agent = IssueAnalysisAgent()

        with patch.object(type(agent.claude), "is_available", new=True), \
                patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            mock.return_value = {"severity": "Critical", "severityScore": "42", "recommendations": "none"}
            result = await agent.analyze(ISSUE)

        assert result["severity"] == "Critical"
        assert result["severityScore"] == 10
        assert result["department"] == "Electrical Maintenance Division"
        assert len(result["recommendations"]) == 4

    @pytest.mark.asyncio
    async def test_upstream_failure_falls_back(self):
        agent = IssueAnalysisAgent()

        with patch.object(type(agent.claude), "is_available", new=True), \
                patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            mock.side_effect = ValueError("Failed to parse Claude response as JSON")
            result = await agent.analyze(ISSUE)

        assert result["severity"] == "Critical"
        assert result["severityScore"] == 9

    @pytest.mark.asyncio
    async def test_process_wraps_analysis(self):
        agent = IssueAnalysisAgent()
        with patch.object(type(agent.claude), "is_available", new=False):
            result = await agent.process({"title": "x", "category": "Roads", "priority": "low"})
        assert result["analysis"]["department"] == "Public Works Department (PWD)"


# ===================== CLAUDE SERVICE =====================


class TestClaudeService:

    @pytest.mark.parametrize("reply", [
        '{"severity": "High"}',
        '```json\n{"severity": "High"}\n```',
        '```\n{"severity": "High"}\n```',
    ])
    def test_extract_json_object(self, reply):
        assert extract_json_object(reply) == {"severity": "High"}

    @pytest.mark.parametrize("reply", ["not json", '["High"]'])
    def test_extract_rejects_non_objects(self, reply):
        with pytest.raises(ValueError):
            extract_json_object(reply)

    @pytest.mark.asyncio
    async def test_structured_response(self):
        service = ClaudeService()
        service.client = MagicMock()
        service.client.messages.create = AsyncMock(return_value=SimpleNamespace(
            content=[SimpleNamespace(text='```json\n{"severityScore": 7}\n```')]
        ))

        result = await service.generate_structured_response("Analyse", "system", {"severityScore": "int"})

        assert result == {"severityScore": 7}
        kwargs = service.client.messages.create.call_args.kwargs
        assert kwargs["system"] == "system"
        assert "severityScore" in kwargs["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_unconfigured_raises(self):
        service = ClaudeService()
        service.client = None
        assert not service.is_available
        with pytest.raises(RuntimeError, match="not configured"):
            await service.generate_structured_response("Analyse")

"""
Claude API service wrapper
"""
from anthropic import AsyncAnthropic
from civicresolve.config import get_settings
from typing import Optional, Dict, Any
import json

settings = get_settings()


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse a JSON object out of a reply that may be wrapped in a code fence"""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse Claude response as JSON: {e}\n\nResponse: {text}")

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object from Claude, got {type(parsed).__name__}")
    return parsed


class ClaudeService:
    def __init__(self):
        api_key = settings.ANTHROPIC_API_KEY or None
        self.model = settings.CLAUDE_MODEL
        self.max_tokens = settings.CLAUDE_MAX_TOKENS
        self.client = AsyncAnthropic(api_key=api_key) if api_key else None

    @property
    def is_available(self) -> bool:
        return self.client is not None

    async def generate_structured_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Ask Claude for a JSON object matching response_format.

        Raises RuntimeError when no API key is configured and ValueError when
        the reply is not a JSON object.
        """
        if self.client is None:
            raise RuntimeError("AI service not configured: ANTHROPIC_API_KEY is not set")

        structured_prompt = f"""{prompt}

IMPORTANT: Respond with ONLY a valid JSON object matching this schema:
{json.dumps(response_format, indent=2)}

Do not include any markdown formatting, code blocks, or explanatory text.
Just return the raw JSON."""

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=0.6,
            system=system_prompt or "",
            messages=[{"role": "user", "content": structured_prompt}]
        )
        return extract_json_object(response.content[0].text)


# Singleton instance
claude_service = ClaudeService()

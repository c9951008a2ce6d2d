"""
Claude API service wrapper
"""
from anthropic import AsyncAnthropic
from chanakya.config import get_settings
from functools import lru_cache
from typing import Optional, Dict, Any
import json


class ClaudeService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        settings = get_settings()
        api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.model = model or settings.CLAUDE_MODEL
        self.max_tokens = max_tokens or settings.CLAUDE_MAX_TOKENS
        self.client = AsyncAnthropic(api_key=api_key) if api_key else None

    @property
    def is_available(self) -> bool:
        return self.client is not None

    async def generate_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None
    ) -> str:
        if self.client is None:
            raise RuntimeError("AI service not configured: ANTHROPIC_API_KEY is not set")

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens or self.max_tokens,
            temperature=temperature,
            system=system_prompt or "",
            messages=[{"role": "user", "content": prompt}]
        )

        return response.content[0].text

    async def generate_structured_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Ask for a bare JSON object and parse it
        """
        structured_prompt = f"""{prompt}

IMPORTANT: Respond with ONLY a valid JSON object matching this schema:
{json.dumps(response_format, indent=2)}

Do not include any markdown formatting, code blocks, or explanatory text."""

        response_text = await self.generate_response(
            prompt=structured_prompt,
            system_prompt=system_prompt
        )
        return parse_json_reply(response_text)


def parse_json_reply(text: str) -> Dict[str, Any]:
    """Strip an optional ```json fence and parse"""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    cleaned = cleaned.strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse Claude response as JSON: {e}\n\nResponse: {cleaned}")


@lru_cache()
def get_claude_service() -> ClaudeService:
    return ClaudeService()

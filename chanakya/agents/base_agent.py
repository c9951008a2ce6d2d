"""
Base class for AI-assisted agents
"""
from abc import ABC, abstractmethod
from chanakya.services.claude_service import ClaudeService, get_claude_service
from typing import Any, Awaitable, Callable, Dict, Optional

Handler = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


class BaseAgent(ABC):
    """
    Agents expose named actions; process() routes a context dict to one of
    them. The Claude client is injected, defaulting to the shared instance.
    """

    default_action: str = ""

    def __init__(self, name: str, claude: Optional[ClaudeService] = None):
        self.name = name
        self.claude = claude or get_claude_service()

    @abstractmethod
    def actions(self) -> Dict[str, Handler]:
        """Action name -> coroutine taking the context dict"""

    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        action = context.get("action", self.default_action)
        handler = self.actions().get(action)
        if handler is None:
            return {"error": f"Unknown action: {action}"}
        return await handler(context)

    @property
    def ai_available(self) -> bool:
        return self.claude.is_available

    async def generate_structured_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return await self.claude.generate_structured_response(
            prompt, system_prompt, response_format
        )

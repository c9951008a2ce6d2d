"""
Voice assistant endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

from chanakya.agents.voice_command.agent import VoiceCommandAgent
from chanakya.agents.voice_command.intents import INTENTS, VoiceCommand
from chanakya.api.errors import http_error
from chanakya.database import get_db
from chanakya.exceptions import ChanakyaError

router = APIRouter()
logger = logging.getLogger(__name__)


class WebhookPayload(BaseModel):
    text: str = ""
    language: Optional[str] = None
    intent: Optional[str] = None
    entities: Dict[str, Any] = {}
    confidence: Optional[float] = None
    timestamp: Optional[str] = None
    sessionId: Optional[str] = None


class CommandRequest(BaseModel):
    text: str


def get_voice_agent() -> VoiceCommandAgent:
    return VoiceCommandAgent()


async def _run(agent: VoiceCommandAgent, context: Dict[str, Any]) -> Dict[str, Any]:
    # Command failures come back as results; only store errors escape the agent
    try:
        return await agent.process(context)
    except ChanakyaError as e:
        raise http_error(e)


@router.post("/webhook")
async def voice_webhook(
    payload: WebhookPayload,
    db: AsyncSession = Depends(get_db),
    agent: VoiceCommandAgent = Depends(get_voice_agent),
):
    """
    Command already interpreted by the voice platform. When it sends no
    recognised intent the text is interpreted here instead.
    """
    logger.info(f"Voice webhook: session={payload.sessionId} intent={payload.intent}")

    if payload.intent in INTENTS:
        command = VoiceCommand(
            text=payload.text,
            intent=payload.intent,
            entities=dict(payload.entities),
            confidence=payload.confidence if payload.confidence is not None else 1.0,
        )
        return await _run(agent, {"action": "handle_command", "db": db, "command": command})

    return await _run(agent, {"action": "handle_text", "db": db, "text": payload.text})


@router.post("/command")
async def voice_command(
    data: CommandRequest,
    db: AsyncSession = Depends(get_db),
    agent: VoiceCommandAgent = Depends(get_voice_agent),
):
    """Interpret and execute a raw transcript"""
    return await _run(agent, {"action": "handle_text", "db": db, "text": data.text})

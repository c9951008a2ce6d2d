"""
Voice Command Agent
Turns spoken commands into supplier mutations, reports and navigation
"""
import logging
from typing import Any, Dict, Optional

import anthropic
from sqlalchemy.ext.asyncio import AsyncSession

from chanakya.agents.base_agent import BaseAgent
from chanakya.agents.voice_command.intents import (
    INTENTS,
    UNKNOWN,
    VIEWS,
    VoiceCommand,
    parse_command,
)
from chanakya.agents.voice_command.prompts import INTENT_FORMAT, INTENT_PROMPT, SYSTEM_PROMPT
from chanakya.config import get_settings
from chanakya.exceptions import ChanakyaError, NotFoundError, ValidationError
from chanakya.scoring.criteria import find_criterion, from_ten_point
from chanakya.services.claude_service import ClaudeService
from chanakya.services.knowledge_service import build_knowledge_report
from chanakya.services.supplier_service import SupplierRepository

logger = logging.getLogger(__name__)

# Entity name -> supplier column for voice edits
EDITABLE_ENTITIES = {
    "email": "email",
    "phone": "phone",
    "industry": "industry",
    "status": "status",
    "address": "address",
    "website": "website",
    "description": "description",
    "contactPerson": "contact_person",
}


class VoiceCommandAgent(BaseAgent):
    """Interprets voice commands and applies them to the supplier store"""

    default_action = "handle_text"

    def __init__(self, claude: Optional[ClaudeService] = None, min_confidence: Optional[float] = None):
        super().__init__(name="VoiceCommandAgent", claude=claude)
        self.min_confidence = (
            min_confidence if min_confidence is not None else get_settings().VOICE_MIN_CONFIDENCE
        )

    def actions(self):
        return {
            "handle_text": lambda ctx: self.handle_text(ctx["db"], ctx["text"]),
            "handle_command": lambda ctx: self.handle(ctx["db"], ctx["command"]),
        }

    async def interpret(self, db: AsyncSession, text: str) -> VoiceCommand:
        """Keyword rules first; Claude only when they find no intent"""
        command = parse_command(text)
        if command.intent != UNKNOWN or not self.ai_available:
            return command

        suppliers = await SupplierRepository(db).list_suppliers()
        prompt = INTENT_PROMPT.format(
            text=text,
            supplier_names=", ".join(s.name for s in suppliers) or "None",
        )
        try:
            reply = await self.generate_structured_response(
                prompt=prompt,
                system_prompt=SYSTEM_PROMPT,
                response_format=INTENT_FORMAT,
            )
        except (anthropic.APIError, RuntimeError, ValueError) as e:
            logger.warning(f"AI intent classification failed: {e}")
            return command

        intent = reply.get("intent", UNKNOWN)
        if intent not in INTENTS:
            intent = UNKNOWN
        entities = {**command.entities, **(reply.get("entities") or {})}
        return VoiceCommand(
            text=text,
            intent=intent,
            entities=entities,
            confidence=float(reply.get("confidence", 0.0)),
        )

    async def handle_text(self, db: AsyncSession, text: str) -> Dict[str, Any]:
        command = await self.interpret(db, text)
        return await self.handle(db, command)

    async def handle(self, db: AsyncSession, command: VoiceCommand) -> Dict[str, Any]:
        """
        Execute a command and report the outcome. Missing suppliers and invalid
        input come back as named failures rather than exceptions.
        """
        logger.info(f"Voice command: intent={command.intent} entities={command.entities}")

        if command.intent == UNKNOWN:
            return _failure("unknown_command", "Voice command was not recognized", command)
        if command.confidence < self.min_confidence:
            return _failure(
                "low_confidence",
                f"Command confidence {command.confidence:.2f} is below {self.min_confidence:.2f}",
                command,
            )

        try:
            result = await self.execute(db, command)
        except NotFoundError as e:
            return _failure("not_found", f'Could not find supplier "{e.key}"', command)
        except ValidationError as e:
            return _failure("validation", "; ".join(e.errors), command, errors=e.errors)
        except ChanakyaError as e:
            logger.error(f"Voice command failed: {e}")
            return _failure("error", str(e), command)

        return {"success": True, "action": command.intent, **result}

    async def execute(self, db: AsyncSession, command: VoiceCommand) -> Dict[str, Any]:
        repo = SupplierRepository(db)
        entities = command.entities
        handler = {
            "add_supplier": self._add_supplier,
            "edit_supplier": self._edit_supplier,
            "delete_supplier": self._delete_supplier,
            "score_supplier": self._score_supplier,
            "generate_report": self._generate_report,
            "navigate": self._navigate,
        }[command.intent]
        return await handler(repo, entities)

    async def _resolve(self, repo: SupplierRepository, entities: Dict[str, Any]):
        name = entities.get("supplierName")
        if not name:
            raise ValidationError(["Supplier name is required"])
        supplier = await repo.find_by_name(name)
        if supplier is None:
            raise NotFoundError("Supplier", name)
        return supplier

    async def _add_supplier(self, repo: SupplierRepository, entities: Dict[str, Any]) -> Dict[str, Any]:
        data = {
            "name": entities.get("supplierName") or "New Supplier",
            "industry": entities.get("industry") or "Technology",
            "status": "pending",
            "contact_person": entities.get("contactPerson", ""),
            "email": entities.get("email", ""),
            "phone": entities.get("phone", ""),
            "address": entities.get("address", ""),
            "website": entities.get("website", ""),
            "description": entities.get("description") or "Added via voice command",
        }
        supplier = await repo.create_supplier(data)
        return {
            "message": f"{supplier.name} has been added successfully",
            "data": {"supplier_id": supplier.id, "name": supplier.name},
        }

    async def _edit_supplier(self, repo: SupplierRepository, entities: Dict[str, Any]) -> Dict[str, Any]:
        supplier = await self._resolve(repo, entities)
        updates = {
            column: entities[entity]
            for entity, column in EDITABLE_ENTITIES.items()
            if entities.get(entity)
        }
        supplier = await repo.update_supplier(supplier.id, updates)
        return {
            "message": f"{supplier.name} has been updated successfully",
            "data": {"supplier_id": supplier.id, "updated_fields": sorted(updates)},
        }

    async def _delete_supplier(self, repo: SupplierRepository, entities: Dict[str, Any]) -> Dict[str, Any]:
        supplier = await self._resolve(repo, entities)
        supplier_id, name = supplier.id, supplier.name
        await repo.delete_supplier(supplier_id)
        return {
            "message": f"{name} has been deleted successfully",
            "data": {"supplier_id": supplier_id},
        }

    async def _score_supplier(self, repo: SupplierRepository, entities: Dict[str, Any]) -> Dict[str, Any]:
        supplier = await self._resolve(repo, entities)
        if entities.get("score") is None:
            raise ValidationError(["Score is required"])

        score = float(entities["score"])
        if entities.get("scale") == "ten":
            score = from_ten_point(score)

        criterion = find_criterion(str(entities.get("criteria") or "quality"))
        if criterion is None:
            raise ValidationError([f"Unknown criteria: {entities.get('criteria')}"])

        supplier = await repo.set_scores(
            supplier.id,
            {key: score for key in criterion.keys},
            evaluated_by="voice",
            comments="Score added via voice command",
        )
        return {
            "message": f"Scored {supplier.name} {score:g} points for {criterion.name}",
            "data": {
                "supplier_id": supplier.id,
                "criteria": criterion.category,
                "score": score,
                "overall_score": supplier.overall_score,
            },
        }

    async def _generate_report(self, repo: SupplierRepository, entities: Dict[str, Any]) -> Dict[str, Any]:
        report_type = entities.get("reportType") or "supplier"
        suppliers = await repo.list_suppliers()
        report = build_knowledge_report(
            suppliers, top_fraction=get_settings().TOP_PERFORMER_FRACTION
        )
        return {
            "message": f"{report_type} report has been generated",
            "data": {"report_type": report_type, "report": report},
        }

    async def _navigate(self, repo: SupplierRepository, entities: Dict[str, Any]) -> Dict[str, Any]:
        view = entities.get("view") or "grid"
        if view not in VIEWS:
            raise ValidationError([f"Unknown view: {view}"])
        return {"message": f"Switched to {view} view", "data": {"view": view}}


def _failure(error: str, message: str, command: VoiceCommand, **extra) -> Dict[str, Any]:
    return {
        "success": False,
        "action": command.intent,
        "error": error,
        "message": message,
        **extra,
    }

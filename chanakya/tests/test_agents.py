"""
Voice command tests - keyword extraction and agent execution with mocked Claude responses.
"""
import pytest
from unittest.mock import AsyncMock, patch

from chanakya.agents.voice_command.agent import VoiceCommandAgent
from chanakya.agents.voice_command.intents import (
    KEYWORD_CONFIDENCE,
    VoiceCommand,
    extract_entities,
    extract_intent,
    parse_command,
)
from chanakya.models.supplier import SupplierStatus
from chanakya.services.claude_service import ClaudeService, parse_json_reply
from chanakya.services.supplier_service import SupplierRepository


def offline_agent(**kwargs):
    return VoiceCommandAgent(claude=ClaudeService(api_key=""), **kwargs)


def online_agent():
    return VoiceCommandAgent(claude=ClaudeService(api_key="test-key"))


# ===================== INTENTS =====================


class TestIntentExtraction:

    @pytest.mark.parametrize("text,intent", [
        ("Add supplier Acme Corp", "add_supplier"),
        ("Update supplier EcoSupply status to inactive", "edit_supplier"),
        ("Remove supplier Beta", "delete_supplier"),
        ("Rate TechFlow 8 out of 10 for quality", "score_supplier"),
        ("Generate the supplier report", "generate_report"),
        ("Open the criteria page", "navigate"),
        ("What is the weather like", "unknown"),
    ])
    def test_intents(self, text, intent):
        assert extract_intent(text) == intent

    def test_add_without_supplier_word_is_not_add(self):
        assert extract_intent("Add some milk to the list") == "unknown"

    def test_whole_words_only(self):
        # "generate" contains "rate", "address" contains "add"
        assert extract_intent("Generate a summary") == "generate_report"
        assert extract_intent("Change the supplier address") == "unknown"

    def test_confidence(self):
        assert parse_command("Show the matrix").confidence == KEYWORD_CONFIDENCE
        assert parse_command("hmm").confidence == 0.0
        assert parse_command("hmm").intent == "unknown"


class TestEntityExtraction:

    def test_add_supplier_entities(self):
        entities = extract_entities(
            "Add supplier Acme Corp in the technology industry with email info@acme.com"
        )
        assert entities["supplierName"] == "Acme Corp"
        assert entities["industry"] == "Technology"
        assert entities["email"] == "info@acme.com"
        assert "score" not in entities

    def test_ten_point_score(self):
        entities = extract_entities("Rate TechFlow 8 out of 10 for quality")
        assert entities["supplierName"] == "TechFlow"
        assert entities["score"] == 8
        assert entities["scale"] == "ten"
        assert entities["criteria"] == "quality"

    def test_points_and_delivery(self):
        entities = extract_entities("Score supplier Global Manufacturing 85 points for delivery")
        assert entities["supplierName"] == "Global Manufacturing"
        assert entities["score"] == 85
        assert entities["criteria"] == "leadTime"
        assert "scale" not in entities

    def test_status_and_phone(self):
        entities = extract_entities("Update supplier EcoSupply status to inactive")
        assert entities["supplierName"] == "EcoSupply"
        assert entities["status"] == "inactive"

        entities = extract_entities("Update supplier Bolt phone to 555-123-4567")
        assert entities["phone"] == "555-123-4567"

    def test_report_and_view(self):
        assert extract_entities("Generate a performance report")["reportType"] == "performance"
        assert extract_entities("Show the matrix")["view"] == "matrix"

    def test_pricing_maps_to_cost(self):
        assert extract_entities("rate Acme 70 points on pricing")["criteria"] == "cost"


class TestJsonReply:

    def test_fenced_reply(self):
        assert parse_json_reply('```json\n{"intent": "navigate"}\n```') == {"intent": "navigate"}

    def test_garbage_reply(self):
        with pytest.raises(ValueError):
            parse_json_reply("I think you want the grid view")


# ===================== AGENT =====================


class TestVoiceCommandAgent:

    @pytest.mark.asyncio
    async def test_score_ten_point_command(self, db_session, seed_data):
        agent = offline_agent()
        result = await agent.handle_text(db_session, "Rate Alpha 9 out of 10 for cost")

        assert result["success"] is True
        assert result["action"] == "score_supplier"
        assert result["message"] == "Scored Alpha Tech 90 points for Cost Competitiveness"

        supplier = await SupplierRepository(db_session).get_supplier(seed_data["alpha"].id)
        assert supplier.unit_pricing_competitiveness == 90
        assert supplier.payment_terms_flexibility == 90
        assert supplier.total_cost_ownership == 90

        history = await SupplierRepository(db_session).score_history(supplier.id)
        assert len(history) == 3
        assert all(h.evaluated_by == "voice" for h in history)

    @pytest.mark.asyncio
    async def test_score_defaults_to_quality(self, db_session, seed_data):
        agent = offline_agent()
        result = await agent.handle_text(db_session, "Score supplier Gamma 70 points")
        assert result["success"] is True
        assert result["data"]["criteria"] == "quality"

    @pytest.mark.asyncio
    async def test_score_without_number(self, db_session, seed_data):
        agent = offline_agent()
        command = VoiceCommand(text="", intent="score_supplier", entities={"supplierName": "Gamma"})
        result = await agent.handle(db_session, command)
        assert result["success"] is False
        assert result["error"] == "validation"
        assert result["errors"] == ["Score is required"]

    @pytest.mark.asyncio
    async def test_add_supplier_is_still_validated(self, db_session, seed_data):
        agent = offline_agent()
        result = await agent.handle_text(db_session, "Add supplier Zenith Labs with email hello@zenith.io")
        assert result["success"] is False
        assert result["error"] == "validation"
        assert result["errors"] == ["Contact person is required", "Phone is required"]

    @pytest.mark.asyncio
    async def test_add_supplier_defaults(self, db_session, seed_data):
        agent = offline_agent()
        command = VoiceCommand(
            text="",
            intent="add_supplier",
            entities={
                "supplierName": "Zenith Labs",
                "contactPerson": "Kim",
                "email": "kim@zenith.io",
                "phone": "555-0142",
            },
        )
        result = await agent.handle(db_session, command)
        assert result["success"] is True
        assert result["message"] == "Zenith Labs has been added successfully"

        supplier = await SupplierRepository(db_session).get_supplier(result["data"]["supplier_id"])
        assert supplier.industry == "Technology"
        assert supplier.status == SupplierStatus.PENDING
        assert supplier.description == "Added via voice command"

    @pytest.mark.asyncio
    async def test_edit_supplier(self, db_session, seed_data):
        agent = offline_agent()
        result = await agent.handle_text(db_session, "Update supplier Beta status to rejected")
        assert result["success"] is True
        assert result["data"]["updated_fields"] == ["status"]

        supplier = await SupplierRepository(db_session).get_supplier(seed_data["beta"].id)
        assert supplier.status == SupplierStatus.REJECTED

    @pytest.mark.asyncio
    async def test_edit_unknown_supplier(self, db_session, seed_data):
        agent = offline_agent()
        result = await agent.handle_text(db_session, "Update supplier Nobody status to active")
        assert result["success"] is False
        assert result["error"] == "not_found"
        assert result["message"] == 'Could not find supplier "Nobody"'

    @pytest.mark.asyncio
    async def test_ambiguous_name_resolves_to_earliest_supplier(self, db_session, seed_data):
        agent = offline_agent()
        command = VoiceCommand(text="", intent="delete_supplier", entities={"supplierName": "ma"})
        result = await agent.handle(db_session, command)
        assert result["success"] is True
        assert result["data"]["supplier_id"] == seed_data["beta"].id

        names = [s.name for s in await SupplierRepository(db_session).list_suppliers()]
        assert names == ["Gamma Green", "Alpha Tech"]

    @pytest.mark.asyncio
    async def test_generate_report(self, db_session, seed_data):
        agent = offline_agent()
        result = await agent.handle_text(db_session, "Generate a supplier report")
        assert result["success"] is True
        assert result["data"]["report_type"] == "supplier"
        assert "Total Suppliers: 3" in result["data"]["report"]

    @pytest.mark.asyncio
    async def test_navigate_unknown_view(self, db_session):
        agent = offline_agent()
        command = VoiceCommand(text="", intent="navigate", entities={"view": "kanban"})
        result = await agent.handle(db_session, command)
        assert result["success"] is False
        assert result["errors"] == ["Unknown view: kanban"]

    @pytest.mark.asyncio
    async def test_low_confidence(self, db_session, seed_data):
        agent = offline_agent(min_confidence=0.5)
        command = VoiceCommand(
            text="", intent="delete_supplier", entities={"supplierName": "Alpha"}, confidence=0.2
        )
        result = await agent.handle(db_session, command)
        assert result["success"] is False
        assert result["error"] == "low_confidence"

        # Nothing was deleted
        await SupplierRepository(db_session).get_supplier(seed_data["alpha"].id)

    @pytest.mark.asyncio
    async def test_claude_fallback_for_unknown_intent(self, db_session, seed_data):
        agent = online_agent()

        mock_response = {
            "intent": "delete_supplier",
            "entities": {"supplierName": "Gamma"},
            "confidence": 0.9,
        }

        with patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            mock.return_value = mock_response
            result = await agent.handle_text(db_session, "get rid of the green one, gamma")

        mock.assert_awaited_once()
        assert "Gamma Green" in mock.call_args.kwargs["prompt"]
        assert result["success"] is True
        assert result["action"] == "delete_supplier"

    @pytest.mark.asyncio
    async def test_claude_not_consulted_when_keywords_match(self, db_session, seed_data):
        agent = online_agent()

        with patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            result = await agent.handle_text(db_session, "Show the grid")

        mock.assert_not_called()
        assert result["data"]["view"] == "grid"

    @pytest.mark.asyncio
    async def test_claude_failure_falls_back_to_unknown(self, db_session, seed_data):
        agent = online_agent()

        with patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            mock.side_effect = ValueError("Failed to parse Claude response as JSON")
            result = await agent.handle_text(db_session, "mumble mumble")

        assert result["success"] is False
        assert result["error"] == "unknown_command"

    @pytest.mark.asyncio
    async def test_claude_invented_intent_is_unknown(self, db_session, seed_data):
        agent = online_agent()

        with patch.object(agent, "generate_structured_response", new_callable=AsyncMock) as mock:
            mock.return_value = {"intent": "order_pizza", "entities": {}, "confidence": 0.99}
            command = await agent.interpret(db_session, "order me a pizza")

        assert command.intent == "unknown"

    @pytest.mark.asyncio
    async def test_process_dispatch(self, db_session, seed_data):
        agent = offline_agent()
        result = await agent.process({"action": "handle_text", "db": db_session, "text": "Show analytics"})
        assert result["data"]["view"] == "analytics"

        result = await agent.process({"action": "dance", "db": db_session})
        assert result == {"error": "Unknown action: dance"}

import json
from unittest.mock import MagicMock

import pytest

from clinical_ai.services.summary import (
    STUB_MODEL_VERSION,
    AISummaryGenerator,
    build_prompt,
    stub_summary,
)
from cases.safety import STANDARD_DISCLAIMER


SNAPSHOT = {
    "id": "case_abc12345",
    "chiefComplaint": "Persistent dry cough at night",
    "symptomDuration": "5 days",
    "priority": "ROUTINE",
    "rawNotes": None,
}


def _client_returning(content):
    client = MagicMock()
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    client.chat.completions.create.return_value = response
    return client


class TestStubSummary:

    def test_shape(self):
        out = stub_summary(SNAPSHOT)
        assert out["summary"] == "Patient reports: Persistent dry cough at night. Duration: 5 days."
        assert out["keySymptoms"] == ["Persistent"]
        assert out["riskFlags"] == []
        assert out["confidenceScore"] == 50
        assert out["isAIGenerated"] is False
        assert out["modelVersion"] == STUB_MODEL_VERSION
        assert out["disclaimer"] == STANDARD_DISCLAIMER

    def test_urgent_gets_risk_flag(self):
        out = stub_summary({**SNAPSHOT, "priority": "URGENT"})
        assert out["urgencyLevel"] == "URGENT"
        assert out["riskFlags"]

    def test_debug_error_only_in_debug(self, settings):
        settings.DEBUG = False
        assert "debugError" not in stub_summary(SNAPSHOT, error="boom")
        settings.DEBUG = True
        assert stub_summary(SNAPSHOT, error="boom")["debugError"] == "boom"


class TestPrompt:

    def test_chat_bridge_notes_add_original_message(self):
        notes = json.dumps({"source": "CHAT_BRIDGE", "originalMessage": "cough all night"})
        prompt = build_prompt({**SNAPSHOT, "rawNotes": notes})
        assert "Original Message: cough all night" in prompt

    def test_plain_notes_ignored(self):
        prompt = build_prompt({**SNAPSHOT, "rawNotes": "not json"})
        assert "Original Message" not in prompt
        assert "Persistent dry cough at night" in prompt


class TestAISummaryGenerator:

    def test_unconfigured_uses_stub(self, settings):
        settings.OPENAI_API_KEY = ""
        gen = AISummaryGenerator()
        assert not gen.is_available
        assert gen.generate(SNAPSHOT)["isAIGenerated"] is False

    def test_success(self, settings):
        settings.OPENAI_MAX_RETRIES = 0
        client = _client_returning(json.dumps({
            "summary": "You have a persistent cough worse at night.",
            "riskFlags": ["Breathing difficulty"],
            "urgencyLevel": "ELEVATED",
            "keySymptoms": ["cough"],
            "suggestedFollowUp": "Consult a physician if it persists.",
        }))
        out = AISummaryGenerator(client=client, model="gpt-4o-mini").generate(SNAPSHOT)
        assert out["isAIGenerated"] is True
        assert out["confidenceScore"] == 75
        assert out["urgencyLevel"] == "ELEVATED"
        assert out["summary"].startswith("may be experiencing symptoms of")
        assert out["modelVersion"] == "gpt-4o-mini"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_bad_urgency_and_lists_are_normalised(self, settings):
        settings.OPENAI_MAX_RETRIES = 0
        client = _client_returning(json.dumps({"summary": "ok", "urgencyLevel": "CRITICAL", "riskFlags": "none"}))
        out = AISummaryGenerator(client=client).generate(SNAPSHOT)
        assert out["urgencyLevel"] == "ROUTINE"
        assert out["riskFlags"] == []

    @pytest.mark.parametrize("failure", [RuntimeError("network down"), ValueError("bad")])
    def test_failure_falls_back_to_stub(self, settings, failure):
        settings.OPENAI_MAX_RETRIES = 0
        client = MagicMock()
        client.chat.completions.create.side_effect = failure
        out = AISummaryGenerator(client=client).generate(SNAPSHOT)
        assert out["isAIGenerated"] is False
        assert out["modelVersion"] == STUB_MODEL_VERSION

    def test_invalid_json_falls_back(self, settings):
        settings.OPENAI_MAX_RETRIES = 0
        out = AISummaryGenerator(client=_client_returning("not json")).generate(SNAPSHOT)
        assert out["isAIGenerated"] is False

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from clinical_note_assistant.clients import BaseLLMClient, GeminiClient, LLMClientProtocol, OpenAIClient
from clinical_note_assistant.clients.gemini_client import to_gemini_schema
from clinical_note_assistant.clients.openai_client import to_openai_response_format, unwrap_array
from clinical_note_assistant.core.exceptions import (
    LLMContentFilteredError,
    LLMError,
    LLMRateLimitError,
)
from clinical_note_assistant.core.reference_data import (
    NOTES_RESPONSE_CONTRACT,
    TEXT_RESPONSE_CONTRACT,
)

from conftest import FakeLLMClient


# =============================================================================
# BASE CLIENT
# =============================================================================


class _ScriptedClient(BaseLLMClient):
    def __init__(self, outcomes):
        super().__init__(api_key="k", model_name="scripted")
        self._outcomes = list(outcomes)

    async def _call_api(self, prompt, contract):
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def provider_name(self):
        return "scripted"


class TestBaseLLMClient:
    def test_metrics_count_successes_and_failures(self):
        client = _ScriptedClient(["ok", LLMError("down", provider="scripted"), "ok"])

        asyncio.run(client.generate("p"))
        with pytest.raises(LLMError):
            asyncio.run(client.generate("p"))
        asyncio.run(client.generate("p"))

        assert client.total_calls == 2
        assert client.failed_calls == 1
        assert client.success_rate == pytest.approx(200 / 3)

    def test_unexpected_errors_become_llm_errors(self):
        client = _ScriptedClient([KeyError("boom")])

        with pytest.raises(LLMError) as exc_info:
            asyncio.run(client.generate("p"))

        assert exc_info.value.provider == "scripted"
        assert isinstance(exc_info.value.original_error, KeyError)

    def test_success_rate_without_calls(self):
        assert _ScriptedClient([]).success_rate == 100.0

    def test_fake_client_satisfies_protocol(self):
        assert isinstance(FakeLLMClient(), LLMClientProtocol)


# =============================================================================
# GEMINI
# =============================================================================


def _gemini_response(text="", block_reason=None):
    return SimpleNamespace(
        text=text,
        prompt_feedback=SimpleNamespace(block_reason=block_reason),
        candidates=[],
    )


class _NoPartsResponse:
    """Mimics the SDK raising from .text when the candidate has no parts."""

    prompt_feedback = None
    candidates = []

    @property
    def text(self):
        raise ValueError("The `response.text` quick accessor requires a valid Part")


@pytest.fixture
def gemini():
    model = MagicMock()
    model.generate_content_async = AsyncMock()
    with patch("google.generativeai.configure") as configure, patch(
        "google.generativeai.GenerativeModel", return_value=model
    ), patch("google.generativeai.GenerationConfig") as generation_config:
        client = GeminiClient(api_key="gem-key", model_name="gemini-test", temperature=0.3)
        yield SimpleNamespace(
            client=client, model=model, configure=configure, generation_config=generation_config
        )


class TestToGeminiSchema:
    def test_types_are_upper_case_and_open_objects_allowed(self):
        schema = to_gemini_schema(NOTES_RESPONSE_CONTRACT.schema)

        assert schema["type"] == "ARRAY"
        assert schema["items"]["type"] == "OBJECT"
        assert schema["items"]["properties"]["clientId"]["type"] == "STRING"
        assert schema["items"]["required"] == ["clientId", "clientName", "note"]

    def test_additional_properties_removed_without_touching_input(self):
        source = {"type": "object", "additionalProperties": False, "properties": {}}

        converted = to_gemini_schema(source)

        assert "additionalProperties" not in converted
        assert source["additionalProperties"] is False


class TestGeminiClient:
    def test_configures_sdk_with_key(self, gemini):
        gemini.configure.assert_called_once_with(api_key="gem-key")
        assert gemini.client.provider_name == "gemini"
        assert gemini.client.model_name == "gemini-test"

    def test_structured_contract_sets_mime_type_and_schema(self, gemini):
        gemini.model.generate_content_async.return_value = _gemini_response("[]")

        result = asyncio.run(gemini.client.generate("prompt", NOTES_RESPONSE_CONTRACT))

        assert result == "[]"
        kwargs = gemini.generation_config.call_args.kwargs
        assert kwargs["temperature"] == 0.3
        assert kwargs["response_mime_type"] == "application/json"
        assert kwargs["response_schema"]["type"] == "ARRAY"

    def test_text_contract_sends_temperature_only(self, gemini):
        gemini.model.generate_content_async.return_value = _gemini_response("Assessment")

        asyncio.run(gemini.client.generate("prompt", TEXT_RESPONSE_CONTRACT))

        gemini.generation_config.assert_called_once_with(temperature=0.3)

    def test_blocked_prompt(self, gemini):
        gemini.model.generate_content_async.return_value = _gemini_response(block_reason="SAFETY")

        with pytest.raises(LLMContentFilteredError):
            asyncio.run(gemini.client.generate("prompt"))

    def test_empty_response(self, gemini):
        gemini.model.generate_content_async.return_value = _NoPartsResponse()

        with pytest.raises(LLMError) as exc_info:
            asyncio.run(gemini.client.generate("prompt"))

        assert exc_info.value.message == "Gemini returned empty response"

    def test_quota_errors_are_rate_limits(self, gemini):
        gemini.model.generate_content_async.side_effect = Exception("429 Resource has been exhausted (quota)")

        with pytest.raises(LLMRateLimitError):
            asyncio.run(gemini.client.generate("prompt"))

        assert gemini.client.failed_calls == 1

    def test_other_errors_keep_provider_message(self, gemini):
        gemini.model.generate_content_async.side_effect = Exception("503 Service Unavailable")

        with pytest.raises(LLMError) as exc_info:
            asyncio.run(gemini.client.generate("prompt"))

        assert exc_info.value.message == "Gemini API error: 503 Service Unavailable"


# =============================================================================
# OPENAI
# =============================================================================


def _openai_response(content, finish_reason="stop"):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(finish_reason=finish_reason, message=message)])


@pytest.fixture
def openai_client():
    sdk = MagicMock()
    sdk.chat.completions.create = AsyncMock()
    with patch("openai.AsyncOpenAI", return_value=sdk) as factory:
        client = OpenAIClient(api_key="oa-key", model_name="gpt-test", temperature=0.2)
        factory.assert_called_once_with(api_key="oa-key")
        yield SimpleNamespace(client=client, create=sdk.chat.completions.create)


class TestOpenAIResponseFormat:
    def test_array_contract_is_wrapped_in_strict_object(self):
        response_format = to_openai_response_format(NOTES_RESPONSE_CONTRACT)

        assert response_format["type"] == "json_schema"
        json_schema = response_format["json_schema"]
        assert json_schema["name"] == "generated_notes"
        assert json_schema["strict"] is True
        assert json_schema["schema"]["type"] == "object"
        assert json_schema["schema"]["required"] == ["items"]
        item_schema = json_schema["schema"]["properties"]["items"]["items"]
        assert item_schema["additionalProperties"] is False
        assert item_schema["required"] == ["clientId", "clientName", "note"]

    def test_unwrap_array(self):
        assert json.loads(unwrap_array('{"items": [{"clientId": "a"}]}')) == [{"clientId": "a"}]

    def test_unwrap_leaves_other_content_alone(self):
        assert unwrap_array("not json") == "not json"
        assert unwrap_array('{"notes": []}') == '{"notes": []}'


class TestOpenAIClient:
    def test_structured_request_is_unwrapped(self, openai_client):
        openai_client.create.return_value = _openai_response(
            '{"items": [{"clientId": "a", "clientName": "Al", "note": "N"}]}'
        )

        result = asyncio.run(openai_client.client.generate("prompt", NOTES_RESPONSE_CONTRACT))

        assert json.loads(result) == [{"clientId": "a", "clientName": "Al", "note": "N"}]
        request = openai_client.create.call_args.kwargs
        assert request["model"] == "gpt-test"
        assert request["temperature"] == 0.2
        assert request["messages"] == [{"role": "user", "content": "prompt"}]
        assert request["response_format"]["type"] == "json_schema"

    def test_text_request_has_no_response_format(self, openai_client):
        openai_client.create.return_value = _openai_response("Assessment text")

        result = asyncio.run(openai_client.client.generate("prompt", TEXT_RESPONSE_CONTRACT))

        assert result == "Assessment text"
        assert "response_format" not in openai_client.create.call_args.kwargs

    def test_content_filter_finish_reason(self, openai_client):
        openai_client.create.return_value = _openai_response(None, finish_reason="content_filter")

        with pytest.raises(LLMContentFilteredError):
            asyncio.run(openai_client.client.generate("prompt"))

    def test_empty_content(self, openai_client):
        openai_client.create.return_value = _openai_response("")

        with pytest.raises(LLMError) as exc_info:
            asyncio.run(openai_client.client.generate("prompt"))

        assert exc_info.value.message == "OpenAI returned empty response"

    def test_rate_limit(self, openai_client):
        openai_client.create.side_effect = Exception("Error code: 429 - Rate limit reached")

        with pytest.raises(LLMRateLimitError) as exc_info:
            asyncio.run(openai_client.client.generate("prompt"))

        assert exc_info.value.provider == "openai"

"""
OpenAI Adapter

Sends note and assessment prompts to OpenAI chat completions (gpt-4o-mini by
default) through the AsyncOpenAI client.

Structured contracts are sent as a strict json_schema response format. Strict
mode only accepts an object at the top level, so an array contract is wrapped
as {"items": [...]} on the way out and unwrapped on the way back.
"""

import copy
import json
from typing import Any, Dict, Optional

from loguru import logger

from clinical_note_assistant.clients.llm_client import BaseLLMClient
from clinical_note_assistant.core.exceptions import (
    LLMContentFilteredError,
    LLMError,
    LLMRateLimitError,
)
from clinical_note_assistant.core.models import ResponseContract


WRAPPED_ARRAY_KEY = "items"


def _strict_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Close every object schema (strict mode requires it)."""
    converted = copy.deepcopy(schema)
    if converted.get("type") == "object":
        converted["additionalProperties"] = False
        properties = converted.get("properties", {})
        converted["properties"] = {name: _strict_schema(prop) for name, prop in properties.items()}
        converted["required"] = list(properties)
    if "items" in converted:
        converted["items"] = _strict_schema(converted["items"])
    return converted


def to_openai_response_format(contract: ResponseContract) -> Dict[str, Any]:
    """Build the response_format argument for a structured contract."""
    schema = _strict_schema(contract.schema)
    if schema.get("type") == "array":
        schema = {
            "type": "object",
            "properties": {WRAPPED_ARRAY_KEY: schema},
            "required": [WRAPPED_ARRAY_KEY],
            "additionalProperties": False,
        }
    return {
        "type": "json_schema",
        "json_schema": {"name": contract.name, "schema": schema, "strict": True},
    }


def unwrap_array(content: str) -> str:
    """
    Return the JSON text of the wrapped array.

    Content that is not a wrapped object comes back unchanged so the response
    validator reports it.
    """
    try:
        payload = json.loads(content)
    except ValueError:
        return content
    if isinstance(payload, dict) and WRAPPED_ARRAY_KEY in payload:
        return json.dumps(payload[WRAPPED_ARRAY_KEY])
    return content


# =============================================================================
# STAGE 1: OPENAI CLIENT IMPLEMENTATION
# =============================================================================


class OpenAIClient(BaseLLMClient):
    """
    OpenAI adapter behind LLMClientProtocol.

    What it does:
        Sends the prompt as a single user message; structured contracts
        become a strict json_schema response format whose wrapped array is
        unwrapped before returning. content_filter stops, quota errors and
        empty replies map to the LLMError family.

    Example:
        >>> client = OpenAIClient(api_key="sk-...")
        >>> body = await client.generate(prompt, NOTES_RESPONSE_CONTRACT)
    """

    def __init__(self, api_key: str, model_name: str = "gpt-4o-mini", temperature: float = 0.7):
        """
        Create the AsyncOpenAI client. Raises LLMError when the SDK is
        missing or rejects the credential.
        """
        super().__init__(api_key=api_key, model_name=model_name, temperature=temperature)

        self._client = None
        self._initialize_client()

        logger.info(f"OpenAI adapter ready | Model: {model_name}")

    def _initialize_client(self) -> None:
        """
        Import the SDK on first use so the package imports without it.
        """
        try:
            from openai import AsyncOpenAI
        except ImportError as e:
            raise LLMError(
                "OpenAI support needs the openai package",
                provider="openai",
                original_error=e,
            ) from e

        try:
            self._client = AsyncOpenAI(api_key=self._api_key)
        except Exception as e:
            raise LLMError(
                f"Failed to initialize OpenAI client: {e}", provider="openai", original_error=e
            ) from e

    # =========================================================================
    # STAGE 2: API CALL IMPLEMENTATION
    # =========================================================================

    async def _call_api(self, prompt: str, contract: Optional[ResponseContract]) -> str:
        """
        One chat.completions.create request.

        Raises:
            LLMContentFilteredError: content_filter stop or policy error
            LLMRateLimitError: Quota or 429
            LLMError: Empty reply or any other provider failure
        """
        structured = contract is not None and contract.is_structured
        request = {
            "model": self._model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._temperature,
        }
        if structured:
            request["response_format"] = to_openai_response_format(contract)

        try:
            response = await self._client.chat.completions.create(**request)

            if response.choices:
                choice = response.choices[0]
                if choice.finish_reason == "content_filter":
                    raise LLMContentFilteredError(provider="openai", reason="content_filter")
                content = choice.message.content
                if content:
                    if structured and contract.schema.get("type") == "array":
                        return unwrap_array(content)
                    return content

            raise LLMError("OpenAI returned empty response", provider="openai")

        except LLMError:
            raise

        except Exception as e:
            error_str = str(e).lower()

            if "rate" in error_str or "quota" in error_str or "429" in error_str:
                raise LLMRateLimitError(provider="openai", original_error=e) from e

            if "content_filter" in error_str or "policy" in error_str:
                raise LLMContentFilteredError(provider="openai", reason=str(e)) from e

            raise LLMError(f"OpenAI API error: {e}", provider="openai", original_error=e) from e

    # =========================================================================
    # STAGE 3: PROPERTIES
    # =========================================================================

    @property
    def provider_name(self) -> str:
        return "openai"

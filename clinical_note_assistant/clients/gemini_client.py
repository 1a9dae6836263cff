"""
Gemini Adapter

Sends note and assessment prompts to Google Gemini (gemini-2.5-flash by
default) through google-generativeai's async API.

Structured contracts are sent as response_mime_type="application/json" plus a
response_schema in Gemini's dialect (upper-case type names, no
additionalProperties).
"""

import copy
from typing import Any, Dict, Optional

from loguru import logger

from clinical_note_assistant.clients.llm_client import BaseLLMClient
from clinical_note_assistant.core.exceptions import (
    LLMContentFilteredError,
    LLMError,
    LLMRateLimitError,
)
from clinical_note_assistant.core.models import ResponseContract


# Clinical content (self-harm, substance use, abuse history) trips the default
# filters; notes must still be generated.
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Translate a JSON-Schema dict into the subset Gemini accepts."""
    converted = copy.deepcopy(schema)
    converted.pop("additionalProperties", None)
    if isinstance(converted.get("type"), str):
        converted["type"] = converted["type"].upper()
    if "items" in converted:
        converted["items"] = to_gemini_schema(converted["items"])
    if "properties" in converted:
        converted["properties"] = {
            name: to_gemini_schema(prop) for name, prop in converted["properties"].items()
        }
    return converted


# =============================================================================
# STAGE 1: GEMINI CLIENT IMPLEMENTATION
# =============================================================================


class GeminiClient(BaseLLMClient):
    """
    Gemini adapter behind LLMClientProtocol.

    What it does:
        Builds a GenerationConfig per request (temperature, plus mime type
        and schema for structured contracts), relaxes the safety filters that
        clinical vocabulary trips, and maps quota, block and empty replies to
        the LLMError family.

    Example:
        >>> client = GeminiClient(api_key="...")
        >>> body = await client.generate(prompt, NOTES_RESPONSE_CONTRACT)
    """

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash", temperature: float = 0.7):
        """
        Configure the SDK and bind the model. Raises LLMError when the SDK is
        missing or rejects the configuration.
        """
        super().__init__(api_key=api_key, model_name=model_name, temperature=temperature)

        self._genai = None
        self._model = None
        self._initialize_client()

        logger.info(f"Gemini adapter ready | Model: {model_name}")

    def _initialize_client(self) -> None:
        """
        Import the SDK on first use so the package imports without it.
        """
        try:
            import google.generativeai as genai
        except ImportError as e:
            raise LLMError(
                "Gemini support needs the google-generativeai package",
                provider="gemini",
                original_error=e,
            ) from e

        try:
            genai.configure(api_key=self._api_key)
            self._model = genai.GenerativeModel(
                model_name=self._model_name,
                safety_settings=SAFETY_SETTINGS,
            )
            self._genai = genai
        except Exception as e:
            raise LLMError(
                f"Failed to initialize Gemini client: {e}", provider="gemini", original_error=e
            ) from e

    def _generation_config(self, contract: Optional[ResponseContract]):
        if contract is not None and contract.is_structured:
            return self._genai.GenerationConfig(
                temperature=self._temperature,
                response_mime_type=contract.mime_type,
                response_schema=to_gemini_schema(contract.schema),
            )
        return self._genai.GenerationConfig(temperature=self._temperature)

    # =========================================================================
    # STAGE 2: API CALL IMPLEMENTATION
    # =========================================================================

    async def _call_api(self, prompt: str, contract: Optional[ResponseContract]) -> str:
        """
        One generate_content_async request.

        Raises:
            LLMContentFilteredError: Prompt blocked, or a safety error
            LLMRateLimitError: Quota or 429
            LLMError: Empty reply or any other provider failure
        """
        try:
            response = await self._model.generate_content_async(
                prompt, generation_config=self._generation_config(contract)
            )

            feedback = getattr(response, "prompt_feedback", None)
            block_reason = getattr(feedback, "block_reason", None)
            if block_reason:
                raise LLMContentFilteredError(provider="gemini", reason=str(block_reason))

            text = _response_text(response)
            if text:
                return text

            raise LLMError("Gemini returned empty response", provider="gemini")

        except LLMError:
            raise

        except Exception as e:
            error_str = str(e).lower()

            if "rate" in error_str or "quota" in error_str or "429" in error_str:
                raise LLMRateLimitError(provider="gemini", original_error=e) from e

            if "blocked" in error_str or "safety" in error_str:
                raise LLMContentFilteredError(provider="gemini", reason=str(e)) from e

            raise LLMError(f"Gemini API error: {e}", provider="gemini", original_error=e) from e

    # =========================================================================
    # STAGE 3: PROPERTIES
    # =========================================================================

    @property
    def provider_name(self) -> str:
        return "gemini"


def _response_text(response) -> Optional[str]:
    """Text of the first candidate. response.text raises when there are no parts."""
    try:
        if response.text:
            return response.text
    except ValueError:
        pass

    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        if parts:
            return parts[0].text
    return None

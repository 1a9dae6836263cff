"""
Provider Seam for Note and Assessment Requests

Everything above this module reaches a language model through a single async
method, generate(prompt, contract). Provider adapters share the failure
translation and call counters defined here.

Shape:
    - LLMClientProtocol: what GenerationClient depends on (fakes included)
    - BaseLLMClient: shared failure wrapping and counters
    - GeminiClient, OpenAIClient: one adapter per provider

A request is sent exactly once; a failed request is reported to the caller,
never retried.
"""

from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable

from loguru import logger

from clinical_note_assistant.core.exceptions import LLMError
from clinical_note_assistant.core.models import ResponseContract


# =============================================================================
# STAGE 1: PROVIDER PROTOCOL
# =============================================================================


@runtime_checkable
class LLMClientProtocol(Protocol):
    """
    Anything that can answer a prompt under a response contract.

    What it does:
        Lets GenerationClient be handed a real provider adapter or an
        in-memory fake without knowing which.

    Members:
        generate(prompt, contract) → raw reply body
        model_name, provider_name → identify the backend in logs
    """

    async def generate(self, prompt: str, contract: Optional[ResponseContract] = None) -> str:
        """
        Send one prompt and return the reply body.

        Args:
            prompt: Complete note or assessment prompt
            contract: Declared reply shape; None means free text

        Returns:
            Reply text (a JSON document for structured contracts)

        Raises:
            LLMError: If the provider does not produce a reply
        """
        ...

    @property
    def model_name(self) -> str:
        """Model identifier sent with each request."""
        ...

    @property
    def provider_name(self) -> str:
        """Short provider key, e.g. 'gemini'."""
        ...


# =============================================================================
# STAGE 2: SHARED ADAPTER BEHAVIOUR
# =============================================================================


class BaseLLMClient(ABC):
    """
    Shared behaviour of the provider adapters.

    What it does:
        Turns any unexpected exception into LLMError, counts replies and
        failures, and logs each outcome without the prompt or reply text.
        Adapters only translate the request and the provider's errors.

    Subclasses supply:
        - _call_api(prompt, contract)
        - provider_name
    """

    def __init__(self, api_key: str, model_name: str, temperature: float = 0.7):
        """
        Store credentials and request settings.

        Args:
            api_key: Provider credential
            model_name: Model identifier
            temperature: Sampling temperature sent with every request
        """
        self._api_key = api_key
        self._model_name = model_name
        self._temperature = temperature

        # Outcome counters
        self._total_calls = 0
        self._failed_calls = 0

    # =========================================================================
    # STAGE 3: SINGLE REQUEST
    # =========================================================================

    async def generate(self, prompt: str, contract: Optional[ResponseContract] = None) -> str:
        """
        Send the prompt once and return the reply body.

        Raises:
            LLMError: If the request fails for any reason
        """
        try:
            reply = await self._call_api(prompt, contract)

        except LLMError as e:
            self._failed_calls += 1
            logger.warning(f"{self.provider_name} request failed: {e.message}")
            raise

        except Exception as e:
            self._failed_calls += 1
            logger.error(f"Unexpected {type(e).__name__} from {self.provider_name}")
            raise LLMError(str(e), provider=self.provider_name, original_error=e) from e

        self._total_calls += 1
        logger.debug(f"{self.provider_name} replied | {len(reply)} chars")
        return reply

    @abstractmethod
    async def _call_api(self, prompt: str, contract: Optional[ResponseContract]) -> str:
        """
        Issue one provider request and return the reply text.

        Raises:
            LLMError: With the provider failure translated
        """
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider key used in logs and errors."""
        ...

    @property
    def model_name(self) -> str:
        return self._model_name

    # =========================================================================
    # STAGE 4: COUNTERS
    # =========================================================================

    @property
    def total_calls(self) -> int:
        """Requests that returned a reply."""
        return self._total_calls

    @property
    def failed_calls(self) -> int:
        """Requests that raised."""
        return self._failed_calls

    @property
    def success_rate(self) -> float:
        """Share of requests that returned a reply, in percent (100 before any)."""
        attempted = self._total_calls + self._failed_calls
        if not attempted:
            return 100.0
        return self._total_calls / attempted * 100

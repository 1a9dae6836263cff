"""
Generation Client - Contract with the External Generation Service

This module owns one round trip to the language model per call: credential
precheck, prompt construction, request with the mode-specific response
contract, validation and failure wrapping.

Per-call lifecycle:
    Idle → Sending → Succeeded | Failed

No retries, no cancellation, no internal locking: concurrent calls are
independent and a failed call is reported once.

Pipeline Position:
    Records → PromptFormatter → PromptBuilder → [GenerationClient] → LLM
                                                 ^^^^^^^^^^^^^^^^
                                                 You are here

Usage:
    from clinical_note_assistant.generation import GenerationClient

    client = GenerationClient.from_environment()
    notes = await client.generate_notes(
        NoteType.GROUP, clients, programs, partners,
        documents=[], intervention="Coping with cravings", selections=Selections(),
    )
"""

from typing import List, Optional, Sequence

from loguru import logger

from clinical_note_assistant.clients import GeminiClient, LLMClientProtocol, OpenAIClient
from clinical_note_assistant.core.config import AssistantConfiguration
from clinical_note_assistant.core.enums import AssessmentType, NoteType
from clinical_note_assistant.core.exceptions import (
    ConfigurationError,
    GenerationError,
    GenerationFailedError,
)
from clinical_note_assistant.core.models import (
    AssessmentClientInfo,
    AssessmentData,
    Client,
    Document,
    GeneratedAssessment,
    GeneratedNote,
    Partner,
    Program,
    Selections,
)
from clinical_note_assistant.core.reference_data import (
    NOTES_RESPONSE_CONTRACT,
    TEXT_RESPONSE_CONTRACT,
)
from clinical_note_assistant.generation.prompt_builder import PromptBuilder
from clinical_note_assistant.validation import filter_to_requested_clients, parse_generated_notes


# =============================================================================
# STAGE 1: GENERATION CLIENT CLASS
# =============================================================================


class GenerationClient:
    """
    Generates progress notes and assessments through an LLM provider.

    What it does:
        Turns in-memory clinical records into one request, sends it, and
        returns validated domain objects or a single GenerationFailedError.

    Why it exists:
        1. One place that knows the request and response contracts
        2. Configuration problems surface before any request is made
        3. LLM client is injected, so tests never touch the network

    Attributes:
        last_dropped_count: Entries dropped from the most recent notes response
        dropped_entries_total: Entries dropped across every call

    Example:
        >>> client = GenerationClient(config, llm_client=fake)
        >>> notes = await client.generate_notes(...)
        >>> client.last_dropped_count
        0
    """

    def __init__(
        self,
        config: AssistantConfiguration,
        llm_client: Optional[LLMClientProtocol] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """
        Initialize generation client.

        Args:
            config: Assistant configuration (credentials are checked per call)
            llm_client: Optional LLM client override (for testing); created
                lazily from config on first use otherwise
            prompt_builder: Optional prompt builder override
        """
        # =====================================================================
        # STAGE 1.1: STORE DEPENDENCIES
        # =====================================================================
        self._config = config
        self._llm_client = llm_client
        self._prompt_builder = prompt_builder or PromptBuilder()

        # =====================================================================
        # STAGE 1.2: TRACKING STATE
        # =====================================================================
        self.last_dropped_count = 0
        self.dropped_entries_total = 0
        self._notes_generated = 0
        self._assessments_generated = 0
        self._failed_calls = 0

        logger.debug(
            f"GenerationClient initialized | "
            f"Provider: {config.llm_provider} | "
            f"Model: {config.active_model}"
        )

    # =========================================================================
    # STAGE 2: NOTE GENERATION
    # =========================================================================

    async def generate_notes(
        self,
        note_type: NoteType,
        clients: Sequence[Client],
        programs: Sequence[Program],
        partners: Sequence[Partner],
        documents: Sequence[Document],
        intervention: str,
        selections: Selections,
    ) -> List[GeneratedNote]:
        """
        Generate one note per client from a single request.

        Algorithm:
            1. Check credentials (ConfigurationError, never wrapped)
            2. Return [] for an empty client list without calling the model
            3. Build prompt and call the model with the notes contract
            4. Parse strictly and drop entries for unrequested clients

        Returns:
            Notes for requested clients, in response order

        Raises:
            ConfigurationError: If no API key is configured or a template is missing
            GenerationFailedError: For every other failure
        """
        # =====================================================================
        # STAGE 2.1: PRECHECKS
        # =====================================================================
        self._config.require_api_key()

        if not clients:
            logger.info("No clients selected, skipping note generation")
            self.last_dropped_count = 0
            return []

        logger.info(f"Generating {note_type.value} notes | Clients: {len(clients)}")

        # =====================================================================
        # STAGE 2.2: BUILD PROMPT
        # =====================================================================
        prompt = self._prompt_builder.build_note_prompt(
            note_type=note_type,
            clients=clients,
            programs=programs,
            partners=partners,
            documents=documents,
            intervention=intervention,
            selections=selections,
        )
        logger.debug(f"Note prompt built | Length: {len(prompt)} chars")

        # =====================================================================
        # STAGE 2.3: CALL MODEL AND VALIDATE
        # =====================================================================
        try:
            raw_text = await self._get_llm_client().generate(prompt, NOTES_RESPONSE_CONTRACT)
            parsed = parse_generated_notes(raw_text)

        except ConfigurationError:
            raise

        except Exception as e:
            self._failed_calls += 1
            logger.error(f"Note generation failed | {type(e).__name__}")
            raise GenerationFailedError("notes", e) from e

        # =====================================================================
        # STAGE 2.4: FILTER TO REQUESTED CLIENTS
        # =====================================================================
        filtered = filter_to_requested_clients(parsed, [client.id for client in clients])
        self.last_dropped_count = filtered.dropped_count
        self.dropped_entries_total += filtered.dropped_count
        if filtered.dropped_count:
            logger.debug(f"Dropped {filtered.dropped_count} unrequested note(s)")

        self._notes_generated += len(filtered.notes)
        logger.info(f"Generated {len(filtered.notes)} note(s) for {len(clients)} client(s)")

        return filtered.notes

    # =========================================================================
    # STAGE 3: ASSESSMENT GENERATION
    # =========================================================================

    async def generate_assessment(
        self,
        client_info: AssessmentClientInfo,
        assessment_type: AssessmentType,
        assessment_data: AssessmentData,
    ) -> GeneratedAssessment:
        """
        Generate a free-text assessment document.

        Raises:
            ConfigurationError: If no API key is configured or a catalogue is missing
            GenerationFailedError: For every other failure
        """
        self._config.require_api_key()

        logger.info(f"Generating {assessment_type.value}")

        prompt = self._prompt_builder.build_assessment_prompt(
            client_info=client_info,
            assessment_type=assessment_type,
            assessment_data=assessment_data,
        )
        logger.debug(f"Assessment prompt built | Length: {len(prompt)} chars")

        try:
            assessment_text = await self._get_llm_client().generate(prompt, TEXT_RESPONSE_CONTRACT)
            if not assessment_text or not assessment_text.strip():
                raise GenerationError("The model returned an empty assessment")

        except ConfigurationError:
            raise

        except Exception as e:
            self._failed_calls += 1
            logger.error(f"Assessment generation failed | {type(e).__name__}")
            raise GenerationFailedError("the assessment", e) from e

        self._assessments_generated += 1
        logger.info(f"Generated assessment | Length: {len(assessment_text)} chars")

        return GeneratedAssessment(client_name=client_info.name, assessment_text=assessment_text)

    # =========================================================================
    # STAGE 4: FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_environment(cls, env_file: Optional[str] = None) -> "GenerationClient":
        """
        Create a generation client from environment configuration.

        The provider client is not built until the first request, so a missing
        key is reported by the generation call rather than here.

        Raises:
            ConfigurationError: If settings are invalid
        """
        config = AssistantConfiguration.from_environment(env_file=env_file, validate_on_load=True)
        return cls(config)

    # =========================================================================
    # STAGE 5: PRIVATE HELPERS
    # =========================================================================

    def _get_llm_client(self) -> LLMClientProtocol:
        if self._llm_client is None:
            self._llm_client = self._create_llm_client(self._config)
        return self._llm_client

    def _create_llm_client(self, config: AssistantConfiguration) -> LLMClientProtocol:
        """Create LLM client from configuration."""
        api_key = config.require_api_key()
        if config.llm_provider == "gemini":
            return GeminiClient(
                api_key=api_key, model_name=config.gemini_model, temperature=config.temperature
            )
        if config.llm_provider == "openai":
            return OpenAIClient(
                api_key=api_key, model_name=config.openai_model, temperature=config.temperature
            )
        raise ConfigurationError(
            f"Unsupported LLM provider: {config.llm_provider}",
            context={"supported": ["gemini", "openai"]},
        )

    # =========================================================================
    # STAGE 6: PROPERTIES AND METRICS
    # =========================================================================

    @property
    def config(self) -> AssistantConfiguration:
        """Access to assistant configuration."""
        return self._config

    @property
    def notes_generated(self) -> int:
        """Total notes returned to callers."""
        return self._notes_generated

    @property
    def assessments_generated(self) -> int:
        """Total assessments returned to callers."""
        return self._assessments_generated

    @property
    def failed_calls(self) -> int:
        """Number of generation calls that ended in GenerationFailedError."""
        return self._failed_calls

"""
Domain Exceptions for the Clinical Note Assistant

This module defines all custom exceptions used by the assistant. Callers only
ever see one human-readable message per failed generation call; the typed
hierarchy exists so that tests and operators can tell failure modes apart.

Exception Hierarchy:
    ClinicalAssistantError (base)
    ├── ConfigurationError          → Missing credential, invalid settings
    │   └── TemplateNotFoundError   → Enum value without a template/catalogue
    ├── DomainModelError            → Invalid in-memory records
    │   ├── SelectionError          → Unknown observation group
    │   └── RosterError             → Unknown client/partner reference
    ├── GenerationError             → Generation failures
    │   ├── LLMError                → Provider or transport failure
    │   │   ├── LLMRateLimitError
    │   │   └── LLMContentFilteredError
    │   └── GenerationFailedError   → The caller-facing failure of one call
    └── ResponseValidationError     → Response does not honour the contract
        └── ResponseSchemaError

Usage:
    from clinical_note_assistant.core.exceptions import GenerationFailedError

    try:
        notes = await client.generate_notes(...)
    except GenerationFailedError as e:
        show_error(e.message)
"""

from typing import Optional


# =============================================================================
# STAGE 1: BASE EXCEPTION
# =============================================================================


class ClinicalAssistantError(Exception):
    """
    Base exception for all clinical note assistant errors.

    Attributes:
        message: Human-readable error description
        context: Dictionary of additional context for debugging
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format message with context for display."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


# =============================================================================
# STAGE 2: CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(ClinicalAssistantError):
    """
    Error in assistant configuration.

    When raised:
        - Missing API key for the active provider (always before any request)
        - Unsupported provider name
        - Out-of-range numeric settings

    Example:
        >>> raise ConfigurationError(
        ...     "API key is missing",
        ...     context={"setting": "GEMINI_API_KEY", "provider": "gemini"}
        ... )
    """

    pass


class TemplateNotFoundError(ConfigurationError):
    """
    No static template is registered for an enum value.

    Attributes:
        template_kind: "note template" or "assessment catalogue"
        key: The enum value that had no entry
    """

    def __init__(self, template_kind: str, key: str):
        self.template_kind = template_kind
        self.key = key
        super().__init__(
            f"No {template_kind} registered for '{key}'",
            context={"template_kind": template_kind, "key": key},
        )


# =============================================================================
# STAGE 3: DOMAIN MODEL ERRORS
# =============================================================================


class DomainModelError(ClinicalAssistantError):
    """Base exception for invalid in-memory clinical records."""

    pass


class SelectionError(DomainModelError):
    """
    Observation selections reference a group outside the static catalogue.

    Attributes:
        group: The unknown group name
    """

    def __init__(self, group: str, message: Optional[str] = None):
        self.group = group
        super().__init__(
            message or f"Unknown observation group: '{group}'", context={"group": group}
        )


class RosterError(DomainModelError):
    """A roster mutation referenced a client, program or partner that does not exist."""

    pass


# =============================================================================
# STAGE 4: GENERATION ERRORS
# =============================================================================


class GenerationError(ClinicalAssistantError):
    """Base exception for note and assessment generation errors."""

    pass


class LLMError(GenerationError):
    """
    Error from an LLM API call.

    When raised:
        - Network failure or non-success response
        - Empty response body
        - Provider SDK not installed

    Attributes:
        provider: The LLM provider (gemini, openai)
        original_error: The wrapped original exception
    """

    def __init__(self, message: str, provider: str, original_error: Optional[Exception] = None):
        self.provider = provider
        self.original_error = original_error
        super().__init__(
            message,
            context={
                "provider": provider,
                "original_error": str(original_error) if original_error else None,
            },
        )


class LLMRateLimitError(LLMError):
    """
    LLM API quota or rate limit exceeded.

    Attributes:
        retry_after: Seconds the provider asked to wait (if known). Reported
            only; the assistant never retries.
    """

    def __init__(
        self,
        provider: str,
        retry_after: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded for {provider}", provider=provider, original_error=original_error
        )
        self.context["retry_after"] = retry_after


class LLMContentFilteredError(LLMError):
    """The provider refused the prompt or response on safety grounds."""

    def __init__(self, provider: str, reason: Optional[str] = None):
        super().__init__(
            f"Content filtered by {provider} safety settings: {reason or 'unknown reason'}",
            provider=provider,
        )
        self.reason = reason


class GenerationFailedError(GenerationError):
    """
    The single failure a caller sees when a generation call does not succeed.

    What it does:
        Collapses transport, provider and schema failures into one message,
        distinguishing a known cause (the underlying message) from an unknown
        one (an exception without a message).

    Attributes:
        operation: "notes" or "the assessment"
        original_error: Underlying exception (also chained as __cause__)
        is_known_cause: True when the underlying error carried a message

    Example:
        >>> str(GenerationFailedError("notes", ValueError("boom")))
        'Failed to generate notes from AI: boom'
    """

    def __init__(self, operation: str, original_error: Optional[BaseException] = None):
        self.operation = operation
        self.original_error = original_error
        cause = _describe(original_error)
        self.is_known_cause = cause is not None
        if cause is not None:
            message = f"Failed to generate {operation} from AI: {cause}"
        else:
            message = f"An unknown error occurred while generating {operation}."
        super().__init__(message)


def _describe(error: Optional[BaseException]) -> Optional[str]:
    """Return the human-readable part of an error, or None when it has none."""
    if error is None:
        return None
    if isinstance(error, ClinicalAssistantError):
        return error.message or None
    text = str(error).strip()
    return text or None


# =============================================================================
# STAGE 5: RESPONSE VALIDATION ERRORS
# =============================================================================


class ResponseValidationError(ClinicalAssistantError):
    """Base exception for responses that do not honour the declared contract."""

    pass


class ResponseSchemaError(ResponseValidationError):
    """
    Response body is not parseable as the declared structured contract.

    Attributes:
        errors: Per-field problems reported by the validator (may be empty
            when the body was not JSON at all)
    """

    def __init__(self, message: str, errors: Optional[list] = None):
        self.errors = errors or []
        super().__init__(message, context={"error_count": len(self.errors)} if self.errors else None)

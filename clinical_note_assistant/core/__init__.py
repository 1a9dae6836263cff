"""
Core Layer - Domain Models, Enums, and Configuration

This layer contains the side-effect-free foundation of the assistant: plain
records, closed enumerations, static reference data, configuration and the
exception hierarchy.

Submodules:
    models.py         → Data structures (Client, Selections, GeneratedNote, ...)
    enums.py          → Enumerations (NoteType, AssessmentType, GenerationStatus)
    constants.py      → Observation groups, program names, log format
    reference_data.py → Assessment catalogues, response contracts, seed roster
    config.py         → Configuration dataclass
    exceptions.py     → Domain-specific exceptions
    log_config.py     → loguru sink setup

Dependency Rule:
    This layer depends on NOTHING else in the package.
    All other layers may depend on this layer.
"""

from clinical_note_assistant.core.models import (
    AssessmentClientInfo,
    AssessmentData,
    AssessmentField,
    AssessmentSection,
    Client,
    ClientProfile,
    Document,
    GeneratedAssessment,
    GeneratedNote,
    Partner,
    Program,
    ResponseContract,
    Selections,
)
from clinical_note_assistant.core.enums import (
    AssessmentType,
    GenerationStatus,
    NoteType,
)
from clinical_note_assistant.core.config import AssistantConfiguration
from clinical_note_assistant.core.exceptions import (
    ClinicalAssistantError,
    ConfigurationError,
    DomainModelError,
    GenerationError,
    GenerationFailedError,
    LLMError,
    ResponseSchemaError,
    ResponseValidationError,
    RosterError,
    SelectionError,
    TemplateNotFoundError,
)
from clinical_note_assistant.core.log_config import configure_logging

__all__ = [
    # Models
    "AssessmentClientInfo",
    "AssessmentData",
    "AssessmentField",
    "AssessmentSection",
    "Client",
    "ClientProfile",
    "Document",
    "GeneratedAssessment",
    "GeneratedNote",
    "Partner",
    "Program",
    "ResponseContract",
    "Selections",
    # Enums
    "AssessmentType",
    "GenerationStatus",
    "NoteType",
    # Configuration
    "AssistantConfiguration",
    "configure_logging",
    # Exceptions
    "ClinicalAssistantError",
    "ConfigurationError",
    "DomainModelError",
    "GenerationError",
    "GenerationFailedError",
    "LLMError",
    "ResponseSchemaError",
    "ResponseValidationError",
    "RosterError",
    "SelectionError",
    "TemplateNotFoundError",
]

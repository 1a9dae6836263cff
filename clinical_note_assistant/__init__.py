"""
Clinical Note Assistant

Composes prompts from in-memory clinical records (clients, session
observations, reference documents) and turns a hosted language model's reply
into validated progress notes or a free-text clinical assessment.

Architecture Overview:
    clinical_note_assistant/
    ├── core/           → Domain models, enums, configuration (Layer 0 - Pure)
    ├── formatting/     → Record to prompt-block projections (Layer 1 - Pure)
    ├── generation/     → Prompt builder and generation client (Layer 2)
    ├── validation/     → Response contract checks (Layer 2)
    ├── clients/        → LLM client abstractions (Layer 3 - Infrastructure)
    └── session/        → Explicit state and controllers (Layer 4 - Public API)

Quick Start:
    from clinical_note_assistant import GenerationClient, NoteType, Selections

    client = GenerationClient.from_environment()
    notes = await client.generate_notes(
        NoteType.INDIVIDUAL, [client_record], programs, partners,
        documents=[], intervention="Relapse prevention", selections=Selections(),
    )
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================

# Main Entry Points
from clinical_note_assistant.generation import GenerationClient, PromptBuilder
from clinical_note_assistant.session import (
    AppState,
    AssessmentController,
    AssessmentState,
    SessionController,
)

# Core Models
from clinical_note_assistant.core.models import (
    AssessmentClientInfo,
    Client,
    ClientProfile,
    Document,
    GeneratedAssessment,
    GeneratedNote,
    Partner,
    Program,
    Selections,
)

# Enums
from clinical_note_assistant.core.enums import AssessmentType, GenerationStatus, NoteType

# Configuration
from clinical_note_assistant.core.config import AssistantConfiguration

# Exceptions callers handle
from clinical_note_assistant.core.exceptions import (
    ClinicalAssistantError,
    ConfigurationError,
    GenerationFailedError,
)

__all__ = [
    # Main Entry Points
    "GenerationClient",
    "PromptBuilder",
    "AppState",
    "AssessmentController",
    "AssessmentState",
    "SessionController",
    # Core Models
    "AssessmentClientInfo",
    "Client",
    "ClientProfile",
    "Document",
    "GeneratedAssessment",
    "GeneratedNote",
    "Partner",
    "Program",
    "Selections",
    # Enums
    "AssessmentType",
    "GenerationStatus",
    "NoteType",
    # Configuration
    "AssistantConfiguration",
    # Exceptions
    "ClinicalAssistantError",
    "ConfigurationError",
    "GenerationFailedError",
]

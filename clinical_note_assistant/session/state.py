"""
Session State - Explicit Application State

Plain containers for everything a clinician edits between generation calls.
The controllers in session.controller are the only writers; the generation
pipeline only ever reads snapshots of these fields.

State Containers:
    AppState         → Roster, selections and note-generation status
    AssessmentState  → Assessment form and assessment-generation status
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from clinical_note_assistant.core.enums import AssessmentType, GenerationStatus, NoteType
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
from clinical_note_assistant.core.reference_data import SEED_PARTNERS, SEED_PROGRAMS, seed_clients


# =============================================================================
# STAGE 1: NOTE GENERATOR STATE
# =============================================================================


@dataclass
class AppState:
    """
    State of the note generator.

    Attributes:
        partners / programs / roster: Organisation and client reference data
        selected_clients: Clients the next note is written for (roster entries)
        documents: Background knowledge injected into the prompt
        session_intervention: Core intervention or topic of the session
        selections: Clinician observations
        note_type: Chosen note type (None until the clinician picks one)
        generated_notes: Result of the last successful call
        status: Lifecycle of the current or last call
        error_message: Message of the last failed call
        last_dropped_count: Unrequested entries dropped from the last response
    """

    partners: List[Partner] = field(default_factory=list)
    programs: List[Program] = field(default_factory=list)
    roster: List[Client] = field(default_factory=list)
    selected_clients: List[Client] = field(default_factory=list)
    documents: List[Document] = field(default_factory=list)
    session_intervention: str = ""
    selections: Selections = field(default_factory=Selections)
    note_type: Optional[NoteType] = None
    generated_notes: List[GeneratedNote] = field(default_factory=list)
    status: GenerationStatus = GenerationStatus.IDLE
    error_message: Optional[str] = None
    last_dropped_count: int = 0

    @classmethod
    def seeded(cls) -> "AppState":
        """State preloaded with the demo partners, programs and roster."""
        return cls(
            partners=list(SEED_PARTNERS),
            programs=list(SEED_PROGRAMS),
            roster=seed_clients(),
        )

    @property
    def is_sending(self) -> bool:
        return self.status is GenerationStatus.SENDING


# =============================================================================
# STAGE 2: ASSESSMENT STATE
# =============================================================================


def _today_client_info() -> AssessmentClientInfo:
    return AssessmentClientInfo(date_of_assessment=date.today().isoformat())


@dataclass
class AssessmentState:
    """
    State of the assessment generator.

    The assessment date defaults to today (ISO format) and the type to an
    initial assessment.
    """

    client_info: AssessmentClientInfo = field(default_factory=_today_client_info)
    assessment_type: AssessmentType = AssessmentType.INITIAL
    assessment_data: AssessmentData = field(default_factory=dict)
    generated_assessment: Optional[GeneratedAssessment] = None
    status: GenerationStatus = GenerationStatus.IDLE
    error_message: Optional[str] = None

    @property
    def is_sending(self) -> bool:
        return self.status is GenerationStatus.SENDING

    @property
    def has_data(self) -> bool:
        """True when at least one assessment field holds non-blank text."""
        return any(
            value and value.strip()
            for section in self.assessment_data.values()
            for value in section.values()
        )

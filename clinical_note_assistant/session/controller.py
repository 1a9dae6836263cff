"""
Session Controllers - State Transitions Around Generation Calls

Controllers own the explicit state containers and are the only place they are
mutated. Mutations are synchronous; generation is async and suspends only at
the network boundary.

Mutual exclusion is by convention: callers check is_generation_disabled, and
generate() is a no-op while a call is in flight.

Controllers:
    SessionController     → Roster, documents, selections, note generation
    AssessmentController  → Assessment form and assessment generation
"""

import uuid
from typing import Iterable, List

from loguru import logger

from clinical_note_assistant.core.constants import OBSERVATION_GROUPS, PROGRAM_NAMES
from clinical_note_assistant.core.enums import AssessmentType, GenerationStatus, NoteType
from clinical_note_assistant.core.exceptions import (
    ClinicalAssistantError,
    RosterError,
    SelectionError,
)
from clinical_note_assistant.core.models import (
    AssessmentClientInfo,
    Client,
    Document,
    Partner,
    Program,
)
from clinical_note_assistant.generation import GenerationClient
from clinical_note_assistant.session.state import AppState, AssessmentState


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _check_group(group: str) -> None:
    if group not in OBSERVATION_GROUPS:
        raise SelectionError(group)


# =============================================================================
# STAGE 1: NOTE GENERATOR CONTROLLER
# =============================================================================


class SessionController:
    """
    Owns AppState and drives note generation.

    What it does:
        Applies clinician edits (roster, partners, documents, observations)
        and runs one generation call at a time, recording its outcome in
        the state rather than raising.

    Example:
        >>> controller = SessionController(AppState.seeded(), GenerationClient.from_environment())
        >>> controller.select_note_type(NoteType.INDIVIDUAL)
        >>> controller.set_selected_clients(["client-1"])
        >>> controller.set_intervention("Relapse prevention planning")
        >>> await controller.generate()
    """

    def __init__(self, state: AppState, generation_client: GenerationClient):
        self._state = state
        self._generation_client = generation_client

    @property
    def state(self) -> AppState:
        return self._state

    # =========================================================================
    # STAGE 1.1: NOTE TYPE AND CLIENT SELECTION
    # =========================================================================

    def select_note_type(self, note_type: NoteType) -> None:
        """Choose the note type; non-group types keep only the first selected client."""
        state = self._state
        state.note_type = note_type
        if not note_type.allows_multiple_clients and len(state.selected_clients) > 1:
            state.selected_clients = state.selected_clients[:1]
        state.generated_notes = []
        state.error_message = None

    def set_selected_clients(self, client_ids: Iterable[str]) -> None:
        """
        Select roster clients by id, in the given order.

        Raises:
            RosterError: If an id is not on the roster
        """
        by_id = {client.id: client for client in self._state.roster}
        selected = []
        for client_id in client_ids:
            if client_id not in by_id:
                raise RosterError(f"Unknown client id: {client_id}", context={"client_id": client_id})
            selected.append(by_id[client_id])

        note_type = self._state.note_type
        if note_type is not None and not note_type.allows_multiple_clients:
            selected = selected[:1]
        self._state.selected_clients = selected

    @property
    def is_generation_disabled(self) -> bool:
        """True while sending, or when note type, clients or intervention are missing."""
        state = self._state
        return (
            state.is_sending
            or state.note_type is None
            or not state.selected_clients
            or not state.session_intervention.strip()
        )

    # =========================================================================
    # STAGE 1.2: ROSTER MANAGEMENT
    # =========================================================================

    def save_client(self, client: Client) -> Client:
        """
        Update a roster client by id, or add it when the id is new or blank.

        Selected copies of an updated client are replaced as well.
        """
        state = self._state
        if client.id and any(existing.id == client.id for existing in state.roster):
            state.roster = [client if existing.id == client.id else existing for existing in state.roster]
            state.selected_clients = [
                client if selected.id == client.id else selected for selected in state.selected_clients
            ]
            logger.debug(f"Updated client {client.id}")
            return client

        if not client.id:
            client.id = _new_id("client")
        state.roster.append(client)
        logger.debug(f"Added client {client.id}")
        return client

    def delete_client(self, client_id: str) -> None:
        """
        Remove a client from the roster and the current selection.

        Raises:
            RosterError: If the id is not on the roster
        """
        state = self._state
        if not any(client.id == client_id for client in state.roster):
            raise RosterError(f"Unknown client id: {client_id}", context={"client_id": client_id})
        state.roster = [client for client in state.roster if client.id != client_id]
        state.selected_clients = [client for client in state.selected_clients if client.id != client_id]

    def clients_in_program(self, program_id: str) -> List[Client]:
        return [client for client in self._state.roster if client.program_id == program_id]

    def add_partner(self, name: str) -> Partner:
        """
        Add a partner together with its three standard programs.

        Program ids are prog-{partner_id}-1..3, named from PROGRAM_NAMES in order.
        """
        partner = Partner(id=_new_id("partner"), name=name.strip())
        programs = [
            Program(id=f"prog-{partner.id}-{index}", name=program_name, partner_id=partner.id)
            for index, program_name in enumerate(PROGRAM_NAMES, 1)
        ]
        self._state.partners.append(partner)
        self._state.programs.extend(programs)
        logger.info(f"Added partner {partner.id} with {len(programs)} programs")
        return partner

    def programs_for_partner(self, partner_id: str) -> List[Program]:
        """
        Raises:
            RosterError: If the partner does not exist
        """
        if not any(partner.id == partner_id for partner in self._state.partners):
            raise RosterError(f"Unknown partner id: {partner_id}", context={"partner_id": partner_id})
        return [program for program in self._state.programs if program.partner_id == partner_id]

    # =========================================================================
    # STAGE 1.3: DOCUMENTS
    # =========================================================================

    def add_document(self, title: str, content: str) -> Document:
        document = Document(id=_new_id("doc"), title=title, content=content)
        self._state.documents.append(document)
        return document

    def remove_document(self, document_id: str) -> None:
        self._state.documents = [doc for doc in self._state.documents if doc.id != document_id]

    # =========================================================================
    # STAGE 1.4: SESSION OBSERVATIONS
    # =========================================================================

    def toggle_option(self, group: str, label: str) -> bool:
        """
        Check or uncheck an observation option.

        Returns:
            True if the option is now checked

        Raises:
            SelectionError: If group is not an observation group
        """
        _check_group(group)
        checked = self._state.selections.checkboxes.setdefault(group, set())
        if label in checked:
            checked.discard(label)
            return False
        checked.add(label)
        return True

    def set_narrative(self, group: str, text: str) -> None:
        """
        Raises:
            SelectionError: If group is not an observation group
        """
        _check_group(group)
        self._state.selections.narratives[group] = text

    def set_intervention(self, text: str) -> None:
        self._state.session_intervention = text

    # =========================================================================
    # STAGE 1.5: GENERATION
    # =========================================================================

    async def generate(self) -> None:
        """
        Run one note-generation call and record the outcome in state.

        Does nothing while generation is disabled. Domain errors become the
        Failed status plus an error message; anything else propagates.
        """
        if self.is_generation_disabled:
            logger.debug("Generation requested while disabled, ignoring")
            return

        state = self._state
        state.status = GenerationStatus.SENDING
        state.error_message = None
        state.generated_notes = []

        try:
            notes = await self._generation_client.generate_notes(
                note_type=state.note_type,
                clients=list(state.selected_clients),
                programs=list(state.programs),
                partners=list(state.partners),
                documents=list(state.documents),
                intervention=state.session_intervention,
                selections=state.selections,
            )
        except ClinicalAssistantError as e:
            state.status = GenerationStatus.FAILED
            state.error_message = e.message
            logger.warning(f"Note generation failed: {type(e).__name__}")
            return
        except BaseException:
            state.status = GenerationStatus.FAILED
            raise

        state.generated_notes = notes
        state.last_dropped_count = self._generation_client.last_dropped_count
        state.status = GenerationStatus.SUCCEEDED


# =============================================================================
# STAGE 2: ASSESSMENT CONTROLLER
# =============================================================================


class AssessmentController:
    """Owns AssessmentState and drives assessment generation."""

    def __init__(self, state: AssessmentState, generation_client: GenerationClient):
        self._state = state
        self._generation_client = generation_client

    @property
    def state(self) -> AssessmentState:
        return self._state

    def update_client_info(self, **fields) -> AssessmentClientInfo:
        """
        Update identity fields by name (name, date_of_birth, ...).

        Raises:
            AttributeError: If a field name is not part of AssessmentClientInfo
        """
        info = self._state.client_info
        for name, value in fields.items():
            if name not in AssessmentClientInfo.__dataclass_fields__:
                raise AttributeError(f"AssessmentClientInfo has no field '{name}'")
            setattr(info, name, value)
        return info

    def set_field(self, section_id: str, field_id: str, value: str) -> None:
        self._state.assessment_data.setdefault(section_id, {})[field_id] = value

    def select_assessment_type(self, assessment_type: AssessmentType) -> None:
        """Change the type; clears the previous result and error."""
        self._state.assessment_type = assessment_type
        self._state.generated_assessment = None
        self._state.error_message = None

    @property
    def is_generation_disabled(self) -> bool:
        """True while sending, without a client name, or with no filled field."""
        state = self._state
        return state.is_sending or not state.client_info.name.strip() or not state.has_data

    async def generate(self) -> None:
        """Run one assessment-generation call and record the outcome in state."""
        if self.is_generation_disabled:
            logger.debug("Assessment generation requested while disabled, ignoring")
            return

        state = self._state
        state.status = GenerationStatus.SENDING
        state.error_message = None
        state.generated_assessment = None

        try:
            result = await self._generation_client.generate_assessment(
                client_info=state.client_info,
                assessment_type=state.assessment_type,
                assessment_data=state.assessment_data,
            )
        except ClinicalAssistantError as e:
            state.status = GenerationStatus.FAILED
            state.error_message = e.message
            logger.warning(f"Assessment generation failed: {type(e).__name__}")
            return
        except BaseException:
            state.status = GenerationStatus.FAILED
            raise

        state.generated_assessment = result
        state.status = GenerationStatus.SUCCEEDED

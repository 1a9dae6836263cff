"""
Prompt Builder - Clinical Note and Assessment Prompts

This module constructs the request text sent to the generation service.
Prompts are designed to:
    1. Produce one note per selected client from a single request
    2. Keep a strengths-based, recovery-oriented clinical register
    3. Follow a fixed note template selected by NoteType

Templates are static reference text looked up by enum value. Both lookup
tables are checked at import time so a new enum member without a template
fails immediately instead of producing a blank prompt.

Pipeline Position:
    Records → PromptFormatter → [PromptBuilder] → GenerationClient
                                 ^^^^^^^^^^^^^^
                                 You are here
"""

from enum import Enum
from typing import Dict, Mapping, Sequence, Tuple, Type

from clinical_note_assistant.core.constants import NOT_PROVIDED
from clinical_note_assistant.core.enums import AssessmentType, NoteType
from clinical_note_assistant.core.exceptions import TemplateNotFoundError
from clinical_note_assistant.core.models import (
    AssessmentClientInfo,
    AssessmentData,
    AssessmentSection,
    Client,
    Document,
    Partner,
    Program,
    Selections,
)
from clinical_note_assistant.core.reference_data import (
    COMPREHENSIVE_ASSESSMENT_SECTIONS,
    INITIAL_ASSESSMENT_SECTIONS,
)
from clinical_note_assistant.formatting.prompt_formatter import (
    format_assessment_data,
    format_client_profile,
    format_documents,
    format_selections,
)


# =============================================================================
# STAGE 1: PROMPT PREAMBLES
# =============================================================================

NOTE_PREAMBLE = """You are an expert clinical documentation assistant. Your purpose is to help clinicians write CARF/OMHAS-compliant progress notes for ICANOTES, based on Wiley treatment planners. The tone must be strengths-based, recovery-oriented, and professional. You must generate a complete, narrative-style note for each client based on the provided template and information.

**Mission Critical Instructions:**
1.  Generate a separate and complete note for EACH client provided.
2.  Strictly adhere to the structure and headings provided in the Note Template for the specified note type.
3.  Seamlessly integrate the information from "Clinician's Observations" and the detailed "Client Information" into the narrative. DO NOT just list the checkbox items or profile data. Use them to inform the descriptive language of the note, creating a rich, cohesive story of the session.
4.  If Background Knowledge Documents are provided, you MUST use them as a primary reference to guide the content, structure, and language of the notes.
5.  The final output MUST be a valid JSON array, where each object represents a client's note."""

NOTE_CLOSING = "Generate the note(s) now."

ASSESSMENT_PREAMBLE = """You are an expert clinical writer specializing in comprehensive psychological and substance use assessments. Your task is to synthesize the provided clinician's notes into a formal, narrative-style assessment document. The document must be well-organized, professional, and use appropriate clinical language."""

ASSESSMENT_INSTRUCTIONS = """**Mission Critical Instructions:**
1.  Generate a complete and cohesive **{assessment_type}**.
2.  Use the provided **Clinician's Notes** to construct the assessment. Transform the notes from bullet points or brief statements into full, well-written paragraphs under the appropriate headings.
3.  Structure the output logically, following the standard sections of a clinical assessment (e.g., Presenting Problem, Risk Assessment, Substance Use History, etc.).
4.  Ensure the tone is objective, formal, and clinical.
5.  Do not just repeat the notes. You must integrate them into a flowing, professional narrative.
6.  If a section in the clinician's notes is empty, you may state "Information not provided" or omit the section if appropriate.
7.  The final output must be a single block of formatted text. **DO NOT** use JSON.

Generate the complete assessment document now."""


# =============================================================================
# STAGE 2: NOTE TEMPLATES
# =============================================================================
# One template per NoteType. Headings are what the clinician's EHR expects.

NOTE_TEMPLATES: Dict[NoteType, str] = {
    NoteType.INDIVIDUAL: """
**DATA:**
- Client's presentation, mood and affect during the session
- Client's own statements about progress, stressors and recovery
- Topics explored and the core session intervention delivered

**ASSESSMENT:**
- Clinician's impression of the client's engagement and response to the intervention
- Progress toward treatment plan goals and current stage of change
- Risk factors reviewed and their current status

**PLAN:**
- Skills or assignments the client will practice before the next session
- Next session focus and frequency of services
- Referrals or coordination of care, if any
""",
    NoteType.GROUP: """
**GROUP TOPIC:**
- Title and purpose of the group session

**INTERVENTION:**
- Curriculum or evidence-based approach used by the facilitator

**CLIENT PARTICIPATION:**
- This client's level of engagement and contributions to the group
- Interactions with and support offered to peers

**CLIENT RESPONSE:**
- Client's understanding of the material and skills demonstrated
- Progress toward individual treatment plan goals

**PLAN:**
- Continued group attendance and individual follow-up needs
""",
    NoteType.CASE_MANAGEMENT: """
**PURPOSE OF CONTACT:**
- Need or barrier addressed during this contact

**SERVICES PROVIDED:**
- Linkage, advocacy, referrals and resources provided
- Collateral contacts made on the client's behalf

**CLIENT RESPONSE:**
- Client's participation and follow-through

**OUTCOME:**
- Status of each identified case management need

**PLAN:**
- Next steps, responsible party and target dates
""",
    NoteType.CRISIS_INTERVENTION: """
**PRESENTING CRISIS:**
- Precipitating event and client's presentation at time of contact

**RISK ASSESSMENT:**
- Suicidal/homicidal ideation, intent, plan and means
- Protective factors and current supports

**INTERVENTION:**
- De-escalation and stabilization techniques used
- Safety planning completed with the client

**CLIENT RESPONSE:**
- Client's response to intervention and level of stabilization

**DISPOSITION AND PLAN:**
- Level of care recommended, referrals made and follow-up schedule
""",
}

ASSESSMENT_SECTIONS: Dict[AssessmentType, Tuple[AssessmentSection, ...]] = {
    AssessmentType.INITIAL: INITIAL_ASSESSMENT_SECTIONS,
    AssessmentType.COMPREHENSIVE: COMPREHENSIVE_ASSESSMENT_SECTIONS,
}


def ensure_complete_mapping(enum_cls: Type[Enum], mapping: Mapping, template_kind: str) -> None:
    """
    Fail fast if any member of enum_cls has no entry in mapping.

    Raises:
        TemplateNotFoundError: For the first member without an entry
    """
    for member in enum_cls:
        if member not in mapping:
            raise TemplateNotFoundError(template_kind, member.value)


ensure_complete_mapping(NoteType, NOTE_TEMPLATES, "note template")
ensure_complete_mapping(AssessmentType, ASSESSMENT_SECTIONS, "assessment catalogue")


def get_note_template(note_type: NoteType) -> str:
    """Return the static template for note_type (TemplateNotFoundError if none)."""
    try:
        return NOTE_TEMPLATES[note_type]
    except KeyError:
        raise TemplateNotFoundError("note template", getattr(note_type, "value", note_type)) from None


def get_assessment_sections(assessment_type: AssessmentType) -> Tuple[AssessmentSection, ...]:
    """Return the section catalogue for assessment_type (TemplateNotFoundError if none)."""
    try:
        return ASSESSMENT_SECTIONS[assessment_type]
    except KeyError:
        raise TemplateNotFoundError(
            "assessment catalogue", getattr(assessment_type, "value", assessment_type)
        ) from None


# =============================================================================
# STAGE 3: PROMPT BUILDER CLASS
# =============================================================================


class PromptBuilder:
    """
    Constructs prompts for note and assessment generation.

    What it does:
        Combines the formatter's blocks with a fixed preamble and the static
        template for the requested type into a single request string.

    Why it exists:
        1. Keeps prompt wording in one place
        2. Prompts can be inspected in tests without making LLM calls
        3. Template lookup is exact-match and fails loudly

    Example:
        >>> builder = PromptBuilder()
        >>> prompt = builder.build_note_prompt(
        ...     NoteType.INDIVIDUAL, clients, programs, partners,
        ...     documents=[], intervention="Relapse prevention", selections=Selections(),
        ... )
    """

    def build_note_prompt(
        self,
        note_type: NoteType,
        clients: Sequence[Client],
        programs: Sequence[Program],
        partners: Sequence[Partner],
        documents: Sequence[Document],
        intervention: str,
        selections: Selections,
    ) -> str:
        """
        Build one prompt covering every client.

        STAGE 3.1: Preamble and document context
        STAGE 3.2: Note type and session information
        STAGE 3.3: One profile block per client, in input order
        STAGE 3.4: Note template and closing instruction

        Raises:
            TemplateNotFoundError: If note_type has no template
        """
        template = get_note_template(note_type)

        # STAGE 3.1
        parts = [NOTE_PREAMBLE]
        document_block = format_documents(documents)
        if document_block:
            parts.append(document_block)

        # STAGE 3.2
        parts.append(f"**Note Type to Generate:** {note_type.value}")
        parts.append(
            "**Session Information:**\n"
            f"- **Core Session Intervention/Topic:** {intervention.strip()}\n"
            "- **Clinician's Observations (Checkboxes and Narratives):**\n"
            f"{format_selections(selections)}".rstrip()
        )

        # STAGE 3.3
        parts.extend(format_client_profile(client, programs, partners) for client in clients)

        # STAGE 3.4
        parts.append(f"**Note Template to Follow:**\n{template.strip()}")
        parts.append(NOTE_CLOSING)

        return "\n\n".join(parts) + "\n"

    def build_assessment_prompt(
        self,
        client_info: AssessmentClientInfo,
        assessment_type: AssessmentType,
        assessment_data: AssessmentData,
    ) -> str:
        """
        Build the assessment prompt.

        Identity fields are always present; blank values read "Not Provided".

        Raises:
            TemplateNotFoundError: If assessment_type has no section catalogue
        """
        sections = get_assessment_sections(assessment_type)

        def _or_default(value: str) -> str:
            return value.strip() if value and value.strip() else NOT_PROVIDED

        client_details = "\n".join(
            [
                f"- **Client Name:** {_or_default(client_info.name)}",
                f"- **Date of Birth:** {_or_default(client_info.date_of_birth)}",
                f"- **Date of Assessment:** {_or_default(client_info.date_of_assessment)}",
                f"- **Clinician Name:** {_or_default(client_info.clinician_name)}",
            ]
        )

        parts = [
            ASSESSMENT_PREAMBLE,
            f"**Client & Assessment Information:**\n{client_details}",
            f"**Assessment Type to Generate:** {assessment_type.value}",
            "**Clinician's Notes / Data Points:**\n"
            f"{format_assessment_data(sections, assessment_data)}".rstrip(),
            ASSESSMENT_INSTRUCTIONS.format(assessment_type=assessment_type.value),
        ]
        return "\n\n".join(parts) + "\n"

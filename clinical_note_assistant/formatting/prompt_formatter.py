"""
Prompt Formatter - Record to Prompt Block Projections

Pure functions that turn in-memory clinical records into the Markdown-like
blocks embedded in generation prompts. Nothing here touches the network or
mutates its inputs; identical inputs always yield identical text.

Pipeline Position:
    Records → [PromptFormatter] → PromptBuilder → GenerationClient
              ^^^^^^^^^^^^^^^^^
              You are here

Functions:
    format_client_profile   → Profile block for one client
    format_selections       → Clinician observations block
    format_documents        → Background knowledge block
    format_assessment_data  → Assessment notes grouped by section
"""

from typing import Iterable, List, Optional, Sequence

from clinical_note_assistant.core.constants import OBSERVATION_GROUPS, PROFILE_FLAG_LABELS
from clinical_note_assistant.core.models import (
    AssessmentData,
    AssessmentSection,
    Client,
    ClientProfile,
    Document,
    Partner,
    Program,
    Selections,
)


# =============================================================================
# STAGE 1: HELPERS
# =============================================================================


def _has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _bullet(label: str, value: str) -> str:
    return f"- **{label}:** {value}"


def _text_line(label: str, value: Optional[str]) -> Optional[str]:
    return _bullet(label, value) if _has_text(value) else None


def _list_line(label: str, values: Sequence[str]) -> Optional[str]:
    joined = ", ".join(item for item in values if _has_text(item))
    return _bullet(label, joined) if joined else None


def _resolve_program(client: Client, programs: Iterable[Program]) -> Optional[Program]:
    if not client.program_id:
        return None
    return next((program for program in programs if program.id == client.program_id), None)


def _resolve_partner(program: Optional[Program], partners: Iterable[Partner]) -> Optional[Partner]:
    if program is None:
        return None
    return next((partner for partner in partners if partner.id == program.partner_id), None)


# =============================================================================
# STAGE 2: CLIENT PROFILE
# =============================================================================


def _profile_sections(
    profile: ClientProfile, program: Optional[Program], partner: Optional[Partner]
) -> List[tuple]:
    flags = [label for field_name, label in PROFILE_FLAG_LABELS if getattr(profile, field_name)]
    readiness = (
        _bullet("Readiness Ruler", f"{profile.readiness_ruler}/10")
        if profile.readiness_ruler is not None
        else None
    )

    return [
        (
            "Core Information",
            [
                _bullet("Partner", partner.name) if partner else None,
                _bullet("Program", program.name) if program else None,
                _text_line("Intake Date", profile.intake_date),
                _text_line("Presenting Problem", profile.presenting_problem),
            ],
        ),
        (
            "Clinical Framework",
            [
                _text_line("Stage of Change", profile.stage_of_change),
                _text_line("Primary Motivators", profile.primary_motivators),
                readiness,
                _text_line("MBTI Type", profile.mbti),
            ],
        ),
        (
            "Strengths & Supports",
            [
                _list_line("Strengths", profile.strengths),
                _list_line("Skills/Hobbies", profile.skills_and_hobbies),
                _list_line("Support System", profile.support_system),
            ],
        ),
        (
            "Barriers & Needs",
            [
                _list_line("Barriers", profile.barriers),
                _list_line("Case Management Needs", profile.case_management_needs),
            ],
        ),
        (
            "History",
            [
                _bullet("Flags", ", ".join(flags)) if flags else None,
                _text_line("Notes on History", profile.notes_on_history),
            ],
        ),
    ]


def format_client_profile(
    client: Client, programs: Sequence[Program], partners: Sequence[Partner]
) -> str:
    """
    Render one client's profile as a prompt block.

    A client with no profile yields a single line stating that profile data is
    not available. Otherwise the block is a heading followed by the non-empty
    sections; a Program or Partner that cannot be resolved only drops its own
    line.

    Args:
        client: Roster entry to render
        programs: Known programs (for resolving client.program_id)
        partners: Known partners (for resolving program.partner_id)

    Returns:
        Prompt block, without a trailing newline
    """
    if client.profile is None:
        return f"### Client: {client.name} (ID: {client.id}) - Profile data is not available."

    program = _resolve_program(client, programs)
    partner = _resolve_partner(program, partners)

    lines = [f"### Client Information for: {client.name} (ID: {client.id})"]
    for title, candidates in _profile_sections(client.profile, program, partner):
        present = [line for line in candidates if line]
        if present:
            lines.append(f"#### {title}")
            lines.extend(present)

    return "\n".join(lines)


# =============================================================================
# STAGE 3: SELECTIONS
# =============================================================================


def _ordered_options(group: str, checked: Iterable[str]) -> List[str]:
    declared = OBSERVATION_GROUPS[group]
    checked = set(checked)
    known = [option for option in declared if option in checked]
    extra = sorted(option for option in checked if option not in declared)
    return known + extra


def format_selections(selections: Selections) -> str:
    """
    Render clinician observations, one bullet per group that has content.

    Groups follow the OBSERVATION_GROUPS order. Options follow the group's
    declared order; labels outside the catalogue come last, alphabetically.
    Returns "" when nothing is checked and no narrative has text.
    """
    lines = []
    for group in OBSERVATION_GROUPS:
        options = _ordered_options(group, selections.checkboxes.get(group, ()))
        narrative = selections.narratives.get(group)
        if not options and not _has_text(narrative):
            continue

        lines.append(_bullet(group, ", ".join(options)).rstrip())
        if _has_text(narrative):
            lines.append(f"  - **Narrative:** {narrative.strip()}")

    return "\n".join(lines)


# =============================================================================
# STAGE 4: DOCUMENTS
# =============================================================================

DOCUMENTS_INTRO = (
    "You have access to the following documents to improve the quality and accuracy "
    "of your output. Refer to this information when relevant, especially for following "
    "guidelines from Wiley Treatment Planners or other specific frameworks mentioned."
)


def format_documents(documents: Sequence[Document]) -> str:
    """Render background documents in input order, or "" when there are none."""
    if not documents:
        return ""

    bodies = "\n\n".join(f"--- Document: {doc.title} ---\n{doc.content}" for doc in documents)
    return (
        "**Background Knowledge Documents:**\n"
        f"{DOCUMENTS_INTRO}\n\n"
        f"{bodies}\n\n"
        "--- End of Documents ---"
    )


# =============================================================================
# STAGE 5: ASSESSMENT DATA
# =============================================================================


def format_assessment_data(
    sections: Sequence[AssessmentSection], data: AssessmentData
) -> str:
    """
    Render assessment notes grouped by the given section catalogue.

    Only sections with at least one non-blank field produce output; fields are
    emitted in declared order with their values stripped. Data keys that are
    not in the catalogue are ignored.
    """
    blocks = []
    for section in sections:
        section_data = data.get(section.id) or {}
        entries = [
            f"- **{field.label}**\n  - {section_data[field.id].strip()}"
            for field in section.fields
            if _has_text(section_data.get(field.id))
        ]
        if entries:
            blocks.append(f"## {section.title}\n" + "\n".join(entries))

    return "\n\n".join(blocks)

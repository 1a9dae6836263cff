"""
Enumerations for the Clinical Note Assistant

This module defines the closed enumeration types that select which static
template and which response contract apply to a generation request.

Enumeration Categories:
    NoteType          → Kinds of progress notes (one template each)
    AssessmentType    → Kinds of clinical assessments (one section catalogue each)
    GenerationStatus  → Lifecycle of a single generation call

Enum values are the human-readable labels sent to the model, so changing a
value changes the prompt text.
"""

from enum import Enum


# =============================================================================
# STAGE 1: NOTE TYPE ENUMERATION
# =============================================================================
# Each note type maps to exactly one static template in the prompt builder.


class NoteType(str, Enum):
    """
    Types of progress notes the assistant can generate.

    What it does:
        Selects the static note template and controls how many clients may be
        documented in one request (only GROUP accepts several).

    When to use:
        - When the clinician picks which note to write
        - When looking up NOTE_TEMPLATES in the prompt builder
    """

    # -------------------------------------------------------------------------
    # 1.1 Counseling Notes
    # -------------------------------------------------------------------------
    INDIVIDUAL = "Individual Counseling"
    """One-to-one counseling session. Structure: DAP format."""

    GROUP = "Group Counseling"
    """Group session; one note is produced for every participating client."""

    # -------------------------------------------------------------------------
    # 1.2 Service Notes
    # -------------------------------------------------------------------------
    CASE_MANAGEMENT = "Case Management"
    """Linkage, referral and coordination contact."""

    CRISIS_INTERVENTION = "Crisis Intervention"
    """Crisis contact with risk assessment and safety planning."""

    @property
    def allows_multiple_clients(self) -> bool:
        """Only group notes document more than one client per request."""
        return self is NoteType.GROUP

    @classmethod
    def get_all_types(cls) -> list:
        """Return all note type values as a list."""
        return [note_type.value for note_type in cls]

    @classmethod
    def from_string(cls, value: str) -> "NoteType":
        """
        Convert a string to NoteType, matching either the member name or the label.

        Args:
            value: "GROUP", "group", "Group Counseling", ...

        Returns:
            Matching NoteType member

        Raises:
            ValueError: If the string doesn't match any note type
        """
        normalized = value.strip().upper().replace(" ", "_").replace("-", "_")
        for note_type in cls:
            if note_type.name == normalized or note_type.value.upper() == value.strip().upper():
                return note_type
        raise ValueError(f"Unknown note type: '{value}'. Valid types: {cls.get_all_types()}")


# =============================================================================
# STAGE 2: ASSESSMENT TYPE ENUMERATION
# =============================================================================


class AssessmentType(str, Enum):
    """
    Types of clinical assessments.

    Each value owns a section catalogue (see core.reference_data) that decides
    which clinician notes are collected and in what order they are rendered.
    """

    INITIAL = "Initial Assessment"
    """Brief intake assessment: presenting problem, risk, use history, plan."""

    COMPREHENSIVE = "Comprehensive Assessment"
    """Full biopsychosocial assessment including diagnostic impressions."""

    @classmethod
    def get_all_types(cls) -> list:
        """Return all assessment type values as a list."""
        return [assessment_type.value for assessment_type in cls]

    @classmethod
    def from_string(cls, value: str) -> "AssessmentType":
        """Convert a string (member name or label) to AssessmentType."""
        normalized = value.strip().upper().replace(" ", "_").replace("-", "_")
        for assessment_type in cls:
            if (
                assessment_type.name == normalized
                or assessment_type.value.upper() == value.strip().upper()
            ):
                return assessment_type
        raise ValueError(
            f"Unknown assessment type: '{value}'. Valid types: {cls.get_all_types()}"
        )


# =============================================================================
# STAGE 3: GENERATION STATUS ENUMERATION
# =============================================================================
# Idle -> Sending -> {Succeeded | Failed}. A new call may start from any state.


class GenerationStatus(str, Enum):
    """Lifecycle of one generation call as seen by the session controller."""

    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

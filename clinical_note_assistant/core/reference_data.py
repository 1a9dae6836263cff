"""
Static Reference Data

Reference records built from the domain models: the assessment form
catalogues, the response contracts declared to the model, and the seed roster
loaded at startup.

Catalogues:
    INITIAL_ASSESSMENT_SECTIONS        → Sections for AssessmentType.INITIAL
    COMPREHENSIVE_ASSESSMENT_SECTIONS  → Sections for AssessmentType.COMPREHENSIVE
    NOTES_RESPONSE_CONTRACT            → JSON array of {clientId, clientName, note}
    TEXT_RESPONSE_CONTRACT             → Plain text
    SEED_PARTNERS / SEED_PROGRAMS / SEED_CLIENTS
"""

from typing import Tuple

from clinical_note_assistant.core.constants import PROGRAM_NAMES
from clinical_note_assistant.core.models import (
    AssessmentField,
    AssessmentSection,
    Client,
    ClientProfile,
    Partner,
    Program,
    ResponseContract,
)


def _section(section_id: str, title: str, *fields: Tuple[str, str]) -> AssessmentSection:
    return AssessmentSection(
        id=section_id,
        title=title,
        fields=tuple(AssessmentField(id=field_id, label=label) for field_id, label in fields),
    )


# =============================================================================
# STAGE 1: ASSESSMENT CATALOGUES
# =============================================================================

_PRESENTING_PROBLEM = _section(
    "presenting_problem",
    "Presenting Problem",
    ("reason_for_referral", "Reason for Referral"),
    ("current_symptoms", "Current Symptoms"),
    ("onset_and_duration", "Onset and Duration"),
)

_RISK_ASSESSMENT = _section(
    "risk_assessment",
    "Risk Assessment",
    ("suicidal_ideation", "Suicidal Ideation"),
    ("homicidal_ideation", "Homicidal Ideation"),
    ("self_harm_history", "Self-Harm History"),
    ("protective_factors", "Protective Factors"),
)

_SUBSTANCE_USE = _section(
    "substance_use",
    "Substance Use History",
    ("substances_used", "Substances Used"),
    ("last_use", "Date of Last Use"),
    ("treatment_history", "Prior Treatment"),
)

_MENTAL_STATUS = _section(
    "mental_status",
    "Mental Status Exam",
    ("appearance_behavior", "Appearance and Behavior"),
    ("mood_affect", "Mood and Affect"),
    ("thought_process", "Thought Process and Content"),
    ("cognition_insight", "Cognition, Insight and Judgment"),
)

_RECOMMENDATIONS = _section(
    "recommendations",
    "Recommendations",
    ("level_of_care", "Recommended Level of Care"),
    ("referrals", "Referrals"),
    ("next_steps", "Next Steps"),
)

INITIAL_ASSESSMENT_SECTIONS: Tuple[AssessmentSection, ...] = (
    _PRESENTING_PROBLEM,
    _RISK_ASSESSMENT,
    _SUBSTANCE_USE,
    _MENTAL_STATUS,
    _RECOMMENDATIONS,
)

COMPREHENSIVE_ASSESSMENT_SECTIONS: Tuple[AssessmentSection, ...] = (
    _PRESENTING_PROBLEM,
    _RISK_ASSESSMENT,
    _SUBSTANCE_USE,
    _section(
        "psychosocial_history",
        "Psychosocial History",
        ("family_history", "Family History"),
        ("education_employment", "Education and Employment"),
        ("housing", "Housing"),
        ("legal_history", "Legal History"),
    ),
    _section(
        "medical_history",
        "Medical History",
        ("medical_conditions", "Medical Conditions"),
        ("medications", "Current Medications"),
    ),
    _MENTAL_STATUS,
    _section(
        "strengths_and_needs",
        "Strengths and Needs",
        ("strengths", "Client Strengths"),
        ("barriers", "Barriers to Treatment"),
    ),
    _section(
        "diagnostic_impressions",
        "Diagnostic Impressions",
        ("diagnoses", "Diagnoses"),
        ("justification", "Clinical Justification"),
    ),
    _RECOMMENDATIONS,
)


# =============================================================================
# STAGE 2: RESPONSE CONTRACTS
# =============================================================================
# Schemas are plain JSON-Schema; provider clients translate them to their
# own dialect.

NOTES_RESPONSE_CONTRACT = ResponseContract(
    name="generated_notes",
    mime_type="application/json",
    schema={
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "clientId": {
                    "type": "string",
                    "description": "The unique ID of the client.",
                },
                "clientName": {
                    "type": "string",
                    "description": "The client's full name.",
                },
                "note": {
                    "type": "string",
                    "description": "The full, formatted clinical note for the client.",
                },
            },
            "required": ["clientId", "clientName", "note"],
        },
    },
)

TEXT_RESPONSE_CONTRACT = ResponseContract(name="assessment_text", mime_type="text/plain")


# =============================================================================
# STAGE 3: SEED ROSTER
# =============================================================================

SEED_PARTNERS: Tuple[Partner, ...] = (
    Partner(id="partner-1", name="Riverside Community Services"),
    Partner(id="partner-2", name="Northgate Recovery Center"),
)

SEED_PROGRAMS: Tuple[Program, ...] = tuple(
    Program(id=f"prog-{partner.id}-{index}", name=name, partner_id=partner.id)
    for partner in SEED_PARTNERS
    for index, name in enumerate(PROGRAM_NAMES, 1)
)


def seed_clients() -> list:
    """Return a fresh copy of the demo roster (clients are mutable)."""
    return [
        Client(
            id="client-1",
            name="Alex Rivera",
            program_id="prog-partner-1-1",
            profile=ClientProfile(
                intake_date="2024-01-15",
                presenting_problem="Alcohol use disorder, moderate; situational anxiety",
                stage_of_change="Preparation",
                primary_motivators="Regaining custody of daughter",
                readiness_ruler=7,
                mbti="ESFJ",
                strengths=["Resilient", "Good sense of humor"],
                skills_and_hobbies=["Carpentry", "Basketball"],
                support_system=["Sister", "AA sponsor"],
                barriers=["Transportation"],
                case_management_needs=["Bus pass", "Legal aid referral"],
                history_of_substance_use=True,
                notes_on_history="Two prior treatment episodes, longest sobriety 8 months.",
            ),
        ),
        Client(
            id="client-2",
            name="Morgan Chen",
            program_id="prog-partner-1-2",
            profile=ClientProfile(
                intake_date="2024-02-03",
                presenting_problem="Major depressive disorder, recurrent",
                stage_of_change="Contemplation",
                readiness_ruler=5,
                strengths=["Insightful", "Reliable attendance"],
                support_system=["Partner"],
                barriers=["Work schedule", "Low energy"],
                history_of_trauma=True,
                significant_medical_conditions=True,
            ),
        ),
        Client(id="client-3", name="Sam Patel", program_id="prog-partner-2-3"),
    ]

"""
Constants for the Clinical Note Assistant

Primitive reference values used across the package. Anything that needs the
domain model classes (assessment catalogues, seed roster, response contracts)
lives in core.reference_data instead, so this module stays import-free.

Constant Categories:
    OBSERVATION_GROUPS   → Allowed checkbox groups and their ordered options
    PROGRAM_NAMES        → The three programs every new partner receives
    PROFILE_FLAG_LABELS  → Display labels for the boolean history flags
    LOG_FORMAT           → loguru format shared by every entry point
"""

from typing import Dict, List, Tuple


# =============================================================================
# STAGE 1: OBSERVATION GROUPS
# =============================================================================
# Clinician observation checkboxes, grouped. Selections may only use these
# group names; the option order is the order used when rendering a prompt.

OBSERVATION_GROUPS: Dict[str, List[str]] = {
    "Appearance": [
        "Well-groomed",
        "Appropriately dressed",
        "Disheveled",
        "Poor hygiene",
    ],
    "Mood/Affect": [
        "Euthymic",
        "Anxious",
        "Depressed",
        "Irritable",
        "Flat affect",
        "Congruent affect",
    ],
    "Engagement": [
        "Actively participated",
        "Engaged when prompted",
        "Minimal participation",
        "Supportive of peers",
        "Disruptive",
    ],
    "Interventions Used": [
        "Motivational Interviewing",
        "CBT techniques",
        "Psychoeducation",
        "Relapse prevention planning",
        "Coping skills practice",
        "Strengths-based reflection",
    ],
    "Client Response": [
        "Receptive",
        "Verbalized understanding",
        "Demonstrated skill",
        "Ambivalent",
        "Resistant",
    ],
    "Risk Factors": [
        "No SI/HI reported",
        "Passive SI reported",
        "Recent substance use",
        "Housing instability",
    ],
    "Progress Toward Goals": [
        "Significant progress",
        "Some progress",
        "No change",
        "Regression",
    ],
}


# =============================================================================
# STAGE 2: PARTNER PROGRAMS
# =============================================================================
# Adding a partner always creates these three programs, in this order.

PROGRAM_NAMES: Tuple[str, str, str] = (
    "Intensive Outpatient (IOP)",
    "Outpatient Counseling",
    "Recovery Support Services",
)


# =============================================================================
# STAGE 3: PROFILE DISPLAY LABELS
# =============================================================================

PROFILE_FLAG_LABELS: Tuple[Tuple[str, str], ...] = (
    ("history_of_trauma", "Trauma"),
    ("history_of_substance_use", "Substance Use"),
    ("significant_medical_conditions", "Medical Conditions"),
)

NOT_PROVIDED = "Not Provided"

READINESS_RULER_RANGE = (0, 10)


# =============================================================================
# STAGE 4: LOGGING CONFIGURATION
# =============================================================================

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

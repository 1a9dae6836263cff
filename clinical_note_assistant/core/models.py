"""
Domain Models for the Clinical Note Assistant

Plain records describing clients, programs, partners, documents, session
selections and assessment inputs/outputs. Models carry no behaviour beyond
construction-time checks and dict conversion; every transformation of them is
a read-only projection elsewhere in the package.

Model Hierarchy:
    Partner / Program        → Organisational reference data
    ClientProfile / Client   → Roster entries
    Document                 → Background knowledge injected into prompts
    Selections               → Checkbox + narrative observations for a session
    GeneratedNote            → One note per client returned by the model
    AssessmentClientInfo     → Identity block of an assessment request
    AssessmentField/Section  → Static assessment form catalogue entries
    GeneratedAssessment      → Free-text assessment returned by the model
    ResponseContract         → Declared response shape for one request

Usage:
    from clinical_note_assistant.core.models import Client, ClientProfile

    client = Client(
        id="c-1",
        name="Jordan Lee",
        profile=ClientProfile(stage_of_change="Preparation", readiness_ruler=6),
        program_id="prog-1",
    )
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from clinical_note_assistant.core.constants import OBSERVATION_GROUPS, READINESS_RULER_RANGE
from clinical_note_assistant.core.exceptions import DomainModelError, SelectionError


AssessmentData = Dict[str, Dict[str, str]]
"""section id -> field id -> free text. Sparse; blank values are ignored."""


# =============================================================================
# STAGE 1: ORGANISATION MODELS
# =============================================================================


def _require_id(kind: str, data: Mapping[str, Any]) -> str:
    """Return the record id as a string; reference records cannot be anonymous."""
    if data.get("id") in (None, ""):
        raise DomainModelError(f"{kind} entry is missing 'id'", context={"entry": dict(data)})
    return str(data["id"])


@dataclass(frozen=True)
class Partner:
    """An organisational entity that owns a fixed set of Programs."""

    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Partner":
        return cls(id=_require_id("Partner", data), name=data.get("name", ""))


@dataclass(frozen=True)
class Program:
    """A service track under a Partner. Clients are enrolled in one Program."""

    id: str
    name: str
    partner_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "partner_id": self.partner_id}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Program":
        return cls(
            id=_require_id("Program", data),
            name=data.get("name", ""),
            partner_id=str(data.get("partner_id", data.get("partnerId", ""))),
        )


# =============================================================================
# STAGE 2: CLIENT MODELS
# =============================================================================

# camelCase keys used by browser-side client records
_PROFILE_KEY_ALIASES: Dict[str, str] = {
    "intakeDate": "intake_date",
    "presentingProblem": "presenting_problem",
    "stageOfChange": "stage_of_change",
    "primaryMotivators": "primary_motivators",
    "readinessRuler": "readiness_ruler",
    "skillsAndHobbies": "skills_and_hobbies",
    "supportSystem": "support_system",
    "caseManagementNeeds": "case_management_needs",
    "historyOfTrauma": "history_of_trauma",
    "historyOfSubstanceUse": "history_of_substance_use",
    "significantMedicalConditions": "significant_medical_conditions",
    "notesOnHistory": "notes_on_history",
}


@dataclass
class ClientProfile:
    """
    Structured clinical profile of a client. Every field is optional.

    Attributes:
        intake_date: Free-form date string as entered by the clinician
        presenting_problem: Reason the client entered services
        stage_of_change: Transtheoretical stage (e.g. "Contemplation")
        primary_motivators: What the client says drives change
        readiness_ruler: Self-rated readiness 0-10 (None when not asked)
        mbti: Personality-type code (e.g. "INFJ")
        strengths / skills_and_hobbies / support_system: Ordered lists
        barriers / case_management_needs: Ordered lists
        history_of_trauma / history_of_substance_use /
        significant_medical_conditions: History flags
        notes_on_history: Free-text history notes

    Raises:
        DomainModelError: If readiness_ruler is outside 0-10
    """

    # -------------------------------------------------------------------------
    # 2.1 Core Information
    # -------------------------------------------------------------------------
    intake_date: Optional[str] = None
    presenting_problem: Optional[str] = None

    # -------------------------------------------------------------------------
    # 2.2 Clinical Framework
    # -------------------------------------------------------------------------
    stage_of_change: Optional[str] = None
    primary_motivators: Optional[str] = None
    readiness_ruler: Optional[int] = None
    mbti: Optional[str] = None

    # -------------------------------------------------------------------------
    # 2.3 Strengths, Supports, Barriers
    # -------------------------------------------------------------------------
    strengths: List[str] = field(default_factory=list)
    skills_and_hobbies: List[str] = field(default_factory=list)
    support_system: List[str] = field(default_factory=list)
    barriers: List[str] = field(default_factory=list)
    case_management_needs: List[str] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # 2.4 History
    # -------------------------------------------------------------------------
    history_of_trauma: bool = False
    history_of_substance_use: bool = False
    significant_medical_conditions: bool = False
    notes_on_history: Optional[str] = None

    def __post_init__(self):
        if self.readiness_ruler is not None:
            if isinstance(self.readiness_ruler, bool) or not isinstance(self.readiness_ruler, int):
                raise DomainModelError(
                    f"Readiness ruler must be an integer, got {self.readiness_ruler!r}",
                    context={"readiness_ruler": self.readiness_ruler},
                )
            low, high = READINESS_RULER_RANGE
            if not (low <= self.readiness_ruler <= high):
                raise DomainModelError(
                    f"Readiness ruler must be {low}-{high}, got {self.readiness_ruler}",
                    context={"readiness_ruler": self.readiness_ruler},
                )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intake_date": self.intake_date,
            "presenting_problem": self.presenting_problem,
            "stage_of_change": self.stage_of_change,
            "primary_motivators": self.primary_motivators,
            "readiness_ruler": self.readiness_ruler,
            "mbti": self.mbti,
            "strengths": list(self.strengths),
            "skills_and_hobbies": list(self.skills_and_hobbies),
            "support_system": list(self.support_system),
            "barriers": list(self.barriers),
            "case_management_needs": list(self.case_management_needs),
            "history_of_trauma": self.history_of_trauma,
            "history_of_substance_use": self.history_of_substance_use,
            "significant_medical_conditions": self.significant_medical_conditions,
            "notes_on_history": self.notes_on_history,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClientProfile":
        """
        Create from dictionary.

        Accepts snake_case or camelCase keys (stageOfChange, readinessRuler,
        ...); unknown keys are ignored. A numeric-string readiness value such
        as "6" is converted, a blank one means not asked.

        Raises:
            DomainModelError: If readiness_ruler is not a whole number 0-10
        """
        known = cls.__dataclass_fields__.keys()
        values = {}
        for key, value in data.items():
            name = _PROFILE_KEY_ALIASES.get(key, key)
            if name in known:
                values[name] = value

        readiness = values.get("readiness_ruler")
        if isinstance(readiness, str):
            readiness = readiness.strip()
            try:
                values["readiness_ruler"] = int(readiness) if readiness else None
            except ValueError as e:
                raise DomainModelError(
                    f"Readiness ruler must be a whole number, got {readiness!r}",
                    context={"readiness_ruler": readiness},
                ) from e

        return cls(**values)


@dataclass
class Client:
    """
    A roster entry.

    Attributes:
        id: Unique client identifier
        name: Display name used in prompts and returned notes
        profile: Structured profile, or None when nothing was captured
        program_id: Program the client is enrolled in (may not resolve)
    """

    id: str
    name: str
    profile: Optional[ClientProfile] = None
    program_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "profile": self.profile.to_dict() if self.profile else None,
            "program_id": self.program_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Client":
        profile_data = data.get("profile")
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            profile=ClientProfile.from_dict(profile_data) if profile_data else None,
            program_id=data.get("program_id", data.get("programId")),
        )


# =============================================================================
# STAGE 3: SESSION INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class Document:
    """User-supplied background knowledge, injected verbatim into note prompts."""

    id: str
    title: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "content": self.content}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Document":
        return cls(id=str(data.get("id", "")), title=data.get("title", ""), content=data.get("content", ""))


@dataclass
class Selections:
    """
    Clinician observations for one generation request.

    Attributes:
        checkboxes: group name -> set of checked option labels
        narratives: group name -> optional free-text narrative

    Raises:
        SelectionError: If any key is not one of OBSERVATION_GROUPS
    """

    checkboxes: Dict[str, Set[str]] = field(default_factory=dict)
    narratives: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for group in list(self.checkboxes) + list(self.narratives):
            if group not in OBSERVATION_GROUPS:
                raise SelectionError(group)
        self.checkboxes = {group: set(labels) for group, labels in self.checkboxes.items()}

    @property
    def is_empty(self) -> bool:
        """True when no option is checked and no narrative has text."""
        return not any(self.checkboxes.values()) and not any(
            (text or "").strip() for text in self.narratives.values()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checkboxes": {group: sorted(labels) for group, labels in self.checkboxes.items()},
            "narratives": dict(self.narratives),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Selections":
        return cls(
            checkboxes={group: set(labels) for group, labels in data.get("checkboxes", {}).items()},
            narratives=dict(data.get("narratives", {})),
        )


# =============================================================================
# STAGE 4: GENERATED NOTE
# =============================================================================


@dataclass(frozen=True)
class GeneratedNote:
    """One note for one client, as returned (and filtered) from the model."""

    client_id: str
    client_name: str
    note: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape used on the wire."""
        return {"clientId": self.client_id, "clientName": self.client_name, "note": self.note}


# =============================================================================
# STAGE 5: ASSESSMENT MODELS
# =============================================================================


@dataclass
class AssessmentClientInfo:
    """Identity block of an assessment request. Blank values render as 'Not Provided'."""

    name: str = ""
    date_of_birth: str = ""
    date_of_assessment: str = ""
    clinician_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "date_of_birth": self.date_of_birth,
            "date_of_assessment": self.date_of_assessment,
            "clinician_name": self.clinician_name,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AssessmentClientInfo":
        return cls(
            name=data.get("name", ""),
            date_of_birth=data.get("date_of_birth", data.get("dateOfBirth", "")),
            date_of_assessment=data.get("date_of_assessment", data.get("dateOfAssessment", "")),
            clinician_name=data.get("clinician_name", data.get("clinicianName", "")),
        )


@dataclass(frozen=True)
class AssessmentField:
    """One labelled free-text field of an assessment section."""

    id: str
    label: str


@dataclass(frozen=True)
class AssessmentSection:
    """A titled group of assessment fields, rendered in declared field order."""

    id: str
    title: str
    fields: Tuple[AssessmentField, ...]


@dataclass(frozen=True)
class GeneratedAssessment:
    """A complete assessment document. No structural decomposition."""

    client_name: str
    assessment_text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"client_name": self.client_name, "assessment_text": self.assessment_text}


# =============================================================================
# STAGE 6: RESPONSE CONTRACT
# =============================================================================


@dataclass(frozen=True)
class ResponseContract:
    """
    Declared response shape for one request.

    Attributes:
        name: Short identifier (used as the schema name by providers that need one)
        mime_type: "application/json" for structured replies, "text/plain" otherwise
        schema: JSON-Schema description of the structured reply (None for text)
    """

    name: str
    mime_type: str = "text/plain"
    schema: Optional[Dict[str, Any]] = None

    @property
    def is_structured(self) -> bool:
        return self.mime_type == "application/json" and self.schema is not None

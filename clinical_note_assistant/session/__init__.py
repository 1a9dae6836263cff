"""
Session Layer - Explicit Application State

Submodules:
    state.py      → AppState, AssessmentState
    controller.py → SessionController, AssessmentController
"""

from clinical_note_assistant.session.state import AppState, AssessmentState
from clinical_note_assistant.session.controller import AssessmentController, SessionController

__all__ = [
    "AppState",
    "AssessmentState",
    "AssessmentController",
    "SessionController",
]

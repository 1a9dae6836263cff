"""
Validation Layer - Response Contract Checks

Submodules:
    response_validator.py → Strict parsing and requested-client filtering
"""

from clinical_note_assistant.validation.response_validator import (
    FilteredNotes,
    NotePayload,
    filter_to_requested_clients,
    parse_generated_notes,
)

__all__ = [
    "FilteredNotes",
    "NotePayload",
    "filter_to_requested_clients",
    "parse_generated_notes",
]
